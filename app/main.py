"""
FastAPI application entry point.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from app.config import settings
from app.api.routes import router as api_router
from app.core.dashx import close_dashx_client
from app.core.exceptions import PostboardError, StoreError

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    # Startup
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    logger.info(f"Starting {settings.app_name} v{settings.app_version}")
    logger.info(f"Environment: {settings.environment}")

    yield

    # Shutdown
    await close_dashx_client()
    logger.info("Shutting down...")


async def postboard_error_handler(request: Request, exc: PostboardError) -> JSONResponse:
    """Convert application errors to the {message} envelope."""
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc}")
    else:
        logger.debug(f"{request.method} {request.url.path} rejected: {exc}")
    return JSONResponse(status_code=exc.status_code, content={"message": exc.user_message})


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report request validation failures as a single message."""
    errors = exc.errors()
    if any(error.get("type") == "missing" for error in errors):
        message = "All fields are required."
    elif errors:
        message = errors[0].get("msg", "Invalid request.")
    else:
        message = "Invalid request."
    return JSONResponse(status_code=422, content={"message": message})


async def store_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    """Unexpected persistence failures become a generic 500."""
    logger.exception(f"{request.method} {request.url.path} store failure")
    error = StoreError(str(exc))
    return JSONResponse(status_code=error.status_code, content={"message": error.user_message})


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Accounts, posts and bookmarks behind bearer-token authentication.",
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(PostboardError, postboard_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(SQLAlchemyError, store_error_handler)

    # Include API routes
    app.include_router(api_router)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
