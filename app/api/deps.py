"""
API route dependencies.
"""

import logging
from typing import Annotated, Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.auth import session_user_id, verify_token
from app.core.dashx import DashXClient, get_dashx_client
from app.core.exceptions import AuthError
from app.db.database import get_db_session
from app.db.models import UserModel
from app.services.auth_service import AuthService

logger = logging.getLogger(__name__)


# HTTP Bearer scheme for JWT; missing headers are rejected by get_current_user
security = HTTPBearer(auto_error=False)

INVALID_TOKEN = "Invalid token."


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    session: AsyncSession = Depends(get_db_session),
) -> UserModel:
    """
    Dependency to get current authenticated user.

    Every failure (no header, bad signature, expired token, user gone)
    answers with the same 403 so callers cannot probe for accounts.
    """
    token = credentials.credentials if credentials else ""

    verification = verify_token(token)
    if not verification.ok:
        logger.info(f"Rejected bearer token: {verification.error.value}")
        raise AuthError(f"Token verification failed: {verification.error.value}", INVALID_TOKEN)

    user_id = session_user_id(verification.claims)
    if user_id is None:
        logger.info("Rejected bearer token: no user claim")
        raise AuthError("Token carries no user claim", INVALID_TOKEN)

    auth_service = AuthService(session)
    user = await auth_service.get_user_by_id(user_id)

    if not user:
        logger.info(f"Rejected bearer token: user {user_id} no longer exists")
        raise AuthError(f"Token user {user_id} not found", INVALID_TOKEN)

    return user


# Dependency annotations
SessionDep = Annotated[AsyncSession, Depends(get_db_session)]
CurrentUserDep = Annotated[UserModel, Depends(get_current_user)]
DashXDep = Annotated[DashXClient, Depends(get_dashx_client)]
