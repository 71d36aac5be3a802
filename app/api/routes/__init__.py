"""
API router aggregating all route modules.
"""

from fastapi import APIRouter

from app.api.routes import health, auth, profile, posts, products, contact

router = APIRouter()

# Include all route modules
router.include_router(health.router, prefix="/health", tags=["Health"])
router.include_router(auth.router, tags=["Authentication"])
router.include_router(profile.router, tags=["Profile"])
router.include_router(posts.router, prefix="/posts", tags=["Posts"])
router.include_router(products.router, prefix="/products", tags=["Products"])
router.include_router(contact.router, tags=["Contact"])
