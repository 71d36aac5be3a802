"""
SQLAlchemy ORM models package.

Re-exports all models for convenient imports.
"""

from app.db.models.user import UserModel
from app.db.models.post import (
    PostModel,
    BookmarkModel,
)

__all__ = [
    # User
    "UserModel",
    # Post
    "PostModel",
    "BookmarkModel",
]
