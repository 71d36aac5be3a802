"""
Post and bookmark models.
"""

from datetime import datetime, timezone
from typing import TYPE_CHECKING, Optional
from uuid import uuid4

from sqlalchemy import DateTime, ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.database import Base

if TYPE_CHECKING:
    from app.db.models.user import UserModel


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class PostModel(Base):
    """Content item. Immutable after creation."""

    __tablename__ = "posts"

    id: Mapped[str] = mapped_column(
        String,
        primary_key=True,
        default=lambda: str(uuid4()),
    )
    user_id: Mapped[str] = mapped_column(
        String,
        ForeignKey("users.id"),
        nullable=False,
        index=True,
    )
    text: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        default="",
    )
    image: Mapped[Optional[str]] = mapped_column(
        String,
        nullable=True,
    )
    video: Mapped[Optional[str]] = mapped_column(
        String,
        nullable=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
    )

    # Relationships
    user: Mapped["UserModel"] = relationship(
        "UserModel",
        back_populates="posts",
        lazy="noload",
    )

    __table_args__ = (
        Index("ix_posts_created_at_id", "created_at", "id"),
    )


class BookmarkModel(Base):
    """
    A user's saved state on a post.

    The row is created on the first toggle and never deleted afterwards:
    a non-null bookmarked_at means bookmarked, null means not bookmarked.
    """

    __tablename__ = "bookmarks"

    user_id: Mapped[str] = mapped_column(
        String,
        ForeignKey("users.id"),
        primary_key=True,
    )
    post_id: Mapped[str] = mapped_column(
        String,
        ForeignKey("posts.id"),
        primary_key=True,
        index=True,
    )
    bookmarked_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    def __repr__(self) -> str:
        return (
            f"<BookmarkModel(user_id={self.user_id!r}, post_id={self.post_id!r}, "
            f"bookmarked_at={self.bookmarked_at!r})>"
        )
