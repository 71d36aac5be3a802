"""
User model for authentication and post ownership.
"""

from typing import TYPE_CHECKING, Optional
from uuid import uuid4

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.database import Base

if TYPE_CHECKING:
    from app.db.models.post import PostModel


class UserModel(Base):
    """User account. Exactly one per email."""

    __tablename__ = "users"

    id: Mapped[str] = mapped_column(
        String,
        primary_key=True,
        default=lambda: str(uuid4()),
    )
    first_name: Mapped[str] = mapped_column(
        String,
        nullable=False,
    )
    last_name: Mapped[str] = mapped_column(
        String,
        nullable=False,
    )
    email: Mapped[str] = mapped_column(
        String,
        unique=True,
        nullable=False,
        index=True,
    )
    password_hash: Mapped[str] = mapped_column(
        "encrypted_password",
        String,
        nullable=False,
    )
    avatar: Mapped[Optional[str]] = mapped_column(
        String,
        nullable=True,
    )

    # Relationships
    posts: Mapped[list["PostModel"]] = relationship(
        "PostModel",
        back_populates="user",
        lazy="noload",
    )

    def __repr__(self) -> str:
        return f"<UserModel(id={self.id!r}, email={self.email!r})>"
