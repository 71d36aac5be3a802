"""
Pydantic schemas for API responses.
"""

from datetime import datetime
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field, model_validator


class MessageResponse(BaseModel):
    """Plain message envelope, also used for errors."""

    message: str


# ============ User Schemas ============

class UserProfile(BaseModel):
    """User profile as returned to clients. Never includes the password hash."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    first_name: str
    last_name: str
    email: str
    avatar: Optional[str] = None


class ProfileUpdate(BaseModel):
    """
    Partial profile update.

    Only fields present in the request body are written. Presence is read
    from model_fields_set, so an omitted field and an explicit null differ:
    avatar may be cleared with null, the other fields may not be null.
    """

    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    avatar: Optional[str] = None

    @model_validator(mode="after")
    def reject_null_required_fields(self) -> "ProfileUpdate":
        for name in ("first_name", "last_name", "email"):
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{name} cannot be null")
        return self

    def changes(self) -> dict[str, Optional[str]]:
        """Fields present in the request, with their new values."""
        return self.model_dump(exclude_unset=True)


class ProfileResponse(BaseModel):
    """Profile fetch/update response."""

    message: str
    user: UserProfile


class LoginResponse(BaseModel):
    """Successful login response."""

    message: str
    token: str = Field(..., description="Bearer session token")


# ============ Post Schemas ============

class PostAuthor(BaseModel):
    """Owner of a post as embedded in feed items."""

    id: str
    first_name: str
    last_name: str
    email: str


class PostResponse(BaseModel):
    """A post as stored."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    text: str
    image: Optional[str] = None
    video: Optional[str] = None
    created_at: datetime


class FeedItem(PostResponse):
    """A post enriched with its author and the viewer's bookmark state."""

    bookmarked_at: Optional[datetime] = None
    user: PostAuthor


class FeedResponse(BaseModel):
    """Paginated feed."""

    posts: List[FeedItem]


class CreatePostResponse(BaseModel):
    """Post creation response."""

    message: str
    post: PostResponse


class BookmarkState(BaseModel):
    """Result of a bookmark toggle."""

    user_id: str
    post_id: str
    bookmarked_at: Optional[datetime] = None

    @computed_field
    @property
    def bookmarked(self) -> bool:
        return self.bookmarked_at is not None


# ============ Catalog Schemas ============

class ProductListResponse(BaseModel):
    """Catalog list response. Items are passed through from DashX."""

    message: str
    products: List[dict[str, Any]]


class ProductResponse(BaseModel):
    """Single catalog item response."""

    message: str
    product: dict[str, Any]
