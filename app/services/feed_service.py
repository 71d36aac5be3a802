"""
Paginated post feeds.
"""

from typing import List, Optional

from pydantic import BaseModel
from sqlalchemy import and_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import get_settings
from app.core.exceptions import ValidationError
from app.db.models import BookmarkModel, PostModel, UserModel
from app.models.schemas import FeedItem, PostAuthor


class PageParams(BaseModel):
    """Normalized limit/offset pair."""

    limit: int
    offset: int = 0

    @classmethod
    def normalize(cls, limit: Optional[int] = None, offset: Optional[int] = None) -> "PageParams":
        """
        Apply defaults and the upper bound on limit.

        Raises:
            ValidationError: If limit < 1 or offset < 0
        """
        settings = get_settings()
        if limit is None:
            limit = settings.feed_default_limit
        if offset is None:
            offset = 0
        if limit < 1 or offset < 0:
            raise ValidationError(
                f"Bad pagination limit={limit} offset={offset}",
                user_message="Limit must be positive and offset non-negative.",
            )
        return cls(limit=min(limit, settings.feed_max_limit), offset=offset)


class FeedService:
    """
    Read side of posts.

    Ordering is created_at descending with id descending as tie-break, so
    pages stay stable when posts share a timestamp.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def page(
        self,
        viewer_id: str,
        params: PageParams,
        bookmarked_only: bool = False,
    ) -> List[FeedItem]:
        """
        Fetch one page of posts as seen by viewer_id.

        Args:
            viewer_id: User whose bookmark state is attached to each post
            params: Pagination window
            bookmarked_only: Restrict to posts the viewer has bookmarked

        Returns:
            Feed items with author and bookmarked_at
        """
        bookmark_on = and_(
            BookmarkModel.post_id == PostModel.id,
            BookmarkModel.user_id == viewer_id,
        )

        query = select(
            PostModel,
            UserModel.first_name,
            UserModel.last_name,
            UserModel.email,
            BookmarkModel.bookmarked_at,
        ).join(UserModel, PostModel.user_id == UserModel.id)

        if bookmarked_only:
            query = query.join(BookmarkModel, bookmark_on).where(
                BookmarkModel.bookmarked_at.is_not(None)
            )
        else:
            query = query.outerjoin(BookmarkModel, bookmark_on)

        query = (
            query.order_by(PostModel.created_at.desc(), PostModel.id.desc())
            .limit(params.limit)
            .offset(params.offset)
        )

        result = await self.session.execute(query)

        return [
            FeedItem(
                id=post.id,
                user_id=post.user_id,
                text=post.text,
                image=post.image,
                video=post.video,
                created_at=post.created_at,
                bookmarked_at=bookmarked_at,
                user=PostAuthor(
                    id=post.user_id,
                    first_name=first_name,
                    last_name=last_name,
                    email=email,
                ),
            )
            for post, first_name, last_name, email, bookmarked_at in result.all()
        ]
