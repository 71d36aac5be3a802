"""
Bookmark toggling.

A bookmark row is never deleted. Toggling flips bookmarked_at between a
timestamp and null inside a single INSERT ... ON CONFLICT DO UPDATE, so the
store evaluates the flip atomically and concurrent toggles on the same
(user, post) pair cannot interleave a read and a write.
"""

import logging
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import DateTime, case, literal, null, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.dashx import DashXClient
from app.core.exceptions import NotFoundError
from app.db.database import dialect_insert
from app.db.models import BookmarkModel, PostModel
from app.models.schemas import BookmarkState

logger = logging.getLogger(__name__)


class BookmarkService:
    """Service for per-user bookmark state on posts."""

    def __init__(self, session: AsyncSession, dashx: Optional[DashXClient] = None):
        self.session = session
        self.dashx = dashx

    async def toggle(self, user_id: str, post_id: str) -> BookmarkState:
        """
        Flip the user's bookmark on a post.

        Args:
            user_id: Acting user
            post_id: Post to bookmark or unbookmark

        Returns:
            BookmarkState after the toggle

        Raises:
            NotFoundError: If the post does not exist
        """
        exists = await self.session.execute(
            select(PostModel.id).where(PostModel.id == post_id)
        )
        if exists.scalar_one_or_none() is None:
            raise NotFoundError(
                f"Bookmark toggle on unknown post {post_id}",
                user_message="Post not found.",
            )

        now = datetime.now(timezone.utc)
        stamp = literal(now, DateTime(timezone=True))

        stmt = dialect_insert(self.session, BookmarkModel).values(
            user_id=user_id,
            post_id=post_id,
            bookmarked_at=now,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=[BookmarkModel.user_id, BookmarkModel.post_id],
            set_={
                "bookmarked_at": case(
                    (BookmarkModel.bookmarked_at.is_(None), stamp),
                    else_=null(),
                )
            },
        ).returning(
            BookmarkModel.user_id,
            BookmarkModel.post_id,
            BookmarkModel.bookmarked_at,
        )

        row = (await self.session.execute(stmt)).one()
        state = BookmarkState(
            user_id=row.user_id,
            post_id=row.post_id,
            bookmarked_at=row.bookmarked_at,
        )
        logger.debug(f"User {user_id} bookmark on post {post_id}: {state.bookmarked}")

        # The write is authoritative; tracking is best-effort
        if self.dashx:
            event = "Post Bookmarked" if state.bookmarked else "Post Unbookmarked"
            await self.dashx.track(event, user_id, state.model_dump())

        return state
