"""
Post creation.
"""

import logging
from datetime import datetime, timezone
from typing import Optional
from uuid import uuid4

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.dashx import DashXClient
from app.db.models import PostModel, UserModel
from app.models.schemas import PostResponse

logger = logging.getLogger(__name__)


class PostService:
    """Service for authoring posts."""

    def __init__(self, session: AsyncSession, dashx: Optional[DashXClient] = None):
        self.session = session
        self.dashx = dashx

    async def create_post(
        self,
        user: UserModel,
        text: Optional[str] = None,
        image: Optional[str] = None,
        video: Optional[str] = None,
    ) -> PostModel:
        """Create a post owned by user. Missing text is stored as empty."""
        post = PostModel(
            id=str(uuid4()),
            user_id=user.id,
            text=text or "",
            image=image,
            video=video,
            created_at=datetime.now(timezone.utc),
        )
        self.session.add(post)
        await self.session.flush()

        logger.info(f"User {user.id} created post {post.id}")

        if self.dashx:
            await self.dashx.track(
                "Post Created",
                user.id,
                PostResponse.model_validate(post).model_dump(),
            )

        return post
