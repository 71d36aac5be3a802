"""
Profile management for the authenticated user.
"""

import logging
from typing import Optional

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.dashx import DashXClient
from app.core.exceptions import ConflictError
from app.db.models import UserModel
from app.models.schemas import ProfileUpdate

logger = logging.getLogger(__name__)


class UserService:
    """Service for reading and updating user profiles."""

    def __init__(self, session: AsyncSession, dashx: Optional[DashXClient] = None):
        self.session = session
        self.dashx = dashx

    async def update_profile(self, user: UserModel, request: ProfileUpdate) -> UserModel:
        """
        Apply a partial profile update in a single UPDATE statement.

        Args:
            user: The authenticated user
            request: Fields to change; absent fields are left untouched

        Returns:
            The updated user

        Raises:
            ConflictError: If the new email belongs to another user
        """
        changes = request.changes()
        if not changes:
            return user

        new_email = changes.get("email")
        if new_email is not None and new_email != user.email:
            taken = await self.session.execute(
                select(UserModel.id).where(UserModel.email == new_email)
            )
            if taken.scalar_one_or_none() is not None:
                raise ConflictError(
                    f"Email change rejected for user {user.id}",
                    user_message="Email already exists.",
                )

        stmt = (
            update(UserModel)
            .where(UserModel.id == user.id)
            .values({getattr(UserModel, field): value for field, value in changes.items()})
            .returning(UserModel)
            .execution_options(populate_existing=True)
        )
        try:
            result = await self.session.execute(stmt)
        except IntegrityError as e:
            # Another request claimed the email between the check and the write
            raise ConflictError(
                f"Email change lost a race for user {user.id}",
                user_message="Email already exists.",
            ) from e

        updated = result.scalar_one()
        logger.info(f"Updated profile fields {sorted(changes)} for user {updated.id}")

        if self.dashx:
            await self.dashx.identify(
                updated.id,
                {
                    "firstName": updated.first_name,
                    "lastName": updated.last_name,
                    "email": updated.email,
                },
            )

        return updated
