"""
Authentication service for registration, login and password reset.
"""

import logging
from typing import Optional

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.auth import (
    TokenError,
    create_reset_token,
    create_session_token,
    hash_password,
    password_needs_rehash,
    reset_email,
    verify_password,
    verify_token,
)
from app.core.dashx import DashXClient
from app.core.exceptions import AuthError, ConflictError, NotFoundError, ValidationError
from app.db.database import dialect_insert
from app.db.models import UserModel

logger = logging.getLogger(__name__)


class AuthService:
    """Service for authentication and account credentials."""

    def __init__(self, session: AsyncSession, dashx: Optional[DashXClient] = None):
        self.session = session
        self.dashx = dashx

    async def register(
        self,
        first_name: str,
        last_name: str,
        email: str,
        password: str,
    ) -> UserModel:
        """
        Register a new user.

        The insert is a single statement; a duplicate email yields no
        returned row instead of a constraint error.

        Args:
            first_name: User's first name
            last_name: User's last name
            email: User's email address
            password: Plain text password

        Returns:
            Created UserModel

        Raises:
            ConflictError: If email already exists
        """
        stmt = (
            dialect_insert(self.session, UserModel)
            .values(
                {
                    UserModel.first_name: first_name,
                    UserModel.last_name: last_name,
                    UserModel.email: email,
                    UserModel.password_hash: hash_password(password),
                }
            )
            .on_conflict_do_nothing(index_elements=[UserModel.email])
            .returning(UserModel)
        )
        result = await self.session.execute(stmt)
        user = result.scalar_one_or_none()

        if user is None:
            raise ConflictError(
                f"Registration rejected, email taken: {email}",
                user_message="User already exists.",
            )

        logger.info(f"Registered user {user.id}")

        if self.dashx:
            attrs = {
                "firstName": user.first_name,
                "lastName": user.last_name,
                "email": user.email,
            }
            await self.dashx.identify(user.id, attrs)
            await self.dashx.track("User Registered", user.id, attrs)

        return user

    async def login(self, email: str, password: str) -> str:
        """
        Authenticate user and return a session token.

        Args:
            email: User's email
            password: Plain text password

        Returns:
            Encoded session token

        Raises:
            AuthError: If the email is unknown or the password is wrong
        """
        user = await self.get_user_by_email(email)

        if not user or not verify_password(password, user.password_hash):
            raise AuthError(
                "Login failed",
                user_message="Incorrect email or password.",
                status_code=401,
            )

        if password_needs_rehash(user.password_hash):
            user.password_hash = hash_password(password)
            await self.session.flush()
            logger.info(f"Upgraded password hash for user {user.id}")

        external_token = self.dashx.generate_identity_token(user.id) if self.dashx else ""
        return create_session_token(user, external_token)

    async def forgot_password(self, email: str) -> None:
        """
        Send a password reset link.

        Raises:
            NotFoundError: If no user has this email
        """
        user = await self.get_user_by_email(email)
        if not user:
            raise NotFoundError(
                "Password reset requested for unknown email",
                user_message="This email does not exist in our records.",
            )

        token = create_reset_token(email)

        if self.dashx:
            await self.dashx.deliver(
                "email/forgot-password",
                {"to": email, "data": {"token": token}},
            )

    async def reset_password(self, token: str, new_password: str) -> str:
        """
        Set a new password using a reset token.

        Returns:
            ID of the updated user

        Raises:
            ValidationError: If the token is expired, invalid, or names no user
        """
        verification = verify_token(token)

        if verification.error == TokenError.EXPIRED:
            raise ValidationError(
                "Reset token expired",
                user_message="Your reset password link has expired.",
            )

        email = reset_email(verification.claims) if verification.ok else None
        if email is None:
            raise ValidationError(
                f"Reset token rejected: {verification.error or 'no email claim'}",
                user_message="Invalid reset password link.",
            )

        result = await self.session.execute(
            update(UserModel)
            .where(UserModel.email == email)
            .values({UserModel.password_hash: hash_password(new_password)})
            .returning(UserModel.id)
        )
        user_id = result.scalar_one_or_none()

        if user_id is None:
            raise ValidationError(
                "Reset token names no existing user",
                user_message="Invalid reset password link.",
            )

        logger.info(f"Password reset for user {user_id}")
        return user_id

    async def get_user_by_id(self, user_id: str) -> Optional[UserModel]:
        """Get user by ID."""
        return await self.session.get(UserModel, user_id)

    async def get_user_by_email(self, email: str) -> Optional[UserModel]:
        """Get user by email."""
        result = await self.session.execute(
            select(UserModel).where(UserModel.email == email)
        )
        return result.scalar_one_or_none()
