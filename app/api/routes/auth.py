"""
Authentication endpoints: registration, login and password reset.
"""

from typing import Optional

from fastapi import APIRouter
from pydantic import BaseModel

from app.api.deps import DashXDep, SessionDep
from app.core.exceptions import ValidationError
from app.models.schemas import LoginResponse, MessageResponse
from app.services.auth_service import AuthService


router = APIRouter()


# Request Models
class RegisterRequest(BaseModel):
    """Registration request."""

    first_name: str
    last_name: str
    email: str
    password: str


class LoginRequest(BaseModel):
    """Login request."""

    email: str
    password: str


class ForgotPasswordRequest(BaseModel):
    """Password reset link request."""

    email: Optional[str] = None


class ResetPasswordRequest(BaseModel):
    """Password reset with a token from the reset link."""

    token: Optional[str] = None
    password: Optional[str] = None


@router.post("/register", response_model=MessageResponse)
async def register(request: RegisterRequest, session: SessionDep, dashx: DashXDep):
    """
    Register a new user account.

    Login is required afterwards to obtain a token.
    """
    auth = AuthService(session, dashx)
    await auth.register(
        first_name=request.first_name,
        last_name=request.last_name,
        email=request.email,
        password=request.password,
    )
    return MessageResponse(message="User created.")


@router.post("/login", response_model=LoginResponse)
async def login(request: LoginRequest, session: SessionDep, dashx: DashXDep):
    """
    Login with email and password.

    Returns a signed session token for the Authorization header.
    """
    auth = AuthService(session, dashx)
    token = await auth.login(request.email, request.password)
    return LoginResponse(message="User logged in.", token=token)


@router.post("/forgot-password", response_model=MessageResponse)
async def forgot_password(
    session: SessionDep,
    dashx: DashXDep,
    request: Optional[ForgotPasswordRequest] = None,
):
    """Email a password reset link valid for 15 minutes."""
    email = request.email if request else None
    if email is None:
        raise ValidationError("Missing email", "Email is required.", status_code=400)

    auth = AuthService(session, dashx)
    await auth.forgot_password(email)
    return MessageResponse(message="Check your inbox for a link to reset your password.")


@router.post("/reset-password", response_model=MessageResponse)
async def reset_password(
    session: SessionDep,
    request: Optional[ResetPasswordRequest] = None,
):
    """Set a new password using the token from a reset link."""
    request = request or ResetPasswordRequest()
    if request.token is None:
        raise ValidationError("Missing token", "Token is required.", status_code=400)
    if request.password is None:
        raise ValidationError("Missing password", "Password is required.", status_code=400)

    auth = AuthService(session)
    await auth.reset_password(request.token, request.password)
    return MessageResponse(message="You have successfully reset your password.")
