"""
Profile endpoints for the authenticated user.
"""

from fastapi import APIRouter

from app.api.deps import CurrentUserDep, DashXDep, SessionDep
from app.models.schemas import ProfileResponse, ProfileUpdate, UserProfile
from app.services.user_service import UserService


router = APIRouter()


@router.get("/profile", response_model=ProfileResponse)
async def get_profile(current_user: CurrentUserDep):
    """Get current authenticated user's profile."""
    return ProfileResponse(
        message="Successfully fetched.",
        user=UserProfile.model_validate(current_user),
    )


@router.patch("/update-profile", response_model=ProfileResponse)
async def update_profile(
    request: ProfileUpdate,
    session: SessionDep,
    current_user: CurrentUserDep,
    dashx: DashXDep,
):
    """
    Update the current user's profile.

    Only the fields sent are changed; send avatar as null to clear it.
    """
    users = UserService(session, dashx)
    user = await users.update_profile(current_user, request)
    return ProfileResponse(
        message="Profile updated.",
        user=UserProfile.model_validate(user),
    )
