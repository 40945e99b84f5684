"""Profile endpoints for the Dongne Board API."""

from fastapi import APIRouter

from dongne_board.models import User
from dongne_board.schemas.user import ProfileStats, ProfileUpdateRequest, UserResponse
from dongne_board.services.engagement import EngagementService
from dongne_board.services.user_service import update_profile

from ..dependencies import CurrentUserDep, SessionDep

router = APIRouter(prefix="/profile", tags=["profile"])


@router.get("/me", response_model=UserResponse)
async def get_my_profile(current_user: CurrentUserDep) -> User:
    """Return the caller's full profile."""
    return current_user


@router.patch("/me", response_model=UserResponse)
async def update_my_profile(
    payload: ProfileUpdateRequest,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> User:
    """Update profile fields; omitted or null fields are left unchanged.

    Args:
        payload: Partial profile update
        current_user: Authenticated user whose profile is updated
        db: Database session

    Returns:
        Updated user profile
    """
    updates = payload.model_dump(exclude_unset=True)
    return update_profile(db, current_user, updates)


@router.get("/stats", response_model=ProfileStats)
async def get_my_stats(current_user: CurrentUserDep, db: SessionDep) -> ProfileStats:
    """Return posts written and empathy and comments received by the caller."""
    return ProfileStats(**EngagementService.user_stats(db, current_user.id))
