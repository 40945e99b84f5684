"""Empathy ("me too") endpoints for the Dongne Board API."""

from fastapi import APIRouter, HTTPException, status
from sqlalchemy.orm import Session

from dongne_board.models import Post
from dongne_board.schemas.post import EmpathyResult
from dongne_board.services.engagement import AlreadyEmpathizedError, EngagementService

from ..dependencies import CurrentUserDep, NotificationServiceDep, SessionDep

router = APIRouter(prefix="/empathy", tags=["empathy"])


def _get_post_or_404(db: Session, post_id: int) -> Post:
    post = db.get(Post, post_id)
    if post is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Post not found")
    return post


@router.post("/{post_id}", response_model=EmpathyResult)
async def add_empathy(
    post_id: int,
    current_user: CurrentUserDep,
    db: SessionDep,
    notifications: NotificationServiceDep,
) -> EmpathyResult:
    """Empathize with a post and run the empathy notification rules.

    Args:
        post_id: ID of the post
        current_user: Authenticated user reacting to the post
        db: Database session
        notifications: Service that applies the threshold and sampling rules

    Returns:
        The post's empathy count after the insert

    Raises:
        HTTPException: 404 if the post is missing, 409 if already empathized
    """
    post = _get_post_or_404(db, post_id)
    try:
        count = EngagementService.add_empathy(db, post, current_user)
    except AlreadyEmpathizedError as err:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Already empathized",
        ) from err

    notifications.empathy_added(db, post, current_user, count)
    return EmpathyResult(empathy_count=count)


@router.delete("/{post_id}", response_model=EmpathyResult)
async def remove_empathy(
    post_id: int,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> EmpathyResult:
    """Withdraw the caller's empathy; a no-op when there was none."""
    post = _get_post_or_404(db, post_id)
    count = EngagementService.remove_empathy(db, post, current_user)
    return EmpathyResult(empathy_count=count)


@router.get("/{post_id}/mine")
async def has_empathized(post_id: int, current_user: CurrentUserDep, db: SessionDep) -> bool:
    return EngagementService.has_empathized(db, current_user.id, post_id)


@router.get("/{post_id}/count")
async def empathy_count(post_id: int, db: SessionDep) -> int:
    return EngagementService.count_empathy(db, post_id)
