"""Notification inbox endpoints for the Dongne Board API."""

from fastapi import APIRouter, HTTPException, Query, status
from sqlalchemy import desc, func

from dongne_board.models import Notification
from dongne_board.schemas.notification import NotificationResponse

from ..dependencies import CurrentUserDep, SessionDep

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("/", response_model=list[NotificationResponse])
async def list_notifications(
    current_user: CurrentUserDep,
    db: SessionDep,
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
) -> list[Notification]:
    """List the caller's notifications, newest first."""
    return (
        db.query(Notification)
        .filter(Notification.user_id == current_user.id)
        .order_by(desc(Notification.created_at), desc(Notification.id))
        .offset(offset)
        .limit(limit)
        .all()
    )


@router.get("/unread-count")
async def unread_count(current_user: CurrentUserDep, db: SessionDep) -> dict[str, int]:
    """Return how many of the caller's notifications are unread."""
    count = (
        db.query(func.count(Notification.id))
        .filter(Notification.user_id == current_user.id, Notification.is_read.is_(False))
        .scalar()
    )
    return {"count": int(count or 0)}


@router.post("/read-all")
async def mark_all_as_read(current_user: CurrentUserDep, db: SessionDep) -> dict[str, bool]:
    """Mark every notification in the caller's inbox as read."""
    db.query(Notification).filter(
        Notification.user_id == current_user.id,
        Notification.is_read.is_(False),
    ).update({Notification.is_read: True}, synchronize_session=False)
    db.commit()
    return {"success": True}


@router.post("/{notification_id}/read")
async def mark_as_read(
    notification_id: int,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> dict[str, bool]:
    """Mark one notification as read.

    Raises:
        HTTPException: If the notification does not exist in the caller's inbox
    """
    notification = (
        db.query(Notification)
        .filter(Notification.id == notification_id, Notification.user_id == current_user.id)
        .first()
    )
    if notification is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Notification not found")

    notification.is_read = True
    db.commit()
    return {"success": True}
