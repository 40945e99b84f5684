"""Admin endpoints for post status handling and the audit log."""

import logging

from fastapi import APIRouter, HTTPException, Query, status
from sqlalchemy import desc

from dongne_board.models import AdminLog, Post
from dongne_board.schemas.admin import AdminLogResponse
from dongne_board.schemas.post import StatusUpdate

from ..dependencies import AdminUserDep, NotificationServiceDep, SessionDep

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["admin"])


@router.patch("/posts/{post_id}/status")
async def update_post_status(
    post_id: int,
    payload: StatusUpdate,
    admin: AdminUserDep,
    db: SessionDep,
    notifications: NotificationServiceDep,
) -> dict[str, bool]:
    """Overwrite a post's handling status and record the action.

    Any status may replace any other. Notes are only written when given.

    Args:
        post_id: ID of the post to update
        payload: New status and optional notes
        admin: Authenticated admin performing the change
        db: Database session
        notifications: Service that notifies the post author

    Returns:
        Success flag

    Raises:
        HTTPException: If the post does not exist
    """
    post = db.get(Post, post_id)
    if post is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Post not found")

    previous_status = post.admin_status
    post.admin_status = payload.status
    if payload.notes is not None:
        post.admin_notes = payload.notes

    db.add(
        AdminLog(
            admin_id=admin.id,
            action="update_status",
            target_type="post",
            target_id=post.id,
            details={
                "status": payload.status.value,
                "notes": payload.notes,
                "previous_status": previous_status.value,
            },
        )
    )
    db.commit()
    logger.info(
        "Admin %s changed post %s status %s -> %s",
        admin.id, post.id, previous_status.value, payload.status.value,
    )

    notifications.status_changed(db, post, admin, payload.status)
    return {"success": True}


@router.get("/logs", response_model=list[AdminLogResponse])
async def list_admin_logs(
    admin: AdminUserDep,
    db: SessionDep,
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
) -> list[AdminLog]:
    """List admin actions, newest first."""
    return (
        db.query(AdminLog)
        .order_by(desc(AdminLog.created_at), desc(AdminLog.id))
        .offset(offset)
        .limit(limit)
        .all()
    )
