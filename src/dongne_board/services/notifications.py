"""Notification rules triggered by engagement and admin actions.

Every write in this module is a best-effort side effect: it runs after the
triggering mutation has been committed, and a failure is logged and rolled
back without being reported to the caller.
"""

from __future__ import annotations

import logging

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from dongne_board.core.settings import settings
from dongne_board.models import (
    AdminStatus,
    Comment,
    EmpathyThresholdEvent,
    Notification,
    NotificationType,
    Post,
    User,
)

logger = logging.getLogger(__name__)

STATUS_LABELS: dict[AdminStatus, str] = {
    AdminStatus.PENDING: "검토 대기 중",
    AdminStatus.IN_PROGRESS: "행정 처리 중",
    AdminStatus.COMPLETED: "처리 완료",
    AdminStatus.REJECTED: "반려됨",
}


class NotificationService:
    """Decides which notifications a mutation produces and writes them."""

    def __init__(
        self,
        *,
        owner_open_id: str | None = None,
        threshold: int = 50,
        notify_every: int = 10,
        notify_first: int = 3,
    ) -> None:
        self.owner_open_id = owner_open_id
        self.threshold = threshold
        self.notify_every = notify_every
        self.notify_first = notify_first

    def notify(
        self,
        db: Session,
        *,
        recipient_id: int,
        actor_id: int | None,
        n_type: NotificationType,
        title: str,
        content: str | None = None,
        post_id: int | None = None,
        comment_id: int | None = None,
    ) -> Notification | None:
        """Write one notification unless the recipient is the acting user.

        Returns the stored notification, or None when it was skipped or failed.
        """
        if actor_id is not None and recipient_id == actor_id:
            return None
        try:
            notification = Notification(
                user_id=recipient_id,
                type=n_type,
                title=title,
                content=content,
                post_id=post_id,
                comment_id=comment_id,
            )
            db.add(notification)
            db.commit()
        except SQLAlchemyError:
            db.rollback()
            logger.warning(
                "Failed to write %s notification for user %s", n_type.value, recipient_id,
                exc_info=True,
            )
            return None
        return notification

    def empathy_added(self, db: Session, post: Post, actor: User, count: int) -> None:
        """Apply the threshold and sampling rules after an empathy was added."""
        if count == self.threshold:
            self._threshold_reached(db, post, actor, count)

        if count % self.notify_every == 0 or count <= self.notify_first:
            self.notify(
                db,
                recipient_id=post.user_id,
                actor_id=actor.id,
                n_type=NotificationType.EMPATHY_ON_POST,
                title="공감 알림",
                content=f"당신의 게시글이 {count}명의 공감을 받았습니다.",
                post_id=post.id,
            )

    def comment_created(self, db: Session, post: Post, comment: Comment, actor: User) -> None:
        """Tell the post author about a new comment from someone else."""
        author = "익명" if comment.is_anonymous else actor.display_name
        self.notify(
            db,
            recipient_id=post.user_id,
            actor_id=actor.id,
            n_type=NotificationType.COMMENT_ON_POST,
            title="댓글 알림",
            content=f"{author}님이 당신의 게시글에 댓글을 달았습니다.",
            post_id=post.id,
            comment_id=comment.id,
        )

    def status_changed(self, db: Session, post: Post, actor: User, status: AdminStatus) -> None:
        """Tell the post author that an admin changed the handling status."""
        self.notify(
            db,
            recipient_id=post.user_id,
            actor_id=actor.id,
            n_type=NotificationType.POST_STATUS_CHANGED,
            title="게시글 상태 변경",
            content=f'당신의 게시글이 "{STATUS_LABELS[status]}" 상태로 변경되었습니다.',
            post_id=post.id,
        )

    def _threshold_reached(self, db: Session, post: Post, actor: User, count: int) -> None:
        try:
            existing = (
                db.query(EmpathyThresholdEvent)
                .filter(EmpathyThresholdEvent.post_id == post.id)
                .first()
            )
        except SQLAlchemyError:
            db.rollback()
            logger.warning("Failed to look up threshold event for post %s", post.id, exc_info=True)
            return
        if existing is not None:
            return

        event = EmpathyThresholdEvent(
            post_id=post.id,
            threshold_reached=count,
            notification_sent=False,
        )
        try:
            db.add(event)
            db.commit()
        except IntegrityError:
            # A concurrent request recorded the crossing first.
            db.rollback()
            return
        except SQLAlchemyError:
            db.rollback()
            logger.warning("Failed to record threshold event for post %s", post.id, exc_info=True)
            return

        logger.info("Post %s reached %d empathies", post.id, count)
        self.notify(
            db,
            recipient_id=post.user_id,
            actor_id=actor.id,
            n_type=NotificationType.EMPATHY_THRESHOLD_REACHED,
            title="공감 임계치 도달",
            content=(
                f"당신의 게시글이 {count}명의 공감을 받았습니다! "
                "행정 신고로 전달될 준비가 되었습니다."
            ),
            post_id=post.id,
        )
        self._escalate_to_owner(db, post, actor, count)

        try:
            event.notification_sent = True
            db.commit()
        except SQLAlchemyError:
            db.rollback()
            logger.warning("Failed to mark threshold event %s as sent", event.id, exc_info=True)

    def _escalate_to_owner(self, db: Session, post: Post, actor: User, count: int) -> None:
        title = "공감 임계치 도달 - 행정 신고 검토 필요"
        content = (
            f'게시글 #{post.id}: "{post.content[:50]}..."이 {count}명의 공감을 받았습니다. '
            "행정 신고 처리를 검토해주세요."
        )
        owner = None
        if self.owner_open_id:
            try:
                owner = db.query(User).filter(User.open_id == self.owner_open_id).first()
            except SQLAlchemyError:
                db.rollback()
                logger.warning("Failed to look up owner for post %s", post.id, exc_info=True)
                return
        if owner is None:
            logger.warning("No owner account to receive escalation for post %s", post.id)
            return

        logger.info("Escalating post %s to owner %s", post.id, owner.id)
        self.notify(
            db,
            recipient_id=owner.id,
            actor_id=actor.id,
            n_type=NotificationType.ADMIN_NOTICE,
            title=title,
            content=content,
            post_id=post.id,
        )


def get_notification_service() -> NotificationService:
    """Return a notification service configured from settings."""
    return NotificationService(
        owner_open_id=settings.owner_open_id,
        threshold=settings.empathy_threshold,
        notify_every=settings.empathy_notify_every,
        notify_first=settings.empathy_notify_first,
    )
