"""Models capturing empathy reactions on posts."""

from __future__ import annotations

import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from dongne_board.db.session import Base
from dongne_board.db.time import utcnow


class Empathy(Base):
    """Per-user empathy on a post.

    The unique constraint prevents duplicate empathy from the same user.
    """

    __tablename__ = "empathies"
    __table_args__ = (UniqueConstraint("user_id", "post_id", name="uq_empathies_user_post"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id"), nullable=False)
    post_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("posts.id", ondelete="CASCADE"), nullable=False, index=True
    )
    created_at: Mapped[datetime.datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )


class EmpathyThresholdEvent(Base):
    """Record that a post reached the escalation threshold.

    One row per post; the unique ``post_id`` makes the escalation fire once.
    """

    __tablename__ = "empathy_threshold_events"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    post_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("posts.id", ondelete="CASCADE"), nullable=False, unique=True
    )
    threshold_reached: Mapped[int] = mapped_column(Integer, nullable=False)
    notification_sent: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime.datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
