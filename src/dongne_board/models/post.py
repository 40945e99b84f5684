"""SQLAlchemy models for posts and their comments."""

from __future__ import annotations

import datetime

from sqlalchemy import JSON, Boolean, DateTime, ForeignKey, Index, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from dongne_board.db.session import Base
from dongne_board.db.time import utcnow
from dongne_board.models.enums import AdminStatus, Category, enum_column


class Post(Base):
    """Neighborhood report authored by a user.

    ``empathy_count`` and ``comment_count`` are caches of the ledger tables;
    ``admin_status`` is only written by admin actors.
    """

    __tablename__ = "posts"
    __table_args__ = (
        Index("ix_posts_neighborhood", "neighborhood"),
        Index("ix_posts_created_at", "created_at"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    category: Mapped[Category] = mapped_column(
        enum_column(Category, "category"), nullable=False, default=Category.INCONVENIENCE
    )
    title: Mapped[str | None] = mapped_column(String(100), nullable=True)
    content: Mapped[str] = mapped_column(Text, nullable=False)

    # List of image URLs, at most three.
    images: Mapped[list[str] | None] = mapped_column(JSON, nullable=True)

    neighborhood: Mapped[str] = mapped_column(String(100), nullable=False)
    latitude: Mapped[float | None] = mapped_column(Numeric(10, 8, asdecimal=False), nullable=True)
    longitude: Mapped[float | None] = mapped_column(Numeric(11, 8, asdecimal=False), nullable=True)

    empathy_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    comment_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    admin_status: Mapped[AdminStatus] = mapped_column(
        enum_column(AdminStatus, "admin_status"), nullable=False, default=AdminStatus.PENDING
    )
    admin_notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    is_anonymous: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_visible: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    created_at: Mapped[datetime.datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    updated_at: Mapped[datetime.datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow
    )


class Comment(Base):
    """Reply attached to a post."""

    __tablename__ = "comments"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    post_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("posts.id", ondelete="CASCADE"), nullable=False, index=True
    )
    user_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id"), nullable=False)

    content: Mapped[str] = mapped_column(Text, nullable=False)
    is_anonymous: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    created_at: Mapped[datetime.datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    updated_at: Mapped[datetime.datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow
    )
