"""SQLAlchemy models for user accounts and neighborhoods."""

from __future__ import annotations

import datetime

from sqlalchemy import Boolean, DateTime, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from dongne_board.db.session import Base
from dongne_board.db.time import utcnow
from dongne_board.models.enums import Role, enum_column


class User(Base):
    """Account created on first login and keyed by an external open id.

    The ``total_*`` columns are denormalized lifetime counters maintained by
    the engagement side effects; ``/profile/stats`` recomputes them live.
    """

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    open_id: Mapped[str] = mapped_column(String(64), unique=True, nullable=False)
    name: Mapped[str | None] = mapped_column(Text, nullable=True)
    email: Mapped[str | None] = mapped_column(String(320), nullable=True, index=True)
    login_method: Mapped[str | None] = mapped_column(String(64), nullable=True)
    role: Mapped[Role] = mapped_column(enum_column(Role, "role"), nullable=False, default=Role.USER)

    # Profile
    nickname: Mapped[str | None] = mapped_column(String(50), nullable=True)
    profile_image: Mapped[str | None] = mapped_column(Text, nullable=True)
    bio: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Home neighborhood, e.g. "서울시 강남구 역삼동"
    neighborhood: Mapped[str | None] = mapped_column(String(100), nullable=True)
    latitude: Mapped[float | None] = mapped_column(Numeric(10, 8, asdecimal=False), nullable=True)
    longitude: Mapped[float | None] = mapped_column(Numeric(11, 8, asdecimal=False), nullable=True)
    neighborhood_verified: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    total_empathy: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    total_posts: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    total_comments: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    created_at: Mapped[datetime.datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    updated_at: Mapped[datetime.datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow
    )
    last_signed_in: Mapped[datetime.datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )

    @property
    def is_admin(self) -> bool:
        """Return True when the account carries the admin role."""
        return self.role == Role.ADMIN

    @property
    def display_name(self) -> str:
        """Return the name shown to other users."""
        return self.nickname or self.name or "익명"


class Neighborhood(Base):
    """Known neighborhood with its hierarchical address and centroid."""

    __tablename__ = "neighborhoods"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    # Full "City District Neighborhood" address string.
    name: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    city: Mapped[str] = mapped_column(String(50), nullable=False)
    district: Mapped[str] = mapped_column(String(50), nullable=False)
    latitude: Mapped[float] = mapped_column(Numeric(10, 8, asdecimal=False), nullable=False)
    longitude: Mapped[float] = mapped_column(Numeric(11, 8, asdecimal=False), nullable=False)
    created_at: Mapped[datetime.datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
