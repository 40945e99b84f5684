"""Closed value sets shared by models and schemas."""

from __future__ import annotations

import enum

from sqlalchemy import Enum


class Role(enum.StrEnum):
    USER = "user"
    ADMIN = "admin"


class Category(enum.StrEnum):
    INCONVENIENCE = "inconvenience"
    SUGGESTION = "suggestion"
    PRAISE = "praise"
    CHAT = "chat"
    EMERGENCY = "emergency"


class AdminStatus(enum.StrEnum):
    """Administrative handling state of a post.

    The intended flow is pending -> in_progress -> completed | rejected, but
    admins may overwrite any value with any other.
    """

    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    REJECTED = "rejected"


class NotificationType(enum.StrEnum):
    COMMENT_ON_POST = "comment_on_post"
    EMPATHY_ON_POST = "empathy_on_post"
    POST_STATUS_CHANGED = "post_status_changed"
    EMPATHY_THRESHOLD_REACHED = "empathy_threshold_reached"
    ADMIN_NOTICE = "admin_notice"


def enum_column(enum_cls: type[enum.Enum], name: str) -> Enum:
    """Return a column type persisting the enum's string values."""
    return Enum(
        enum_cls,
        name=name,
        native_enum=False,
        length=32,
        values_callable=lambda members: [member.value for member in members],
        validate_strings=True,
    )
