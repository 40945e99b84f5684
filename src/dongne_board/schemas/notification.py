"""Notification schemas."""

from __future__ import annotations

import datetime

from pydantic import BaseModel, ConfigDict

from dongne_board.models.enums import NotificationType


class NotificationResponse(BaseModel):
    id: int
    user_id: int
    type: NotificationType
    title: str
    content: str | None
    post_id: int | None
    comment_id: int | None
    is_read: bool
    created_at: datetime.datetime

    model_config = ConfigDict(from_attributes=True)
