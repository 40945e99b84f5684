"""Admin audit log schemas."""

from __future__ import annotations

import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict


class AdminLogResponse(BaseModel):
    id: int
    admin_id: int
    action: str
    target_type: str
    target_id: int
    details: dict[str, Any] | None
    created_at: datetime.datetime

    model_config = ConfigDict(from_attributes=True)
