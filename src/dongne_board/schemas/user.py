"""User-related Pydantic schemas."""

from __future__ import annotations

import datetime
from urllib.parse import urlparse

from pydantic import BaseModel, ConfigDict, Field, field_validator

from dongne_board.models.enums import Role


class LoginRequest(BaseModel):
    """Development login: either an email or a nickname identifies the user."""

    email: str | None = Field(None, max_length=320)
    password: str | None = Field(None, description="Accepted but not verified")
    nickname: str | None = Field(None, max_length=50)


class RegisterRequest(BaseModel):
    """Development registration; always creates a new account."""

    nickname: str = Field(..., min_length=1, max_length=50)
    email: str | None = Field(None, max_length=320)
    password: str | None = None


class UserResponse(BaseModel):
    """Full user record returned to its owner."""

    id: int
    open_id: str
    name: str | None
    email: str | None
    login_method: str | None
    role: Role
    nickname: str | None
    profile_image: str | None
    bio: str | None
    neighborhood: str | None
    latitude: float | None
    longitude: float | None
    neighborhood_verified: bool
    total_empathy: int
    total_posts: int
    total_comments: int
    created_at: datetime.datetime
    updated_at: datetime.datetime
    last_signed_in: datetime.datetime

    model_config = ConfigDict(from_attributes=True)


class AuthResponse(BaseModel):
    """Response returned after a successful login or registration."""

    success: bool = True
    user: UserResponse


class ProfileUpdateRequest(BaseModel):
    """Partial profile update; omitted or null fields are left unchanged."""

    nickname: str | None = Field(None, max_length=50)
    bio: str | None = None
    neighborhood: str | None = Field(None, max_length=100)
    latitude: float | None = Field(None, ge=-90, le=90)
    longitude: float | None = Field(None, ge=-180, le=180)
    profile_image: str | None = Field(None, description="Image URL; an empty string means no change")
    neighborhood_verified: bool | None = None

    model_config = ConfigDict(extra="forbid")

    @field_validator("profile_image")
    @classmethod
    def validate_profile_image(cls, v: str | None) -> str | None:
        """Accept an absolute URL, an upload path, or an empty string."""
        if v is None or v == "":
            return None
        if v.startswith("/"):
            return v
        parsed = urlparse(v)
        if parsed.scheme not in {"http", "https"} or not parsed.netloc:
            raise ValueError("Profile image must be a valid URL")
        return v


class ProfileStats(BaseModel):
    """Engagement totals received by the caller."""

    total_posts: int
    total_empathy: int
    total_comments: int
