"""Post and comment Pydantic schemas."""

from __future__ import annotations

import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

from dongne_board.models.enums import AdminStatus, Category

SortBy = Literal["recent", "popular"]
Scope = Literal["city", "district", "neighborhood"]


class PostCreate(BaseModel):
    """Schema for creating a new post."""

    category: Category
    title: str | None = Field(None, max_length=100)
    content: str = Field(..., min_length=1, max_length=200)
    images: list[str] | None = Field(None, max_length=3, description="Up to three image URLs")
    neighborhood: str = Field(..., min_length=1, max_length=100)
    latitude: float | None = Field(None, ge=-90, le=90)
    longitude: float | None = Field(None, ge=-180, le=180)
    is_anonymous: bool = False

    model_config = ConfigDict(extra="forbid")


class PostCreated(BaseModel):
    success: bool = True
    post_id: int


class PostResponse(BaseModel):
    """Schema for post information returned by the API."""

    id: int
    user_id: int | None
    category: Category
    title: str | None
    content: str
    images: list[str] | None
    neighborhood: str
    latitude: float | None
    longitude: float | None
    empathy_count: int
    comment_count: int
    admin_status: AdminStatus
    admin_notes: str | None
    is_anonymous: bool
    is_visible: bool
    created_at: datetime.datetime
    updated_at: datetime.datetime

    @model_validator(mode="after")
    def _hide_anonymous_author(self) -> PostResponse:
        if self.is_anonymous:
            self.user_id = None
        return self

    model_config = ConfigDict(from_attributes=True)


class CommentCreate(BaseModel):
    """Schema for creating a new comment."""

    post_id: int
    content: str = Field(..., min_length=1, max_length=500)
    is_anonymous: bool = False

    model_config = ConfigDict(extra="forbid")


class CommentCreated(BaseModel):
    success: bool = True
    comment_id: int


class CommentResponse(BaseModel):
    """Comment joined with the author's public profile fields."""

    id: int
    post_id: int
    user_id: int | None
    content: str
    is_anonymous: bool
    created_at: datetime.datetime
    updated_at: datetime.datetime
    user_nickname: str | None = None
    user_name: str | None = None
    user_profile_image: str | None = None

    @model_validator(mode="after")
    def _hide_anonymous_author(self) -> CommentResponse:
        if self.is_anonymous:
            self.user_id = None
        return self

    model_config = ConfigDict(from_attributes=True)


class PostDetailResponse(PostResponse):
    """Single post together with its comments."""

    comments: list[CommentResponse] = Field(default_factory=list)


class EmpathyResult(BaseModel):
    success: bool = True
    empathy_count: int


class StatusUpdate(BaseModel):
    """Admin request to overwrite a post's handling status."""

    status: AdminStatus
    notes: str | None = None

    model_config = ConfigDict(extra="forbid")


def comment_response(comment: Any, author: Any | None) -> CommentResponse:
    """Build a comment payload, hiding the author's profile on anonymous comments."""
    data = CommentResponse.model_validate(comment)
    if author is not None and not comment.is_anonymous:
        data.user_nickname = author.nickname
        data.user_name = author.name
        data.user_profile_image = author.profile_image
    return data
