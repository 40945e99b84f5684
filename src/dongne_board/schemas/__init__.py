"""
Pydantic schemas for API request/response models.

These schemas define the structure of API data for serialization and validation.
"""

from .admin import AdminLogResponse
from .neighborhood import NeighborhoodResponse
from .notification import NotificationResponse
from .post import (
    CommentCreate,
    CommentResponse,
    PostCreate,
    PostDetailResponse,
    PostResponse,
    StatusUpdate,
)
from .storage import ImageUpload, StoredObject
from .user import ProfileStats, ProfileUpdateRequest, UserResponse

__all__ = [
    "AdminLogResponse", "NeighborhoodResponse", "NotificationResponse",
    "CommentCreate", "CommentResponse",
    "PostCreate", "PostDetailResponse", "PostResponse",
    "StatusUpdate",
    "ImageUpload", "StoredObject",
    "ProfileStats", "ProfileUpdateRequest", "UserResponse",
]
