"""API endpoint modules for version 1."""

from .admin import router as admin_router
from .auth import router as auth_router
from .comments import router as comments_router
from .empathy import router as empathy_router
from .neighborhoods import router as neighborhoods_router
from .notifications import router as notifications_router
from .posts import router as posts_router
from .profile import router as profile_router
from .storage import router as storage_router

__all__ = [
    "auth_router",
    "posts_router",
    "comments_router",
    "empathy_router",
    "notifications_router",
    "profile_router",
    "admin_router",
    "storage_router",
    "neighborhoods_router",
]
