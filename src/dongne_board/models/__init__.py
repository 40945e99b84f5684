"""SQLAlchemy models for the Dongne Board application."""

from .empathy import Empathy, EmpathyThresholdEvent
from .enums import AdminStatus, Category, NotificationType, Role
from .notification import AdminLog, Notification
from .post import Comment, Post
from .user import Neighborhood, User

__all__ = [
    "AdminLog",
    "AdminStatus",
    "Category",
    "Comment",
    "Empathy", "EmpathyThresholdEvent",
    "Neighborhood",
    "Notification", "NotificationType",
    "Post",
    "Role",
    "User",
]
