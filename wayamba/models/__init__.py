"""Wayamba database models."""

from wayamba.models.base import Base
from wayamba.models.feedback import Feedback, FeedbackStatus
from wayamba.models.asset import TourismAsset
from wayamba.models.admin_user import AdminUser

__all__ = [
    "Base",
    "Feedback",
    "FeedbackStatus",
    "TourismAsset",
    "AdminUser",
]
