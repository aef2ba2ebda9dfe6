"""Wayamba API routes."""

from wayamba.api.admin import AdminAuthController, AdminController
from wayamba.api.assets import AssetsController
from wayamba.api.boundary import province_boundary
from wayamba.api.feedback import FeedbackController
from wayamba.api.health import health

__all__ = [
    "AdminAuthController",
    "AdminController",
    "AssetsController",
    "FeedbackController",
    "health",
    "province_boundary",
]
