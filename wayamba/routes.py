from wayamba.api import (
    AdminAuthController,
    AdminController,
    AssetsController,
    FeedbackController,
    health,
    province_boundary,
)

ROUTES = [
    health,
    province_boundary,
    FeedbackController,
    AssetsController,
    AdminAuthController,
    AdminController,
]
