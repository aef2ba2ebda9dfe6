"""Administrator authentication."""

from wayamba.auth.passwords import authenticate, hash_password, verify_password
from wayamba.auth.sessions import (
    SESSION_COOKIE,
    AdminSessions,
    asset_upload_guard,
    require_admin_guard,
)

__all__ = [
    "SESSION_COOKIE",
    "AdminSessions",
    "asset_upload_guard",
    "authenticate",
    "hash_password",
    "require_admin_guard",
    "verify_password",
]
