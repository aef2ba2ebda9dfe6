"""Server-side admin sessions and the guards that check them."""

import logging
import secrets
from typing import Optional

from litestar.connection import ASGIConnection
from litestar.handlers.base import BaseRouteHandler
from litestar.stores.base import Store
from litestar.stores.memory import MemoryStore

from wayamba.errors import Unauthorized

logger = logging.getLogger("Wayamba.auth")

SESSION_COOKIE = "session_id"
ADMIN_SESSION_KEY = "admin_authenticated"


class AdminSessions:
    """
    Admin session state kept in a Litestar store.

    The client only holds an opaque random token (the ``session_id`` cookie);
    whether that token is authenticated lives here and expires after ``ttl``
    seconds.
    """

    def __init__(self, store: Optional[Store] = None, ttl: int = 7 * 24 * 60 * 60):
        self.store = store or MemoryStore()
        self.ttl = ttl

    @staticmethod
    def _key(session_id: str) -> str:
        return f"{ADMIN_SESSION_KEY}:{session_id}"

    async def create(self, username: str) -> str:
        session_id = secrets.token_urlsafe(32)
        await self.store.set(self._key(session_id), username, expires_in=self.ttl)
        return session_id

    async def username(self, session_id: Optional[str]) -> Optional[str]:
        if not session_id:
            return None
        raw = await self.store.get(self._key(session_id))
        if raw is None:
            return None
        # MemoryStore hands values back as bytes.
        return raw.decode("utf-8") if isinstance(raw, bytes) else str(raw)

    async def is_authenticated(self, session_id: Optional[str]) -> bool:
        return await self.username(session_id) is not None

    async def destroy(self, session_id: Optional[str]) -> None:
        if session_id:
            await self.store.delete(self._key(session_id))


async def require_admin_guard(connection: ASGIConnection, handler: BaseRouteHandler) -> None:
    """Guard to require an authenticated admin session."""
    sessions: AdminSessions = connection.app.state.admin_sessions
    session_id = connection.cookies.get(SESSION_COOKIE)

    username = await sessions.username(session_id)
    if username is None:
        logger.warning(f"Admin access attempted without authentication: {connection.url.path}")
        raise Unauthorized()

    logger.debug(f"Admin access granted for: {username}")


async def asset_upload_guard(connection: ASGIConnection, handler: BaseRouteHandler) -> None:
    """Admin-only asset uploads when ASSET_UPLOAD_REQUIRES_ADMIN is set."""
    if connection.app.state.settings.asset_upload_requires_admin:
        await require_admin_guard(connection, handler)
