"""Dependency providers wiring process-scoped collaborators into handlers."""

from typing import Annotated

from litestar.datastructures import State
from litestar.di import Provide
from litestar.params import Dependency
from sqlalchemy.ext.asyncio import AsyncSession

from wayamba.auth import AdminSessions
from wayamba.services import AssetCatalog, FeedbackService

# Request-scoped session from the SQLAlchemy plugin.
DbSession = Annotated[AsyncSession, Dependency(skip_validation=True)]


def provide_admin_sessions(state: State) -> AdminSessions:
    return state.admin_sessions


def provide_feedback_service(state: State, session: DbSession) -> FeedbackService:
    return FeedbackService(session, state.boundary, state.image_host, state.notifier)


def provide_asset_catalog(state: State, session: DbSession) -> AssetCatalog:
    return AssetCatalog(session, state.boundary, state.image_host)


DEPENDENCIES = {
    "admin_sessions": Provide(provide_admin_sessions, sync_to_thread=False),
    "feedback_service": Provide(provide_feedback_service, sync_to_thread=False),
    "asset_catalog": Provide(provide_asset_catalog, sync_to_thread=False),
}
