import logging
from typing import Optional

from advanced_alchemy.config import AsyncSessionConfig
from litestar import Litestar, MediaType, Request
from litestar.config.cors import CORSConfig
from litestar.contrib.sqlalchemy.plugins import SQLAlchemyAsyncConfig, SQLAlchemyInitPlugin
from litestar.datastructures import State
from litestar.exceptions import HTTPException
from litestar.response import Response
from litestar.status_codes import HTTP_500_INTERNAL_SERVER_ERROR

from wayamba.api.deps import DEPENDENCIES
from wayamba.auth import AdminSessions
from wayamba.config import Settings
from wayamba.geo import BoundaryGate
from wayamba.integrations import ImageHost, Notifier, build_image_host, build_notifier
from wayamba.models import Base  # Import models Base for table creation
from wayamba.routes import ROUTES
from wayamba.utils.logging import configure_logging, log_request_error

logger = logging.getLogger("Wayamba")


# --- Exception handlers
def handle_http_exception(request: Request, exc: HTTPException) -> Response:
    """Render framework and service errors as ``{"success": false, "error": ...}``."""
    if exc.status_code >= HTTP_500_INTERNAL_SERVER_ERROR:
        logger.error(f"{request.method} {request.url.path} failed: {exc.detail}")
    return Response(
        content={"success": False, "error": exc.detail},
        status_code=exc.status_code,
        media_type=MediaType.JSON,
        headers=exc.headers,
    )


def log_exceptions(request: Request, exc: Exception) -> Response:
    log_request_error(request, exc)
    return Response(
        content={"success": False, "error": "Internal Server Error"},
        status_code=HTTP_500_INTERNAL_SERVER_ERROR,
        media_type=MediaType.JSON,
    )


# --- App factory
def create_app(
    settings: Optional[Settings] = None,
    *,
    boundary: Optional[BoundaryGate] = None,
    image_host: Optional[ImageHost] = None,
    notifier: Optional[Notifier] = None,
    admin_sessions: Optional[AdminSessions] = None,
) -> Litestar:
    """
    Build the application and its process-scoped collaborators.

    Anything not passed in is built from ``settings``: the boundary gate is
    loaded from ``settings.boundary_path``, the image host and notifier fall
    back to no-op implementations when their credentials are missing.
    """
    settings = settings or Settings.from_env()
    configure_logging(settings.debug)

    logger.info(f"Starting app in {'DEBUG' if settings.debug else 'PRODUCTION'} mode")

    if boundary is None:
        boundary = BoundaryGate.from_file(settings.boundary_path)
    if not boundary.is_loaded:
        logger.error("Province boundary not loaded: feedback and asset writes will be rejected")

    state = State(
        {
            "settings": settings,
            "boundary": boundary,
            "image_host": image_host or build_image_host(settings),
            "notifier": notifier or build_notifier(settings),
            "admin_sessions": admin_sessions or AdminSessions(ttl=settings.session_ttl_seconds),
        }
    )

    # --- SQLAlchemy config
    db_config = SQLAlchemyAsyncConfig(
        connection_string=settings.database_url,
        session_dependency_key="session",
        session_config=AsyncSessionConfig(expire_on_commit=False),
        metadata=Base.metadata,
        create_all=settings.debug,  # Auto-create tables on startup (dev only)
    )

    return Litestar(
        route_handlers=ROUTES,
        debug=settings.debug,
        plugins=[SQLAlchemyInitPlugin(db_config)],
        cors_config=CORSConfig(allow_origins=list(settings.cors_allow_origins)),
        dependencies=DEPENDENCIES,
        state=state,
        exception_handlers={
            HTTPException: handle_http_exception,
            Exception: log_exceptions,
        },
    )


app = create_app()
