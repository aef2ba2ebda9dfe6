"""Logging setup and helpers that attach context to error records."""

import logging
import traceback
from typing import Any, Optional

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

logger = logging.getLogger("Wayamba")

_debug = False


def configure_logging(debug: bool = False) -> None:
    """Configure root logging once for the process."""
    global _debug
    _debug = debug
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format=LOG_FORMAT,
    )


def debug_log(message: str, *args, **kwargs) -> None:
    """Log a debug message only when the app runs in debug mode."""
    if _debug:
        level = kwargs.pop("level", logging.DEBUG)
        logger.log(level, message, *args, **kwargs)


def error_log(
    message: str,
    exc: Optional[Exception] = None,
    context: Optional[dict] = None,
) -> None:
    """
    Log an error with optional context and exception details.

    Args:
        message: Error message
        exc: Optional exception object
        context: Optional mapping of extra fields (ids, request info, ...)
    """
    parts = [message]

    if context:
        parts.append("Context: " + ", ".join(f"{k}={v}" for k, v in context.items()))

    if exc:
        parts.append(f"Exception: {type(exc).__name__}: {exc}")
        if _debug:
            parts.append(
                "Traceback:\n" + "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
            )

    full_message = " | ".join(parts)

    if exc:
        logger.error(full_message, exc_info=exc)
    else:
        logger.error(full_message)


def log_request_error(request: Any, exc: Exception, message: Optional[str] = None) -> None:
    """Log an exception together with the path, method and user agent of a request."""
    context = {}
    try:
        context["path"] = request.url.path
        context["method"] = request.method
        context["user_agent"] = request.headers.get("user-agent", "unknown")
    except AttributeError:
        pass

    error_log(message or f"Unhandled exception: {type(exc).__name__}", exc=exc, context=context)
