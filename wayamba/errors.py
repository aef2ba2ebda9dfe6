"""Error taxonomy for the Wayamba service.

Each error subclasses the Litestar exception carrying the matching HTTP
status, so services can raise them directly and the app's exception
handlers turn them into JSON error bodies.
"""

from typing import Any

from litestar.exceptions import (
    ClientException,
    InternalServerException,
    NotAuthorizedException,
    NotFoundException,
)


class _DefaultDetail:
    """Use ``default_detail`` when an error is raised without a message."""

    default_detail = ""

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        if not args and not kwargs.get("detail"):
            kwargs["detail"] = self.default_detail
        super().__init__(*args, **kwargs)


class ValidationError(_DefaultDetail, ClientException):
    """Missing or malformed input (400)."""

    default_detail = "Invalid request"


class OutOfRegionError(_DefaultDetail, ClientException):
    """Coordinate lies outside the service boundary (400)."""

    default_detail = "The location is outside the North Western Province."


class Unauthorized(_DefaultDetail, NotAuthorizedException):
    """No authenticated admin session (401)."""

    default_detail = "Unauthorized"


class InvalidCredentials(_DefaultDetail, NotAuthorizedException):
    """Login failed. Unknown user and wrong password look the same (401)."""

    default_detail = "Invalid credentials"


class NotFoundError(_DefaultDetail, NotFoundException):
    """Unknown record id (404)."""

    default_detail = "Not found"


class UploadError(_DefaultDetail, InternalServerException):
    """The image host rejected or failed an upload (500)."""

    default_detail = "Failed to upload image."


class ServiceUnavailable(_DefaultDetail, InternalServerException):
    """A required resource (boundary, database) is not ready (500)."""

    default_detail = "Service unavailable"
