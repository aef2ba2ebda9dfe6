"""Optional outside collaborators: image hosting and operator email."""

from wayamba.integrations.images import (
    CloudinaryImageHost,
    ImageHost,
    ImageUpload,
    NullImageHost,
    build_image_host,
)
from wayamba.integrations.notifications import (
    Notifier,
    NullNotifier,
    SendGridNotifier,
    build_notifier,
)

__all__ = [
    "CloudinaryImageHost",
    "ImageHost",
    "ImageUpload",
    "NullImageHost",
    "build_image_host",
    "Notifier",
    "NullNotifier",
    "SendGridNotifier",
    "build_notifier",
]
