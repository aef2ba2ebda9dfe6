"""Request body helpers for endpoints that take form posts or JSON."""

from typing import Dict, Optional, Tuple

from litestar import Request
from litestar.datastructures import UploadFile
from litestar.exceptions import SerializationException

from wayamba.errors import ValidationError
from wayamba.integrations import ImageUpload

FORM_CONTENT_TYPES = ("multipart/form-data", "application/x-www-form-urlencoded")


async def read_fields(request: Request) -> Tuple[Dict[str, str], Dict[str, UploadFile]]:
    """
    Split a request body into plain fields and uploaded files.

    Multipart and urlencoded forms are read as forms; any other non-empty
    body must be a JSON object.
    """
    content_type = request.headers.get("content-type", "")
    fields: Dict[str, str] = {}
    files: Dict[str, UploadFile] = {}

    if content_type.startswith(FORM_CONTENT_TYPES):
        form = await request.form()
        for key, value in form.multi_items():
            if isinstance(value, UploadFile):
                files[key] = value
            else:
                fields[key] = value
        return fields, files

    if not await request.body():
        return fields, files

    try:
        data = await request.json()
    except SerializationException:
        raise ValidationError("Request body must be a form or a JSON object.")
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a form or a JSON object.")
    return data, files


async def read_image(upload: Optional[UploadFile]) -> Optional[ImageUpload]:
    """Read an uploaded file into an ``ImageUpload``; empty parts count as no image."""
    if upload is None:
        return None
    content = await upload.read()
    if not content:
        return None
    return ImageUpload(
        content=content,
        filename=upload.filename or "upload",
        content_type=upload.content_type or "application/octet-stream",
    )
