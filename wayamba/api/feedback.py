"""Feedback submission endpoint."""

import logging

from litestar import Controller, Request, post
from litestar.status_codes import HTTP_200_OK
from pydantic import BaseModel

from wayamba.api.forms import read_fields, read_image
from wayamba.services import FeedbackService

logger = logging.getLogger("Wayamba.feedback")


# --- Response Schemas ---

class SubmitFeedbackResponse(BaseModel):
    """Response after submitting feedback."""
    success: bool
    message: str


# --- Controller ---

class FeedbackController(Controller):
    """Public feedback submission."""

    path = "/submit"
    tags = ["feedback"]

    @post("/", status_code=HTTP_200_OK)
    async def submit_feedback(
        self,
        request: Request,
        feedback_service: FeedbackService,
    ) -> SubmitFeedbackResponse:
        """
        Submit geotagged visitor feedback.

        Accepts a multipart form (optional photo in the ``image`` field), an
        urlencoded form or a JSON object with name, comment, latitude and
        longitude.
        """
        fields, files = await read_fields(request)
        image = await read_image(files.get("image"))

        feedback = await feedback_service.submit(
            name=fields.get("name"),
            comment=fields.get("comment"),
            latitude=fields.get("latitude"),
            longitude=fields.get("longitude"),
            image=image,
        )
        logger.info(f"Feedback submitted by {feedback.name or 'anonymous'} ({feedback.id})")

        return SubmitFeedbackResponse(success=True, message="Feedback submitted!")
