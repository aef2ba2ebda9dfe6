"""Visitor feedback submission and moderation."""

import logging
import uuid
from typing import Any, List, Optional, Union

from sqlalchemy import desc, select
from sqlalchemy.ext.asyncio import AsyncSession

from wayamba.errors import NotFoundError, ValidationError
from wayamba.geo import BoundaryGate
from wayamba.integrations import ImageHost, ImageUpload, Notifier
from wayamba.models import Feedback, FeedbackStatus
from wayamba.services.common import parse_point

logger = logging.getLogger("Wayamba.feedback")

FEEDBACK_IMAGE_FOLDER = "tourist-feedback"


def parse_status(value: Any) -> FeedbackStatus:
    """Map a raw status value onto ``FeedbackStatus`` or raise ``ValidationError``."""
    try:
        return FeedbackStatus(value)
    except ValueError:
        allowed = ", ".join(s.value for s in FeedbackStatus)
        raise ValidationError(f"Invalid status {value!r}. Expected one of: {allowed}")


class FeedbackService:
    """Creates feedback records and applies admin status changes."""

    def __init__(
        self,
        session: AsyncSession,
        boundary: BoundaryGate,
        image_host: ImageHost,
        notifier: Notifier,
    ):
        self.session = session
        self.boundary = boundary
        self.image_host = image_host
        self.notifier = notifier

    async def submit(
        self,
        name: Optional[str],
        comment: Optional[str],
        latitude: Any,
        longitude: Any,
        image: Optional[ImageUpload] = None,
    ) -> Feedback:
        """
        Validate and store a visitor submission.

        Coordinates are checked before anything else, then the boundary gate.
        When an image upload is attempted and fails, nothing is stored.
        """
        lat, lon = parse_point(latitude, longitude)
        self.boundary.require(lat, lon)

        image_url = None
        if image is not None:
            image_url = await self.image_host.upload(image, folder=FEEDBACK_IMAGE_FOLDER)

        feedback = Feedback(
            name=name or "",
            comment=comment or "",
            latitude=lat,
            longitude=lon,
            image_url=image_url,
            status=FeedbackStatus.PENDING,
        )
        self.session.add(feedback)
        await self.session.commit()
        await self.session.refresh(feedback)
        logger.info(f"Feedback {feedback.id} saved at ({lat:.5f}, {lon:.5f})")

        try:
            await self.notifier.feedback_submitted(feedback)
        except Exception as e:
            logger.error(f"Feedback notification failed for {feedback.id}: {e}")

        return feedback

    async def list_all(self) -> List[Feedback]:
        """All feedback, newest first."""
        result = await self.session.execute(
            select(Feedback).order_by(desc(Feedback.created_at), desc(Feedback.id))
        )
        return list(result.scalars().all())

    async def set_status(self, feedback_id: Union[uuid.UUID, str], status: Any) -> Feedback:
        """Change the review status. Unknown ids raise ``NotFoundError``."""
        new_status = parse_status(status)

        if not isinstance(feedback_id, uuid.UUID):
            try:
                feedback_id = uuid.UUID(str(feedback_id))
            except ValueError:
                raise NotFoundError(f"Feedback {feedback_id} not found")

        feedback = await self.session.get(Feedback, feedback_id)
        if feedback is None:
            raise NotFoundError(f"Feedback {feedback_id} not found")

        previous = feedback.status
        feedback.status = new_status
        await self.session.commit()
        await self.session.refresh(feedback)
        logger.info(f"Feedback {feedback_id} status {previous.value} -> {new_status.value}")
        return feedback
