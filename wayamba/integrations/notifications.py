"""
Operator notifications for new feedback.

``SendGridNotifier`` emails the operators through SendGrid. ``NullNotifier``
is used when email is not configured and only writes a log line. Callers
treat notification as best effort.
"""
import asyncio
import logging
from typing import Protocol, runtime_checkable

from sendgrid import SendGridAPIClient
from sendgrid.helpers.mail import Mail

from wayamba.config import Settings
from wayamba.models import Feedback

logger = logging.getLogger("Wayamba.notify")


class NotificationError(RuntimeError):
    """The mail relay refused a message."""


@runtime_checkable
class Notifier(Protocol):
    async def feedback_submitted(self, feedback: Feedback) -> None: ...


class NullNotifier:
    async def feedback_submitted(self, feedback: Feedback) -> None:
        logger.debug(f"Email not configured, skipping notification for feedback {feedback.id}")


class SendGridNotifier:
    def __init__(self, api_key: str, from_email: str, to_email: str):
        self.client = SendGridAPIClient(api_key)
        self.from_email = from_email
        self.to_email = to_email

    def build_message(self, feedback: Feedback) -> Mail:
        return Mail(
            from_email=self.from_email,
            to_emails=self.to_email,
            subject="New Tourist Feedback Submitted",
            plain_text_content=(
                f"New feedback from {feedback.name or 'anonymous'}.\n\n"
                f"{feedback.comment}\n\n"
                f"Location: {feedback.latitude:.5f}, {feedback.longitude:.5f}\n"
                f"Photo: {feedback.image_url or 'none'}"
            ),
        )

    async def feedback_submitted(self, feedback: Feedback) -> None:
        message = self.build_message(feedback)
        # The SendGrid client is blocking.
        response = await asyncio.to_thread(self.client.send, message)
        if response.status_code not in (200, 201, 202):
            raise NotificationError(f"SendGrid returned status {response.status_code}")
        logger.info(f"Feedback notification sent to {self.to_email}")


def build_notifier(settings: Settings) -> Notifier:
    if settings.email_configured:
        return SendGridNotifier(
            settings.sendgrid_api_key,
            settings.notify_from_email,
            settings.notify_to_email or settings.notify_from_email,
        )
    logger.warning("Email settings not found. Email notifications will not work.")
    return NullNotifier()
