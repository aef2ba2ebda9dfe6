"""Business logic used by the HTTP handlers."""

from wayamba.services.assets import AssetCatalog
from wayamba.services.exports import feedback_to_csv, feedback_to_pdf
from wayamba.services.feedback import FeedbackService

__all__ = ["AssetCatalog", "FeedbackService", "feedback_to_csv", "feedback_to_pdf"]
