"""Visitor feedback model."""

import enum
from typing import Optional

from sqlalchemy import Enum, Float, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from wayamba.models.base import Base


class FeedbackStatus(str, enum.Enum):
    """Review status set by an administrator."""
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class Feedback(Base):
    """Geotagged feedback submitted by a visitor."""
    
    __tablename__ = "feedback"
    
    name: Mapped[str] = mapped_column(Text, nullable=False, default="")
    comment: Mapped[str] = mapped_column(Text, nullable=False, default="")
    latitude: Mapped[float] = mapped_column(Float, nullable=False)
    longitude: Mapped[float] = mapped_column(Float, nullable=False)
    image_url: Mapped[Optional[str]] = mapped_column(String(1024), nullable=True)
    status: Mapped[FeedbackStatus] = mapped_column(
        Enum(
            FeedbackStatus,
            name="feedback_status",
            native_enum=False,
            length=20,
            values_callable=lambda statuses: [s.value for s in statuses],
        ),
        default=FeedbackStatus.PENDING,
        nullable=False,
        index=True,
    )
    
    def __repr__(self) -> str:
        return f"<Feedback {self.id} ({self.status.value})>"
