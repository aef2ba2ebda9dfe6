"""Tourism asset (point of interest) model."""

from typing import Optional

from sqlalchemy import Float, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from wayamba.models.base import Base


class TourismAsset(Base):
    """A point of interest shown on the public map."""
    
    __tablename__ = "tourism_assets"
    
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    # Free-text tag: religious, heritage, nature, urban, accommodation, ...
    category: Mapped[Optional[str]] = mapped_column(String(100), nullable=True, index=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    latitude: Mapped[float] = mapped_column(Float, nullable=False)
    longitude: Mapped[float] = mapped_column(Float, nullable=False)
    image_url: Mapped[Optional[str]] = mapped_column(String(1024), nullable=True)
    
    def __repr__(self) -> str:
        return f"<TourismAsset {self.name} ({self.category})>"
