"""Input parsing shared by the write paths."""

import math
from typing import Any, Optional, Tuple

from wayamba.errors import ValidationError

COORDINATES_REQUIRED = "Latitude and Longitude are required."


def parse_coordinate(value: Any) -> Optional[float]:
    """Return ``value`` as a finite float, or None when it is missing or not a number."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def parse_point(latitude: Any, longitude: Any) -> Tuple[float, float]:
    """Parse a (lat, lon) pair or raise ``ValidationError``."""
    lat = parse_coordinate(latitude)
    lon = parse_coordinate(longitude)
    if lat is None or lon is None:
        raise ValidationError(COORDINATES_REQUIRED)
    return lat, lon
