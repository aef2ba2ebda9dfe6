"""Province boundary gate.

The service only accepts points inside a single province polygon. The
polygon is read once at startup; a gate that failed to load stays unloaded
and every write path that depends on it fails closed.
"""

import json
import logging
import math
from pathlib import Path
from typing import Any, Optional, Union

from shapely import make_valid
from shapely.errors import GEOSException
from shapely.geometry import Point, shape
from shapely.geometry.base import BaseGeometry
from shapely.ops import unary_union
from shapely.prepared import PreparedGeometry, prep

from wayamba.errors import OutOfRegionError, ServiceUnavailable
from wayamba.utils.logging import debug_log

logger = logging.getLogger("Wayamba.boundary")

POLYGON_TYPES = ("Polygon", "MultiPolygon")


class BoundaryLoadError(ValueError):
    """The boundary document holds no usable polygon."""


def _extract_polygon(document: Any) -> BaseGeometry:
    """Return the polygon held by a GeoJSON geometry, Feature or FeatureCollection."""
    if not isinstance(document, dict):
        raise BoundaryLoadError("Boundary GeoJSON must be an object")

    kind = document.get("type")
    if kind == "FeatureCollection":
        geometries = [
            _extract_polygon(feature)
            for feature in document.get("features") or []
            if isinstance(feature, dict)
            and (feature.get("geometry") or {}).get("type") in POLYGON_TYPES
        ]
        if not geometries:
            raise BoundaryLoadError("FeatureCollection has no polygon features")
        return unary_union(geometries)

    if kind == "Feature":
        return _extract_polygon(document.get("geometry"))

    if kind in POLYGON_TYPES:
        return shape(document)

    raise BoundaryLoadError(f"Unsupported boundary geometry type: {kind!r}")


class BoundaryGate:
    """Answers whether a (lat, lon) coordinate lies inside the province."""

    def __init__(
        self,
        polygon: Optional[BaseGeometry] = None,
        source: Optional[str] = None,
        document: Optional[dict] = None,
    ):
        self._polygon = polygon
        # GeoJSON the polygon was read from, served back to map clients.
        self.document = document if polygon is not None else None
        self._prepared: Optional[PreparedGeometry] = prep(polygon) if polygon is not None else None
        self.source = source

    @classmethod
    def from_geojson(cls, document: Any, source: Optional[str] = None) -> "BoundaryGate":
        polygon = _extract_polygon(document)
        if polygon.is_empty:
            raise BoundaryLoadError("Boundary polygon is empty")
        if not polygon.is_valid:
            logger.warning(f"Boundary polygon from {source} is invalid, repairing it")
            polygon = make_valid(polygon)
        return cls(polygon, source=source, document=document)

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "BoundaryGate":
        """Load the boundary once. Any failure yields a permanently unloaded gate."""
        path = Path(path)
        try:
            document = json.loads(path.read_text(encoding="utf-8"))
            gate = cls.from_geojson(document, source=str(path))
        except (OSError, ValueError, TypeError, GEOSException) as e:
            logger.error(f"Could not load province boundary from {path}: {e}")
            return cls.unloaded(source=str(path))

        logger.info(f"Province boundary loaded from {path} (bounds: {gate.bounds})")
        return gate

    @classmethod
    def unloaded(cls, source: Optional[str] = None) -> "BoundaryGate":
        return cls(None, source=source)

    @property
    def is_loaded(self) -> bool:
        return self._prepared is not None

    @property
    def bounds(self) -> Optional[tuple]:
        return self._polygon.bounds if self._polygon is not None else None

    def contains(self, lat: float, lon: float) -> bool:
        """True when the point is inside the polygon or on its edge."""
        if self._prepared is None:
            return False
        if not (math.isfinite(lat) and math.isfinite(lon)):
            return False
        # GeoJSON order is (lon, lat).
        return self._prepared.covers(Point(lon, lat))

    def require(self, lat: float, lon: float) -> None:
        """Raise unless the point may be written: boundary loaded and point inside."""
        if not self.is_loaded:
            logger.error("Rejecting write: province boundary is not loaded")
            raise ServiceUnavailable("Province boundary data not loaded.")
        if not self.contains(lat, lon):
            debug_log(f"Point ({lat}, {lon}) is outside the province")
            raise OutOfRegionError()
