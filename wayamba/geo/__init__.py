"""Geographic helpers."""

from wayamba.geo.boundary import BoundaryGate, BoundaryLoadError

__all__ = ["BoundaryGate", "BoundaryLoadError"]
