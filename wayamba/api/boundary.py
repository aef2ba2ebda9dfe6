"""Province outline for map clients."""

from litestar import MediaType, get
from litestar.datastructures import State

from wayamba.errors import ServiceUnavailable


@get(["/api/boundary", "/data/NWP_BOUNDARY.geojson"], media_type=MediaType.JSON, sync_to_thread=False)
def province_boundary(state: State) -> dict:
    """The GeoJSON the boundary gate was loaded from."""
    if state.boundary.document is None:
        raise ServiceUnavailable("Province boundary data not loaded.")
    return state.boundary.document
