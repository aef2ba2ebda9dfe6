"""Liveness endpoint."""

from litestar import get
from litestar.datastructures import State


@get("/health", sync_to_thread=False)
def health(state: State) -> dict:
    """Report liveness and whether the province boundary is available."""
    return {"status": "ok", "boundary_loaded": state.boundary.is_loaded}
