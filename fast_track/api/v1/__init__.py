from fast_track.api.v1.api import api_router

__all__ = ["api_router"]
