"""API endpoint modules for v1."""

from fast_track.api.v1.endpoints import fasts, meals, notifications, workouts

__all__ = [
    "fasts",
    "meals",
    "notifications",
    "workouts",
]
