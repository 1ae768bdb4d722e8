"""API router for version 1."""
from fastapi import APIRouter

from fast_track.api.v1.endpoints import fasts, meals, notifications, workouts


api_router = APIRouter()
api_router.include_router(notifications.router)
api_router.include_router(fasts.router)
api_router.include_router(meals.router)
api_router.include_router(workouts.router)
