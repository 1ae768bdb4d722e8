"""FastAPI application factory."""
from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator, List

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from fast_track import __version__
from fast_track.api.v1 import api_router
from fast_track.config import settings
from fast_track.reminders import ReminderScheduler


tags_metadata: List[dict[str, str]] = [
    {"name": "notifications", "description": "Web Push subscriptions and reminder preferences."},
    {"name": "fasts", "description": "Start, end and review fasting sessions."},
    {"name": "meals", "description": "Log meals for the day."},
    {"name": "workouts", "description": "Start and finish workouts."},
]


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    scheduler = ReminderScheduler()
    app.state.reminder_scheduler = scheduler
    if settings.REMINDER_SCHEDULER_ENABLED:
        scheduler.start()
    try:
        yield
    finally:
        scheduler.stop()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application instance."""

    app = FastAPI(
        title=settings.PROJECT_NAME,
        description="Fasting, meal and daily goal tracking with push reminders.",
        version=__version__,
        openapi_tags=tags_metadata,
        docs_url=f"{settings.API_V1_STR}/docs",
        redoc_url=f"{settings.API_V1_STR}/redoc",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.BACKEND_CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={
                "detail": [
                    {key: value for key, value in error.items() if key != "ctx"}
                    for error in exc.errors()
                ],
                "message": "Validation failed",
            },
        )

    app.include_router(api_router, prefix=settings.API_V1_STR)
    return app


app = create_app()
