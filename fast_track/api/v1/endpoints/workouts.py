"""Workout log endpoints."""
from __future__ import annotations

import uuid
from typing import Optional

from fastapi import APIRouter, Depends, status

from fast_track.api import deps
from fast_track.db.models.user import User
from fast_track.schemas import WorkoutEnd, WorkoutRead, WorkoutStart
from fast_track.services.tracking import WorkoutService
from fast_track.utils.exceptions import (
    NotFoundError,
    ValidationError,
    handle_not_found_error,
    handle_validation_error,
)

router = APIRouter(prefix="/workouts", tags=["workouts"])


@router.get("/", response_model=list[WorkoutRead])
def list_workouts(
    service: WorkoutService = Depends(deps.get_workout_service),
    current_user: User = Depends(deps.get_current_user),
):
    return service.list_logs(current_user.id)


@router.get("/active", response_model=Optional[WorkoutRead])
def active_workout(
    service: WorkoutService = Depends(deps.get_workout_service),
    current_user: User = Depends(deps.get_current_user),
):
    return service.active(current_user.id)


@router.post("/", response_model=WorkoutRead, status_code=status.HTTP_201_CREATED)
def start_workout(
    payload: WorkoutStart,
    service: WorkoutService = Depends(deps.get_workout_service),
    current_user: User = Depends(deps.get_current_user),
):
    try:
        return service.start(current_user.id, payload)
    except ValidationError as exc:
        raise handle_validation_error(exc) from exc


@router.put("/{workout_id}/end", response_model=WorkoutRead)
def end_workout(
    workout_id: uuid.UUID,
    payload: WorkoutEnd,
    service: WorkoutService = Depends(deps.get_workout_service),
    current_user: User = Depends(deps.get_current_user),
):
    """End a workout. A completed workout counts toward the daily goals."""

    try:
        return service.end(current_user.id, workout_id, payload)
    except NotFoundError as exc:
        raise handle_not_found_error(exc) from exc
    except ValidationError as exc:
        raise handle_validation_error(exc) from exc


@router.delete("/{workout_id}")
def delete_workout(
    workout_id: uuid.UUID,
    service: WorkoutService = Depends(deps.get_workout_service),
    current_user: User = Depends(deps.get_current_user),
) -> dict[str, str]:
    try:
        service.delete(current_user.id, workout_id)
    except NotFoundError as exc:
        raise handle_not_found_error(exc) from exc
    return {"message": "Workout deleted"}
