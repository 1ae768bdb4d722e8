"""Meal logging endpoints."""
from __future__ import annotations

import uuid
from datetime import date

from fastapi import APIRouter, Depends, Query, status

from fast_track.api import deps
from fast_track.db.models.user import User
from fast_track.schemas import MealCreate, MealRead
from fast_track.services.tracking import MealService
from fast_track.utils.exceptions import NotFoundError, handle_not_found_error

router = APIRouter(prefix="/meals", tags=["meals"])


@router.get("/", response_model=list[MealRead])
def list_meals(
    on_date: date = Query(..., alias="date", description="Day to list (YYYY-MM-DD)"),
    service: MealService = Depends(deps.get_meal_service),
    current_user: User = Depends(deps.get_current_user),
):
    return service.list_for_date(current_user.id, on_date)


@router.post("/", response_model=MealRead, status_code=status.HTTP_201_CREATED)
def log_meal(
    payload: MealCreate,
    service: MealService = Depends(deps.get_meal_service),
    current_user: User = Depends(deps.get_current_user),
):
    """Log a meal; this also marks meals as logged in the day's goal summary."""

    return service.log(current_user.id, payload)


@router.delete("/{meal_id}")
def delete_meal(
    meal_id: uuid.UUID,
    service: MealService = Depends(deps.get_meal_service),
    current_user: User = Depends(deps.get_current_user),
) -> dict[str, str]:
    try:
        service.delete(current_user.id, meal_id)
    except NotFoundError as exc:
        raise handle_not_found_error(exc) from exc
    return {"message": "Meal deleted"}
