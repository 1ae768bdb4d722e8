"""Fasting session endpoints."""
from __future__ import annotations

import uuid
from typing import Optional

from fastapi import APIRouter, Depends, status

from fast_track.api import deps
from fast_track.db.models.user import User
from fast_track.schemas import FastCreate, FastRead, FastUpdate
from fast_track.services.tracking import FastService
from fast_track.utils.exceptions import (
    NotFoundError,
    ValidationError,
    handle_not_found_error,
    handle_validation_error,
)

router = APIRouter(prefix="/fasts", tags=["fasts"])


@router.get("/", response_model=list[FastRead])
def list_fasts(
    service: FastService = Depends(deps.get_fast_service),
    current_user: User = Depends(deps.get_current_user),
):
    """Return the user's fasts, newest first."""

    return service.list_fasts(current_user.id)


@router.get("/current", response_model=Optional[FastRead])
def current_fast(
    service: FastService = Depends(deps.get_fast_service),
    current_user: User = Depends(deps.get_current_user),
):
    return service.current(current_user.id)


@router.post("/", response_model=FastRead, status_code=status.HTTP_201_CREATED)
def start_fast(
    payload: FastCreate,
    service: FastService = Depends(deps.get_fast_service),
    current_user: User = Depends(deps.get_current_user),
):
    try:
        return service.start(current_user.id, payload)
    except ValidationError as exc:
        raise handle_validation_error(exc) from exc


@router.put("/{fast_id}", response_model=FastRead)
def update_fast(
    fast_id: uuid.UUID,
    payload: FastUpdate,
    service: FastService = Depends(deps.get_fast_service),
    current_user: User = Depends(deps.get_current_user),
):
    """End or annotate a fast. It counts toward the daily goals only if it reached its goal."""

    try:
        return service.update(current_user.id, fast_id, payload)
    except NotFoundError as exc:
        raise handle_not_found_error(exc) from exc
    except ValidationError as exc:
        raise handle_validation_error(exc) from exc


@router.delete("/{fast_id}")
def delete_fast(
    fast_id: uuid.UUID,
    service: FastService = Depends(deps.get_fast_service),
    current_user: User = Depends(deps.get_current_user),
) -> dict[str, str]:
    try:
        service.delete(current_user.id, fast_id)
    except NotFoundError as exc:
        raise handle_not_found_error(exc) from exc
    return {"message": "Fast deleted"}
