"""Pydantic models for fasts, meal logs and workouts."""
from __future__ import annotations

import uuid
import datetime as dt
from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

MealType = Literal["breakfast", "lunch", "dinner", "snack"]


class FastCreate(BaseModel):
    """Start a fast; ``start_time`` defaults to now."""

    goal_hours: float = Field(gt=0, le=168)
    start_time: Optional[datetime] = None


class FastUpdate(BaseModel):
    """End or annotate a fast.

    Sending ``end_time`` or ``is_completed: true`` ends the fast; whether it
    counts as completed is decided from its duration.
    """

    end_time: Optional[datetime] = None
    is_completed: Optional[bool] = None
    notes: Optional[str] = None

    model_config = ConfigDict(extra="forbid")

    @model_validator(mode="after")
    def ensure_payload_not_empty(self) -> "FastUpdate":
        if not any(value is not None for value in self.model_dump().values()):
            raise ValueError("At least one field must be provided")
        return self

    @model_validator(mode="after")
    def reject_null_end_time(self) -> "FastUpdate":
        # An ended fast cannot be reopened.
        if "end_time" in self.model_fields_set and self.end_time is None:
            raise ValueError("end_time cannot be null")
        return self


class FastRead(BaseModel):
    id: uuid.UUID
    start_time: datetime
    end_time: Optional[datetime]
    goal_hours: float
    is_completed: bool
    notes: Optional[str]
    notified_80_percent: bool
    notified_complete: bool

    model_config = ConfigDict(from_attributes=True)


class FoodItem(BaseModel):
    name: str = Field(min_length=1)
    calories: float = Field(ge=0)
    protein: Optional[float] = Field(default=None, ge=0)
    carbs: Optional[float] = Field(default=None, ge=0)
    fat: Optional[float] = Field(default=None, ge=0)
    serving_size: Optional[str] = None


class MealCreate(BaseModel):
    """Log a meal; ``date`` defaults to today in the reminder timezone."""

    type: MealType
    foods: List[FoodItem] = Field(default_factory=list)
    total_calories: int = Field(ge=0)
    date: Optional[dt.date] = None


class MealRead(BaseModel):
    id: uuid.UUID
    date: dt.date
    type: MealType
    foods: List[FoodItem]
    total_calories: int

    model_config = ConfigDict(from_attributes=True)


class WorkoutStart(BaseModel):
    """Start a workout; ``start_time`` defaults to now."""

    start_time: Optional[datetime] = None
    exercises_completed: int = Field(default=0, ge=0)


class WorkoutEnd(BaseModel):
    end_time: Optional[datetime] = None
    is_completed: bool = True
    exercises_completed: Optional[int] = Field(default=None, ge=0)

    model_config = ConfigDict(extra="forbid")


class WorkoutRead(BaseModel):
    id: uuid.UUID
    start_time: datetime
    end_time: Optional[datetime]
    duration_minutes: int
    exercises_completed: int
    is_completed: bool

    model_config = ConfigDict(from_attributes=True)
