"""Ownership-scoped write paths for fasts, meals, workouts and the daily activity summary."""
from __future__ import annotations

import uuid
from datetime import date, datetime, timezone

from loguru import logger
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from fast_track.db.models.daily_activity import DailyActivity
from fast_track.db.models.fast import Fast
from fast_track.db.models.meal import Meal
from fast_track.db.models.workout_log import WorkoutLog
from fast_track.reminders.timeutils import as_utc, local_date, local_now
from fast_track.schemas import FastCreate, FastUpdate, MealCreate, WorkoutEnd, WorkoutStart
from fast_track.utils.exceptions import NotFoundError, ValidationError

DAILY_FLAGS = ("fast_completed", "meals_logged", "workout_completed", "streak_maintained")


class DailyActivityService:
    """Maintain the one-row-per-day goal summary."""

    def __init__(self, db: Session):
        self.db = db

    def mark(self, user_id: uuid.UUID, flag: str, on_date: date | None = None) -> DailyActivity:
        """Set one goal flag for ``on_date`` (today by default), creating the row if needed."""

        if flag not in DAILY_FLAGS:
            raise ValueError(f"Unknown daily activity flag: {flag}")

        on_date = on_date or local_now().date()
        activity = self._get(user_id, on_date)
        if activity is None:
            activity = DailyActivity(user_id=user_id, date=on_date)
            self.db.add(activity)
            try:
                self.db.flush()
            except IntegrityError:
                # Created concurrently by another request
                self.db.rollback()
                activity = self._get(user_id, on_date)

        setattr(activity, flag, True)
        self.db.commit()
        return activity

    def _get(self, user_id: uuid.UUID, on_date: date) -> DailyActivity | None:
        stmt = select(DailyActivity).where(
            DailyActivity.user_id == user_id, DailyActivity.date == on_date
        )
        return self.db.scalars(stmt).first()


class FastService:
    """Start, end and list a user's fasts."""

    def __init__(self, db: Session):
        self.db = db
        self.activity = DailyActivityService(db)

    def list_fasts(self, user_id: uuid.UUID) -> list[Fast]:
        stmt = select(Fast).where(Fast.user_id == user_id).order_by(Fast.start_time.desc())
        return list(self.db.scalars(stmt).all())

    def current(self, user_id: uuid.UUID) -> Fast | None:
        stmt = select(Fast).where(Fast.user_id == user_id, Fast.end_time.is_(None))
        return self.db.scalars(stmt).first()

    def get(self, user_id: uuid.UUID, fast_id: uuid.UUID) -> Fast:
        fast = self.db.get(Fast, fast_id)
        if fast is None or fast.user_id != user_id:
            raise NotFoundError("Fast not found")
        return fast

    def start(self, user_id: uuid.UUID, payload: FastCreate) -> Fast:
        if self.current(user_id) is not None:
            raise ValidationError("Already have an active fast")

        fast = Fast(
            user_id=user_id,
            start_time=payload.start_time or datetime.now(timezone.utc),
            goal_hours=payload.goal_hours,
        )
        self.db.add(fast)
        self.db.commit()
        self.db.refresh(fast)
        logger.info("Fast started", user_id=str(user_id), fast_id=str(fast.id), goal_hours=fast.goal_hours)
        return fast

    def update(self, user_id: uuid.UUID, fast_id: uuid.UUID, payload: FastUpdate) -> Fast:
        """Annotate a fast, or end it when ``end_time`` or ``is_completed`` is sent.

        Completion is decided from the duration: the fast counts only if it
        lasted at least ``goal_hours``, and then the end date is marked in the
        daily summary.
        """

        fast = self.get(user_id, fast_id)

        ending = payload.end_time is not None or bool(payload.is_completed)
        if ending:
            if fast.end_time is not None:
                raise ValidationError("Fast already ended")

            end_time = payload.end_time or datetime.now(timezone.utc)
            elapsed_hours = (as_utc(end_time) - as_utc(fast.start_time)).total_seconds() / 3600
            if elapsed_hours < 0:
                raise ValidationError("End time must be after the start time")

            fast.end_time = end_time
            fast.is_completed = elapsed_hours >= fast.goal_hours

        if "notes" in payload.model_fields_set:
            fast.notes = payload.notes
        self.db.commit()
        if ending and fast.is_completed:
            self.activity.mark(user_id, "fast_completed", local_date(end_time))
        self.db.refresh(fast)
        if ending:
            logger.info(
                "Fast ended",
                user_id=str(user_id),
                fast_id=str(fast.id),
                is_completed=fast.is_completed,
            )
        return fast

    def delete(self, user_id: uuid.UUID, fast_id: uuid.UUID) -> None:
        fast = self.get(user_id, fast_id)
        self.db.delete(fast)
        self.db.commit()


class MealService:
    """Log and list a user's meals."""

    def __init__(self, db: Session):
        self.db = db
        self.activity = DailyActivityService(db)

    def list_for_date(self, user_id: uuid.UUID, on_date: date) -> list[Meal]:
        stmt = (
            select(Meal)
            .where(Meal.user_id == user_id, Meal.date == on_date)
            .order_by(Meal.created_at.desc())
        )
        return list(self.db.scalars(stmt).all())

    def log(self, user_id: uuid.UUID, payload: MealCreate) -> Meal:
        meal_date = payload.date or local_now().date()
        meal = Meal(
            user_id=user_id,
            date=meal_date,
            type=payload.type,
            foods=[food.model_dump(exclude_none=True) for food in payload.foods],
            total_calories=payload.total_calories,
        )
        self.db.add(meal)
        self.db.commit()
        self.activity.mark(user_id, "meals_logged", meal_date)
        self.db.refresh(meal)
        return meal

    def delete(self, user_id: uuid.UUID, meal_id: uuid.UUID) -> None:
        meal = self.db.get(Meal, meal_id)
        if meal is None or meal.user_id != user_id:
            raise NotFoundError("Meal not found")
        self.db.delete(meal)
        self.db.commit()


class WorkoutService:
    """Start, end and list a user's workouts."""

    def __init__(self, db: Session):
        self.db = db
        self.activity = DailyActivityService(db)

    def list_logs(self, user_id: uuid.UUID) -> list[WorkoutLog]:
        stmt = (
            select(WorkoutLog)
            .where(WorkoutLog.user_id == user_id)
            .order_by(WorkoutLog.start_time.desc())
        )
        return list(self.db.scalars(stmt).all())

    def active(self, user_id: uuid.UUID) -> WorkoutLog | None:
        stmt = select(WorkoutLog).where(
            WorkoutLog.user_id == user_id,
            WorkoutLog.end_time.is_(None),
            WorkoutLog.is_completed.is_(False),
        )
        return self.db.scalars(stmt).first()

    def get(self, user_id: uuid.UUID, log_id: uuid.UUID) -> WorkoutLog:
        log = self.db.get(WorkoutLog, log_id)
        if log is None or log.user_id != user_id:
            raise NotFoundError("Workout not found")
        return log

    def start(self, user_id: uuid.UUID, payload: WorkoutStart) -> WorkoutLog:
        if self.active(user_id) is not None:
            raise ValidationError("You already have an active workout")

        log = WorkoutLog(
            user_id=user_id,
            start_time=payload.start_time or datetime.now(timezone.utc),
            exercises_completed=payload.exercises_completed,
        )
        self.db.add(log)
        self.db.commit()
        self.db.refresh(log)
        return log

    def end(self, user_id: uuid.UUID, log_id: uuid.UUID, payload: WorkoutEnd) -> WorkoutLog:
        """Close a workout; a completed one marks the end date in the daily summary."""

        log = self.get(user_id, log_id)
        if log.end_time is not None:
            raise ValidationError("Workout already ended")

        end_time = payload.end_time or datetime.now(timezone.utc)
        elapsed_minutes = (as_utc(end_time) - as_utc(log.start_time)).total_seconds() / 60
        if elapsed_minutes < 0:
            raise ValidationError("End time must be after the start time")

        log.end_time = end_time
        log.duration_minutes = round(elapsed_minutes)
        log.is_completed = payload.is_completed
        if payload.exercises_completed is not None:
            log.exercises_completed = payload.exercises_completed
        self.db.commit()

        if log.is_completed:
            self.activity.mark(user_id, "workout_completed", local_date(end_time))
        self.db.refresh(log)
        logger.info(
            "Workout ended",
            user_id=str(user_id),
            workout_id=str(log.id),
            is_completed=log.is_completed,
        )
        return log

    def delete(self, user_id: uuid.UUID, log_id: uuid.UUID) -> None:
        log = self.get(user_id, log_id)
        self.db.delete(log)
        self.db.commit()
