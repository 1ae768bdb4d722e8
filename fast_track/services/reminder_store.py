"""Queries and guard updates used by the reminder evaluators."""
from __future__ import annotations

import uuid
from datetime import date
from operator import attrgetter
from typing import Any, NamedTuple

from sqlalchemy import delete, exists, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from sqlalchemy.orm.attributes import set_committed_value

from fast_track.db.models.daily_activity import DailyActivity
from fast_track.db.models.fast import Fast
from fast_track.db.models.meal import Meal
from fast_track.db.models.notification_receipt import NotificationReceipt
from fast_track.db.models.push_subscription import PushSubscription
from fast_track.db.models.user import User
from fast_track.schemas.notification import NotificationPreferences

FAST_GUARD_FIELDS = ("notified_80_percent", "notified_complete")


class Recipient(NamedTuple):
    """A user together with their validated notification preferences."""

    user: User
    preferences: NotificationPreferences


class ReminderStore:
    """Data access for the reminder scheduler.

    The scheduler never creates or deletes tracking records. Guard flags and
    notification receipts are claimed before a send and released again when
    no device accepted the notification.
    """

    def __init__(self, db: Session):
        self.db = db

    def find_active_fasts(self) -> list[Fast]:
        stmt = select(Fast).where(Fast.end_time.is_(None), Fast.is_completed.is_(False))
        return list(self.db.scalars(stmt).all())

    def get_preferences(self, user_id: uuid.UUID) -> NotificationPreferences | None:
        user = self.db.get(User, user_id)
        return user.preferences if user is not None else None

    def find_users_with_preference(self, path: str, value: Any) -> list[Recipient]:
        """Return users whose typed preferences resolve ``path`` to ``value``.

        ``path`` is a dotted attribute path on ``NotificationPreferences`` such
        as ``"meals.enabled"`` or ``"meal_reminders_enabled"``.
        """

        resolve = attrgetter(path)
        users = self.db.scalars(select(User).where(User.notification_preferences.is_not(None))).all()
        recipients = []
        for user in users:
            preferences = user.preferences
            if resolve(preferences) == value:
                recipients.append(Recipient(user, preferences))
        return recipients

    def find_daily_activity(self, user_id: uuid.UUID, on_date: date) -> DailyActivity | None:
        stmt = select(DailyActivity).where(
            DailyActivity.user_id == user_id, DailyActivity.date == on_date
        )
        return self.db.scalars(stmt).first()

    def exists_meal_log(self, user_id: uuid.UUID, meal_type: str, on_date: date) -> bool:
        stmt = select(
            exists().where(Meal.user_id == user_id, Meal.type == meal_type, Meal.date == on_date)
        )
        return bool(self.db.scalar(stmt))

    def exists_push_subscription(self, user_id: uuid.UUID) -> bool:
        stmt = select(exists().where(PushSubscription.user_id == user_id))
        return bool(self.db.scalar(stmt))

    def claim_fast_guard(self, fast: Fast, field: str) -> bool:
        """Atomically flip a guard flag from False to True.

        Returns False when another run already claimed it.
        """

        if field not in FAST_GUARD_FIELDS:
            raise ValueError(f"Unknown guard field: {field}")

        column = getattr(Fast, field)
        result = self.db.execute(
            update(Fast)
            .where(Fast.id == fast.id, column.is_(False))
            .values({field: True})
            .execution_options(synchronize_session=False)
        )
        self.db.commit()
        claimed = result.rowcount == 1
        if claimed:
            set_committed_value(fast, field, True)
        return claimed

    def release_fast_guard(self, fast: Fast, field: str) -> None:
        """Undo a claim whose notification could not be delivered."""

        if field not in FAST_GUARD_FIELDS:
            raise ValueError(f"Unknown guard field: {field}")

        column = getattr(Fast, field)
        self.db.execute(
            update(Fast)
            .where(Fast.id == fast.id, column.is_(True))
            .values({field: False})
            .execution_options(synchronize_session=False)
        )
        self.db.commit()
        set_committed_value(fast, field, False)

    def claim_receipt(self, user_id: uuid.UUID, kind: str, on_date: date) -> bool:
        """Insert the (user, kind, date) receipt; False when it already exists."""

        self.db.add(NotificationReceipt(user_id=user_id, kind=kind, reference_date=on_date))
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            return False
        return True

    def release_receipt(self, user_id: uuid.UUID, kind: str, on_date: date) -> None:
        self.db.execute(
            delete(NotificationReceipt).where(
                NotificationReceipt.user_id == user_id,
                NotificationReceipt.kind == kind,
                NotificationReceipt.reference_date == on_date,
            )
        )
        self.db.commit()

    def save(self, entity: Any) -> Any:
        """Persist a changed or new record and return it."""

        self.db.add(entity)
        self.db.commit()
        return entity
