"""Reminders for breakfast, lunch and dinner that have not been logged yet."""
from __future__ import annotations

from datetime import datetime
from functools import partial

from loguru import logger

from fast_track.config import settings
from fast_track.db.session import SessionLocal
from fast_track.reminders.receipts import deliver_claimed
from fast_track.reminders.timeutils import is_within_time_window, local_now
from fast_track.services.notification_service import NotificationService
from fast_track.services.reminder_store import ReminderStore


def meal_receipt_kind(meal_type: str) -> str:
    return f"meal:{meal_type}"


def check_meal_reminders(now: datetime | None = None) -> dict[str, int]:
    """Remind users about meals whose reminder time is within the window.

    A reminder is sent at most once per user, meal and day.
    """

    now = now or local_now()
    today = now.date()
    window = settings.MEAL_REMINDER_WINDOW_MINUTES
    db = SessionLocal()
    store = ReminderStore(db)
    notifier = NotificationService(db)
    summary = {"users": 0, "reminders": 0, "failed": 0}

    try:
        recipients = store.find_users_with_preference("meal_reminders_enabled", True)
        for user, preferences in recipients:
            user_id = user.id
            try:
                if not store.exists_push_subscription(user_id):
                    continue
                summary["users"] += 1

                for meal_type, reminder_time in preferences.meals.scheduled_meals().items():
                    if not is_within_time_window(now, reminder_time, window):
                        continue
                    if store.exists_meal_log(user_id, meal_type, today):
                        continue
                    kind = meal_receipt_kind(meal_type)
                    if not store.claim_receipt(user_id, kind, today):
                        continue

                    delivered = deliver_claimed(
                        store,
                        user_id,
                        kind,
                        today,
                        partial(notifier.send_meal_reminder, user_id, meal_type, today),
                    )
                    if not delivered:
                        summary["failed"] += 1
                        continue
                    summary["reminders"] += 1
                    logger.info("Meal reminder sent", user_id=str(user_id), meal_type=meal_type)
            except Exception:
                db.rollback()
                summary["failed"] += 1
                logger.exception("Meal reminder failed", user_id=str(user_id))

        logger.debug("Meal reminders checked", **summary)
        return summary
    finally:
        db.close()
