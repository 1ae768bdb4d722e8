"""Daily goal nudges shortly before the user's reminder hour."""
from __future__ import annotations

from datetime import datetime
from functools import partial

from loguru import logger

from fast_track.config import settings
from fast_track.db.models.daily_activity import DailyActivity
from fast_track.db.session import SessionLocal
from fast_track.reminders.receipts import deliver_claimed
from fast_track.reminders.timeutils import local_now
from fast_track.schemas.notification import NotificationPreferences
from fast_track.services.notification_service import NotificationService
from fast_track.services.reminder_store import ReminderStore

DAILY_GOAL_RECEIPT = "daily_goal"
ENCOURAGEMENT_THRESHOLD = 2

# Category order per policy, paired with the activity flag that completes it.
NUDGE_ORDER = (("meals", "meals_logged"), ("workout", "workout_completed"), ("fasting", "fast_completed"))
SUMMARY_ORDER = (("fasting", "fast_completed"), ("meals", "meals_logged"), ("workout", "workout_completed"))


def incomplete_goals(activity: DailyActivity | None, order=NUDGE_ORDER) -> list[str]:
    """Goal categories still open today; a missing summary means none are done."""

    return [
        category
        for category, flag in order
        if activity is None or not getattr(activity, flag)
    ]


def is_reminder_hour(preferences: NotificationPreferences, now: datetime) -> bool:
    # The job runs at :55, so the upcoming hour counts as well. 23:55 does not reach 00:xx.
    reminder_hour = preferences.daily_goal.reminder_time.hour
    return reminder_hour in (now.hour, now.hour + 1)


def check_daily_goals(now: datetime | None = None, policy: str | None = None) -> dict[str, int]:
    """Nudge users who still have incomplete daily goals.

    ``nudge`` policy: fire at each user's reminder hour with the incomplete list.
    ``evening_summary`` policy: fire only at ``DAILY_GOAL_SUMMARY_HOUR`` and send
    encouragement when at least two goals are done, a reminder otherwise.
    """

    now = now or local_now()
    policy = policy or settings.DAILY_GOAL_POLICY
    today = now.date()
    summary = {"users": 0, "reminders": 0, "encouragements": 0, "failed": 0}

    if policy == "evening_summary" and now.hour != settings.DAILY_GOAL_SUMMARY_HOUR:
        return summary

    db = SessionLocal()
    store = ReminderStore(db)
    notifier = NotificationService(db)

    try:
        recipients = store.find_users_with_preference("daily_goal_enabled", True)
        for user, preferences in recipients:
            user_id = user.id
            try:
                if policy == "nudge" and not is_reminder_hour(preferences, now):
                    continue
                if not store.exists_push_subscription(user_id):
                    continue
                summary["users"] += 1

                activity = store.find_daily_activity(user_id, today)
                order = SUMMARY_ORDER if policy == "evening_summary" else NUDGE_ORDER
                incomplete = incomplete_goals(activity, order)
                completed_count = len(order) - len(incomplete)
                encourage = policy == "evening_summary" and completed_count >= ENCOURAGEMENT_THRESHOLD

                if not encourage and not incomplete:
                    continue
                if not store.claim_receipt(user_id, DAILY_GOAL_RECEIPT, today):
                    continue

                if encourage:
                    send = partial(notifier.send_daily_goal_encouragement, user_id, completed_count, today)
                elif policy == "evening_summary":
                    send = partial(notifier.send_daily_goal_reminder, user_id, incomplete, today)
                else:
                    send = partial(notifier.send_daily_goal_nudge, user_id, incomplete, today)

                if not deliver_claimed(store, user_id, DAILY_GOAL_RECEIPT, today, send):
                    summary["failed"] += 1
                    continue

                if encourage:
                    summary["encouragements"] += 1
                    logger.info(
                        "Daily goal encouragement sent",
                        user_id=str(user_id),
                        completed_count=completed_count,
                    )
                else:
                    summary["reminders"] += 1
                    logger.info("Daily goal reminder sent", user_id=str(user_id), incomplete=incomplete)
            except Exception:
                db.rollback()
                summary["failed"] += 1
                logger.exception("Daily goal reminder failed", user_id=str(user_id))

        logger.debug("Daily goals checked", policy=policy, **summary)
        return summary
    finally:
        db.close()
