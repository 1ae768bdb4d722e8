"""Fasting progress alerts at 80 % and 100 % of the goal."""
from __future__ import annotations

from datetime import datetime
from functools import partial
from typing import Callable

from loguru import logger

from fast_track.db.models.fast import Fast
from fast_track.db.session import SessionLocal
from fast_track.reminders.timeutils import as_utc, format_time_remaining, local_now
from fast_track.schemas.notification import NotificationPreferences
from fast_track.services.notification_service import NotificationService
from fast_track.services.push import DeliveryReport
from fast_track.services.reminder_store import ReminderStore

PROGRESS_ALERT_PERCENT = 80.0
# The 80 % alert only fires inside [80, 85); a fast first seen past 85 % skips it.
PROGRESS_ALERT_CEILING = 85.0
COMPLETE_PERCENT = 100.0


def fast_progress(fast: Fast, now: datetime) -> tuple[float, float]:
    """Return ``(progress_percent, remaining_hours)`` for a fast at ``now``."""

    elapsed_seconds = (as_utc(now) - as_utc(fast.start_time)).total_seconds()
    goal_seconds = fast.goal_hours * 3600
    progress = elapsed_seconds * 100 / goal_seconds
    remaining_hours = max(0.0, (goal_seconds - elapsed_seconds) / 3600)
    return progress, remaining_hours


def _deliver_alert(
    fast: Fast,
    field: str,
    send: Callable[[], DeliveryReport],
    store: ReminderStore,
) -> bool:
    """Send an alert whose guard is already claimed; release the guard if nothing was delivered."""

    try:
        report = send()
    except Exception:
        store.release_fast_guard(fast, field)
        raise

    if report.undelivered:
        store.release_fast_guard(fast, field)
        logger.warning(
            "Fasting notification not delivered",
            user_id=str(fast.user_id),
            fast_id=str(fast.id),
            guard=field,
            failed=report.failed,
        )
        return False
    return True


def _process_fast(
    fast: Fast,
    preferences: NotificationPreferences,
    now: datetime,
    store: ReminderStore,
    notifier: NotificationService,
) -> tuple[int, int, int]:
    progress, remaining_hours = fast_progress(fast, now)
    progress_sent = complete_sent = failed = 0

    if (
        not fast.notified_80_percent
        and PROGRESS_ALERT_PERCENT <= progress < PROGRESS_ALERT_CEILING
        and preferences.fasting.alert_at_80_percent
        and store.claim_fast_guard(fast, "notified_80_percent")
    ):
        if _deliver_alert(
            fast,
            "notified_80_percent",
            partial(notifier.send_fasting_progress_alert, fast, format_time_remaining(remaining_hours)),
            store,
        ):
            progress_sent = 1
            logger.info(
                "80% fasting notification sent",
                user_id=str(fast.user_id),
                fast_id=str(fast.id),
                progress=round(progress, 1),
            )
        else:
            failed += 1

    if (
        not fast.notified_complete
        and progress >= COMPLETE_PERCENT
        and preferences.fasting.alert_at_goal
        and store.claim_fast_guard(fast, "notified_complete")
    ):
        if _deliver_alert(
            fast,
            "notified_complete",
            partial(notifier.send_fasting_complete_alert, fast),
            store,
        ):
            complete_sent = 1
            logger.info(
                "100% fasting notification sent",
                user_id=str(fast.user_id),
                fast_id=str(fast.id),
            )
        else:
            failed += 1

    return progress_sent, complete_sent, failed


def check_fasting_progress(now: datetime | None = None) -> dict[str, int]:
    """Send progress and completion alerts for every active fast."""

    now = now or local_now()
    db = SessionLocal()
    store = ReminderStore(db)
    notifier = NotificationService(db)
    summary = {"checked": 0, "progress_alerts": 0, "completion_alerts": 0, "failed": 0}

    try:
        fasts = store.find_active_fasts()
        for fast in fasts:
            summary["checked"] += 1
            user_id, fast_id = fast.user_id, fast.id
            try:
                preferences = store.get_preferences(user_id)
                if preferences is None or not preferences.fasting_alerts_enabled:
                    continue
                if not store.exists_push_subscription(user_id):
                    continue

                progress_sent, complete_sent, failed = _process_fast(
                    fast, preferences, now, store, notifier
                )
                summary["progress_alerts"] += progress_sent
                summary["completion_alerts"] += complete_sent
                summary["failed"] += failed
            except Exception:
                db.rollback()
                summary["failed"] += 1
                logger.exception(
                    "Fasting notification failed",
                    user_id=str(user_id),
                    fast_id=str(fast_id),
                )

        logger.debug("Fasting progress checked", **summary)
        return summary
    finally:
        db.close()
