"""Once-per-day delivery backed by notification receipts."""
from __future__ import annotations

import uuid
from datetime import date
from typing import Callable

from loguru import logger

from fast_track.services.push import DeliveryReport
from fast_track.services.reminder_store import ReminderStore


def deliver_claimed(
    store: ReminderStore,
    user_id: uuid.UUID,
    kind: str,
    on_date: date,
    send: Callable[[], DeliveryReport],
) -> bool:
    """Send a notification whose receipt is already claimed.

    The receipt is released when sending raises or no device accepted the
    payload, so the next tick tries again. Returns True when delivered.
    """

    try:
        report = send()
    except Exception:
        store.release_receipt(user_id, kind, on_date)
        raise

    if report.undelivered:
        store.release_receipt(user_id, kind, on_date)
        logger.warning(
            "Reminder not delivered",
            user_id=str(user_id),
            kind=kind,
            failed=report.failed,
        )
        return False
    return True
