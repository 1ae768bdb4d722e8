"""Tests for the reminder data access layer."""
from __future__ import annotations

from datetime import date, datetime, timedelta, timezone

from fast_track.db.models.fast import Fast
from fast_track.db.models.notification_receipt import NotificationReceipt
from fast_track.services.reminder_store import ReminderStore

TODAY = date(2026, 1, 15)


def test_save_persists_new_records(db_session, make_user):
    user = make_user()
    store = ReminderStore(db_session)

    fast = store.save(
        Fast(user_id=user.id, start_time=datetime.now(timezone.utc) - timedelta(hours=1), goal_hours=16)
    )

    assert fast.id is not None
    assert store.find_active_fasts() == [fast]


def test_fast_guard_can_be_claimed_once_and_released(db_session, make_user):
    user = make_user()
    store = ReminderStore(db_session)
    fast = store.save(Fast(user_id=user.id, start_time=datetime.now(timezone.utc), goal_hours=16))

    assert store.claim_fast_guard(fast, "notified_complete") is True
    assert store.claim_fast_guard(fast, "notified_complete") is False

    store.release_fast_guard(fast, "notified_complete")

    assert fast.notified_complete is False
    assert store.claim_fast_guard(fast, "notified_complete") is True


def test_receipt_release_allows_a_new_claim(db_session, make_user):
    user = make_user()
    store = ReminderStore(db_session)

    assert store.claim_receipt(user.id, "meal:lunch", TODAY) is True
    assert store.claim_receipt(user.id, "meal:lunch", TODAY) is False

    store.release_receipt(user.id, "meal:lunch", TODAY)

    assert db_session.query(NotificationReceipt).count() == 0
    assert store.claim_receipt(user.id, "meal:lunch", TODAY) is True


def test_users_with_invalid_preferences_fall_back_to_defaults(db_session, make_user):
    enabled = make_user({"enabled": True, "meals": {"enabled": True, "lunch_time": "12:30"}})
    broken = make_user()
    broken.notification_preferences = {"enabled": "definitely", "meals": {"lunch_time": "noon"}}
    db_session.commit()
    store = ReminderStore(db_session)

    recipients = store.find_users_with_preference("meal_reminders_enabled", True)

    assert [recipient.user.id for recipient in recipients] == [enabled.id]
    assert store.get_preferences(broken.id).enabled is False
