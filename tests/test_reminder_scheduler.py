"""Tests for the reminder dispatcher."""
from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from fast_track.config import Settings
from fast_track.reminders.scheduler import (
    DAILY_GOAL_JOB,
    FASTING_JOB,
    MEAL_JOB,
    ReminderScheduler,
)


def make_settings(**overrides) -> Settings:
    values = {
        "SECRET_KEY": "test-secret-key",
        "VAPID_PUBLIC_KEY": "public",
        "VAPID_PRIVATE_KEY": "private",
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


def test_scheduler_disabled_without_vapid_keys(reminder_sessions):
    backend = MagicMock()
    scheduler = ReminderScheduler(
        config=make_settings(VAPID_PUBLIC_KEY=None, VAPID_PRIVATE_KEY=None),
        scheduler=backend,
    )

    assert scheduler.start() is False

    backend.add_job.assert_not_called()
    backend.start.assert_not_called()
    for session_local in reminder_sessions:
        session_local.assert_not_called()


def test_scheduler_registers_each_cadence():
    scheduler = ReminderScheduler(config=make_settings())

    assert scheduler.start() is True
    try:
        assert scheduler.running
        jobs = {job.id: job for job in scheduler._scheduler.get_jobs()}
        assert set(jobs) == {FASTING_JOB, MEAL_JOB, DAILY_GOAL_JOB}
        assert "minute='*'" in str(jobs[FASTING_JOB].trigger)
        assert "minute='*/5'" in str(jobs[MEAL_JOB].trigger)
        assert "minute='55'" in str(jobs[DAILY_GOAL_JOB].trigger)
        assert jobs[FASTING_JOB].max_instances == 1
    finally:
        scheduler.stop()

    assert not scheduler.running


def test_cadences_come_from_configuration():
    scheduler = ReminderScheduler(config=make_settings(MEAL_REMINDER_CRON="*/10 * * * *"))

    assert scheduler.cadences()[MEAL_JOB] == "*/10 * * * *"


def test_failing_evaluator_does_not_break_the_others():
    broken = MagicMock(side_effect=RuntimeError("database unavailable"))
    healthy = MagicMock(return_value={"reminders": 1})
    scheduler = ReminderScheduler(
        config=make_settings(),
        evaluators={FASTING_JOB: broken, MEAL_JOB: healthy},
    )

    assert scheduler.run_now(FASTING_JOB) is None
    assert scheduler.run_now(MEAL_JOB) == {"reminders": 1}
    # A later tick still runs the failing evaluator.
    scheduler.run_now(FASTING_JOB)
    assert broken.call_count == 2


def test_run_now_rejects_unknown_jobs():
    scheduler = ReminderScheduler(config=make_settings())

    with pytest.raises(KeyError):
        scheduler.run_now("weekly-digest")


def test_stop_without_start_is_a_no_op():
    scheduler = ReminderScheduler(config=make_settings())

    scheduler.stop()

    assert not scheduler.running
