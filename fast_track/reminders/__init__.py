"""Scheduled push reminders for fasts, meals and daily goals."""

from fast_track.reminders.daily_goals import check_daily_goals
from fast_track.reminders.fasting import check_fasting_progress
from fast_track.reminders.meals import check_meal_reminders
from fast_track.reminders.scheduler import ReminderScheduler

__all__ = [
    "ReminderScheduler",
    "check_daily_goals",
    "check_fasting_progress",
    "check_meal_reminders",
]
