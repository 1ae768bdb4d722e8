"""Fast Track backend: fasting, meal and daily goal tracking with push reminders."""

__version__ = "0.1.0"
