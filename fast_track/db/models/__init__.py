"""Database models package."""
from fast_track.db.models.user import User
from fast_track.db.models.fast import Fast
from fast_track.db.models.meal import MEAL_TYPES, Meal
from fast_track.db.models.daily_activity import DailyActivity
from fast_track.db.models.push_subscription import PushSubscription
from fast_track.db.models.notification_receipt import NotificationReceipt
from fast_track.db.models.workout_log import WorkoutLog

__all__ = [
    "User",
    "Fast",
    "MEAL_TYPES",
    "Meal",
    "DailyActivity",
    "PushSubscription",
    "NotificationReceipt",
    "WorkoutLog",
]
