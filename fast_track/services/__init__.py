"""Service layer package."""

from fast_track.services.notification_service import NotificationService
from fast_track.services.push import DeliveryReport, DeliveryStatus, PushDeliveryService
from fast_track.services.reminder_store import ReminderStore
from fast_track.services.tracking import DailyActivityService, FastService, MealService, WorkoutService

__all__ = [
    "NotificationService",
    "DeliveryReport",
    "DeliveryStatus",
    "PushDeliveryService",
    "ReminderStore",
    "DailyActivityService",
    "FastService",
    "MealService",
    "WorkoutService",
]
