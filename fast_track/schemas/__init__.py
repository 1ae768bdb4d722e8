"""Pydantic schemas package."""

from fast_track.schemas.auth import TokenPayload
from fast_track.schemas.notification import (
    DeliveryReportRead,
    NotificationPayload,
    NotificationPreferences,
    PreferencesEnvelope,
    PushSubscriptionCreate,
    PushUnsubscribe,
)
from fast_track.schemas.tracking import (
    FastCreate,
    FastRead,
    FastUpdate,
    FoodItem,
    MealCreate,
    MealRead,
    WorkoutEnd,
    WorkoutRead,
    WorkoutStart,
)

__all__ = [
    "TokenPayload",
    "DeliveryReportRead",
    "NotificationPayload",
    "NotificationPreferences",
    "PreferencesEnvelope",
    "PushSubscriptionCreate",
    "PushUnsubscribe",
    "FastCreate",
    "FastRead",
    "FastUpdate",
    "FoodItem",
    "MealCreate",
    "MealRead",
    "WorkoutEnd",
    "WorkoutRead",
    "WorkoutStart",
]
