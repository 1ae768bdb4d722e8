"""Pydantic models for notification preferences, subscriptions and payloads."""
from __future__ import annotations

from datetime import time
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_serializer


class FastingAlertPreferences(BaseModel):
    """Fasting progress alerts."""

    enabled: bool = True
    alert_at_80_percent: bool = True
    alert_at_goal: bool = True


class MealReminderPreferences(BaseModel):
    """Meal reminder clock times; a missing time disables that meal's reminder."""

    enabled: bool = False
    breakfast_time: Optional[time] = None
    lunch_time: Optional[time] = None
    dinner_time: Optional[time] = None

    @field_serializer("breakfast_time", "lunch_time", "dinner_time")
    def _format_time(self, value: Optional[time]) -> Optional[str]:
        return value.strftime("%H:%M") if value is not None else None

    def scheduled_meals(self) -> dict[str, time]:
        """Return configured reminder times keyed by meal type."""

        times = {
            "breakfast": self.breakfast_time,
            "lunch": self.lunch_time,
            "dinner": self.dinner_time,
        }
        return {meal: at for meal, at in times.items() if at is not None}


class DailyGoalPreferences(BaseModel):
    """Daily goal nudge."""

    enabled: bool = True
    reminder_time: time = time(20, 0)

    @field_serializer("reminder_time")
    def _format_time(self, value: time) -> str:
        return value.strftime("%H:%M")


class NotificationPreferences(BaseModel):
    """Typed per-user notification preferences stored as JSON on the user row.

    ``enabled`` is a master switch; a category only fires when both the
    master switch and the category's own ``enabled`` flag are set.
    """

    enabled: bool = False
    fasting: FastingAlertPreferences = Field(default_factory=FastingAlertPreferences)
    meals: MealReminderPreferences = Field(default_factory=MealReminderPreferences)
    daily_goal: DailyGoalPreferences = Field(default_factory=DailyGoalPreferences)

    model_config = ConfigDict(extra="ignore")

    @property
    def fasting_alerts_enabled(self) -> bool:
        return self.enabled and self.fasting.enabled

    @property
    def meal_reminders_enabled(self) -> bool:
        return self.enabled and self.meals.enabled

    @property
    def daily_goal_enabled(self) -> bool:
        return self.enabled and self.daily_goal.enabled


class PreferencesEnvelope(BaseModel):
    """Request and response wrapper for the preferences endpoints."""

    preferences: NotificationPreferences


class SubscriptionKeys(BaseModel):
    p256dh: str = Field(min_length=1)
    auth: str = Field(min_length=1)


class PushSubscriptionCreate(BaseModel):
    """Browser ``PushSubscription.toJSON()`` body."""

    endpoint: str = Field(min_length=1)
    keys: SubscriptionKeys
    expirationTime: Optional[float] = None


class PushUnsubscribe(BaseModel):
    endpoint: Optional[str] = None


class NotificationPayload(BaseModel):
    """JSON document delivered to the service worker."""

    title: str
    body: str
    tag: Optional[str] = None
    action_url: Optional[str] = Field(default=None, serialization_alias="actionUrl")
    icon: Optional[str] = None
    data: Optional[dict] = None

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True, exclude_none=True)


class DeliveryReportRead(BaseModel):
    sent: int
    failed: int
    expired: int
