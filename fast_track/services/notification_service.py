"""Service for handling Web Push notifications."""
from __future__ import annotations

import uuid
from datetime import date
from typing import Iterable

from loguru import logger
from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from fast_track.config import Settings, settings as default_settings
from fast_track.db.models.fast import Fast
from fast_track.db.models.push_subscription import PushSubscription
from fast_track.db.models.user import User
from fast_track.schemas.notification import (
    NotificationPayload,
    NotificationPreferences,
    PushSubscriptionCreate,
)
from fast_track.services.push import DeliveryReport, PushDeliveryService
from fast_track.utils.exceptions import PushNotConfiguredError

MEAL_LABELS = {"breakfast": "breakfast", "lunch": "lunch", "dinner": "dinner"}

ENCOURAGEMENT_MESSAGES = {
    2: "Great job! You completed 2 activities today. Keep up the streak! 🔥",
    3: "Perfect! All 3 activities completed today. You are on fire! 🔥🔥🔥",
}


def _format_goal(goal_hours: float) -> str:
    return f"{goal_hours:g}"


class NotificationService:
    """Subscription management and reminder payloads for one database session."""

    def __init__(
        self,
        db: Session,
        delivery: PushDeliveryService | None = None,
        config: Settings | None = None,
    ):
        self.db = db
        self.settings = config or default_settings
        self.delivery = delivery or PushDeliveryService(db, config=self.settings)

    # ------------------------------------------------------------------
    # Subscriptions and preferences
    # ------------------------------------------------------------------
    def subscribe(
        self,
        user_id: uuid.UUID,
        subscription: PushSubscriptionCreate,
        user_agent: str | None = None,
    ) -> PushSubscription:
        """Register a push subscription, taking over an existing endpoint."""

        if not self.settings.push_configured:
            raise PushNotConfiguredError("VAPID keys not configured")

        keys = subscription.keys.model_dump()
        stmt = select(PushSubscription).where(PushSubscription.endpoint == subscription.endpoint)
        existing = self.db.scalars(stmt).first()
        if existing:
            existing.user_id = user_id
            existing.keys = keys
            existing.user_agent = user_agent
            sub = existing
        else:
            sub = PushSubscription(
                user_id=user_id,
                endpoint=subscription.endpoint,
                keys=keys,
                user_agent=user_agent,
            )
            self.db.add(sub)

        self.db.commit()
        logger.info("Push subscription stored", user_id=str(user_id), subscription_id=str(sub.id))
        return sub

    def unsubscribe(self, user_id: uuid.UUID, endpoint: str | None = None) -> int:
        """Remove one subscription by endpoint, or all of the user's subscriptions."""

        stmt = delete(PushSubscription).where(PushSubscription.user_id == user_id)
        if endpoint:
            stmt = stmt.where(PushSubscription.endpoint == endpoint)
        result = self.db.execute(stmt)
        self.db.commit()
        return result.rowcount or 0

    def update_preferences(self, user: User, preferences: NotificationPreferences) -> NotificationPreferences:
        user.set_preferences(preferences)
        self.db.add(user)
        self.db.commit()
        return user.preferences

    # ------------------------------------------------------------------
    # Delivery
    # ------------------------------------------------------------------
    def send_notification(self, user_id: uuid.UUID, payload: NotificationPayload) -> DeliveryReport:
        """Send a push notification to all user devices."""

        if not self.settings.push_configured:
            raise PushNotConfiguredError("VAPID keys not configured")
        return self.delivery.send_to_user(user_id, payload)

    def send_test(self, user_id: uuid.UUID) -> DeliveryReport:
        return self.send_notification(
            user_id,
            NotificationPayload(
                title="Test Notification",
                body="Push notifications are working!",
                tag="test",
                action_url="/#/",
                icon=self.settings.NOTIFICATION_ICON,
            ),
        )

    def send_fasting_progress_alert(self, fast: Fast, remaining: str) -> DeliveryReport:
        return self.send_notification(
            fast.user_id,
            NotificationPayload(
                title="Almost there! 80% complete",
                body=f"Only {remaining} to go on your {_format_goal(fast.goal_hours)}-hour fast!",
                tag=f"fast-80-{fast.id}",
                action_url="/#/fasting",
                icon=self.settings.NOTIFICATION_ICON,
                data={"type": "fasting_80"},
            ),
        )

    def send_fasting_complete_alert(self, fast: Fast) -> DeliveryReport:
        return self.send_notification(
            fast.user_id,
            NotificationPayload(
                title="Fast Complete!",
                body=(
                    f"Congratulations! You've completed your "
                    f"{_format_goal(fast.goal_hours)}-hour fast."
                ),
                tag=f"fast-complete-{fast.id}",
                action_url="/#/fasting",
                icon=self.settings.NOTIFICATION_ICON,
                data={"type": "fasting_complete"},
            ),
        )

    def send_meal_reminder(self, user_id: uuid.UUID, meal_type: str, on_date: date) -> DeliveryReport:
        label = MEAL_LABELS[meal_type]
        return self.send_notification(
            user_id,
            NotificationPayload(
                title=f"Time for {label}!",
                body=f"No {label} logged yet today. Track your meal?",
                tag=f"meal-{meal_type}-{on_date.isoformat()}",
                action_url="/#/meals",
                icon=self.settings.NOTIFICATION_ICON,
                data={"type": "meal_reminder", "mealType": meal_type},
            ),
        )

    def send_daily_goal_nudge(
        self, user_id: uuid.UUID, incomplete: Iterable[str], on_date: date
    ) -> DeliveryReport:
        items = list(incomplete)
        return self.send_notification(
            user_id,
            NotificationPayload(
                title="Don't break your streak!",
                body=f"You still need: {', '.join(items)}",
                tag=f"daily-goal-{on_date.isoformat()}",
                action_url="/#/",
                icon=self.settings.NOTIFICATION_ICON,
                data={"type": "daily_goal_nudge", "incomplete": items},
            ),
        )

    def send_daily_goal_encouragement(
        self, user_id: uuid.UUID, completed_count: int, on_date: date
    ) -> DeliveryReport:
        return self.send_notification(
            user_id,
            NotificationPayload(
                title="Daily Goal Achievement",
                body=ENCOURAGEMENT_MESSAGES.get(completed_count, ENCOURAGEMENT_MESSAGES[2]),
                tag=f"daily-goal-{on_date.isoformat()}",
                action_url="/#/",
                icon=self.settings.NOTIFICATION_ICON,
                data={"type": "daily_goal_encouragement", "completedCount": completed_count},
            ),
        )

    def send_daily_goal_reminder(
        self, user_id: uuid.UUID, incomplete: Iterable[str], on_date: date
    ) -> DeliveryReport:
        items = list(incomplete)
        return self.send_notification(
            user_id,
            NotificationPayload(
                title="Daily Goal Reminder",
                body=f"You still have time to complete: {', '.join(items)}",
                tag=f"daily-goal-{on_date.isoformat()}",
                action_url="/#/",
                icon=self.settings.NOTIFICATION_ICON,
                data={"type": "daily_goal_reminder", "incomplete": items},
            ),
        )
