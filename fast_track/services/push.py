"""Web Push delivery through ``pywebpush``."""
from __future__ import annotations

import enum
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone

from loguru import logger
from pywebpush import WebPushException, webpush
from sqlalchemy import select
from sqlalchemy.orm import Session

from fast_track.config import Settings, settings as default_settings
from fast_track.db.models.push_subscription import PushSubscription
from fast_track.schemas.notification import NotificationPayload
from fast_track.utils.exceptions import PushDeliveryError, PushNotConfiguredError

# 404/410 means the subscription expired or the user unsubscribed
EXPIRED_STATUS_CODES = frozenset({404, 410})


class DeliveryStatus(str, enum.Enum):
    SUCCESS = "success"
    EXPIRED = "expired"


@dataclass
class DeliveryReport:
    """Outcome of sending one payload to every device of a user."""

    sent: int = 0
    failed: int = 0
    expired: int = 0

    @property
    def attempted(self) -> int:
        return self.sent + self.failed + self.expired

    @property
    def undelivered(self) -> bool:
        """True when every live device rejected the payload."""

        return self.sent == 0 and self.failed > 0


class PushDeliveryService:
    """Deliver notification payloads to stored push subscriptions."""

    def __init__(self, db: Session, config: Settings | None = None):
        self.db = db
        self.settings = config or default_settings

    @property
    def configured(self) -> bool:
        return self.settings.push_configured

    def send(self, subscription: PushSubscription, payload: NotificationPayload) -> DeliveryStatus:
        """Send one payload to one subscription.

        Returns ``EXPIRED`` when the push service reports the endpoint as gone;
        any other failure raises ``PushDeliveryError``.
        """

        if not self.configured:
            raise PushNotConfiguredError("VAPID keys not configured")

        try:
            webpush(
                subscription_info=subscription.as_subscription_info(),
                data=payload.to_json(),
                vapid_private_key=self.settings.VAPID_PRIVATE_KEY,
                vapid_claims={"sub": self.settings.VAPID_SUBJECT},
            )
        except WebPushException as ex:
            status_code = ex.response.status_code if ex.response is not None else None
            if status_code in EXPIRED_STATUS_CODES:
                logger.info(
                    "Push subscription expired",
                    subscription_id=str(subscription.id),
                    status_code=status_code,
                )
                return DeliveryStatus.EXPIRED
            logger.error(
                "WebPush failed",
                subscription_id=str(subscription.id),
                status_code=status_code,
                error=str(ex),
            )
            raise PushDeliveryError(
                f"WebPush failed for {subscription.id}: {ex}",
                status_code=status_code,
                details={"subscription_id": str(subscription.id)},
            ) from ex
        return DeliveryStatus.SUCCESS

    def send_to_user(self, user_id: uuid.UUID, payload: NotificationPayload) -> DeliveryReport:
        """Send a payload to all of a user's devices and prune expired subscriptions."""

        report = DeliveryReport()
        subscriptions = self.db.scalars(
            select(PushSubscription).where(PushSubscription.user_id == user_id)
        ).all()

        for sub in subscriptions:
            try:
                result = self.send(sub, payload)
            except PushDeliveryError:
                report.failed += 1
                continue

            if result is DeliveryStatus.EXPIRED:
                self.db.delete(sub)
                report.expired += 1
            else:
                sub.last_used_at = datetime.now(timezone.utc)
                report.sent += 1

        self.db.commit()
        logger.debug(
            "Push delivery finished",
            user_id=str(user_id),
            sent=report.sent,
            failed=report.failed,
            expired=report.expired,
        )
        return report
