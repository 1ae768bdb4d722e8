"""Push Notification Subscription model."""
import uuid
from sqlalchemy import Column, ForeignKey, String, Text, DateTime
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.sql import func

from fast_track.db.base import Base
from fast_track.db.types import JSONDocument


class PushSubscription(Base):
    """Stores Web Push API subscription details for a user."""
    __tablename__ = "push_subscriptions"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    endpoint = Column(Text, nullable=False, unique=True)
    keys = Column(JSONDocument, nullable=False)  # Stores { p256dh: "...", auth: "..." }

    user_agent = Column(String(255))
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    last_used_at = Column(DateTime(timezone=True))

    def as_subscription_info(self) -> dict:
        """Return the structure ``pywebpush`` expects."""
        return {"endpoint": self.endpoint, "keys": self.keys}
