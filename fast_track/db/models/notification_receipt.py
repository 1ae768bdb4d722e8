"""Record of per-day reminders that have already been sent."""
import uuid

from sqlalchemy import Column, Date, DateTime, ForeignKey, String, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.sql import func

from fast_track.db.base import Base


class NotificationReceipt(Base):
    """At most one row per (user, kind, date); inserting it claims the reminder."""

    __tablename__ = "notification_receipts"
    __table_args__ = (
        UniqueConstraint("user_id", "kind", "reference_date", name="uq_notification_receipts_user_kind_date"),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    kind = Column(String(50), nullable=False)
    reference_date = Column(Date, nullable=False)
    sent_at = Column(DateTime(timezone=True), server_default=func.now())
