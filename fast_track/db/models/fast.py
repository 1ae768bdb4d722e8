"""Fasting session model."""
import uuid

from sqlalchemy import Boolean, Column, DateTime, Float, ForeignKey, Index, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.sql import func

from fast_track.db.base import Base


class Fast(Base):
    """A fasting window started by a user; ``end_time`` is NULL while it is active."""

    __tablename__ = "fasts"
    __table_args__ = (Index("ix_fasts_user_start", "user_id", "start_time"),)

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    start_time = Column(DateTime(timezone=True), nullable=False)
    end_time = Column(DateTime(timezone=True), nullable=True)
    goal_hours = Column(Float, nullable=False)
    is_completed = Column(Boolean, nullable=False, default=False)
    notes = Column(Text)

    # Reminder guards, claimed by the scheduler before a send and released if nothing was delivered
    notified_80_percent = Column(Boolean, nullable=False, default=False)
    notified_complete = Column(Boolean, nullable=False, default=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    @property
    def is_active(self) -> bool:
        return self.end_time is None
