"""Workout session model."""
import uuid

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Index, Integer
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.sql import func

from fast_track.db.base import Base


class WorkoutLog(Base):
    """A workout started by a user; ``end_time`` is NULL while it is in progress."""

    __tablename__ = "workout_logs"
    __table_args__ = (Index("ix_workout_logs_user_start", "user_id", "start_time"),)

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    start_time = Column(DateTime(timezone=True), nullable=False)
    end_time = Column(DateTime(timezone=True), nullable=True)
    duration_minutes = Column(Integer, nullable=False, default=0)
    exercises_completed = Column(Integer, nullable=False, default=0)
    is_completed = Column(Boolean, nullable=False, default=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
