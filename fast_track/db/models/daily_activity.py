"""Per-user daily goal summary model."""
import uuid

from sqlalchemy import Boolean, Column, Date, ForeignKey, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID

from fast_track.db.base import Base


class DailyActivity(Base):
    """Which goal categories a user completed on a calendar date."""

    __tablename__ = "daily_activities"
    __table_args__ = (UniqueConstraint("user_id", "date", name="uq_daily_activities_user_date"),)

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    date = Column(Date, nullable=False)

    fast_completed = Column(Boolean, nullable=False, default=False)
    meals_logged = Column(Boolean, nullable=False, default=False)
    workout_completed = Column(Boolean, nullable=False, default=False)
    streak_maintained = Column(Boolean, nullable=False, default=False)

    @property
    def completed_count(self) -> int:
        return sum(bool(flag) for flag in (self.fast_completed, self.meals_logged, self.workout_completed))
