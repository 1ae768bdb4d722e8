"""Meal log model."""
import uuid

from sqlalchemy import Column, Date, DateTime, Enum, ForeignKey, Index, Integer
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.sql import func

from fast_track.db.base import Base
from fast_track.db.types import JSONDocument

MEAL_TYPES = ("breakfast", "lunch", "dinner", "snack")


class Meal(Base):
    """A logged meal with its food items."""

    __tablename__ = "meals"
    __table_args__ = (Index("ix_meals_user_date", "user_id", "date"),)

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    date = Column(Date, nullable=False)
    type = Column(Enum(*MEAL_TYPES, name="meal_type"), nullable=False)
    foods = Column(JSONDocument, nullable=False, default=list)
    total_calories = Column(Integer, nullable=False, default=0)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
