"""User database model."""
import uuid

from loguru import logger
from pydantic import ValidationError
from sqlalchemy import Column, DateTime, String
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.sql import func

from fast_track.db.base import Base
from fast_track.db.types import JSONDocument
from fast_track.schemas.notification import NotificationPreferences


class User(Base):
    """Represents an application user."""

    __tablename__ = "users"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    email = Column(String(255), unique=True, nullable=False, index=True)
    full_name = Column(String(255))

    # Raw JSON blob; read it through ``preferences``.
    notification_preferences = Column(JSONDocument, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    @property
    def preferences(self) -> NotificationPreferences:
        """Return the typed notification preferences, falling back to defaults."""

        try:
            return NotificationPreferences.model_validate(self.notification_preferences or {})
        except ValidationError as exc:
            logger.warning(
                "Invalid notification preferences, using defaults",
                user_id=str(self.id),
                errors=exc.error_count(),
            )
            return NotificationPreferences()

    def set_preferences(self, preferences: NotificationPreferences) -> None:
        """Replace the stored notification preferences."""

        self.notification_preferences = preferences.model_dump(mode="json")
