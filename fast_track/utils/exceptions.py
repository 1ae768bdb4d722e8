"""Custom exception classes and error handling utilities."""
from typing import Any, Dict, Optional
from fastapi import HTTPException, status
from loguru import logger


class FastTrackException(Exception):
    """Base exception for the application."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


class ValidationError(FastTrackException):
    """Data validation errors."""
    pass


class NotFoundError(FastTrackException):
    """A record does not exist or belongs to another user."""
    pass


class NotificationError(FastTrackException):
    """Notification scheduling or payload errors."""
    pass


class PushNotConfiguredError(NotificationError):
    """VAPID credentials are missing."""
    pass


class PushDeliveryError(NotificationError):
    """The push service rejected a notification for a reason other than expiry."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.status_code = status_code
        super().__init__(message, details)




def handle_validation_error(error: ValidationError) -> HTTPException:
    """Handle validation errors."""
    logger.warning(f"Validation error: {error.message}")
    return HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail={
            "message": error.message,
            "details": error.details
        }
    )


def handle_not_found_error(error: NotFoundError) -> HTTPException:
    """Handle missing or foreign records."""
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=error.message,
    )


def handle_push_not_configured(error: PushNotConfiguredError) -> HTTPException:
    """Handle requests that need Web Push while it is disabled."""
    logger.info(f"Push unavailable: {error.message}")
    return HTTPException(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        detail="Web push not configured",
    )
