"""Web Push subscription and notification preference endpoints."""
from __future__ import annotations

from fastapi import APIRouter, Body, Depends, Header, HTTPException, status

from fast_track.api import deps
from fast_track.config import settings
from fast_track.db.models.user import User
from fast_track.schemas import (
    DeliveryReportRead,
    PreferencesEnvelope,
    PushSubscriptionCreate,
    PushUnsubscribe,
)
from fast_track.services.notification_service import NotificationService
from fast_track.utils.exceptions import PushNotConfiguredError, handle_push_not_configured

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("/vapid-public-key")
def get_vapid_public_key() -> dict[str, str]:
    """Return the public VAPID key browsers need to subscribe."""

    if not settings.push_configured:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Web push not configured"
        )
    return {"publicKey": settings.VAPID_PUBLIC_KEY}


@router.post("/subscribe")
def subscribe(
    subscription: PushSubscriptionCreate,
    user_agent: str | None = Header(default=None),
    service: NotificationService = Depends(deps.get_notification_service),
    current_user: User = Depends(deps.get_current_user),
) -> dict[str, bool]:
    try:
        service.subscribe(current_user.id, subscription, user_agent)
    except PushNotConfiguredError as exc:
        raise handle_push_not_configured(exc) from exc
    return {"success": True}


@router.delete("/unsubscribe")
def unsubscribe(
    payload: PushUnsubscribe | None = Body(default=None),
    service: NotificationService = Depends(deps.get_notification_service),
    current_user: User = Depends(deps.get_current_user),
) -> dict[str, int | bool]:
    """Remove one subscription by endpoint, or every subscription of the user."""

    endpoint = payload.endpoint if payload else None
    removed = service.unsubscribe(current_user.id, endpoint)
    return {"success": True, "removed": removed}


@router.get("/preferences", response_model=PreferencesEnvelope)
def read_preferences(current_user: User = Depends(deps.get_current_user)) -> PreferencesEnvelope:
    return PreferencesEnvelope(preferences=current_user.preferences)


@router.put("/preferences", response_model=PreferencesEnvelope)
def update_preferences(
    payload: PreferencesEnvelope,
    service: NotificationService = Depends(deps.get_notification_service),
    current_user: User = Depends(deps.get_current_user),
) -> PreferencesEnvelope:
    preferences = service.update_preferences(current_user, payload.preferences)
    return PreferencesEnvelope(preferences=preferences)


@router.post("/test", response_model=DeliveryReportRead)
def test_notification(
    service: NotificationService = Depends(deps.get_notification_service),
    current_user: User = Depends(deps.get_current_user),
) -> DeliveryReportRead:
    try:
        report = service.send_test(current_user.id)
    except PushNotConfiguredError as exc:
        raise handle_push_not_configured(exc) from exc
    return DeliveryReportRead(sent=report.sent, failed=report.failed, expired=report.expired)
