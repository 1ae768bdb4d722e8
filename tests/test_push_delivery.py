"""Tests for Web Push delivery."""
from __future__ import annotations

import json
from unittest.mock import MagicMock

import pytest
from pywebpush import WebPushException

from fast_track.config import Settings
from fast_track.db.models.push_subscription import PushSubscription
from fast_track.schemas.notification import NotificationPayload
from fast_track.services.push import PushDeliveryService
from fast_track.utils.exceptions import PushDeliveryError, PushNotConfiguredError

PAYLOAD = NotificationPayload(title="Hello", body="World", tag="greeting", action_url="/#/")


def push_error(status_code: int) -> WebPushException:
    return WebPushException("Push failed", response=MagicMock(status_code=status_code))


def test_payload_serialises_action_url_for_the_service_worker():
    data = json.loads(PAYLOAD.to_json())

    assert data == {"title": "Hello", "body": "World", "tag": "greeting", "actionUrl": "/#/"}


def test_send_to_user_stamps_last_used(db_session, webpush_mock, make_user, add_subscription):
    user = make_user()
    sub = add_subscription(user)

    report = PushDeliveryService(db_session).send_to_user(user.id, PAYLOAD)

    assert (report.sent, report.failed, report.expired) == (1, 0, 0)
    kwargs = webpush_mock.call_args.kwargs
    assert kwargs["subscription_info"]["endpoint"] == sub.endpoint
    assert kwargs["vapid_claims"] == {"sub": "mailto:admin@example.com"}
    db_session.refresh(sub)
    assert sub.last_used_at is not None


@pytest.mark.parametrize("status_code", [404, 410])
def test_expired_subscriptions_are_removed(
    status_code, db_session, webpush_mock, make_user, add_subscription
):
    user = make_user()
    add_subscription(user)
    webpush_mock.side_effect = push_error(status_code)

    report = PushDeliveryService(db_session).send_to_user(user.id, PAYLOAD)

    assert report.expired == 1
    assert db_session.query(PushSubscription).filter_by(user_id=user.id).count() == 0


def test_other_failures_raise_and_keep_the_subscription(
    db_session, webpush_mock, make_user, add_subscription
):
    user = make_user()
    sub = add_subscription(user)
    webpush_mock.side_effect = push_error(500)
    service = PushDeliveryService(db_session)

    with pytest.raises(PushDeliveryError) as excinfo:
        service.send(sub, PAYLOAD)
    assert excinfo.value.status_code == 500

    report = service.send_to_user(user.id, PAYLOAD)
    assert (report.sent, report.failed, report.expired) == (0, 1, 0)
    assert db_session.query(PushSubscription).filter_by(user_id=user.id).count() == 1


def test_one_bad_device_does_not_block_the_others(
    db_session, webpush_mock, make_user, add_subscription
):
    user = make_user()
    add_subscription(user)
    add_subscription(user)
    webpush_mock.side_effect = [push_error(500), None]

    report = PushDeliveryService(db_session).send_to_user(user.id, PAYLOAD)

    assert (report.sent, report.failed) == (1, 1)


def test_send_requires_vapid_keys(db_session, webpush_mock, make_user, add_subscription):
    user = make_user()
    sub = add_subscription(user)
    config = Settings(_env_file=None, SECRET_KEY="x", VAPID_PUBLIC_KEY=None, VAPID_PRIVATE_KEY=None)

    with pytest.raises(PushNotConfiguredError):
        PushDeliveryService(db_session, config=config).send(sub, PAYLOAD)
    webpush_mock.assert_not_called()

