"""Integration tests for the notification endpoints."""
from __future__ import annotations

from fastapi.testclient import TestClient

from fast_track.config import settings
from fast_track.db.models.push_subscription import PushSubscription

SUBSCRIPTION = {
    "endpoint": "https://push.example.com/send/abc",
    "keys": {"p256dh": "p256dh-key", "auth": "auth-key"},
}


def test_vapid_public_key(client: TestClient) -> None:
    response = client.get("/api/v1/notifications/vapid-public-key")

    assert response.status_code == 200
    assert response.json() == {"publicKey": "test-public-key"}


def test_vapid_public_key_unavailable_without_config(client: TestClient, monkeypatch) -> None:
    monkeypatch.setattr(settings, "VAPID_PUBLIC_KEY", None)

    response = client.get("/api/v1/notifications/vapid-public-key")

    assert response.status_code == 503


def test_subscribe_requires_authentication(client: TestClient) -> None:
    response = client.post("/api/v1/notifications/subscribe", json=SUBSCRIPTION)

    assert response.status_code == 401


def test_subscribe_upserts_by_endpoint(client, db_session, make_user, auth_headers) -> None:
    user = make_user()
    headers = {**auth_headers(user), "User-Agent": "pytest-browser"}

    first = client.post("/api/v1/notifications/subscribe", json=SUBSCRIPTION, headers=headers)
    rotated = {**SUBSCRIPTION, "keys": {"p256dh": "new-key", "auth": "new-auth"}}
    second = client.post("/api/v1/notifications/subscribe", json=rotated, headers=headers)

    assert first.status_code == second.status_code == 200
    subs = db_session.query(PushSubscription).filter_by(user_id=user.id).all()
    assert len(subs) == 1
    assert subs[0].keys == {"p256dh": "new-key", "auth": "new-auth"}
    assert subs[0].user_agent == "pytest-browser"


def test_subscribe_rejects_incomplete_keys(client, make_user, auth_headers) -> None:
    user = make_user()
    payload = {"endpoint": SUBSCRIPTION["endpoint"], "keys": {"p256dh": "only-one"}}

    response = client.post("/api/v1/notifications/subscribe", json=payload, headers=auth_headers(user))

    assert response.status_code == 422
    assert response.json()["message"] == "Validation failed"


def test_subscribe_unavailable_without_config(client, make_user, auth_headers, monkeypatch) -> None:
    user = make_user()
    monkeypatch.setattr(settings, "VAPID_PRIVATE_KEY", None)

    response = client.post(
        "/api/v1/notifications/subscribe", json=SUBSCRIPTION, headers=auth_headers(user)
    )

    assert response.status_code == 503


def test_unsubscribe_single_endpoint_and_all(
    client, db_session, make_user, add_subscription, auth_headers
) -> None:
    user = make_user()
    first = add_subscription(user)
    add_subscription(user)
    add_subscription(user)
    headers = auth_headers(user)

    response = client.request(
        "DELETE",
        "/api/v1/notifications/unsubscribe",
        json={"endpoint": first.endpoint},
        headers=headers,
    )
    assert response.json() == {"success": True, "removed": 1}

    response = client.request("DELETE", "/api/v1/notifications/unsubscribe", headers=headers)
    assert response.json() == {"success": True, "removed": 2}
    assert db_session.query(PushSubscription).filter_by(user_id=user.id).count() == 0


def test_unsubscribe_only_touches_own_subscriptions(
    client, db_session, make_user, add_subscription, auth_headers
) -> None:
    owner = make_user()
    other = make_user()
    sub = add_subscription(owner)

    response = client.request(
        "DELETE",
        "/api/v1/notifications/unsubscribe",
        json={"endpoint": sub.endpoint},
        headers=auth_headers(other),
    )

    assert response.json()["removed"] == 0
    assert db_session.query(PushSubscription).count() == 1


def test_preferences_default_values(client, make_user, auth_headers) -> None:
    user = make_user()

    response = client.get("/api/v1/notifications/preferences", headers=auth_headers(user))

    assert response.status_code == 200
    preferences = response.json()["preferences"]
    assert preferences["enabled"] is False
    assert preferences["fasting"] == {
        "enabled": True,
        "alert_at_80_percent": True,
        "alert_at_goal": True,
    }
    assert preferences["meals"]["breakfast_time"] is None
    assert preferences["daily_goal"] == {"enabled": True, "reminder_time": "20:00"}


def test_update_preferences(client, db_session, make_user, auth_headers) -> None:
    user = make_user()
    payload = {
        "preferences": {
            "enabled": True,
            "meals": {"enabled": True, "breakfast_time": "07:30", "dinner_time": "19:00"},
            "daily_goal": {"enabled": False, "reminder_time": "21:00"},
        }
    }

    response = client.put("/api/v1/notifications/preferences", json=payload, headers=auth_headers(user))

    assert response.status_code == 200
    meals = response.json()["preferences"]["meals"]
    assert meals == {
        "enabled": True,
        "breakfast_time": "07:30",
        "lunch_time": None,
        "dinner_time": "19:00",
    }
    db_session.refresh(user)
    assert user.preferences.meal_reminders_enabled is True
    assert user.preferences.daily_goal_enabled is False


def test_update_preferences_rejects_bad_time(client, make_user, auth_headers) -> None:
    user = make_user()
    payload = {"preferences": {"meals": {"breakfast_time": "25:99"}}}

    response = client.put("/api/v1/notifications/preferences", json=payload, headers=auth_headers(user))

    assert response.status_code == 422


def test_send_test_notification(client, webpush_mock, make_user, add_subscription, auth_headers) -> None:
    user = make_user()
    add_subscription(user)

    response = client.post("/api/v1/notifications/test", headers=auth_headers(user))

    assert response.status_code == 200
    assert response.json() == {"sent": 1, "failed": 0, "expired": 0}
    webpush_mock.assert_called_once()
