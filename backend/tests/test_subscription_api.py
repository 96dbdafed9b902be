from datetime import datetime, timedelta

from mcqprep.models import User
from mcqprep.services.subscription_service import SubscriptionService, days_remaining
from mcqprep.utils.timezone import utc_now


def test_plans_are_public(client):
    body = client.get("/api/v1/subscription/plans").json()
    plans = {plan["id"]: plan for plan in body["data"]["plans"]}

    assert set(plans) == {"monthly", "yearly", "lifetime"}
    assert (plans["monthly"]["price"], plans["monthly"]["duration"]) == (299, 30)
    assert (plans["yearly"]["price"], plans["yearly"]["duration"]) == (2999, 365)
    assert plans["lifetime"]["duration"] is None


def test_free_user_status(client, free_user, auth_headers):
    body = client.get("/api/v1/subscription/status", headers=auth_headers(free_user)).json()
    assert body["data"]["subscription"] == {
        "type": "free",
        "isActive": False,
        "expiresAt": None,
        "daysRemaining": None,
    }


def test_monthly_subscription_unlocks_premium(client, make_mcq, free_user, auth_headers):
    headers = auth_headers(free_user)
    premium_mcq = make_mcq(is_premium=True)
    assert client.get(f"/api/v1/mcqs/{premium_mcq.id}", headers=headers).status_code == 403

    subscribed = client.post("/api/v1/subscription/subscribe", json={"planId": "monthly"}, headers=headers)
    assert subscribed.status_code == 200
    assert subscribed.json()["data"]["subscription"]["plan"]["id"] == "monthly"

    status = client.get("/api/v1/subscription/status", headers=headers).json()["data"]["subscription"]
    assert status["isActive"] is True
    assert status["daysRemaining"] == 30

    assert client.get(f"/api/v1/mcqs/{premium_mcq.id}", headers=headers).status_code == 200


def test_lifetime_subscription_never_expires(client, free_user, auth_headers):
    headers = auth_headers(free_user)
    client.post("/api/v1/subscription/subscribe", json={"planId": "lifetime"}, headers=headers)

    status = client.get("/api/v1/subscription/status", headers=headers).json()["data"]["subscription"]
    assert status["type"] == "premium"
    assert status["isActive"] is True
    assert status["expiresAt"] is None
    assert status["daysRemaining"] is None


def test_unknown_plan_is_rejected(client, free_user, auth_headers):
    response = client.post("/api/v1/subscription/subscribe", json={"planId": "weekly"}, headers=auth_headers(free_user))
    assert response.status_code == 400
    assert response.json()["errors"][0]["field"] == "planId"


def test_cancel_without_subscription_is_rejected(client, free_user, auth_headers):
    response = client.post("/api/v1/subscription/cancel", headers=auth_headers(free_user))
    assert response.status_code == 400


def test_cancel_returns_to_free_tier(client, premium_user, auth_headers):
    headers = auth_headers(premium_user)
    assert client.post("/api/v1/subscription/cancel", headers=headers).status_code == 200

    status = client.get("/api/v1/subscription/status", headers=headers).json()["data"]["subscription"]
    assert status["type"] == "free"
    assert status["isActive"] is False


def test_renew_extends_from_current_expiry(client, premium_user, auth_headers):
    headers = auth_headers(premium_user)
    response = client.post("/api/v1/subscription/renew", json={"planId": "monthly"}, headers=headers)
    assert response.status_code == 200

    status = client.get("/api/v1/subscription/status", headers=headers).json()["data"]["subscription"]
    assert status["daysRemaining"] == 60


def test_renew_after_expiry_starts_from_now(client, expired_user, auth_headers):
    headers = auth_headers(expired_user)
    client.post("/api/v1/subscription/renew", json={"planId": "monthly"}, headers=headers)

    status = client.get("/api/v1/subscription/status", headers=headers).json()["data"]["subscription"]
    assert status["daysRemaining"] == 30


def test_lifetime_cannot_be_renewed(client, lifetime_user, auth_headers):
    response = client.post("/api/v1/subscription/renew", json={"planId": "yearly"}, headers=auth_headers(lifetime_user))
    assert response.status_code == 400


def test_days_remaining_rounds_up():
    now = datetime(2026, 5, 1, 12, 0, 0)
    assert days_remaining(now + timedelta(hours=1), now=now) == 1
    assert days_remaining(now + timedelta(days=2, seconds=1), now=now) == 3
    assert days_remaining(None, now=now) is None


def test_expire_lapsed_downgrades_only_past_expiries(db, expired_user, premium_user, lifetime_user):
    assert SubscriptionService(db).expire_lapsed() == 1

    db.expire_all()
    assert db.get(User, expired_user.id).subscription_type == "free"
    assert db.get(User, premium_user.id).subscription_type == "premium"
    assert db.get(User, lifetime_user.id).subscription_type == "premium"
    assert db.get(User, premium_user.id).subscription_expires_at > utc_now()
