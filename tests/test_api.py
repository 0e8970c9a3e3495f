"""HTTP tests for the secrets API."""

from datetime import timedelta
from unittest.mock import patch

from secretshare.config import settings
from tests.test_utils import START


def create(client, **payload):
    body = {"secretText": "hello world", **payload}
    response = client.post("/api/v1/secrets", json=body)
    assert response.status_code == 201, response.text
    return response.json()


def iso(value):
    return value.isoformat() + "Z"


class TestCreate:
    def test_create_returns_short_url(self, client):
        data = create(client, expiresDays=1)

        short_id = data["shortId"]
        assert len(short_id) == 8
        assert data["shortUrl"] == f"{settings.share_base_url}/share/{short_id}"
        assert data["expiresAt"] == iso(START + timedelta(days=1))

    def test_create_defaults_to_seven_days(self, client):
        data = create(client)
        assert data["expiresAt"] == iso(START + timedelta(days=7))

    def test_create_accepts_snake_case(self, client):
        response = client.post(
            "/api/v1/secrets", json={"secret_text": "s", "expires_minutes": 5, "expires_days": 0}
        )
        assert response.status_code == 201
        assert response.json()["expiresAt"] == iso(START + timedelta(minutes=5))

    def test_missing_secret_text(self, client):
        response = client.post("/api/v1/secrets", json={"expiresDays": 1})
        assert response.status_code == 422

    def test_empty_secret_text(self, client):
        response = client.post("/api/v1/secrets", json={"secretText": ""})
        assert response.status_code == 422

    def test_zero_lifetime_rejected(self, client):
        response = client.post(
            "/api/v1/secrets", json={"secretText": "s", "expiresDays": 0, "expiresMinutes": 0}
        )
        assert response.status_code == 422

    def test_lifetime_over_limit_rejected(self, client):
        response = client.post(
            "/api/v1/secrets",
            json={"secretText": "s", "expiresDays": settings.max_expiry_days + 1},
        )
        assert response.status_code == 422

    def test_negative_offsets_rejected(self, client):
        response = client.post(
            "/api/v1/secrets", json={"secretText": "s", "expiresMinutes": -5}
        )
        assert response.status_code == 422

    def test_invalid_email_rejected(self, client):
        response = client.post(
            "/api/v1/secrets",
            json={"secretText": "s", "extendable": True, "email": "not-an-email"},
        )
        assert response.status_code == 422

    def test_oversized_secret_rejected(self, client):
        with patch.object(settings, "max_secret_length", 10):
            response = client.post("/api/v1/secrets", json={"secretText": "x" * 11})
        assert response.status_code == 422


class TestRedeem:
    def test_redeem_then_expire(self, client, clock):
        short_id = create(client, secretText="hello world", expiresDays=1)["shortId"]

        response = client.get(f"/api/v1/secrets/{short_id}")
        assert response.status_code == 200
        data = response.json()
        assert data["secretText"] == "hello world"
        assert data["passwordRequired"] is False
        assert data["expiresAt"] == iso(START + timedelta(days=1))
        assert data["remainingTime"] == "1 day"

        clock.advance(days=2)
        expired = client.get(f"/api/v1/secrets/{short_id}")
        assert expired.status_code == 410
        assert expired.json() == {
            "error": "Secret has expired",
            "expiresAt": iso(START + timedelta(days=1)),
        }

        gone = client.get(f"/api/v1/secrets/{short_id}")
        assert gone.status_code == 404
        assert gone.json() == {"error": "Secret not found"}

    def test_redeem_is_repeatable(self, client):
        short_id = create(client)["shortId"]
        for _ in range(2):
            assert client.get(f"/api/v1/secrets/{short_id}").json()["secretText"] == "hello world"

    def test_single_use_setting(self, client):
        short_id = create(client)["shortId"]
        with patch.object(settings, "single_use_secrets", True):
            assert client.get(f"/api/v1/secrets/{short_id}").status_code == 200
            assert client.get(f"/api/v1/secrets/{short_id}").status_code == 404

    def test_unknown_short_id(self, client):
        response = client.get("/api/v1/secrets/unknown1")
        assert response.status_code == 404
        assert response.json()["error"] == "Secret not found"

    def test_password_flow(self, client):
        short_id = create(client, secretText="pw secret", password="pw1")["shortId"]

        required = client.post(f"/api/v1/secrets/{short_id}", json={})
        assert required.status_code == 200
        assert required.json() == {"passwordRequired": True}

        via_get = client.get(f"/api/v1/secrets/{short_id}")
        assert via_get.json() == {"passwordRequired": True}

        wrong = client.post(f"/api/v1/secrets/{short_id}", json={"password": "wrong"})
        assert wrong.status_code == 401
        assert wrong.json() == {"error": "Password is incorrect, please try again"}

        ok = client.post(f"/api/v1/secrets/{short_id}", json={"password": "pw1"})
        assert ok.status_code == 200
        assert ok.json()["secretText"] == "pw secret"

    def test_post_without_body_on_unprotected_secret(self, client):
        short_id = create(client)["shortId"]
        response = client.post(f"/api/v1/secrets/{short_id}")
        assert response.status_code == 200
        assert response.json()["secretText"] == "hello world"

    def test_expired_protected_secret(self, client, clock):
        short_id = create(client, password="pw1", expiresDays=1)["shortId"]
        clock.advance(days=1)
        response = client.post(f"/api/v1/secrets/{short_id}", json={"password": "pw1"})
        assert response.status_code == 410


class TestExtendedRedeem:
    def test_extended_access(self, client):
        short_id = create(client, extendable=True, email="a@x.com")["shortId"]

        ok = client.post(f"/api/v1/secrets/{short_id}/extended", json={"email": "a@x.com"})
        assert ok.status_code == 200
        assert ok.json()["secretText"] == "hello world"

        denied = client.post(f"/api/v1/secrets/{short_id}/extended", json={"email": "b@x.com"})
        assert denied.status_code == 403
        assert denied.json() == {"error": "Extended access not granted for this email"}

    def test_extended_requires_email(self, client):
        short_id = create(client, extendable=True, email="a@x.com")["shortId"]
        response = client.post(f"/api/v1/secrets/{short_id}/extended", json={"email": ""})
        assert response.status_code == 422

    def test_readable_after_primary_link_expires(self, client, clock):
        short_id = create(client, extendable=True, email="a@x.com", expiresDays=1)["shortId"]
        clock.advance(days=1, minutes=1)

        primary = client.get(f"/api/v1/secrets/{short_id}")
        assert primary.status_code == 410

        response = client.post(f"/api/v1/secrets/{short_id}/extended", json={"email": "a@x.com"})
        assert response.status_code == 200
        assert response.json()["secretText"] == "hello world"
        assert response.json()["expiresAt"] == iso(
            START + timedelta(days=1 + settings.grant_expiry_days)
        )

    def test_expired_grant(self, client, clock):
        short_id = create(client, extendable=True, email="a@x.com", expiresDays=1)["shortId"]
        clock.advance(days=settings.grant_expiry_days + 3)

        response = client.post(f"/api/v1/secrets/{short_id}/extended", json={"email": "a@x.com"})
        assert response.status_code == 410
        assert response.json()["expiresAt"] == iso(
            START + timedelta(days=1 + settings.grant_expiry_days)
        )

    def test_unknown_short_id(self, client):
        response = client.post("/api/v1/secrets/unknown1/extended", json={"email": "a@x.com"})
        assert response.status_code == 404


class TestHealth:
    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "healthy"}
