"""Tests for the payment session hand-off endpoints.

Each test builds its own app so store and limiter state never leaks between
tests. All stores share the fake clock from conftest.
"""

import uuid

import pytest
from fastapi.testclient import TestClient

from sessiongate.adapters.license_store import InMemoryLicenseStore
from sessiongate.adapters.rate_limit import InMemoryFixedWindowRateLimiter
from sessiongate.adapters.session_store import InMemorySessionTokenStore
from sessiongate.core.app_factory import create_app
from sessiongate.core.config import settings


@pytest.fixture
def client(clock) -> TestClient:
    app = create_app(
        session_store=InMemorySessionTokenStore(expiry_seconds=30 * 60, clock=clock),
        rate_limiter=InMemoryFixedWindowRateLimiter(clock=clock),
        license_store=InMemoryLicenseStore(clock=clock),
    )
    return TestClient(app)


@pytest.fixture
def token() -> str:
    return str(uuid.uuid4())


def _create(client: TestClient, token: str, **kwargs):
    return client.post("/v1/session/create", json={"token": token}, **kwargs)


def _verify(client: TestClient, token, **kwargs):
    return client.post("/v1/session/verify", json={"token": token}, **kwargs)


class TestCreateSession:
    def test_accepts_uuid4_token(self, client: TestClient, token: str) -> None:
        response = _create(client, token)

        assert response.status_code == 200
        assert response.json() == {
            "success": True,
            "token": token,
            "message": "Session created successfully",
        }

    def test_missing_token_returns_400(self, client: TestClient) -> None:
        response = client.post("/v1/session/create", json={})

        assert response.status_code == 400
        assert response.json() == {"error": "Invalid token"}

    def test_non_string_token_returns_400(self, client: TestClient) -> None:
        response = client.post("/v1/session/create", json={"token": 1234})

        assert response.status_code == 400
        assert response.json() == {"error": "Invalid token"}

    def test_malformed_token_returns_400(self, client: TestClient) -> None:
        response = _create(client, "not-a-uuid")

        assert response.status_code == 400
        assert response.json() == {"error": "Invalid token format"}

    def test_non_json_body_returns_400(self, client: TestClient) -> None:
        response = client.post(
            "/v1/session/create",
            content=b"token=abc",
            headers={"Content-Type": "application/x-www-form-urlencoded"},
        )

        assert response.status_code == 400
        assert response.json() == {"error": "Invalid token"}

    def test_throttled_after_budget(
        self, client: TestClient, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setattr(settings.app, "session_create_max_attempts", 2)
        monkeypatch.setattr(settings.app, "session_create_window_seconds", 60)

        assert _create(client, str(uuid.uuid4())).status_code == 200
        assert _create(client, str(uuid.uuid4())).status_code == 200
        response = _create(client, str(uuid.uuid4()))

        assert response.status_code == 429
        assert response.json()["error"]["code"] == "rate_limit_exceeded"
        assert response.headers["Retry-After"] == "60"
        assert response.headers["X-RateLimit-Limit"] == "2"
        assert response.headers["X-RateLimit-Remaining"] == "0"

    def test_throttle_headers_can_be_disabled(
        self, client: TestClient, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setattr(settings.app, "session_create_max_attempts", 1)
        monkeypatch.setattr(settings.app, "rate_limit_include_headers", False)

        _create(client, str(uuid.uuid4()))
        response = _create(client, str(uuid.uuid4()))

        assert response.status_code == 429
        assert "Retry-After" not in response.headers

    def test_throttling_disabled(
        self, client: TestClient, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setattr(settings.app, "rate_limit_enabled", False)
        monkeypatch.setattr(settings.app, "session_create_max_attempts", 1)

        for _ in range(3):
            assert _create(client, str(uuid.uuid4())).status_code == 200


class TestVerifySession:
    def test_create_then_verify(self, client: TestClient, token: str) -> None:
        _create(client, token)

        response = _verify(client, token)

        assert response.status_code == 200
        assert response.json() == {"valid": True, "message": "Session verified successfully"}

    def test_second_verify_rejected(self, client: TestClient, token: str) -> None:
        _create(client, token)
        _verify(client, token)

        response = _verify(client, token)

        assert response.status_code == 401
        assert response.json() == {"valid": False, "error": "Session already used"}

    def test_unknown_token_rejected(self, client: TestClient) -> None:
        response = _verify(client, "nonexistent-token")

        assert response.status_code == 401
        assert response.json() == {"valid": False, "error": "Session not found"}

    def test_expired_token_rejected(self, client: TestClient, clock, token: str) -> None:
        _create(client, token)
        clock.advance(30 * 60 + 1)

        response = _verify(client, token)

        assert response.status_code == 401
        assert response.json() == {"valid": False, "error": "Session expired"}

    @pytest.mark.parametrize("body", [{}, {"token": ""}, {"token": 42}, {"token": None}])
    def test_missing_or_wrong_type_returns_400(self, client: TestClient, body: dict) -> None:
        response = client.post("/v1/session/verify", json=body)

        assert response.status_code == 400
        assert response.json() == {"valid": False, "error": "Invalid token"}

    def test_repeated_failures_are_throttled(self, client: TestClient) -> None:
        for _ in range(settings.app.session_verify_max_attempts):
            assert _verify(client, "nonexistent-token").status_code == 401

        response = _verify(client, "nonexistent-token")

        assert response.status_code == 429
        body = response.json()
        assert body["valid"] is False
        assert body["resetIn"] == settings.app.session_verify_window_seconds // 60
        assert "Retry-After" in response.headers

    def test_throttle_is_per_client_ip(self, client: TestClient) -> None:
        attacker = {"X-Forwarded-For": "203.0.113.7, 10.0.0.1"}
        for _ in range(settings.app.session_verify_max_attempts):
            _verify(client, "nonexistent-token", headers=attacker)

        assert _verify(client, "nonexistent-token", headers=attacker).status_code == 429
        other = {"X-Real-IP": "198.51.100.2"}
        assert _verify(client, "nonexistent-token", headers=other).status_code == 401

    def test_success_resets_failure_budget(self, client: TestClient, token: str) -> None:
        for _ in range(settings.app.session_verify_max_attempts - 1):
            _verify(client, "nonexistent-token")
        _create(client, token)

        assert _verify(client, token).status_code == 200
        for _ in range(settings.app.session_verify_max_attempts - 1):
            assert _verify(client, "nonexistent-token").status_code == 401

    def test_throttle_clears_after_window(self, client: TestClient, clock) -> None:
        for _ in range(settings.app.session_verify_max_attempts + 1):
            _verify(client, "nonexistent-token")

        clock.advance(settings.app.session_verify_window_seconds + 1)

        assert _verify(client, "nonexistent-token").status_code == 401


class TestCheckSession:
    def test_check_does_not_consume(self, client: TestClient, token: str) -> None:
        _create(client, token)

        first = client.post("/v1/session/check", json={"token": token})
        second = client.post("/v1/session/check", json={"token": token})

        assert first.status_code == 200
        assert first.json() == {"valid": True, "message": "Session is valid"}
        assert second.status_code == 200
        assert _verify(client, token).status_code == 200

    def test_check_after_use_rejected(self, client: TestClient, token: str) -> None:
        _create(client, token)
        _verify(client, token)

        response = client.post("/v1/session/check", json={"token": token})

        assert response.status_code == 401
        assert response.json()["error"] == "Session already used"

    def test_check_does_not_restore_failure_budget(self, client: TestClient, token: str) -> None:
        _create(client, token)
        for _ in range(settings.app.session_verify_max_attempts - 1):
            assert _verify(client, "nonexistent-token").status_code == 401

        check = client.post("/v1/session/check", json={"token": token})
        response = _verify(client, "nonexistent-token")

        assert check.status_code == 200
        assert response.status_code == 429
        assert client.post("/v1/session/check", json={"token": token}).status_code == 429
