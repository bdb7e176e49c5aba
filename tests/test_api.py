"""Tests for the quote scanner HTTP API."""

import base64
import json

import pytest
from fastapi.testclient import TestClient

from quote_scanner.core.scorer import INVALID_QUOTE_WARNING
from quote_scanner.core.signals import QuoteSignals
from quote_scanner.extraction.providers import MockSignalProvider
from quote_scanner.website_api import config
from quote_scanner.website_api.main import create_app
from quote_scanner.website_api.middleware.auth import sign_body

SECRET = "test-secret"
AUTH = {"X-QS-Secret": SECRET}


@pytest.fixture
def client(monkeypatch):
    """API client with mock extraction and a known secret."""
    monkeypatch.setenv("QS_API_SECRET", SECRET)
    monkeypatch.setenv("QS_USE_MOCK_PROVIDER", "true")
    monkeypatch.delenv("QS_GEMINI_API_KEY", raising=False)
    config.reset_settings()
    with TestClient(create_app()) as test_client:
        yield test_client
    config.reset_settings()


@pytest.fixture
def no_provider(monkeypatch):
    """Turn off every signal provider."""
    monkeypatch.setenv("QS_USE_MOCK_PROVIDER", "false")
    config.reset_settings()


@pytest.fixture
def sample_signals():
    """Provider-shaped sample signals."""
    return MockSignalProvider.SAMPLE_SIGNALS.to_dict()


class TestHealth:
    """Tests for health routes."""

    def test_health(self, client):
        """Health needs no auth."""
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"
        assert response.json()["version"] == "1.0.0"

    def test_ready_with_mock(self, client):
        """Ready reports the configured provider."""
        assert client.get("/ready").json() == {"status": "ready", "provider": "mock"}

    def test_not_ready(self, client, no_provider):
        """Ready reports a missing provider."""
        assert client.get("/ready").json()["status"] == "not_ready"


class TestAuth:
    """Tests for shared-secret and signature auth."""

    def test_missing_auth(self, client, sample_signals):
        """Unsigned requests are rejected."""
        response = client.post("/v1/scans/score", json=sample_signals)
        assert response.status_code == 401
        assert response.json()["detail"]["error"] == "auth_error"

    def test_wrong_secret(self, client, sample_signals):
        """A wrong secret is rejected."""
        response = client.post("/v1/scans/score", json=sample_signals, headers={"X-QS-Secret": "nope"})
        assert response.status_code == 401

    def test_hmac_signature(self, client, sample_signals):
        """A body signature is accepted."""
        body = json.dumps(sample_signals).encode()
        response = client.post(
            "/v1/scans/score",
            content=body,
            headers={"X-QS-Signature": sign_body(body, SECRET), "Content-Type": "application/json"},
        )
        assert response.status_code == 200
        assert response.json()["overallScore"] == 74


class TestScoreRoute:
    """Tests for POST /v1/scans/score."""

    def test_score(self, client, sample_signals):
        """Signals come back as a report."""
        response = client.post("/v1/scans/score", json=sample_signals, headers=AUTH)
        assert response.status_code == 200

        data = response.json()
        assert data["overallScore"] == 74
        assert data["pricePerOpening"] == "$1,450"
        assert data["missingItems"] == ["Wall repair scope unclear (stucco/drywall/paint after install)."]
        assert data.get("rawSignals") is None

    def test_include_signals(self, client, sample_signals):
        """Raw signals are echoed on request."""
        response = client.post("/v1/scans/score?include_signals=true", json=sample_signals, headers=AUTH)
        assert response.json()["rawSignals"]["totalPriceValue"] == 17400

    def test_opening_hint(self, client, sample_signals):
        """The hint fills in a missing opening count."""
        sample_signals["openingCountEstimate"] = None
        sample_signals["openingCountHint"] = 10
        response = client.post("/v1/scans/score", json=sample_signals, headers=AUTH)
        assert response.json()["pricePerOpening"] == "$1,750"

    def test_bad_hint(self, client, sample_signals):
        """A non-numeric hint is rejected."""
        sample_signals["openingCountHint"] = "ten"
        response = client.post("/v1/scans/score", json=sample_signals, headers=AUTH)
        assert response.status_code == 400

    def test_invalid_quote(self, client):
        """Non-quotes are returned ungraded, not as errors."""
        payload = QuoteSignals(is_valid_quote=False, validity_reason="Receipt").to_dict()
        response = client.post("/v1/scans/score", json=payload, headers=AUTH)
        assert response.status_code == 200
        assert response.json()["overallScore"] == 0
        assert response.json()["warnings"] == [INVALID_QUOTE_WARNING]

    def test_malformed_signals(self, client, sample_signals):
        """Signals that break the contract are a 400."""
        del sample_signals["hasLaminatedMention"]
        response = client.post("/v1/scans/score", json=sample_signals, headers=AUTH)
        assert response.status_code == 400
        assert response.json()["detail"]["error"] == "validation_error"
        assert "hasLaminatedMention" in response.json()["detail"]["detail"]

    def test_invalid_json(self, client):
        """A body that is not JSON is a 400."""
        response = client.post(
            "/v1/scans/score",
            content=b"not json",
            headers={**AUTH, "Content-Type": "application/json"},
        )
        assert response.status_code == 400


class TestAnalyzeRoute:
    """Tests for POST /v1/scans/analyze."""

    def upload(self, data: bytes = b"fake quote image") -> dict:
        return {
            "fileData": base64.b64encode(data).decode("ascii"),
            "mimeType": "image/jpeg",
            "fileName": "quote.jpg",
        }

    def test_analyze_with_mock(self, client):
        """Upload runs the provider and scores the result."""
        response = client.post("/v1/scans/analyze", json=self.upload(), headers=AUTH)
        assert response.status_code == 200
        assert response.json()["overallScore"] == 74

    def test_data_url_prefix(self, client):
        """Data URLs from the browser are accepted."""
        payload = self.upload()
        payload["fileData"] = "data:image/jpeg;base64," + payload["fileData"]
        response = client.post("/v1/scans/analyze", json=payload, headers=AUTH)
        assert response.status_code == 200

    def test_invalid_base64(self, client):
        """Garbage file data is a 400."""
        payload = self.upload()
        payload["fileData"] = "!!!not-base64!!!"
        response = client.post("/v1/scans/analyze", json=payload, headers=AUTH)
        assert response.status_code == 400

    def test_empty_file(self, client):
        """An empty upload is a 400."""
        payload = self.upload()
        payload["fileData"] = ""
        response = client.post("/v1/scans/analyze", json=payload, headers=AUTH)
        assert response.status_code == 400
        assert "empty" in response.json()["detail"]["detail"]

    def test_bad_opening_hint(self, client):
        """Opening hints must be positive."""
        payload = self.upload()
        payload["openingCountHint"] = 0
        response = client.post("/v1/scans/analyze", json=payload, headers=AUTH)
        assert response.status_code == 422

    def test_provider_unavailable(self, client, no_provider):
        """No provider is a 502."""
        response = client.post("/v1/scans/analyze", json=self.upload(), headers=AUTH)
        assert response.status_code == 502
        assert response.json()["detail"]["error"] == "provider_error"


class TestLeadValueRoute:
    """Tests for POST /v1/leads/value."""

    def test_verified_whale(self, client):
        """A verified whale gets the bonus."""
        response = client.post(
            "/v1/leads/value",
            json={"isHomeowner": True, "windowCount": "entire_home", "timeline": "asap", "smsVerified": True},
            headers=AUTH,
        )
        assert response.status_code == 200
        data = response.json()
        assert data["value"] == 600
        assert data["tier"] == "whale"
        assert data["isDisqualified"] is False
        assert data["reasoning"].endswith("(+100 SMS verified bonus)")

    def test_string_answers(self, client):
        """Funnel answer strings are accepted."""
        response = client.post(
            "/v1/leads/value",
            json={"isHomeowner": "no", "windowCount": "6-10", "timeline": "asap"},
            headers=AUTH,
        )
        data = response.json()
        assert data["value"] == 0
        assert data["tier"] == "disqualified"
        assert data["isDisqualified"] is True

    def test_empty_body(self, client):
        """No answers is an unknown-homeowner lead."""
        response = client.post("/v1/leads/value", json={}, headers=AUTH)
        assert response.json()["value"] == 10

    def test_unknown_answer(self, client):
        """Answers outside the funnel options are a 400."""
        response = client.post("/v1/leads/value", json={"windowCount": "20+"}, headers=AUTH)
        assert response.status_code == 400

    def test_requires_auth(self, client):
        """Lead value needs auth."""
        assert client.post("/v1/leads/value", json={}).status_code == 401
