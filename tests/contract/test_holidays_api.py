"""
Contract tests for the holiday proxy HTTP surface.

Tests verify the API contract end to end through the FastAPI app with a
fake upstream:
- Status codes and the flat {"error": ...} body for every failure
- Byte-for-byte pass-through of successful upstream payloads
- Zero upstream calls on validation and configuration faults
- The API key never appearing in any response
- CORS, health and metrics endpoints
"""

import httpx
import pytest
from fastapi.testclient import TestClient

from proxy.src.config import Settings
from proxy.src.main import create_app

API_KEY = "secret-key-123"
UPSTREAM = "https://upstream.test/v1"

NEW_YEAR_BODY = (
    b'{"status":200,"holidays":[{"name":"New Year","date":"2023-01-01","type":"National"}]}'
)
QUOTA_MESSAGE = (
    "Access to current or future holiday data is restricted. Please upgrade your account."
)


# ============================================================================
# FIXTURES
# ============================================================================


class FakeUpstream:
    """Records upstream calls and answers with a configurable handler."""

    def __init__(self):
        self.calls = []
        self.respond = lambda request: httpx.Response(200, content=NEW_YEAR_BODY)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.calls.append(request)
        return self.respond(request)


def make_settings(**overrides) -> Settings:
    values = {
        "api_key": API_KEY,
        "upstream_base_url": UPSTREAM,
        "log_format": "text",
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.fixture
def upstream():
    return FakeUpstream()


@pytest.fixture
def client(upstream, monkeypatch):
    monkeypatch.delenv("API_KEY", raising=False)
    monkeypatch.delenv("HOLIDAY_PROXY_API_KEY", raising=False)
    app = create_app(make_settings(), transport=httpx.MockTransport(upstream))
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def keyless_client(upstream, monkeypatch):
    monkeypatch.delenv("API_KEY", raising=False)
    monkeypatch.delenv("HOLIDAY_PROXY_API_KEY", raising=False)
    app = create_app(make_settings(api_key=None), transport=httpx.MockTransport(upstream))
    with TestClient(app) as test_client:
        yield test_client


# ============================================================================
# VALIDATION
# ============================================================================


class TestMissingParameters:
    """GET /api/holidays without country or year."""

    @pytest.mark.parametrize(
        "query",
        ["", "?country=US", "?year=2023", "?country=&year=2023", "?country=US&year="],
    )
    def test_returns_400_without_upstream_call(self, client, upstream, query):
        response = client.get(f"/api/holidays{query}")

        assert response.status_code == 400
        assert response.json() == {"error": "Country and year are required"}
        assert upstream.calls == []


# ============================================================================
# CONFIGURATION
# ============================================================================


class TestMissingCredential:
    """Proxy running without an API key."""

    def test_holidays_returns_500_without_upstream_call(self, keyless_client, upstream):
        response = keyless_client.get("/api/holidays?country=US&year=2023")

        assert response.status_code == 500
        assert response.json() == {"error": "API key is not configured"}
        assert upstream.calls == []

    def test_countries_returns_500_without_upstream_call(self, keyless_client, upstream):
        response = keyless_client.get("/api/countries")

        assert response.status_code == 500
        assert response.json() == {"error": "API key is not configured"}
        assert upstream.calls == []

    def test_missing_parameters_still_win(self, keyless_client):
        response = keyless_client.get("/api/holidays?country=US")

        assert response.status_code == 400


# ============================================================================
# SUCCESS PASS-THROUGH
# ============================================================================


class TestSuccessfulLookup:
    """Upstream success is forwarded unchanged."""

    def test_body_is_forwarded_verbatim(self, client, upstream):
        response = client.get("/api/holidays?country=US&year=2023")

        assert response.status_code == 200
        assert response.content == NEW_YEAR_BODY
        assert response.headers["content-type"].startswith("application/json")

    def test_upstream_receives_key_and_parameters(self, client, upstream):
        client.get("/api/holidays?country=US&year=2023")

        assert len(upstream.calls) == 1
        params = upstream.calls[0].url.params
        assert upstream.calls[0].url.path == "/v1/holidays"
        assert params["key"] == API_KEY
        assert params["country"] == "US"
        assert params["year"] == "2023"

    def test_extra_fields_and_order_survive(self, client, upstream):
        body = (
            b'{"status":200,"requests":{"used":3},"holidays":['
            b'{"name":"C","date":"2023-12-25","type":"National","public":true},'
            b'{"name":"A","date":"2023-01-01","type":"National"},'
            b'{"name":"B","date":"2023-07-04","type":"National"}]}'
        )
        upstream.respond = lambda request: httpx.Response(200, content=body)

        response = client.get("/api/holidays?country=US&year=2023")

        assert response.content == body
        assert [h["name"] for h in response.json()["holidays"]] == ["C", "A", "B"]

    def test_upstream_success_status_is_kept(self, client, upstream):
        upstream.respond = lambda request: httpx.Response(203, content=NEW_YEAR_BODY)

        response = client.get("/api/holidays?country=US&year=2023")

        assert response.status_code == 203

    def test_repeated_request_is_byte_identical(self, client):
        first = client.get("/api/holidays?country=US&year=2023")
        second = client.get("/api/holidays?country=US&year=2023")

        assert first.status_code == second.status_code == 200
        assert first.content == second.content

    def test_countries_are_forwarded(self, client, upstream):
        body = b'{"status":200,"countries":[{"code":"US","name":"United States"}]}'
        upstream.respond = lambda request: httpx.Response(200, content=body)

        response = client.get("/api/countries")

        assert response.status_code == 200
        assert response.content == body
        assert upstream.calls[0].url.path == "/v1/countries"


# ============================================================================
# UPSTREAM FAILURES
# ============================================================================


class TestUpstreamFailures:
    """Upstream problems map to the fixed error bodies."""

    def test_quota_restriction_returns_402(self, client, upstream):
        upstream.respond = lambda request: httpx.Response(
            200, json={"status": 402, "error": "Free accounts are limited to last year's data."}
        )

        response = client.get("/api/holidays?country=US&year=2030")

        assert response.status_code == 402
        assert response.json() == {"error": QUOTA_MESSAGE}

    def test_http_402_returns_402(self, client, upstream):
        upstream.respond = lambda request: httpx.Response(402, json={"status": 402})

        response = client.get("/api/holidays?country=US&year=2030")

        assert response.status_code == 402
        assert response.json() == {"error": QUOTA_MESSAGE}

    def test_network_error_returns_500(self, client, upstream):
        def fail(request):
            raise httpx.ConnectError("connection refused", request=request)

        upstream.respond = fail

        response = client.get("/api/holidays?country=US&year=2023")

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to fetch holiday data"}

    def test_timeout_returns_500(self, client, upstream):
        def slow(request):
            raise httpx.ReadTimeout("timed out", request=request)

        upstream.respond = slow

        response = client.get("/api/holidays?country=US&year=2023")

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to fetch holiday data"}

    def test_malformed_body_returns_500(self, client, upstream):
        upstream.respond = lambda request: httpx.Response(200, content=b"not json")

        response = client.get("/api/holidays?country=US&year=2023")

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to fetch holiday data"}

    def test_upstream_error_body_is_not_forwarded(self, client, upstream):
        upstream.respond = lambda request: httpx.Response(
            401, json={"status": 401, "error": f"Invalid key {API_KEY}"}
        )

        response = client.get("/api/holidays?country=US&year=2023")

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to fetch holiday data"}

    def test_countries_failure_message(self, client, upstream):
        def fail(request):
            raise httpx.ConnectError("connection refused", request=request)

        upstream.respond = fail

        response = client.get("/api/countries")

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to fetch country data"}

    def test_one_upstream_call_even_on_failure(self, client, upstream):
        def fail(request):
            raise httpx.ConnectError("connection refused", request=request)

        upstream.respond = fail

        client.get("/api/holidays?country=US&year=2023")

        assert len(upstream.calls) == 1


# ============================================================================
# CREDENTIAL SECRECY
# ============================================================================


class TestCredentialSecrecy:
    """The API key stays inside the proxy."""

    @pytest.mark.parametrize(
        "path",
        [
            "/api/holidays?country=US&year=2023",
            "/api/holidays",
            "/api/countries",
            "/health",
            "/openapi.json",
        ],
    )
    def test_key_absent_from_responses(self, client, upstream, path):
        response = client.get(path)

        assert API_KEY not in response.text
        assert all(API_KEY not in value for value in response.headers.values())

    def test_key_absent_from_failure_responses(self, client, upstream):
        upstream.respond = lambda request: httpx.Response(402, json={"error": API_KEY})

        response = client.get("/api/holidays?country=US&year=2030")

        assert API_KEY not in response.text


# ============================================================================
# CROSS-CUTTING
# ============================================================================


class TestOperationalSurface:
    """CORS, correlation IDs, health and metrics."""

    def test_cors_allows_any_origin(self, client):
        response = client.get(
            "/api/holidays?country=US&year=2023",
            headers={"Origin": "http://example.com"},
        )

        assert response.headers["access-control-allow-origin"] == "*"

    def test_cors_preflight(self, client):
        response = client.options(
            "/api/holidays",
            headers={
                "Origin": "http://example.com",
                "Access-Control-Request-Method": "GET",
            },
        )

        assert response.status_code == 200
        assert response.headers["access-control-allow-origin"] == "*"

    def test_correlation_id_is_echoed(self, client):
        response = client.get(
            "/api/holidays?country=US&year=2023",
            headers={"X-Correlation-ID": "abc-123"},
        )

        assert response.headers["X-Correlation-ID"] == "abc-123"

    def test_correlation_id_is_generated(self, client):
        response = client.get("/api/holidays?country=US&year=2023")

        assert response.headers["X-Correlation-ID"]

    def test_health_reports_key_presence(self, client, keyless_client, upstream):
        assert client.get("/health").json()["api_key_configured"] is True
        assert keyless_client.get("/health").json()["api_key_configured"] is False
        assert upstream.calls == []

    def test_unknown_route_uses_flat_error(self, client):
        response = client.get("/api/nope")

        assert response.status_code == 404
        assert "error" in response.json()

    def test_metrics_count_upstream_outcomes(self, client, upstream):
        client.get("/api/holidays?country=US&year=2023")

        response = client.get("/metrics")

        assert response.status_code == 200
        assert 'upstream_requests_total{resource="holidays",outcome="success"} 1.0' in response.text

    def test_metrics_can_be_disabled(self, upstream):
        app = create_app(
            make_settings(metrics_enabled=False), transport=httpx.MockTransport(upstream)
        )
        with TestClient(app) as test_client:
            assert test_client.get("/metrics").status_code == 404
