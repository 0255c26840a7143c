"""Tests for the analytics API client."""

import asyncio
from datetime import date

import pytest
import requests

from expenseflow.api import AnalyticsClient, EnvCredentialStore, StaticCredentialStore
from expenseflow.core.exceptions import AuthError, TransportError
from expenseflow.core.models import Period
from tests.fakes import FORECAST, TRENDS, VELOCITY, FakeResponse, FakeSession


def make_client(settings, session, token="secret-token") -> AnalyticsClient:
    return AnalyticsClient(settings, StaticCredentialStore(token), session=session)


class TestAuthentication:
    """Tests for the token requirement."""

    def test_missing_token_raises_without_network_call(self, settings) -> None:
        """Test that no request is made when no token is stored."""
        session = FakeSession()
        client = make_client(settings, session, token=None)

        with pytest.raises(AuthError, match="No authentication token found"):
            asyncio.run(client.fetch_spending_trends(Period.MONTHLY, 6))

        assert session.calls == []

    def test_empty_token_is_missing(self, settings) -> None:
        session = FakeSession()
        client = make_client(settings, session, token="")

        with pytest.raises(AuthError):
            asyncio.run(client.fetch_insights())

        assert session.calls == []

    def test_bearer_header_sent(self, settings) -> None:
        """Test that the token travels as a bearer authorization header."""
        session = FakeSession()
        client = make_client(settings, session)

        asyncio.run(client.fetch_insights())

        headers = session.calls[0]["headers"]
        assert headers["Authorization"] == "Bearer secret-token"
        assert headers["Content-Type"] == "application/json"

    def test_env_credential_store(self, settings) -> None:
        """Test reading the token from an environment mapping."""
        store = EnvCredentialStore(env={"EXPENSEFLOW_AUTH_TOKEN": "from-env"})
        session = FakeSession()
        client = AnalyticsClient(settings, store, session=session)

        asyncio.run(client.fetch_forecast())

        assert session.calls[0]["headers"]["Authorization"] == "Bearer from-env"


class TestRequests:
    """Tests for URLs and query parameters."""

    def test_trends_url_and_params(self, settings) -> None:
        session = FakeSession()
        client = make_client(settings, session)

        data = asyncio.run(client.fetch_spending_trends(Period.WEEKLY, 12))

        call = session.calls[0]
        assert call["url"] == "http://api.test/api/analytics/spending-trends"
        assert call["params"] == {"period": "weekly", "months": "12"}
        assert call["timeout"] == settings.request_timeout
        assert data == TRENDS

    def test_trends_accepts_plain_string_period(self, settings) -> None:
        session = FakeSession()
        client = make_client(settings, session)

        asyncio.run(client.fetch_spending_trends("yearly", 24))

        assert session.calls[0]["params"] == {"period": "yearly", "months": "24"}

    def test_category_breakdown_default_params(self, settings) -> None:
        session = FakeSession()
        client = make_client(settings, session)

        asyncio.run(client.fetch_category_breakdown())

        assert session.calls[0]["params"] == {"type": "expense"}

    def test_category_breakdown_date_range(self, settings) -> None:
        """Test that dates are sent as ISO strings and empty ones are omitted."""
        session = FakeSession()
        client = make_client(settings, session)

        asyncio.run(client.fetch_category_breakdown("income", date(2024, 1, 1), ""))

        assert session.calls[0]["params"] == {"type": "income", "startDate": "2024-01-01"}

    @pytest.mark.parametrize(
        "method, endpoint",
        [
            ("fetch_insights", "/insights"),
            ("fetch_predictions", "/predictions"),
            ("fetch_spending_velocity", "/velocity"),
            ("fetch_forecast", "/forecast"),
        ],
    )
    def test_parameterless_views(self, settings, method, endpoint) -> None:
        session = FakeSession()
        client = make_client(settings, session)

        asyncio.run(getattr(client, method)())

        assert session.calls[0]["url"] == f"http://api.test/api/analytics{endpoint}"
        assert session.calls[0]["params"] is None


class TestResponses:
    """Tests for status handling and envelope unwrapping."""

    def test_non_2xx_raises_transport_error(self, settings) -> None:
        session = FakeSession({"/insights": FakeResponse(500, {"error": "boom"}, "Internal Server Error")})
        client = make_client(settings, session)

        with pytest.raises(TransportError) as exc_info:
            asyncio.run(client.fetch_insights())

        assert exc_info.value.status_code == 500
        assert str(exc_info.value) == "API request failed: 500 Internal Server Error"

    def test_connection_error_raises_transport_error(self, settings) -> None:
        session = FakeSession({"/forecast": requests.ConnectionError("connection refused")})
        client = make_client(settings, session)

        with pytest.raises(TransportError) as exc_info:
            asyncio.run(client.fetch_forecast())

        assert exc_info.value.status_code is None
        assert "connection refused" in str(exc_info.value)

    def test_non_json_body_raises_transport_error(self, settings) -> None:
        session = FakeSession({"/velocity": FakeResponse(200, ValueError("no json"))})
        client = make_client(settings, session)

        with pytest.raises(TransportError, match="Invalid JSON response"):
            asyncio.run(client.fetch_spending_velocity())

    def test_missing_data_field_returns_none(self, settings) -> None:
        session = FakeSession({"/insights": FakeResponse(200, {"status": "ok"})})
        client = make_client(settings, session)

        assert asyncio.run(client.fetch_insights()) is None

    def test_non_object_body_returns_none(self, settings) -> None:
        session = FakeSession({"/insights": FakeResponse(200, ["not", "an", "envelope"])})
        client = make_client(settings, session)

        assert asyncio.run(client.fetch_insights()) is None


class TestSnapshot:
    """Tests for the last-fetched payload snapshot."""

    def test_success_updates_slot(self, settings) -> None:
        client = make_client(settings, FakeSession())

        asyncio.run(client.fetch_spending_velocity())

        assert client.snapshot.velocity == VELOCITY
        assert client.snapshot.forecast is None

    def test_failure_leaves_slot_untouched(self, settings) -> None:
        """Test that a failed fetch keeps the previous payload."""
        session = FakeSession()
        client = make_client(settings, session)
        asyncio.run(client.fetch_forecast())

        session.responses["/forecast"] = FakeResponse(503, None, "Service Unavailable")
        with pytest.raises(TransportError):
            asyncio.run(client.fetch_forecast())

        assert client.snapshot.forecast == FORECAST

    def test_clear_cache(self, settings) -> None:
        client = make_client(settings, FakeSession())
        asyncio.run(client.fetch_forecast())

        client.clear_cache()

        assert client.snapshot.forecast is None

    def test_snapshot_is_a_copy(self, settings) -> None:
        client = make_client(settings, FakeSession())
        snapshot = client.snapshot

        snapshot.insights = ["tampered"]

        assert client.snapshot.insights is None


class TestSessions:
    """Tests for HTTP session use across concurrent fetches."""

    def test_request_uses_own_session_without_injection(self, settings, monkeypatch) -> None:
        """Test that concurrent fetches never share a session the client created."""
        created = []

        def new_session():
            session = FakeSession()
            created.append(session)
            return session

        monkeypatch.setattr("expenseflow.api.client.requests.Session", new_session)
        client = AnalyticsClient(settings, StaticCredentialStore("t"))

        async def fetch_both():
            return await asyncio.gather(client.fetch_spending_velocity(), client.fetch_forecast())

        velocity, forecast = asyncio.run(fetch_both())

        assert velocity == VELOCITY
        assert forecast == FORECAST
        assert len(created) == 2
        assert all(len(session.calls) == 1 for session in created)
        assert all(session.closed for session in created)

    def test_injected_session_shared_and_left_open(self, settings) -> None:
        session = FakeSession()
        client = make_client(settings, session)

        asyncio.run(client.fetch_insights())
        asyncio.run(client.fetch_forecast())

        assert len(session.calls) == 2
        assert session.closed is False
