"""Analytics API client.

One coroutine per analytical view. All of them share the same request
contract: a bearer token is required, non-2xx answers become
TransportError, and the {"data": ...} envelope is unwrapped. Requests run
on a worker thread so several views can be fetched concurrently.
"""

import asyncio
import logging
from datetime import date
from typing import Any

import requests

from expenseflow.api.credentials import CredentialStore
from expenseflow.core.exceptions import AuthError, TransportError
from expenseflow.core.models import AnalyticsSettings, AnalyticsSnapshot, Period

logger = logging.getLogger(__name__)


def _iso(value: date | str | None) -> str | None:
    if value is None or value == "":
        return None
    if isinstance(value, date):
        return value.isoformat()
    return str(value)


class AnalyticsClient:
    """Data access layer for the six analytical views.

    Keeps the last successfully fetched payload of every view in
    :attr:`snapshot` for inspection. The dashboard never reads it back.

    Views are fetched from several worker threads at once. Without an
    injected session each request opens its own :class:`requests.Session`;
    an injected session is shared by those threads and must tolerate
    concurrent ``get`` calls.
    """

    def __init__(
        self,
        settings: AnalyticsSettings,
        credentials: CredentialStore,
        session: requests.Session | None = None,
    ):
        """Initialize client.

        Args:
            settings: Base URL, API path and transport timeout.
            credentials: Store providing the bearer token.
            session: Shared HTTP session. When omitted, every request uses
                     a short-lived session of its own.
        """
        self.settings = settings
        self.credentials = credentials
        self.session = session
        self._snapshot = AnalyticsSnapshot()

    # ------------------------------------------------------------------
    # Snapshot
    # ------------------------------------------------------------------

    @property
    def snapshot(self) -> AnalyticsSnapshot:
        """Copy of the last fetched payload for each view."""
        return self._snapshot.model_copy()

    def clear_cache(self) -> None:
        """Forget all fetched payloads (logout or explicit reset)."""
        self._snapshot = AnalyticsSnapshot()

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------

    def _headers(self, token: str) -> dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {token}",
        }

    def _get(self, url: str, params: dict[str, str] | None, headers: dict[str, str]) -> requests.Response:
        if self.session is not None:
            return self.session.get(
                url,
                params=params,
                headers=headers,
                timeout=self.settings.request_timeout,
            )
        with requests.Session() as session:
            return session.get(
                url,
                params=params,
                headers=headers,
                timeout=self.settings.request_timeout,
            )

    async def _request(self, endpoint: str, params: dict[str, str] | None = None) -> Any:
        """GET an analytics endpoint and unwrap the response envelope.

        Raises:
            AuthError: No token is available. Nothing is sent.
            TransportError: Connection failure, non-2xx status or a body
                that is not JSON.
        """
        token = self.credentials.get_token()
        if not token:
            logger.error("Error fetching %s: no authentication token found", endpoint)
            raise AuthError()

        url = f"{self.settings.api_url}{endpoint}"
        try:
            response = await asyncio.to_thread(self._get, url, params, self._headers(token))
        except requests.RequestException as e:
            logger.error("Error fetching %s: %s", endpoint, e)
            raise TransportError(None, str(e), endpoint) from e

        if not 200 <= response.status_code < 300:
            error = TransportError(response.status_code, response.reason or "", endpoint)
            logger.error("Error fetching %s: %s", endpoint, error)
            raise error

        try:
            body = response.json()
        except ValueError as e:
            logger.error("Error fetching %s: response is not JSON", endpoint)
            raise TransportError(response.status_code, "Invalid JSON response", endpoint) from e

        if isinstance(body, dict):
            return body.get("data")
        return None

    # ------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------

    async def fetch_spending_trends(
        self,
        period: Period | str = Period.MONTHLY,
        months: int = 6,
    ) -> Any:
        """Fetch spending per period for the last `months` months."""
        period_value = period.value if isinstance(period, Period) else str(period)
        data = await self._request(
            "/spending-trends",
            {"period": period_value, "months": str(months)},
        )
        self._snapshot.trends = data
        return data

    async def fetch_category_breakdown(
        self,
        type: str = "expense",
        start_date: date | str | None = None,
        end_date: date | str | None = None,
    ) -> Any:
        """Fetch totals per category, optionally limited to a date range."""
        params = {"type": type}
        if _iso(start_date):
            params["startDate"] = _iso(start_date)
        if _iso(end_date):
            params["endDate"] = _iso(end_date)

        data = await self._request("/category-breakdown", params)
        self._snapshot.category_breakdown = data
        return data

    async def fetch_insights(self) -> Any:
        """Fetch AI-generated spending insights."""
        data = await self._request("/insights")
        self._snapshot.insights = data
        return data

    async def fetch_predictions(self) -> Any:
        """Fetch next-month spending predictions per category."""
        data = await self._request("/predictions")
        self._snapshot.predictions = data
        return data

    async def fetch_spending_velocity(self) -> Any:
        """Fetch month-to-date spending velocity."""
        data = await self._request("/velocity")
        self._snapshot.velocity = data
        return data

    async def fetch_forecast(self) -> Any:
        """Fetch 3- and 6-month financial projections."""
        data = await self._request("/forecast")
        self._snapshot.forecast = data
        return data
