"""Canned payloads and test doubles for the analytics API and data source."""

import asyncio
from typing import Any

from expenseflow.core.models import Period

TRENDS = [
    {"month": "Jan", "amount": 100},
    {"month": "Feb", "amount": 150},
]
CATEGORY_BREAKDOWN = {
    "categories": [
        {"category": "food", "total": 30},
        {"category": "transport", "total": 70},
    ],
    "grandTotal": 100,
}
INSIGHTS = [
    {
        "title": "Dining out is up",
        "description": "Food spending rose 20% compared to last month.",
        "suggestion": "Try cooking at home twice a week.",
    },
    {
        "title": "Transport is stable",
        "description": "No change in transport costs.",
    },
]
PREDICTIONS = [
    {"category": "food", "confidence": 82.5, "predictedAmount": 4200},
    {"category": "shopping", "confidence": 64.04, "predictedAmount": 1500.4},
]
VELOCITY = {
    "dayOfMonth": 15,
    "currentSpent": 500,
    "dailyAverage": 33.3,
    "projectedMonthEnd": 1000,
    "daysRemaining": 15,
}
FORECAST = {
    "threeMonthProjection": 30000,
    "sixMonthProjection": 60000,
    "savingsPotential": 5000,
}

PAYLOADS_BY_ENDPOINT = {
    "/spending-trends": TRENDS,
    "/category-breakdown": CATEGORY_BREAKDOWN,
    "/insights": INSIGHTS,
    "/predictions": PREDICTIONS,
    "/velocity": VELOCITY,
    "/forecast": FORECAST,
}


# -----------------------------------------------------------------------------
# HTTP fakes
# -----------------------------------------------------------------------------


class FakeResponse:
    """Minimal stand-in for requests.Response."""

    def __init__(self, status_code: int = 200, body: Any = None, reason: str = "OK"):
        self.status_code = status_code
        self.reason = reason
        self._body = body

    def json(self) -> Any:
        if isinstance(self._body, Exception):
            raise self._body
        return self._body


class FakeSession:
    """Records GET calls and answers from a table keyed by endpoint suffix."""

    def __init__(self, responses: dict[str, Any] | None = None):
        if responses is None:
            responses = {
                endpoint: FakeResponse(200, {"data": payload})
                for endpoint, payload in PAYLOADS_BY_ENDPOINT.items()
            }
        self.responses = responses
        self.calls: list[dict[str, Any]] = []
        self.closed = False

    def get(self, url, params=None, headers=None, timeout=None):
        self.calls.append({"url": url, "params": params, "headers": headers, "timeout": timeout})
        for endpoint, response in self.responses.items():
            if url.endswith(endpoint):
                if isinstance(response, Exception):
                    raise response
                return response
        return FakeResponse(404, None, "Not Found")

    def close(self) -> None:
        self.closed = True

    def __enter__(self) -> "FakeSession":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


# -----------------------------------------------------------------------------
# Data source fake
# -----------------------------------------------------------------------------


class FakeSource:
    """Async analytics source with per-view payloads, errors and an optional gate."""

    def __init__(
        self,
        errors: dict[str, Exception] | None = None,
        gate: asyncio.Event | None = None,
    ):
        self.errors = errors or {}
        self.gate = gate
        self.calls: list[tuple[str, tuple]] = []

    async def _answer(self, source_id: str, payload: Any, *args: Any) -> Any:
        self.calls.append((source_id, args))
        if self.gate is not None:
            await self.gate.wait()
        if source_id in self.errors:
            raise self.errors[source_id]
        return payload

    def count(self, source_id: str) -> int:
        return sum(1 for name, _ in self.calls if name == source_id)

    async def fetch_spending_trends(self, period: Period | str = Period.MONTHLY, months: int = 6) -> Any:
        return await self._answer("trends", TRENDS, period, months)

    async def fetch_category_breakdown(self) -> Any:
        return await self._answer("category_breakdown", CATEGORY_BREAKDOWN)

    async def fetch_insights(self) -> Any:
        return await self._answer("insights", INSIGHTS)

    async def fetch_predictions(self) -> Any:
        return await self._answer("predictions", PREDICTIONS)

    async def fetch_spending_velocity(self) -> Any:
        return await self._answer("velocity", VELOCITY)

    async def fetch_forecast(self) -> Any:
        return await self._answer("forecast", FORECAST)

