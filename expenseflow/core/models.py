"""Domain models for ExpenseFlow analytics.

All dashboard state and configuration structures are defined here using
Pydantic v2 for validation.
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


# -----------------------------------------------------------------------------
# Enums
# -----------------------------------------------------------------------------


class Period(str, Enum):
    """Aggregation period for the spending trends view."""

    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"


class Theme(str, Enum):
    """Color theme of the generated HTML page."""

    LIGHT = "light"
    DARK = "dark"


class LoadState(str, Enum):
    """Full-refresh state of the dashboard controller."""

    IDLE = "idle"
    LOADING = "loading"


# -----------------------------------------------------------------------------
# Dashboard State
# -----------------------------------------------------------------------------


class DashboardConfig(BaseModel):
    """User-selected view parameters.

    Changed only by the period and month-window selectors. Read by the
    spending trends fetch.

    Attributes:
        period: Aggregation period for trends.
        window_size: Number of months of history to request.
    """

    model_config = ConfigDict(validate_assignment=True)

    period: Period = Period.MONTHLY
    window_size: int = Field(default=6, ge=1)


class AnalyticsSnapshot(BaseModel):
    """Last successfully fetched payload for each analytical view.

    A slot is either None (never fetched or cleared) or the complete payload
    returned by the API. A failed fetch leaves the previous value in place.
    Kept for inspection only; rendering always uses the freshly fetched value.
    """

    trends: Any | None = None
    category_breakdown: Any | None = None
    insights: Any | None = None
    predictions: Any | None = None
    velocity: Any | None = None
    forecast: Any | None = None


# -----------------------------------------------------------------------------
# Configuration
# -----------------------------------------------------------------------------


class AnalyticsSettings(BaseModel):
    """Configuration for the analytics client and generated dashboard.

    Loaded from EXPENSEFLOW_* environment variables by
    :func:`expenseflow.core.config.load_settings`; CLI options override it.
    """

    base_url: str = "http://localhost:3000"
    api_path: str = "/api/analytics"
    request_timeout: float | None = Field(default=30.0, gt=0)  # passed to requests
    banner_timeout: float = Field(default=5.0, ge=0)  # seconds a global banner stays up

    locale: str = Field(default="en-US", min_length=2)
    currency: str = Field(default="INR", min_length=3, max_length=3, pattern=r"^[A-Z]{3}$")
    theme: Theme = Theme.LIGHT

    default_period: Period = Period.MONTHLY
    default_months: int = Field(default=6, ge=1)

    @property
    def api_url(self) -> str:
        """Base URL of the analytics endpoints, without trailing slash."""
        return self.base_url.rstrip("/") + "/" + self.api_path.strip("/")


class Banner(BaseModel):
    """Transient page-level notification."""

    message: str
    level: str = "error"
