"""Shared fixtures for the analytics tests."""

import pytest

from expenseflow.core.models import AnalyticsSettings
from expenseflow.dashboard.page import DashboardPage
from expenseflow.dashboard.renderers import DashboardRenderer


@pytest.fixture
def settings() -> AnalyticsSettings:
    return AnalyticsSettings(base_url="http://api.test", banner_timeout=0.01)


@pytest.fixture
def page() -> DashboardPage:
    return DashboardPage.default()


@pytest.fixture
def renderer(page: DashboardPage) -> DashboardRenderer:
    return DashboardRenderer(page)
