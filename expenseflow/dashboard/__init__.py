"""Dashboard module for the analytics page.

This module provides the formatting helpers, widget renderers, the
fan-out controller and HTML generation for the six-widget analytics
dashboard.

Widgets:
    1. Spending trends - line chart per period
    2. Category breakdown - pie chart with grand total
    3. AI insights - list of insight cards
    4. Predictions - next-month amount per category
    5. Spending velocity - month-to-date pace and progress
    6. Forecast - 3/6-month projections and savings potential
"""

from expenseflow.dashboard.controller import (
    AnalyticsDashboard,
    WidgetDescriptor,
    bootstrap,
    build_widget_descriptors,
    create_dashboard,
)
from expenseflow.dashboard.generator import generate_dashboard_html, save_dashboard
from expenseflow.dashboard.page import DashboardPage
from expenseflow.dashboard.readiness import ReadinessBarrier
from expenseflow.dashboard.renderers import DashboardRenderer

__all__ = [
    "AnalyticsDashboard",
    "DashboardPage",
    "DashboardRenderer",
    "ReadinessBarrier",
    "WidgetDescriptor",
    "bootstrap",
    "build_widget_descriptors",
    "create_dashboard",
    "generate_dashboard_html",
    "save_dashboard",
]
