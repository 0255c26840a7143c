"""Analytics dashboard controller.

Owns the dashboard state (selected period, month window, loading flag),
binds the page controls, and fans out one fetch+render task per widget.
A failing widget shows its own error message; the other widgets are not
affected. Only a failure of the fan-out itself is reported globally, as a
transient banner.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any, Protocol

import requests
from pydantic import ValidationError

from expenseflow.api.client import AnalyticsClient
from expenseflow.api.credentials import CredentialStore
from expenseflow.core.exceptions import DriverError
from expenseflow.core.models import AnalyticsSettings, DashboardConfig, LoadState, Period
from expenseflow.dashboard.page import (
    CATEGORY_REGION_ID,
    FORECAST_REGION_ID,
    INSIGHTS_REGION_ID,
    MONTHS_SELECT_ID,
    PAGE_CONTAINER_ID,
    PERIOD_SELECT_ID,
    PREDICTIONS_REGION_ID,
    REFRESH_BUTTON_ID,
    TRENDS_REGION_ID,
    VELOCITY_REGION_ID,
    DashboardPage,
)
from expenseflow.dashboard.readiness import ReadinessBarrier
from expenseflow.dashboard.renderers import DashboardRenderer

logger = logging.getLogger(__name__)

LOADING_HTML = '<div class="loading-spinner"><i class="fas fa-spinner fa-spin"></i> Loading...</div>'
DRIVER_ERROR_MESSAGE = "Failed to load analytics data"


def error_html(message: str) -> str:
    return f'<div class="error-state"><i class="fas fa-exclamation-triangle"></i> {message}</div>'


class AnalyticsSource(Protocol):
    """The fetch operations the dashboard needs from the data access layer."""

    async def fetch_spending_trends(self, period: Period | str = ..., months: int = ...) -> Any: ...

    async def fetch_category_breakdown(self) -> Any: ...

    async def fetch_insights(self) -> Any: ...

    async def fetch_predictions(self) -> Any: ...

    async def fetch_spending_velocity(self) -> Any: ...

    async def fetch_forecast(self) -> Any: ...


@dataclass(frozen=True)
class WidgetDescriptor:
    """Binds one analytical view to its page region.

    Attributes:
        source_id: Name of the analytical view.
        region_id: Page element the widget renders into.
        fetch: Coroutine function fetching the payload for the current config.
        render: Function drawing a payload into the region.
        error_message: Text shown in the region when fetch or render fails.
    """

    source_id: str
    region_id: str
    fetch: Callable[[DashboardConfig], Awaitable[Any]]
    render: Callable[[Any], None]
    error_message: str


def build_widget_descriptors(api: AnalyticsSource, renderer: DashboardRenderer) -> list[WidgetDescriptor]:
    """Descriptor list in launch order. Adding a view means adding an entry here."""
    return [
        WidgetDescriptor(
            source_id="trends",
            region_id=TRENDS_REGION_ID,
            fetch=lambda config: api.fetch_spending_trends(config.period, config.window_size),
            render=renderer.render_trends_chart,
            error_message="Failed to load spending trends",
        ),
        WidgetDescriptor(
            source_id="category_breakdown",
            region_id=CATEGORY_REGION_ID,
            fetch=lambda config: api.fetch_category_breakdown(),
            render=renderer.render_category_chart,
            error_message="Failed to load category breakdown",
        ),
        WidgetDescriptor(
            source_id="insights",
            region_id=INSIGHTS_REGION_ID,
            fetch=lambda config: api.fetch_insights(),
            render=renderer.render_insights_widget,
            error_message="Failed to load insights",
        ),
        WidgetDescriptor(
            source_id="predictions",
            region_id=PREDICTIONS_REGION_ID,
            fetch=lambda config: api.fetch_predictions(),
            render=renderer.render_predictions_widget,
            error_message="Failed to load predictions",
        ),
        WidgetDescriptor(
            source_id="velocity",
            region_id=VELOCITY_REGION_ID,
            fetch=lambda config: api.fetch_spending_velocity(),
            render=renderer.render_velocity_widget,
            error_message="Failed to load velocity data",
        ),
        WidgetDescriptor(
            source_id="forecast",
            region_id=FORECAST_REGION_ID,
            fetch=lambda config: api.fetch_forecast(),
            render=renderer.render_forecast_widget,
            error_message="Failed to load forecast data",
        ),
    ]


class AnalyticsDashboard:
    """Fans out fetch+render pairs and tracks their outcome.

    Attributes:
        config: Current period and month window.
        is_loading: True while a full refresh is in flight.
        errors: Last error per source id, cleared when that source succeeds.
        last_driver_error: Error of the last refresh whose fan-out failed.
    """

    def __init__(
        self,
        api: AnalyticsSource,
        renderer: DashboardRenderer,
        page: DashboardPage,
        *,
        settings: AnalyticsSettings | None = None,
        readiness: ReadinessBarrier | None = None,
        descriptors: list[WidgetDescriptor] | None = None,
    ):
        self.api = api
        self.renderer = renderer
        self.page = page
        self.settings = settings or AnalyticsSettings()
        self.readiness = readiness
        self.descriptors = descriptors if descriptors is not None else build_widget_descriptors(api, renderer)

        self.config = DashboardConfig(
            period=self.settings.default_period,
            window_size=self.settings.default_months,
        )
        self.is_loading = False
        self.errors: dict[str, Exception] = {}
        self.last_driver_error: DriverError | None = None

    @property
    def state(self) -> LoadState:
        return LoadState.LOADING if self.is_loading else LoadState.IDLE

    def descriptor(self, source_id: str) -> WidgetDescriptor:
        for descriptor in self.descriptors:
            if descriptor.source_id == source_id:
                return descriptor
        raise KeyError(source_id)

    # ------------------------------------------------------------------
    # Initialization
    # ------------------------------------------------------------------

    async def init(self) -> None:
        """Wait for the dashboard modules, bind controls, load everything once."""
        if self.readiness is not None:
            await self.readiness.wait()

        self.bind_events()
        await self.refresh_all()

    def bind_events(self) -> None:
        """Attach handlers to the controls present on the page."""
        period_select = self.page.get_element(PERIOD_SELECT_ID)
        if period_select is not None:
            period_select.on("change", self.on_period_change)

        months_select = self.page.get_element(MONTHS_SELECT_ID)
        if months_select is not None:
            months_select.on("change", self.on_months_change)

        refresh_button = self.page.get_element(REFRESH_BUTTON_ID)
        if refresh_button is not None:
            refresh_button.on("click", lambda _value: self.refresh_all())

    async def on_period_change(self, value: str | None) -> None:
        try:
            self.config.period = Period(value)
        except ValueError:
            logger.warning("Ignoring unknown period: %r", value)
            return
        await self.load_trends()

    async def on_months_change(self, value: str | None) -> None:
        try:
            self.config.window_size = int(str(value).strip())
        except (TypeError, ValueError, ValidationError):
            logger.warning("Ignoring invalid month window: %r", value)
            return
        await self.load_trends()

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    async def refresh_all(self) -> dict[str, Exception | None] | None:
        """Reload every widget concurrently.

        Does nothing if a full refresh is already running.

        Returns:
            Mapping of source id to the error that widget hit (None on
            success), or None if the call was skipped or the fan-out failed.
        """
        if self.is_loading:
            logger.debug("Refresh already in progress, skipping")
            return None

        self.is_loading = True
        self.show_loading_state()
        logger.info("Refreshing %d analytics widgets", len(self.descriptors))

        try:
            tasks = await self._launch_all()
            results = await asyncio.gather(*tasks, return_exceptions=True)
            outcomes = {
                descriptor.source_id: result
                for descriptor, result in zip(self.descriptors, results)
            }
            failed = sorted(source for source, error in outcomes.items() if error is not None)
            if failed:
                logger.info("Refresh finished, failed widgets: %s", ", ".join(failed))
            else:
                logger.info("Refresh finished")
            return outcomes
        except Exception as e:
            logger.exception("Error loading analytics")
            error = DriverError(DRIVER_ERROR_MESSAGE)
            error.__cause__ = e
            self.last_driver_error = error
            self.show_error_state(DRIVER_ERROR_MESSAGE)
            for descriptor in self.descriptors:
                if self.page.region_html(descriptor.region_id) == LOADING_HTML:
                    self.show_widget_error(descriptor.region_id, DRIVER_ERROR_MESSAGE)
            return None
        finally:
            self.is_loading = False

    async def _launch_all(self) -> list[asyncio.Task]:
        """Start one task per descriptor, in descriptor order.

        If a launch fails, the tasks already started are cancelled and
        awaited before the error is re-raised, so nothing outlives the refresh.
        """
        tasks: list[asyncio.Task] = []
        for descriptor in self.descriptors:
            coro = self._load(descriptor)
            try:
                task = asyncio.create_task(coro, name=f"widget-{descriptor.source_id}")
            except Exception:
                coro.close()
                for started in tasks:
                    started.cancel()
                await asyncio.gather(*tasks, return_exceptions=True)
                raise
            tasks.append(task)
        return tasks

    async def load_widget(self, source_id: str) -> Exception | None:
        """Reload a single widget outside of the full-refresh guard."""
        return await self._load(self.descriptor(source_id))

    async def load_trends(self) -> Exception | None:
        return await self.load_widget("trends")

    async def _load(self, descriptor: WidgetDescriptor) -> Exception | None:
        """Fetch and render one widget, containing any failure to its region."""
        try:
            payload = await descriptor.fetch(self.config)
            descriptor.render(payload)
        except Exception as e:
            logger.error("Error loading %s: %s", descriptor.source_id, e)
            self.errors[descriptor.source_id] = e
            self.show_widget_error(descriptor.region_id, descriptor.error_message)
            return e
        self.errors.pop(descriptor.source_id, None)
        return None

    # ------------------------------------------------------------------
    # Visual states
    # ------------------------------------------------------------------

    def show_loading_state(self) -> None:
        for descriptor in self.descriptors:
            region = self.page.get_element(descriptor.region_id)
            if region is not None:
                region.set_html(LOADING_HTML)

    def show_widget_error(self, region_id: str, message: str) -> None:
        region = self.page.get_element(region_id)
        if region is not None:
            region.set_html(error_html(message))

    def show_error_state(self, message: str) -> None:
        """Show a page banner that disappears after the configured delay."""
        self.page.show_banner(message, timeout=self.settings.banner_timeout)


def create_dashboard(
    page: DashboardPage,
    settings: AnalyticsSettings,
    credentials: CredentialStore,
    session: requests.Session | None = None,
) -> AnalyticsDashboard:
    """Wire client, renderer and controller for a page.

    Each component reports ready to the barrier once it is constructed.
    """
    readiness = ReadinessBarrier()
    api = AnalyticsClient(settings, credentials, session=session)
    readiness.mark_ready("analytics-api")
    readiness.mark_ready("analytics-utils")
    renderer = DashboardRenderer(page, locale=settings)
    readiness.mark_ready("analytics-renderers")
    return AnalyticsDashboard(api, renderer, page, settings=settings, readiness=readiness)


async def bootstrap(
    page: DashboardPage,
    settings: AnalyticsSettings,
    credentials: CredentialStore,
    session: requests.Session | None = None,
) -> AnalyticsDashboard | None:
    """Create and initialize the dashboard if the page hosts one.

    Returns:
        The initialized dashboard, or None when the page has no
        analytics container.
    """
    if not page.has_element(PAGE_CONTAINER_ID):
        logger.debug("Page has no %s container, not initializing", PAGE_CONTAINER_ID)
        return None

    dashboard = create_dashboard(page, settings, credentials, session=session)
    await dashboard.init()
    return dashboard
