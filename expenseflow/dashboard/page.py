"""Server-side page model the dashboard renders into.

A page is a set of addressable elements. Widget regions hold HTML fragments,
controls carry a value and event listeners, and the page keeps a list of
transient banners. :func:`expenseflow.dashboard.generator.generate_dashboard_html`
turns a page into a standalone HTML document.
"""

import asyncio
import inspect
import logging
from collections.abc import Awaitable, Callable, Iterable

from expenseflow.core.models import Banner

logger = logging.getLogger(__name__)

# Page container; without it the dashboard is not initialized at all
PAGE_CONTAINER_ID = "analytics-dashboard"

# Controls
PERIOD_SELECT_ID = "analytics-period"
MONTHS_SELECT_ID = "analytics-months"
REFRESH_BUTTON_ID = "refresh-analytics"

# Widget regions
TRENDS_REGION_ID = "trends-chart"
CATEGORY_REGION_ID = "category-chart"
INSIGHTS_REGION_ID = "insights-widget"
PREDICTIONS_REGION_ID = "predictions-widget"
VELOCITY_REGION_ID = "velocity-widget"
FORECAST_REGION_ID = "forecast-widget"

REGION_IDS = (
    TRENDS_REGION_ID,
    CATEGORY_REGION_ID,
    INSIGHTS_REGION_ID,
    PREDICTIONS_REGION_ID,
    VELOCITY_REGION_ID,
    FORECAST_REGION_ID,
)
CONTROL_IDS = (PERIOD_SELECT_ID, MONTHS_SELECT_ID, REFRESH_BUTTON_ID)

Handler = Callable[[str | None], Awaitable[None] | None]


class Element:
    """One addressable node of the page."""

    def __init__(self, element_id: str, value: str | None = None):
        self.id = element_id
        self.html = ""
        self.value = value
        self._listeners: dict[str, list[Handler]] = {}

    def set_html(self, html: str) -> None:
        """Replace the element content."""
        self.html = html

    def clear(self) -> None:
        self.html = ""

    def append(self, html: str) -> None:
        self.html += html

    def on(self, event: str, handler: Handler) -> None:
        """Register a listener for an event such as "change" or "click"."""
        self._listeners.setdefault(event, []).append(handler)

    def listeners(self, event: str) -> list[Handler]:
        return list(self._listeners.get(event, []))

    async def dispatch(self, event: str, value: str | None = None) -> None:
        """Fire an event, awaiting listeners that are coroutines.

        For "change" events the element value is updated first.
        """
        if event == "change":
            self.value = value
        for handler in self.listeners(event):
            result = handler(self.value)
            if inspect.isawaitable(result):
                await result


class DashboardPage:
    """Collection of elements plus transient banners."""

    def __init__(self, element_ids: Iterable[str] = ()):
        self._elements: dict[str, Element] = {}
        self.banners: list[Banner] = []
        for element_id in element_ids:
            self.add_element(element_id)

    @classmethod
    def default(cls) -> "DashboardPage":
        """Page with the container, all controls and all widget regions."""
        page = cls((PAGE_CONTAINER_ID, *CONTROL_IDS, *REGION_IDS))
        page.get_element(PERIOD_SELECT_ID).value = "monthly"
        page.get_element(MONTHS_SELECT_ID).value = "6"
        return page

    def add_element(self, element_id: str, value: str | None = None) -> Element:
        element = Element(element_id, value)
        self._elements[element_id] = element
        return element

    def get_element(self, element_id: str) -> Element | None:
        return self._elements.get(element_id)

    def has_element(self, element_id: str) -> bool:
        return element_id in self._elements

    def region_html(self, element_id: str) -> str | None:
        """Current content of an element, or None if it does not exist."""
        element = self._elements.get(element_id)
        return element.html if element is not None else None

    # ------------------------------------------------------------------
    # Banners
    # ------------------------------------------------------------------

    def show_banner(self, message: str, timeout: float | None = None, level: str = "error") -> Banner:
        """Show a page-level notification.

        Args:
            message: Text to display.
            timeout: Seconds until the banner is dismissed automatically.
                     None keeps it until dismissed.
            level: Severity used for styling.

        Returns:
            The banner that was added.
        """
        banner = Banner(message=message, level=level)
        self.banners.append(banner)
        if timeout is not None:
            try:
                loop = asyncio.get_running_loop()
            except RuntimeError:
                logger.debug("No running event loop, banner will not auto-dismiss")
            else:
                loop.call_later(timeout, self.dismiss_banner, banner)
        return banner

    def dismiss_banner(self, banner: Banner) -> None:
        """Remove a banner if it is still shown."""
        self.banners = [b for b in self.banners if b is not banner]
