"""Widget renderers.

Each render method owns exactly one page region. It checks the payload with
:func:`is_presentable` first, then replaces the region content completely,
so rendering the same payload twice gives the same markup. Renderers only
read the payload they are given; they never fetch or touch dashboard state.
"""

from collections.abc import Mapping, Sequence
from html import escape
from typing import Any

from expenseflow.dashboard.charts import PlotlyCharts
from expenseflow.dashboard.formatting import (
    LocaleProvider,
    capitalize_first,
    category_color,
    category_icon,
    format_currency,
    format_percentage,
    is_presentable,
    slice_shares,
)
from expenseflow.dashboard.page import (
    CATEGORY_REGION_ID,
    FORECAST_REGION_ID,
    INSIGHTS_REGION_ID,
    PREDICTIONS_REGION_ID,
    TRENDS_REGION_ID,
    VELOCITY_REGION_ID,
    DashboardPage,
    Element,
)

DAYS_PER_MONTH = 30
TREND_COLOR = "#64ffda"


def _number(value: object) -> float:
    """Numeric payload field, 0.0 when missing or invalid."""
    if value is None or isinstance(value, bool):
        return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    if number != number or number in (float("inf"), float("-inf")):
        return 0.0
    return number


def _text(value: object) -> str:
    return escape(str(value)) if value is not None else ""


def _no_data(message: str) -> str:
    return f'<div class="no-data">{message}</div>'


def _records(payload: Any) -> list[Mapping[str, Any]]:
    """Mapping items of a list-shaped payload; empty for anything else."""
    if isinstance(payload, (str, bytes)) or not isinstance(payload, Sequence):
        return []
    return [item for item in payload if isinstance(item, Mapping)]


def _trend_label(point: Mapping[str, Any]) -> str:
    for key in ("month", "period", "label"):
        if point.get(key) is not None:
            return str(point[key])
    return ""


def velocity_progress(velocity: Mapping[str, Any]) -> float:
    """Fraction of the month elapsed, capped at 1."""
    day = _number(velocity.get("dayOfMonth"))
    return max(0.0, min(1.0, day / DAYS_PER_MONTH))


class DashboardRenderer:
    """Renders analytics payloads into the dashboard page regions."""

    def __init__(
        self,
        page: DashboardPage,
        locale: LocaleProvider | None = None,
        charts: PlotlyCharts | None = None,
    ):
        self.page = page
        self.locale = locale
        self.charts = charts or PlotlyCharts()

    def _currency(self, value: object, **options: int) -> str:
        return format_currency(value, locale=self.locale, **options)

    def _region(self, region_id: str) -> Element | None:
        return self.page.get_element(region_id)

    # ------------------------------------------------------------------
    # Spending trends
    # ------------------------------------------------------------------

    def build_trends_figure(self, trends: Sequence[Mapping[str, Any]]) -> dict[str, Any]:
        """Line chart figure with one point per period label."""
        points = _records(trends)
        labels = [_trend_label(p) for p in points]
        values = [_number(p.get("amount")) for p in points]

        top = max(values, default=0.0)
        tick_values = [top * i / 4 for i in range(5)] if top > 0 else [0.0]

        return {
            "data": [{
                "type": "scatter",
                "mode": "lines+markers",
                "name": "Spending",
                "x": labels,
                "y": values,
                "text": [self._currency(v) for v in values],
                "hovertemplate": "%{x}: %{text}<extra></extra>",
                "fill": "tozeroy",
                "fillcolor": "rgba(100, 255, 218, 0.1)",
                "line": {"color": TREND_COLOR, "width": 3, "shape": "spline", "smoothing": 0.4},
                "marker": {"color": TREND_COLOR, "size": 12, "line": {"color": "#fff", "width": 2}},
            }],
            "layout": {
                "showlegend": False,
                "margin": {"l": 70, "r": 20, "t": 20, "b": 40},
                "paper_bgcolor": "rgba(0,0,0,0)",
                "plot_bgcolor": "rgba(0,0,0,0)",
                "yaxis": {
                    "rangemode": "tozero",
                    "tickvals": tick_values,
                    "ticktext": [self._currency(v, max_fraction_digits=0) for v in tick_values],
                },
            },
        }

    def render_trends_chart(self, trends: Any) -> None:
        region = self._region(TRENDS_REGION_ID)
        if region is None:
            return

        if not is_presentable(trends) or not _records(trends):
            region.set_html(_no_data("No trend data available"))
            return

        figure = self.build_trends_figure(trends)
        region.set_html(self.charts.draw("trends-line-chart", figure))

    # ------------------------------------------------------------------
    # Category breakdown
    # ------------------------------------------------------------------

    def build_category_figure(self, categories: Sequence[Mapping[str, Any]]) -> dict[str, Any]:
        """Pie chart figure with one slice per category."""
        entries = _records(categories)
        names = [str(c.get("category") or "other") for c in entries]
        totals = [_number(c.get("total")) for c in entries]
        colors = [category_color(name) for name in names]
        shares = slice_shares(totals)

        return {
            "data": [{
                "type": "pie",
                "labels": [f"{category_icon(name)} {capitalize_first(name)}" for name in names],
                "values": totals,
                "customdata": [[self._currency(total), share] for total, share in zip(totals, shares)],
                "hovertemplate": "%{label}: %{customdata[0]} (%{customdata[1]})<extra></extra>",
                "marker": {"colors": colors, "line": {"color": colors, "width": 2}},
                "sort": False,
                "textinfo": "percent",
            }],
            "layout": {
                "showlegend": True,
                "legend": {"orientation": "h", "y": -0.1},
                "margin": {"l": 20, "r": 20, "t": 20, "b": 20},
                "paper_bgcolor": "rgba(0,0,0,0)",
            },
        }

    def render_category_chart(self, breakdown: Any) -> None:
        region = self._region(CATEGORY_REGION_ID)
        if region is None:
            return

        categories = breakdown.get("categories") if isinstance(breakdown, Mapping) else None
        if not is_presentable(categories) or not _records(categories):
            region.set_html(_no_data("No expense data available"))
            return

        header = (
            '<div class="category-chart-header">\n'
            '    <h4><i class="fas fa-chart-pie"></i> Category Breakdown</h4>\n'
            f'    <span class="total-amount">Total: {self._currency(breakdown.get("grandTotal"))}</span>\n'
            "</div>\n"
        )
        chart = self.charts.draw("category-pie-chart", self.build_category_figure(categories))
        region.set_html(header + chart)

    # ------------------------------------------------------------------
    # Insights
    # ------------------------------------------------------------------

    def render_insights_widget(self, insights: Any) -> None:
        region = self._region(INSIGHTS_REGION_ID)
        if region is None:
            return

        if not is_presentable(insights) or not _records(insights):
            region.set_html(_no_data("No insights available"))
            return

        items = []
        for insight in _records(insights):
            suggestion = insight.get("suggestion")
            suggestion_html = f'\n            <small class="suggestion">{_text(suggestion)}</small>' if suggestion else ""
            items.append(f"""
    <div class="insight-item">
        <div class="insight-icon"><i class="fas fa-lightbulb"></i></div>
        <div class="insight-content">
            <h5>{_text(insight.get("title"))}</h5>
            <p>{_text(insight.get("description"))}</p>{suggestion_html}
        </div>
    </div>""")

        region.set_html(f"""<div class="insights-header">
    <h4><i class="fas fa-brain"></i> AI Insights</h4>
</div>
<div class="insights-list">{"".join(items)}
</div>""")

    # ------------------------------------------------------------------
    # Predictions
    # ------------------------------------------------------------------

    def render_predictions_widget(self, predictions: Any) -> None:
        region = self._region(PREDICTIONS_REGION_ID)
        if region is None:
            return

        if not is_presentable(predictions) or not _records(predictions):
            region.set_html(_no_data("No predictions available"))
            return

        items = []
        for prediction in _records(predictions):
            category = capitalize_first(str(prediction.get("category") or ""))
            items.append(f"""
    <div class="prediction-item">
        <div class="prediction-category">
            <span class="category-name">{_text(category)}</span>
            <span class="confidence">{format_percentage(prediction.get("confidence"))}</span>
        </div>
        <div class="prediction-amount">
            <span class="amount">{self._currency(prediction.get("predictedAmount"))}</span>
            <span class="period">next month</span>
        </div>
    </div>""")

        region.set_html(f"""<div class="predictions-header">
    <h4><i class="fas fa-chart-line"></i> Spending Predictions</h4>
</div>
<div class="predictions-list">{"".join(items)}
</div>""")

    # ------------------------------------------------------------------
    # Velocity
    # ------------------------------------------------------------------

    def render_velocity_widget(self, velocity: Any) -> None:
        region = self._region(VELOCITY_REGION_ID)
        if region is None:
            return

        if not is_presentable(velocity) or not isinstance(velocity, Mapping):
            region.set_html(_no_data("No velocity data available"))
            return

        progress = velocity_progress(velocity)
        region.set_html(f"""<div class="velocity-header">
    <h4><i class="fas fa-tachometer-alt"></i> Spending Velocity</h4>
    <span class="velocity-date">Day {_text(velocity.get("dayOfMonth"))} of month</span>
</div>
<div class="velocity-stats">
    <div class="velocity-stat">
        <span class="stat-value">{self._currency(velocity.get("currentSpent"))}</span>
        <span class="stat-label">Spent this month</span>
    </div>
    <div class="velocity-stat">
        <span class="stat-value">{self._currency(velocity.get("dailyAverage"))}</span>
        <span class="stat-label">Daily average</span>
    </div>
    <div class="velocity-stat projected">
        <span class="stat-value">{self._currency(velocity.get("projectedMonthEnd"))}</span>
        <span class="stat-label">Projected month end</span>
    </div>
</div>
<div class="velocity-progress">
    <div class="progress-bar">
        <div class="progress-fill" style="width: {progress * 100:.1f}%"></div>
    </div>
    <span class="progress-text">{_text(velocity.get("daysRemaining"))} days remaining</span>
</div>""")

    # ------------------------------------------------------------------
    # Forecast
    # ------------------------------------------------------------------

    def render_forecast_widget(self, forecast: Any) -> None:
        region = self._region(FORECAST_REGION_ID)
        if region is None:
            return

        if not is_presentable(forecast) or not isinstance(forecast, Mapping):
            region.set_html(_no_data("No forecast data available"))
            return

        region.set_html(f"""<div class="forecast-header">
    <h4><i class="fas fa-crystal-ball"></i> Financial Forecast</h4>
</div>
<div class="forecast-content">
    <div class="forecast-item">
        <span class="forecast-label">3-Month Projection:</span>
        <span class="forecast-value">{self._currency(forecast.get("threeMonthProjection"))}</span>
    </div>
    <div class="forecast-item">
        <span class="forecast-label">6-Month Projection:</span>
        <span class="forecast-value">{self._currency(forecast.get("sixMonthProjection"))}</span>
    </div>
    <div class="forecast-item">
        <span class="forecast-label">Savings Potential:</span>
        <span class="forecast-value positive">{self._currency(forecast.get("savingsPotential"))}</span>
    </div>
</div>""")
