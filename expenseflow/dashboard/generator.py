"""HTML dashboard generator.

Wraps a rendered :class:`DashboardPage` into a standalone HTML file. Charts
are drawn in the browser by Plotly.js loaded from the CDN.
"""

from datetime import datetime
from html import escape
from pathlib import Path

from expenseflow.core.models import AnalyticsSettings, DashboardConfig, Period
from expenseflow.dashboard.charts import PLOTLY_JS_URL
from expenseflow.dashboard.page import (
    CATEGORY_REGION_ID,
    FORECAST_REGION_ID,
    INSIGHTS_REGION_ID,
    MONTHS_SELECT_ID,
    PERIOD_SELECT_ID,
    PREDICTIONS_REGION_ID,
    REFRESH_BUTTON_ID,
    TRENDS_REGION_ID,
    VELOCITY_REGION_ID,
    DashboardPage,
)

FONT_AWESOME_URL = "https://cdnjs.cloudflare.com/ajax/libs/font-awesome/6.5.1/css/all.min.css"
MONTH_WINDOWS = (3, 6, 12, 24)

STYLES = """
        :root {
            --primary: #2563eb;
            --success: #16a34a;
            --warning: #ca8a04;
            --danger: #dc2626;
            --bg-primary: #ffffff;
            --bg-secondary: #f9fafb;
            --text-primary: #1f2937;
            --text-secondary: #6b7280;
            --border-color: #e5e7eb;
            --card-bg: #ffffff;
            --card-shadow: 0 1px 3px rgba(0,0,0,0.1);
        }
        [data-theme="dark"] {
            --primary: #3b82f6;
            --success: #22c55e;
            --warning: #eab308;
            --danger: #ef4444;
            --bg-primary: #0d0f12;
            --bg-secondary: #141619;
            --text-primary: #d8d9da;
            --text-secondary: #8b8d8f;
            --border-color: #2c3039;
            --card-bg: #1e2126;
            --card-shadow: 0 1px 3px rgba(0,0,0,0.5);
        }
        * { box-sizing: border-box; margin: 0; padding: 0; }
        body {
            font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif;
            line-height: 1.5;
            color: var(--text-primary);
            background: var(--bg-secondary);
        }
        .header {
            background: var(--card-bg);
            border-bottom: 1px solid var(--border-color);
            padding: 1rem 2rem;
            display: flex;
            justify-content: space-between;
            align-items: center;
        }
        .header h1 { font-size: 1.5rem; font-weight: 600; }
        .header .meta { color: var(--text-secondary); font-size: 0.875rem; }
        .controls { display: flex; gap: 0.75rem; align-items: center; }
        .controls select, .controls button {
            padding: 0.4rem 0.75rem;
            border: 1px solid var(--border-color);
            border-radius: 6px;
            background: var(--bg-primary);
            color: var(--text-primary);
        }
        .controls button { cursor: pointer; }

        .content { padding: 2rem; max-width: 1400px; margin: 0 auto; }
        .grid {
            display: grid;
            grid-template-columns: repeat(auto-fit, minmax(420px, 1fr));
            gap: 1.5rem;
        }
        .widget {
            background: var(--card-bg);
            border-radius: 12px;
            padding: 1.5rem;
            box-shadow: var(--card-shadow);
            min-height: 120px;
        }
        .widget h4 { font-size: 1rem; font-weight: 600; margin-bottom: 0.75rem; }
        .chart-canvas { width: 100% !important; }

        .loading-spinner, .no-data { color: var(--text-secondary); padding: 1rem 0; }
        .error-state { color: var(--danger); padding: 1rem 0; }
        .analytics-error {
            position: fixed;
            top: 20px;
            right: 20px;
            background: #ff5722;
            color: white;
            padding: 1rem;
            border-radius: 8px;
            z-index: 1000;
            box-shadow: 0 4px 12px rgba(0,0,0,0.3);
        }

        .category-chart-header { display: flex; justify-content: space-between; align-items: baseline; }
        .total-amount { font-weight: 600; }
        .insight-item, .prediction-item {
            display: flex;
            gap: 0.75rem;
            padding: 0.75rem 0;
            border-bottom: 1px solid var(--border-color);
        }
        .insight-item:last-child, .prediction-item:last-child { border-bottom: none; }
        .insight-icon { color: var(--warning); }
        .suggestion { color: var(--text-secondary); }
        .prediction-item { justify-content: space-between; }
        .confidence, .period { color: var(--text-secondary); font-size: 0.875rem; margin-left: 0.5rem; }
        .amount { font-weight: 600; }

        .velocity-header, .forecast-item { display: flex; justify-content: space-between; }
        .velocity-date { color: var(--text-secondary); }
        .velocity-stats {
            display: grid;
            grid-template-columns: repeat(3, 1fr);
            gap: 1rem;
            margin: 1rem 0;
        }
        .stat-value { display: block; font-size: 1.25rem; font-weight: 600; }
        .stat-label { color: var(--text-secondary); font-size: 0.875rem; }
        .velocity-stat.projected .stat-value { color: var(--warning); }
        .progress-bar {
            height: 8px;
            background: var(--border-color);
            border-radius: 4px;
            overflow: hidden;
            margin-bottom: 0.25rem;
        }
        .progress-fill { height: 100%; background: var(--primary); }
        .progress-text { color: var(--text-secondary); font-size: 0.875rem; }
        .forecast-item { padding: 0.5rem 0; }
        .forecast-value { font-weight: 600; }
        .forecast-value.positive { color: var(--success); }
"""

WIDGET_LAYOUT = (
    TRENDS_REGION_ID,
    CATEGORY_REGION_ID,
    VELOCITY_REGION_ID,
    FORECAST_REGION_ID,
    INSIGHTS_REGION_ID,
    PREDICTIONS_REGION_ID,
)


def _render_period_options(selected: Period) -> str:
    """Render period select options."""
    return "\n".join(
        f'<option value="{p.value}"{" selected" if p == selected else ""}>{p.value.capitalize()}</option>'
        for p in Period
    )


def _render_month_options(selected: int) -> str:
    """Render month window select options."""
    windows = sorted(set(MONTH_WINDOWS) | {selected})
    return "\n".join(
        f'<option value="{m}"{" selected" if m == selected else ""}>Last {m} months</option>'
        for m in windows
    )


def _render_controls(page: DashboardPage, config: DashboardConfig) -> str:
    """Render the selectors and refresh button that exist on the page."""
    parts = []
    if page.has_element(PERIOD_SELECT_ID):
        parts.append(f'<select id="{PERIOD_SELECT_ID}">\n{_render_period_options(config.period)}\n</select>')
    if page.has_element(MONTHS_SELECT_ID):
        parts.append(f'<select id="{MONTHS_SELECT_ID}">\n{_render_month_options(config.window_size)}\n</select>')
    if page.has_element(REFRESH_BUTTON_ID):
        parts.append(
            f'<button id="{REFRESH_BUTTON_ID}" onclick="location.reload()">'
            '<i class="fas fa-sync-alt"></i> Refresh</button>'
        )
    return "\n".join(parts)


def _render_widgets(page: DashboardPage) -> str:
    """Render one card per widget region present on the page."""
    cards = []
    for region_id in WIDGET_LAYOUT:
        element = page.get_element(region_id)
        if element is None:
            continue
        cards.append(f'<div class="widget" id="{region_id}">\n{element.html}\n</div>')
    return "\n".join(cards)


def _render_banners(page: DashboardPage) -> str:
    """Render transient banners."""
    return "\n".join(
        f'<div class="analytics-error"><i class="fas fa-exclamation-circle"></i> {escape(b.message)}</div>'
        for b in page.banners
    )


def generate_dashboard_html(
    page: DashboardPage,
    settings: AnalyticsSettings,
    config: DashboardConfig | None = None,
    generated_at: datetime | None = None,
) -> str:
    """Generate complete dashboard HTML.

    Args:
        page: Page whose regions have been rendered.
        settings: Theme and locale settings.
        config: Selected period and month window shown in the controls.
        generated_at: Timestamp shown in the header. Defaults to now.

    Returns:
        Complete HTML string.
    """
    config = config or DashboardConfig(
        period=settings.default_period,
        window_size=settings.default_months,
    )
    generated_at = generated_at or datetime.now()
    lang = escape(settings.locale.split("-")[0])

    return f"""<!DOCTYPE html>
<html lang="{lang}" data-theme="{settings.theme.value}">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>ExpenseFlow Analytics</title>
    <link rel="stylesheet" href="{FONT_AWESOME_URL}">
    <script src="{PLOTLY_JS_URL}"></script>
    <style>{STYLES}    </style>
</head>
<body>
<div id="analytics-dashboard">
    <div class="header">
        <div>
            <h1>Analytics</h1>
            <div class="meta">Generated {generated_at:%Y-%m-%d %H:%M} &middot; {escape(settings.currency)}</div>
        </div>
        <div class="controls">
{_render_controls(page, config)}
        </div>
    </div>
{_render_banners(page)}
    <div class="content">
        <div class="grid">
{_render_widgets(page)}
        </div>
    </div>
</div>
</body>
</html>
"""


def save_dashboard(html: str, output_path: Path) -> None:
    """Save dashboard HTML to file.

    Args:
        html: HTML content.
        output_path: Output file path.
    """
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(html, encoding="utf-8")
