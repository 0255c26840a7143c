"""Plotly chart embedding.

Figures are plain dicts in Plotly.js JSON format. They are drawn in the
browser by the Plotly.js bundle the generated page loads from the CDN.
"""

import json
from decimal import Decimal
from typing import Any

PLOTLY_JS_URL = "https://cdn.plot.ly/plotly-2.27.0.min.js"
PLOTLY_CONFIG = {"responsive": True, "displayModeBar": False}


def _decimal_to_float(obj):
    """Convert Decimal to float for JSON serialization."""
    if isinstance(obj, Decimal):
        return float(obj)
    raise TypeError(f"Object of type {type(obj)} is not JSON serializable")


def to_json(obj: Any) -> str:
    """Serialize deterministically so identical figures give identical markup."""
    return json.dumps(obj, sort_keys=True, ensure_ascii=False, default=_decimal_to_float)


class PlotlyCharts:
    """Drawing capability used by the renderers."""

    def draw(self, canvas_id: str, figure: dict[str, Any], height: int = 300) -> str:
        """Return the markup that draws `figure` into a new canvas element.

        Args:
            canvas_id: DOM id of the chart canvas.
            figure: Dict with "data" (list of traces) and "layout".
            height: Canvas height in pixels.
        """
        data = to_json(figure.get("data", []))
        layout = to_json(figure.get("layout", {}))
        config = to_json(PLOTLY_CONFIG)
        # "</" would end the script element early
        script = f"Plotly.newPlot({to_json(canvas_id)}, {data}, {layout}, {config});".replace("</", "<\\/")
        return (
            f'<div id="{canvas_id}" class="chart-canvas" style="max-width: 100%; height: {height}px"></div>\n'
            f"<script>{script}</script>"
        )
