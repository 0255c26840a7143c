"""Implementation of 'expenseflow report' command.

Fetches all six analytical views and writes an interactive HTML dashboard:
1. Spending trends
2. Category breakdown
3. AI insights
4. Predictions
5. Spending velocity
6. Forecast
"""

import asyncio
from pathlib import Path

import requests
import typer
from pydantic import ValidationError
from rich.console import Console

from expenseflow.api.credentials import EnvCredentialStore, StaticCredentialStore
from expenseflow.core.config import load_settings
from expenseflow.core.models import Period, Theme
from expenseflow.dashboard import DashboardPage, bootstrap, generate_dashboard_html, save_dashboard

console = Console()

DEFAULT_OUTPUT = Path("reports/analytics.html")


def report_command(
    output: Path = typer.Option(
        DEFAULT_OUTPUT,
        "--output",
        "-o",
        help="Output file path",
    ),
    period: Period = typer.Option(
        None,
        "--period",
        "-p",
        help="Trends period (default: monthly)",
    ),
    months: int = typer.Option(
        None,
        "--months",
        "-m",
        min=1,
        help="Months of trend history (default: 6)",
    ),
    base_url: str = typer.Option(
        None,
        "--base-url",
        help="ExpenseFlow server URL (default: $EXPENSEFLOW_BASE_URL)",
    ),
    token: str = typer.Option(
        None,
        "--token",
        "-t",
        help="API bearer token (default: $EXPENSEFLOW_AUTH_TOKEN)",
    ),
    theme: Theme = typer.Option(
        None,
        "--theme",
        help="Page color theme",
    ),
) -> None:
    """Generate the analytics dashboard HTML.

    Every widget is fetched independently; a widget whose source fails
    shows an error message in the page while the others still render.
    """
    try:
        settings = load_settings(
            base_url=base_url,
            default_period=period,
            default_months=months,
            theme=theme,
        )
    except ValidationError as e:
        console.print(f"[red]Error:[/red] Invalid configuration\n{e}")
        raise typer.Exit(1)

    credentials = StaticCredentialStore(token) if token else EnvCredentialStore()
    if not credentials.get_token():
        console.print(
            "[red]Error:[/red] No API token. "
            "Use --token or set EXPENSEFLOW_AUTH_TOKEN"
        )
        raise typer.Exit(1)

    page = DashboardPage.default()
    with requests.Session() as session:
        dashboard = asyncio.run(bootstrap(page, settings, credentials, session=session))

    if dashboard.last_driver_error is not None:
        console.print(f"[red]Error:[/red] {dashboard.last_driver_error}")
    for source_id, error in sorted(dashboard.errors.items()):
        console.print(f"[yellow]Warning:[/yellow] {source_id}: {error}")

    html = generate_dashboard_html(page, settings, dashboard.config)
    save_dashboard(html, output)

    console.print(f"[green]Dashboard generated:[/green] {output}")
    console.print(f"Open in browser: file://{output.absolute()}")
