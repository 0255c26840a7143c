"""Implementation of 'expenseflow status' command.

Shows month-to-date spending velocity and the financial forecast in the
terminal.
"""

import asyncio
from collections.abc import Mapping
from typing import Any

import requests
import typer
from pydantic import ValidationError
from rich.console import Console
from rich.panel import Panel
from rich.progress import BarColumn, Progress, TextColumn

from expenseflow.api.client import AnalyticsClient
from expenseflow.api.credentials import EnvCredentialStore, StaticCredentialStore
from expenseflow.core.config import load_settings
from expenseflow.core.models import AnalyticsSettings
from expenseflow.dashboard.formatting import format_currency, is_presentable
from expenseflow.dashboard.renderers import velocity_progress

console = Console()


async def _fetch_status(client: AnalyticsClient) -> list[Any]:
    """Fetch velocity and forecast concurrently, keeping errors as results."""
    return await asyncio.gather(
        client.fetch_spending_velocity(),
        client.fetch_forecast(),
        return_exceptions=True,
    )


def _print_velocity(velocity: Any, settings: AnalyticsSettings) -> None:
    console.print("[bold]Spending Velocity[/bold]")
    if isinstance(velocity, Exception):
        console.print(f"  [yellow]Unavailable:[/yellow] {velocity}")
        console.print()
        return
    if not is_presentable(velocity) or not isinstance(velocity, Mapping):
        console.print("  [dim]No velocity data available[/dim]")
        console.print()
        return

    console.print(f"  Spent this month:     {format_currency(velocity.get('currentSpent'), locale=settings):>12}")
    console.print(f"  Daily average:        {format_currency(velocity.get('dailyAverage'), locale=settings):>12}")
    console.print(f"  Projected month end:  {format_currency(velocity.get('projectedMonthEnd'), locale=settings):>12}")

    progress = Progress(
        TextColumn("  Month progress"),
        BarColumn(bar_width=30),
        TextColumn("{task.percentage:>5.1f}%"),
        console=console,
    )
    with progress:
        progress.add_task("month", total=1.0, completed=velocity_progress(velocity))

    days_left = velocity.get("daysRemaining")
    if days_left is not None:
        console.print(f"  [dim]{days_left} days remaining[/dim]")
    console.print()


def _print_forecast(forecast: Any, settings: AnalyticsSettings) -> None:
    console.print("[bold]Forecast[/bold]")
    if isinstance(forecast, Exception):
        console.print(f"  [yellow]Unavailable:[/yellow] {forecast}")
        console.print()
        return
    if not is_presentable(forecast) or not isinstance(forecast, Mapping):
        console.print("  [dim]No forecast data available[/dim]")
        console.print()
        return

    console.print(f"  3-month projection:   {format_currency(forecast.get('threeMonthProjection'), locale=settings):>12}")
    console.print(f"  6-month projection:   {format_currency(forecast.get('sixMonthProjection'), locale=settings):>12}")
    console.print(
        f"  [green]Savings potential:    {format_currency(forecast.get('savingsPotential'), locale=settings):>12}[/green]"
    )
    console.print()


def status_command(
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
) -> None:
    """Show current month spending status.

    Displays spending pace for the month so far and the projections
    from the forecast service.
    """
    try:
        settings = load_settings(base_url=base_url)
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

    with requests.Session() as session:
        client = AnalyticsClient(settings, credentials, session=session)
        velocity, forecast = asyncio.run(_fetch_status(client))

    console.print()
    console.print(Panel("[bold]Spending status[/bold]", style="cyan"))
    console.print()

    _print_velocity(velocity, settings)
    _print_forecast(forecast, settings)

    if isinstance(velocity, Exception) and isinstance(forecast, Exception):
        raise typer.Exit(1)
