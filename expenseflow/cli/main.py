"""ExpenseFlow command line entry point."""

import os
from pathlib import Path

import typer

from expenseflow.cli.report import report_command
from expenseflow.cli.status import status_command
from expenseflow.core.config import ENV_PREFIX
from expenseflow.core.logging import setup_logging

app = typer.Typer(help="ExpenseFlow analytics dashboard", no_args_is_help=True)


@app.callback()
def main(
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Show debug logging",
    ),
    log_file: Path = typer.Option(
        None,
        "--log-file",
        help="Also write logs to this file",
    ),
) -> None:
    """Fetch analytics from an ExpenseFlow server and report on them."""
    level = "DEBUG" if verbose else os.environ.get(ENV_PREFIX + "LOG_LEVEL", "WARNING")
    setup_logging(level, log_file=log_file)


app.command(name="report")(report_command)
app.command(name="status")(status_command)


if __name__ == "__main__":
    app()
