"""Client for the ExpenseFlow analytics HTTP API."""

from expenseflow.api.client import AnalyticsClient
from expenseflow.api.credentials import (
    CredentialStore,
    EnvCredentialStore,
    StaticCredentialStore,
)

__all__ = [
    "AnalyticsClient",
    "CredentialStore",
    "EnvCredentialStore",
    "StaticCredentialStore",
]
