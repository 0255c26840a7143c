"""Bearer token sources for the analytics client."""

import os
from collections.abc import Mapping
from typing import Protocol

DEFAULT_TOKEN_ENV = "EXPENSEFLOW_AUTH_TOKEN"


class CredentialStore(Protocol):
    """Anything that can hand out the current bearer token."""

    def get_token(self) -> str | None: ...


class StaticCredentialStore:
    """In-memory token holder.

    The token is set after login and cleared on logout.
    """

    def __init__(self, token: str | None = None):
        self._token = token or None

    def get_token(self) -> str | None:
        return self._token

    def set_token(self, token: str) -> None:
        self._token = token or None

    def clear(self) -> None:
        self._token = None


class EnvCredentialStore:
    """Reads the token from an environment variable on every request."""

    def __init__(
        self,
        variable: str = DEFAULT_TOKEN_ENV,
        env: Mapping[str, str] | None = None,
    ):
        self.variable = variable
        self._env = env

    def get_token(self) -> str | None:
        env = self._env if self._env is not None else os.environ
        return env.get(self.variable) or None
