"""Settings loading.

Settings come from EXPENSEFLOW_* environment variables layered over the
defaults declared on :class:`AnalyticsSettings`.
"""

import os
from collections.abc import Mapping

from expenseflow.core.models import AnalyticsSettings

ENV_PREFIX = "EXPENSEFLOW_"

# Environment variable suffix -> settings field
ENV_FIELDS = {
    "BASE_URL": "base_url",
    "API_PATH": "api_path",
    "REQUEST_TIMEOUT": "request_timeout",
    "BANNER_TIMEOUT": "banner_timeout",
    "LOCALE": "locale",
    "CURRENCY": "currency",
    "THEME": "theme",
    "PERIOD": "default_period",
    "MONTHS": "default_months",
}


def load_settings(
    env: Mapping[str, str] | None = None,
    **overrides: object,
) -> AnalyticsSettings:
    """Build settings from the environment.

    Args:
        env: Environment mapping. Defaults to os.environ.
        **overrides: Field values that take precedence over the environment.
                     None values are ignored so CLI options can be passed
                     through unconditionally.

    Returns:
        Validated AnalyticsSettings.

    Raises:
        pydantic.ValidationError: If a value is invalid.
    """
    if env is None:
        env = os.environ

    values: dict[str, object] = {}
    for suffix, field in ENV_FIELDS.items():
        raw = env.get(ENV_PREFIX + suffix)
        if raw is not None and raw != "":
            values[field] = raw

    for field, value in overrides.items():
        if value is not None:
            values[field] = value

    return AnalyticsSettings.model_validate(values)
