"""Value formatting and display helpers for dashboard widgets.

Everything here is a pure function: no state, no I/O. Locale and currency
come from an injected :class:`LocaleProvider` when not passed explicitly.
"""

from collections.abc import Mapping, Sequence
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation, localcontext
from typing import Protocol

DEFAULT_LOCALE = "en-US"
DEFAULT_CURRENCY = "INR"

CURRENCY_SYMBOLS = {
    "INR": "₹",
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
    "JPY": "¥",
}

# locale -> (group separator, decimal separator)
LOCALE_SEPARATORS = {
    "en": (",", "."),
    "hi": (",", "."),
    "ja": (",", "."),
    "de": (".", ","),
    "es": (".", ","),
    "it": (".", ","),
    "pt": (".", ","),
    "fr": (" ", ","),
    "ru": (" ", ","),
}

CATEGORY_COLORS = {
    "food": "#FF6B6B",
    "transport": "#4ECDC4",
    "entertainment": "#96CEB4",
    "utilities": "#FECA57",
    "healthcare": "#FF9FF3",
    "shopping": "#45B7D1",
    "other": "#A55EEA",
}
DEFAULT_CATEGORY_COLOR = "#999999"

CATEGORY_ICONS = {
    "food": "\U0001f37d\ufe0f",
    "transport": "\U0001f697",
    "entertainment": "\U0001f3ac",
    "utilities": "\U0001f4a1",
    "healthcare": "\U0001f3e5",
    "shopping": "\U0001f6d2",
    "other": "\U0001f4cb",
}
DEFAULT_CATEGORY_ICON = "\U0001f4cb"


class LocaleProvider(Protocol):
    """Source of the active locale and currency."""

    @property
    def locale(self) -> str: ...

    @property
    def currency(self) -> str: ...


def _to_decimal(value: object) -> Decimal:
    """Coerce any input to a finite Decimal, using 0 for anything unusable."""
    if value is None or isinstance(value, bool):
        return Decimal(0)
    try:
        number = Decimal(str(value).strip())
    except (InvalidOperation, ValueError, TypeError):
        return Decimal(0)
    if not number.is_finite():
        return Decimal(0)
    return number


def _round(value: object, digits: int) -> Decimal:
    """Round half-up to a fixed number of fraction digits."""
    number = _to_decimal(value)
    # quantize fails when the result needs more digits than the context precision
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, number.adjusted() + digits + 2)
        return number.quantize(Decimal(1).scaleb(-digits), rounding=ROUND_HALF_UP)


def _separators(locale: str) -> tuple[str, str]:
    language = locale.replace("_", "-").split("-")[0].lower()
    return LOCALE_SEPARATORS.get(language, LOCALE_SEPARATORS["en"])


def format_currency(
    value: object,
    currency: str | None = None,
    *,
    min_fraction_digits: int = 0,
    max_fraction_digits: int = 0,
    locale: LocaleProvider | None = None,
) -> str:
    """Format an amount as a localized currency string.

    Never raises: None and unparseable values are formatted as 0.

    Args:
        value: Amount to format.
        currency: ISO currency code. Defaults to the locale provider's currency.
        min_fraction_digits: Fraction digits always shown.
        max_fraction_digits: Fraction digits the amount is rounded to.
        locale: Locale provider. Defaults to en-US / INR.

    Returns:
        Formatted string, e.g. "₹1,234" or "-$12.50".
    """
    locale_name = locale.locale if locale is not None else DEFAULT_LOCALE
    code = (currency or (locale.currency if locale is not None else DEFAULT_CURRENCY)).upper()
    symbol = CURRENCY_SYMBOLS.get(code, f"{code} ")

    max_digits = max(0, max_fraction_digits)
    min_digits = min(max(0, min_fraction_digits), max_digits)

    amount = _round(value, max_digits)
    text = f"{amount.copy_abs():,.{max_digits}f}"

    if max_digits > min_digits:
        whole, _, fraction = text.partition(".")
        fraction = fraction.rstrip("0")
        if len(fraction) < min_digits:
            fraction = fraction.ljust(min_digits, "0")
        text = f"{whole}.{fraction}" if fraction else whole

    group, decimal_point = _separators(locale_name)
    text = text.replace(",", "\x00").replace(".", decimal_point).replace("\x00", group)

    if amount < 0:
        return f"-{symbol}{text}"
    return f"{symbol}{text}"


def format_percentage(value: object, decimals: int = 1) -> str:
    """Format a value already expressed in percent units.

    >>> format_percentage(42.567)
    '42.6%'
    >>> format_percentage(None)
    '0.0%'
    """
    digits = max(0, decimals)
    return f"{_round(value, digits):.{digits}f}%"


def capitalize_first(text: str | None) -> str:
    """Uppercase the first character, leaving the rest untouched."""
    if not text:
        return ""
    return text[0].upper() + text[1:]


def category_color(category: str | None) -> str:
    """Chart color for a spending category."""
    return CATEGORY_COLORS.get((category or "").lower(), DEFAULT_CATEGORY_COLOR)


def category_icon(category: str | None) -> str:
    """Emoji icon for a spending category."""
    return CATEGORY_ICONS.get((category or "").lower(), DEFAULT_CATEGORY_ICON)


def is_presentable(data: object) -> bool:
    """Check that data is a non-empty sequence or mapping.

    Renderers call this before drawing anything so that an empty but valid
    result shows a "no data" message instead of an error. Scalars and None
    are never presentable.
    """
    if isinstance(data, (Mapping, Sequence, set, frozenset)):
        return len(data) > 0
    return False


def slice_shares(values: Sequence[object], decimals: int = 1) -> list[str]:
    """Percentage share of each value in the total, formatted for tooltips.

    >>> slice_shares([30, 70])
    ['30.0%', '70.0%']
    """
    amounts = [_to_decimal(v) for v in values]
    total = sum(amounts, Decimal(0))
    if total == 0:
        return [format_percentage(0, decimals) for _ in amounts]
    return [format_percentage(amount / total * 100, decimals) for amount in amounts]
