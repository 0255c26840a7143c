"""Tests for formatting helpers."""

import pytest

from expenseflow.core.models import AnalyticsSettings
from expenseflow.dashboard.formatting import (
    DEFAULT_CATEGORY_COLOR,
    DEFAULT_CATEGORY_ICON,
    capitalize_first,
    category_color,
    category_icon,
    format_currency,
    format_percentage,
    is_presentable,
    slice_shares,
)


class TestFormatCurrency:
    """Tests for format_currency function."""

    def test_default_locale_and_currency(self) -> None:
        """Test that en-US / INR is used without a provider."""
        assert format_currency(1234) == "₹1,234"

    def test_rounds_half_up_to_whole_units(self) -> None:
        """Test default rounding to zero fraction digits."""
        assert format_currency(1234.5) == "₹1,235"

    def test_explicit_currency_and_digits(self) -> None:
        """Test explicit currency with fixed two fraction digits."""
        assert format_currency(-12.5, "USD", min_fraction_digits=2, max_fraction_digits=2) == "-$12.50"

    def test_trailing_zeros_trimmed_to_minimum(self) -> None:
        """Test that fraction zeros beyond the minimum are dropped."""
        assert format_currency(10, "USD", max_fraction_digits=2) == "$10"
        assert format_currency(10.5, "USD", max_fraction_digits=2) == "$10.5"
        assert format_currency(10.5, "USD", min_fraction_digits=1, max_fraction_digits=2) == "$10.5"

    def test_locale_provider(self) -> None:
        """Test that currency and separators come from the provider."""
        locale = AnalyticsSettings(locale="de-DE", currency="EUR")
        assert format_currency(1234.5, max_fraction_digits=2, locale=locale) == "€1.234,5"

    def test_explicit_currency_wins_over_provider(self) -> None:
        """Test that an explicit currency overrides the provider."""
        locale = AnalyticsSettings(locale="en-US", currency="EUR")
        assert format_currency(5, "GBP", locale=locale) == "£5"

    def test_unknown_currency_uses_code(self) -> None:
        """Test fallback to the ISO code for unknown symbols."""
        assert format_currency(1000, "CHF") == "CHF 1,000"

    def test_unknown_locale_falls_back_to_english_separators(self) -> None:
        """Test separator fallback for an unknown language."""
        locale = AnalyticsSettings(locale="xx-YY", currency="USD")
        assert format_currency(1234567, locale=locale) == "$1,234,567"

    @pytest.mark.parametrize("value", [None, "abc", float("nan"), float("inf"), object()])
    def test_invalid_values_format_as_zero(self, value) -> None:
        """Test that unusable input never raises."""
        assert format_currency(value) == "₹0"

    def test_numeric_string(self) -> None:
        """Test that numeric strings are accepted."""
        assert format_currency("2500") == "₹2,500"

    def test_amounts_beyond_default_precision(self) -> None:
        """Test that very large amounts keep every digit instead of becoming 0."""
        assert format_currency(1e30) == "₹1,000,000,000,000,000,000,000,000,000,000"
        assert format_currency("123456789012345678901234567890.6") == "₹123,456,789,012,345,678,901,234,567,891"
        assert format_currency("-98765432109876543210987654321.25", "USD", max_fraction_digits=2) == (
            "-$98,765,432,109,876,543,210,987,654,321.25"
        )


class TestFormatPercentage:
    """Tests for format_percentage function."""

    def test_rounds_to_one_decimal(self) -> None:
        assert format_percentage(42.567, 1) == "42.6%"

    def test_default_decimals(self) -> None:
        assert format_percentage(42.5) == "42.5%"

    def test_none_is_zero(self) -> None:
        assert format_percentage(None) == "0.0%"

    def test_zero_decimals(self) -> None:
        assert format_percentage(50, 0) == "50%"

    def test_invalid_is_zero(self) -> None:
        assert format_percentage("n/a") == "0.0%"


class TestCapitalizeFirst:
    """Tests for capitalize_first function."""

    def test_capitalizes_first_letter_only(self) -> None:
        assert capitalize_first("healthCare") == "HealthCare"

    def test_empty_string(self) -> None:
        assert capitalize_first("") == ""

    def test_none(self) -> None:
        assert capitalize_first(None) == ""


class TestCategoryTables:
    """Tests for category color and icon lookup."""

    def test_known_category(self) -> None:
        assert category_color("food") == "#FF6B6B"
        assert category_icon("transport") == "\U0001f697"

    def test_unknown_category_falls_back(self) -> None:
        assert category_color("crypto") == DEFAULT_CATEGORY_COLOR
        assert category_icon("crypto") == DEFAULT_CATEGORY_ICON

    def test_none_category_falls_back(self) -> None:
        assert category_color(None) == DEFAULT_CATEGORY_COLOR


class TestIsPresentable:
    """Tests for is_presentable function."""

    @pytest.mark.parametrize("data", [None, [], {}, (), "", 0, 42])
    def test_not_presentable(self, data) -> None:
        assert is_presentable(data) is False

    @pytest.mark.parametrize("data", [["x"], {"k": "v"}, [{"month": "Jan"}]])
    def test_presentable(self, data) -> None:
        assert is_presentable(data) is True


class TestSliceShares:
    """Tests for slice_shares function."""

    def test_two_slices(self) -> None:
        """Test shares of [30, 70] sum to 100%."""
        assert slice_shares([30, 70]) == ["30.0%", "70.0%"]

    def test_uneven_slices(self) -> None:
        assert slice_shares([1, 2]) == ["33.3%", "66.7%"]

    def test_zero_total(self) -> None:
        assert slice_shares([0, 0]) == ["0.0%", "0.0%"]

    def test_empty(self) -> None:
        assert slice_shares([]) == []
