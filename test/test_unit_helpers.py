# Test type: Unit Test
# Validation to be executed: Validates helper utility functions — date parsing,
#   numeric coercion of missing / non-finite values, and currency rounding.
# Command: pytest test/test_unit_helpers.py -v

"""Unit tests for app.utils.helpers module."""

import math
from datetime import date

import pytest

from app.utils.helpers import (
    finite_or_zero,
    normalise_date_str,
    parse_date,
    round_currency,
    upper_bound_or_none,
)


# ── Date parsing ──────────────────────────────────────────────────────────

class TestParseDate:

    def test_plain_date(self):
        assert parse_date("2024-03-15") == date(2024, 3, 15)

    def test_time_component_ignored(self):
        assert parse_date("2024-03-15 10:30:00") == date(2024, 3, 15)

    def test_iso_t_separator(self):
        assert parse_date("2024-03-15T10:30:00") == date(2024, 3, 15)

    def test_whitespace_stripped(self):
        assert parse_date("  2024-03-15 ") == date(2024, 3, 15)

    def test_invalid_raises(self):
        with pytest.raises(ValueError, match="Invalid date format"):
            parse_date("15/03/2024")

    def test_empty_string_raises(self):
        with pytest.raises(ValueError):
            parse_date("")


class TestNormaliseDateStr:
    def test_datetime_normalised_to_date(self):
        assert normalise_date_str("2024-03-15 10:30") == "2024-03-15"


# ── Numeric coercion ──────────────────────────────────────────────────────

class TestFiniteOrZero:

    @pytest.mark.parametrize("value", [None, math.nan, math.inf, -math.inf])
    def test_missing_or_non_finite(self, value):
        assert finite_or_zero(value) == 0.0

    def test_finite_passthrough(self):
        assert finite_or_zero(-12.5) == -12.5

    def test_int_converted(self):
        assert isinstance(finite_or_zero(3), float)


class TestUpperBoundOrNone:

    def test_none_is_unbounded(self):
        assert upper_bound_or_none(None) is None

    def test_positive_infinity_is_unbounded(self):
        assert upper_bound_or_none(math.inf) is None

    @pytest.mark.parametrize("value", [math.nan, -math.inf])
    def test_nan_and_negative_infinity_collapse_to_zero(self, value):
        assert upper_bound_or_none(value) == 0.0

    def test_finite_passthrough(self):
        assert upper_bound_or_none(500) == 500.0


# ── Currency rounding ─────────────────────────────────────────────────────

class TestRoundCurrency:
    def test_two_decimals(self):
        assert round_currency(1333.33333) == 1333.33

    def test_exact_value(self):
        assert round_currency(2000.0) == 2000.0
