"""
Tests for utility functions.
"""
from datetime import date

import pytest

from imihigo.exceptions import InvalidQuarterError
from imihigo.utils import (
    current_quarter,
    format_date,
    format_number,
    parse_baseline,
    parse_count,
    parse_number,
    validate_quarter,
)


class TestParseNumber:
    @pytest.mark.parametrize("raw,expected", [
        (250, 250.0),
        ("250", 250.0),
        (" 12.5 ", 12.5),
        ("", 0.0),
        (None, 0.0),
        ("n/a", 0.0),
        (-5, 0.0),
        ("-3", 0.0),
        (float("nan"), 0.0),
        ("inf", 0.0),
        (True, 0.0),
    ])
    def test_parse_number(self, raw, expected):
        assert parse_number(raw) == expected


class TestParseBaseline:
    @pytest.mark.parametrize("raw,expected", [
        ("500", 500.0),
        ("500 tons", 500.0),
        ("12.5%", 12.5),
        (".5 km", 0.5),
        ("-3 below", -3.0),
        ("about 40", 0.0),
        ("", 0.0),
        (None, 0.0),
        (7, 7.0),
    ])
    def test_parse_baseline(self, raw, expected):
        assert parse_baseline(raw) == expected


class TestParseCount:
    @pytest.mark.parametrize("raw,expected", [(4, 4), ("3", 3), ("2.7", 2), ("", 1), (None, 1), (0, 1)])
    def test_parse_count(self, raw, expected):
        assert parse_count(raw) == expected


class TestQuarters:
    def test_validate_quarter(self):
        assert validate_quarter(3) == 3
        with pytest.raises(InvalidQuarterError):
            validate_quarter(0)
        with pytest.raises(ValueError):
            validate_quarter(5)

    @pytest.mark.parametrize("month,expected", [(1, 1), (3, 1), (4, 2), (6, 2), (7, 3), (10, 4), (12, 4)])
    def test_current_quarter(self, month, expected):
        assert current_quarter(date(2024, month, 15)) == expected

    def test_current_quarter_defaults_to_today(self):
        assert current_quarter() in (1, 2, 3, 4)


class TestFormatting:
    def test_format_date(self):
        assert format_date(date(2024, 1, 5)) == "2024-01-05"

    @pytest.mark.parametrize("value,expected", [(1000.0, "1000"), (0, "0"), (2.5, "2.5"), (0.1, "0.1")])
    def test_format_number(self, value, expected):
        assert format_number(value) == expected
