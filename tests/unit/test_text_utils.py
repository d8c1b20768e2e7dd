"""
Unit tests for utils.text_utils.

Run: pytest tests/unit/test_text_utils.py -v
"""

import math

import pytest

from utils.text_utils import clean_text, is_blank, normalize_name, parse_flag, parse_number


class TestIsBlank:

    @pytest.mark.parametrize("value", [None, "", "   ", math.nan])
    def test_blank_values(self, value):
        assert is_blank(value) is True

    @pytest.mark.parametrize("value", [0, 0.0, "0", "x", False])
    def test_non_blank_values(self, value):
        assert is_blank(value) is False


class TestCleanText:

    def test_strips_whitespace(self):
        assert clean_text("  Café  ") == "Café"

    def test_integral_float_loses_decimal(self):
        # Excel returns numeric cells as floats
        assert clean_text(123.0) == "123"

    def test_blank_is_none(self):
        assert clean_text("   ") is None
        assert clean_text(None) is None


class TestNormalizeName:

    def test_case_and_whitespace_insensitive(self):
        assert normalize_name("  AGUA ") == normalize_name("agua") == "agua"

    def test_accents_are_kept(self):
        assert normalize_name("Café") == "café"
        assert normalize_name("Café") != normalize_name("Cafe")

    def test_blank_is_empty_string(self):
        assert normalize_name(None) == ""


class TestParseNumber:

    @pytest.mark.parametrize("value,expected", [
        ("5000", 5000.0),
        (" 12.5 ", 12.5),
        (8000, 8000.0),
        (0, 0.0),
        ("-3", -3.0),
    ])
    def test_numeric_values(self, value, expected):
        assert parse_number(value) == expected

    @pytest.mark.parametrize("value", [None, "", "abc", "nan", "inf", True, math.nan])
    def test_non_numeric_values(self, value):
        assert parse_number(value) is None


class TestParseFlag:

    @pytest.mark.parametrize("value", ["true", "TRUE", "sí", "Sí", "si", "1", 1, 1.0, True])
    def test_truthy(self, value):
        assert parse_flag(value) is True

    @pytest.mark.parametrize("value", ["no", "false", "0", "", None, 0, "yes", False])
    def test_falsy(self, value):
        assert parse_flag(value) is False
