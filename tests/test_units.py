"""Tests for k6_comparer/units.py"""

import pytest

from k6_comparer.units import (
    normalize,
    parse_count,
    parse_duration_ms,
    parse_number,
    parse_percentage,
    parse_rate,
)


# ── parse_number ────────────────────────────────────────────────────

class TestParseNumber:
    @pytest.mark.parametrize("text,expected", [
        ("12", 12.0),
        ("12.5", 12.5),
        (" 0.5 ", 0.5),
        (".5", 0.5),
        ("-3", -3.0),
        ("1,234", 1234.0),
        ("1,234,567.8", 1234567.8),
        ("1e3", 1000.0),
    ])
    def test_valid(self, text, expected):
        assert parse_number(text) == pytest.approx(expected)

    @pytest.mark.parametrize("text", ["", "abc", "1,23", "12,5", "1.2.3", "nan", "inf", "1_000"])
    def test_invalid(self, text):
        assert parse_number(text) is None


# ── Durations ───────────────────────────────────────────────────────

class TestParseDuration:
    @pytest.mark.parametrize("raw,expected", [
        ("25.53ms", 25.53),
        ("1.05s", 1050.0),
        ("500µs", 0.5),
        ("500μs", 0.5),
        ("500us", 0.5),
        ("0s", 0.0),
        ("12MS", 12.0),
        ("2S", 2000.0),
        ("1m2s", 62000.0),
        ("1m30.5s", 90500.0),
        ("2m0s", 120000.0),
        ("1h3m", 3780000.0),
        ("1,234ms", 1234.0),
    ])
    def test_units(self, raw, expected, reporter):
        assert parse_duration_ms(raw, reporter) == pytest.approx(expected)
        assert reporter.notices == []

    def test_unitless_is_taken_as_milliseconds(self, reporter):
        assert parse_duration_ms("42.5", reporter) == 42.5
        assert reporter.notices == []

    @pytest.mark.parametrize("raw", [None, "", "   "])
    def test_blank_is_absent_without_warning(self, raw, reporter):
        assert parse_duration_ms(raw, reporter) is None
        assert reporter.notices == []

    @pytest.mark.parametrize("raw", ["fastms", "abcs", "12,5ms", "5ns", "1.2 MB"])
    def test_unparsable_warns(self, raw, reporter):
        assert parse_duration_ms(raw, reporter) is None
        assert reporter.messages == ["Could not parse duration"]
        assert reporter.notices[0].context == {"value": raw}

    def test_zero_is_not_absent(self, reporter):
        value = parse_duration_ms("0ms", reporter)
        assert value == 0.0
        assert value is not None


# ── Rates ───────────────────────────────────────────────────────────

class TestParseRate:
    @pytest.mark.parametrize("raw,expected", [
        ("5.71704/s", 5.71704),
        ("12/S", 12.0),
        (" 3.5/s ", 3.5),
        ("0/s", 0.0),
    ])
    def test_valid(self, raw, expected, reporter):
        assert parse_rate(raw, reporter) == pytest.approx(expected)

    def test_missing_suffix_is_absent(self, reporter):
        assert parse_rate("12", reporter) is None
        assert reporter.messages == ["Could not parse rate"]

    def test_unit_prefix_is_unparsable(self, reporter):
        assert parse_rate("40 kB/s", reporter) is None
        assert len(reporter.notices) == 1

    def test_blank_is_absent(self, reporter):
        assert parse_rate("", reporter) is None
        assert reporter.notices == []


# ── Percentages ─────────────────────────────────────────────────────

class TestParsePercentage:
    @pytest.mark.parametrize("raw,expected", [
        ("0.00%", 0.0),
        ("37.5%", 37.5),
        ("100%", 100.0),
    ])
    def test_valid(self, raw, expected, reporter):
        assert parse_percentage(raw, reporter) == expected

    def test_missing_suffix_is_absent(self, reporter):
        assert parse_percentage("37.5", reporter) is None
        assert reporter.messages == ["Could not parse percentage"]

    def test_decimal_comma_is_rejected(self, reporter):
        assert parse_percentage("37,5%", reporter) is None

    def test_blank_is_absent(self, reporter):
        assert parse_percentage(None, reporter) is None
        assert reporter.notices == []


# ── Counts and label dispatch ───────────────────────────────────────

class TestNormalize:
    STATS = {
        "Avg": "1.05s",
        "P95": "500µs",
        "Rate": "5.71704/s",
        "Percentage": "2.50%",
        "Value": "200",
        "Count": "5",
    }

    @pytest.mark.parametrize("label,expected", [
        ("Avg", 1050.0),
        ("P95", 0.5),
        ("Rate", 5.71704),
        ("Percentage", 2.5),
        ("Value", 200.0),
        ("Count", 5.0),
    ])
    def test_dispatch_by_label(self, label, expected, reporter):
        assert normalize(self.STATS, label, reporter) == pytest.approx(expected)

    def test_missing_label_is_absent(self, reporter):
        assert normalize(self.STATS, "Max", reporter) is None
        assert reporter.notices == []

    def test_unknown_label_warns_and_is_absent(self, reporter):
        assert normalize(self.STATS, "Median", reporter) is None
        assert reporter.messages == ["No unit conversion for statistic"]
        assert reporter.notices[0].context == {"label": "Median"}

    def test_count_with_unit_warns(self, reporter):
        assert parse_count("1.2 MB", reporter) is None
        assert reporter.messages == ["Could not parse number"]
