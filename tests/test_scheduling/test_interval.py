"""Tests for interval parsing, validation and formatting."""

import pytest

from autoclear.errors import IntervalTooShort, InvalidInterval, InvalidIntervalFormat
from autoclear.scheduling.interval import (
    format_duration,
    is_valid_interval,
    matches_interval_grammar,
    parse_interval,
    validate_interval,
)


class TestParseInterval:
    @pytest.mark.parametrize(
        "text,expected",
        [("30m", 1800), ("1h", 3600), ("1d2h30m", 95400), ("2d", 172800), ("1h1m", 3660), ("90m", 5400)],
    )
    def test_valid(self, text, expected):
        assert parse_interval(text) == expected

    def test_case_insensitive(self):
        assert parse_interval("1H30M") == 5400

    def test_surrounding_whitespace(self):
        assert parse_interval("  10m ") == 600

    def test_spaced_components(self):
        assert parse_interval("1d 2h 30m") == 95400

    @pytest.mark.parametrize("text", ["", "   ", None, "45s", "abc", "30", "m", "1m1h", "1h 1d", "-5m", "1.5h"])
    def test_invalid_format(self, text):
        with pytest.raises(InvalidIntervalFormat):
            parse_interval(text)

    def test_zero_is_invalid(self):
        with pytest.raises(IntervalTooShort):
            parse_interval("0m")
        with pytest.raises(InvalidInterval):
            parse_interval("0d0h0m")

    def test_overflow_is_invalid(self):
        with pytest.raises(InvalidIntervalFormat, match="too large"):
            parse_interval("99999999999999999999d")

    def test_error_carries_details(self):
        with pytest.raises(InvalidIntervalFormat) as exc_info:
            parse_interval("soon")
        assert exc_info.value.details == {"interval": "soon"}


class TestValidateInterval:
    def test_minimum_is_one_minute(self):
        assert validate_interval("1m") == 60

    def test_below_minimum(self):
        with pytest.raises(IntervalTooShort):
            validate_interval("2m", minimum=121)

    def test_custom_minimum_boundary(self):
        assert validate_interval("2m", minimum=120) == 120


class TestIsValidInterval:
    def test_valid(self):
        assert is_valid_interval("30m") is True
        assert is_valid_interval("10m") is True
        assert is_valid_interval("1m") is True

    def test_seconds_unit_rejected(self):
        assert is_valid_interval("30s") is False

    def test_zero_and_empty(self):
        assert is_valid_interval("0m") is False
        assert is_valid_interval("") is False


class TestMatchesGrammar:
    def test_zero_matches_grammar(self):
        assert matches_interval_grammar("0m") is True

    def test_empty_does_not_match(self):
        assert matches_interval_grammar("") is False
        assert matches_interval_grammar(None) is False

    def test_seconds_do_not_match(self):
        assert matches_interval_grammar("45s") is False


class TestFormatDuration:
    @pytest.mark.parametrize(
        "seconds,expected",
        [
            (95400, "1d 2h 30m"),
            (3600, "1h"),
            (86400 + 60, "1d 1m"),
            (1800, "30m"),
            (90, "1m 30s"),
            (45, "45s"),
            (3600 + 5, "1h"),
            (86400 + 59, "1d"),
        ],
    )
    def test_formats(self, seconds, expected):
        assert format_duration(seconds) == expected

    @pytest.mark.parametrize("seconds", [0, -1, -3600, None])
    def test_zero_negative_unknown(self, seconds):
        assert format_duration(seconds) == "0m"

    @pytest.mark.parametrize("seconds", [60, 1800, 3600, 95400, 172800 + 60, 7 * 86400 + 23 * 3600 + 59 * 60])
    def test_whole_minutes_parse_back(self, seconds):
        assert parse_interval(format_duration(seconds)) == seconds

    def test_only_present_units_rendered(self):
        rendered = format_duration(parse_interval("2d30m"))
        assert rendered == "2d 30m"
        assert "h" not in rendered
