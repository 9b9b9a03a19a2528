"""Unit tests for timestamp normalization and rendering.

WHY: Every consumer trusts the canonical seconds. A misread notation
shifts a subtitle by minutes or an hour, and a wrong rendering produces
files that players reject.

HOW: Tests cover each notation the model is known to emit, the
3-component disambiguation heuristic, overflow reduction, the
never-fail contract, and each format-specific rendering.

RULES:
- Floating-point comparisons use pytest.approx with default tolerance.
"""

import pytest

from transcript_lab.core.timestamps import (
    CANONICAL_ZERO,
    format_canonical,
    format_lrc_time,
    format_srt_time,
    format_ttml_time,
    normalize_timestamp,
    parse_timestamp,
)


class TestRequestedNotations:
    """MM:SS.mmm and HH:MM:SS.mmm, the notations the model is asked for."""

    def test_minutes_seconds(self):
        result = normalize_timestamp("00:23")
        assert result.seconds == pytest.approx(23.0)
        assert result.display == "00:00:23.000"

    def test_hours_minutes_seconds_millis(self):
        result = normalize_timestamp("1:02:03.500")
        assert result.seconds == pytest.approx(3723.5)
        assert result.display == "01:02:03.500"

    def test_minutes_seconds_millis(self):
        assert parse_timestamp("05:30.500") == pytest.approx(330.5)

    def test_short_fraction_is_right_padded(self):
        assert parse_timestamp("00:05.5") == pytest.approx(5.5)

    def test_long_fraction_is_truncated_to_millis(self):
        assert normalize_timestamp("00:05.1239").display == "00:00:05.123"


class TestOverflow:
    """Overflowing fields roll into larger units."""

    def test_seconds_roll_into_minutes(self):
        result = normalize_timestamp("00:65.250")
        assert result.seconds == pytest.approx(65.25)
        assert result.display == "00:01:05.250"

    def test_minutes_roll_into_hours(self):
        assert normalize_timestamp("75:00").display == "01:15:00.000"


class TestDeviantNotations:
    """Notations the model emits despite instructions."""

    def test_bare_seconds(self):
        result = normalize_timestamp("65.5")
        assert result.seconds == pytest.approx(65.5)
        assert result.display == "00:01:05.500"

    def test_comma_decimal_separator(self):
        assert parse_timestamp("00:23,5") == pytest.approx(23.5)

    def test_srt_style_input(self):
        assert parse_timestamp("00:00:23,250") == pytest.approx(23.25)

    def test_seconds_unit_suffix(self):
        assert parse_timestamp("12.5s") == pytest.approx(12.5)

    def test_spelled_unit_suffix(self):
        assert parse_timestamp("4 sec") == pytest.approx(4.0)

    def test_uppercase_and_whitespace(self):
        assert parse_timestamp("  00:07.250S ") == pytest.approx(7.25)

    def test_four_components_colon_before_millis(self):
        result = normalize_timestamp("01:02:03:450")
        assert result.seconds == pytest.approx(3723.45)
        assert result.display == "01:02:03.450"

    def test_numeric_token(self):
        assert normalize_timestamp(12.3456).display == "00:00:12.346"

    def test_integer_token(self):
        assert normalize_timestamp(90).display == "00:01:30.000"


class TestThreeComponentHeuristic:
    """HH:MM:SS vs MM:SS:mmm disambiguation."""

    def test_dotted_third_part_is_hours(self):
        assert parse_timestamp("00:01:05.250") == pytest.approx(65.25)

    def test_three_digit_third_part_is_millis(self):
        assert parse_timestamp("01:05:250") == pytest.approx(65.25)

    def test_third_part_above_59_is_millis(self):
        assert parse_timestamp("01:05:75") == pytest.approx(65.075)

    def test_small_third_part_is_seconds(self):
        assert parse_timestamp("01:05:30") == pytest.approx(3930.0)

    def test_zero_padded_seconds_are_read_as_millis(self):
        """Known false positive: a 3-digit seconds field reads as MM:SS:mmm."""
        assert parse_timestamp("00:01:005") == pytest.approx(1.005)


class TestNeverFails:
    """Unparseable input yields zero instead of raising."""

    @pytest.mark.parametrize("token", ["", "   ", None, "garbage", "1.2.3", "1:2:3:4:5"])
    def test_unparseable_is_zero(self, token):
        result = normalize_timestamp(token)
        assert result.seconds == 0.0
        assert result.display == CANONICAL_ZERO

    def test_negative_clamps_to_zero(self):
        assert normalize_timestamp("-5").display == CANONICAL_ZERO

    def test_nan_clamps_to_zero(self):
        assert normalize_timestamp(float("nan")).seconds == 0.0

    def test_infinity_clamps_to_zero(self):
        assert normalize_timestamp(float("inf")).seconds == 0.0


class TestRendering:
    """Format-specific encodings of canonical seconds."""

    def test_canonical(self):
        assert format_canonical(3723.5) == "01:02:03.500"

    def test_srt_uses_comma(self):
        assert format_srt_time(3723.5) == "01:02:03,500"

    def test_srt_zero(self):
        assert format_srt_time(0.0) == "00:00:00,000"

    def test_lrc_hundredths(self):
        assert format_lrc_time(65.25) == "[01:05.25]"

    def test_lrc_has_no_hours(self):
        assert format_lrc_time(3723.5) == "[62:03.50]"

    def test_lrc_rounding_carries_into_minutes(self):
        assert format_lrc_time(59.999) == "[01:00.00]"

    def test_lrc_negative_is_zero(self):
        assert format_lrc_time(-1.0) == "[00:00.00]"

    def test_ttml_pads_two_component_strings(self):
        assert format_ttml_time("00:05.250") == "00:00:05.250"

    def test_ttml_keeps_three_component_strings(self):
        assert format_ttml_time("00:00:05.250") == "00:00:05.250"

    def test_ttml_renders_numbers(self):
        assert format_ttml_time(5.25) == "00:00:05.250"
