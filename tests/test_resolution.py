"""Tests for resolution module."""

import math

import pytest
from geotags.resolution import (
    DEFAULT_MAX_RESOLUTION,
    calculate_resolution,
    format_degrees,
    resolution_ladder,
    truncate_to_resolution,
)


class TestCalculateResolution:
    """Tests for resolution calculation."""

    def test_integer(self):
        """Test integral values have resolution 1."""
        assert calculate_resolution(47) == 1
        assert calculate_resolution(47.0) == 1
        assert calculate_resolution(0) == 1

    def test_fractional_digits(self):
        """Test resolution counts digits after the decimal point."""
        assert calculate_resolution(47.5636) == 4
        assert calculate_resolution(19.1) == 1
        assert calculate_resolution(-33.86785) == 5

    def test_capped_at_max(self):
        """Test resolution never exceeds the maximum."""
        assert calculate_resolution(47.12345678901) == DEFAULT_MAX_RESOLUTION
        assert calculate_resolution(47.12345678901, 9) == 9
        assert calculate_resolution(47.5636, 2) == 2

    def test_exponent_notation(self):
        """Test small values printed in exponent notation."""
        assert calculate_resolution(1e-07) == 7

    def test_non_finite(self):
        """Test infinities and NaN are rejected."""
        with pytest.raises(ValueError):
            calculate_resolution(math.inf)
        with pytest.raises(ValueError):
            calculate_resolution(math.nan)


class TestTruncateToResolution:
    """Tests for truncation."""

    def test_truncates_not_rounds(self):
        """Test digits are dropped, never rounded up."""
        assert truncate_to_resolution(47.5636, 3) == 47.563
        assert truncate_to_resolution(47.5699, 2) == 47.56
        assert truncate_to_resolution(19.0947, 1) == 19.0

    def test_binary_artefacts_kept(self):
        """Test float representation is not corrected."""
        # 47.1234 * 10**4 is just below 471234
        assert truncate_to_resolution(47.1234, 4) == 47.1233

    def test_negative_toward_zero(self):
        """Test negative values truncate toward zero."""
        assert truncate_to_resolution(-47.5636, 2) == -47.56
        assert truncate_to_resolution(-0.19, 1) == -0.1

    def test_integer(self):
        """Test integral values are unchanged."""
        assert truncate_to_resolution(47, 1) == 47.0


class TestResolutionLadder:
    """Tests for the per-resolution ladder."""

    def test_descending(self):
        """Test ladder runs from full resolution down to 1 digit."""
        assert resolution_ladder(47.5636) == [47.5636, 47.563, 47.56, 47.5]

    def test_integer(self):
        """Test integral values yield a single entry."""
        assert resolution_ladder(47) == [47.0]

    def test_max_resolution(self):
        """Test ladder starts at the maximum resolution."""
        ladder = resolution_ladder(47.12345678901, 10)
        assert len(ladder) == 10
        assert format_degrees(ladder[0]) == "47.123456789"
        assert format_degrees(ladder[-1]) == "47.1"


class TestFormatDegrees:
    """Tests for formatting."""

    def test_integral(self):
        """Test integral values print without a fraction."""
        assert format_degrees(47) == "47"
        assert format_degrees(19.0) == "19"
        assert format_degrees(-3.0) == "-3"

    def test_fractional(self):
        """Test fractional values print their shortest representation."""
        assert format_degrees(47.5636) == "47.5636"
        assert format_degrees(-0.1) == "-0.1"

    def test_no_exponent(self):
        """Test small values are not printed in exponent notation."""
        assert format_degrees(1e-05) == "0.00001"
