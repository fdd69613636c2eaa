"""Unit tests for caption timestamp formatting."""

import pytest

from transcribe_captions.core.timecode import format_timestamp


class TestFormatTimestamp:
    """format_timestamp() renders HH:MM:SS.mmm."""

    def test_zero(self):
        assert format_timestamp(0) == "00:00:00.000"

    def test_hours_minutes_seconds_millis(self):
        assert format_timestamp(3661.25) == "01:01:01.250"

    def test_sub_second(self):
        assert format_timestamp(0.04) == "00:00:00.040"
        assert format_timestamp(1.5) == "00:00:01.500"

    def test_float_noise_is_rounded(self):
        # 0.91 * 1000 == 910.0000000000001
        assert format_timestamp(0.91) == "00:00:00.910"

    def test_rounding_carries_into_minutes(self):
        assert format_timestamp(59.9996) == "00:01:00.000"

    def test_hours_do_not_wrap_at_24(self):
        assert format_timestamp(25 * 3600) == "25:00:00.000"

    def test_hours_field_grows_past_two_digits(self):
        assert format_timestamp(100 * 3600 + 1.002) == "100:00:01.002"

    def test_negative_input_rejected(self):
        with pytest.raises(ValueError):
            format_timestamp(-0.5)
