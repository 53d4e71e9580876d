from datetime import datetime, timezone

import pytest

from iptvguide.utils.timezone import (
    DateFormatError,
    calculate_day_window,
    convert_to_timezone,
    parse_iso8601_to_utc,
)


class TestParseIso8601:

    def test_z_suffix(self):
        assert parse_iso8601_to_utc("2025-06-15T10:00:00Z") == datetime(2025, 6, 15, 10, tzinfo=timezone.utc)

    def test_offset_is_converted(self):
        assert parse_iso8601_to_utc("2025-06-15T12:00:00+02:00") == datetime(2025, 6, 15, 10, tzinfo=timezone.utc)

    def test_invalid(self):
        with pytest.raises(DateFormatError):
            parse_iso8601_to_utc("yesterday")


class TestConvertToTimezone:

    def test_utc(self):
        assert convert_to_timezone(datetime(2025, 1, 1, 18, tzinfo=timezone.utc), "UTC") == "2025-01-01T18:00:00+00:00"

    def test_iana(self):
        value = convert_to_timezone(datetime(2025, 1, 1, 18, tzinfo=timezone.utc), "Europe/Stockholm")
        assert value == "2025-01-01T19:00:00+01:00"


class TestCalculateDayWindow:

    def test_today_utc(self):
        now = datetime(2025, 1, 1, 15, 30, tzinfo=timezone.utc)
        assert calculate_day_window(0, "UTC", now) == (
            datetime(2025, 1, 1, tzinfo=timezone.utc),
            datetime(2025, 1, 2, tzinfo=timezone.utc),
        )

    def test_offset_in_local_zone(self):
        now = datetime(2025, 1, 1, 23, 30, tzinfo=timezone.utc)  # already Jan 2 in Stockholm
        start, end = calculate_day_window(1, "Europe/Stockholm", now)
        assert start == datetime(2025, 1, 2, 23, tzinfo=timezone.utc)
        assert end == datetime(2025, 1, 3, 23, tzinfo=timezone.utc)

    def test_dst_day_is_23_hours(self):
        now = datetime(2025, 3, 30, 12, tzinfo=timezone.utc)
        start, end = calculate_day_window(0, "Europe/Stockholm", now)
        assert (end - start).total_seconds() == 23 * 3600

    @pytest.mark.parametrize("tz_name", ["Mars/Olympus", "Europe", "America"])
    def test_unknown_timezone(self, tz_name):
        with pytest.raises(ValueError):
            calculate_day_window(0, tz_name)
