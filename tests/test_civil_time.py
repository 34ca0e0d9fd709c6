import pytest
from datetime import date, datetime, timedelta, timezone

from app.core.civil_time import (
    LocalCivilDateTime, MalformedCivilTime, nth_sunday, is_daylight_saving,
    utc_offset_for, local_to_absolute, absolute_to_local, parse_local_datetime,
    to_absolute, to_local_civil, local_date_of, format_local_time,
    format_local_clock, format_local_date, format_date_range, civil_day_bounds
)

UTC = timezone.utc

class TestNthSunday:
    def test_second_sunday_of_march(self):
        assert nth_sunday(2024, 3, 2) == 10
        assert nth_sunday(2025, 3, 2) == 9

    def test_first_sunday_of_november(self):
        assert nth_sunday(2024, 11, 1) == 3
        assert nth_sunday(2025, 11, 1) == 2

    def test_month_starting_on_sunday(self):
        # September 2024 starts on a Sunday
        assert nth_sunday(2024, 9, 1) == 1
        assert nth_sunday(2024, 9, 3) == 15

class TestIsDaylightSaving:
    def test_spring_forward_boundary(self):
        assert is_daylight_saving(2024, 3, 9) is False
        assert is_daylight_saving(2024, 3, 10) is True

    def test_fall_back_boundary(self):
        assert is_daylight_saving(2024, 11, 2) is True
        assert is_daylight_saving(2024, 11, 3) is False

    def test_summer_months_always_dst(self):
        for month in range(4, 11):
            assert is_daylight_saving(2024, month, 1) is True

    def test_winter_months_never_dst(self):
        for month in (1, 2, 12):
            assert is_daylight_saving(2024, month, 15) is False

    def test_offset_selection(self):
        assert utc_offset_for(2024, 1, 15) == timedelta(hours=-5)
        assert utc_offset_for(2024, 7, 15) == timedelta(hours=-4)

class TestLocalToAbsolute:
    def test_standard_time_is_five_hours_ahead(self):
        result = local_to_absolute(2024, 1, 15, 14, 30)
        assert result == datetime(2024, 1, 15, 19, 30, tzinfo=UTC)

    def test_daylight_time_is_four_hours_ahead(self):
        result = local_to_absolute(2024, 7, 15, 14, 30)
        assert result == datetime(2024, 7, 15, 18, 30, tzinfo=UTC)

    def test_late_evening_crosses_utc_midnight(self):
        result = local_to_absolute(2024, 7, 15, 22, 0)
        assert result == datetime(2024, 7, 16, 2, 0, tzinfo=UTC)

    def test_spring_forward_gap_is_accepted_as_daylight(self):
        # 2:30 AM never happens on 2024-03-10 but is converted with -4:00
        result = local_to_absolute(2024, 3, 10, 2, 30)
        assert result == datetime(2024, 3, 10, 6, 30, tzinfo=UTC)

    def test_fall_back_day_uses_standard_offset(self):
        # Offset is picked by calendar date: Nov 3 2024 is not a DST date
        result = local_to_absolute(2024, 11, 3, 1, 30)
        assert result == datetime(2024, 11, 3, 6, 30, tzinfo=UTC)

    def test_day_before_fall_back_uses_daylight_offset(self):
        result = local_to_absolute(2024, 11, 2, 23, 0)
        assert result == datetime(2024, 11, 3, 3, 0, tzinfo=UTC)

    def test_deterministic(self):
        assert local_to_absolute(2024, 3, 10, 2, 30) == local_to_absolute(2024, 3, 10, 2, 30)

    def test_invalid_components(self):
        with pytest.raises(MalformedCivilTime):
            local_to_absolute(2024, 2, 30, 10, 0)
        with pytest.raises(MalformedCivilTime):
            local_to_absolute(2024, 1, 15, 24, 0)

class TestAbsoluteToLocal:
    def test_standard_time(self):
        local = absolute_to_local(datetime(2024, 1, 15, 19, 30, tzinfo=UTC))
        assert local == LocalCivilDateTime(2024, 1, 15, 14, 30)

    def test_daylight_time(self):
        local = absolute_to_local(datetime(2024, 7, 16, 2, 0, tzinfo=UTC))
        assert local == LocalCivilDateTime(2024, 7, 15, 22, 0)

    def test_naive_instant_is_read_as_utc(self):
        local = absolute_to_local(datetime(2024, 7, 15, 18, 30))
        assert local == LocalCivilDateTime(2024, 7, 15, 14, 30)

    def test_other_timezone_is_normalised(self):
        pacific = timezone(timedelta(hours=-7))
        local = absolute_to_local(datetime(2024, 7, 15, 11, 30, tzinfo=pacific))
        assert local == LocalCivilDateTime(2024, 7, 15, 14, 30)

    @pytest.mark.parametrize("local", [
        LocalCivilDateTime(2024, 1, 15, 14, 30),
        LocalCivilDateTime(2024, 2, 29, 0, 0),
        LocalCivilDateTime(2024, 4, 1, 23, 59),
        LocalCivilDateTime(2024, 7, 4, 21, 15),
        LocalCivilDateTime(2024, 12, 31, 23, 45),
        LocalCivilDateTime(2025, 6, 1, 0, 5),
    ])
    def test_round_trip_away_from_transitions(self, local):
        assert to_local_civil(to_absolute(local)) == local

    def test_local_date_near_midnight(self):
        # 02:30 UTC on July 16 is still July 15 in Eastern time
        assert local_date_of(datetime(2024, 7, 16, 2, 30, tzinfo=UTC)) == date(2024, 7, 15)
        assert local_date_of(datetime(2024, 1, 16, 4, 59, tzinfo=UTC)) == date(2024, 1, 15)
        assert local_date_of(datetime(2024, 1, 16, 5, 0, tzinfo=UTC)) == date(2024, 1, 16)

class TestParseLocalDatetime:
    def test_form_value(self):
        assert parse_local_datetime("2024-07-15T14:30") == LocalCivilDateTime(2024, 7, 15, 14, 30)

    def test_space_separator_and_seconds(self):
        assert parse_local_datetime("2024-07-15 14:30:59") == LocalCivilDateTime(2024, 7, 15, 14, 30)

    @pytest.mark.parametrize("text", [
        "", "2024-07-15", "15/07/2024 14:30", "2024-13-01T10:00",
        "2024-02-30T10:00", "2024-07-15T25:00", "2024-07-15T14:60",
    ])
    def test_malformed(self, text):
        with pytest.raises(MalformedCivilTime):
            parse_local_datetime(text)

    def test_malformed_is_value_error(self):
        with pytest.raises(ValueError):
            to_absolute("not a time")

    def test_to_absolute_accepts_string(self):
        assert to_absolute("2024-01-15T14:30") == datetime(2024, 1, 15, 19, 30, tzinfo=UTC)

    def test_isoformat(self):
        assert LocalCivilDateTime(2024, 7, 5, 9, 5).isoformat() == "2024-07-05T09:05"

class TestFormatting:
    def test_afternoon_clock(self):
        assert format_local_time(datetime(2024, 7, 15, 18, 0, tzinfo=UTC)) == "2:00 PM"

    def test_midnight_and_noon(self):
        assert format_local_clock(datetime(2024, 1, 15, 5, 0, tzinfo=UTC)) == "12:00 AM"
        assert format_local_clock(datetime(2024, 1, 15, 17, 0, tzinfo=UTC)) == "12:00 PM"

    def test_morning_minutes(self):
        assert format_local_clock(datetime(2024, 1, 15, 14, 5, tzinfo=UTC)) == "9:05 AM"

    def test_date_styles(self):
        instant = datetime(2024, 1, 15, 19, 30, tzinfo=UTC)
        assert format_local_date(instant, "short") == "Jan 15, 2024"
        assert format_local_date(instant, "long") == "Monday, January 15, 2024"
        assert format_local_date(instant, "datetime") == "Jan 15, 2024, 02:30 PM"
        assert format_local_date(instant, "iso") == "2024-01-15T19:30:00Z"

    def test_unknown_style(self):
        with pytest.raises(ValueError):
            format_local_date(datetime(2024, 1, 15, tzinfo=UTC), "fancy")

    def test_date_range(self):
        start = datetime(2024, 7, 15, 13, 0, tzinfo=UTC)
        same_day = datetime(2024, 7, 16, 1, 0, tzinfo=UTC)
        later = datetime(2024, 7, 18, 13, 0, tzinfo=UTC)
        assert format_date_range(start, same_day) == "Jul 15, 2024"
        assert format_date_range(start, later) == "Jul 15, 2024 - Jul 18, 2024"

class TestCivilDayBounds:
    def test_both_bounds(self):
        lower, upper = civil_day_bounds(date(2024, 7, 1), date(2024, 7, 31))
        assert lower == datetime(2024, 7, 1, 4, 0, tzinfo=UTC)
        assert upper == datetime(2024, 8, 1, 4, 0, tzinfo=UTC)

    def test_open_bounds(self):
        assert civil_day_bounds() == (None, None)
        lower, upper = civil_day_bounds(end_date=date(2024, 1, 15))
        assert lower is None
        assert upper == datetime(2024, 1, 16, 5, 0, tzinfo=UTC)

class TestRepresentableRange:
    def test_late_local_time_past_max_year(self):
        # 22:00 EST on Dec 31, 9999 is 03:00 UTC in year 10000
        with pytest.raises(MalformedCivilTime):
            local_to_absolute(9999, 12, 31, 22, 0)
        with pytest.raises(MalformedCivilTime):
            to_absolute("9999-12-31T22:00")

    def test_earliest_instant_before_min_year(self):
        with pytest.raises(MalformedCivilTime):
            absolute_to_local(datetime(1, 1, 1, 0, 0, tzinfo=UTC))

    def test_range_limits_still_convert(self):
        assert local_to_absolute(9999, 12, 31, 18, 0) == datetime(9999, 12, 31, 23, 0, tzinfo=UTC)
        assert absolute_to_local(datetime(1, 1, 1, 5, 0, tzinfo=UTC)) == LocalCivilDateTime(1, 1, 1, 0, 0)

    def test_last_representable_day_is_unbounded(self):
        assert civil_day_bounds(end_date=date.max) == (None, None)
        lower, upper = civil_day_bounds(date.max, date.max)
        assert lower == datetime(9999, 12, 31, 5, 0, tzinfo=UTC)
        assert upper is None

class TestFormattingMissingValues:
    def test_missing_instant_is_blank(self):
        assert format_local_date(None) == ""
        assert format_local_date(None, "iso") == ""

    def test_unrepresentable_instant_is_blank(self):
        assert format_local_date(datetime(1, 1, 1, 0, 0, tzinfo=UTC), "long") == ""

    def test_unknown_style_with_missing_instant(self):
        with pytest.raises(ValueError):
            format_local_date(None, "fancy")
