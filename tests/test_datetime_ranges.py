"""Tests for datetime_ranges module."""

from datetime import datetime, timedelta, timezone

import pytest

from pacstdlib.datetime_ranges import (
    DateRange,
    parse_date_range,
    parse_time_range,
    parse_weekday_range,
    split_gmt,
    to_local,
)
from pacstdlib.exceptions import PacDateTimeInputError

UTC = timezone.utc
WEDNESDAY = datetime(2026, 10, 21, 12, 0, 0, tzinfo=UTC)
SUNDAY = datetime(2026, 10, 25, 12, 0, 0, tzinfo=UTC)


def at(year, month, day, hour=12, minute=0, second=0):
    return datetime(year, month, day, hour, minute, second, tzinfo=UTC)


class TestSplitGmt:
    """Tests for split_gmt function."""

    def test_undefined_dropped(self):
        """Test that None arguments are ignored."""
        assert split_gmt(("MON", None, None)) == (["MON"], False)

    def test_gmt_flag(self):
        """Test trailing GMT, any case."""
        assert split_gmt(("MON", "FRI", "GMT")) == (["MON", "FRI"], True)
        assert split_gmt((1, "gmt", None)) == ([1], True)


class TestToLocal:
    """Tests for to_local function."""

    def test_gmt(self):
        """Test projection on UTC."""
        eastern = timezone(timedelta(hours=-5))
        moment = datetime(2026, 10, 21, 22, 0, tzinfo=eastern)
        assert to_local(moment, True).day == 22

    def test_local_zone(self):
        """Test projection on an explicit zone."""
        eastern = timezone(timedelta(hours=-5))
        assert to_local(at(2026, 10, 22, 2), False, eastern).day == 21


class TestWeekdayRange:
    """Tests for weekday ranges."""

    @pytest.mark.parametrize("gmt", [None, "GMT"])
    def test_working_week(self, gmt):
        """Test MON-FRI on a Wednesday and on a Sunday."""
        period = parse_weekday_range("MON", "FRI", gmt)
        assert period.matches(WEDNESDAY, UTC)
        assert not period.matches(SUNDAY, UTC)

    def test_single_day(self):
        """Test a single weekday."""
        period = parse_weekday_range("WED")
        assert period.single
        assert period.matches(WEDNESDAY, UTC)
        assert not period.matches(SUNDAY, UTC)

    def test_wraps_over_week_end(self):
        """Test FRI-MON containing Sunday."""
        period = parse_weekday_range("FRI", "MON")
        assert period.matches(SUNDAY, UTC)
        assert not period.matches(WEDNESDAY, UTC)

    def test_lower_case_names(self):
        """Test case-insensitive names."""
        assert parse_weekday_range("sun").matches(SUNDAY, UTC)

    def test_local_zone_shifts_day(self):
        """Test that the local zone decides the weekday."""
        late_sunday_utc = at(2026, 10, 25, 23)
        plus_two = timezone(timedelta(hours=2))
        assert parse_weekday_range("MON").matches(late_sunday_utc, plus_two)
        assert not parse_weekday_range("MON", "GMT").matches(late_sunday_utc, plus_two)

    @pytest.mark.parametrize("args", [(), ("XYZ",), ("MON", "TUE", "WED"), (1,)])
    def test_invalid(self, args):
        """Test bad names and arity."""
        with pytest.raises(PacDateTimeInputError):
            parse_weekday_range(*args)


class TestTimeRange:
    """Tests for time ranges."""

    def test_single_hour(self):
        """Test the whole hour."""
        period = parse_time_range(12)
        assert period.matches(at(2026, 1, 1, 12, 0))
        assert period.matches(at(2026, 1, 1, 12, 59, 59))
        assert not period.matches(at(2026, 1, 1, 13, 0))

    def test_hour_range(self):
        """Test from h1:00 to h2:00."""
        period = parse_time_range(9, 17)
        assert period.matches(at(2026, 1, 1, 9, 0))
        assert period.matches(at(2026, 1, 1, 17, 0, 30))
        assert not period.matches(at(2026, 1, 1, 17, 1))
        assert not period.matches(at(2026, 1, 1, 8, 59, 59))

    def test_equal_hours(self):
        """Test a two-argument form naming one hour."""
        period = parse_time_range(12, 12)
        assert period.matches(at(2026, 1, 1, 12, 30))

    def test_minutes(self):
        """Test the four-argument form."""
        period = parse_time_range(8, 30, 17, 45)
        assert period.matches(at(2026, 1, 1, 8, 30))
        assert period.matches(at(2026, 1, 1, 17, 45, 59))
        assert not period.matches(at(2026, 1, 1, 8, 29, 59))
        assert not period.matches(at(2026, 1, 1, 17, 46))

    def test_seconds(self):
        """Test the six-argument form."""
        period = parse_time_range(0, 0, 0, 0, 0, 30)
        assert period.matches(at(2026, 1, 1, 0, 0, 30))
        assert not period.matches(at(2026, 1, 1, 0, 0, 31))

    def test_wraps_midnight(self):
        """Test a range ending before it starts."""
        period = parse_time_range(22, 6)
        assert period.matches(at(2026, 1, 1, 23, 30))
        assert period.matches(at(2026, 1, 1, 3, 0))
        assert not period.matches(at(2026, 1, 1, 12, 0))

    def test_string_numbers_and_gmt(self):
        """Test numeric strings and the GMT flag."""
        period = parse_time_range("9", "17", "GMT")
        assert period.gmt
        assert period.matches(at(2026, 1, 1, 10))

    @pytest.mark.parametrize("args", [(), (1, 2, 3), (1, 2, 3, 4, 5), (24,), (10, 60, 11, 0), ("noon",), (True,)])
    def test_invalid(self, args):
        """Test bad values and arity."""
        with pytest.raises(PacDateTimeInputError):
            parse_time_range(*args)


class TestDateRange:
    """Tests for date ranges."""

    def test_day_and_month_number(self):
        """Test (1, 2) as the first of February, every year."""
        period = parse_date_range(1, 2)
        assert period.single
        assert period.matches(at(2026, 2, 1))
        assert period.matches(at(2031, 2, 1))
        assert not period.matches(at(2026, 2, 2))
        assert not period.matches(at(2026, 1, 1))

    def test_single_day_repeats_monthly(self):
        """Test a day of month."""
        period = parse_date_range(15)
        assert period.matches(at(2026, 3, 15))
        assert period.matches(at(2027, 11, 15))
        assert not period.matches(at(2026, 3, 16))

    def test_single_month_repeats_yearly(self):
        """Test a month name."""
        period = parse_date_range("OCT")
        assert period.matches(WEDNESDAY)
        assert not period.matches(at(2026, 9, 30))

    def test_single_year(self):
        """Test a year."""
        assert parse_date_range(2026).matches(WEDNESDAY)
        assert not parse_date_range(2025).matches(WEDNESDAY)

    def test_day_range(self):
        """Test days beyond month numbers."""
        period = parse_date_range(10, 20)
        assert period.matches(at(2026, 5, 20))
        assert not period.matches(at(2026, 5, 21))

    def test_month_range_wraps_year(self):
        """Test NOV-FEB."""
        period = parse_date_range("NOV", "FEB")
        assert period.matches(at(2026, 1, 10))
        assert period.matches(at(2026, 12, 10))
        assert not period.matches(at(2026, 6, 10))

    def test_month_and_year(self):
        """Test a single month of a given year."""
        period = parse_date_range("OCT", 2026)
        assert period.matches(WEDNESDAY)
        assert not period.matches(at(2027, 10, 21))

    def test_year_range(self):
        """Test a range of years."""
        period = parse_date_range(2025, 2027)
        assert period.matches(WEDNESDAY)
        assert not period.matches(at(2028, 1, 1))

    def test_full_date(self):
        """Test the three-argument exact date."""
        period = parse_date_range(21, "OCT", 2026)
        assert period.matches(WEDNESDAY)
        assert not period.matches(at(2025, 10, 21))

    def test_day_month_range(self):
        """Test the four-argument day/month form across new year."""
        period = parse_date_range(20, "DEC", 5, "JAN")
        assert period.matches(at(2026, 12, 31))
        assert period.matches(at(2027, 1, 5))
        assert not period.matches(at(2027, 1, 6))

    def test_month_year_range(self):
        """Test the four-argument month/year form."""
        period = parse_date_range("JUN", 2026, "AUG", 2027)
        assert period.matches(at(2027, 8, 31))
        assert not period.matches(at(2026, 5, 31))

    def test_six_arguments(self):
        """Test full dates on both ends."""
        period = parse_date_range(1, "OCT", 2026, 31, "OCT", 2026, "GMT")
        assert period.gmt
        assert period.matches(WEDNESDAY)
        assert not period.matches(at(2026, 11, 1))

    def test_reversed_years_never_match(self):
        """Test that ranges with years do not wrap."""
        period = parse_date_range(2027, 2025)
        assert not period.matches(WEDNESDAY)

    def test_fields(self):
        """Test the resolved overload."""
        assert parse_date_range(1, "FEB") == DateRange(("month", "day"), (2, 1), (2, 1), single=True)

    @pytest.mark.parametrize(
        "args",
        [(), (0,), (500,), ("FOO",), (1, 2, 3, 4, 5), ("JAN", 5), (1, "FEB", 26), (40, 50)],
    )
    def test_invalid(self, args):
        """Test bad values and arity."""
        with pytest.raises(PacDateTimeInputError):
            parse_date_range(*args)
