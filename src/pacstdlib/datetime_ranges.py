"""
datetime_ranges
===============

Calendar and clock predicates: ``weekdayRange``, ``dateRange`` and
``timeRange``.

The three PAC functions are overloaded on their argument count.  The
overload is resolved once, by the ``parse_*`` functions, into a small
value object (``WeekdayRange``, ``DateRange`` or ``TimeRange``) that is
then evaluated against an instant with :meth:`matches`.  Arguments the
script left ``undefined`` arrive as ``None`` and are ignored; a trailing
``"GMT"`` selects UTC instead of local time.

A range given by a single bound means "exactly this value".  A range
whose end precedes its start wraps around (the week, the day, the year,
or the month for day-only ranges).
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone, tzinfo
from typing import Any, List, Optional, Sequence, Tuple

from .exceptions import PacDateTimeInputError

#: Weekday names as used by Netscape, ``SUN`` first.
WEEKDAY_NAMES = ("SUN", "MON", "TUE", "WED", "THU", "FRI", "SAT")

#: Month names as used by Netscape.
MONTH_NAMES = ("JAN", "FEB", "MAR", "APR", "MAY", "JUN", "JUL", "AUG", "SEP", "OCT", "NOV", "DEC")

DATE_FIELDS = ("year", "month", "day")


def to_local(now: datetime, gmt: bool, local_zone: Optional[tzinfo] = None) -> datetime:
    """Project ``now`` on UTC (``gmt``) or on the local zone.

    Naive datetimes are taken as system local time.
    """
    if gmt:
        return now.astimezone(timezone.utc)
    if local_zone is not None:
        return now.astimezone(local_zone)
    if now.tzinfo is None:
        return now
    return now.astimezone()


def split_gmt(args: Sequence[Any]) -> Tuple[List[Any], bool]:
    """Drop ``undefined`` arguments and detect the trailing ``"GMT"`` flag."""
    values = [a for a in args if a is not None]
    gmt = False
    if values and isinstance(values[-1], str) and values[-1].strip().upper() == "GMT":
        gmt = True
        values.pop()
    return values, gmt


def _to_int(value: Any) -> int:
    if isinstance(value, bool):
        raise PacDateTimeInputError(f"value {value!r} is not an integer")
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            pass
    raise PacDateTimeInputError(f"value {value!r} is not an integer")


def _is_int(value: Any) -> bool:
    try:
        _to_int(value)
        return True
    except PacDateTimeInputError:
        return False


def _bounded(value: Any, low: int, high: int, what: str) -> int:
    number = _to_int(value)
    if not low <= number <= high:
        raise PacDateTimeInputError(f"value {number} is not a valid {what} ({low}-{high})")
    return number


def _weekday(value: Any) -> int:
    name = value.strip().upper() if isinstance(value, str) else None
    if name not in WEEKDAY_NAMES:
        raise PacDateTimeInputError(f"Unknown weekday name: {value!r}")
    return WEEKDAY_NAMES.index(name)


def _is_month_name(value: Any) -> bool:
    return isinstance(value, str) and value.strip().upper() in MONTH_NAMES


def _is_year(value: Any) -> bool:
    return _is_int(value) and _to_int(value) >= 1000


def _is_day(value: Any) -> bool:
    return _is_int(value) and 1 <= _to_int(value) <= 31


def _month(value: Any, allow_number: bool = True) -> int:
    """Month as 1-12, from a name or (in a month slot) a number."""
    if _is_month_name(value):
        return MONTH_NAMES.index(value.strip().upper()) + 1
    if allow_number and _is_int(value):
        return _bounded(value, 1, 12, "month")
    raise PacDateTimeInputError(f"Unknown month name: {value!r}")


def _year(value: Any) -> int:
    if not _is_year(value):
        raise PacDateTimeInputError(f"value {value!r} is not a valid year")
    return _to_int(value)


def _day(value: Any) -> int:
    if not _is_day(value):
        raise PacDateTimeInputError(f"value {value!r} is not a valid day of month")
    return _to_int(value)


def _in_range(value: Tuple[int, ...], start: Tuple[int, ...], end: Tuple[int, ...], wraps: bool) -> bool:
    if start <= end:
        return start <= value <= end
    if not wraps:
        return False
    return value >= start or value <= end


@dataclass(frozen=True)
class WeekdayRange:
    """Weekdays ``start..end`` inclusive, 0 is Sunday."""

    start: int
    end: int
    gmt: bool = False
    single: bool = False

    def matches(self, now: datetime, local_zone: Optional[tzinfo] = None) -> bool:
        moment = to_local(now, self.gmt, local_zone)
        # datetime.weekday() counts from Monday
        weekday = (moment.weekday() + 1) % 7
        return _in_range((weekday,), (self.start,), (self.end,), wraps=True)


@dataclass(frozen=True)
class TimeRange:
    """Seconds of the day ``start..end`` inclusive."""

    start: int
    end: int
    gmt: bool = False
    single: bool = False

    def matches(self, now: datetime, local_zone: Optional[tzinfo] = None) -> bool:
        moment = to_local(now, self.gmt, local_zone)
        seconds = moment.hour * 3600 + moment.minute * 60 + moment.second
        return _in_range((seconds,), (self.start,), (self.end,), wraps=True)


@dataclass(frozen=True)
class DateRange:
    """Partial dates ``start..end`` inclusive.

    ``fields`` names the components present in both bounds, in
    ``year, month, day`` order; ``start`` and ``end`` hold their values.
    """

    fields: Tuple[str, ...]
    start: Tuple[int, ...]
    end: Tuple[int, ...]
    gmt: bool = False
    single: bool = False

    def matches(self, now: datetime, local_zone: Optional[tzinfo] = None) -> bool:
        moment = to_local(now, self.gmt, local_zone)
        current = {"year": moment.year, "month": moment.month, "day": moment.day}
        value = tuple(current[f] for f in self.fields)
        return _in_range(value, self.start, self.end, wraps="year" not in self.fields)


def _date_bound(**components: int) -> Tuple[Tuple[str, ...], Tuple[int, ...]]:
    fields = tuple(f for f in DATE_FIELDS if f in components)
    return fields, tuple(components[f] for f in fields)


def _date_range(gmt: bool, start: dict, end: Optional[dict] = None) -> DateRange:
    fields, low = _date_bound(**start)
    if end is None:
        return DateRange(fields, low, low, gmt=gmt, single=True)
    _, high = _date_bound(**end)
    return DateRange(fields, low, high, gmt=gmt)


def parse_weekday_range(*args: Any) -> WeekdayRange:
    values, gmt = split_gmt(args)
    if len(values) == 1:
        day = _weekday(values[0])
        return WeekdayRange(day, day, gmt=gmt, single=True)
    if len(values) == 2:
        return WeekdayRange(_weekday(values[0]), _weekday(values[1]), gmt=gmt)
    raise PacDateTimeInputError(f"invalid number of arguments: {len(values)}")


def parse_time_range(*args: Any) -> TimeRange:
    values, gmt = split_gmt(args)
    count = len(values)

    def hour(v: Any) -> int:
        return _bounded(v, 0, 23, "hour of day")

    def minute(v: Any) -> int:
        return _bounded(v, 0, 59, "minute")

    def second(v: Any) -> int:
        return _bounded(v, 0, 59, "second")

    if count == 1 or (count == 2 and hour(values[0]) == hour(values[1])):
        h = hour(values[0])
        return TimeRange(h * 3600, h * 3600 + 3599, gmt=gmt, single=True)
    if count == 2:
        return TimeRange(hour(values[0]) * 3600, hour(values[1]) * 3600 + 59, gmt=gmt)
    if count == 4:
        start = hour(values[0]) * 3600 + minute(values[1]) * 60
        end = hour(values[2]) * 3600 + minute(values[3]) * 60 + 59
        return TimeRange(start, end, gmt=gmt)
    if count == 6:
        start = hour(values[0]) * 3600 + minute(values[1]) * 60 + second(values[2])
        end = hour(values[3]) * 3600 + minute(values[4]) * 60 + second(values[5])
        return TimeRange(start, end, gmt=gmt)
    raise PacDateTimeInputError(f"invalid number of arguments: {count}")


def parse_date_range(*args: Any) -> DateRange:
    values, gmt = split_gmt(args)
    count = len(values)

    if count == 1:
        v = values[0]
        if _is_month_name(v):
            return _date_range(gmt, {"month": _month(v)})
        if _is_year(v):
            return _date_range(gmt, {"year": _year(v)})
        if _is_day(v):
            return _date_range(gmt, {"day": _day(v)})
        raise PacDateTimeInputError(f"invalid argument: {v!r}")

    if count == 2:
        first, second = values
        if _is_day(first) and (_is_month_name(second) or (_is_int(second) and 1 <= _to_int(second) <= 12)):
            return _date_range(gmt, {"day": _day(first), "month": _month(second)})
        if _is_month_name(first) and _is_year(second):
            return _date_range(gmt, {"month": _month(first), "year": _year(second)})
        if _is_month_name(first):
            return _date_range(gmt, {"month": _month(first, False)}, {"month": _month(second, False)})
        if _is_year(first):
            return _date_range(gmt, {"year": _year(first)}, {"year": _year(second)})
        if _is_day(first):
            return _date_range(gmt, {"day": _day(first)}, {"day": _day(second)})
        raise PacDateTimeInputError(f"invalid argument: {first!r}")

    if count == 3:
        return _date_range(gmt, {"day": _day(values[0]), "month": _month(values[1]), "year": _year(values[2])})

    if count == 4:
        if _is_month_name(values[0]):
            return _date_range(
                gmt,
                {"month": _month(values[0]), "year": _year(values[1])},
                {"month": _month(values[2]), "year": _year(values[3])},
            )
        if _is_day(values[0]):
            return _date_range(
                gmt,
                {"day": _day(values[0]), "month": _month(values[1])},
                {"day": _day(values[2]), "month": _month(values[3])},
            )
        raise PacDateTimeInputError(f"invalid argument: {values[0]!r}")

    if count == 6:
        return _date_range(
            gmt,
            {"day": _day(values[0]), "month": _month(values[1]), "year": _year(values[2])},
            {"day": _day(values[3]), "month": _month(values[4]), "year": _year(values[5])},
        )

    raise PacDateTimeInputError(f"invalid number of arguments: {count}")
