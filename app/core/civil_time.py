# app/core/civil_time.py
"""
US-Eastern civil time conversion.

Shift and event times are entered and displayed as Eastern wall-clock time
but stored as absolute UTC instants. The UTC offset is computed from the US
daylight saving rule (second Sunday of March through the day before the
first Sunday of November) without a timezone database, so every function
here is pure and safe to call from concurrent report computations.

The offset for a wall-clock time is picked from its calendar date alone.
Times inside the spring-forward gap are accepted as daylight time, and the
repeated hour on the fall-back Sunday is not disambiguated.
"""
import calendar
import re
from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from typing import Optional, Tuple, Union

EDT_OFFSET = timedelta(hours=-4)
EST_OFFSET = timedelta(hours=-5)

OUT_OF_RANGE = "outside the representable range"

DATE_STYLES = ("short", "long", "datetime", "iso")

_LOCAL_PATTERN = re.compile(
    r"^\s*(\d{4})-(\d{2})-(\d{2})[T ](\d{2}):(\d{2})(?::\d{2}(?:\.\d+)?)?\s*$"
)


class MalformedCivilTime(ValueError):
    """Raised when a civil date/time does not form valid calendar components."""

    def __init__(self, value, reason: str = "not a valid civil date/time"):
        self.value = value
        self.reason = reason
        super().__init__(f"Malformed civil time {value!r}: {reason}")


@dataclass(frozen=True)
class LocalCivilDateTime:
    """Wall-clock date and time in US-Eastern civil time, no offset attached."""
    year: int
    month: int
    day: int
    hour: int = 0
    minute: int = 0

    def __post_init__(self):
        try:
            datetime(self.year, self.month, self.day, self.hour, self.minute)
        except (TypeError, ValueError) as e:
            raise MalformedCivilTime(
                (self.year, self.month, self.day, self.hour, self.minute), str(e)
            ) from e

    @classmethod
    def from_datetime(cls, value: datetime) -> "LocalCivilDateTime":
        return cls(value.year, value.month, value.day, value.hour, value.minute)

    def to_naive(self) -> datetime:
        return datetime(self.year, self.month, self.day, self.hour, self.minute)

    @property
    def date(self) -> date:
        return date(self.year, self.month, self.day)

    def isoformat(self) -> str:
        """Render as the scheduling form format, YYYY-MM-DDTHH:MM."""
        return (
            f"{self.year:04d}-{self.month:02d}-{self.day:02d}"
            f"T{self.hour:02d}:{self.minute:02d}"
        )

    def __str__(self) -> str:
        return self.isoformat()


def nth_sunday(year: int, month: int, n: int) -> int:
    """Day of month of the n-th Sunday in the given month."""
    # calendar.weekday is Monday=0; shift so Sunday=0
    first_weekday = (calendar.weekday(year, month, 1) + 1) % 7
    first_sunday = 1 + (7 - first_weekday) % 7
    return first_sunday + (n - 1) * 7


def is_daylight_saving(year: int, month: int, day: int) -> bool:
    """Whether US daylight saving time applies on the given calendar date."""
    if month < 3 or month > 11:
        return False
    if 3 < month < 11:
        return True
    if month == 3:
        return day >= nth_sunday(year, 3, 2)
    return day < nth_sunday(year, 11, 1)


def utc_offset_for(year: int, month: int, day: int) -> timedelta:
    """UTC offset (-4h or -5h) of Eastern civil time on a calendar date."""
    return EDT_OFFSET if is_daylight_saving(year, month, day) else EST_OFFSET


def local_to_absolute(
    year: int, month: int, day: int, hour: int = 0, minute: int = 0
) -> datetime:
    """
    Convert an Eastern wall-clock time to an aware UTC datetime.

    Raises:
        MalformedCivilTime: If the components are not a valid date/time, or
            the UTC instant falls outside the representable range
    """
    local = LocalCivilDateTime(year, month, day, hour, minute)
    offset = utc_offset_for(year, month, day)
    try:
        return (local.to_naive() - offset).replace(tzinfo=timezone.utc)
    except OverflowError as e:
        raise MalformedCivilTime(local.isoformat(), OUT_OF_RANGE) from e


def _as_utc(instant: datetime) -> datetime:
    if instant.tzinfo is None:
        return instant.replace(tzinfo=timezone.utc)
    return instant.astimezone(timezone.utc)


def absolute_to_local(instant: datetime) -> LocalCivilDateTime:
    """
    Convert an absolute instant to Eastern wall-clock time.

    Naive datetimes are read as UTC, matching how the store keeps them.

    Raises:
        MalformedCivilTime: If the Eastern reading falls outside the
            representable datetime range
    """
    try:
        utc = _as_utc(instant).replace(tzinfo=None)
        daylight = utc + EDT_OFFSET
        if is_daylight_saving(daylight.year, daylight.month, daylight.day):
            return LocalCivilDateTime.from_datetime(daylight)
        return LocalCivilDateTime.from_datetime(utc + EST_OFFSET)
    except OverflowError as e:
        raise MalformedCivilTime(instant, OUT_OF_RANGE) from e


def parse_local_datetime(text: str) -> LocalCivilDateTime:
    """
    Parse a scheduling form value such as "2024-07-15T14:30".

    A space separator and a trailing seconds field are tolerated.

    Raises:
        MalformedCivilTime: If the text is not a valid civil date/time
    """
    if not isinstance(text, str):
        raise MalformedCivilTime(text, "expected a string")
    match = _LOCAL_PATTERN.match(text)
    if not match:
        raise MalformedCivilTime(text, "expected YYYY-MM-DDTHH:MM")
    year, month, day, hour, minute = (int(part) for part in match.groups())
    try:
        return LocalCivilDateTime(year, month, day, hour, minute)
    except MalformedCivilTime as e:
        raise MalformedCivilTime(text, e.reason) from e


def to_absolute(local: Union[LocalCivilDateTime, str]) -> datetime:
    """Absolute UTC instant for a civil date/time (or its form string)."""
    if isinstance(local, str):
        local = parse_local_datetime(local)
    return local_to_absolute(local.year, local.month, local.day, local.hour, local.minute)


def to_local_civil(instant: datetime) -> LocalCivilDateTime:
    return absolute_to_local(instant)


def local_date_of(instant: datetime) -> date:
    """Eastern calendar date an instant falls on."""
    return absolute_to_local(instant).date


def format_local_time(instant: datetime) -> str:
    """12-hour Eastern clock time for display, e.g. "2:00 PM"."""
    local = absolute_to_local(instant)
    hour = local.hour % 12 or 12
    meridiem = "AM" if local.hour < 12 else "PM"
    return f"{hour}:{local.minute:02d} {meridiem}"


def format_local_clock(instant: datetime) -> str:
    return format_local_time(instant)


def format_local_date(instant: Optional[datetime], style: str = "short") -> str:
    """
    Format an instant's Eastern calendar date for display.

    A missing instant, or one whose Eastern date cannot be represented,
    renders as an empty string.

    Args:
        instant: Absolute instant
        style: "short" (Jan 15, 2024), "long" (Monday, January 15, 2024),
            "datetime" (Jan 15, 2024, 02:30 PM) or "iso" (UTC ISO-8601)

    Raises:
        ValueError: If the style is unknown
    """
    if style not in DATE_STYLES:
        raise ValueError(f"Unknown date format style: {style}")
    if instant is None:
        return ""
    if style == "iso":
        return _as_utc(instant).isoformat().replace("+00:00", "Z")

    try:
        local = absolute_to_local(instant).to_naive()
    except MalformedCivilTime:
        return ""
    if style == "short":
        return f"{local.strftime('%b')} {local.day}, {local.year}"
    if style == "long":
        return f"{local.strftime('%A, %B')} {local.day}, {local.year}"
    return (
        f"{local.strftime('%b')} {local.day}, {local.year}, "
        f"{local.strftime('%I:%M %p')}"
    )


def format_date_range(start: Optional[datetime], end: Optional[datetime]) -> str:
    """Short-format date range; a single date when both ends fall on the same day."""
    start_text = format_local_date(start, "short")
    end_text = format_local_date(end, "short")
    if start_text == end_text:
        return start_text
    return f"{start_text} - {end_text}"


def civil_day_bounds(
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
) -> Tuple[Optional[datetime], Optional[datetime]]:
    """
    Absolute bounds covering an inclusive range of Eastern calendar dates.

    Returns a half-open interval: local midnight of start_date up to local
    midnight of the day after end_date. A missing date, or an end_date of
    date.max, leaves that side unbounded (None).
    """
    lower = None
    upper = None
    if start_date is not None:
        lower = local_to_absolute(start_date.year, start_date.month, start_date.day)
    if end_date is not None and end_date < date.max:
        following = end_date + timedelta(days=1)
        upper = local_to_absolute(following.year, following.month, following.day)
    return lower, upper
