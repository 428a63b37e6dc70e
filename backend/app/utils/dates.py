"""
Date Utilities - Calendar days, ranges and timezone handling
"""
from datetime import date, datetime, timedelta
from typing import Iterator, Optional, Union
import pytz

from app.core.config import settings
from app.core.exceptions import InvalidDateError, InvalidRangeError

DayLike = Union[str, date, datetime]


def get_app_tz():
    """
    Get the application timezone object

    Returns:
        pytz timezone named by settings.APP_TIMEZONE
    """
    return pytz.timezone(settings.APP_TIMEZONE)


def now() -> datetime:
    """
    Get current datetime in the application timezone

    Returns:
        Timezone-aware datetime object
    """
    return datetime.now(get_app_tz())


def today() -> date:
    """Today's calendar day in the application timezone"""
    return now().date()


def parse_timestamp(value: Union[str, datetime]) -> datetime:
    """
    Parse a stored timestamp into an aware datetime

    Naive values are assumed to be UTC, which is how Postgres hands back
    ``timestamp`` columns without a zone.
    """
    if isinstance(value, str):
        value = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if value.tzinfo is None:
        value = pytz.utc.localize(value)
    return value


def day_of(value: Union[str, datetime]) -> date:
    """
    Get the calendar day a timestamp falls on in the application timezone

    Args:
        value: Aware datetime or ISO-8601 string

    Returns:
        date in the application timezone
    """
    return parse_timestamp(value).astimezone(get_app_tz()).date()


def parse_day(value: Optional[DayLike]) -> date:
    """
    Parse a client-supplied day

    Accepts date objects, datetimes and strings such as ``2024-01-02`` or
    ``2024-01-02T10:00:00.000Z``. Aware timestamps are converted to the
    application timezone before the day is taken, so client days and
    stored lifecycle timestamps (see day_of) share one calendar.

    Raises:
        InvalidDateError: If the value is missing or unparseable
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        return value
    elif isinstance(value, str) and value.strip():
        text = value.strip()
        try:
            parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
        except ValueError:
            raise InvalidDateError(f"Invalid date provided: '{value}'")
    else:
        raise InvalidDateError(f"Invalid date provided: '{value}'")

    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(get_app_tz())
    return parsed.date()


def parse_range(start: Optional[DayLike], end: Optional[DayLike]) -> tuple[date, date]:
    """
    Parse an inclusive day range

    Raises:
        InvalidDateError: If either bound is unparseable
        InvalidRangeError: If start is after end or the range is too long
    """
    start_day = parse_day(start)
    end_day = parse_day(end)

    if start_day > end_day:
        raise InvalidRangeError(f"Start date {start_day} is after end date {end_day}")

    span = (end_day - start_day).days + 1
    if span > settings.MAX_SUMMARY_DAYS:
        raise InvalidRangeError(
            f"Range of {span} days exceeds the maximum of {settings.MAX_SUMMARY_DAYS}"
        )
    return start_day, end_day


def iter_days(start_day: date, end_day: date) -> Iterator[date]:
    """Yield every calendar day from start_day to end_day inclusive"""
    current = start_day
    while current <= end_day:
        yield current
        current += timedelta(days=1)
