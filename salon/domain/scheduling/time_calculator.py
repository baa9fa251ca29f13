"""Time parsing and calculations for salon-local wall-clock values"""

from datetime import date, datetime

from ...shared.errors import ValidationError
from ...shared.validators import CLOCK_TIME_PATTERN

MINUTES_PER_DAY = 24 * 60


def time_to_minutes(clock: str) -> int:
    """Convert an "HH:MM" clock string to minutes since midnight"""
    if not isinstance(clock, str) or not CLOCK_TIME_PATTERN.match(clock):
        raise ValidationError(f"Invalid time: {clock!r}. Expected HH:MM")
    hours, minutes = clock.split(":")
    return int(hours) * 60 + int(minutes)


def minutes_to_time(minutes: int) -> str:
    """Convert minutes since midnight to a zero-padded "HH:MM" string"""
    if minutes < 0 or minutes >= MINUTES_PER_DAY:
        raise ValidationError(f"Invalid minute offset: {minutes}")
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def end_time_label(minutes: int) -> str:
    """Label for the end of a range, which may fall exactly on midnight ("24:00")"""
    if minutes == MINUTES_PER_DAY:
        return "24:00"
    return minutes_to_time(minutes)


def ensure_within_day(start: int, duration: int) -> None:
    """Ranges live on a single calendar day and may end at midnight at the latest"""
    if start + duration > MINUTES_PER_DAY:
        raise ValidationError(
            f"{duration} minutes from {minutes_to_time(start)} would run past midnight",
            start=minutes_to_time(start),
            duration=duration,
        )


def to_salon_time(moment: datetime) -> datetime:
    """Naive salon-local datetime; aware values are converted to the server's zone"""
    if moment.tzinfo is None:
        return moment
    return moment.astimezone().replace(tzinfo=None)


def parse_date(value) -> date:
    """Accept a date or a YYYY-MM-DD string"""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid date: {value!r}. Expected YYYY-MM-DD") from None


def day_of_week(day: date) -> int:
    """Weekday number with 0=Sunday ... 6=Saturday"""
    return (day.weekday() + 1) % 7


def combine(day: date, clock: str) -> datetime:
    """Naive salon-local datetime for a date and clock time"""
    minutes = time_to_minutes(clock)
    return datetime(day.year, day.month, day.day, minutes // 60, minutes % 60)


def overlaps(start_a: int, end_a: int, start_b: int, end_b: int) -> bool:
    """Half-open interval overlap; touching endpoints do not overlap"""
    return start_a < end_b and end_a > start_b
