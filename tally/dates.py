"""Date utilities for tally.

Pure functions for ritual-day bucketing and calendar ranges.
All datetimes are naive local wall-clock times.
"""

from datetime import date, datetime, time, timedelta

from tally.domain.models import DayStartConfig


def get_ritual_day(timestamp: datetime, config: DayStartConfig) -> date:
    """Map a timestamp to the ritual day it belongs to.

    Args:
        timestamp: Local wall-clock time.
        config: When the ritual day starts.

    Returns:
        Calendar date of the ritual day. Times before the day start belong
        to the previous date; the start minute itself belongs to the new day.
    """
    time_in_minutes = timestamp.hour * 60 + timestamp.minute
    if time_in_minutes < config.minutes:
        return timestamp.date() - timedelta(days=1)
    return timestamp.date()


def week_bounds(now: datetime, first_weekday: int = 0) -> tuple[datetime, datetime]:
    """Calculate the calendar week containing a moment.

    Args:
        now: Reference time.
        first_weekday: First day of the week (Monday=0 ... Sunday=6).

    Returns:
        Tuple of (start, end) as local midnights; end is exclusive.
    """
    offset = (now.weekday() - first_weekday) % 7
    start = datetime.combine(now.date() - timedelta(days=offset), time())
    return start, start + timedelta(days=7)


def next_reminder(now: datetime, hour: int, minute: int) -> datetime:
    """Next time the daily summary reminder fires."""
    candidate = datetime.combine(now.date(), time(hour, minute))
    if candidate <= now:
        candidate += timedelta(days=1)
    return candidate


def parse_clock(text: str) -> tuple[int, int]:
    """Parse an HH:MM string.

    Raises:
        ValueError: If the text is not a valid 24-hour time.
    """
    parsed = datetime.strptime(text.strip(), "%H:%M")
    return parsed.hour, parsed.minute
