"""Pure functions for ledger aggregation.

This module contains the functional core behind every total the app shows:
- No I/O operations (no database, no console, no files)
- No side effects and no caching
- Entries are an in-memory snapshot; order never matters

Daily figures bucket entries by ritual day. Weekly figures use plain
calendar-week containment on the raw timestamp, so an entry logged at
02:00 on a Monday with a 06:00 day start counts towards that Monday's week
even though its ritual day is the Sunday before.
"""

from collections import defaultdict
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from decimal import Decimal
from enum import Enum

from tally.dates import get_ritual_day, week_bounds
from tally.domain.models import (
    DEFAULT_CASH,
    ZERO,
    DayStartConfig,
    MethodId,
    Money,
    PaymentMethod,
    SpendEntry,
)

ABOVE_FACTOR = Decimal("1.1")
BELOW_FACTOR = Decimal("0.9")
DEFAULT_WINDOW_DAYS = 30


class Comparison(str, Enum):
    """How today's spend sits against the rolling average."""

    ABOVE = "above"
    BELOW = "below"
    ON_TRACK = "on_track"


@dataclass(frozen=True)
class WeeklyTotal:
    """Immutable weekly aggregate."""

    total: Money
    daily_average: Money


@dataclass(frozen=True)
class PeakWeekday:
    """Weekday with the highest spend this week (Monday=0 ... Sunday=6)."""

    weekday: int
    total: Money


@dataclass(frozen=True)
class DaySummary:
    """One ritual day of history."""

    day: date
    total: Money
    entries: list[SpendEntry]


def _sum(entries: Iterable[SpendEntry]) -> Money:
    return Money(sum((entry.amount for entry in entries), ZERO))


def total_for_ritual_day(entries: Iterable[SpendEntry], day: date, config: DayStartConfig) -> Money:
    """Sum amounts of entries belonging to a ritual day.

    Args:
        entries: Entry snapshot.
        day: Ritual day to total.
        config: Day start configuration.

    Returns:
        Total spent on that ritual day, 0 if nothing matches.
    """
    return _sum(entry for entry in entries if get_ritual_day(entry.timestamp, config) == day)


def daily_total(entries: Iterable[SpendEntry], now: datetime, config: DayStartConfig) -> Money:
    """Sum of today's ritual day."""
    return total_for_ritual_day(entries, get_ritual_day(now, config), config)


def yesterday_total(entries: Iterable[SpendEntry], now: datetime, config: DayStartConfig) -> Money:
    """Sum of the ritual day that contains this time yesterday."""
    return total_for_ritual_day(entries, get_ritual_day(now - timedelta(days=1), config), config)


def group_by_ritual_day(entries: Iterable[SpendEntry], config: DayStartConfig) -> dict[date, list[SpendEntry]]:
    """Partition entries by ritual day.

    Args:
        entries: Entry snapshot.
        config: Day start configuration.

    Returns:
        Dictionary mapping ritual day to its entries. Key order is not
        meaningful; callers sort for display.
    """
    groups: dict[date, list[SpendEntry]] = defaultdict(list)
    for entry in entries:
        groups[get_ritual_day(entry.timestamp, config)].append(entry)
    return dict(groups)


def history(entries: Iterable[SpendEntry], config: DayStartConfig) -> list[DaySummary]:
    """Build the history list: newest ritual day first, newest entry first."""
    groups = group_by_ritual_day(entries, config)
    return [
        DaySummary(
            day=day,
            total=_sum(groups[day]),
            entries=sorted(groups[day], key=lambda e: e.timestamp, reverse=True),
        )
        for day in sorted(groups, reverse=True)
    ]


def rolling_average(
    entries: Iterable[SpendEntry],
    config: DayStartConfig,
    window_days: int = DEFAULT_WINDOW_DAYS,
) -> Money:
    """Average daily spend over the most recent active days.

    Only ritual days that have at least one entry count. The most recent
    ``window_days`` of those are averaged, dividing by how many were found
    rather than by the window size.

    Args:
        entries: Entry snapshot.
        config: Day start configuration.
        window_days: Maximum number of active days to include.

    Returns:
        Average per active day, 0 if there are no entries.
    """
    groups = group_by_ritual_day(entries, config)
    recent = sorted(groups, reverse=True)[:window_days]
    if not recent:
        return ZERO
    total = sum((_sum(groups[day]) for day in recent), ZERO)
    return Money(total / len(recent))


def _entries_in_week(entries: Iterable[SpendEntry], now: datetime, first_weekday: int) -> list[SpendEntry]:
    start, end = week_bounds(now, first_weekday)
    return [entry for entry in entries if start <= entry.timestamp < end]


def weekly_total(entries: Iterable[SpendEntry], now: datetime, first_weekday: int = 0) -> WeeklyTotal:
    """Total and per-day average for the calendar week containing now.

    The average always divides by 7, however many days had spending.
    """
    total = _sum(_entries_in_week(entries, now, first_weekday))
    return WeeklyTotal(total=total, daily_average=Money(total / 7))


def peak_weekday(entries: Iterable[SpendEntry], now: datetime, first_weekday: int = 0) -> PeakWeekday | None:
    """Find this week's biggest spending weekday.

    Args:
        entries: Entry snapshot.
        now: Reference time selecting the week.
        first_weekday: First day of the week (Monday=0 ... Sunday=6).

    Returns:
        PeakWeekday, or None if nothing was spent this week. Ties go to the
        day that comes first in the week.
    """
    by_weekday: dict[int, Money] = {}
    for entry in _entries_in_week(entries, now, first_weekday):
        weekday = entry.timestamp.weekday()
        by_weekday[weekday] = Money(by_weekday.get(weekday, ZERO) + entry.amount)

    if not by_weekday:
        return None

    week_order = [(first_weekday + i) % 7 for i in range(7)]
    # max() keeps the first of equal keys
    best = max((day for day in week_order if day in by_weekday), key=by_weekday.__getitem__)
    return PeakWeekday(weekday=best, total=by_weekday[best])


def compare_to_average(today: Money, average: Money) -> Comparison:
    """Band today's total against the rolling average (10% either side)."""
    if today > average * ABOVE_FACTOR:
        return Comparison.ABOVE
    if today < average * BELOW_FACTOR:
        return Comparison.BELOW
    return Comparison.ON_TRACK


def last_entry(entries: Iterable[SpendEntry]) -> SpendEntry | None:
    """Most recently timestamped entry, or None."""
    return max(entries, key=lambda e: e.timestamp, default=None)


def spending_by_method(
    entries: Iterable[SpendEntry],
    methods: Sequence[PaymentMethod],
) -> dict[MethodId, Money]:
    """Total spend per payment method.

    Entries without a method, or pointing at a method that no longer
    exists, count towards Cash.
    """
    known = {method.id for method in methods}
    totals: dict[MethodId, Money] = {}
    for entry in entries:
        method_id = entry.payment_method_id
        if method_id is None or method_id not in known:
            method_id = DEFAULT_CASH.id
        totals[method_id] = Money(totals.get(method_id, ZERO) + entry.amount)
    return totals
