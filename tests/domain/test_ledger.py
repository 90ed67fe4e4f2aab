"""Tests for tally.domain.ledger pure functions."""

from datetime import date, datetime
from decimal import Decimal

from tally.domain.ledger import (
    Comparison,
    compare_to_average,
    daily_total,
    group_by_ritual_day,
    history,
    last_entry,
    peak_weekday,
    rolling_average,
    spending_by_method,
    total_for_ritual_day,
    weekly_total,
    yesterday_total,
)
from tally.domain.models import DEFAULT_CASH, DayStartConfig, MethodId, Money, PaymentMethod, PaymentType, SpendEntry

MIDNIGHT = DayStartConfig()
SIX_AM = DayStartConfig(6, 0)

# Wednesday 12 March 2025, 18:00
NOW = datetime(2025, 3, 12, 18, 0)


def entry(amount: str, when: datetime, note: str | None = None, method: str | None = None) -> SpendEntry:
    return SpendEntry.create(
        Money(Decimal(amount)), when, note=note, payment_method_id=MethodId(method) if method else None
    )


class TestDailyTotal:
    """Tests for daily_total."""

    def test_empty_input(self) -> None:
        """Should return zero with no entries."""
        assert daily_total([], NOW, MIDNIGHT) == 0
        assert daily_total([], NOW, SIX_AM) == 0

    def test_sums_only_today(self) -> None:
        """Should exclude yesterday's entries."""
        entries = [
            entry("10", datetime(2025, 3, 12, 8, 0)),
            entry("5", datetime(2025, 3, 12, 20, 0)),
            entry("3", datetime(2025, 3, 11, 23, 0)),
        ]
        assert daily_total(entries, NOW, MIDNIGHT) == Decimal("15")

    def test_ritual_day_offset(self) -> None:
        """Should count early-morning spends towards the previous day."""
        entries = [
            entry("10", datetime(2025, 3, 12, 5, 0)),  # belongs to the 11th
            entry("7", datetime(2025, 3, 12, 6, 0)),
        ]
        assert daily_total(entries, NOW, SIX_AM) == Decimal("7")

    def test_now_before_day_start(self) -> None:
        """Should treat 02:00 as part of the previous evening's day."""
        entries = [
            entry("12", datetime(2025, 3, 11, 22, 0)),
            entry("4", datetime(2025, 3, 12, 1, 0)),
            entry("9", datetime(2025, 3, 11, 5, 0)),  # the 10th
        ]
        assert daily_total(entries, datetime(2025, 3, 12, 2, 0), SIX_AM) == Decimal("16")

    def test_decimal_amounts(self) -> None:
        """Should sum decimals exactly."""
        entries = [entry("0.10", NOW), entry("0.20", NOW)]
        assert daily_total(entries, NOW, MIDNIGHT) == Decimal("0.30")

    def test_is_idempotent(self) -> None:
        """Should give the same answer for the same snapshot."""
        entries = [entry("10", NOW), entry("2.5", datetime(2025, 3, 12, 9, 0))]
        assert daily_total(entries, NOW, MIDNIGHT) == daily_total(entries, NOW, MIDNIGHT)


class TestYesterdayTotal:
    """Tests for yesterday_total."""

    def test_sums_previous_ritual_day(self) -> None:
        """Should total the day before today."""
        entries = [
            entry("10", datetime(2025, 3, 12, 8, 0)),
            entry("3", datetime(2025, 3, 11, 23, 0)),
            entry("2", datetime(2025, 3, 11, 7, 0)),
        ]
        assert yesterday_total(entries, NOW, MIDNIGHT) == Decimal("5")

    def test_empty_input(self) -> None:
        """Should return zero with no entries."""
        assert yesterday_total([], NOW, MIDNIGHT) == 0


class TestTotalForRitualDay:
    """Tests for total_for_ritual_day."""

    def test_specific_day(self) -> None:
        """Should total only the requested day."""
        entries = [
            entry("4", datetime(2025, 3, 1, 12, 0)),
            entry("6", datetime(2025, 3, 2, 3, 0)),  # the 1st with a 6am start
            entry("8", datetime(2025, 3, 2, 12, 0)),
        ]
        assert total_for_ritual_day(entries, date(2025, 3, 1), SIX_AM) == Decimal("10")
        assert total_for_ritual_day(entries, date(2025, 3, 1), MIDNIGHT) == Decimal("4")


class TestGroupByRitualDay:
    """Tests for group_by_ritual_day."""

    def test_empty_input(self) -> None:
        """Should return an empty mapping."""
        assert group_by_ritual_day([], MIDNIGHT) == {}

    def test_partitions_all_entries(self) -> None:
        """Should place every entry under its ritual day."""
        a = entry("1", datetime(2025, 3, 10, 23, 0))
        b = entry("2", datetime(2025, 3, 11, 2, 0))
        c = entry("3", datetime(2025, 3, 11, 9, 0))

        groups = group_by_ritual_day([a, b, c], SIX_AM)

        assert set(groups) == {date(2025, 3, 10), date(2025, 3, 11)}
        assert {e.id for e in groups[date(2025, 3, 10)]} == {a.id, b.id}
        assert [e.id for e in groups[date(2025, 3, 11)]] == [c.id]


class TestHistory:
    """Tests for history."""

    def test_newest_day_and_entry_first(self) -> None:
        """Should sort days descending and entries newest first."""
        entries = [
            entry("1", datetime(2025, 3, 9, 9, 0)),
            entry("2", datetime(2025, 3, 11, 9, 0)),
            entry("3", datetime(2025, 3, 11, 18, 0)),
        ]

        rows = history(entries, MIDNIGHT)

        assert [row.day for row in rows] == [date(2025, 3, 11), date(2025, 3, 9)]
        assert rows[0].total == Decimal("5")
        assert [e.amount for e in rows[0].entries] == [Decimal("3"), Decimal("2")]

    def test_empty_input(self) -> None:
        """Should return no rows."""
        assert history([], MIDNIGHT) == []


class TestRollingAverage:
    """Tests for rolling_average."""

    def test_empty_input(self) -> None:
        """Should return zero with no entries."""
        assert rolling_average([], MIDNIGHT) == 0

    def test_divides_by_active_days(self) -> None:
        """Should average over days that have entries, not the window size."""
        entries = [
            entry("15", datetime(2025, 3, 1, 9, 0)),
            entry("5", datetime(2025, 3, 1, 19, 0)),
            entry("40", datetime(2025, 3, 10, 12, 0)),
        ]
        assert rolling_average(entries, MIDNIGHT, window_days=30) == Decimal("30")

    def test_takes_most_recent_days(self) -> None:
        """Should only use the newest window_days active days."""
        entries = [
            entry("100", datetime(2025, 1, 1, 12, 0)),
            entry("10", datetime(2025, 3, 1, 12, 0)),
            entry("20", datetime(2025, 3, 5, 12, 0)),
        ]
        assert rolling_average(entries, MIDNIGHT, window_days=2) == Decimal("15")

    def test_uses_ritual_days(self) -> None:
        """Should bucket by ritual day before averaging."""
        entries = [
            entry("10", datetime(2025, 3, 10, 22, 0)),
            entry("20", datetime(2025, 3, 11, 2, 0)),
        ]
        assert rolling_average(entries, SIX_AM) == Decimal("30")
        assert rolling_average(entries, MIDNIGHT) == Decimal("15")


class TestWeeklyTotal:
    """Tests for weekly_total."""

    def test_daily_average_always_divides_by_seven(self) -> None:
        """Should divide by 7 regardless of active days."""
        entries = [
            entry("30", datetime(2025, 3, 10, 12, 0)),
            entry("40", datetime(2025, 3, 11, 12, 0)),
        ]
        week = weekly_total(entries, NOW)
        assert week.total == Decimal("70")
        assert week.daily_average == Decimal("10")

    def test_excludes_other_weeks(self) -> None:
        """Should only count the calendar week containing now."""
        entries = [
            entry("5", datetime(2025, 3, 9, 23, 59)),  # previous Sunday
            entry("7", datetime(2025, 3, 10, 0, 0)),
            entry("9", datetime(2025, 3, 17, 0, 0)),  # next Monday
        ]
        assert weekly_total(entries, NOW).total == Decimal("7")

    def test_uses_raw_timestamps_not_ritual_days(self) -> None:
        """Should ignore the day start when deciding week membership."""
        # 02:00 Monday belongs to Sunday's ritual day but Monday's calendar week
        entries = [entry("8", datetime(2025, 3, 10, 2, 0))]
        assert weekly_total(entries, NOW).total == Decimal("8")

    def test_first_weekday(self) -> None:
        """Should start the week on the configured day."""
        entries = [entry("5", datetime(2025, 3, 9, 12, 0))]  # Sunday
        assert weekly_total(entries, NOW, first_weekday=6).total == Decimal("5")
        assert weekly_total(entries, NOW, first_weekday=0).total == 0

    def test_empty_input(self) -> None:
        """Should return zeros with no entries."""
        week = weekly_total([], NOW)
        assert week.total == 0
        assert week.daily_average == 0


class TestPeakWeekday:
    """Tests for peak_weekday."""

    def test_none_without_entries_this_week(self) -> None:
        """Should return None when nothing was spent this week."""
        assert peak_weekday([], NOW) is None
        assert peak_weekday([entry("5", datetime(2025, 3, 1, 12, 0))], NOW) is None

    def test_highest_weekday(self) -> None:
        """Should pick the weekday with the largest sum."""
        entries = [
            entry("10", datetime(2025, 3, 10, 9, 0)),  # Monday
            entry("6", datetime(2025, 3, 11, 9, 0)),  # Tuesday
            entry("6", datetime(2025, 3, 11, 19, 0)),
        ]
        peak = peak_weekday(entries, NOW)
        assert peak is not None
        assert peak.weekday == 1
        assert peak.total == Decimal("12")

    def test_tie_goes_to_earliest_day_in_week(self) -> None:
        """Should resolve ties to the day that comes first in the week."""
        entries = [
            entry("5", datetime(2025, 3, 12, 9, 0)),  # Wednesday
            entry("5", datetime(2025, 3, 10, 9, 0)),  # Monday
        ]
        peak = peak_weekday(entries, NOW)
        assert peak is not None
        assert peak.weekday == 0

    def test_tie_respects_first_weekday(self) -> None:
        """Should treat Sunday as earliest when weeks start on Sunday."""
        entries = [
            entry("5", datetime(2025, 3, 10, 9, 0)),  # Monday
            entry("5", datetime(2025, 3, 9, 9, 0)),  # Sunday
        ]
        peak = peak_weekday(entries, NOW, first_weekday=6)
        assert peak is not None
        assert peak.weekday == 6


class TestCompareToAverage:
    """Tests for compare_to_average."""

    def test_above(self) -> None:
        """Should be above when more than 10% over."""
        assert compare_to_average(Money(Decimal("11.5")), Money(Decimal("10"))) is Comparison.ABOVE

    def test_exactly_ten_percent_over_is_on_track(self) -> None:
        """Should treat exactly 110% as on track."""
        assert compare_to_average(Money(Decimal("11")), Money(Decimal("10"))) is Comparison.ON_TRACK

    def test_below(self) -> None:
        """Should be below when more than 10% under."""
        assert compare_to_average(Money(Decimal("8.9")), Money(Decimal("10"))) is Comparison.BELOW

    def test_exactly_ten_percent_under_is_on_track(self) -> None:
        """Should treat exactly 90% as on track."""
        assert compare_to_average(Money(Decimal("9")), Money(Decimal("10"))) is Comparison.ON_TRACK

    def test_on_track(self) -> None:
        """Should be on track at the average."""
        assert compare_to_average(Money(Decimal("10")), Money(Decimal("10"))) is Comparison.ON_TRACK


class TestLastEntry:
    """Tests for last_entry."""

    def test_most_recent(self) -> None:
        """Should pick the latest timestamp regardless of order."""
        older = entry("1", datetime(2025, 3, 10, 9, 0))
        newer = entry("2", datetime(2025, 3, 11, 9, 0))
        assert last_entry([newer, older]) == newer
        assert last_entry([older, newer]) == newer

    def test_empty_input(self) -> None:
        """Should return None with no entries."""
        assert last_entry([]) is None


class TestSpendingByMethod:
    """Tests for spending_by_method."""

    def test_missing_and_unknown_methods_count_as_cash(self) -> None:
        """Should fold unassigned and dangling references into Cash."""
        card = PaymentMethod(MethodId("card-1"), "Visa", "#7B68EE", PaymentType.CARD)
        entries = [
            entry("10", NOW),
            entry("5", NOW, method="card-1"),
            entry("2", NOW, method="deleted-method"),
        ]

        totals = spending_by_method(entries, [DEFAULT_CASH, card])

        assert totals == {DEFAULT_CASH.id: Decimal("12"), MethodId("card-1"): Decimal("5")}
