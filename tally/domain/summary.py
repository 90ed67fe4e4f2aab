"""Pure functions for summaries shown outside the main ledger view.

Covers the daily and weekly reflection summaries that a reminder tap
opens, routing of reminder payloads, and the small key-value payload the
home-screen widget reads.
"""

import calendar
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import Any

from tally.domain.ledger import (
    Comparison,
    compare_to_average,
    daily_total,
    last_entry,
    peak_weekday,
    rolling_average,
    weekly_total,
    yesterday_total,
)
from tally.domain.models import DayStartConfig, Money, SpendEntry


class SummaryKind(str, Enum):
    """Reminder payload types."""

    DAILY = "daily_summary"
    WEEKLY = "weekly_summary"


@dataclass(frozen=True)
class Reflection:
    """Immutable summary card data."""

    kind: SummaryKind
    time_label: str
    currency_symbol: str
    amount: Money
    primary_text: str
    secondary_text: str | None = None


# Widget keys are a fixed contract with the widget process
WIDGET_TODAY_TOTAL = "widget_today_total"
WIDGET_YESTERDAY_TOTAL = "widget_yesterday_total"
WIDGET_LAST_TRANSACTION = "widget_last_transaction"
WIDGET_LAST_TRANSACTION_NOTE = "widget_last_transaction_note"
WIDGET_LAST_UPDATE = "widget_last_update"
WIDGET_CURRENCY_SYMBOL = "widget_currency_symbol"
WIDGET_COLOR_THEME = "widget_color_theme"
WIDGET_THEME_MODE = "widget_theme_mode"


def format_amount(amount: Decimal) -> str:
    """Format money for display: whole numbers stay whole, else 2 places."""
    if amount == amount.to_integral_value():
        return f"{amount.to_integral_value():,f}"
    return f"{amount.quantize(Decimal('0.01'), rounding=ROUND_HALF_UP):,f}"


def route_notification(payload: dict[str, Any]) -> SummaryKind | None:
    """Pick the summary a reminder payload asks for.

    Args:
        payload: Notification user info, e.g. {"type": "daily_summary"}.

    Returns:
        SummaryKind, or None for payloads without a known type.
    """
    try:
        return SummaryKind(payload.get("type"))
    except ValueError:
        return None


def comparison_text(comparison: Comparison, average: Money, currency_symbol: str) -> str:
    """Narrative line for today against the average."""
    shown = f"{currency_symbol}{format_amount(average)}"
    if comparison is Comparison.ABOVE:
        return f"A bit above your usual {shown} a day."
    if comparison is Comparison.BELOW:
        return f"Lighter than your usual {shown} a day."
    return f"Right around your usual {shown} a day."


def daily_reflection(
    entries: Sequence[SpendEntry],
    now: datetime,
    config: DayStartConfig,
    currency_symbol: str,
) -> Reflection:
    """Summary of today's ritual day."""
    today = daily_total(entries, now, config)
    average = rolling_average(entries, config)

    secondary = None
    if average > 0:
        secondary = comparison_text(compare_to_average(today, average), average, currency_symbol)

    return Reflection(
        kind=SummaryKind.DAILY,
        time_label="Today",
        currency_symbol=currency_symbol,
        amount=today,
        primary_text="You spent",
        secondary_text=secondary,
    )


def weekly_reflection(
    entries: Sequence[SpendEntry],
    now: datetime,
    first_weekday: int,
    currency_symbol: str,
) -> Reflection:
    """Summary of the current calendar week."""
    week = weekly_total(entries, now, first_weekday)
    peak = peak_weekday(entries, now, first_weekday)

    secondary = None
    if peak is not None:
        secondary = (
            f"About {currency_symbol}{format_amount(week.daily_average)} a day. "
            f"Biggest day: {calendar.day_name[peak.weekday]}."
        )

    return Reflection(
        kind=SummaryKind.WEEKLY,
        time_label="This Week",
        currency_symbol=currency_symbol,
        amount=week.total,
        primary_text="This week you spent",
        secondary_text=secondary,
    )


def build_widget_payload(
    entries: Sequence[SpendEntry],
    now: datetime,
    config: DayStartConfig,
    currency_symbol: str,
    color_theme: str,
    theme_mode: str,
) -> dict[str, Any]:
    """Key-value payload for the home-screen widget.

    Values are primitives only. The last transaction keys are left out
    when there are no entries.
    """
    payload: dict[str, Any] = {
        WIDGET_TODAY_TOTAL: float(daily_total(entries, now, config)),
        WIDGET_YESTERDAY_TOTAL: float(yesterday_total(entries, now, config)),
        WIDGET_LAST_UPDATE: now.isoformat(),
        WIDGET_CURRENCY_SYMBOL: currency_symbol,
        WIDGET_COLOR_THEME: color_theme,
        WIDGET_THEME_MODE: theme_mode,
    }

    latest = last_entry(entries)
    if latest is not None:
        payload[WIDGET_LAST_TRANSACTION] = float(latest.amount)
        payload[WIDGET_LAST_TRANSACTION_NOTE] = latest.note or ""

    return payload
