"""Read-only commands: today, history, week, summaries and the widget payload."""

import calendar
import json
import sqlite3
import sys

from rich.table import Table

from tally.commands.common import console, money, open_ledger, require_database, short_id
from tally.context import LedgerContext
from tally.dates import get_ritual_day, next_reminder, week_bounds
from tally.domain.ledger import (
    Comparison,
    compare_to_average,
    daily_total,
    history,
    peak_weekday,
    rolling_average,
    spending_by_method,
    weekly_total,
    yesterday_total,
)
from tally.domain.models import SpendEntry
from tally.domain.payment import resolve_method
from tally.domain.summary import (
    Reflection,
    SummaryKind,
    build_widget_payload,
    comparison_text,
    daily_reflection,
    route_notification,
    weekly_reflection,
)
from tally.store.schema import get_widget_path

COMPARISON_STYLE = {
    Comparison.ABOVE: "red",
    Comparison.BELOW: "green",
    Comparison.ON_TRACK: "cyan",
}


def _load(ctx: LedgerContext) -> list[SpendEntry]:
    try:
        return ctx.entries()
    except sqlite3.Error as e:
        console.print(f"[red]Database error: {e}[/red]", style="bold")
        sys.exit(1)


def today_command() -> None:
    """Show today's total against yesterday and the rolling average."""
    ctx = open_ledger()
    require_database(ctx)
    entries = _load(ctx)
    now = ctx.now()
    settings = ctx.settings

    today = daily_total(entries, now, settings.day_start)
    average = rolling_average(entries, settings.day_start)

    ritual_day = get_ritual_day(now, settings.day_start)
    console.print(f"\n[bold]Today[/bold] [dim]({ritual_day:%a %d %b}, day starts {settings.day_start})[/dim]")
    console.print(f"  Spent:     [bold]{money(ctx, today)}[/bold]")
    console.print(f"  Yesterday: {money(ctx, yesterday_total(entries, now, settings.day_start))}")

    if average > 0:
        comparison = compare_to_average(today, average)
        style = COMPARISON_STYLE[comparison]
        console.print(f"  [{style}]{comparison_text(comparison, average, settings.currency_symbol)}[/{style}]")

    if settings.reminder_enabled:
        reminder = next_reminder(now, settings.reminder_hour, settings.reminder_minute)
        console.print(f"  [dim]Next summary reminder: {reminder:%a %H:%M}[/dim]")


def history_command(days: int | None = 14, show_methods: bool = False) -> None:
    """Show spending grouped by ritual day, newest first."""
    ctx = open_ledger()
    require_database(ctx)
    entries = _load(ctx)
    settings = ctx.settings

    rows = history(entries, settings.day_start)
    if not rows:
        console.print("[yellow]Nothing logged yet[/yellow]")
        return

    if days is not None:
        rows = rows[:days]

    methods = list(settings.payment_methods)
    table = Table(title=f"History ({len(rows)} days)")
    table.add_column("Day", style="cyan")
    table.add_column("Time", style="dim")
    table.add_column("Amount", justify="right")
    table.add_column("Note", style="white")
    table.add_column("Method", style="magenta")
    table.add_column("ID", style="dim")

    for row in rows:
        table.add_row(f"[bold]{row.day:%a %d %b}[/bold]", "", f"[bold]{money(ctx, row.total)}[/bold]", "", "", "")
        for entry in row.entries:
            method = resolve_method(methods, entry.payment_method_id)
            table.add_row(
                "",
                f"{entry.timestamp:%H:%M}",
                money(ctx, entry.amount),
                entry.note or "",
                method.name,
                short_id(entry),
            )

    console.print(table)

    if show_methods:
        shown = [entry for row in rows for entry in row.entries]
        console.print("\n[bold]By payment method[/bold]")
        for method_id, total in sorted(spending_by_method(shown, methods).items(), key=lambda item: -item[1]):
            console.print(f"  {resolve_method(methods, method_id).name:20} {money(ctx, total):>12}")


def week_command() -> None:
    """Show this calendar week's total, daily average and busiest day."""
    ctx = open_ledger()
    require_database(ctx)
    entries = _load(ctx)
    now = ctx.now()
    settings = ctx.settings

    week = weekly_total(entries, now, settings.first_weekday)
    peak = peak_weekday(entries, now, settings.first_weekday)

    first_day, _ = week_bounds(now, settings.first_weekday)
    console.print(f"\n[bold]Week of {first_day:%d %b}[/bold]")
    console.print(f"  Total:         [bold]{money(ctx, week.total)}[/bold]")
    console.print(f"  Daily average: {money(ctx, week.daily_average)}")
    if peak is None:
        console.print("  [dim]No spending this week[/dim]")
    else:
        console.print(f"  Biggest day:   {calendar.day_name[peak.weekday]} ({money(ctx, peak.total)})")


def render_reflection(ctx: LedgerContext, reflection: Reflection) -> None:
    """Print a summary card."""
    console.print(f"\n[dim]{reflection.time_label.upper()}[/dim]")
    console.print(f"  {reflection.primary_text}")
    console.print(f"  [bold]{money(ctx, reflection.amount)}[/bold]")
    if reflection.secondary_text:
        console.print(f"  [dim]{reflection.secondary_text}[/dim]")


def summary_command(kind: str) -> None:
    """Show the summary a reminder of the given type opens."""
    ctx = open_ledger()
    require_database(ctx)

    routed = route_notification({"type": kind})
    if routed is None:
        valid = ", ".join(k.value for k in SummaryKind)
        console.print(f"[red]Unknown summary type: {kind}[/red] [dim](expected {valid})[/dim]")
        sys.exit(1)

    entries = _load(ctx)
    settings = ctx.settings
    if routed is SummaryKind.DAILY:
        reflection = daily_reflection(entries, ctx.now(), settings.day_start, settings.currency_symbol)
    else:
        reflection = weekly_reflection(entries, ctx.now(), settings.first_weekday, settings.currency_symbol)
    render_reflection(ctx, reflection)


def widget_command(output: str | None = None) -> None:
    """Write the widget payload and print it."""
    ctx = open_ledger()
    require_database(ctx)
    settings = ctx.settings

    payload = build_widget_payload(
        _load(ctx),
        ctx.now(),
        settings.day_start,
        settings.currency_symbol,
        settings.color_theme,
        settings.theme_mode,
    )

    path = get_widget_path() if output is None else output
    try:
        with open(path, "w", encoding="utf-8") as f:
            json.dump(payload, f, indent=2)
    except OSError as e:
        console.print(f"[red]Could not write widget payload: {e}[/red]")
        sys.exit(1)

    console.print_json(data=payload)
    console.print(f"[dim]Written to {path}[/dim]")
