"""Settings, payment method and speed dial commands."""

import calendar
import dataclasses
import sys
from typing import Any

from rich.table import Table

from tally.commands.common import console, money, open_ledger, read_settings
from tally.config import Settings, get_config_path, save_settings
from tally.context import LedgerContext
from tally.dates import parse_clock
from tally.domain.models import DayStartConfig, PaymentType
from tally.domain.payment import (
    clear_preset,
    new_method,
    remove_method,
    resolve_selected,
    select_method,
    set_preset,
)


def _save(settings: Settings) -> None:
    try:
        save_settings(settings, get_config_path())
    except OSError as e:
        console.print(f"[red]Could not write config: {e}[/red]", style="bold")
        sys.exit(1)


def _clock_or_exit(text: str) -> tuple[int, int]:
    try:
        return parse_clock(text)
    except ValueError:
        console.print(f"[red]Invalid time: {text}[/red] [dim](use HH:MM, 24-hour)[/dim]")
        sys.exit(1)


def show_settings(ctx: LedgerContext) -> None:
    """Print the current settings."""
    s = ctx.settings
    console.print("[bold]Settings[/bold]")
    console.print(f"  Day starts at:   {s.day_start}")
    console.print(f"  Week starts on:  {calendar.day_name[s.first_weekday]}")
    console.print(f"  Currency symbol: {s.currency_symbol}")
    reminder = f"{s.reminder_hour:02d}:{s.reminder_minute:02d}" if s.reminder_enabled else "off"
    console.print(f"  Daily reminder:  {reminder}")
    console.print(f"  Theme:           {s.color_theme} ({s.theme_mode})")
    console.print(f"[dim]Config: {ctx.config_path}[/dim]")


def settings_command(
    day_start: str | None = None,
    currency: str | None = None,
    first_weekday: int | None = None,
    reminder: bool | None = None,
    reminder_time: str | None = None,
    color_theme: str | None = None,
    theme_mode: str | None = None,
) -> None:
    """Show or change settings."""
    settings = read_settings()
    changes: dict[str, Any] = {}

    if day_start is not None:
        hour, minute = _clock_or_exit(day_start)
        changes["day_start"] = DayStartConfig(hour, minute)
    if currency is not None:
        changes["currency_symbol"] = currency
    if first_weekday is not None:
        if first_weekday not in range(7):
            console.print("[red]First weekday must be 0 (Monday) to 6 (Sunday)[/red]")
            sys.exit(1)
        changes["first_weekday"] = first_weekday
    if reminder is not None:
        changes["reminder_enabled"] = reminder
    if reminder_time is not None:
        changes["reminder_hour"], changes["reminder_minute"] = _clock_or_exit(reminder_time)
    if color_theme is not None:
        changes["color_theme"] = color_theme
    if theme_mode is not None:
        changes["theme_mode"] = theme_mode

    if changes:
        settings = dataclasses.replace(settings, **changes)
        _save(settings)
        console.print("[green]✓[/green] Settings saved")

    show_settings(open_ledger())


def methods_list_command() -> None:
    """List payment methods, marking the selected one."""
    settings = read_settings()

    table = Table(title="Payment methods")
    table.add_column("", justify="center")
    table.add_column("Name", style="white")
    table.add_column("Type", style="magenta")
    table.add_column("Colour")
    table.add_column("ID", style="dim")

    for method in settings.payment_methods:
        selected = "●" if method.id == settings.selected_payment_method_id else ""
        name = f"{method.name} [dim](default)[/dim]" if method.is_default else method.name
        table.add_row(selected, name, method.type.value, f"[{method.color_hex}]■[/] {method.color_hex}", method.id)

    console.print(table)


def methods_add_command(name: str, type: PaymentType, color: str | None = None, select: bool = False) -> None:
    """Create a payment method."""
    settings = read_settings()
    methods, created, error = new_method(list(settings.payment_methods), name, type, color)
    if created is None:
        console.print(f"[red]{error}[/red]")
        sys.exit(1)

    selected_id = created.id if select else settings.selected_payment_method_id
    _save(dataclasses.replace(settings, payment_methods=tuple(methods), selected_payment_method_id=selected_id))
    console.print(f"[green]✓[/green] Added {created.name} [dim]({created.id})[/dim]")


def methods_remove_command(method_id: str) -> None:
    """Delete a payment method; the selection falls back to the default."""
    settings = read_settings()
    selected = resolve_selected(list(settings.payment_methods), settings.selected_payment_method_id)
    methods, selected_id, error = remove_method(list(settings.payment_methods), selected, method_id)
    if error:
        console.print(f"[red]{error}[/red]")
        sys.exit(1)

    _save(dataclasses.replace(settings, payment_methods=tuple(methods), selected_payment_method_id=selected_id))
    console.print(f"[green]✓[/green] Removed payment method {method_id}")
    if selected_id != selected:
        console.print("[dim]Selection moved to the default method[/dim]")


def methods_select_command(method_id: str) -> None:
    """Choose the method new entries are logged with."""
    settings = read_settings()
    selected = resolve_selected(list(settings.payment_methods), settings.selected_payment_method_id)
    selected_id, error = select_method(list(settings.payment_methods), selected, method_id)
    if error:
        console.print(f"[red]{error}[/red]")
        sys.exit(1)

    _save(dataclasses.replace(settings, selected_payment_method_id=selected_id))
    console.print(f"[green]✓[/green] Selected {selected_id}")


def presets_list_command() -> None:
    """List speed dial presets."""
    ctx = open_ledger()
    presets = ctx.settings.speed_dial
    if not presets:
        console.print("[yellow]No speed dial presets yet[/yellow]")
        return
    for key in sorted(presets):
        preset = presets[key]
        label = f" [dim]{preset.label}[/dim]" if preset.label else ""
        console.print(f"  {key}: {money(ctx, preset.amount)}{label}")


def presets_set_command(key: int, amount: str, label: str = "") -> None:
    """Bind an amount to a speed dial key."""
    settings = read_settings()
    presets, error = set_preset(settings.speed_dial, key, amount, label)
    if error:
        console.print(f"[red]{error}[/red]")
        sys.exit(1)

    _save(dataclasses.replace(settings, speed_dial=presets))
    console.print(f"[green]✓[/green] Speed dial {key} set")


def presets_clear_command(key: int) -> None:
    """Remove a speed dial binding."""
    settings = read_settings()
    _save(dataclasses.replace(settings, speed_dial=clear_preset(settings.speed_dial, key)))
    console.print(f"[green]✓[/green] Speed dial {key} cleared")
