"""CLI entry point for tally."""

import typer

from tally import log
from tally.commands.admin import backup_command, init_command
from tally.commands.entries import (
    add_command,
    delete_command,
    dial_command,
    note_command,
    session_command,
)
from tally.commands.report import (
    history_command,
    summary_command,
    today_command,
    week_command,
    widget_command,
)
from tally.commands.settings import (
    methods_add_command,
    methods_list_command,
    methods_remove_command,
    methods_select_command,
    presets_clear_command,
    presets_list_command,
    presets_set_command,
    settings_command,
)
from tally.domain.models import PaymentType

app = typer.Typer(
    name="tally",
    help="Tap to log a spend - a ritual-day spending ledger",
    add_completion=False,
)
methods_app = typer.Typer(help="Manage your payment methods.")
presets_app = typer.Typer(help="Manage your speed dial presets.")
app.add_typer(methods_app, name="methods")
app.add_typer(presets_app, name="presets")


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log debug output to stderr"),
) -> None:
    """Tap to log a spend - a ritual-day spending ledger."""
    log.configure(verbose)


@app.command(name="init")
def init(
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite existing database and config"),
) -> None:
    """Initialize tally database and configuration."""
    init_command(force)


@app.command(name="backup")
def backup(
    output_dir: str = typer.Option(None, "--output", "-o", help="Backup directory"),
) -> None:
    """Backup your database and configuration files."""
    backup_command(output_dir)


@app.command()
def add(
    amount: str,
    note: str = typer.Option(None, "--note", "-n", help="Note for this spend"),
    method: str = typer.Option(None, "--method", "-m", help="Payment method name or id"),
    at: str = typer.Option(None, "--at", help="When it happened (default: now)"),
) -> None:
    """Log a spend."""
    add_command(amount, note, method, at)


@app.command()
def dial(key: int = typer.Argument(..., help="Speed dial key (1-9)")) -> None:
    """Log the amount saved on a speed dial key."""
    dial_command(key)


@app.command()
def note(
    entry_id: str = typer.Argument(..., help="Entry id (or its first characters)"),
    text: str = typer.Argument("", help="Note text; leave empty to clear"),
) -> None:
    """Set or clear the note on an entry."""
    note_command(entry_id, text)


@app.command()
def delete(entry_ids: list[str] = typer.Argument(..., help="Entry ids (or their first characters)")) -> None:
    """Delete entries, with a few seconds to undo."""
    delete_command(entry_ids)


@app.command()
def session() -> None:
    """Log spends interactively, keypad style."""
    session_command()


@app.command()
def today() -> None:
    """Show what you've spent today."""
    today_command()


@app.command()
def history(
    days: int = typer.Option(14, "--days", "-d", help="Number of days to show"),
    all: bool = typer.Option(False, "--all", "-a", help="Show every day"),
    methods: bool = typer.Option(False, "--methods", help="Add a breakdown by payment method"),
) -> None:
    """Show your spending day by day."""
    history_command(None if all else days, methods)


@app.command()
def week() -> None:
    """Show this week's spending."""
    week_command()


@app.command()
def summary(kind: str = typer.Argument("daily_summary", help="daily_summary or weekly_summary")) -> None:
    """Show a daily or weekly reflection."""
    summary_command(kind)


@app.command()
def widget(
    output: str = typer.Option(None, "--output", "-o", help="Write the payload here instead"),
) -> None:
    """Refresh the home-screen widget payload."""
    widget_command(output)


@app.command()
def settings(
    day_start: str = typer.Option(None, "--day-start", help="When your day starts (HH:MM)"),
    currency: str = typer.Option(None, "--currency", help="Currency symbol"),
    first_weekday: int = typer.Option(None, "--first-weekday", help="0 = Monday ... 6 = Sunday"),
    reminder: bool = typer.Option(None, "--reminder/--no-reminder", help="Daily summary reminder"),
    reminder_time: str = typer.Option(None, "--reminder-time", help="Reminder time (HH:MM)"),
    color_theme: str = typer.Option(None, "--theme", help="Colour theme id"),
    theme_mode: str = typer.Option(None, "--theme-mode", help="auto, light, dark or amoled"),
) -> None:
    """Show or change your settings."""
    settings_command(day_start, currency, first_weekday, reminder, reminder_time, color_theme, theme_mode)


@methods_app.command(name="list")
def methods_list() -> None:
    """List your payment methods."""
    methods_list_command()


@methods_app.command(name="add")
def methods_add(
    name: str,
    type: PaymentType = typer.Option(PaymentType.CARD, "--type", "-t", help="cash or card"),
    color: str = typer.Option(None, "--color", help="Hex colour, e.g. #7B68EE"),
    select: bool = typer.Option(False, "--select", help="Use it for new entries"),
) -> None:
    """Add a payment method."""
    methods_add_command(name, type, color, select)


@methods_app.command(name="remove")
def methods_remove(method_id: str) -> None:
    """Remove a payment method."""
    methods_remove_command(method_id)


@methods_app.command(name="select")
def methods_select(method_id: str) -> None:
    """Choose the payment method for new entries."""
    methods_select_command(method_id)


@presets_app.command(name="list")
def presets_list() -> None:
    """List your speed dial presets."""
    presets_list_command()


@presets_app.command(name="set")
def presets_set(
    key: int = typer.Argument(..., help="Speed dial key (1-9)"),
    amount: str = typer.Argument(..., help="Amount"),
    label: str = typer.Option("", "--label", "-l", help="Label, saved as the entry note"),
) -> None:
    """Save an amount on a speed dial key."""
    presets_set_command(key, amount, label)


@presets_app.command(name="clear")
def presets_clear(key: int = typer.Argument(..., help="Speed dial key (1-9)")) -> None:
    """Clear a speed dial key."""
    presets_clear_command(key)


if __name__ == "__main__":
    app()
