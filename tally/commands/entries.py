"""Entry commands: add, speed dial, note, delete and the keypad session."""

import sqlite3
import sys
from datetime import datetime

import pandas as pd
import structlog
import typer

from tally.commands.common import console, money, open_ledger, require_database, resolve_entry, short_id
from tally.context import LedgerContext
from tally.domain.ledger import daily_total
from tally.domain.models import MethodId, SpendEntry
from tally.domain.payment import find_method, validate_amount
from tally.domain.undo import (
    BULK_DELETE_GRACE,
    SWIPE_DELETE_GRACE,
    UNDO_ADD_GRACE,
    UndoWindow,
    UndoWindows,
)
from tally.store.actions import AddEntry, DeleteEntries

logger = structlog.get_logger(__name__)

SESSION_HELP = (
    "[dim]Type an amount (optionally followed by a note) to log it. "
    "*N uses speed dial N, u undoes the last add, d ID deletes, "
    "z ID brings a deleted entry back, q quits.[/dim]"
)


def parse_timestamp(text: str) -> datetime:
    """Parse a user supplied date/time into a naive local datetime.

    Raises:
        ValueError: If the text can't be understood.
    """
    timestamp = pd.to_datetime(text, dayfirst=True)
    if pd.isna(timestamp):
        raise ValueError(f"not a date: {text!r}")
    parsed = timestamp.to_pydatetime()
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed


def _method_id(ctx: LedgerContext, method: str | None) -> MethodId | None:
    """Resolve --method (id or name) or fall back to the selected method."""
    methods = list(ctx.settings.payment_methods)
    if method is None:
        return ctx.settings.selected_payment_method_id

    found = find_method(methods, method) or next((m for m in methods if m.name.lower() == method.lower()), None)
    if found is None:
        console.print(f"[red]Unknown payment method: {method}[/red]")
        console.print("[dim]See 'tally methods list'[/dim]")
        sys.exit(1)
    return found.id


def _print_today(ctx: LedgerContext) -> None:
    total = daily_total(ctx.entries(), ctx.now(), ctx.settings.day_start)
    console.print(f"  Today: [bold]{money(ctx, total)}[/bold]")


def add_command(
    amount: str,
    note: str | None = None,
    method: str | None = None,
    at: str | None = None,
) -> None:
    """Log a spend.

    Args:
        amount: Amount text, must be positive.
        note: Optional note.
        method: Payment method id or name; defaults to the selected one.
        at: Optional date/time; defaults to now.
    """
    ctx = open_ledger()
    require_database(ctx)

    value, error = validate_amount(amount)
    if value is None:
        console.print(f"[red]{error}[/red]")
        sys.exit(1)

    try:
        timestamp = parse_timestamp(at) if at else ctx.now()
    except (ValueError, OverflowError) as e:
        console.print(f"[red]Invalid date format: {e}[/red]")
        console.print("[dim]Accepted formats: YYYY-MM-DD HH:MM, DD/MM/YYYY HH:MM, etc.[/dim]")
        sys.exit(1)

    entry = SpendEntry.create(value, timestamp, note=note or None, payment_method_id=_method_id(ctx, method))

    try:
        ctx.store.insert(entry)
        console.print(f"[green]✓[/green] Logged {money(ctx, entry.amount)} [dim]({short_id(entry)})[/dim]")
        if entry.note:
            console.print(f"  Note: {entry.note}")
        _print_today(ctx)
    except sqlite3.Error as e:
        console.print(f"[red]Database error: {e}[/red]", style="bold")
        sys.exit(1)


def dial_command(key: int) -> None:
    """Log the amount bound to a speed dial key."""
    ctx = open_ledger()
    require_database(ctx)

    preset = ctx.settings.speed_dial.get(key)
    if preset is None:
        console.print(f"[yellow]Speed dial {key} is empty[/yellow]")
        console.print("[dim]Set it with 'tally presets set'[/dim]")
        sys.exit(1)

    add_command(str(preset.amount), note=preset.label or None)


def note_command(entry_id: str, text: str) -> None:
    """Set or clear (with an empty text) the note on an entry."""
    ctx = open_ledger()
    require_database(ctx)

    try:
        entry = resolve_entry(ctx, entry_id)
        ctx.store.set_note(entry.id, text)
        if text:
            console.print(f"[green]✓[/green] Note on {short_id(entry)}: {text}")
        else:
            console.print(f"[green]✓[/green] Cleared note on {short_id(entry)}")
        if entry.note:
            console.print(f"  [dim]Old note: {entry.note}[/dim]")
    except sqlite3.Error as e:
        console.print(f"[red]Database error: {e}[/red]", style="bold")
        sys.exit(1)


def delete_command(entry_ids: list[str]) -> None:
    """Delete entries, offering a short window to undo."""
    ctx = open_ledger()
    require_database(ctx)

    try:
        entries = {entry.id: entry for entry in (resolve_entry(ctx, i) for i in entry_ids)}
        grace = BULK_DELETE_GRACE if len(entries) > 1 else SWIPE_DELETE_GRACE

        action = DeleteEntries(ctx.store, list(entries))
        window = UndoWindow()
        window.begin(action, grace, ctx.now())

        count = len(action.snapshots)
        noun = "entry" if count == 1 else "entries"
        console.print(f"[red]✗[/red] Deleted {count} {noun} ({money(ctx, action.total)})")
        answer: str = typer.prompt(
            f"Undo? type u within {window.seconds_remaining(ctx.now())}s",
            default="",
            show_default=False,
        )

        if answer.strip().lower() == "u":
            if window.undo(ctx.now()):
                console.print("[green]✓[/green] Undo successful.")
            else:
                console.print("[yellow]Too late, the deletion is final[/yellow]")
        else:
            window.force_commit_now()
        _print_today(ctx)

    except sqlite3.Error as e:
        console.print(f"[red]Database error: {e}[/red]", style="bold")
        sys.exit(1)


class KeypadSession:
    """Interactive logging loop with undo, ticked on every input line."""

    def __init__(self, ctx: LedgerContext):
        self.ctx = ctx
        self.last_add = UndoWindow()
        self.last_added_id: str | None = None
        self.deletions = UndoWindows()

    def tick(self) -> None:
        for key in self.deletions.tick(self.ctx.now()):
            console.print(f"[dim]Deletion of {key[:8]} is final[/dim]")
        self.last_add.tick(self.ctx.now())

    def add(self, amount_text: str, note: str | None) -> None:
        value, error = validate_amount(amount_text)
        if value is None:
            console.print(f"[red]{error}[/red]")
            return
        entry = SpendEntry.create(
            value, self.ctx.now(), note=note, payment_method_id=self.ctx.settings.selected_payment_method_id
        )
        self.last_add.force_commit_now()
        self.last_add = UndoWindow()
        self.last_add.begin(AddEntry(self.ctx.store, entry), UNDO_ADD_GRACE, self.ctx.now())
        self.last_added_id = entry.id
        console.print(f"[green]+{money(self.ctx, value)}[/green] [dim]({short_id(entry)})[/dim]")

    def dial(self, key_text: str) -> None:
        preset = self.ctx.settings.speed_dial.get(int(key_text)) if key_text.isdigit() else None
        if preset is None:
            console.print(f"[yellow]Speed dial {key_text} is empty[/yellow]")
            return
        self.add(str(preset.amount), preset.label or None)

    def undo_add(self) -> None:
        if self.last_add.undo(self.ctx.now()):
            console.print("[green]Undo successful.[/green]")
        else:
            console.print("[dim]Nothing to undo[/dim]")

    def delete(self, id_or_prefix: str) -> None:
        matches = [e for e in self.ctx.entries() if e.id.startswith(id_or_prefix)]
        if len(matches) != 1:
            console.print(f"[red]'{id_or_prefix}' matches {len(matches)} entries[/red]")
            return
        entry = matches[0]
        if entry.id == self.last_added_id:
            # A deleted add can only come back through z
            self.last_add.force_commit_now()
        self.deletions.begin(entry.id, DeleteEntries(self.ctx.store, [entry.id]), SWIPE_DELETE_GRACE, self.ctx.now())
        hint = f"z {short_id(entry)} within {SWIPE_DELETE_GRACE}s to undo"
        console.print(f"[red]-{money(self.ctx, entry.amount)}[/red] [dim]({hint})[/dim]")

    def restore(self, id_or_prefix: str) -> None:
        keys = [key for key in self.deletions if key.startswith(id_or_prefix)]
        if len(keys) == 1 and self.deletions.undo(keys[0], self.ctx.now()):
            console.print("[green]Restored.[/green]")
        else:
            console.print("[dim]Nothing to restore[/dim]")

    def close(self) -> None:
        self.last_add.force_commit_now()
        for key in list(self.deletions):
            window = self.deletions.get(key)
            if window is not None:
                window.force_commit_now()

    def handle(self, line: str) -> bool:
        """Process one input line. Returns False when the session should end."""
        self.tick()
        command, _, rest = line.strip().partition(" ")
        rest = rest.strip()

        if not command:
            return True
        if command.lower() == "q":
            return False
        if command.lower() == "u":
            self.undo_add()
        elif command.lower() == "d" and rest:
            self.delete(rest)
        elif command.lower() == "z" and rest:
            self.restore(rest)
        elif command.startswith("*"):
            self.dial(command[1:])
        else:
            self.add(command, rest or None)

        _print_today(self.ctx)
        return True


def session_command() -> None:
    """Run the interactive keypad session."""
    ctx = open_ledger()
    require_database(ctx)

    console.print(SESSION_HELP)
    session = KeypadSession(ctx)
    try:
        while True:
            line: str = typer.prompt(">", default="", show_default=False, prompt_suffix=" ")
            if not session.handle(line):
                break
    except (typer.Abort, EOFError):
        console.print()
    except sqlite3.Error as e:
        console.print(f"[red]Database error: {e}[/red]", style="bold")
        sys.exit(1)
    finally:
        session.close()
        logger.debug("session_closed")
