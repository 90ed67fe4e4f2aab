"""Helpers shared by the command modules."""

import sys
import tomllib
from decimal import Decimal
from typing import NoReturn

from rich.console import Console
from rich.markup import escape

from tally.config import Settings, get_config_path, load_settings
from tally.context import LedgerContext, open_context
from tally.domain.models import SpendEntry
from tally.domain.summary import format_amount
from tally.store.interface import SqliteLedgerStore
from tally.store.schema import database_exists

console = Console()

SHORT_ID_LENGTH = 8


def _config_error(e: Exception) -> NoReturn:
    console.print(f"[red]Could not read config {get_config_path()}: {escape(str(e))}[/red]", style="bold")
    console.print("[dim]Fix the file, or run 'tally init --force' to start over[/dim]")
    sys.exit(1)


def read_settings() -> Settings:
    """Load settings, exiting with a message when the config file is broken."""
    try:
        return load_settings()
    except (tomllib.TOMLDecodeError, OSError) as e:
        _config_error(e)


def open_ledger() -> LedgerContext:
    """Build the command context, exiting with a message when the config file is broken."""
    try:
        return open_context()
    except (tomllib.TOMLDecodeError, OSError) as e:
        _config_error(e)


def require_database(ctx: LedgerContext) -> None:
    """Exit with a hint when the database hasn't been created yet."""
    store = ctx.store
    if isinstance(store, SqliteLedgerStore) and not database_exists(store.db_path):
        console.print("[red]Database not found. Run 'tally init' first.[/red]", style="bold")
        sys.exit(1)


def money(ctx: LedgerContext, amount: Decimal) -> str:
    """Amount with the configured currency symbol."""
    return f"{ctx.settings.currency_symbol}{format_amount(amount)}"


def short_id(entry: SpendEntry) -> str:
    return entry.id[:SHORT_ID_LENGTH]


def resolve_entry(ctx: LedgerContext, id_or_prefix: str) -> SpendEntry:
    """Find exactly one entry by full id or short prefix, or exit."""
    entry = ctx.store.get(id_or_prefix)
    if entry is not None:
        return entry

    matches: list[SpendEntry] = []
    if isinstance(ctx.store, SqliteLedgerStore):
        matches = ctx.store.find(id_or_prefix)
    else:
        matches = [e for e in ctx.store.all() if e.id.startswith(id_or_prefix)]

    if not matches:
        console.print(f"[red]Entry {id_or_prefix} not found[/red]")
        sys.exit(1)
    if len(matches) > 1:
        console.print(f"[red]'{id_or_prefix}' matches {len(matches)} entries, use a longer id[/red]")
        sys.exit(1)
    return matches[0]
