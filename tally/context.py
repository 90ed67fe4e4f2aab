"""Explicit runtime context handed to commands.

Everything a command needs from the outside world (the entry store, the
settings and the clock) travels in one LedgerContext instead of module
globals, so tests can swap any of it.
"""

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

from tally.config import Settings, get_config_path, load_settings
from tally.domain.models import SpendEntry
from tally.store.interface import LedgerStore, SqliteLedgerStore
from tally.store.schema import get_db_path


def local_now() -> datetime:
    """Current local wall-clock time, naive."""
    return datetime.now()


@dataclass
class LedgerContext:
    """Store, settings and clock for one command run."""

    store: LedgerStore
    settings: Settings
    clock: Callable[[], datetime] = field(default=local_now)
    config_path: Path | None = None

    def now(self) -> datetime:
        return self.clock()

    def entries(self) -> list[SpendEntry]:
        """Fresh snapshot of every entry."""
        return self.store.all()


def open_context(db_path: Path | None = None, config_path: Path | None = None) -> LedgerContext:
    """Build the default context from the XDG database and config file."""
    config_path = config_path or get_config_path()
    return LedgerContext(
        store=SqliteLedgerStore(db_path or get_db_path()),
        settings=load_settings(config_path),
        config_path=config_path,
    )
