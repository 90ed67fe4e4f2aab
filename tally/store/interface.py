"""Entry store interface and its SQLite implementation.

The ledger core only ever needs insert, delete and a full read, plus the
note edit. Commands and undo actions talk to a LedgerStore so tests and
alternative backends can stand in for SQLite.
"""

from abc import ABC, abstractmethod
from collections.abc import Iterable
from pathlib import Path

from tally.domain.models import SpendEntry
from tally.store import queries


class LedgerStore(ABC):
    """Operations the ledger needs from persistence."""

    @abstractmethod
    def insert(self, entry: SpendEntry) -> bool:
        """Store an entry. Returns False if its id is already present."""

    @abstractmethod
    def delete(self, entry_ids: Iterable[str]) -> int:
        """Remove entries by id. Returns how many were removed."""

    @abstractmethod
    def get(self, entry_id: str) -> SpendEntry | None:
        """Fetch one entry, or None."""

    @abstractmethod
    def all(self) -> list[SpendEntry]:
        """Every entry, newest first."""

    @abstractmethod
    def set_note(self, entry_id: str, note: str | None) -> bool:
        """Set or clear a note. Returns False if the entry is gone."""


class SqliteLedgerStore(LedgerStore):
    """LedgerStore backed by the tally SQLite database."""

    def __init__(self, db_path: Path | None = None):
        self.db_path = db_path

    def insert(self, entry: SpendEntry) -> bool:
        return queries.insert_entry(entry, self.db_path)

    def delete(self, entry_ids: Iterable[str]) -> int:
        return queries.delete_entries(entry_ids, self.db_path)

    def get(self, entry_id: str) -> SpendEntry | None:
        return queries.get_entry(entry_id, self.db_path)

    def all(self) -> list[SpendEntry]:
        return queries.get_all_entries(self.db_path)

    def set_note(self, entry_id: str, note: str | None) -> bool:
        return queries.set_entry_note(entry_id, note, self.db_path)

    def find(self, prefix: str) -> list[SpendEntry]:
        """Entries whose id starts with a prefix."""
        return queries.find_entries_by_prefix(prefix, self.db_path)
