"""Reversible store mutations for undo windows.

Reverting is forgiving: an entry that is already gone (or already back)
is skipped without error.
"""

from collections.abc import Iterable

import structlog

from tally.domain.models import ZERO, Money, SpendEntry
from tally.store.interface import LedgerStore

logger = structlog.get_logger(__name__)


class DeleteEntries:
    """Delete entries, keeping snapshots so they can be put back.

    Restored entries keep their original id, timestamp, amount, note and
    payment method.
    """

    def __init__(self, store: LedgerStore, entry_ids: Iterable[str]):
        self.store = store
        self.entry_ids = list(dict.fromkeys(entry_ids))
        self.snapshots: list[SpendEntry] = []

    def apply(self) -> None:
        self.snapshots = [entry for entry in map(self.store.get, self.entry_ids) if entry is not None]
        if len(self.snapshots) < len(self.entry_ids):
            logger.debug("delete_skipped_missing", missing=len(self.entry_ids) - len(self.snapshots))
        self.store.delete(entry.id for entry in self.snapshots)
        logger.info("entries_deleted", count=len(self.snapshots))

    def revert(self) -> None:
        restored = sum(1 for entry in self.snapshots if self.store.insert(entry))
        logger.info("entries_restored", count=restored, skipped=len(self.snapshots) - restored)
        self.snapshots = []

    @property
    def total(self) -> Money:
        """Sum of the deleted amounts."""
        return Money(sum((entry.amount for entry in self.snapshots), ZERO))


class AddEntry:
    """Insert an entry; reverting removes it again."""

    def __init__(self, store: LedgerStore, entry: SpendEntry):
        self.store = store
        self.entry = entry

    def apply(self) -> None:
        self.store.insert(self.entry)
        logger.info("entry_added", entry_id=self.entry.id, amount=str(self.entry.amount))

    def revert(self) -> None:
        removed = self.store.delete([self.entry.id])
        if removed:
            logger.info("entry_add_undone", entry_id=self.entry.id)
        else:
            logger.debug("entry_add_undo_missing", entry_id=self.entry.id)
