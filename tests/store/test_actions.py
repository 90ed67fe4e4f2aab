"""Tests for the reversible store actions driven through undo windows."""

from datetime import datetime, timedelta
from decimal import Decimal
from pathlib import Path

import pytest

from tally.domain.ledger import daily_total
from tally.domain.models import DayStartConfig, MethodId, Money, SpendEntry
from tally.domain.undo import BULK_DELETE_GRACE, SWIPE_DELETE_GRACE, UNDO_ADD_GRACE, UndoWindow
from tally.store.actions import AddEntry, DeleteEntries
from tally.store.interface import SqliteLedgerStore
from tally.store.schema import init_database

NOW = datetime(2025, 3, 12, 18, 0)


@pytest.fixture
def store(tmp_path: Path) -> SqliteLedgerStore:
    db_path = tmp_path / "tally.db"
    init_database(db_path)
    return SqliteLedgerStore(db_path)


def make_entry(amount: str, hour: int, note: str | None = None) -> SpendEntry:
    return SpendEntry.create(
        Money(Decimal(amount)), NOW.replace(hour=hour), note=note, payment_method_id=MethodId("card-1")
    )


class TestDeleteEntries:
    """Tests for DeleteEntries."""

    def test_delete_then_undo_restores_identical_entry(self, store: SqliteLedgerStore) -> None:
        """Should bring the entry back with the same id and fields."""
        entry = make_entry("12.5", 9, note="lunch")
        store.insert(entry)
        window = UndoWindow()

        window.begin(DeleteEntries(store, [entry.id]), SWIPE_DELETE_GRACE, NOW)
        assert store.all() == []

        assert window.undo(NOW + timedelta(seconds=2)) is True
        assert store.all() == [entry]

    def test_totals_restored_after_undo(self, store: SqliteLedgerStore) -> None:
        """Should give the same daily total as before the delete."""
        entries = [make_entry("3", 8), make_entry("7", 12), make_entry("9", 15)]
        for entry in entries:
            store.insert(entry)
        before = daily_total(store.all(), NOW, DayStartConfig())

        window = UndoWindow()
        action = DeleteEntries(store, [entries[0].id, entries[2].id])
        window.begin(action, BULK_DELETE_GRACE, NOW)
        assert action.total == Decimal("12")
        assert daily_total(store.all(), NOW, DayStartConfig()) == Decimal("7")

        window.undo(NOW + timedelta(seconds=6))
        assert daily_total(store.all(), NOW, DayStartConfig()) == before

    def test_expiry_keeps_entry_deleted(self, store: SqliteLedgerStore) -> None:
        """Should leave the delete in place after the grace period."""
        entry = make_entry("5", 9)
        store.insert(entry)
        window = UndoWindow()
        window.begin(DeleteEntries(store, [entry.id]), SWIPE_DELETE_GRACE, NOW)

        assert window.tick(NOW + timedelta(seconds=SWIPE_DELETE_GRACE)) is True
        assert window.undo(NOW + timedelta(seconds=5)) is False
        assert store.get(entry.id) is None

    def test_missing_ids_are_skipped(self, store: SqliteLedgerStore) -> None:
        """Should only snapshot entries that exist."""
        entry = make_entry("5", 9)
        store.insert(entry)

        action = DeleteEntries(store, [entry.id, "missing", entry.id])
        action.apply()

        assert action.snapshots == [entry]
        action.revert()
        assert store.all() == [entry]

    def test_revert_skips_entries_already_back(self, store: SqliteLedgerStore) -> None:
        """Should not fail when an entry was re-inserted meanwhile."""
        entry = make_entry("5", 9)
        store.insert(entry)
        action = DeleteEntries(store, [entry.id])
        action.apply()
        store.insert(entry)

        action.revert()

        assert store.all() == [entry]


class TestAddEntry:
    """Tests for AddEntry."""

    def test_undo_add_removes_entry(self, store: SqliteLedgerStore) -> None:
        """Should remove the entry when undone in time."""
        entry = make_entry("4", 9)
        window = UndoWindow()

        window.begin(AddEntry(store, entry), UNDO_ADD_GRACE, NOW)
        assert store.get(entry.id) == entry

        assert window.undo(NOW + timedelta(seconds=5)) is True
        assert store.get(entry.id) is None

    def test_revert_when_already_gone(self, store: SqliteLedgerStore) -> None:
        """Should not fail if the entry was deleted elsewhere."""
        entry = make_entry("4", 9)
        action = AddEntry(store, entry)
        action.apply()
        store.delete([entry.id])

        action.revert()

        assert store.all() == []
