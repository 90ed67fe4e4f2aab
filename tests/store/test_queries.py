"""Tests for the SQLite entry store."""

from datetime import datetime
from decimal import Decimal
from pathlib import Path

import pytest

from tally.domain.models import MethodId, Money, SpendEntry
from tally.store.interface import SqliteLedgerStore
from tally.store.schema import database_exists, init_database


@pytest.fixture
def store(tmp_path: Path) -> SqliteLedgerStore:
    db_path = tmp_path / "tally.db"
    init_database(db_path)
    return SqliteLedgerStore(db_path)


def make_entry(amount: str, when: datetime, note: str | None = None, method: str | None = None) -> SpendEntry:
    return SpendEntry.create(
        Money(Decimal(amount)), when, note=note, payment_method_id=MethodId(method) if method else None
    )


class TestInitDatabase:
    """Tests for init_database."""

    def test_creates_file(self, tmp_path: Path) -> None:
        """Should create the database, parent directories included."""
        db_path = tmp_path / "nested" / "tally.db"
        assert not database_exists(db_path)

        init_database(db_path)

        assert database_exists(db_path)

    def test_is_repeatable(self, store: SqliteLedgerStore) -> None:
        """Should leave existing data alone when run again."""
        store.insert(make_entry("5", datetime(2025, 3, 12, 9, 0)))
        assert store.db_path is not None
        init_database(store.db_path)
        assert len(store.all()) == 1


class TestSqliteLedgerStore:
    """Tests for SqliteLedgerStore."""

    def test_round_trips_every_field(self, store: SqliteLedgerStore) -> None:
        """Should read back exactly what was written."""
        entry = make_entry("4.50", datetime(2025, 3, 12, 9, 15, 30, 250), note="coffee", method="card-1")

        assert store.insert(entry) is True

        assert store.get(entry.id) == entry

    def test_insert_same_id_is_ignored(self, store: SqliteLedgerStore) -> None:
        """Should not overwrite an existing id."""
        entry = make_entry("4.50", datetime(2025, 3, 12, 9, 0))
        store.insert(entry)

        assert store.insert(entry) is False
        assert len(store.all()) == 1

    def test_all_is_newest_first(self, store: SqliteLedgerStore) -> None:
        """Should order entries by timestamp descending."""
        old = make_entry("1", datetime(2025, 3, 10, 9, 0))
        new = make_entry("2", datetime(2025, 3, 12, 9, 0))
        middle = make_entry("3", datetime(2025, 3, 11, 9, 0))
        for entry in (old, new, middle):
            store.insert(entry)

        assert [e.id for e in store.all()] == [new.id, middle.id, old.id]

    def test_delete(self, store: SqliteLedgerStore) -> None:
        """Should delete known ids and skip unknown ones."""
        a = make_entry("1", datetime(2025, 3, 10, 9, 0))
        b = make_entry("2", datetime(2025, 3, 11, 9, 0))
        store.insert(a)
        store.insert(b)

        assert store.delete([a.id, "missing"]) == 1
        assert store.get(a.id) is None
        assert store.all() == [b]
        assert store.delete([]) == 0

    def test_set_note(self, store: SqliteLedgerStore) -> None:
        """Should set and clear notes."""
        entry = make_entry("1", datetime(2025, 3, 10, 9, 0))
        store.insert(entry)

        assert store.set_note(entry.id, "lunch") is True
        stored = store.get(entry.id)
        assert stored is not None
        assert stored.note == "lunch"

        store.set_note(entry.id, "")
        stored = store.get(entry.id)
        assert stored is not None
        assert stored.note is None

    def test_set_note_missing_entry(self, store: SqliteLedgerStore) -> None:
        """Should report a missing entry."""
        assert store.set_note("missing", "x") is False

    def test_find_by_prefix(self, store: SqliteLedgerStore) -> None:
        """Should match id prefixes and treat LIKE wildcards literally."""
        entry = make_entry("1", datetime(2025, 3, 10, 9, 0))
        store.insert(entry)

        assert store.find(entry.id[:6]) == [entry]
        assert store.find("%") == []
        assert store.find("_") == []
