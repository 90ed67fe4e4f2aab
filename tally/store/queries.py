"""Database query functions for spend entries."""

import sqlite3
from collections.abc import Iterable
from datetime import datetime
from decimal import Decimal
from pathlib import Path
from typing import Any

import structlog

from tally.domain.models import EntryId, MethodId, Money, SpendEntry
from tally.store.schema import get_db_path

logger = structlog.get_logger(__name__)

_COLUMNS = "id, timestamp, amount, note, payment_method_id"


def _connect(db_path: Path | None = None) -> sqlite3.Connection:
    """Create a database connection with row factory.

    Args:
        db_path: Path to the database file. If None, uses default location.

    Returns:
        Database connection with row_factory configured.
    """
    if db_path is None:
        db_path = get_db_path()
    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row
    return conn


def _row_to_entry(row: sqlite3.Row) -> SpendEntry:
    method_id = row["payment_method_id"]
    return SpendEntry(
        id=EntryId(row["id"]),
        timestamp=datetime.fromisoformat(row["timestamp"]),
        amount=Money(Decimal(row["amount"])),
        note=row["note"],
        payment_method_id=MethodId(method_id) if method_id is not None else None,
    )


def _entry_params(entry: SpendEntry) -> tuple[Any, ...]:
    return (
        entry.id,
        entry.timestamp.isoformat(),
        str(entry.amount),
        entry.note,
        entry.payment_method_id,
    )


def insert_entry(entry: SpendEntry, db_path: Path | None = None) -> bool:
    """Insert an entry unless one with the same id is already stored.

    Args:
        entry: Entry to insert.
        db_path: Path to the database file. If None, uses default location.

    Returns:
        True if inserted, False if the id already existed.

    Raises:
        sqlite3.Error: If database operation fails.
    """
    with _connect(db_path) as conn:
        cursor = conn.cursor()
        try:
            cursor.execute(f"INSERT OR IGNORE INTO entries ({_COLUMNS}) VALUES (?, ?, ?, ?, ?)", _entry_params(entry))
            conn.commit()
            inserted = cursor.rowcount == 1
        except sqlite3.Error:
            conn.rollback()
            raise

    logger.debug("entry_inserted", entry_id=entry.id, amount=str(entry.amount), inserted=inserted)
    return inserted


def delete_entries(entry_ids: Iterable[str], db_path: Path | None = None) -> int:
    """Delete entries by id. Unknown ids are skipped.

    Args:
        entry_ids: Ids to delete.
        db_path: Path to the database file. If None, uses default location.

    Returns:
        Number of entries actually deleted.

    Raises:
        sqlite3.Error: If database operation fails.
    """
    ids = list(entry_ids)
    if not ids:
        return 0

    with _connect(db_path) as conn:
        cursor = conn.cursor()
        try:
            placeholders = ", ".join("?" for _ in ids)
            cursor.execute(f"DELETE FROM entries WHERE id IN ({placeholders})", ids)
            conn.commit()
            deleted = cursor.rowcount
        except sqlite3.Error:
            conn.rollback()
            raise

    logger.debug("entries_deleted", requested=len(ids), deleted=deleted)
    return deleted


def get_entry(entry_id: str, db_path: Path | None = None) -> SpendEntry | None:
    """Get a single entry by id.

    Raises:
        sqlite3.Error: If database operation fails.
    """
    with _connect(db_path) as conn:
        cursor = conn.cursor()
        cursor.execute(f"SELECT {_COLUMNS} FROM entries WHERE id = ?", (entry_id,))
        row = cursor.fetchone()
        return _row_to_entry(row) if row else None


def find_entries_by_prefix(prefix: str, db_path: Path | None = None) -> list[SpendEntry]:
    """Get entries whose id starts with a prefix (short ids in the CLI).

    Raises:
        sqlite3.Error: If database operation fails.
    """
    with _connect(db_path) as conn:
        cursor = conn.cursor()
        escaped = prefix.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
        cursor.execute(
            f"SELECT {_COLUMNS} FROM entries WHERE id LIKE ? ESCAPE '\\' ORDER BY timestamp DESC",
            (escaped + "%",),
        )
        return [_row_to_entry(row) for row in cursor.fetchall()]


def get_all_entries(db_path: Path | None = None) -> list[SpendEntry]:
    """Get all entries.

    Args:
        db_path: Path to the database file. If None, uses default location.

    Returns:
        List of entries ordered by timestamp descending.

    Raises:
        sqlite3.Error: If database operation fails.
    """
    with _connect(db_path) as conn:
        cursor = conn.cursor()
        cursor.execute(f"SELECT {_COLUMNS} FROM entries ORDER BY timestamp DESC")
        return [_row_to_entry(row) for row in cursor.fetchall()]


def set_entry_note(entry_id: str, note: str | None, db_path: Path | None = None) -> bool:
    """Set or clear an entry's note.

    Args:
        entry_id: Entry id.
        note: New note; empty or None clears it.
        db_path: Path to the database file. If None, uses default location.

    Returns:
        True if the entry existed.

    Raises:
        sqlite3.Error: If database operation fails.
    """
    with _connect(db_path) as conn:
        cursor = conn.cursor()
        try:
            cursor.execute("UPDATE entries SET note = ? WHERE id = ?", (note or None, entry_id))
            conn.commit()
            return cursor.rowcount == 1
        except sqlite3.Error:
            conn.rollback()
            raise
