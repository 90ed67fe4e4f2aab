"""Database store layer - provides persistence for the application.

This module re-exports the public store API for easy importing.
"""

from tally.store.actions import AddEntry, DeleteEntries
from tally.store.interface import LedgerStore, SqliteLedgerStore
from tally.store.queries import (
    delete_entries,
    find_entries_by_prefix,
    get_all_entries,
    get_entry,
    insert_entry,
    set_entry_note,
)
from tally.store.schema import database_exists, get_db_path, get_widget_path, init_database

__all__ = [
    # Schema
    "database_exists",
    "get_db_path",
    "get_widget_path",
    "init_database",
    # Queries
    "delete_entries",
    "find_entries_by_prefix",
    "get_all_entries",
    "get_entry",
    "insert_entry",
    "set_entry_note",
    # Store
    "LedgerStore",
    "SqliteLedgerStore",
    # Undoable actions
    "AddEntry",
    "DeleteEntries",
]
