"""Database schema initialization and paths."""

import os
import sqlite3
from pathlib import Path

import structlog

logger = structlog.get_logger(__name__)


def get_xdg_data_home() -> Path:
    """Get XDG data directory, with fallback to ~/.local/share."""
    xdg_data = os.environ.get("XDG_DATA_HOME")
    if xdg_data:
        return Path(xdg_data)
    return Path.home() / ".local" / "share"


def get_data_dir() -> Path:
    """Directory holding the database and the widget payload."""
    return get_xdg_data_home() / "tally"


def get_db_path() -> Path:
    """Get the default database path (XDG compliant)."""
    return get_data_dir() / "tally.db"


def get_widget_path() -> Path:
    """Get the path of the shared widget payload."""
    return get_data_dir() / "widget.json"


def database_exists(db_path: Path | None = None) -> bool:
    """Check if the database file exists.

    Args:
        db_path: Path to check. If None, uses default location.

    Returns:
        True if database exists, False otherwise.
    """
    if db_path is None:
        db_path = get_db_path()
    return db_path.exists()


def init_database(db_path: Path | None = None) -> None:
    """Initialize the database with the required schema.

    Args:
        db_path: Path to the database file. If None, uses default location.

    Raises:
        sqlite3.Error: If database initialization fails.
    """
    if db_path is None:
        db_path = get_db_path()

    db_path.parent.mkdir(parents=True, exist_ok=True)

    conn = sqlite3.connect(db_path)
    cursor = conn.cursor()

    try:
        cursor.execute(
            """
            CREATE TABLE IF NOT EXISTS entries (
                id TEXT PRIMARY KEY,
                timestamp TEXT NOT NULL,
                amount TEXT NOT NULL,
                note TEXT,
                payment_method_id TEXT
            )
        """
        )

        cursor.execute("CREATE INDEX IF NOT EXISTS idx_entries_timestamp ON entries(timestamp)")

        conn.commit()
        logger.debug("database_initialized", db_path=str(db_path))

    except sqlite3.Error:
        conn.rollback()
        raise
    finally:
        conn.close()
