# passwordless_store/storage/sqlite_base.py
import sqlite3
import logging
from pathlib import Path

logger = logging.getLogger(__name__)

# Special database name for a private, process-local database
IN_MEMORY_DB_PATH = ":memory:"


def open_sqlite_db_connection(db_path: str) -> sqlite3.Connection:
    """
    Open a SQLite database connection and ensure the object table exists.

    Creates the parent directory of the database file when needed.

    Args:
        db_path: Filesystem path of the database, or ":memory:"

    Returns:
        sqlite3.Connection: The initialized database connection

    Raises:
        sqlite3.Error: If database connection fails
    """
    try:
        if db_path != IN_MEMORY_DB_PATH:
            resolved = Path(db_path).resolve()
            # Ensure the database directory structure exists
            resolved.parent.mkdir(parents=True, exist_ok=True)
            db_path = str(resolved)

        logger.info(f"Attempting to connect to SQLite DB at: {db_path}")

        # Enable thread-safe access for async callers
        conn = sqlite3.connect(db_path, check_same_thread=False)
        # Enable column access by name instead of index
        conn.row_factory = sqlite3.Row

        logger.info(f"Successfully connected to SQLite DB: {db_path}")
    except sqlite3.Error as e:
        logger.error(f"Error connecting to SQLite database at {db_path}: {e}", exc_info=True)
        raise

    init_sqlite_db(conn)
    return conn


def init_sqlite_db(conn: sqlite3.Connection) -> None:
    """
    Initialize the SQLite schema for object storage.

    Uses IF NOT EXISTS to safely handle repeated initialization calls.
    """
    cursor = conn.cursor()

    # One row per stored object, keyed like a bucket
    cursor.execute('''
    CREATE TABLE IF NOT EXISTS token_objects (
        object_key TEXT PRIMARY KEY,
        body BLOB NOT NULL,
        updated_at TEXT NOT NULL
    )
    ''')
    logger.info("Ensured 'token_objects' table exists.")

    conn.commit()


def close_sqlite_db_connection(conn: sqlite3.Connection) -> None:
    """Close a SQLite connection opened by open_sqlite_db_connection."""
    logger.info("Closing SQLite DB connection.")
    conn.close()
    logger.info("SQLite DB connection closed.")
