# passwordless_store/storage/sqlite_client.py
import sqlite3
import logging
from typing import Optional, Sequence
from datetime import datetime, timezone

from .errors import ObjectNotFoundError, StorageConfigurationError
from .interfaces import AbstractObjectStorageClient, ObjectListing, ObjectSummary
from .sqlite_base import open_sqlite_db_connection, close_sqlite_db_connection

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 1000


class SQLiteObjectStorageClient(AbstractObjectStorageClient):
    """SQLite implementation of the object storage primitives for local and single-node use."""

    def __init__(self, db_path: str, page_size: int = DEFAULT_PAGE_SIZE):
        if not db_path:
            raise StorageConfigurationError("A SQLite database path must be provided")
        if page_size <= 0:
            raise StorageConfigurationError(f"page_size must be positive, got {page_size}")
        self.db_path = db_path
        self.page_size = page_size
        self._conn: Optional[sqlite3.Connection] = None

    async def initialize(self) -> None:
        """Open the database connection and ensure the schema exists."""
        self._get_connection()
        logger.info(f"SQLiteObjectStorageClient initialized for '{self.db_path}'.")

    async def teardown(self) -> None:
        if self._conn is not None:
            close_sqlite_db_connection(self._conn)
            self._conn = None
        logger.info("SQLiteObjectStorageClient teardown.")

    def _get_connection(self) -> sqlite3.Connection:
        if self._conn is None:
            self._conn = open_sqlite_db_connection(self.db_path)
        return self._conn

    async def _execute_query(self, query: str, params: tuple = ()) -> sqlite3.Cursor:
        """Execute a SQL query with proper error handling and transaction management."""
        conn = self._get_connection()
        cursor = conn.cursor()
        try:
            logger.debug(f"Executing SQL: {query}")
            cursor.execute(query, params)
            conn.commit()
        except sqlite3.Error as e:
            logger.error(f"SQLite error executing query '{query}': {e}", exc_info=True)
            conn.rollback()
            raise
        return cursor

    async def _fetchall(self, query: str, params: tuple = ()) -> list:
        """Execute a SELECT query and return all rows."""
        conn = self._get_connection()
        cursor = conn.cursor()
        try:
            cursor.execute(query, params)
            return cursor.fetchall()
        except sqlite3.Error as e:
            logger.error(f"SQLite error during fetchall for query '{query}': {e}", exc_info=True)
            raise

    async def get_object(self, key: str) -> bytes:
        rows = await self._fetchall("SELECT body FROM token_objects WHERE object_key = ?", (key,))
        if not rows:
            raise ObjectNotFoundError(key)
        return bytes(rows[0]["body"])

    async def put_object(self, key: str, body: bytes) -> None:
        query = '''
            INSERT INTO token_objects (object_key, body, updated_at)
            VALUES (?, ?, ?)
            ON CONFLICT(object_key) DO UPDATE SET
                body=excluded.body,
                updated_at=excluded.updated_at
        '''
        now_iso = datetime.now(timezone.utc).isoformat()
        await self._execute_query(query, (key, sqlite3.Binary(body), now_iso))
        logger.debug(f"Stored object '{key}'.")

    async def delete_object(self, key: str) -> None:
        await self._execute_query("DELETE FROM token_objects WHERE object_key = ?", (key,))
        logger.debug(f"Deleted object '{key}'.")

    async def delete_objects(self, keys: Sequence[str]) -> int:
        if not keys:
            return 0
        conn = self._get_connection()
        cursor = conn.cursor()
        try:
            # executemany sidesteps the bound-parameter limit of older SQLite builds
            cursor.executemany(
                "DELETE FROM token_objects WHERE object_key = ?",
                [(key,) for key in keys],
            )
            conn.commit()
        except sqlite3.Error as e:
            logger.error(f"SQLite error during batch delete of {len(keys)} keys: {e}", exc_info=True)
            conn.rollback()
            raise
        deleted = max(cursor.rowcount, 0)
        logger.debug(f"Batch delete removed {deleted} objects.")
        return deleted

    async def list_objects(self, marker: Optional[str] = None) -> ObjectListing:
        # Fetch one extra row to learn whether another page follows
        limit = self.page_size + 1
        if marker:
            rows = await self._fetchall(
                "SELECT object_key FROM token_objects WHERE object_key > ? ORDER BY object_key LIMIT ?",
                (marker, limit),
            )
        else:
            rows = await self._fetchall(
                "SELECT object_key FROM token_objects ORDER BY object_key LIMIT ?",
                (limit,),
            )
        is_truncated = len(rows) > self.page_size
        page = [ObjectSummary(key=row["object_key"]) for row in rows[:self.page_size]]
        return ObjectListing(
            objects=page,
            is_truncated=is_truncated,
            next_marker=page[-1].key if is_truncated else None,
        )
