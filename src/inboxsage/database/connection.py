"""Database connection management."""

import sqlite3
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

from inboxsage.utils.exceptions import DatabaseError
from inboxsage.utils.logging import get_logger

logger = get_logger(__name__)

SCHEMA_PATH = Path(__file__).parent / "schema.sql"

_WRITE_PREFIXES = ("INSERT", "UPDATE", "DELETE", "CREATE", "DROP", "ALTER")


class DatabaseConnection:
    """SQLite database connection manager.

    One connection is shared by every repository and every per-user task in
    the process. Writes are serialized through a re-entrant lock; the unique
    constraints in the schema are what keep concurrent ingestion from
    duplicating rows.
    """

    def __init__(self, db_path: Path | str) -> None:
        """Initialize database connection.

        Args:
            db_path: Path to SQLite database file
        """
        self.db_path = Path(db_path)
        self._connection: Optional[sqlite3.Connection] = None
        self._write_lock = threading.RLock()

    @property
    def conn(self) -> sqlite3.Connection:
        """Get database connection."""
        return self.connect()

    def connect(self) -> sqlite3.Connection:
        """Get or create database connection.

        Returns:
            SQLite connection object

        Raises:
            DatabaseError: If the database cannot be opened
        """
        if self._connection is None:
            try:
                self.db_path.parent.mkdir(parents=True, exist_ok=True)
                connection = sqlite3.connect(
                    str(self.db_path),
                    timeout=30.0,
                    check_same_thread=False,
                )
                connection.execute("PRAGMA foreign_keys = ON")
                connection.execute("PRAGMA journal_mode = WAL")
                connection.execute("PRAGMA synchronous = NORMAL")
                connection.execute("PRAGMA busy_timeout = 30000")
                connection.row_factory = sqlite3.Row

                self._initialize_schema(connection)
            except (sqlite3.Error, OSError) as e:
                logger.error("database_connect_failed", path=str(self.db_path), error=str(e))
                raise DatabaseError(f"Failed to open database {self.db_path}: {e}") from e

            self._connection = connection
            logger.info("database_connected", path=str(self.db_path))

        return self._connection

    def _initialize_schema(self, connection: sqlite3.Connection) -> None:
        """Create tables that do not exist yet."""
        schema_sql = SCHEMA_PATH.read_text(encoding="utf-8")
        connection.executescript(schema_sql)
        connection.commit()

    def close(self) -> None:
        """Close database connection with a WAL checkpoint."""
        if self._connection:
            try:
                self._connection.execute("PRAGMA wal_checkpoint(TRUNCATE)")
            except sqlite3.Error as e:
                logger.warning("wal_checkpoint_failed", error=str(e))

            self._connection.close()
            self._connection = None

            logger.info("database_closed")

    def execute(self, query: str, params: tuple = ()) -> sqlite3.Cursor:
        """Execute a database query.

        Args:
            query: SQL query string
            params: Query parameters

        Returns:
            Cursor object
        """
        conn = self.connect()
        if query.lstrip().upper().startswith(_WRITE_PREFIXES):
            with self._write_lock:
                return conn.execute(query, params)
        return conn.execute(query, params)

    def executemany(self, query: str, params: list) -> sqlite3.Cursor:
        """Execute a query with multiple parameter sets."""
        conn = self.connect()
        with self._write_lock:
            return conn.executemany(query, params)

    def commit(self) -> None:
        """Commit current transaction."""
        if self._connection:
            with self._write_lock:
                self._connection.commit()

    def rollback(self) -> None:
        """Rollback current transaction."""
        if self._connection:
            self._connection.rollback()

    @contextmanager
    def transaction(self) -> Iterator[sqlite3.Connection]:
        """Run several writes atomically; rolls back on any exception."""
        conn = self.connect()
        with self._write_lock:
            try:
                yield conn
                conn.commit()
            except BaseException:
                conn.rollback()
                raise

    def __enter__(self) -> "DatabaseConnection":
        self.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:  # type: ignore
        if exc_type is not None:
            self.rollback()
        else:
            self.commit()
        self.close()


def init_database(db_path: Path | str) -> DatabaseConnection:
    """Create the database file and schema if needed.

    Args:
        db_path: Path to SQLite database file

    Returns:
        Connected DatabaseConnection
    """
    db = DatabaseConnection(db_path)
    db.connect()

    logger.info("database_initialized", path=str(db_path))

    return db
