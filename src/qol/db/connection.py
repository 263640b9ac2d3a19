"""Database connection management for qol local storage."""

import logging
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Generator, Optional

from ..errors import ConstraintError, DatabaseConnectionError, QueryError
from .schema import apply_schema, list_tables

logger = logging.getLogger(__name__)


def translate_error(exc: sqlite3.Error) -> Exception:
    """Map a driver error onto the qol error taxonomy."""
    if isinstance(exc, sqlite3.IntegrityError):
        return ConstraintError(str(exc))
    return QueryError(str(exc))


class Database:
    """SQLite database wrapper holding a single connection.

    The connection is opened on construction and held until close().
    Use the instance as a context manager so it is released on every
    exit path.

    Usage:
        with Database(Path("rsrc/database.db")) as db:
            db.init_schema(Path("rsrc/database.sql"))

            with db.transaction() as conn:
                conn.execute("INSERT INTO ShellCommanders (VAR, VAL) VALUES (?, ?)", ...)
    """

    def __init__(self, db_path: Path):
        """Open the database file, creating its parent directory if needed.

        Args:
            db_path: Path to the SQLite database file

        Raises:
            DatabaseConnectionError: If the file cannot be opened
        """
        self.db_path = Path(db_path)
        self._conn: Optional[sqlite3.Connection] = None
        self._ensure_directory()
        conn = None
        try:
            conn = sqlite3.connect(str(self.db_path))
            conn.row_factory = sqlite3.Row
            # Enable foreign keys
            conn.execute("PRAGMA foreign_keys = ON")
            # Reads the file header; a corrupt file fails here
            conn.execute("PRAGMA schema_version").fetchone()
        except sqlite3.Error as e:
            if conn is not None:
                conn.close()
            raise DatabaseConnectionError(f"Cannot open database {self.db_path}: {e}") from e
        self._conn = conn
        logger.debug("Opened database %s", self.db_path)

    def _ensure_directory(self) -> None:
        """Create parent directory if it doesn't exist."""
        try:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise DatabaseConnectionError(
                f"Cannot create database directory {self.db_path.parent}: {e}"
            ) from e

    def __enter__(self) -> "Database":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def close(self) -> None:
        """Close the held connection. Safe to call more than once."""
        if self._conn is not None:
            self._conn.close()
            self._conn = None
            logger.debug("Closed database %s", self.db_path)

    @property
    def closed(self) -> bool:
        return self._conn is None

    @contextmanager
    def connection(self) -> Generator[sqlite3.Connection, None, None]:
        """Yield the held connection.

        Example:
            with db.connection() as conn:
                row = conn.execute("SELECT * FROM Quotes WHERE ID = ?", (quote_id,)).fetchone()
                if row:
                    print(row["QUOTE"])
        """
        if self._conn is None:
            raise DatabaseConnectionError(f"Database {self.db_path} is closed")
        yield self._conn

    @contextmanager
    def transaction(self) -> Generator[sqlite3.Connection, None, None]:
        """Yield the held connection with automatic commit/rollback.

        Commits on successful exit, rolls back on exception.
        """
        with self.connection() as conn:
            try:
                yield conn
                conn.commit()
            except Exception:
                conn.rollback()
                raise

    def init_schema(self, schema_path: Path) -> None:
        """Create tables and indexes from the schema file if absent."""
        with self.connection() as conn:
            apply_schema(conn, schema_path)

    def tables(self) -> list[str]:
        """Names of the user tables currently in the database."""
        with self.connection() as conn:
            return list_tables(conn)

    def execute(self, sql: str, params: tuple = ()) -> sqlite3.Cursor:
        """Execute a single write statement and commit it.

        Args:
            sql: SQL statement to execute
            params: Parameters for the statement

        Returns:
            Cursor from the execution (rowcount, lastrowid)

        Raises:
            ConstraintError: On a constraint violation
            QueryError: On any other driver error
        """
        logger.debug("execute: %s %r", " ".join(sql.split()), params)
        try:
            with self.transaction() as conn:
                return conn.execute(sql, params)
        except sqlite3.Error as e:
            raise translate_error(e) from e

    def fetchone(self, sql: str, params: tuple = ()) -> Optional[sqlite3.Row]:
        """Run a query and return its first row, or None."""
        logger.debug("fetchone: %s %r", " ".join(sql.split()), params)
        try:
            with self.connection() as conn:
                return conn.execute(sql, params).fetchone()
        except sqlite3.Error as e:
            raise translate_error(e) from e

    def fetchall(self, sql: str, params: tuple = ()) -> list[sqlite3.Row]:
        """Run a query and return every row as a list."""
        logger.debug("fetchall: %s %r", " ".join(sql.split()), params)
        try:
            with self.connection() as conn:
                return conn.execute(sql, params).fetchall()
        except sqlite3.Error as e:
            raise translate_error(e) from e

    def compact(self) -> None:
        """Rebuild the database file to reclaim free pages (VACUUM)."""
        logger.info("Vacuuming %s", self.db_path)
        try:
            with self.connection() as conn:
                conn.execute("VACUUM")
        except sqlite3.Error as e:
            raise translate_error(e) from e
