"""Schema bootstrap for the qol database.

The schema lives in a plain SQL file (rsrc/database.sql by default) and is
executed verbatim as a single batch. Statements are expected to be
idempotent (CREATE ... IF NOT EXISTS).
"""

import logging
import sqlite3
from pathlib import Path

from ..errors import SchemaApplyError, SchemaLoadError

logger = logging.getLogger(__name__)


def load_schema(schema_path: Path) -> str:
    """Read the schema file.

    Args:
        schema_path: Path to a text file of SQL statements

    Returns:
        The file contents

    Raises:
        SchemaLoadError: If the file is missing or unreadable
    """
    try:
        return Path(schema_path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise SchemaLoadError(f"Cannot read schema file {schema_path}: {e}") from e


def apply_schema(conn: sqlite3.Connection, schema_path: Path) -> None:
    """Execute every statement of the schema file as one batch.

    No rollback is attempted: if a later statement fails, the earlier ones
    remain applied.

    Raises:
        SchemaLoadError: If the file cannot be read
        SchemaApplyError: If any statement fails
    """
    sql = load_schema(schema_path)
    logger.info("Applying schema from %s", schema_path)
    try:
        conn.executescript(sql)
    except sqlite3.Error as e:
        raise SchemaApplyError(f"Failed to apply schema {schema_path}: {e}") from e


def list_tables(conn: sqlite3.Connection) -> list[str]:
    """Return user table names, sorted."""
    rows = conn.execute(
        "SELECT name FROM sqlite_master "
        "WHERE type = 'table' AND name NOT LIKE 'sqlite_%' ORDER BY name"
    ).fetchall()
    return [row[0] for row in rows]
