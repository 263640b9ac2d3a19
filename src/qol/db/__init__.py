"""Database module for qol local storage.

This module provides SQLite-based persistence for the key/value table and
the quotes collection.

Usage:
    from qol.db import Database

    with Database(Path("rsrc/database.db")) as db:
        db.init_schema(Path("rsrc/database.sql"))
        with db.transaction() as conn:
            conn.execute("INSERT INTO ShellCommanders ...")
"""

from .connection import Database
from .query import Action, Table, Verb, query_string
from .schema import apply_schema, load_schema

__all__ = [
    "Database",
    "Action",
    "Table",
    "Verb",
    "query_string",
    "apply_schema",
    "load_schema",
]
