"""Key/value items stored in the ShellCommanders table.

Keys (VAR) are unique; the storage engine enforces it through the UNIQUE
constraint and the conflict clause of each insert.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .db import Database
from .errors import NotFoundError


@dataclass
class Item:
    """A ShellCommanders row."""
    id: int
    var: str
    val: Optional[str] = None

    def to_dict(self) -> dict:
        return {"id": self.id, "var": self.var, "val": self.val}


class ItemStore:
    """Read/write access to ShellCommanders."""

    def __init__(self, db: Database):
        self.db = db

    def insert(self, var: str, val: Optional[str] = None) -> int:
        """Insert an item, leaving an existing item with the same key untouched.

        Returns:
            Number of rows inserted (0 when the key already exists)
        """
        cursor = self.db.execute(
            "INSERT OR IGNORE INTO ShellCommanders (VAR, VAL) VALUES (?, ?)",
            (var, val),
        )
        return cursor.rowcount

    def insert_or_update(self, var: str, val: Optional[str] = None) -> int:
        """Insert an item or overwrite the value of an existing key.

        Returns:
            Number of rows affected
        """
        cursor = self.db.execute(
            """
            INSERT INTO ShellCommanders (VAR, VAL) VALUES (?, ?)
            ON CONFLICT(VAR) DO UPDATE SET VAL = excluded.VAL
            """,
            (var, val),
        )
        return cursor.rowcount

    def get_by_id(self, item_id: int) -> Item:
        """Get an item by ID.

        Raises:
            NotFoundError: If no item has this ID
        """
        row = self.db.fetchone(
            "SELECT ID, VAR, VAL FROM ShellCommanders WHERE ID = ?",
            (item_id,),
        )
        if row is None:
            raise NotFoundError(f"No item with id {item_id}")
        return self._row_to_item(row)

    def get_by_var(self, var: str) -> Item:
        """Get an item by key.

        Raises:
            NotFoundError: If no item has this key
        """
        row = self.db.fetchone(
            "SELECT ID, VAR, VAL FROM ShellCommanders WHERE VAR = ?",
            (var,),
        )
        if row is None:
            raise NotFoundError(f"No item with key {var!r}")
        return self._row_to_item(row)

    def get_all(self) -> list[Item]:
        """Every item in the table, in storage order."""
        rows = self.db.fetchall("SELECT ID, VAR, VAL FROM ShellCommanders")
        return [self._row_to_item(row) for row in rows]

    def update(self, item_id: int, var: str, val: Optional[str] = None) -> int:
        """Overwrite both fields of an item.

        Returns:
            Number of rows updated; 0 if the ID does not exist
        """
        cursor = self.db.execute(
            "UPDATE ShellCommanders SET VAR = ?, VAL = ? WHERE ID = ?",
            (var, val, item_id),
        )
        return cursor.rowcount

    def update_by_var(self, var: str, val: Optional[str] = None) -> int:
        """Overwrite the value stored under a key.

        Returns:
            Number of rows updated; 0 if the key does not exist
        """
        cursor = self.db.execute(
            "UPDATE ShellCommanders SET VAL = ? WHERE VAR = ?",
            (val, var),
        )
        return cursor.rowcount

    def delete(self, item_id: int) -> int:
        """Delete an item by ID. Returns the number of rows removed."""
        cursor = self.db.execute(
            "DELETE FROM ShellCommanders WHERE ID = ?",
            (item_id,),
        )
        return cursor.rowcount

    def exists(self, item_id: int) -> bool:
        row = self.db.fetchone(
            "SELECT EXISTS (SELECT 1 FROM ShellCommanders WHERE ID = ?)",
            (item_id,),
        )
        return bool(row[0])

    def exists_by_var(self, var: str) -> bool:
        row = self.db.fetchone(
            "SELECT EXISTS (SELECT 1 FROM ShellCommanders WHERE VAR = ?)",
            (var,),
        )
        return bool(row[0])

    def compact(self) -> None:
        """Reclaim space left by deleted and updated rows."""
        self.db.compact()

    # Key-named aliases
    get_by_key = get_by_var
    update_by_key = update_by_var
    exists_by_key = exists_by_var

    def _row_to_item(self, row) -> Item:
        """Convert a database row to an Item."""
        return Item(id=row["ID"], var=row["VAR"], val=row["VAL"])
