"""Query strings for the qol tables.

Every table has an ID primary key, two data columns and one unique
column used as the upsert conflict target. query_string() builds the
parameterized statement for any (verb, table) pair.
"""

from dataclasses import dataclass
from enum import Enum


class Table(Enum):
    """Tables declared in rsrc/database.sql."""

    SHELL_COMMANDERS = "ShellCommanders"
    QUOTES = "Quotes"
    DAILY_QUOTES = "DailyQuotes"

    def __str__(self) -> str:
        return self.value


class Verb(Enum):
    INSERT = "insert"
    UPDATE = "update"
    DELETE = "delete"
    SELECT = "select"


@dataclass(frozen=True)
class TableColumns:
    """Data columns of a table and its conflict target."""

    columns: tuple[str, str]
    unique: str

    @property
    def other(self) -> str:
        """The data column that is not the conflict target."""
        first, second = self.columns
        return second if self.unique == first else first


TABLE_COLUMNS: dict[Table, TableColumns] = {
    Table.SHELL_COMMANDERS: TableColumns(columns=("VAR", "VAL"), unique="VAR"),
    Table.QUOTES: TableColumns(columns=("QUOTE", "AUTHOR"), unique="QUOTE"),
    Table.DAILY_QUOTES: TableColumns(columns=("QUOTE_ID", "DATE"), unique="DATE"),
}


@dataclass(frozen=True)
class Action:
    """A verb applied to a table."""

    verb: Verb
    table: Table

    @classmethod
    def insert(cls, table: Table) -> "Action":
        return cls(Verb.INSERT, table)

    @classmethod
    def update(cls, table: Table) -> "Action":
        return cls(Verb.UPDATE, table)

    @classmethod
    def delete(cls, table: Table) -> "Action":
        return cls(Verb.DELETE, table)

    @classmethod
    def select(cls, table: Table) -> "Action":
        return cls(Verb.SELECT, table)


def query_string(action: Action) -> str:
    """Build the SQL for an action.

    Parameters, in order:
        INSERT: (col1, col2)         upsert on the table's unique column
        UPDATE: (col1, col2, id)
        DELETE: (id,)
        SELECT: (id,)                returns ID, col1, col2
    """
    columns = TABLE_COLUMNS[action.table]
    first, second = columns.columns
    table = action.table.value

    if action.verb is Verb.INSERT:
        return (
            f"INSERT INTO {table} ({first}, {second}) VALUES (?, ?) "
            f"ON CONFLICT({columns.unique}) DO UPDATE SET {columns.other} = excluded.{columns.other}"
        )
    if action.verb is Verb.UPDATE:
        return f"UPDATE {table} SET {first} = ?, {second} = ? WHERE ID = ?"
    if action.verb is Verb.DELETE:
        return f"DELETE FROM {table} WHERE ID = ?"
    return f"SELECT ID, {first}, {second} FROM {table} WHERE ID = ?"
