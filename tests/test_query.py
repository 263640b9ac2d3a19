"""Tests for the query builder."""

import pytest

from qol.config import default_schema_path
from qol.db import Action, Database, Table, Verb, query_string

PARAM_COUNTS = {
    Verb.INSERT: 2,
    Verb.UPDATE: 3,
    Verb.DELETE: 1,
    Verb.SELECT: 1,
}


@pytest.fixture
def db(tmp_path):
    database = Database(tmp_path / "test.db")
    database.init_schema(default_schema_path())
    yield database
    database.close()


class TestQueryString:
    """Tests for query_string()."""

    @pytest.mark.parametrize("verb", list(Verb))
    @pytest.mark.parametrize("table", list(Table))
    def test_every_action_compiles(self, db, verb, table):
        sql = query_string(Action(verb, table))
        params = (1,) * PARAM_COUNTS[verb]

        with db.connection() as conn:
            conn.execute(f"EXPLAIN {sql}", params).fetchall()

    def test_insert_conflict_clauses(self):
        assert query_string(Action.insert(Table.SHELL_COMMANDERS)).endswith(
            "ON CONFLICT(VAR) DO UPDATE SET VAL = excluded.VAL"
        )
        assert query_string(Action.insert(Table.QUOTES)).endswith(
            "ON CONFLICT(QUOTE) DO UPDATE SET AUTHOR = excluded.AUTHOR"
        )
        assert query_string(Action.insert(Table.DAILY_QUOTES)).endswith(
            "ON CONFLICT(DATE) DO UPDATE SET QUOTE_ID = excluded.QUOTE_ID"
        )

    def test_select(self):
        assert (
            query_string(Action.select(Table.QUOTES))
            == "SELECT ID, QUOTE, AUTHOR FROM Quotes WHERE ID = ?"
        )

    def test_table_str(self):
        assert str(Table.DAILY_QUOTES) == "DailyQuotes"

    def test_shell_commanders_upsert(self, db):
        sql = query_string(Action.insert(Table.SHELL_COMMANDERS))
        db.execute(sql, ("PAGER", "less"))
        db.execute(sql, ("PAGER", "most"))

        rows = db.fetchall("SELECT VAR, VAL FROM ShellCommanders")
        assert [(r["VAR"], r["VAL"]) for r in rows] == [("PAGER", "most")]
