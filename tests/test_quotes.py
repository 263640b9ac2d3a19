"""Tests for the QuoteStore."""

from datetime import date
from typing import get_type_hints

import pytest

from qol.config import default_schema_path
from qol.db import Database
from qol.errors import NotFoundError, QolError
from qol.quotes import DailyQuote, Quote, QuoteStore, time_now


@pytest.fixture
def db(tmp_path):
    """Create a test database."""
    database = Database(tmp_path / "database.db")
    database.init_schema(default_schema_path())
    yield database
    database.close()


@pytest.fixture
def quotes(db):
    return QuoteStore(db)


class TestQuoteStore:
    """Tests for adding and reading quotes."""

    def test_add_and_get(self, quotes):
        quote_id = quotes.add("Less is more.", "Ludwig Mies van der Rohe")

        quote = quotes.get(quote_id)
        assert quote == Quote(id=quote_id, quote="Less is more.", author="Ludwig Mies van der Rohe")

    def test_add_existing_updates_author(self, quotes):
        first = quotes.add("Less is more.", "Unknown")
        second = quotes.add("Less is more.", "Ludwig Mies van der Rohe")

        assert first == second
        assert quotes.get(first).author == "Ludwig Mies van der Rohe"
        assert len(quotes.list_quotes()) == 1

    def test_add_empty_quote(self, quotes):
        with pytest.raises(QolError):
            quotes.add("   ")

    def test_builtin_list_not_shadowed(self):
        assert not hasattr(QuoteStore, "list")
        assert get_type_hints(QuoteStore.history)["return"] == list[DailyQuote]

    def test_get_missing(self, quotes):
        with pytest.raises(NotFoundError):
            quotes.get(42)

    def test_update(self, quotes):
        quote_id = quotes.add("Old text", "A")
        assert quotes.update(quote_id, "New text", "B") == 1
        assert quotes.get(quote_id).quote == "New text"
        assert quotes.update(9999, "x", "y") == 0

    def test_list_ordered_by_id(self, quotes):
        ids = [quotes.add(text) for text in ("one", "two", "three")]
        assert [q.id for q in quotes.list_quotes()] == ids

    def test_random_empty(self, quotes):
        with pytest.raises(NotFoundError):
            quotes.random()

    def test_random(self, quotes):
        quotes.add("only one")
        assert quotes.random().quote == "only one"


class TestDailyQuote:
    """Tests for the quote of the day."""

    def test_daily_is_stable(self, quotes):
        for i in range(10):
            quotes.add(f"quote {i}")

        day = date(2024, 1, 15)
        first = quotes.daily(day)
        for _ in range(5):
            assert quotes.daily(day) == first

        history = quotes.history()
        assert len(history) == 1
        assert history[0].date == "2024-01-15"
        assert history[0].quote_id == first.id

    def test_daily_defaults_to_today(self, quotes):
        quotes.add("today's quote")
        quotes.daily()

        assert quotes.history()[0].date == time_now().date().isoformat()

    def test_daily_without_quotes(self, quotes):
        with pytest.raises(NotFoundError):
            quotes.daily(date(2024, 1, 1))

    def test_history_newest_first(self, quotes):
        quotes.add("q")
        quotes.daily(date(2024, 1, 1))
        quotes.daily(date(2024, 1, 3))
        quotes.daily(date(2024, 1, 2))

        assert [d.date for d in quotes.history(limit=2)] == ["2024-01-03", "2024-01-02"]

    def test_delete_removes_daily_entries(self, quotes):
        quote_id = quotes.add("short lived")
        quotes.daily(date(2024, 1, 1))

        assert quotes.delete(quote_id) == 1
        assert quotes.history() == []


class TestImportYaml:
    """Tests for importing quotes from YAML."""

    def test_import_list(self, quotes, tmp_path):
        path = tmp_path / "quotes.yaml"
        path.write_text(
            "- quote: Simplicity is prerequisite for reliability.\n"
            "  author: Edsger W. Dijkstra\n"
            "- quote: Make it work, make it right, make it fast.\n"
        )

        assert quotes.import_yaml(path) == 2
        stored = {q.quote: q.author for q in quotes.list_quotes()}
        assert stored["Simplicity is prerequisite for reliability."] == "Edsger W. Dijkstra"
        assert stored["Make it work, make it right, make it fast."] is None

    def test_import_mapping(self, quotes, tmp_path):
        path = tmp_path / "quotes.yaml"
        path.write_text("quotes:\n  - quote: First\n    author: Me\n")

        assert quotes.import_yaml(path) == 1

    def test_import_missing_file(self, quotes, tmp_path):
        with pytest.raises(QolError):
            quotes.import_yaml(tmp_path / "missing.yaml")

    def test_import_invalid_shape(self, quotes, tmp_path):
        path = tmp_path / "quotes.yaml"
        path.write_text("just a string\n")

        with pytest.raises(QolError):
            quotes.import_yaml(path)

    def test_import_invalid_entry(self, quotes, tmp_path):
        path = tmp_path / "quotes.yaml"
        path.write_text("- author: Nobody\n")

        with pytest.raises(QolError):
            quotes.import_yaml(path)
