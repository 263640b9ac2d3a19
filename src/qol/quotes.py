"""Quotes and the quote of the day.

Quotes are unique by text; adding a known quote again updates its author.
DailyQuotes records which quote was shown on each calendar day so the
same quote comes back for the whole day.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from pathlib import Path
from typing import Optional

import yaml

from .db import Action, Database, Table, query_string
from .errors import NotFoundError, QolError

logger = logging.getLogger(__name__)


def time_now() -> datetime:
    """Current time in the local timezone."""
    return datetime.now().astimezone()


@dataclass
class Quote:
    """A stored quote."""
    id: int
    quote: str
    author: Optional[str] = None

    def to_dict(self) -> dict:
        return {"id": self.id, "quote": self.quote, "author": self.author}


@dataclass
class DailyQuote:
    """The quote assigned to one calendar day."""
    id: int
    quote_id: int
    date: str  # YYYY-MM-DD


class QuoteStore:
    """Read/write access to Quotes and DailyQuotes."""

    def __init__(self, db: Database):
        self.db = db

    def add(self, quote: str, author: Optional[str] = None) -> int:
        """Add a quote, or update the author of an existing one.

        Returns:
            ID of the stored quote
        """
        quote = quote.strip()
        if not quote:
            raise QolError("Quote text must not be empty")

        self.db.execute(query_string(Action.insert(Table.QUOTES)), (quote, author))
        row = self.db.fetchone("SELECT ID FROM Quotes WHERE QUOTE = ?", (quote,))
        return row["ID"]

    def get(self, quote_id: int) -> Quote:
        """Get a quote by ID.

        Raises:
            NotFoundError: If no quote has this ID
        """
        row = self.db.fetchone(query_string(Action.select(Table.QUOTES)), (quote_id,))
        if row is None:
            raise NotFoundError(f"No quote with id {quote_id}")
        return self._row_to_quote(row)

    def list_quotes(self) -> list[Quote]:
        rows = self.db.fetchall("SELECT ID, QUOTE, AUTHOR FROM Quotes ORDER BY ID")
        return [self._row_to_quote(row) for row in rows]

    def update(self, quote_id: int, quote: str, author: Optional[str] = None) -> int:
        """Overwrite a quote. Returns the number of rows updated."""
        cursor = self.db.execute(
            query_string(Action.update(Table.QUOTES)),
            (quote, author, quote_id),
        )
        return cursor.rowcount

    def delete(self, quote_id: int) -> int:
        """Delete a quote and the days it was shown on."""
        cursor = self.db.execute(query_string(Action.delete(Table.QUOTES)), (quote_id,))
        return cursor.rowcount

    def random(self) -> Quote:
        """Pick any stored quote.

        Raises:
            NotFoundError: If there are no quotes
        """
        row = self.db.fetchone(
            "SELECT ID, QUOTE, AUTHOR FROM Quotes ORDER BY RANDOM() LIMIT 1"
        )
        if row is None:
            raise NotFoundError("No quotes stored; add one with 'qol quote add'")
        return self._row_to_quote(row)

    def daily(self, day: Optional[date] = None) -> Quote:
        """Quote of the day, assigning one at random on first request.

        Args:
            day: Calendar day (default: today, local time)

        Raises:
            NotFoundError: If there are no quotes to pick from
        """
        day_str = (day or time_now().date()).isoformat()
        row = self.db.fetchone(
            """
            SELECT q.ID, q.QUOTE, q.AUTHOR
            FROM DailyQuotes d
            JOIN Quotes q ON q.ID = d.QUOTE_ID
            WHERE d.DATE = ?
            """,
            (day_str,),
        )
        if row is not None:
            return self._row_to_quote(row)

        quote = self.random()
        self.db.execute(
            query_string(Action.insert(Table.DAILY_QUOTES)),
            (quote.id, day_str),
        )
        logger.debug("Assigned quote %d to %s", quote.id, day_str)
        return quote

    def history(self, limit: int = 7) -> list[DailyQuote]:
        """Most recent daily assignments, newest first."""
        rows = self.db.fetchall(
            "SELECT ID, QUOTE_ID, DATE FROM DailyQuotes ORDER BY DATE DESC LIMIT ?",
            (limit,),
        )
        return [
            DailyQuote(id=row["ID"], quote_id=row["QUOTE_ID"], date=row["DATE"])
            for row in rows
        ]

    def import_yaml(self, path: Path) -> int:
        """Add quotes from a YAML file.

        Accepts either a list of mappings or a mapping with a ``quotes`` key:

            quotes:
              - quote: Simplicity is prerequisite for reliability.
                author: Edsger W. Dijkstra

        Returns:
            Number of quotes added or updated
        """
        try:
            with open(path, encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            raise QolError(f"Cannot read quotes file {path}: {e}") from e

        if isinstance(data, dict):
            data = data.get("quotes")
        if not isinstance(data, list):
            raise QolError(f"Quotes file {path} must contain a list of quotes")

        count = 0
        for entry in data:
            if not isinstance(entry, dict) or not entry.get("quote"):
                raise QolError(f"Invalid quote entry in {path}: {entry!r}")
            self.add(str(entry["quote"]), entry.get("author"))
            count += 1

        logger.info("Imported %d quotes from %s", count, path)
        return count

    def _row_to_quote(self, row) -> Quote:
        return Quote(id=row["ID"], quote=row["QUOTE"], author=row["AUTHOR"])
