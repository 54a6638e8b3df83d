"""Keyword persistence on top of the BlogDesk SQLite database."""

from __future__ import annotations

import json
import sqlite3
from datetime import datetime
from decimal import Decimal

from blogdesk.errors import DuplicateKeyword, KeywordNotFound
from blogdesk.storage.database import Database
from blogdesk.storage.models import KeywordRecord

# Columns written on insert/update, in table order
KEYWORD_COLUMNS = (
    "keyword",
    "monthly_searches",
    "competition",
    "competition_index",
    "three_month_change",
    "yoy_change",
    "top_bid_low",
    "top_bid_high",
    "category",
    "intent",
    "is_question",
    "is_branded",
    "audience",
    "blog_score",
    "suggested_topics",
    "notes",
)


def _to_db(name: str, value):
    if value is None:
        return None
    if name in ("top_bid_low", "top_bid_high"):
        return str(value)
    if name in ("is_question", "is_branded"):
        return int(bool(value))
    if name == "suggested_topics":
        return json.dumps(list(value))
    return value


def row_to_keyword(row: sqlite3.Row) -> KeywordRecord:
    """Convert a blog_keywords row into a KeywordRecord."""
    data = dict(row)
    for name in ("top_bid_low", "top_bid_high"):
        if data[name] is not None:
            data[name] = Decimal(data[name])
    for name in ("is_question", "is_branded"):
        if data[name] is not None:
            data[name] = bool(data[name])
    data["suggested_topics"] = json.loads(data["suggested_topics"] or "[]")
    return KeywordRecord(**data)


class KeywordRepository:
    """Store for keyword records.

    The unique index on ``blog_keywords.keyword`` is the final guard against
    duplicates; a violation surfaces as DuplicateKeyword.
    """

    def __init__(self, db: Database):
        self.db = db

    # ── Lookups ────────────────────────────────────────────────────

    def get(self, keyword_id: int) -> KeywordRecord | None:
        row = self.db.conn.execute(
            "SELECT * FROM blog_keywords WHERE id = ?", (keyword_id,)
        ).fetchone()
        return row_to_keyword(row) if row else None

    def find_by_text(self, text: str) -> KeywordRecord | None:
        """Exact (case-sensitive) lookup by keyword text."""
        row = self.db.conn.execute(
            "SELECT * FROM blog_keywords WHERE keyword = ?", (text,)
        ).fetchone()
        return row_to_keyword(row) if row else None

    def list_all(self) -> list[KeywordRecord]:
        rows = self.db.conn.execute(
            "SELECT * FROM blog_keywords ORDER BY id"
        ).fetchall()
        return [row_to_keyword(r) for r in rows]

    def count(self) -> int:
        row = self.db.conn.execute("SELECT COUNT(*) FROM blog_keywords").fetchone()
        return row[0]

    # ── Writes ─────────────────────────────────────────────────────

    def insert(self, record: KeywordRecord) -> KeywordRecord:
        """Persist a new record and return it with id and timestamps."""
        columns = ", ".join(KEYWORD_COLUMNS)
        placeholders = ", ".join("?" for _ in KEYWORD_COLUMNS)
        values = [_to_db(name, getattr(record, name)) for name in KEYWORD_COLUMNS]
        try:
            cursor = self.db.conn.execute(
                f"INSERT INTO blog_keywords ({columns}) VALUES ({placeholders})",
                values,
            )
        except sqlite3.IntegrityError as e:
            self.db.conn.rollback()
            raise DuplicateKeyword(record.keyword) from e
        self.db.conn.commit()
        return self.get(cursor.lastrowid)

    def update_fields(self, keyword_id: int, fields: dict) -> KeywordRecord:
        """Write the given columns for one record and return the fresh row."""
        existing = self.get(keyword_id)
        if existing is None:
            raise KeywordNotFound(keyword_id)

        fields = {k: v for k, v in fields.items() if k in KEYWORD_COLUMNS}
        if not fields:
            return existing

        assignments = ", ".join(f"{name} = ?" for name in fields)
        values = [_to_db(name, value) for name, value in fields.items()]
        values.extend([datetime.now().isoformat(), keyword_id])
        try:
            self.db.conn.execute(
                f"UPDATE blog_keywords SET {assignments}, updated_at = ? WHERE id = ?",
                values,
            )
        except sqlite3.IntegrityError as e:
            self.db.conn.rollback()
            raise DuplicateKeyword(fields.get("keyword", existing.keyword)) from e
        self.db.conn.commit()
        return self.get(keyword_id)

    def delete(self, keyword_id: int) -> bool:
        cursor = self.db.conn.execute(
            "DELETE FROM blog_keywords WHERE id = ?", (keyword_id,)
        )
        self.db.conn.commit()
        return cursor.rowcount > 0

    def delete_all(self) -> int:
        cursor = self.db.conn.execute("DELETE FROM blog_keywords")
        self.db.conn.commit()
        return cursor.rowcount
