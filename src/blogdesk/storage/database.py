"""SQLite database schema and connection management."""

from __future__ import annotations

import sqlite3
from pathlib import Path

SCHEMA_VERSION = 1

SCHEMA_SQL = """
-- Keyword research rows (Google Keyword Planner exports + manual entries)
CREATE TABLE IF NOT EXISTS blog_keywords (
    id                 INTEGER PRIMARY KEY AUTOINCREMENT,
    keyword            TEXT NOT NULL,
    monthly_searches   INTEGER DEFAULT 0,
    competition        TEXT,
    competition_index  INTEGER,
    three_month_change TEXT,
    yoy_change         TEXT,
    top_bid_low        TEXT,
    top_bid_high       TEXT,
    category           TEXT,
    intent             TEXT,
    is_question        INTEGER DEFAULT 0,
    is_branded         INTEGER DEFAULT 0,
    audience           TEXT,
    blog_score         INTEGER DEFAULT 0,
    suggested_topics   TEXT DEFAULT '[]',
    notes              TEXT,
    created_at         TEXT DEFAULT (datetime('now')),
    updated_at         TEXT DEFAULT (datetime('now'))
);

-- Authors mirror users of the host application
CREATE TABLE IF NOT EXISTS blog_authors (
    id          INTEGER PRIMARY KEY AUTOINCREMENT,
    name        TEXT NOT NULL,
    email       TEXT NOT NULL UNIQUE,
    avatar_url  TEXT,
    bio         TEXT,
    external_id TEXT UNIQUE,
    created_at  TEXT DEFAULT (datetime('now')),
    updated_at  TEXT DEFAULT (datetime('now'))
);

CREATE TABLE IF NOT EXISTS blog_posts (
    id                 INTEGER PRIMARY KEY AUTOINCREMENT,
    title              TEXT NOT NULL,
    slug               TEXT NOT NULL UNIQUE,
    content_markdown   TEXT NOT NULL,
    content_html       TEXT,
    excerpt            TEXT,
    status             TEXT NOT NULL DEFAULT 'draft',
    featured_image_url TEXT,
    featured_image_alt TEXT,
    meta_title         TEXT,
    meta_description   TEXT,
    canonical_url      TEXT,
    published_at       TEXT,
    user_id            INTEGER NOT NULL REFERENCES blog_authors(id),
    created_at         TEXT DEFAULT (datetime('now')),
    updated_at         TEXT DEFAULT (datetime('now'))
);

-- Ordered screenshots documenting a product feature workflow
CREATE TABLE IF NOT EXISTS blog_feature_screenshots (
    id               INTEGER PRIMARY KEY AUTOINCREMENT,
    feature_key      TEXT NOT NULL,
    position         INTEGER NOT NULL DEFAULT 0,
    url              TEXT NOT NULL,
    storage_key      TEXT NOT NULL,
    alt_text         TEXT,
    caption          TEXT,
    step_description TEXT,
    created_at       TEXT DEFAULT (datetime('now')),
    updated_at       TEXT DEFAULT (datetime('now'))
);

-- Schema version tracking
CREATE TABLE IF NOT EXISTS schema_version (
    version INTEGER NOT NULL
);

-- Indexes
CREATE UNIQUE INDEX IF NOT EXISTS idx_keywords_keyword ON blog_keywords(keyword);
CREATE INDEX IF NOT EXISTS idx_keywords_category ON blog_keywords(category);
CREATE INDEX IF NOT EXISTS idx_keywords_intent ON blog_keywords(intent);
CREATE INDEX IF NOT EXISTS idx_keywords_audience ON blog_keywords(audience);
CREATE INDEX IF NOT EXISTS idx_keywords_blog_score ON blog_keywords(blog_score);
CREATE INDEX IF NOT EXISTS idx_keywords_searches ON blog_keywords(monthly_searches);
CREATE INDEX IF NOT EXISTS idx_posts_status ON blog_posts(status);
CREATE INDEX IF NOT EXISTS idx_posts_user ON blog_posts(user_id);
CREATE INDEX IF NOT EXISTS idx_screenshots_feature ON blog_feature_screenshots(feature_key, position);
"""


class Database:
    """SQLite database connection manager."""

    def __init__(self, db_path: Path):
        self.db_path = db_path
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._conn: sqlite3.Connection | None = None

    @property
    def conn(self) -> sqlite3.Connection:
        if self._conn is None:
            self._conn = sqlite3.connect(str(self.db_path))
            self._conn.execute("PRAGMA journal_mode=WAL")
            self._conn.execute("PRAGMA foreign_keys=ON")
            self._conn.row_factory = sqlite3.Row
        return self._conn

    def initialize(self):
        """Create all tables if they don't exist."""
        self.conn.executescript(SCHEMA_SQL)
        row = self.conn.execute(
            "SELECT version FROM schema_version LIMIT 1"
        ).fetchone()
        if row is None:
            self.conn.execute(
                "INSERT INTO schema_version (version) VALUES (?)",
                (SCHEMA_VERSION,),
            )
        self.conn.commit()

    def close(self):
        if self._conn:
            self._conn.close()
            self._conn = None

    def __enter__(self):
        self.initialize()
        return self

    def __exit__(self, *args):
        self.close()
