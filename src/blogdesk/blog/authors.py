"""Blog authors, mirrored from users of the host application."""

from __future__ import annotations

import logging
import sqlite3

from blogdesk.errors import AuthorValidationError
from blogdesk.storage.database import Database
from blogdesk.storage.models import Author

log = logging.getLogger(__name__)

AUTHOR_FIELDS = ("name", "email", "avatar_url", "bio", "external_id")


def validate_author(fields: dict):
    errors: dict[str, list[str]] = {}

    for name in ("name", "email"):
        value = fields.get(name)
        if value is None or not str(value).strip():
            errors[name] = ["can't be blank"]

    name = fields.get("name")
    if name and len(name) > 100:
        errors.setdefault("name", []).append("should be at most 100 character(s)")

    bio = fields.get("bio")
    if bio and len(bio) > 500:
        errors.setdefault("bio", []).append("should be at most 500 character(s)")

    if errors:
        raise AuthorValidationError(errors)


def _fetch_one(db: Database, column: str, value) -> Author | None:
    row = db.conn.execute(
        f"SELECT * FROM blog_authors WHERE {column} = ?", (value,)
    ).fetchone()
    return Author(**dict(row)) if row else None


def get_author(db: Database, author_id: int) -> Author | None:
    return _fetch_one(db, "id", author_id)


def get_author_by_email(db: Database, email: str) -> Author | None:
    return _fetch_one(db, "email", email)


def get_author_by_external_id(db: Database, external_id: str) -> Author | None:
    return _fetch_one(db, "external_id", external_id)


def create_author(db: Database, fields: dict) -> Author:
    fields = {k: v for k, v in fields.items() if k in AUTHOR_FIELDS}
    validate_author(fields)

    names = ", ".join(fields)
    placeholders = ", ".join("?" for _ in fields)
    try:
        cursor = db.conn.execute(
            f"INSERT INTO blog_authors ({names}) VALUES ({placeholders})",
            list(fields.values()),
        )
    except sqlite3.IntegrityError as e:
        db.conn.rollback()
        column = "external_id" if "external_id" in str(e) else "email"
        raise AuthorValidationError({column: ["has already been taken"]}) from e
    db.conn.commit()
    return get_author(db, cursor.lastrowid)


def get_or_create_author(db: Database, fields: dict) -> Author:
    """Find the author for a host-app user by external_id, creating it if new."""
    external_id = fields.get("external_id")
    if external_id is not None:
        existing = get_author_by_external_id(db, str(external_id))
        if existing is not None:
            return existing
        fields = {**fields, "external_id": str(external_id)}

    author = create_author(db, fields)
    log.info("Created blog author %s (%s)", author.id, author.email)
    return author


def list_authors(db: Database) -> list[Author]:
    rows = db.conn.execute("SELECT * FROM blog_authors ORDER BY name").fetchall()
    return [Author(**dict(r)) for r in rows]
