"""Blog post storage: drafts, publishing, and lookups."""

from __future__ import annotations

import logging
import sqlite3
from dataclasses import fields as dataclass_fields, replace
from datetime import datetime, timezone
from typing import Callable

from slugify import slugify as _slugify

from blogdesk.blog.markdown import render_markdown
from blogdesk.errors import DuplicateSlug, PostValidationError
from blogdesk.storage.database import Database
from blogdesk.storage.models import Post

log = logging.getLogger(__name__)

STATUSES = ("draft", "published")
SLUG_MAX_LENGTH = 200

# Fields callers may set through create/update
EDITABLE_FIELDS = (
    "title",
    "content_markdown",
    "excerpt",
    "featured_image_url",
    "featured_image_alt",
    "meta_title",
    "meta_description",
    "canonical_url",
)

MAX_LENGTHS = {
    "title": 200,
    "excerpt": 500,
    "featured_image_alt": 125,
    "meta_title": 60,
    "meta_description": 160,
}

Renderer = Callable[[str], str]


def slugify(title: str) -> str:
    """'Café, World!' -> 'cafe-world' (ASCII, lower case)."""
    return _slugify(title, max_length=SLUG_MAX_LENGTH)


def _now() -> str:
    return datetime.now(timezone.utc).replace(microsecond=0).isoformat()


def validate_post(post: Post):
    errors: dict[str, list[str]] = {}

    for name in ("title", "content_markdown"):
        value = getattr(post, name)
        if value is None or not str(value).strip():
            errors[name] = ["can't be blank"]

    for name, limit in MAX_LENGTHS.items():
        value = getattr(post, name)
        if value is not None and len(value) > limit:
            errors.setdefault(name, []).append(f"should be at most {limit} character(s)")

    if post.status not in STATUSES:
        errors.setdefault("status", []).append("is invalid")

    if "title" not in errors and not post.slug:
        errors["slug"] = ["can't be blank"]

    if errors:
        raise PostValidationError(errors)


def row_to_post(row: sqlite3.Row) -> Post:
    return Post(**dict(row))


# ── Writes ─────────────────────────────────────────────────────────


def create_post(
    db: Database,
    author_id: int,
    fields: dict,
    renderer: Renderer = render_markdown,
) -> Post:
    """Create a draft post for an author.

    The slug comes from the title; the HTML body is rendered from the
    markdown with ``renderer``.
    """
    values = {k: v for k, v in fields.items() if k in EDITABLE_FIELDS}
    post = Post(
        title=values.pop("title", None),
        slug="",
        content_markdown=values.pop("content_markdown", None),
        user_id=author_id,
        **values,
    )
    if post.title:
        post.slug = slugify(post.title)
    if post.content_markdown:
        post.content_html = renderer(post.content_markdown)

    validate_post(post)
    return _insert(db, post)


def update_post(
    db: Database,
    post: Post,
    changes: dict,
    renderer: Renderer = render_markdown,
) -> Post:
    """Edit a post's content. The slug is kept even if the title changes."""
    changes = {k: v for k, v in changes.items() if k in EDITABLE_FIELDS}
    updated = replace(post, **changes)
    if "content_markdown" in changes and updated.content_markdown:
        updated.content_html = renderer(updated.content_markdown)

    validate_post(updated)
    return _save(db, updated)


def publish_post(db: Database, post: Post) -> Post:
    """Mark a post published, stamping published_at the first time."""
    updated = replace(post, status="published", published_at=post.published_at or _now())
    log.info("Publishing post %s (%s)", post.id, post.slug)
    return _save(db, updated)


def unpublish_post(db: Database, post: Post) -> Post:
    """Return a post to draft."""
    return _save(db, replace(post, status="draft", published_at=None))


def delete_post(db: Database, post: Post) -> bool:
    cursor = db.conn.execute("DELETE FROM blog_posts WHERE id = ?", (post.id,))
    db.conn.commit()
    return cursor.rowcount > 0


def _columns(post: Post) -> dict:
    skip = {"id", "created_at", "updated_at"}
    return {f.name: getattr(post, f.name) for f in dataclass_fields(post) if f.name not in skip}


def _execute_write(db: Database, post: Post, sql: str, params: list) -> sqlite3.Cursor:
    try:
        cursor = db.conn.execute(sql, params)
    except sqlite3.IntegrityError as e:
        db.conn.rollback()
        if "slug" in str(e):
            raise DuplicateSlug(post.slug) from e
        if "FOREIGN KEY" in str(e):
            raise PostValidationError({"user_id": ["does not exist"]}) from e
        raise
    db.conn.commit()
    return cursor


def _insert(db: Database, post: Post) -> Post:
    columns = _columns(post)
    names = ", ".join(columns)
    placeholders = ", ".join("?" for _ in columns)
    cursor = _execute_write(
        db, post,
        f"INSERT INTO blog_posts ({names}) VALUES ({placeholders})",
        list(columns.values()),
    )
    log.debug("Created post %s: %s", cursor.lastrowid, post.slug)
    return get_post(db, cursor.lastrowid)


def _save(db: Database, post: Post) -> Post:
    columns = _columns(post)
    assignments = ", ".join(f"{name} = ?" for name in columns)
    params = list(columns.values()) + [datetime.now().isoformat(), post.id]
    _execute_write(
        db, post,
        f"UPDATE blog_posts SET {assignments}, updated_at = ? WHERE id = ?",
        params,
    )
    return get_post(db, post.id)


# ── Reads ──────────────────────────────────────────────────────────


def get_post(db: Database, post_id: int) -> Post | None:
    row = db.conn.execute("SELECT * FROM blog_posts WHERE id = ?", (post_id,)).fetchone()
    return row_to_post(row) if row else None


def get_post_by_slug(db: Database, slug: str) -> Post | None:
    """Any-status lookup by slug."""
    row = db.conn.execute("SELECT * FROM blog_posts WHERE slug = ?", (slug,)).fetchone()
    return row_to_post(row) if row else None


def get_published_post_by_slug(db: Database, slug: str) -> Post | None:
    row = db.conn.execute(
        "SELECT * FROM blog_posts WHERE slug = ? AND status = 'published'",
        (slug,),
    ).fetchone()
    return row_to_post(row) if row else None


def list_published_posts(db: Database, limit: int = 10, offset: int = 0) -> list[Post]:
    """Published posts, newest first."""
    rows = db.conn.execute(
        """SELECT * FROM blog_posts WHERE status = 'published'
           ORDER BY published_at DESC, id DESC LIMIT ? OFFSET ?""",
        (limit, offset),
    ).fetchall()
    return [row_to_post(r) for r in rows]


def list_all_posts(db: Database, status: str | None = None) -> list[Post]:
    sql = "SELECT * FROM blog_posts"
    params = []
    if status is not None:
        sql += " WHERE status = ?"
        params.append(status)
    sql += " ORDER BY created_at DESC, id DESC"
    return [row_to_post(r) for r in db.conn.execute(sql, params).fetchall()]


def count_by_status(db: Database) -> dict[str, int]:
    rows = db.conn.execute(
        "SELECT status, COUNT(id) FROM blog_posts GROUP BY status"
    ).fetchall()
    return {r[0]: r[1] for r in rows}


def count_published_posts(db: Database) -> int:
    return db.conn.execute(
        "SELECT COUNT(*) FROM blog_posts WHERE status = 'published'"
    ).fetchone()[0]
