"""Ordered screenshots that document a product feature's workflow.

Only the records live here. Uploading the image bytes is up to the host;
``storage_key_for`` gives it the path to upload to.
"""

from __future__ import annotations

import logging
import re
import sqlite3
import uuid
from dataclasses import replace
from datetime import datetime, timezone

from blogdesk.errors import ScreenshotValidationError
from blogdesk.storage.database import Database
from blogdesk.storage.models import FeatureScreenshot

log = logging.getLogger(__name__)

STORAGE_PREFIX = "blog/images/feature-screenshots"

EDITABLE_FIELDS = ("alt_text", "caption", "step_description", "position", "url", "storage_key")

MAX_LENGTHS = {
    "alt_text": 255,
    "caption": 500,
    "step_description": 200,
}


def validate_screenshot(shot: FeatureScreenshot):
    errors: dict[str, list[str]] = {}

    for name in ("feature_key", "url", "storage_key"):
        value = getattr(shot, name)
        if value is None or not str(value).strip():
            errors[name] = ["can't be blank"]

    for name, limit in MAX_LENGTHS.items():
        value = getattr(shot, name)
        if value is not None and len(value) > limit:
            errors.setdefault(name, []).append(f"should be at most {limit} character(s)")

    if errors:
        raise ScreenshotValidationError(errors)


def _row_to_screenshot(row: sqlite3.Row) -> FeatureScreenshot:
    return FeatureScreenshot(**dict(row))


def sanitize_filename(filename: str) -> str:
    name = re.sub(r"[^\w.\-]", "-", filename.lower())
    name = re.sub(r"-+", "-", name)
    return name.strip("-")[:100]


def storage_key_for(feature_key: str, filename: str, now: datetime | None = None) -> str:
    """Storage path for a new screenshot upload.

    blog/images/feature-screenshots/<key>/<yyyy>/<mm>/<uuid8>-<file>
    """
    now = now or datetime.now(timezone.utc)
    safe_key = re.sub(r"[^\w-]", "_", feature_key)
    prefix = uuid.uuid4().hex[:8]
    return (
        f"{STORAGE_PREFIX}/{safe_key}/{now.year}/{now.month:02d}/"
        f"{prefix}-{sanitize_filename(filename)}"
    )


# ── Reads ──────────────────────────────────────────────────────────


def list_screenshots(db: Database, feature_key: str) -> list[FeatureScreenshot]:
    rows = db.conn.execute(
        """SELECT * FROM blog_feature_screenshots
           WHERE feature_key = ? ORDER BY position, id""",
        (feature_key,),
    ).fetchall()
    return [_row_to_screenshot(r) for r in rows]


def _group(rows: list[sqlite3.Row]) -> dict[str, list[FeatureScreenshot]]:
    grouped: dict[str, list[FeatureScreenshot]] = {}
    for row in rows:
        shot = _row_to_screenshot(row)
        grouped.setdefault(shot.feature_key, []).append(shot)
    return grouped


def list_screenshots_by_features(
    db: Database, feature_keys: list[str]
) -> dict[str, list[FeatureScreenshot]]:
    """Screenshots for several features, keyed by feature."""
    if not feature_keys:
        return {}
    placeholders = ",".join("?" for _ in feature_keys)
    rows = db.conn.execute(
        f"""SELECT * FROM blog_feature_screenshots
            WHERE feature_key IN ({placeholders})
            ORDER BY feature_key, position, id""",
        list(feature_keys),
    ).fetchall()
    return _group(rows)


def list_all_screenshots(db: Database) -> dict[str, list[FeatureScreenshot]]:
    rows = db.conn.execute(
        "SELECT * FROM blog_feature_screenshots ORDER BY feature_key, position, id"
    ).fetchall()
    return _group(rows)


def get_screenshot(db: Database, screenshot_id: int) -> FeatureScreenshot | None:
    row = db.conn.execute(
        "SELECT * FROM blog_feature_screenshots WHERE id = ?", (screenshot_id,)
    ).fetchone()
    return _row_to_screenshot(row) if row else None


def screenshot_counts(db: Database) -> dict[str, int]:
    rows = db.conn.execute(
        """SELECT feature_key, COUNT(id) FROM blog_feature_screenshots
           GROUP BY feature_key"""
    ).fetchall()
    return {r[0]: r[1] for r in rows}


def _next_position(db: Database, feature_key: str) -> int:
    row = db.conn.execute(
        "SELECT MAX(position) FROM blog_feature_screenshots WHERE feature_key = ?",
        (feature_key,),
    ).fetchone()
    return 0 if row[0] is None else row[0] + 1


# ── Writes ─────────────────────────────────────────────────────────


def create_screenshot(
    db: Database, feature_key: str, url: str, storage_key: str, **attrs
) -> FeatureScreenshot:
    """Append a screenshot after the feature's existing ones."""
    shot = FeatureScreenshot(
        feature_key=feature_key,
        url=url,
        storage_key=storage_key,
        alt_text=attrs.get("alt_text") or f"Screenshot of {feature_key}",
        caption=attrs.get("caption"),
        step_description=attrs.get("step_description"),
    )
    validate_screenshot(shot)
    shot.position = _next_position(db, feature_key)

    cursor = db.conn.execute(
        """INSERT INTO blog_feature_screenshots
           (feature_key, position, url, storage_key, alt_text, caption, step_description)
           VALUES (?, ?, ?, ?, ?, ?, ?)""",
        (
            shot.feature_key,
            shot.position,
            shot.url,
            shot.storage_key,
            shot.alt_text,
            shot.caption,
            shot.step_description,
        ),
    )
    db.conn.commit()
    log.debug("Added screenshot %s to %s at position %d", cursor.lastrowid, feature_key, shot.position)
    return get_screenshot(db, cursor.lastrowid)


def update_screenshot(db: Database, screenshot: FeatureScreenshot, changes: dict) -> FeatureScreenshot:
    """Update a screenshot's metadata."""
    changes = {k: v for k, v in changes.items() if k in EDITABLE_FIELDS}
    updated = replace(screenshot, **changes)
    validate_screenshot(updated)
    if not changes:
        return screenshot

    assignments = ", ".join(f"{name} = ?" for name in changes)
    db.conn.execute(
        f"UPDATE blog_feature_screenshots SET {assignments}, updated_at = ? WHERE id = ?",
        list(changes.values()) + [datetime.now().isoformat(), screenshot.id],
    )
    db.conn.commit()
    return get_screenshot(db, screenshot.id)


def delete_screenshot(db: Database, screenshot: FeatureScreenshot) -> bool:
    """Delete the record. Removing the stored file is the caller's job."""
    cursor = db.conn.execute(
        "DELETE FROM blog_feature_screenshots WHERE id = ?", (screenshot.id,)
    )
    db.conn.commit()
    return cursor.rowcount > 0


def reorder_screenshots(db: Database, feature_key: str, screenshot_ids: list[int]):
    """Set positions from the order of ``screenshot_ids``.

    Ids belonging to another feature are ignored.
    """
    with db.conn:
        for position, screenshot_id in enumerate(screenshot_ids):
            db.conn.execute(
                """UPDATE blog_feature_screenshots SET position = ?
                   WHERE id = ? AND feature_key = ?""",
                (position, screenshot_id, feature_key),
            )


def move_screenshot(db: Database, screenshot: FeatureScreenshot, new_position: int) -> FeatureScreenshot:
    """Move one screenshot, shifting the ones between its old and new spot."""
    old_position = screenshot.position
    feature_key = screenshot.feature_key

    with db.conn:
        if new_position > old_position:
            db.conn.execute(
                """UPDATE blog_feature_screenshots SET position = position - 1
                   WHERE feature_key = ? AND position > ? AND position <= ?""",
                (feature_key, old_position, new_position),
            )
        elif new_position < old_position:
            db.conn.execute(
                """UPDATE blog_feature_screenshots SET position = position + 1
                   WHERE feature_key = ? AND position >= ? AND position < ?""",
                (feature_key, new_position, old_position),
            )
        db.conn.execute(
            "UPDATE blog_feature_screenshots SET position = ? WHERE id = ?",
            (new_position, screenshot.id),
        )

    return get_screenshot(db, screenshot.id)
