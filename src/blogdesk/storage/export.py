"""JSON export of keyword research data."""

from __future__ import annotations

import json
import logging
from pathlib import Path

from blogdesk.storage.database import Database
from blogdesk.storage.repository import KeywordRepository

log = logging.getLogger(__name__)

UNCATEGORIZED = "uncategorized"


def export_keywords(db: Database, output_dir: Path) -> dict:
    """Export every keyword as organized JSON files.

    Writes ``full_export.json`` plus one ``by_category/<category>.json``
    per category, and returns a summary of what was written.
    """
    output_dir.mkdir(parents=True, exist_ok=True)

    keywords = [k.to_dict() for k in KeywordRepository(db).list_all()]
    keywords.sort(key=lambda k: (-(k["monthly_searches"] or 0), k["keyword"]))
    _write_json(output_dir / "full_export.json", keywords)

    by_cat_dir = output_dir / "by_category"
    by_cat_dir.mkdir(exist_ok=True)
    categories: dict[str, list[dict]] = {}
    for kw in keywords:
        categories.setdefault(kw["category"] or UNCATEGORIZED, []).append(kw)

    for cat, items in categories.items():
        _write_json(by_cat_dir / f"{cat}.json", items)

    log.info("Exported %d keywords to %s", len(keywords), output_dir)
    return {
        "total": len(keywords),
        "by_category": {k: len(v) for k, v in categories.items()},
    }


def _write_json(path: Path, data):
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, ensure_ascii=False)
