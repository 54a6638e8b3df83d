"""Keyword operations: create, update, delete, and bulk rescoring."""

from __future__ import annotations

import logging
from dataclasses import replace

from blogdesk.errors import KeywordNotFound
from blogdesk.keywords.classifier import detect_audience
from blogdesk.keywords.derive import KEYWORD_FIELDS, apply_update, build_keyword
from blogdesk.keywords.scoring import compute_blog_score
from blogdesk.storage.models import KeywordRecord
from blogdesk.storage.repository import KeywordRepository

log = logging.getLogger(__name__)


def create_keyword(repo: KeywordRepository, fields: dict) -> KeywordRecord:
    """Validate, classify, score and insert a keyword.

    Raises KeywordValidationError or DuplicateKeyword.
    """
    record = build_keyword(fields)
    return repo.insert(record)


def update_keyword(
    repo: KeywordRepository, record: KeywordRecord, changes: dict
) -> KeywordRecord:
    """Apply ``changes`` to a stored keyword and persist the result."""
    if record.id is None:
        raise KeywordNotFound(record.id)
    updated = apply_update(record, changes)
    fields = {name: getattr(updated, name) for name in KEYWORD_FIELDS}
    fields["blog_score"] = updated.blog_score
    return repo.update_fields(record.id, fields)


def delete_keyword(repo: KeywordRepository, record: KeywordRecord) -> bool:
    return repo.delete(record.id)


def get_keyword(repo: KeywordRepository, keyword_id: int) -> KeywordRecord:
    """Fetch a keyword by id. Raises KeywordNotFound."""
    record = repo.get(keyword_id)
    if record is None:
        raise KeywordNotFound(keyword_id)
    return record


def get_keyword_by_text(repo: KeywordRepository, text: str) -> KeywordRecord | None:
    return repo.find_by_text(text)


def recalculate_all_scores(repo: KeywordRepository) -> int:
    """Re-derive audience and recompute blog_score for every keyword.

    Other stored fields are left alone. Returns how many records changed.
    """
    changed = 0
    for record in repo.list_all():
        audience = detect_audience(record.keyword)
        rescored = replace(record, audience=audience)
        score = compute_blog_score(rescored)

        if audience == record.audience and score == record.blog_score:
            continue

        repo.update_fields(record.id, {"audience": audience, "blog_score": score})
        changed += 1

    log.info("Recalculated scores: %d keywords changed", changed)
    return changed
