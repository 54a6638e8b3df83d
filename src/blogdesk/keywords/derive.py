"""Turn caller-supplied keyword fields into a fully populated KeywordRecord.

Explicit values always win. Classification fields are derived from the
keyword text only when the caller left them out (or passed None), and the
blog score is recomputed every time.
"""

from __future__ import annotations

from dataclasses import replace
from decimal import Decimal, InvalidOperation

from blogdesk.errors import KeywordValidationError
from blogdesk.keywords.classifier import (
    AUDIENCES,
    CATEGORIES,
    INTENTS,
    detect_audience,
    detect_category,
    detect_intent,
    is_branded,
    is_question,
)
from blogdesk.keywords.scoring import compute_blog_score
from blogdesk.storage.models import KeywordRecord

# Fields a caller may set; anything else in the input is ignored.
KEYWORD_FIELDS = (
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
    "suggested_topics",
    "notes",
)

# Largest value an SQLite INTEGER column can hold
MAX_SEARCHES = 2**63 - 1

DERIVED_FIELDS = {
    "category": detect_category,
    "intent": detect_intent,
    "is_question": is_question,
    "is_branded": is_branded,
    "audience": detect_audience,
}


def _to_decimal(value) -> Decimal | None:
    if value is None or isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise InvalidOperation(value)
    return Decimal(str(value))


def cast_fields(fields: dict) -> dict:
    """Keep known fields only, converting bids to Decimal.

    Raises KeywordValidationError for values that can't be cast.
    """
    casted = {k: v for k, v in fields.items() if k in KEYWORD_FIELDS}
    errors: dict[str, list[str]] = {}

    for name in ("top_bid_low", "top_bid_high"):
        if name in casted:
            try:
                casted[name] = _to_decimal(casted[name])
            except (InvalidOperation, ValueError):
                errors.setdefault(name, []).append("is invalid")

    for name in ("monthly_searches", "competition_index"):
        value = casted.get(name)
        if value is not None and (isinstance(value, bool) or not isinstance(value, int)):
            errors.setdefault(name, []).append("is invalid")

    if errors:
        raise KeywordValidationError(errors)
    return casted


def validate_keyword_fields(fields: dict):
    """Raise KeywordValidationError if ``fields`` can't become a keyword."""
    errors: dict[str, list[str]] = {}

    keyword = fields.get("keyword")
    if not isinstance(keyword, str) or not keyword.strip():
        errors["keyword"] = ["can't be blank"]

    for name, allowed in (("category", CATEGORIES), ("intent", INTENTS), ("audience", AUDIENCES)):
        value = fields.get(name)
        if value is not None and value not in allowed:
            errors.setdefault(name, []).append("is invalid")

    searches = fields.get("monthly_searches")
    if isinstance(searches, int) and searches < 0:
        errors.setdefault("monthly_searches", []).append("must be greater than or equal to 0")
    elif isinstance(searches, int) and searches > MAX_SEARCHES:
        errors.setdefault("monthly_searches", []).append(f"must be less than or equal to {MAX_SEARCHES}")

    index = fields.get("competition_index")
    if isinstance(index, int) and not 0 <= index <= 100:
        errors.setdefault("competition_index", []).append("must be between 0 and 100")

    if errors:
        raise KeywordValidationError(errors)


def _derive_missing(record: KeywordRecord, explicit: dict) -> KeywordRecord:
    derived = {}
    for name, detector in DERIVED_FIELDS.items():
        if explicit.get(name) is None:
            derived[name] = detector(record.keyword)
    record = replace(record, **derived)
    return replace(record, blog_score=compute_blog_score(record))


def build_keyword(fields: dict) -> KeywordRecord:
    """Build a new KeywordRecord from explicit fields, deriving the rest."""
    casted = cast_fields(fields)
    validate_keyword_fields(casted)

    base = {k: v for k, v in casted.items() if k not in DERIVED_FIELDS}
    if base.get("suggested_topics") is None:
        base.pop("suggested_topics", None)
    explicit = {k: casted[k] for k in DERIVED_FIELDS if k in casted}

    record = KeywordRecord(**base, **explicit)
    return _derive_missing(record, explicit)


def apply_update(record: KeywordRecord, changes: dict) -> KeywordRecord:
    """Merge ``changes`` onto ``record``.

    When the keyword text changes, classification fields not passed in
    ``changes`` are re-derived from the new text. The score is always
    recomputed.
    """
    casted = cast_fields(changes)
    merged = {k: getattr(record, k) for k in KEYWORD_FIELDS}
    merged.update(casted)
    validate_keyword_fields(merged)

    updated = replace(record, **casted)
    if "keyword" in casted and casted["keyword"] != record.keyword:
        explicit = {k: casted[k] for k in DERIVED_FIELDS if k in casted}
        return _derive_missing(updated, explicit)

    # Fill gaps left by an explicit None
    explicit = {k: getattr(updated, k) for k in DERIVED_FIELDS}
    return _derive_missing(updated, explicit)
