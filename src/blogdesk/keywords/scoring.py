"""Blog-worthiness score for keyword records."""

from __future__ import annotations

from blogdesk.keywords.classifier import is_low_value_keyword
from blogdesk.storage.models import KeywordRecord

DEFAULT_COMPETITION_INDEX = 50

# (minimum monthly searches, points), highest band first
VOLUME_BANDS = [(10_000, 30), (5000, 25), (1000, 20), (500, 15), (100, 10)]
VOLUME_FLOOR = 5

# (maximum competition index, points), lowest band first
COMPETITION_BANDS = [(30, 25), (50, 20), (70, 15), (85, 10)]
COMPETITION_CEILING = 5

INTENT_POINTS = {
    "informational": 20,
    "commercial": 15,
    "transactional": 5,
    "navigational": 0,
}
INTENT_FALLBACK = 10

QUESTION_BONUS = 15
BRANDED_PENALTY = -30
LOW_VALUE_PENALTY = -40


def volume_points(monthly_searches: int | None) -> int:
    searches = monthly_searches or 0
    for minimum, points in VOLUME_BANDS:
        if searches >= minimum:
            return points
    return VOLUME_FLOOR


def competition_points(competition_index: int | None) -> int:
    index = DEFAULT_COMPETITION_INDEX if competition_index is None else competition_index
    for maximum, points in COMPETITION_BANDS:
        if index <= maximum:
            return points
    return COMPETITION_CEILING


def score_breakdown(record: KeywordRecord) -> dict[str, int]:
    """Each scoring term for a record. Terms sum to the unclamped score."""
    return {
        "volume": volume_points(record.monthly_searches),
        "competition": competition_points(record.competition_index),
        "intent": INTENT_POINTS.get(record.intent, INTENT_FALLBACK),
        "question": QUESTION_BONUS if record.is_question else 0,
        "branded": BRANDED_PENALTY if record.is_branded else 0,
        "low_value": LOW_VALUE_PENALTY if is_low_value_keyword(record.keyword or "") else 0,
    }


def compute_blog_score(record: KeywordRecord) -> int:
    """Weighted blog score, never below zero."""
    return max(sum(score_breakdown(record).values()), 0)
