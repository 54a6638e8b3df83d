"""Tests for blogdesk.keywords.derive."""

from __future__ import annotations

from decimal import Decimal

import pytest

from blogdesk.errors import KeywordValidationError
from blogdesk.keywords.derive import (
    MAX_SEARCHES,
    apply_update,
    build_keyword,
    validate_keyword_fields,
)


class TestBuildKeyword:
    def test_derives_missing_fields(self):
        record = build_keyword({
            "keyword": "how to network effectively",
            "monthly_searches": 1000,
            "competition_index": 45,
        })
        assert record.category == "networking"
        assert record.intent == "informational"
        assert record.is_question is True
        assert record.is_branded is False
        assert record.audience == "networking_focused"
        assert record.blog_score == 75

    def test_explicit_values_win(self):
        record = build_keyword({
            "keyword": "how to network effectively",
            "category": "design",
            "is_question": False,
        })
        assert record.category == "design"
        assert record.is_question is False
        # still derived
        assert record.intent == "informational"
        # 5 volume + 20 competition + 20 informational, no question bonus
        assert record.blog_score == 45

    def test_branded_question_free_keyword(self):
        record = build_keyword({"keyword": "is vistaprint good", "monthly_searches": 5000})
        assert record.is_branded is True
        assert record.is_question is False
        assert record.intent == "navigational"
        assert record.category == "printing"
        assert record.audience == "general"
        # 25 volume + 20 competition + 0 navigational - 30 branded
        assert record.blog_score == 15

    def test_explicit_none_is_derived(self):
        record = build_keyword({"keyword": "vistaprint review", "intent": None})
        assert record.intent == "navigational"

    def test_blog_score_always_computed(self):
        record = build_keyword({"keyword": "business cards", "blog_score": 999})
        assert record.blog_score != 999

    def test_omitted_searches_default_to_zero(self):
        record = build_keyword({"keyword": "business cards"})
        assert record.monthly_searches == 0

    def test_explicit_none_searches_kept(self):
        record = build_keyword({"keyword": "business cards", "monthly_searches": None})
        assert record.monthly_searches is None

    def test_bids_become_decimals(self):
        record = build_keyword({"keyword": "business cards", "top_bid_low": "1.50", "top_bid_high": 2})
        assert record.top_bid_low == Decimal("1.50")
        assert record.top_bid_high == Decimal("2")

    def test_unknown_fields_ignored(self):
        record = build_keyword({"keyword": "business cards", "id": 7, "color": "blue"})
        assert record.id is None

    def test_suggested_topics(self):
        record = build_keyword({"keyword": "business cards", "suggested_topics": ["a", "b"]})
        assert record.suggested_topics == ["a", "b"]


class TestValidation:
    def test_blank_keyword(self):
        with pytest.raises(KeywordValidationError) as exc:
            build_keyword({"keyword": "   "})
        assert exc.value.errors == {"keyword": ["can't be blank"]}

    def test_missing_keyword(self):
        with pytest.raises(KeywordValidationError):
            build_keyword({"monthly_searches": 10})

    def test_vocabularies(self):
        with pytest.raises(KeywordValidationError) as exc:
            validate_keyword_fields({
                "keyword": "cards",
                "category": "bogus",
                "intent": "bogus",
                "audience": "bogus",
            })
        assert exc.value.errors == {
            "category": ["is invalid"],
            "intent": ["is invalid"],
            "audience": ["is invalid"],
        }

    def test_negative_searches(self):
        with pytest.raises(KeywordValidationError) as exc:
            build_keyword({"keyword": "cards", "monthly_searches": -1})
        assert "monthly_searches" in exc.value.errors

    def test_searches_beyond_integer_column(self):
        with pytest.raises(KeywordValidationError) as exc:
            build_keyword({"keyword": "cards", "monthly_searches": MAX_SEARCHES + 1})
        assert exc.value.errors["monthly_searches"] == [
            f"must be less than or equal to {MAX_SEARCHES}",
        ]
        assert build_keyword({"keyword": "cards", "monthly_searches": MAX_SEARCHES}).blog_score > 0

    @pytest.mark.parametrize("index", [-1, 101])
    def test_competition_index_range(self, index):
        with pytest.raises(KeywordValidationError) as exc:
            build_keyword({"keyword": "cards", "competition_index": index})
        assert exc.value.errors["competition_index"] == ["must be between 0 and 100"]

    def test_competition_index_bounds_allowed(self):
        assert build_keyword({"keyword": "cards", "competition_index": 0}).competition_index == 0
        assert build_keyword({"keyword": "cards", "competition_index": 100}).competition_index == 100

    def test_non_integer_searches(self):
        with pytest.raises(KeywordValidationError) as exc:
            build_keyword({"keyword": "cards", "monthly_searches": "lots"})
        assert exc.value.errors["monthly_searches"] == ["is invalid"]

    def test_bad_decimal(self):
        with pytest.raises(KeywordValidationError) as exc:
            build_keyword({"keyword": "cards", "top_bid_low": "cheap"})
        assert exc.value.errors["top_bid_low"] == ["is invalid"]

    def test_describe(self):
        with pytest.raises(KeywordValidationError) as exc:
            build_keyword({"keyword": "cards", "competition_index": 101})
        assert exc.value.describe() == "competition_index must be between 0 and 100"


class TestApplyUpdate:
    def test_text_change_rederives(self):
        record = build_keyword({"keyword": "business cards"})
        assert record.category == "other"

        updated = apply_update(record, {"keyword": "buy business cards"})
        assert updated.category == "printing"
        assert updated.intent == "transactional"

    def test_text_change_keeps_explicit_changes(self):
        record = build_keyword({"keyword": "business cards"})
        updated = apply_update(record, {"keyword": "buy business cards", "category": "design"})
        assert updated.category == "design"
        assert updated.intent == "transactional"

    def test_other_changes_keep_classification(self):
        record = build_keyword({"keyword": "business cards", "category": "design"})
        updated = apply_update(record, {"notes": "seasonal"})
        assert updated.category == "design"
        assert updated.notes == "seasonal"

    def test_score_recomputed(self):
        record = build_keyword({"keyword": "business card ideas", "monthly_searches": 0})
        updated = apply_update(record, {"monthly_searches": 20_000})
        assert updated.blog_score == record.blog_score + 25

    def test_invalid_change(self):
        record = build_keyword({"keyword": "business cards"})
        with pytest.raises(KeywordValidationError):
            apply_update(record, {"keyword": ""})

    def test_original_untouched(self):
        record = build_keyword({"keyword": "business cards"})
        apply_update(record, {"keyword": "buy business cards"})
        assert record.keyword == "business cards"
