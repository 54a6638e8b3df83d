"""Rule-based keyword classification.

Every detector lower-cases its input and walks an ordered list of
``(predicate, result)`` rules; the first matching rule wins. Rule order is
the priority, so reordering a list changes classification results.
"""

from __future__ import annotations

import re
from typing import Callable

CATEGORIES = [
    "scanner", "printing", "digital", "design", "networking",
    "comparison", "question", "brand", "other",
]
INTENTS = ["informational", "transactional", "navigational", "commercial"]
AUDIENCES = [
    "entrepreneurs", "small_business", "professionals",
    "networking_focused", "diy_creators", "general",
]

QUESTION_PHRASES = (
    "how to", "what is", "what are", "why", "when", "where", "which",
    "should i", "do i need", "can i", "is it",
)

BRAND_NAMES = (
    "vistaprint", "moo", "staples", "fedex", "ups", "canva", "zazzle",
    "avery", "gotprint", "uprinting", "amazon", "office depot", "shutterfly",
)

# Pure product-listing phrases that won't carry an original article
LOW_VALUE_PATTERNS = [
    re.compile(r"^(business )?card holder[s]?$"),
    re.compile(r"^(business )?card case[s]?$"),
    re.compile(r"^(business )?card wallet[s]?$"),
    re.compile(r"holder.*business card"),
    re.compile(r"card holder.*business"),
    re.compile(r"^card business holder$"),
    re.compile(r"^holder business card$"),
    re.compile(r"^card holder company$"),
]

Rule = tuple[Callable[[str], bool], str]


def _contains_any(*needles: str) -> Callable[[str], bool]:
    return lambda text: any(needle in text for needle in needles)


def is_question(text: str) -> bool:
    """True when the keyword reads like a question."""
    return _contains_any(*QUESTION_PHRASES)(text.lower())


def is_branded(text: str) -> bool:
    """True when the keyword names a known print/design brand."""
    return _contains_any(*BRAND_NAMES)(text.lower())


CATEGORY_RULES: list[Rule] = [
    (_contains_any("scanner", "scan", "reader", "ocr"), "scanner"),
    (_contains_any("print", "printing", "order", "buy"), "printing"),
    (_contains_any("digital", "qr", "nfc", "virtual", "electronic"), "digital"),
    (_contains_any("design", "template", "make", "create", "maker"), "design"),
    (_contains_any("network", "event", "conference", "meetup"), "networking"),
    (_contains_any("vs", "versus", "compare", "best", "top"), "comparison"),
    (is_question, "question"),
    (is_branded, "brand"),
]

# Branded keywords sit above the commercial phrases: "vistaprint review"
# is navigational, not commercial.
INTENT_RULES: list[Rule] = [
    (_contains_any("buy", "order", "price", "cost", "cheap", "free", "near me"), "transactional"),
    (_contains_any("how to", "what is", "why", "guide", "tips", "ideas"), "informational"),
    (is_branded, "navigational"),
    (_contains_any("best", "top", "review", "compare", "vs"), "commercial"),
]

AUDIENCE_RULES: list[Rule] = [
    (_contains_any("network", "conference", "event", "meetup", "connection"), "networking_focused"),
    (_contains_any("make", "create", "design", "template", "diy", "homemade"), "diy_creators"),
    (_contains_any("business", "company", "professional", "corporate", "office"), "small_business"),
    (_contains_any("startup", "entrepreneur", "freelance", "side hustle", "personal brand"), "entrepreneurs"),
    (_contains_any("card holder", "organizer", "wallet", "case"), "professionals"),
]


def first_match(rules: list[Rule], text: str, default: str) -> str:
    """Return the result of the first rule whose predicate accepts ``text``."""
    lowered = text.lower()
    for predicate, result in rules:
        if predicate(lowered):
            return result
    return default


def detect_category(text: str) -> str:
    return first_match(CATEGORY_RULES, text, "other")


def detect_intent(text: str) -> str:
    return first_match(INTENT_RULES, text, "informational")


def detect_audience(text: str) -> str:
    return first_match(AUDIENCE_RULES, text, "general")


def is_low_value_keyword(text: str) -> bool:
    """True for bare product-listing phrases like "business card holders"."""
    lowered = text.lower()
    return any(pattern.search(lowered) for pattern in LOW_VALUE_PATTERNS)


def classify(text: str) -> dict:
    """Run every detector over ``text``."""
    return {
        "category": detect_category(text),
        "intent": detect_intent(text),
        "is_question": is_question(text),
        "is_branded": is_branded(text),
        "audience": detect_audience(text),
        "is_low_value": is_low_value_keyword(text),
    }
