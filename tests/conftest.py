"""Shared test fixtures for BlogDesk."""

from __future__ import annotations

import json

import pytest

from blogdesk.blog.authors import get_or_create_author
from blogdesk.storage.database import Database
from blogdesk.storage.repository import KeywordRepository


@pytest.fixture
def tmp_db(tmp_path):
    """Temp database with schema initialized."""
    db_path = tmp_path / "test.db"
    with Database(db_path) as db:
        yield db


@pytest.fixture
def repo(tmp_db):
    """KeywordRepository backed by the temp database."""
    return KeywordRepository(tmp_db)


@pytest.fixture
def author(tmp_db):
    return get_or_create_author(tmp_db, {
        "name": "Dana Writer",
        "email": "dana@example.com",
        "external_id": "42",
    })


@pytest.fixture
def planner_csv():
    """A UTF-8 comma-separated Keyword Planner export with title lines."""
    return (
        "Keyword Stats 2025-01-01 at 10_00_00\n"
        "All locations\n"
        "Keyword,Currency,Avg. monthly searches,Three month change,YoY change,"
        "Competition,Competition (indexed value),"
        "Top of page bid (low range),Top of page bid (high range)\n"
        "how to network effectively,USD,1000,0%,10%,Low,45,$0.50,$2.10\n"
        "vistaprint business cards,USD,\"12,100\",0%,0%,High,90,$1.20,$4.80\n"
        "business card holder,USD,5000,0%,0%,High,100,$0.30,$0.90\n"
    )


@pytest.fixture
def features_file(tmp_path):
    features = {
        "qr_generator": {
            "name": "QR Code Generator",
            "label": "Create free QR codes",
            "url": "https://example.com/qr",
            "url_note": "requires free account",
            "pricing": "Free",
            "description": "Make a QR code for your card.",
            "use_cases": ["Printed cards", "Event badges"],
            "cta": "Create your QR code",
        },
        "digital_card": {
            "name": "Digital Business Card",
            "label": "Share contact details",
            "url": "https://example.com/card",
            "pricing": "Free",
            "description": "An online business card.",
            "use_cases": ["Networking events"],
            "cta": "Build your card",
        },
    }
    path = tmp_path / "features.json"
    path.write_text(json.dumps(features))
    return path
