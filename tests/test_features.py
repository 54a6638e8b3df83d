"""Tests for blogdesk.content.features."""

from __future__ import annotations

import json
import logging

from blogdesk.content.features import FeatureCatalog, format_screenshots_for_prompt
from blogdesk.storage.models import FeatureScreenshot


def _shot(**kwargs):
    defaults = {
        "feature_key": "qr_generator",
        "url": "https://img.example/1.png",
        "storage_key": "blog/images/1.png",
        "alt_text": "QR code form",
    }
    return FeatureScreenshot(**{**defaults, **kwargs})


class TestFeatureCatalog:
    def test_loads_features(self, features_file):
        catalog = FeatureCatalog(features_file)
        assert set(catalog.all()) == {"qr_generator", "digital_card"}
        assert catalog.get("qr_generator")["name"] == "QR Code Generator"
        assert catalog.get("missing") is None

    def test_options_sorted_by_name(self, features_file):
        assert FeatureCatalog(features_file).options() == [
            ("Digital Business Card", "digital_card", "Share contact details"),
            ("QR Code Generator", "qr_generator", "Create free QR codes"),
        ]

    def test_cached_until_reload(self, features_file):
        catalog = FeatureCatalog(features_file)
        assert len(catalog.all()) == 2
        features_file.write_text(json.dumps({"only": {"name": "Only"}}))
        assert len(catalog.all()) == 2
        assert list(catalog.reload()) == ["only"]

    def test_missing_file(self, tmp_path, caplog):
        with caplog.at_level(logging.WARNING):
            assert FeatureCatalog(tmp_path / "nope.json").all() == {}
        assert "Failed to read features file" in caplog.text

    def test_invalid_json(self, tmp_path, caplog):
        path = tmp_path / "bad.json"
        path.write_text("{not json")
        with caplog.at_level(logging.ERROR):
            assert FeatureCatalog(path).all() == {}
        assert "Failed to parse features file" in caplog.text

    def test_non_object_json(self, tmp_path):
        path = tmp_path / "list.json"
        path.write_text("[1, 2]")
        assert FeatureCatalog(path).all() == {}


class TestFormatForPrompt:
    def test_feature_text(self, features_file):
        text = FeatureCatalog(features_file).format_for_prompt("qr_generator")
        assert text == (
            "**QR Code Generator**\n"
            "URL: https://example.com/qr (requires free account)\n"
            "Pricing: Free\n"
            "Make a QR code for your card.\n"
            "Use cases:\n"
            "  * Printed cards\n"
            "  * Event badges\n"
            "Suggested CTA: Create your QR code\n"
            "\n"
        )

    def test_url_without_note(self, features_file):
        text = FeatureCatalog(features_file).format_for_prompt("digital_card")
        assert "URL: https://example.com/card\n" in text

    def test_unknown_key(self, features_file):
        assert FeatureCatalog(features_file).format_for_prompt("missing") is None

    def test_with_screenshots(self, features_file):
        text = FeatureCatalog(features_file).format_for_prompt(
            "qr_generator", [_shot(step_description="Open the tool")]
        )
        assert "SCREENSHOTS (include these in the blog to show the workflow):" in text
        assert "Step 1: Open the tool\n![QR code form](https://img.example/1.png)" in text

    def test_many_drops_unknown(self, features_file):
        texts = FeatureCatalog(features_file).format_many_for_prompt(
            ["digital_card", "missing", "qr_generator"],
            {"qr_generator": [_shot()]},
        )
        assert len(texts) == 2
        assert texts[0].startswith("**Digital Business Card**")
        assert "SCREENSHOTS" not in texts[0]
        assert "SCREENSHOTS" in texts[1]


class TestFormatScreenshots:
    def test_empty(self):
        assert format_screenshots_for_prompt([]) == ""

    def test_caption_falls_back_to_alt(self):
        text = format_screenshots_for_prompt([
            _shot(),
            _shot(url="https://img.example/2.png", caption="Download the PNG", step_description="Save"),
        ])
        assert text == (
            "\nSCREENSHOTS (include these in the blog to show the workflow):\n"
            "Step 1\n![QR code form](https://img.example/1.png)\n*QR code form*\n"
            "\n"
            "Step 2: Save\n![QR code form](https://img.example/2.png)\n*Download the PNG*\n"
        )
