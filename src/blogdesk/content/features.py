"""Product feature catalog used to ground generated posts.

Features live in a JSON object keyed by feature id, so they can be edited
without code changes::

    {
      "qr_generator": {
        "name": "QR Code Generator",
        "label": "Create free QR codes",
        "url": "https://example.com/qr",
        "url_note": "requires free account",
        "pricing": "Free",
        "description": "...",
        "use_cases": ["..."],
        "cta": "Make your QR code"
      }
    }
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional

from blogdesk.storage.models import FeatureScreenshot

log = logging.getLogger(__name__)

SCREENSHOTS_HEADER = "SCREENSHOTS (include these in the blog to show the workflow):"


class FeatureCatalog:
    """Lazily loaded, cached view of a features JSON file.

    A missing or malformed file gives an empty catalog; the problem is
    logged rather than raised so generation can go ahead without features.
    """

    def __init__(self, path: Path):
        self.path = Path(path)
        self._features: Optional[dict] = None

    def _load(self) -> dict:
        try:
            content = self.path.read_text(encoding="utf-8")
        except OSError as e:
            log.warning("Failed to read features file %s: %s", self.path, e)
            return {}

        try:
            features = json.loads(content)
        except json.JSONDecodeError as e:
            log.error("Failed to parse features file %s: %s", self.path, e)
            return {}

        if not isinstance(features, dict):
            log.error("Features file %s must contain a JSON object", self.path)
            return {}
        return features

    def all(self) -> dict:
        if self._features is None:
            self._features = self._load()
        return self._features

    def reload(self) -> dict:
        """Drop the cache and read the file again."""
        self._features = None
        return self.all()

    def get(self, key: str) -> Optional[dict]:
        return self.all().get(key)

    def options(self) -> list[tuple[str, str, str]]:
        """(name, key, label) triples sorted by name, for pickers."""
        items = [
            (feature.get("name", key), key, feature.get("label", ""))
            for key, feature in self.all().items()
        ]
        return sorted(items, key=lambda item: item[0])

    def format_for_prompt(
        self, key: str, screenshots: list[FeatureScreenshot] | None = None
    ) -> Optional[str]:
        """Render one feature (and its screenshots) as prompt text.

        Returns None for an unknown key.
        """
        feature = self.get(key)
        if feature is None:
            return None

        url_text = feature.get("url", "")
        if feature.get("url_note"):
            url_text = f"{url_text} ({feature['url_note']})"

        use_cases = "\n".join(f"  * {case}" for case in feature.get("use_cases", []))

        lines = [
            f"**{feature.get('name', key)}**",
            f"URL: {url_text}",
            f"Pricing: {feature.get('pricing', '')}",
            feature.get("description", ""),
            "Use cases:",
            use_cases,
            f"Suggested CTA: {feature.get('cta', '')}",
            format_screenshots_for_prompt(screenshots or []),
        ]
        return "\n".join(lines) + "\n"

    def format_many_for_prompt(
        self,
        keys: list[str],
        screenshots_by_feature: dict[str, list[FeatureScreenshot]] | None = None,
    ) -> list[str]:
        """Prompt text for each known key; unknown keys are dropped."""
        screenshots_by_feature = screenshots_by_feature or {}
        formatted = []
        for key in keys:
            text = self.format_for_prompt(key, screenshots_by_feature.get(key))
            if text is not None:
                formatted.append(text)
        return formatted


def format_screenshots_for_prompt(screenshots: list[FeatureScreenshot]) -> str:
    if not screenshots:
        return ""

    steps = []
    for number, shot in enumerate(screenshots, start=1):
        label = f"Step {number}"
        if shot.step_description:
            label = f"{label}: {shot.step_description}"
        caption = shot.caption or shot.alt_text
        steps.append(f"{label}\n![{shot.alt_text}]({shot.url})\n*{caption}*\n")

    return f"\n{SCREENSHOTS_HEADER}\n" + "\n".join(steps)
