"""Configuration and constants for BlogDesk."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

# Paths
PROJECT_ROOT = Path(__file__).parent.parent.parent
DEFAULT_DATA_DIR = PROJECT_ROOT / "data"
DEFAULT_DB_PATH = DEFAULT_DATA_DIR / "blogdesk.db"
DEFAULT_EXPORTS_DIR = DEFAULT_DATA_DIR / "exports"
DEFAULT_FEATURES_FILE = PROJECT_ROOT / "content" / "features.json"

# AI generation defaults
MODEL_DEFAULT = "claude-sonnet-4-5-20250929"
MAX_TOKENS_DEFAULT = 4000
REQUEST_TIMEOUT_SECONDS = 120
IMAGEN_MODEL_DEFAULT = "imagen-4.0-generate-001"
IMAGEN_LOCATION_DEFAULT = "us-central1"
IMAGEN_TIMEOUT_SECONDS = 60


@dataclass
class Settings:
    """Runtime settings for a host application embedding BlogDesk."""

    db_path: Path = field(default_factory=lambda: DEFAULT_DB_PATH)
    features_file: Path = field(default_factory=lambda: DEFAULT_FEATURES_FILE)
    anthropic_api_key: str | None = None
    anthropic_model: str = MODEL_DEFAULT
    anthropic_max_tokens: int = MAX_TOKENS_DEFAULT
    google_cloud_project: str | None = None
    google_cloud_location: str = IMAGEN_LOCATION_DEFAULT
    imagen_model: str = IMAGEN_MODEL_DEFAULT

    @property
    def exports_dir(self) -> Path:
        return self.db_path.parent / "exports"

    @property
    def anthropic_configured(self) -> bool:
        return bool(self.anthropic_api_key)

    @property
    def imagen_configured(self) -> bool:
        return bool(self.google_cloud_project)

    def ensure_dirs(self):
        """Create the data directory if it doesn't exist."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)


def load_settings(env: dict | None = None) -> Settings:
    """Build Settings from environment variables (or a supplied mapping)."""
    if env is None:
        env = dict(os.environ)

    settings = Settings(
        anthropic_api_key=env.get("ANTHROPIC_API_KEY") or None,
        anthropic_model=env.get("ANTHROPIC_MODEL") or MODEL_DEFAULT,
        google_cloud_project=env.get("GOOGLE_CLOUD_PROJECT") or None,
        google_cloud_location=env.get("GOOGLE_CLOUD_LOCATION") or IMAGEN_LOCATION_DEFAULT,
        imagen_model=env.get("IMAGEN_MODEL") or IMAGEN_MODEL_DEFAULT,
    )

    if env.get("BLOGDESK_DB_PATH"):
        settings.db_path = Path(env["BLOGDESK_DB_PATH"])
    if env.get("BLOGDESK_FEATURES_FILE"):
        settings.features_file = Path(env["BLOGDESK_FEATURES_FILE"])

    max_tokens = env.get("ANTHROPIC_MAX_TOKENS")
    if max_tokens:
        try:
            settings.anthropic_max_tokens = int(max_tokens)
        except ValueError:
            raise ValueError(f"ANTHROPIC_MAX_TOKENS must be an integer, got: {max_tokens}")

    return settings
