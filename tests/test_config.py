"""Tests for blogdesk.config."""

from __future__ import annotations

from pathlib import Path

import pytest

from blogdesk.config import (
    DEFAULT_DB_PATH,
    DEFAULT_EXPORTS_DIR,
    DEFAULT_FEATURES_FILE,
    IMAGEN_LOCATION_DEFAULT,
    IMAGEN_MODEL_DEFAULT,
    MAX_TOKENS_DEFAULT,
    MODEL_DEFAULT,
    Settings,
    load_settings,
)


class TestLoadSettings:
    def test_defaults(self):
        settings = load_settings({})
        assert settings.db_path == DEFAULT_DB_PATH
        assert settings.features_file == DEFAULT_FEATURES_FILE
        assert settings.anthropic_model == MODEL_DEFAULT
        assert settings.anthropic_max_tokens == MAX_TOKENS_DEFAULT
        assert settings.google_cloud_location == IMAGEN_LOCATION_DEFAULT
        assert settings.imagen_model == IMAGEN_MODEL_DEFAULT
        assert settings.anthropic_configured is False
        assert settings.imagen_configured is False

    def test_from_environment(self, tmp_path):
        settings = load_settings({
            "ANTHROPIC_API_KEY": "sk-test",
            "ANTHROPIC_MODEL": "claude-test",
            "ANTHROPIC_MAX_TOKENS": "2000",
            "GOOGLE_CLOUD_PROJECT": "my-project",
            "GOOGLE_CLOUD_LOCATION": "europe-west4",
            "IMAGEN_MODEL": "imagen-test",
            "BLOGDESK_DB_PATH": str(tmp_path / "blog.db"),
            "BLOGDESK_FEATURES_FILE": str(tmp_path / "features.json"),
        })
        assert settings.anthropic_configured is True
        assert settings.anthropic_model == "claude-test"
        assert settings.anthropic_max_tokens == 2000
        assert settings.imagen_configured is True
        assert settings.google_cloud_location == "europe-west4"
        assert settings.imagen_model == "imagen-test"
        assert settings.db_path == tmp_path / "blog.db"
        assert settings.features_file == tmp_path / "features.json"

    def test_empty_values_use_defaults(self):
        settings = load_settings({"ANTHROPIC_API_KEY": "", "GOOGLE_CLOUD_LOCATION": ""})
        assert settings.anthropic_configured is False
        assert settings.google_cloud_location == IMAGEN_LOCATION_DEFAULT

    def test_bad_max_tokens(self):
        with pytest.raises(ValueError, match="ANTHROPIC_MAX_TOKENS"):
            load_settings({"ANTHROPIC_MAX_TOKENS": "lots"})

    def test_reads_os_environ(self, monkeypatch):
        monkeypatch.setenv("ANTHROPIC_API_KEY", "sk-env")
        assert load_settings().anthropic_api_key == "sk-env"


class TestSettings:
    def test_exports_dir(self, tmp_path):
        settings = Settings(db_path=tmp_path / "data" / "blog.db")
        assert settings.exports_dir == tmp_path / "data" / "exports"

    def test_ensure_dirs(self, tmp_path):
        settings = Settings(db_path=tmp_path / "data" / "blog.db")
        settings.ensure_dirs()
        assert (tmp_path / "data").is_dir()

    def test_default_paths_are_paths(self):
        assert isinstance(Settings().db_path, Path)
        assert Settings().exports_dir == DEFAULT_EXPORTS_DIR
