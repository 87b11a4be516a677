"""Tests for engine configuration schema and loader."""

import pytest
from pydantic import ValidationError

from form_engine.config import CONFIG_ENV_VAR, EngineConfig, load_engine_config


class TestEngineConfigSchema:
    """Tests for EngineConfig pydantic model."""

    def test_defaults(self):
        config = EngineConfig()
        assert config.schema_cache_size == 32
        assert config.strict_lint is False
        assert config.lint_on_build is True
        assert config.submission_error_message == "Failed to save. Please try again."

    def test_cache_size_must_be_positive(self):
        with pytest.raises(ValidationError):
            EngineConfig(schema_cache_size=0)

    def test_blank_message_rejected(self):
        with pytest.raises(ValidationError, match="must not be blank"):
            EngineConfig(submission_error_message="   ")


class TestLoadEngineConfig:
    """Tests for loading engine config from YAML."""

    def test_no_path_no_env_returns_defaults(self, monkeypatch):
        monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
        assert load_engine_config() == EngineConfig()

    def test_missing_file_returns_defaults(self, tmp_path):
        assert load_engine_config(tmp_path / "nope.yaml") == EngineConfig()

    def test_valid_file(self, write_file):
        path = write_file(
            "engine.yaml",
            "schema_cache_size: 4\nstrict_lint: true\n"
            "submission_error_message: Could not save the task.\n",
        )
        config = load_engine_config(path)
        assert config.schema_cache_size == 4
        assert config.strict_lint is True
        assert config.submission_error_message == "Could not save the task."

    def test_str_path(self, write_file):
        path = write_file("engine.yaml", "lint_on_build: false\n")
        assert load_engine_config(str(path)).lint_on_build is False

    def test_env_var(self, write_file, monkeypatch):
        path = write_file("engine.yaml", "schema_cache_size: 8\n")
        monkeypatch.setenv(CONFIG_ENV_VAR, str(path))
        assert load_engine_config().schema_cache_size == 8

    def test_empty_file_warns_and_returns_defaults(self, write_file, caplog):
        path = write_file("engine.yaml", "")
        assert load_engine_config(path) == EngineConfig()
        assert "Empty engine config" in caplog.text

    def test_invalid_yaml_raises(self, write_file):
        path = write_file("engine.yaml", "schema_cache_size: [1, 2\n")
        with pytest.raises(ValueError, match="Invalid YAML"):
            load_engine_config(path)

    def test_invalid_schema_raises(self, write_file):
        path = write_file("engine.yaml", "schema_cache_size: 0\n")
        with pytest.raises(ValueError, match="Failed to load engine config"):
            load_engine_config(path)
