"""Tests for CI Game configuration management."""

import os
from pathlib import Path
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from cigame.core.settings import (
    CIGameSettings,
    LoggingSettings,
    ScoringSettings,
    _find_config_file,
    _load_yaml_config,
    get_cached_settings,
    get_settings,
)


class TestCIGameSettings:
    """Tests for CIGameSettings class."""

    def test_default_values(self) -> None:
        """Test default configuration values."""
        settings = CIGameSettings(_skip_file_loading=True)
        assert settings.logging.level == "INFO"
        assert settings.logging.json_output is False
        assert settings.logging.file is None
        assert settings.scoring.passed_test_points == 1.0
        assert settings.scoring.failed_test_points == 1.0
        assert settings.scoring.skipped_test_points == 0.1
        assert "test_count" not in settings.scoring.enabled_rules

    def test_custom_values(self) -> None:
        """Test configuration with custom values."""
        settings = CIGameSettings(
            _skip_file_loading=True,
            logging={"level": "debug"},
            scoring={"failed_test_points": 3.0, "enabled_rules": ["test_count"]},
        )
        assert settings.logging.level == "DEBUG"
        assert settings.scoring.failed_test_points == 3.0
        assert settings.scoring.enabled_rules == ["test_count"]

    def test_invalid_log_level(self) -> None:
        """Test invalid log levels are rejected."""
        with pytest.raises(ValidationError, match="Invalid log level"):
            CIGameSettings(_skip_file_loading=True, logging={"level": "VERBOSE"})

    def test_to_dict(self) -> None:
        """Test conversion to a plain dictionary."""
        data = CIGameSettings(_skip_file_loading=True).to_dict()
        assert "log_level" not in data
        assert data["logging"]["level"] == "INFO"
        assert data["scoring"]["test_count_points"] == 1.0
        assert data["logging"]["module_levels"] == {}


class TestNestedSettings:
    """Tests for nested settings groups."""

    def test_logging_level_normalized(self) -> None:
        """Test logging levels are upper-cased."""
        assert LoggingSettings(level="warning").level == "WARNING"

    def test_logging_level_invalid(self) -> None:
        """Test invalid logging levels are rejected."""
        with pytest.raises(ValidationError):
            LoggingSettings(level="chatty")

    def test_unknown_rule_rejected(self) -> None:
        """Test unknown rule names are rejected."""
        with pytest.raises(ValidationError, match="Unknown rules: build_result"):
            ScoringSettings(enabled_rules=["test_count", "build_result"])

    def test_negative_weight_rejected(self) -> None:
        """Test weights are non-negative magnitudes."""
        with pytest.raises(ValidationError):
            ScoringSettings(failed_test_points=-1.0)


class TestEnvironmentVariables:
    """Tests for environment variable loading."""

    def test_env_var_loading(self) -> None:
        """Test that environment variables are loaded with CIGAME_ prefix."""
        with patch.dict(os.environ, {"CIGAME_LOGGING__LEVEL": "ERROR"}):
            settings = CIGameSettings(_skip_file_loading=True)
            assert settings.logging.level == "ERROR"

    def test_env_var_nested_delimiter(self) -> None:
        """Test nested environment variable delimiter (__)."""
        with patch.dict(
            os.environ,
            {
                "CIGAME_SCORING__FAILED_TEST_POINTS": "2.5",
                "CIGAME_LOGGING__JSON_OUTPUT": "true",
            },
        ):
            settings = CIGameSettings(_skip_file_loading=True)
            assert settings.scoring.failed_test_points == 2.5
            assert settings.logging.json_output is True


class TestConfigFileLoading:
    """Tests for YAML configuration file loading."""

    def test_load_yaml_config_valid(self, tmp_path: Path) -> None:
        """Test loading valid YAML config file."""
        config_file = tmp_path / "cigame.config.yaml"
        config_file.write_text(
            "logging:\n  level: DEBUG\nscoring:\n  passed_test_points: 2\n"
        )

        config = _load_yaml_config(config_file)
        assert config == {
            "logging": {"level": "DEBUG"},
            "scoring": {"passed_test_points": 2},
        }

    def test_load_yaml_config_invalid(self, tmp_path: Path) -> None:
        """Test loading invalid YAML returns empty dict."""
        config_file = tmp_path / "invalid.yaml"
        config_file.write_text("invalid: yaml: content:")

        assert _load_yaml_config(config_file) == {}

    def test_load_yaml_config_not_a_mapping(self, tmp_path: Path) -> None:
        """Test a YAML list is ignored."""
        config_file = tmp_path / "list.yaml"
        config_file.write_text("- a\n- b\n")

        assert _load_yaml_config(config_file) == {}

    def test_load_yaml_config_missing(self, tmp_path: Path) -> None:
        """Test loading missing file returns empty dict."""
        assert _load_yaml_config(tmp_path / "nonexistent.yaml") == {}

    def test_find_config_file_parent_dir(self, tmp_path: Path) -> None:
        """Test finding config file in a parent directory."""
        config_file = tmp_path / "cigame.config.yml"
        config_file.write_text("logging:\n  level: INFO\n")
        subdir = tmp_path / "subdir"
        subdir.mkdir()

        assert _find_config_file(subdir) == config_file

    def test_find_config_file_not_found(self, tmp_path: Path) -> None:
        """Test returns None when no config file found."""
        assert _find_config_file(tmp_path) is None

    def test_settings_discovers_config_file(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Test config file values apply and explicit values override them."""
        (tmp_path / "cigame.config.yaml").write_text(
            "logging:\n"
            "  level: WARNING\n"
            "scoring:\n"
            "  failed_test_points: 4.0\n"
            "  passed_test_points: 2.0\n"
        )
        monkeypatch.chdir(tmp_path)

        settings = CIGameSettings(scoring={"passed_test_points": 3.0})

        assert settings.logging.level == "WARNING"
        assert settings.scoring.failed_test_points == 4.0
        assert settings.scoring.passed_test_points == 3.0

    def test_get_settings_with_config_file(self, tmp_path: Path) -> None:
        """Test an explicit config file with overrides."""
        config_file = tmp_path / "custom.yaml"
        config_file.write_text(
            "logging:\n  level: ERROR\nscoring:\n  failed_test_points: 4.0\n"
        )

        settings = get_settings(
            config_file=config_file, scoring={"failed_test_points": 2.0}
        )

        assert settings.logging.level == "ERROR"
        assert settings.scoring.failed_test_points == 2.0

    def test_get_settings_missing_config_file(self, tmp_path: Path) -> None:
        """Test a missing explicit config file falls back to defaults."""
        settings = get_settings(
            config_file=tmp_path / "missing.yaml", _skip_file_loading=True
        )
        assert settings.logging.level == "INFO"


class TestCachedSettings:
    """Tests for get_cached_settings."""

    def test_returns_same_instance(self) -> None:
        """Test the cached settings are reused."""
        get_cached_settings.cache_clear()
        try:
            assert get_cached_settings() is get_cached_settings()
        finally:
            get_cached_settings.cache_clear()
