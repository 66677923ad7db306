"""CI Game configuration management.

Configuration is loaded from multiple sources with the following priority
(highest to lowest):
1. Explicit overrides passed to get_settings()
2. Environment variables (with CIGAME_ prefix)
3. Configuration files (cigame.config.yaml)
4. Default values

Example usage:
    from cigame.core.settings import get_settings

    settings = get_settings()
    print(settings.scoring.passed_test_points)

Environment variable support:
    CIGAME_LOGGING__LEVEL=DEBUG
    CIGAME_SCORING__FAILED_TEST_POINTS=2.0
"""

import logging
from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

CONFIG_FILE_NAMES = ["cigame.config.yaml", "cigame.config.yml"]

RULE_NAMES = frozenset(
    {
        "test_count",
        "increasing_passed_tests",
        "decreasing_passed_tests",
        "increasing_failed_tests",
        "decreasing_failed_tests",
        "increasing_skipped_tests",
        "decreasing_skipped_tests",
    }
)

_VALID_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


def _validate_level(v: str) -> str:
    upper_v = v.upper()
    if upper_v not in _VALID_LEVELS:
        raise ValueError(f"Invalid log level: {v}. Must be one of {_VALID_LEVELS}")
    return upper_v


def _find_config_file(start_dir: Path | None = None) -> Path | None:
    """Find configuration file by searching current directory and parents.

    Args:
        start_dir: Directory to start search from.
            Defaults to current working directory.

    Returns:
        Path to config file if found, None otherwise.
    """
    search_dir = start_dir or Path.cwd()

    for _ in range(10):
        for filename in CONFIG_FILE_NAMES:
            config_path = search_dir / filename
            if config_path.exists():
                return config_path

        parent = search_dir.parent
        if parent == search_dir:
            break
        search_dir = parent

    return None


def _load_yaml_config(config_path: Path) -> dict[str, Any]:
    """Load configuration from a YAML file.

    Unreadable or malformed files are logged and treated as empty.
    """
    try:
        with open(config_path) as f:
            config = yaml.safe_load(f) or {}
            return config if isinstance(config, dict) else {}
    except yaml.YAMLError as e:
        logger.warning("Failed to parse config file %s: %s", config_path, e)
        return {}
    except OSError as e:
        logger.warning("Failed to read config file %s: %s", config_path, e)
        return {}


class LoggingSettings(BaseSettings):
    """Logging configuration settings."""

    model_config = SettingsConfigDict(env_prefix="CIGAME_LOGGING__")

    level: str = Field(
        default="INFO",
        description="Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )
    json_output: bool = Field(
        default=False,
        description="Output logs in JSON format",
    )
    file: str | None = Field(
        default=None,
        description="Log file path (optional)",
    )
    module_levels: dict[str, str] = Field(
        default_factory=dict,
        description="Per-module log level overrides",
    )

    @field_validator("level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is a valid Python logging level."""
        return _validate_level(v)


class ScoringSettings(BaseSettings):
    """Point weights for the unit-testing rule set.

    Each weight is the number of points per test of change. Rules that
    penalize (new failing tests, fewer passing tests) apply the sign
    themselves, so weights are given as positive magnitudes.
    """

    model_config = SettingsConfigDict(env_prefix="CIGAME_SCORING__")

    test_count_points: float = Field(
        default=1.0, ge=0.0, description="Points per test added or removed"
    )
    passed_test_points: float = Field(
        default=1.0, ge=0.0, description="Points per passing test gained or lost"
    )
    failed_test_points: float = Field(
        default=1.0, ge=0.0, description="Points per failing test gained or lost"
    )
    skipped_test_points: float = Field(
        default=0.1, ge=0.0, description="Points per skipped test gained or lost"
    )
    enabled_rules: list[str] = Field(
        default_factory=lambda: [
            "increasing_passed_tests",
            "decreasing_passed_tests",
            "increasing_failed_tests",
            "decreasing_failed_tests",
            "increasing_skipped_tests",
            "decreasing_skipped_tests",
        ],
        description="Unit-testing rules applied by the default rule set",
    )

    @field_validator("enabled_rules")
    @classmethod
    def validate_enabled_rules(cls, v: list[str]) -> list[str]:
        """Reject unknown rule names."""
        unknown = sorted(set(v) - RULE_NAMES)
        if unknown:
            raise ValueError(f"Unknown rules: {', '.join(unknown)}")
        return v


class CIGameSettings(BaseSettings):
    """Main CI Game configuration settings.

    Supports CIGAME_ environment variables, a .env file and YAML config
    file discovery, merged as defaults → file → env → explicit values.

    Example:
        settings = CIGameSettings(logging={"level": "DEBUG"})
        print(settings.scoring.failed_test_points)
    """

    model_config = SettingsConfigDict(
        env_prefix="CIGAME_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
        validate_default=True,
    )

    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    scoring: ScoringSettings = Field(default_factory=ScoringSettings)

    @model_validator(mode="before")
    @classmethod
    def load_from_config_file(cls, data: dict[str, Any]) -> dict[str, Any]:
        """Merge values from a discovered YAML config file.

        Explicitly provided values take precedence over the file.
        """
        if data.get("_skip_file_loading"):
            data.pop("_skip_file_loading", None)
            return data

        config_path = _find_config_file()
        if not config_path:
            return data

        file_config = _load_yaml_config(config_path)
        if not file_config:
            return data

        logger.debug("Loaded configuration from %s", config_path)
        merged = {**file_config, **data}

        for section in ["logging", "scoring"]:
            if isinstance(file_config.get(section), dict):
                merged[section] = {
                    **file_config[section],
                    **(data[section] if isinstance(data.get(section), dict) else {}),
                }

        return merged

    def to_dict(self) -> dict[str, Any]:
        """Convert settings to a plain dictionary."""
        return self.model_dump()


def get_settings(
    config_file: Path | None = None,
    **overrides: Any,
) -> CIGameSettings:
    """Get a CI Game settings instance.

    Args:
        config_file: Optional explicit path to a configuration file. When
            given, automatic config file discovery is skipped.
        **overrides: Explicit configuration overrides.

    Returns:
        Configured CIGameSettings instance.
    """
    if config_file and config_file.exists():
        file_config = _load_yaml_config(config_file)
        merged = {**file_config, **overrides, "_skip_file_loading": True}
        return CIGameSettings(**merged)

    return CIGameSettings(**overrides)


@lru_cache
def get_cached_settings() -> CIGameSettings:
    """Get cached settings instance.

    The cache can be cleared with get_cached_settings.cache_clear().
    """
    return get_settings()
