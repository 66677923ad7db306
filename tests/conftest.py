"""Shared pytest fixtures for CI Game tests."""

from typing import Any

import pytest

from cigame.core.settings import get_cached_settings
from cigame.history import Build, TestSummary as Summary
from cigame.rules import TestCountPolicy as CountPolicy, UnitTestsRule


@pytest.fixture(autouse=True)
def clear_settings_cache():  # type: ignore[misc]
    """Drop cached settings so each test sees its own environment."""
    get_cached_settings.cache_clear()
    yield
    get_cached_settings.cache_clear()


@pytest.fixture
def history():  # type: ignore[no-untyped-def]
    """Return a helper linking (outcome, summary) pairs, oldest first."""

    def _history(*entries: tuple[str | None, dict[str, Any] | None]) -> Build:
        build = Build.from_history(
            [{"outcome": outcome, "test_summary": data} for outcome, data in entries]
        )
        assert build is not None
        return build

    return _history


@pytest.fixture
def test_count_rule() -> UnitTestsRule:
    """Return a rule scoring one point per test added or removed."""
    return UnitTestsRule(CountPolicy(points=1.0))


@pytest.fixture
def ten_tests() -> Summary:
    """Return a summary of ten tests with two failures and one skip."""
    return Summary(total_count=10, fail_count=2, skip_count=1)
