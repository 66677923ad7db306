"""Build history module for CI Game.

Provides the build data model and baseline resolution over a build's
predecessor chain.
"""

from .models import (
    ZERO_SUMMARY,
    Build,
    BuildOutcome,
    BuildRecord,
    TestSummary,
)
from .resolver import (
    find_baseline_above_failure,
    find_usable_baseline,
    iter_history,
)

__all__ = [
    # Models
    "Build",
    "BuildOutcome",
    "BuildRecord",
    "TestSummary",
    "ZERO_SUMMARY",
    # Resolution
    "find_baseline_above_failure",
    "find_usable_baseline",
    "iter_history",
]
