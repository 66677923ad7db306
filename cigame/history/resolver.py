"""Baseline resolution over a build's predecessor chain."""

import logging
from collections.abc import Iterator

from .models import BuildOutcome, BuildRecord

logger = logging.getLogger(__name__)


def iter_history(start: BuildRecord | None) -> Iterator[BuildRecord]:
    """Yield ``start`` followed by each of its predecessors, newest first."""
    build = start
    while build is not None:
        yield build
        build = build.predecessor


def find_usable_baseline(start: BuildRecord | None) -> BuildRecord | None:
    """Return the youngest build usable as a comparison baseline.

    A build is usable when it is UNSTABLE or SUCCESS and has test results.
    FAILURE builds are returned immediately, with or without test results,
    so the caller can look through them. Builds without an outcome and
    NOT_BUILT or ABORTED builds are skipped.

    Args:
        start: First build to inspect, usually the build preceding the one
            being scored.

    Returns:
        The baseline build, or None if the history holds no such build.
    """
    for build in iter_history(start):
        outcome = build.outcome
        if outcome is None:
            _log_skip(build, "no_outcome")
        elif outcome.is_better_than(BuildOutcome.FAILURE):
            if build.test_summary is not None:
                return build
            _log_skip(build, "no_test_results")
        elif outcome.is_worse_or_equal_to(BuildOutcome.ABORTED):
            _log_skip(build, "not_run")
        else:
            return build

    return None


def find_baseline_above_failure(start: BuildRecord | None) -> BuildRecord | None:
    """Return the youngest UNSTABLE or SUCCESS build with test results.

    Unlike find_usable_baseline(), FAILURE builds are skipped as well.
    """
    for build in iter_history(start):
        outcome = build.outcome
        if outcome is not None and outcome.is_better_than(BuildOutcome.FAILURE):
            if build.test_summary is not None:
                return build
            _log_skip(build, "no_test_results")
        else:
            _log_skip(build, "not_above_failure")

    return None


def _log_skip(build: BuildRecord, reason: str) -> None:
    number = getattr(build, "number", None)
    outcome = build.outcome.value if build.outcome else None
    logger.debug(
        "Skipped build %s (%s) as baseline: %s",
        number,
        outcome,
        reason,
        extra={"build": number, "outcome": outcome, "reason": reason},
    )
