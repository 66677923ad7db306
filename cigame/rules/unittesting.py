"""Unit-test rules: score a build by how its test counts changed."""

import logging
from abc import ABC, abstractmethod
from collections.abc import Iterable

from cigame.core.exceptions import UnsupportedEvaluationError
from cigame.core.settings import ScoringSettings, get_cached_settings
from cigame.history import (
    ZERO_SUMMARY,
    BuildOutcome,
    BuildRecord,
    TestSummary,
    find_baseline_above_failure,
    find_usable_baseline,
)

from .base import NOT_GIVEN, AggregatableRule
from .models import RuleResult

logger = logging.getLogger(__name__)


def _tests(count: int) -> str:
    return "test" if abs(count) == 1 else "tests"


class ScoringPolicy(ABC):
    """
    Maps a pair of test summaries to a score.

    A policy is injected into UnitTestsRule, which takes care of picking the
    baseline build; the policy only compares the two summaries.
    """

    def __init__(self, points: float = 1.0) -> None:
        """
        Initialize the policy.

        Args:
            points: Points per test of change.
        """
        self.points = points

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the policy name."""

    @abstractmethod
    def score(self, current: TestSummary, baseline: TestSummary) -> RuleResult[int]:
        """Compare the current summary with the baseline summary."""

    @abstractmethod
    def describe(self, delta: int) -> str:
        """Describe a (possibly aggregated) test count delta."""

    def _empty_result(self) -> RuleResult[int]:
        return RuleResult[int](points=0.0, additional_data=0)


class TestCountPolicy(ScoringPolicy):
    """Awards points per test added and deducts points per test removed."""

    @property
    def name(self) -> str:
        return "test_count"

    def score(self, current: TestSummary, baseline: TestSummary) -> RuleResult[int]:
        delta = current.total_count - baseline.total_count
        if delta == 0:
            return self._empty_result()
        return RuleResult[int](
            points=delta * self.points,
            description=self.describe(delta),
            additional_data=delta,
        )

    def describe(self, delta: int) -> str:
        if delta > 0:
            return f"{delta} more {_tests(delta)}"
        if delta < 0:
            return f"{-delta} fewer {_tests(delta)}"
        return "No change in number of tests"


class _CountChangePolicy(ScoringPolicy):
    """Scores a change in one of the summary counts in a single direction.

    Subclasses set the counted attribute, the direction that scores, whether
    more of the count is good (reward 1) or bad (reward -1), and the
    description template.
    """

    count: str
    increasing: bool
    reward: int
    template: str

    def score(self, current: TestSummary, baseline: TestSummary) -> RuleResult[int]:
        diff = getattr(current, self.count) - getattr(baseline, self.count)
        if (diff > 0) if self.increasing else (diff < 0):
            return RuleResult[int](
                points=diff * self.points * self.reward,
                description=self.describe(diff),
                additional_data=diff,
            )
        return self._empty_result()

    def describe(self, delta: int) -> str:
        return self.template.format(count=abs(delta), tests=_tests(delta))


class IncreasingPassedTestsPolicy(_CountChangePolicy):
    name = "increasing_passed_tests"
    count = "pass_count"
    increasing = True
    reward = 1
    template = "{count} new passing {tests}"


class DecreasingPassedTestsPolicy(_CountChangePolicy):
    name = "decreasing_passed_tests"
    count = "pass_count"
    increasing = False
    reward = 1
    template = "{count} fewer passing {tests}"


class IncreasingFailedTestsPolicy(_CountChangePolicy):
    name = "increasing_failed_tests"
    count = "fail_count"
    increasing = True
    reward = -1
    template = "{count} new failing {tests}"


class DecreasingFailedTestsPolicy(_CountChangePolicy):
    name = "decreasing_failed_tests"
    count = "fail_count"
    increasing = False
    reward = -1
    template = "{count} fewer failing {tests}"


class IncreasingSkippedTestsPolicy(_CountChangePolicy):
    name = "increasing_skipped_tests"
    count = "skip_count"
    increasing = True
    reward = -1
    template = "{count} new skipped {tests}"


class DecreasingSkippedTestsPolicy(_CountChangePolicy):
    name = "decreasing_skipped_tests"
    count = "skip_count"
    increasing = False
    reward = -1
    template = "{count} fewer skipped {tests}"


class UnitTestsRule(AggregatableRule[int]):
    """
    Scores the test results of a build against the last comparable build.

    The baseline is the youngest previous build that is UNSTABLE or SUCCESS
    with test results. Builds that were not run or were aborted are passed
    over. When the nearest candidate is a FAILURE, its test results are not
    trusted and the comparison is made against the youngest UNSTABLE or
    SUCCESS build before it.
    """

    def __init__(self, policy: ScoringPolicy) -> None:
        self.policy = policy

    @property
    def name(self) -> str:
        return self.policy.name

    def evaluate(
        self,
        build: BuildRecord | None,
        previous_build: BuildRecord | None = NOT_GIVEN,
    ) -> RuleResult[int] | None:
        if previous_build is NOT_GIVEN:
            raise UnsupportedEvaluationError(self.name)

        baseline = find_usable_baseline(previous_build)
        if baseline is None and build is None:
            return None

        outcome, summary = self._normalize(build)
        baseline_outcome, baseline_summary = self._normalize(baseline)

        if outcome.is_better_than(BuildOutcome.FAILURE) and (
            baseline_outcome.is_better_than(BuildOutcome.FAILURE)
        ):
            return self.policy.score(summary, baseline_summary)
        if baseline_outcome == BuildOutcome.FAILURE:
            return self._evaluate_when_previous_is_failure(summary, baseline)

        logger.debug(
            "%s: no score for a %s build against a %s baseline",
            self.name,
            outcome.value,
            baseline_outcome.value,
            extra={"rule": self.name},
        )
        return None

    @staticmethod
    def _normalize(
        build: BuildRecord | None,
    ) -> tuple[BuildOutcome, TestSummary]:
        """Substitute defaults for missing builds, outcomes and test results.

        A missing build counts as a SUCCESS without tests. A build without an
        outcome counts as ABORTED.
        """
        if build is None:
            return BuildOutcome.SUCCESS, ZERO_SUMMARY
        return (
            build.outcome or BuildOutcome.ABORTED,
            build.test_summary or ZERO_SUMMARY,
        )

    def _evaluate_when_previous_is_failure(
        self, summary: TestSummary, failed_build: BuildRecord
    ) -> RuleResult[int] | None:
        # The search starts at the failed build itself, which it never matches
        older = find_baseline_above_failure(failed_build)
        if older is None or older.test_summary is None:
            logger.debug(
                "%s: no passing build with tests before failed build %s",
                self.name,
                getattr(failed_build, "number", None),
                extra={"rule": self.name},
            )
            return None

        logger.debug(
            "%s: comparing against build %s past failed build %s",
            self.name,
            getattr(older, "number", None),
            getattr(failed_build, "number", None),
            extra={"rule": self.name},
        )
        return self.policy.score(summary, older.test_summary)

    def aggregate(
        self, results: Iterable[RuleResult[int] | None]
    ) -> RuleResult[None] | None:
        score = 0.0
        test_diff = 0
        for result in results:
            if result is not None:
                score += result.points
                test_diff += result.additional_data or 0

        if score != 0.0:
            return RuleResult[None](
                points=score, description=self.policy.describe(test_diff)
            )
        return None


POLICIES: dict[str, tuple[type[ScoringPolicy], str]] = {
    "test_count": (TestCountPolicy, "test_count_points"),
    "increasing_passed_tests": (IncreasingPassedTestsPolicy, "passed_test_points"),
    "decreasing_passed_tests": (DecreasingPassedTestsPolicy, "passed_test_points"),
    "increasing_failed_tests": (IncreasingFailedTestsPolicy, "failed_test_points"),
    "decreasing_failed_tests": (DecreasingFailedTestsPolicy, "failed_test_points"),
    "increasing_skipped_tests": (
        IncreasingSkippedTestsPolicy,
        "skipped_test_points",
    ),
    "decreasing_skipped_tests": (
        DecreasingSkippedTestsPolicy,
        "skipped_test_points",
    ),
}


def unit_testing_rule_set(
    settings: ScoringSettings | None = None,
) -> list[UnitTestsRule]:
    """
    Build the unit-testing rules enabled in the scoring settings.

    Args:
        settings: Scoring settings. If None, uses the scoring section of
            the cached settings, so environment variables and a discovered
            cigame.config.yaml apply.

    Returns:
        One UnitTestsRule per enabled policy, in configuration order.
    """
    if settings is None:
        settings = get_cached_settings().scoring
    rules = []
    for rule_name in settings.enabled_rules:
        policy_class, weight_field = POLICIES[rule_name]
        policy = policy_class(points=getattr(settings, weight_field))
        rules.append(UnitTestsRule(policy))
    return rules
