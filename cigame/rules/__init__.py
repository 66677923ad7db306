"""Scoring rules for CI Game."""

from .base import NOT_GIVEN, AggregatableRule
from .models import RuleResult
from .unittesting import (
    POLICIES,
    DecreasingFailedTestsPolicy,
    DecreasingPassedTestsPolicy,
    DecreasingSkippedTestsPolicy,
    IncreasingFailedTestsPolicy,
    IncreasingPassedTestsPolicy,
    IncreasingSkippedTestsPolicy,
    ScoringPolicy,
    TestCountPolicy,
    UnitTestsRule,
    unit_testing_rule_set,
)

__all__ = [
    # Base
    "AggregatableRule",
    "NOT_GIVEN",
    "RuleResult",
    # Unit tests
    "UnitTestsRule",
    "ScoringPolicy",
    "TestCountPolicy",
    "IncreasingPassedTestsPolicy",
    "DecreasingPassedTestsPolicy",
    "IncreasingFailedTestsPolicy",
    "DecreasingFailedTestsPolicy",
    "IncreasingSkippedTestsPolicy",
    "DecreasingSkippedTestsPolicy",
    "POLICIES",
    "unit_testing_rule_set",
]
