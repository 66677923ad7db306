"""Base rule interface."""

from abc import ABC, abstractmethod
from collections.abc import Iterable
from typing import Any, Generic, TypeVar

from cigame.history import BuildRecord

from .models import RuleResult

T = TypeVar("T")


class _NotGiven:
    def __repr__(self) -> str:
        return "NOT_GIVEN"


NOT_GIVEN: Any = _NotGiven()
"""Marks an omitted ``previous_build`` argument, since None is a valid build."""


class AggregatableRule(ABC, Generic[T]):
    """
    Base class for rules scored against a previous build.

    A rule compares a build with an earlier one and yields a RuleResult.
    Results for several build pairs (for example the sub-builds of a
    matrix job) are combined with aggregate().
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the rule name."""

    @abstractmethod
    def evaluate(
        self,
        build: BuildRecord | None,
        previous_build: BuildRecord | None = NOT_GIVEN,
    ) -> RuleResult[T] | None:
        """
        Score a build against its history.

        Args:
            build: Build being scored.
            previous_build: Build preceding ``build``. Must always be passed,
                even when it is None.

        Returns:
            RuleResult, or None if the builds cannot be compared.
        """

    @abstractmethod
    def aggregate(
        self, results: Iterable[RuleResult[T] | None]
    ) -> RuleResult[None] | None:
        """
        Combine results of several evaluations into one summary.

        Args:
            results: Results from evaluate(); None entries are ignored.

        Returns:
            Summary RuleResult, or None if there is nothing to report.
        """
