"""Score card collecting rule scores for a build."""

import logging
from collections.abc import Iterable, Sequence
from typing import Any

from cigame.history import BuildRecord
from cigame.rules import AggregatableRule, unit_testing_rule_set
from cigame.rules.models import RuleResult

from .models import Score

logger = logging.getLogger(__name__)


class ScoreCard:
    """
    Applies a set of rules to a build and keeps the resulting scores.

    Rules that find nothing to report (a None or zero-point result) do not
    appear on the card.
    """

    def __init__(self, rules: Sequence[AggregatableRule[Any]] | None = None) -> None:
        """
        Initialize the score card.

        Args:
            rules: Rules to apply. If None, uses the default unit-testing
                rule set.
        """
        self.rules: list[AggregatableRule[Any]] = (
            list(rules) if rules is not None else list(unit_testing_rule_set())
        )
        self.scores: list[Score] = []

    @property
    def total_points(self) -> float:
        """Sum of points over all recorded scores."""
        return sum(score.points for score in self.scores)

    def record(
        self,
        build: BuildRecord | None,
        previous_build: BuildRecord | None,
    ) -> list[Score]:
        """
        Score one build against its predecessor with every rule.

        Args:
            build: Build being scored.
            previous_build: Build preceding it, or None for the first build.

        Returns:
            Scores added to the card by this call.
        """
        added = []
        for rule in self.rules:
            result = rule.evaluate(build, previous_build)
            score = self._add(rule, result)
            if score is not None:
                added.append(score)
        return added

    def record_sweep(
        self,
        pairs: Iterable[tuple[BuildRecord | None, BuildRecord | None]],
    ) -> list[Score]:
        """
        Score several builds and combine the results per rule.

        Used for jobs made of several builds scored as one, such as the
        configurations of a matrix build.

        Args:
            pairs: (build, previous_build) pairs.

        Returns:
            Scores added to the card by this call, one per rule at most.
        """
        pairs = list(pairs)
        added = []
        for rule in self.rules:
            results = [rule.evaluate(build, previous) for build, previous in pairs]
            score = self._add(rule, rule.aggregate(results))
            if score is not None:
                added.append(score)
        return added

    def _add(
        self, rule: AggregatableRule[Any], result: RuleResult[Any] | None
    ) -> Score | None:
        if result is None or result.points == 0.0:
            return None

        score = Score(
            rule_name=rule.name,
            points=result.points,
            description=result.description,
        )
        self.scores.append(score)
        logger.info(
            "Recorded %s points for %s",
            score.points,
            score.rule_name,
            extra={"rule": score.rule_name, "points": score.points},
        )
        return score

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for reporting."""
        return {
            "total_points": round(self.total_points, 4),
            "scores": [score.to_dict() for score in self.scores],
        }

