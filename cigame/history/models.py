"""Data models for build history."""

from collections.abc import Sequence
from enum import Enum
from typing import Any, Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict, Field, model_validator


class BuildOutcome(str, Enum):
    """Terminal status of a build.

    Members are declared worst to best; the declaration order is the
    total order used by every comparison:
    NOT_BUILT < ABORTED < FAILURE < UNSTABLE < SUCCESS.
    """

    NOT_BUILT = "not_built"
    ABORTED = "aborted"
    FAILURE = "failure"
    UNSTABLE = "unstable"
    SUCCESS = "success"

    @property
    def ordinal(self) -> int:
        """Position in the outcome order, 0 being the worst."""
        return list(type(self)).index(self)

    def is_better_than(self, other: "BuildOutcome") -> bool:
        return self.ordinal > other.ordinal

    def is_worse_than(self, other: "BuildOutcome") -> bool:
        return self.ordinal < other.ordinal

    def is_better_or_equal_to(self, other: "BuildOutcome") -> bool:
        return self.ordinal >= other.ordinal

    def is_worse_or_equal_to(self, other: "BuildOutcome") -> bool:
        return self.ordinal <= other.ordinal

    # str's lexical ordering would otherwise apply
    def __lt__(self, other: object) -> bool:
        if not isinstance(other, BuildOutcome):
            return NotImplemented
        return self.is_worse_than(other)

    def __le__(self, other: object) -> bool:
        if not isinstance(other, BuildOutcome):
            return NotImplemented
        return self.is_worse_or_equal_to(other)

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, BuildOutcome):
            return NotImplemented
        return self.is_better_than(other)

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, BuildOutcome):
            return NotImplemented
        return self.is_better_or_equal_to(other)


class TestSummary(BaseModel):
    """Counts reported by the test runner for one build."""

    model_config = ConfigDict(frozen=True)

    fail_count: int = Field(default=0, description="Failed tests", ge=0)
    total_count: int = Field(default=0, description="All tests run", ge=0)
    skip_count: int = Field(default=0, description="Skipped tests", ge=0)

    @model_validator(mode="after")
    def validate_counts(self) -> "TestSummary":
        """Ensure failed and skipped tests fit in the total."""
        if self.fail_count + self.skip_count > self.total_count:
            raise ValueError(
                f"fail_count ({self.fail_count}) + skip_count ({self.skip_count}) "
                f"cannot exceed total_count ({self.total_count})"
            )
        return self

    @property
    def pass_count(self) -> int:
        """Number of tests that neither failed nor were skipped."""
        return self.total_count - self.fail_count - self.skip_count


ZERO_SUMMARY = TestSummary(fail_count=0, total_count=0, skip_count=0)
"""Stands in for a build without test data."""


@runtime_checkable
class BuildRecord(Protocol):
    """Read-only view of a build as supplied by the host's build history."""

    @property
    def outcome(self) -> BuildOutcome | None: ...

    @property
    def test_summary(self) -> TestSummary | None: ...

    @property
    def predecessor(self) -> "BuildRecord | None": ...


class Build(BaseModel):
    """Immutable in-memory build record.

    Each build references at most one predecessor, forming a chain that
    ends at the first build of the project.

    Equality and hashing look at the build itself and never follow the
    chain, so histories of any length compare in constant stack depth.
    """

    model_config = ConfigDict(frozen=True)

    number: int = Field(..., description="Build number", ge=0)
    outcome: BuildOutcome | None = Field(
        None, description="Terminal outcome, None while running or when unknown"
    )
    test_summary: TestSummary | None = Field(
        None, description="Test counts, None if no tests were recorded"
    )
    predecessor: "Build | None" = Field(None, description="Previous build")

    def __repr__(self) -> str:
        outcome = self.outcome.value if self.outcome else None
        return f"Build(number={self.number}, outcome={outcome})"

    def _key(self) -> tuple[Any, ...]:
        return self.number, self.outcome, self.test_summary

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Build):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self) -> int:
        return hash(self._key())

    @classmethod
    def from_history(cls, records: Sequence[dict[str, Any]]) -> "Build | None":
        """Link a flat history into a chain.

        Args:
            records: Build data ordered oldest first. Each entry may hold
                ``outcome``, ``test_summary`` and ``number``; missing numbers
                are assigned sequentially starting at 1.

        Returns:
            The newest build, or None for an empty history.
        """
        build: Build | None = None
        for index, record in enumerate(records, start=1):
            data = {"number": index, **record}
            build = cls(**data, predecessor=build)
        return build
