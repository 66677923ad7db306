"""Data models for rule evaluation."""

from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")


class RuleResult(BaseModel, Generic[T]):
    """Points awarded by one rule evaluation.

    ``additional_data`` is a rule-specific payload carried through to
    aggregation; unit-test rules store the signed test count delta there.
    """

    model_config = ConfigDict(frozen=True)

    points: float = Field(..., description="Score contribution")
    description: str = Field(default="", description="Human-readable summary")
    additional_data: T | None = Field(None, description="Rule-specific payload")
