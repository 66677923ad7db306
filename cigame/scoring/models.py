"""Data models for scoring."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class Score(BaseModel):
    """Points a single rule awarded to a build."""

    model_config = ConfigDict(frozen=True)

    rule_name: str = Field(
        ..., description="Rule that produced the score", min_length=1
    )
    points: float = Field(..., description="Points awarded, negative for penalties")
    description: str = Field(default="", description="Human-readable reason")

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for reporting."""
        return {
            "rule": self.rule_name,
            "points": round(self.points, 4),
            "description": self.description,
        }
