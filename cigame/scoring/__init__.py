"""Score collection for CI Game."""

from .models import Score
from .scorecard import ScoreCard

__all__ = [
    "Score",
    "ScoreCard",
]
