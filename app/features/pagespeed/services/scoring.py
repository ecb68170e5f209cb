import math
from enum import Enum
from typing import Mapping, Optional

from app.features.pagespeed.schemas.pagespeed import Category, ScoreSet

CATEGORY_KEYS = {
    "performance": "performance",
    "seo": "seo",
    "accessibility": "accessibility",
    "best_practices": "best-practices",
}

GOOD_SCORE = 80
AVERAGE_SCORE = 60


class ScoreStatus(str, Enum):
    GOOD = "good"
    AVERAGE = "average"
    POOR = "poor"

    @property
    def label(self) -> str:
        return {
            ScoreStatus.GOOD: "Looking great",
            ScoreStatus.AVERAGE: "Could be better",
            ScoreStatus.POOR: "Needs improvement",
        }[self]


def to_percentage(score: Optional[float]) -> int:
    """0-1 fraction to an integer percentage, rounding half up. None is 0."""
    if score is None:
        return 0
    percentage = math.floor(score * 100 + 0.5)
    return max(0, min(100, percentage))


def derive_scores(categories: Mapping[str, Category]) -> ScoreSet:
    values = {}
    for field, key in CATEGORY_KEYS.items():
        category = categories.get(key)
        values[field] = to_percentage(category.score if category is not None else None)
    return ScoreSet(**values)


def score_status(score: int) -> ScoreStatus:
    if score >= GOOD_SCORE:
        return ScoreStatus.GOOD
    if score >= AVERAGE_SCORE:
        return ScoreStatus.AVERAGE
    return ScoreStatus.POOR


def needs_help(scores: ScoreSet, threshold: int = AVERAGE_SCORE) -> bool:
    """True when any category is below the lead-capture threshold."""
    return any(value < threshold for value in scores.as_list())


def score_statuses(scores: ScoreSet) -> dict[str, dict[str, str]]:
    """Status and label per category, keyed like the serialized scores."""
    statuses = {}
    for name, value in scores.model_dump(by_alias=True).items():
        status = score_status(value)
        statuses[name] = {"status": status.value, "label": status.label}
    return statuses
