import pytest

from app.features.pagespeed.schemas.pagespeed import Category, ScoreSet
from app.features.pagespeed.services.scoring import (
    ScoreStatus,
    derive_scores,
    needs_help,
    score_status,
    score_statuses,
    to_percentage,
)


def _categories(**scores):
    return {key.replace("_", "-"): Category(id=key, score=value) for key, value in scores.items()}


def test_derive_scores_from_upstream_categories():
    categories = _categories(performance=0.873, seo=1, accessibility=0.602, best_practices=0)

    assert derive_scores(categories) == ScoreSet(
        performance=87, seo=100, accessibility=60, best_practices=0
    )


def test_missing_category_and_null_score_are_zero():
    categories = _categories(performance=None, seo=0.5)

    scores = derive_scores(categories)
    assert scores.performance == 0
    assert scores.seo == 50
    assert scores.accessibility == 0
    assert scores.best_practices == 0


def test_serialized_with_camel_case_key():
    scores = ScoreSet(performance=1, seo=2, accessibility=3, best_practices=4)
    assert scores.model_dump(by_alias=True) == {
        "performance": 1,
        "seo": 2,
        "accessibility": 3,
        "bestPractices": 4,
    }


@pytest.mark.parametrize(
    "score, expected",
    [(0, 0), (1, 100), (0.005, 1), (0.125, 13), (0.994, 99), (0.996, 100), (0.29, 29), (None, 0)],
)
def test_to_percentage_rounds_half_up(score, expected):
    assert to_percentage(score) == expected


def test_to_percentage_stays_in_range_for_every_step():
    for step in range(0, 1001):
        value = to_percentage(step / 1000)
        assert 0 <= value <= 100
        assert abs(value - step / 10) <= 0.5 + 1e-9


@pytest.mark.parametrize(
    "score, status, label",
    [
        (100, ScoreStatus.GOOD, "Looking great"),
        (80, ScoreStatus.GOOD, "Looking great"),
        (79, ScoreStatus.AVERAGE, "Could be better"),
        (60, ScoreStatus.AVERAGE, "Could be better"),
        (59, ScoreStatus.POOR, "Needs improvement"),
        (0, ScoreStatus.POOR, "Needs improvement"),
    ],
)
def test_score_status(score, status, label):
    assert score_status(score) is status
    assert score_status(score).label == label


def test_needs_help_when_any_score_is_poor():
    good = ScoreSet(performance=90, seo=90, accessibility=90, best_practices=90)
    poor = ScoreSet(performance=45, seo=90, accessibility=90, best_practices=90)

    assert needs_help(good) is False
    assert needs_help(poor) is True
    assert needs_help(good, threshold=95) is True


def test_score_statuses_use_response_keys():
    scores = ScoreSet(performance=45, seo=100, accessibility=70, best_practices=80)

    assert score_statuses(scores) == {
        "performance": {"status": "poor", "label": "Needs improvement"},
        "seo": {"status": "good", "label": "Looking great"},
        "accessibility": {"status": "average", "label": "Could be better"},
        "bestPractices": {"status": "good", "label": "Looking great"},
    }
