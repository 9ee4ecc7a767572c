import pytest

from domain.classification.calibration import (
    apply_domain_boosts,
    boosted_score,
    calibrate_distribution,
    count_markers,
)
from domain.schemas import DomainType


def test_count_markers_counts_indicators_not_markers() -> None:
    indicators = ["pattern: api", "bonus: build rest api", "secondary: api", "primary: build"]
    # each indicator counts once even when it carries several markers
    assert count_markers(indicators, ["pattern:", "bonus:", "api"]) == 3
    assert count_markers(indicators, ["primary:"]) == 1
    assert count_markers([], ["pattern:"]) == 0


@pytest.mark.parametrize(
    ("indicators", "base", "expected"),
    [
        (["content creation", "bonus: write blog"], 0.5, 0.65),
        (["content creation", "bonus: write blog"], 0.9, 0.95),
        (["content creation"], 0.5, 0.6),
        (["primary: write", "secondary: blog", "context: audience"], 0.75, 0.79),
        (["primary: write"], 0.5, 0.55),
        (["primary: write"], 0.58, 0.59),
        (["semantic similarity: 20.0%"], 0.3, 0.3),
        (["semantic similarity: 90.0%"], 0.6, 0.39),
    ],
)
def test_calibrate_distribution_bands(classifier_tables, indicators, base, expected) -> None:
    assert calibrate_distribution(base, indicators, classifier_tables.calibration) == pytest.approx(expected)


def test_boosts_only_apply_to_matching_domain(classifier_tables) -> None:
    indicators = ["implementation task", "primary: implement"]
    boosts = classifier_tables.boosts

    assert boosted_score(DomainType.CODE, 0.5, indicators, boosts) == pytest.approx(0.75)
    assert boosted_score(DomainType.WRITING, 0.5, indicators, boosts) == pytest.approx(0.5)


def test_final_score_takes_larger_path_and_caps(classifier_tables) -> None:
    kwargs = {"calibration": classifier_tables.calibration, "boosts": classifier_tables.boosts}

    # calibration wins: one moderate indicator, no boost
    assert apply_domain_boosts(DomainType.ANALYSIS, 0.3, ["primary: chart"], **kwargs) == pytest.approx(0.35)
    # boost wins and is capped at 1.0
    score = apply_domain_boosts(DomainType.CODE, 0.9, ["implementation task", "primary: implement"], **kwargs)
    assert score == pytest.approx(1.0)
