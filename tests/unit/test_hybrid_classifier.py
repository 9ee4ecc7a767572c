import asyncio
import logging

import pytest

from domain.classification import (
    ClassificationLayer,
    ClassifierNotInitializedError,
    HybridClassifier,
    PatternLayer,
    to_confidence,
)
from domain.schemas import DomainScore, DomainType


class SpyLayer(ClassificationLayer):
    name = "spy"

    def __init__(self, *, weight: float = 0.5) -> None:
        super().__init__(weight=weight)
        self.calls = 0

    @classmethod
    def from_tables(cls, tables, *, weight: float) -> "SpyLayer":
        return cls(weight=weight)

    def classify(self, prompt: str) -> list[DomainScore]:
        self.calls += 1
        return [DomainScore(domain=DomainType.ANALYSIS, score=0.5, method=self.name, indicators=["spy"])]


class FailingLayer(SpyLayer):
    name = "failing"

    def classify(self, prompt: str) -> list[DomainScore]:
        raise ValueError("boom")


@pytest.mark.parametrize(
    ("prompt", "expected"),
    [
        ("implement binary search algorithm", DomainType.CODE),
        ("write blog post about productivity", DomainType.WRITING),
        ("research best practices for security", DomainType.RESEARCH),
    ],
)
def test_classifies_clear_prompts(hybrid, prompt, expected) -> None:
    result = hybrid.classify(prompt)

    assert result.domain == expected
    assert result.confidence > 80
    assert result.method == "hybrid"
    assert result.indicators
    assert {s.method for s in result.layer_scores} <= {"embedding", "pattern", "rule", "heuristic"}


def test_code_prompt_indicators_come_from_all_layers(hybrid) -> None:
    result = hybrid.classify("implement binary search algorithm")

    assert result.confidence == 100
    assert "complex implementation task" in result.indicators
    assert "primary: implement" in result.indicators
    assert "code-specific patterns" in result.indicators


def test_classify_before_initialize_raises(classifier_tables) -> None:
    classifier = HybridClassifier(classifier_tables)
    with pytest.raises(ClassifierNotInitializedError):
        classifier.classify("implement binary search algorithm")


@pytest.mark.parametrize("prompt", ["", "   ", None])
def test_blank_prompt_short_circuits_without_calling_layers(classifier_tables, prompt) -> None:
    spy = SpyLayer()
    classifier = HybridClassifier(classifier_tables, layers=[spy])
    asyncio.run(classifier.initialize())

    result = classifier.classify(prompt)

    assert result.domain == DomainType.CODE
    assert result.confidence == 50
    assert result.indicators == ["empty prompt"]
    assert result.method == "default"
    assert result.layer_scores == []
    assert spy.calls == 0


def test_no_evidence_falls_back_to_default_domain(hybrid) -> None:
    result = hybrid.classify("hello there friend")

    assert result.domain == DomainType.CODE
    assert result.confidence == 50
    assert result.indicators == ["default classification"]
    assert result.method == "hybrid"


def test_failing_layer_is_skipped(classifier_tables, caplog) -> None:
    classifier = HybridClassifier(
        classifier_tables,
        layers=[FailingLayer(weight=0.5), PatternLayer.from_tables(classifier_tables, weight=0.3)],
    )
    asyncio.run(classifier.initialize())

    with caplog.at_level(logging.WARNING, logger="domain.classification.hybrid"):
        result = classifier.classify("write blog post about productivity")

    assert result.domain == DomainType.WRITING
    assert {s.method for s in result.layer_scores} == {"pattern"}
    assert any("failing" in r.getMessage() for r in caplog.records)


def test_classification_is_deterministic(hybrid) -> None:
    prompts = ["implement user authentication system", "analyze market trends data", "compare tools?"]
    for prompt in prompts:
        first = hybrid.classify(prompt)
        second = hybrid.classify(prompt)
        assert (first.domain, first.confidence, first.indicators) == (
            second.domain,
            second.confidence,
            second.indicators,
        )


@pytest.mark.parametrize(
    "prompt",
    [
        "IMPLEMENT Binary Search Algorithm",
        "implement @#$%^&*() algorithm with [brackets] and {braces}",
        "?",
        "a " * 200,
    ],
)
def test_confidence_is_bounded(hybrid, prompt) -> None:
    result = hybrid.classify(prompt)
    assert 0 <= result.confidence <= 100
    assert isinstance(result.domain, DomainType)
    assert result.processing_time_ms >= 0


def test_layer_info_and_unknown_weight(hybrid) -> None:
    assert hybrid.layer_info() == [("embedding", 0.4), ("pattern", 0.3), ("rule", 0.2), ("heuristic", 0.1)]
    assert hybrid.weight_of("nonexistent") == pytest.approx(0.1)


def _score(score: float, method: str) -> DomainScore:
    return DomainScore(domain=DomainType.CODE, score=score, method=method)


def test_enhanced_aggregation_agreement_bonus(hybrid) -> None:
    assert hybrid.enhanced_aggregation([_score(0.5, "embedding")]) == pytest.approx(0.5)
    assert hybrid.enhanced_aggregation([_score(0.5, "pattern"), _score(0.5, "rule")]) == pytest.approx(0.6)
    # bonus capped
    assert hybrid.enhanced_aggregation([_score(0.79, "embedding"), _score(0.79, "rule")]) == pytest.approx(0.85)


def test_enhanced_aggregation_high_confidence_group_dominates(hybrid) -> None:
    scores = [_score(0.9, "pattern"), _score(0.5, "embedding")]
    assert hybrid.enhanced_aggregation(scores) == pytest.approx(0.9 * 0.7 + 0.5 * 0.3)
    assert hybrid.enhanced_aggregation([_score(0.9, "pattern")]) == pytest.approx(0.63)


def test_aggregated_layer_count_matches_scores(hybrid) -> None:
    layer_scores = [_score(0.5, "pattern"), _score(0.6, "rule")]
    aggregated = hybrid.aggregate_scores(layer_scores)

    assert set(aggregated) == set(DomainType)
    for entry in aggregated.values():
        assert entry.layer_count == len(entry.layer_scores)
    assert aggregated[DomainType.CODE].max_score == pytest.approx(0.6)


def test_to_confidence_rounds_half_up_and_clamps() -> None:
    assert to_confidence(0.125) == 13
    assert to_confidence(1.2) == 100
    assert to_confidence(-0.1) == 0
