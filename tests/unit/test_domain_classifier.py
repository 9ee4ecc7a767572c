import asyncio
import logging

import pytest

from domain.classification import HybridClassifier
from domain.classifier import DomainClassifier, DomainClassifierConfig
from domain.schemas import ClassificationResult, DomainType


class ExplodingHybrid(HybridClassifier):
    def classify(self, prompt):
        raise RuntimeError("tables corrupted")


class SlowHybrid(HybridClassifier):
    def classify(self, prompt):
        return ClassificationResult(
            domain=DomainType.WRITING,
            confidence=88,
            indicators=["content creation"],
            processing_time_ms=50.0,
        )


def _ready(classifier: DomainClassifier) -> DomainClassifier:
    asyncio.run(classifier.initialize())
    return classifier


def test_not_initialized_returns_default(classifier_tables) -> None:
    result = DomainClassifier(classifier_tables).classify_domain("implement binary search algorithm")

    assert result.domain == DomainType.CODE
    assert result.confidence == 50
    assert result.indicators == ["not initialized"]


@pytest.mark.parametrize("prompt", ["", "  \n ", None])
def test_empty_prompt(classifier_tables, prompt) -> None:
    result = _ready(DomainClassifier(classifier_tables)).classify_domain(prompt)
    assert (result.domain, result.confidence, result.indicators) == (DomainType.CODE, 50, ["empty prompt"])


def test_passes_through_confident_result(classifier_tables) -> None:
    result = _ready(DomainClassifier(classifier_tables)).classify_domain("write blog post about productivity")

    assert result.domain == DomainType.WRITING
    assert result.confidence >= 80
    assert "content creation" in result.indicators


def test_confidence_floor_replaces_weak_results(classifier_tables) -> None:
    classifier = _ready(DomainClassifier(classifier_tables, DomainClassifierConfig(min_confidence=90)))

    result = classifier.classify_domain("hello there friend")

    assert result.domain == DomainType.CODE
    assert result.confidence == 90
    assert result.indicators == ["extremely low confidence"]


def test_errors_become_default_result(classifier_tables, caplog) -> None:
    classifier = _ready(DomainClassifier(hybrid=ExplodingHybrid(classifier_tables)))

    with caplog.at_level(logging.WARNING, logger="domain.classifier"):
        result = classifier.classify_domain("implement binary search algorithm")

    assert result.indicators == ["classification error"]
    assert result.confidence == 50
    assert "tables corrupted" in caplog.text


def test_slow_classification_is_logged(classifier_tables, caplog) -> None:
    config = DomainClassifierConfig(max_processing_time_ms=20, enable_performance_logging=True)
    classifier = _ready(DomainClassifier(config=config, hybrid=SlowHybrid(classifier_tables)))

    with caplog.at_level(logging.WARNING, logger="domain.classifier"):
        result = classifier.classify_domain("write a haiku")

    assert result.domain == DomainType.WRITING
    assert result.confidence == 88
    assert "exceeded" in caplog.text


def test_slow_classification_is_silent_without_performance_logging(classifier_tables, caplog) -> None:
    classifier = _ready(DomainClassifier(hybrid=SlowHybrid(classifier_tables)))

    with caplog.at_level(logging.WARNING, logger="domain.classifier"):
        classifier.classify_domain("write a haiku")

    assert "exceeded" not in caplog.text


def test_layer_info_is_delegated(classifier_tables) -> None:
    classifier = DomainClassifier(classifier_tables)
    assert [name for name, _ in classifier.layer_info()] == ["embedding", "pattern", "rule", "heuristic"]


def test_tables_and_prebuilt_hybrid_are_exclusive(classifier_tables) -> None:
    with pytest.raises(ValueError, match="exactly one"):
        DomainClassifier(classifier_tables, hybrid=SlowHybrid(classifier_tables))
    with pytest.raises(ValueError, match="exactly one"):
        DomainClassifier()


def test_prebuilt_hybrid_is_used_as_is(classifier_tables) -> None:
    hybrid = SlowHybrid(classifier_tables)
    classifier = DomainClassifier(hybrid=hybrid)

    assert classifier.hybrid is hybrid
