"""
Hybrid classifier: runs every scoring layer and merges their opinions.

Pipeline per call:
- collect DomainScores from all layers (a failing layer is logged and skipped),
- aggregate per domain with the enhanced weighted average,
- pick the winner by weighted score with the peak layer score as tie-breaker,
- calibrate and boost the winner, then convert to an integer confidence.
"""

import asyncio
import logging
import math
import time
from collections.abc import Sequence

from domain.schemas import AggregatedScore, ClassificationResult, DomainScore, DomainType
from domain.tables.classifier import ClassifierTables

from .base import ClassificationLayer
from .calibration import apply_domain_boosts
from .registry import make_layers

logger = logging.getLogger(__name__)


class ClassifierNotInitializedError(RuntimeError):
    """Raised when classify() is called before initialize() completed."""


def to_confidence(score: float) -> int:
    """Convert a 0-1 score to an integer percentage (half rounds up), clamped to [0, 100]."""
    return max(0, min(100, math.floor(score * 100 + 0.5)))


class HybridClassifier:
    """
    Multi-layer domain classifier.

    Layers are built from the `layers:` section of the tables unless passed
    explicitly. The instance holds no per-call state; after initialize() it
    can be shared between callers.
    """

    def __init__(
        self,
        tables: ClassifierTables,
        *,
        layers: Sequence[ClassificationLayer] | None = None,
    ) -> None:
        self.tables = tables
        self.layers: list[ClassificationLayer] = list(layers) if layers is not None else make_layers(tables)
        self._weights = {layer.name: layer.weight for layer in self.layers}
        self._initialized = False

    @property
    def initialized(self) -> bool:
        return self._initialized

    async def initialize(self) -> None:
        """Run all layer initializations concurrently; required before classify()."""
        await asyncio.gather(*(layer.initialize() for layer in self.layers))
        self._initialized = True
        logger.info(
            "Hybrid classifier initialized (tables v%s, layers=%s)",
            self.tables.version,
            ", ".join(f"{name}:{weight}" for name, weight in self.layer_info()),
        )

    def layer_info(self) -> list[tuple[str, float]]:
        return [(layer.name, layer.weight) for layer in self.layers]

    def classify(self, prompt: str | None) -> ClassificationResult:
        start = time.perf_counter()

        if not self._initialized:
            raise ClassifierNotInitializedError("HybridClassifier not initialized. Call initialize() first.")

        agg_cfg = self.tables.aggregation
        if not prompt or not prompt.strip():
            return ClassificationResult(
                domain=agg_cfg.default_domain,
                confidence=agg_cfg.empty_prompt_confidence,
                method="default",
                indicators=[agg_cfg.empty_prompt_indicator],
                layer_scores=[],
                processing_time_ms=_elapsed_ms(start),
            )

        layer_scores = self.collect_layer_scores(prompt)
        aggregated = self.aggregate_scores(layer_scores)
        best = self.select_best_domain(aggregated)

        final_score = apply_domain_boosts(
            best.domain,
            best.weighted_score,
            best.indicators,
            calibration=self.tables.calibration,
            boosts=self.tables.boosts,
        )

        return ClassificationResult(
            domain=best.domain,
            confidence=to_confidence(final_score),
            method="hybrid",
            indicators=best.indicators,
            layer_scores=layer_scores,
            processing_time_ms=_elapsed_ms(start),
        )

    def collect_layer_scores(self, prompt: str) -> list[DomainScore]:
        scores: list[DomainScore] = []
        for layer in self.layers:
            try:
                scores.extend(layer.classify(prompt))
            except Exception as e:
                logger.warning("Layer %s failed, continuing without it: %s", layer.name, e)
        return scores

    def weight_of(self, method: str) -> float:
        return self._weights.get(method, self.tables.aggregation.unknown_layer_weight)

    def weighted_average(self, scores: Sequence[DomainScore]) -> float:
        total_weight = sum(self.weight_of(s.method) for s in scores)
        if total_weight <= 0:
            return 0.0
        return sum(s.score * self.weight_of(s.method) for s in scores) / total_weight

    def enhanced_aggregation(self, scores: Sequence[DomainScore]) -> float:
        """
        Combine the layer scores of one domain.

        If any layer is highly confident, its group dominates (70/30 split by
        default). Otherwise use the weighted average, plus a capped bonus when
        several layers agree on the domain.
        """
        cfg = self.tables.aggregation
        if not scores:
            return 0.0

        if max(s.score for s in scores) >= cfg.high_confidence_threshold:
            high = [s for s in scores if s.score >= cfg.high_confidence_threshold]
            other = [s for s in scores if s.score < cfg.high_confidence_threshold]
            high_score = self.weighted_average(high)
            other_score = self.weighted_average(other) if other else 0.0
            return high_score * cfg.high_confidence_share + other_score * (1 - cfg.high_confidence_share)

        standard = self.weighted_average(scores)
        if len(scores) >= cfg.agreement_min_layers:
            return min(cfg.agreement_ceiling, standard + cfg.agreement_bonus)
        return standard

    def aggregate_scores(self, layer_scores: Sequence[DomainScore]) -> dict[DomainType, AggregatedScore]:
        aggregated = {domain: AggregatedScore(domain=domain) for domain in DomainType}
        for score in layer_scores:
            aggregated[score.domain].add(score)

        for entry in aggregated.values():
            if entry.layer_count > 0:
                entry.weighted_score = self.enhanced_aggregation(entry.layer_scores)
        return aggregated

    def select_best_domain(self, aggregated: dict[DomainType, AggregatedScore]) -> AggregatedScore:
        cfg = self.tables.aggregation

        def effective(entry: AggregatedScore) -> float:
            return entry.weighted_score + entry.max_score * cfg.tie_break_weight

        best: AggregatedScore | None = None
        for entry in aggregated.values():
            if entry.layer_count == 0:
                continue
            # Strictly greater keeps the first domain on exact ties
            if best is None or effective(entry) > effective(best):
                best = entry

        if best is None or best.weighted_score < cfg.min_weighted_score:
            logger.debug("No domain reached %.2f; using default %s", cfg.min_weighted_score, cfg.default_domain.value)
            return AggregatedScore(
                domain=cfg.default_domain,
                weighted_score=cfg.default_score,
                max_score=cfg.default_score,
                indicators=[cfg.default_indicator],
            )
        return best


def _elapsed_ms(start: float) -> float:
    return round((time.perf_counter() - start) * 1000, 2)
