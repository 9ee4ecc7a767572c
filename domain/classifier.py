"""Public domain classification entry point wrapping the hybrid classifier."""

import logging
import time

from pydantic import BaseModel, Field

from domain.classification import HybridClassifier
from domain.schemas import DomainClassificationResult, DomainType
from domain.tables.classifier import ClassifierTables

logger = logging.getLogger(__name__)


class DomainClassifierConfig(BaseModel):
    """Runtime knobs of the facade (not part of the versioned tables)."""

    min_confidence: int = Field(default=20, ge=0, le=100)
    max_processing_time_ms: float = Field(default=20.0, gt=0)
    enable_performance_logging: bool = False


class DomainClassifier:
    """
    Never-raising wrapper around HybridClassifier.

    Differences from calling the hybrid classifier directly:
    - before initialize() it answers with a "not initialized" default instead of raising,
    - results below `min_confidence` are replaced with the default domain at that floor,
    - unexpected classification errors are logged and turned into a default result.
    """

    def __init__(
        self,
        tables: ClassifierTables | None = None,
        config: DomainClassifierConfig | None = None,
        *,
        hybrid: HybridClassifier | None = None,
    ) -> None:
        if (tables is None) == (hybrid is None):
            raise ValueError("Pass exactly one of `tables` or a prebuilt `hybrid` classifier")
        self.config = config or DomainClassifierConfig()
        self.hybrid = hybrid if hybrid is not None else HybridClassifier(tables)
        self._initialized = False

    async def initialize(self) -> None:
        if not self._initialized:
            await self.hybrid.initialize()
            self._initialized = True

    def layer_info(self) -> list[tuple[str, float]]:
        return self.hybrid.layer_info()

    def classify_domain(self, prompt: str | None) -> DomainClassificationResult:
        start = time.perf_counter()

        if not self._initialized:
            return _default_result(DomainType.CODE, 50, "not initialized", start)

        if not prompt or not prompt.strip():
            return _default_result(DomainType.CODE, 50, "empty prompt", start)

        try:
            result = self.hybrid.classify(prompt)
        except Exception as e:
            logger.warning("Hybrid classification failed, using fallback: %s", e)
            return _default_result(DomainType.CODE, 50, "classification error", start)

        if result.processing_time_ms > self.config.max_processing_time_ms and self.config.enable_performance_logging:
            logger.warning(
                "Domain classification exceeded %.0fms: %.2fms",
                self.config.max_processing_time_ms,
                result.processing_time_ms,
            )

        if result.confidence < self.config.min_confidence:
            return _default_result(DomainType.CODE, self.config.min_confidence, "extremely low confidence", start)

        return DomainClassificationResult(
            domain=result.domain,
            confidence=result.confidence,
            indicators=result.indicators,
            processing_time_ms=result.processing_time_ms,
        )


def _default_result(domain: DomainType, confidence: int, indicator: str, start: float) -> DomainClassificationResult:
    return DomainClassificationResult(
        domain=domain,
        confidence=confidence,
        indicators=[indicator],
        processing_time_ms=round((time.perf_counter() - start) * 1000, 2),
    )
