"""Context pattern layer: regex templates describing typical task phrasings per domain."""

from domain.schemas import DomainScore
from domain.tables.classifier import ClassifierTables, PatternConfig

from .base import ClassificationLayer
from .registry import register_layer


class PatternLayer(ClassificationLayer):
    name = "pattern"

    def __init__(self, config: PatternConfig, *, weight: float) -> None:
        super().__init__(weight=weight)
        self.config = config

    @classmethod
    def from_tables(cls, tables: ClassifierTables, *, weight: float) -> "PatternLayer":
        return cls(tables.patterns, weight=weight)

    def classify(self, prompt: str) -> list[DomainScore]:
        clean_prompt = prompt.lower()
        scores: list[DomainScore] = []

        for domain, templates in self.config.patterns.items():
            matched = [t for t in templates if t.compiled.search(clean_prompt)]
            if not matched:
                continue

            max_score = max(t.score for t in matched)
            if max_score <= 0:
                continue

            scores.append(
                DomainScore(
                    domain=domain,
                    score=self.config.calibrate(max_score, len(matched)),
                    method=self.name,
                    indicators=[t.description for t in matched],
                )
            )
        return scores


register_layer(PatternLayer.name, PatternLayer)
