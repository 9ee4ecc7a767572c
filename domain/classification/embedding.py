"""
Lightweight semantic layer.

Compares the normalized term-frequency vector of the prompt against
pre-computed domain vectors by cosine similarity. The domain matrix is built
in initialize(), the one async setup point of the classifier.
"""

import logging
import re
from collections import Counter

import numpy as np

from domain.schemas import DomainScore, DomainType
from domain.tables.classifier import ClassifierTables, EmbeddingConfig

from .base import ClassificationLayer
from .registry import register_layer

logger = logging.getLogger(__name__)

_PUNCTUATION = re.compile(r"[^\w\s]")


class EmbeddingLayer(ClassificationLayer):
    name = "embedding"

    def __init__(self, config: EmbeddingConfig, *, weight: float) -> None:
        super().__init__(weight=weight)
        self.config = config
        self._stop_words = frozenset(w.lower() for w in config.stop_words)
        self._domains: list[DomainType] = []
        self._vocabulary: dict[str, int] = {}
        self._matrix: np.ndarray | None = None
        self._norms: np.ndarray | None = None

    @classmethod
    def from_tables(cls, tables: ClassifierTables, *, weight: float) -> "EmbeddingLayer":
        return cls(tables.embedding, weight=weight)

    @property
    def initialized(self) -> bool:
        return self._matrix is not None

    async def initialize(self) -> None:
        terms = sorted({term for vector in self.config.vectors.values() for term in vector})
        self._vocabulary = {term: idx for idx, term in enumerate(terms)}
        self._domains = list(self.config.vectors)

        matrix = np.zeros((len(self._domains), len(terms)), dtype=float)
        for row, domain in enumerate(self._domains):
            for term, value in self.config.vectors[domain].items():
                matrix[row, self._vocabulary[term]] = value

        self._matrix = matrix
        self._norms = np.linalg.norm(matrix, axis=1)
        logger.debug("Embedding layer ready: %d domains x %d terms", len(self._domains), len(terms))

    def tokenize(self, text: str) -> list[str]:
        cleaned = _PUNCTUATION.sub(" ", text.lower())
        return [
            word
            for word in cleaned.split()
            if len(word) >= self.config.min_token_length and word not in self._stop_words
        ]

    def similarities(self, prompt: str) -> dict[DomainType, float]:
        """Cosine similarity between the prompt and every domain vector."""
        if self._matrix is None or self._norms is None:
            return {}

        words = self.tokenize(prompt)
        if not words:
            return {}

        counts = Counter(words)
        term_freq = np.array([count / len(words) for count in counts.values()])
        prompt_norm = float(np.linalg.norm(term_freq))

        projected = np.zeros(len(self._vocabulary), dtype=float)
        for word, count in counts.items():
            idx = self._vocabulary.get(word)
            if idx is not None:
                projected[idx] = count / len(words)

        dots = self._matrix @ projected
        result: dict[DomainType, float] = {}
        for row, domain in enumerate(self._domains):
            denom = prompt_norm * float(self._norms[row])
            result[domain] = float(dots[row]) / denom if denom > 0 else 0.0
        return result

    def classify(self, prompt: str) -> list[DomainScore]:
        if not self.initialized:
            return []

        scores: list[DomainScore] = []
        for domain, similarity in self.similarities(prompt).items():
            if similarity <= self.config.min_similarity:
                continue
            scores.append(
                DomainScore(
                    domain=domain,
                    score=self.config.calibrate(similarity),
                    method=self.name,
                    indicators=[f"semantic similarity: {similarity * 100:.1f}%"],
                )
            )
        return scores


register_layer(EmbeddingLayer.name, EmbeddingLayer)
