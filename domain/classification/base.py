"""Base interface for domain scoring layers."""

from abc import ABC, abstractmethod

from domain.schemas import DomainScore
from domain.tables.classifier import ClassifierTables


class ClassificationLayer(ABC):
    """
    Abstract base class for scoring layers.
    Common interface for the independent strategies combined by HybridClassifier.

    All concrete layers must implement:
    - classify(): Return one DomainScore per domain the layer has evidence for
    - from_tables(): Build the layer from the versioned classifier tables

    A layer that has nothing to say about a domain omits it; an omitted domain
    means "no evidence", not "zero confidence".
    """

    name: str
    weight: float

    def __init__(self, *, weight: float) -> None:
        self.weight = weight

    @classmethod
    @abstractmethod
    def from_tables(cls, tables: ClassifierTables, *, weight: float) -> "ClassificationLayer":
        raise NotImplementedError

    async def initialize(self) -> None:
        """One-time async setup. Layers without setup keep this no-op."""
        return None

    @abstractmethod
    def classify(self, prompt: str) -> list[DomainScore]:
        """Score the prompt against every domain this layer knows about.

        Args:
            prompt: Raw prompt text (not pre-lowercased)

        Returns:
            Zero or more DomainScore entries with method == self.name
        """

        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r}, weight={self.weight})"
