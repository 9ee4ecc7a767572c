"""
Domain classification layers and the hybrid aggregator.

Importing this package registers the built-in layers (embedding, pattern,
rule, heuristic) so that `make_layers` can build them from the tables.
"""

from domain.classification import embedding, heuristic, pattern, rules  # noqa: F401  (registration)
from domain.classification.base import ClassificationLayer
from domain.classification.embedding import EmbeddingLayer
from domain.classification.heuristic import HeuristicLayer
from domain.classification.hybrid import ClassifierNotInitializedError, HybridClassifier, to_confidence
from domain.classification.pattern import PatternLayer
from domain.classification.registry import get_layer_class, make_layers, register_layer
from domain.classification.rules import RuleLayer

__all__ = [
    "ClassificationLayer",
    "ClassifierNotInitializedError",
    "EmbeddingLayer",
    "HeuristicLayer",
    "HybridClassifier",
    "PatternLayer",
    "RuleLayer",
    "get_layer_class",
    "make_layers",
    "register_layer",
    "to_confidence",
]
