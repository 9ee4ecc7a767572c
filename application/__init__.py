"""
Application layer: Use cases and workflow orchestration.

This layer coordinates between domain logic and infrastructure,
implementing the main workflows for classification and evaluation.
"""

from application.classification import build_engine, decide, run_classification
from application.dataset import ResolvedColumns, build_lint_result, detect_columns, parse_issues
from application.evaluation import log_evaluation_summary, run_evaluation_if_labels_available
from application.serialize import attach_and_serialize_predictions

__all__ = [
    # Main workflows
    "build_engine",
    "decide",
    "run_classification",
    "run_evaluation_if_labels_available",
    "log_evaluation_summary",
    # Data utilities
    "ResolvedColumns",
    "detect_columns",
    "parse_issues",
    "build_lint_result",
    "attach_and_serialize_predictions",
]
