"""
Evaluation metrics and statistical analysis.

Provides:
- Classification metrics (accuracy, F1, kappa, min-confidence pass rate)
- Bootstrap confidence intervals
- Per-domain accuracy tables

Most functions are pure (depend only on numpy, pandas, sklearn); *_and_save helpers write outputs to disk.
"""

from domain.evaluation.bootstrap import bootstrap_ci, bootstrap_mean_ci
from domain.evaluation.metrics import compute_classification_metrics
from domain.evaluation.tables import (
    compute_domain_accuracy_table,
    compute_domain_accuracy_table_and_save,
)

__all__ = [
    "compute_classification_metrics",
    "bootstrap_ci",
    "bootstrap_mean_ci",
    "compute_domain_accuracy_table",
    "compute_domain_accuracy_table_and_save",
]
