"""Domain classification metrics with bootstrap confidence intervals."""

import warnings
from collections.abc import Callable, Sequence

import numpy as np
import pandas as pd
from sklearn.exceptions import UndefinedMetricWarning
from sklearn.metrics import (
    accuracy_score,
    balanced_accuracy_score,
    cohen_kappa_score,
    confusion_matrix,
    f1_score,
    precision_recall_fscore_support,
)

from domain.evaluation.bootstrap import bootstrap_ci, bootstrap_mean_ci
from infrastructure.config.models import StatsConfig


def _per_class(labels_order: Sequence[str], values: np.ndarray, *, digits: int | None = 4) -> dict:
    values = values.astype(float) if digits is not None else values
    rounded = np.round(values, digits).tolist() if digits is not None else values.tolist()
    return dict(zip(labels_order, rounded, strict=True))


def compute_classification_metrics(
    y_true: np.ndarray,
    y_pred: np.ndarray,
    labels_order: Sequence[str],
    stats_cfg: StatsConfig,
    *,
    confidence: np.ndarray | None = None,
    min_confidence: np.ndarray | None = None,
) -> tuple[dict, pd.DataFrame]:
    """
    Compute confusion matrix and a suite of metrics, including CIs.

    When per-prompt `confidence` and `min_confidence` arrays are given, also
    report the pass rate: a prompt passes only if the domain is right AND the
    confidence reaches its minimum.

    Args:
        y_true: Expected domain values
        y_pred: Predicted domain values
        labels_order: Canonical ordering of domains (e.g., ['code', 'writing', ...])
        stats_cfg: Statistics configuration (seed, n_boot, alpha)
        confidence: Predicted confidence per prompt (0-100)
        min_confidence: Required confidence per prompt (0-100)

    Returns:
        Tuple of (metrics dict, confusion_matrix DataFrame)
    """
    labels = list(labels_order)

    with warnings.catch_warnings():
        warnings.filterwarnings(
            "ignore",
            category=UserWarning,
            message="y_pred contains classes not in y_true",
        )
        warnings.filterwarnings("ignore", category=UndefinedMetricWarning)

        cm = confusion_matrix(y_true, y_pred, labels=labels)
        cm_df = pd.DataFrame(
            cm,
            index=[f"true_{label}" for label in labels],
            columns=[f"pred_{label}" for label in labels],
        )

        precision, recall, f1_per_class, support = precision_recall_fscore_support(
            y_true,
            y_pred,
            labels=labels,
            zero_division=0,
        )

        # name -> statistic; every entry also gets a bootstrap CI
        stat_fns: dict[str, Callable[[np.ndarray, np.ndarray], float]] = {
            "accuracy": accuracy_score,
            "balanced_accuracy": balanced_accuracy_score,
            "macro_f1": lambda yt, yp: f1_score(yt, yp, labels=labels, average="macro", zero_division=0),
            "cohen_kappa": lambda yt, yp: cohen_kappa_score(yt, yp, labels=labels),
        }
        point = {name: float(fn(y_true, y_pred)) for name, fn in stat_fns.items()}
        weighted_f1 = float(f1_score(y_true, y_pred, labels=labels, average="weighted", zero_division=0))

    metrics: dict = {
        "labels": labels,
        "n_prompts": int(len(y_true)),
        "confusion_matrix": cm.tolist(),
    }
    for name, fn in stat_fns.items():
        metrics[name] = point[name]
        metrics[f"{name}_ci_95"] = list(
            bootstrap_ci(
                y_true=y_true,
                y_pred=y_pred,
                stat_fn=fn,
                n_boot=stats_cfg.n_boot,
                alpha=stats_cfg.alpha,
                seed=stats_cfg.seed,
            )
        )
    metrics["weighted_f1"] = weighted_f1
    metrics["precision_per_class"] = _per_class(labels, precision)
    metrics["recall_per_class"] = _per_class(labels, recall)
    metrics["f1_per_class"] = _per_class(labels, f1_per_class)
    metrics["support_per_class"] = _per_class(labels, support, digits=None)

    if confidence is not None:
        confidence = np.asarray(confidence, dtype=float)
        metrics["mean_confidence"] = round(float(confidence.mean()), 2) if confidence.size else float("nan")

        if min_confidence is not None:
            passed = (np.asarray(y_true) == np.asarray(y_pred)) & (confidence >= np.asarray(min_confidence))
            metrics["pass_rate"] = float(passed.mean()) if passed.size else float("nan")
            metrics["pass_rate_ci_95"] = list(
                bootstrap_mean_ci(passed, n_boot=stats_cfg.n_boot, alpha=stats_cfg.alpha, seed=stats_cfg.seed)
            )

    return metrics, cm_df
