"""Evaluation workflow and summary logging."""

import logging
from pathlib import Path

import pandas as pd

from application.constants import PRED_CONFIDENCE_COL, PRED_DOMAIN_COL, PRED_TEMPLATES_COL
from application.dataset import ResolvedColumns
from domain.evaluation.metrics import compute_classification_metrics
from infrastructure.config.models import RunConfig

logger = logging.getLogger(__name__)


def run_evaluation_if_labels_available(
    cfg: RunConfig,
    test_df_out: pd.DataFrame,
    columns: ResolvedColumns,
) -> tuple[dict, pd.DataFrame | None]:
    """
    Compute metrics if expected domains are present; otherwise return empty metrics.

    The min-confidence pass rate is added when the dataset carries a
    per-prompt minimum confidence column.

    Returns:
        Tuple of (metrics dict, confusion_matrix DataFrame)
    """
    if columns.expected_domain is None:
        logger.info("No expected domains provided; skipping metric computation.")
        return {}, None

    y_true = test_df_out[columns.expected_domain].fillna("").astype(str).str.strip().str.lower().values
    y_pred = test_df_out[PRED_DOMAIN_COL].fillna("").astype(str).str.strip().str.lower().values
    confidence = pd.to_numeric(test_df_out[PRED_CONFIDENCE_COL], errors="coerce").fillna(0).values

    min_confidence = None
    if columns.min_confidence is not None:
        min_confidence = pd.to_numeric(test_df_out[columns.min_confidence], errors="coerce").fillna(0).values

    metrics, cm_df = compute_classification_metrics(
        y_true,
        y_pred,
        cfg.stats.labels_order,
        cfg.stats,
        confidence=confidence,
        min_confidence=min_confidence,
    )
    logger.info("Accuracy: %.4f", metrics["accuracy"])

    if PRED_TEMPLATES_COL in test_df_out.columns:
        metrics["template_usage"] = template_usage(test_df_out[PRED_TEMPLATES_COL])

    return metrics, cm_df


def template_usage(templates: pd.Series) -> dict[str, int]:
    """How often each template was selected across the dataset."""
    exploded = templates.dropna().explode().dropna()
    return {str(k): int(v) for k, v in exploded.value_counts().sort_index().items()}


def log_evaluation_summary(
    metrics: dict,
    cm_df: pd.DataFrame | None,
    predictions_path: Path,
    metrics_path: Path,
    accuracy_table_path: Path | None = None,
) -> None:
    """
    Log a concise, human-readable evaluation summary.

    Args:
        metrics: Dictionary of computed metrics
        cm_df: Confusion matrix DataFrame (optional)
        predictions_path: Path to predictions JSON file
        metrics_path: Path to metrics JSON file
        accuracy_table_path: Path to the per-domain accuracy CSV (optional)
    """
    logger.info("=== Evaluation Summary ===")

    if cm_df is not None and "accuracy" in metrics:
        logger.debug("Confusion matrix (rows=expected, cols=pred):\n%s", cm_df)
        for key, title in [
            ("accuracy", "Accuracy"),
            ("balanced_accuracy", "Balanced accuracy"),
            ("macro_f1", "Macro F1"),
            ("cohen_kappa", "Cohen's kappa"),
        ]:
            logger.info(
                "%s: %.4f (95%% CI [%.4f, %.4f])",
                title,
                metrics[key],
                metrics[f"{key}_ci_95"][0],
                metrics[f"{key}_ci_95"][1],
            )
        logger.info("Weighted F1: %.4f", metrics["weighted_f1"])

        if "pass_rate" in metrics:
            logger.info(
                "Pass rate (domain + min confidence): %.4f (95%% CI [%.4f, %.4f])",
                metrics["pass_rate"],
                metrics["pass_rate_ci_95"][0],
                metrics["pass_rate_ci_95"][1],
            )
        if "mean_confidence" in metrics:
            logger.info("Mean confidence: %.2f", metrics["mean_confidence"])

        logger.info("Per-domain precision: %s", metrics["precision_per_class"])
        logger.info("Per-domain recall: %s", metrics["recall_per_class"])
        logger.info("Per-domain F1: %s", metrics["f1_per_class"])
        logger.info("Per-domain support: %s", metrics["support_per_class"])
    else:
        logger.info("No expected domains provided; skipped metric computation.")

    if metrics.get("template_usage"):
        logger.info("Template usage: %s", metrics["template_usage"])

    logger.info("--- Artifacts ---")
    logger.info("Predictions JSON: %s", predictions_path)
    logger.info("Metrics JSON: %s", metrics_path)
    if accuracy_table_path is not None:
        logger.info("Per-domain accuracy table: %s", accuracy_table_path)
