"""Prediction serialization utilities."""

import logging
from pathlib import Path

import pandas as pd

from application.constants import (
    EXPECTED_DOMAIN_KEY,
    ISSUES_KEY,
    MIN_CONFIDENCE_KEY,
    ORIGINAL_INDEX_KEY,
    PRED_CONFIDENCE_COL,
    PRED_DOMAIN_COL,
    PRED_INDICATORS_COL,
    PRED_TEMPLATES_COL,
    PRED_TIME_COL,
    PROMPT_KEY,
)
from application.dataset import ResolvedColumns
from domain.schemas import PromptDecision
from infrastructure.io import write_json

logger = logging.getLogger(__name__)


def _cell(row: pd.Series, col: str | None) -> object:
    """JSON-friendly cell value: None for missing, numpy scalars unwrapped."""
    if col is None:
        return None
    value = row[col]
    if isinstance(value, list):
        return value
    if pd.isna(value):
        return None
    return value.item() if hasattr(value, "item") else value


def attach_predictions(test_df: pd.DataFrame, decisions: dict[int, PromptDecision]) -> pd.DataFrame:
    """Return a copy of the dataset with one column per prediction field."""
    test_df_out = test_df.copy()

    def field(getter) -> list:
        return [getter(decisions[idx]) if idx in decisions else None for idx in test_df_out.index]

    test_df_out[PRED_DOMAIN_COL] = field(lambda d: d.classification.domain.value)
    test_df_out[PRED_CONFIDENCE_COL] = field(lambda d: d.classification.confidence)
    test_df_out[PRED_INDICATORS_COL] = field(lambda d: list(d.classification.indicators))
    test_df_out[PRED_TEMPLATES_COL] = field(lambda d: [t.value for t in d.templates])
    test_df_out[PRED_TIME_COL] = field(lambda d: d.classification.processing_time_ms)
    return test_df_out


def attach_and_serialize_predictions(
    test_df: pd.DataFrame,
    columns: ResolvedColumns,
    decisions: dict[int, PromptDecision],
    predictions_path: Path,
) -> tuple[pd.DataFrame, Path]:
    """
    Attach predictions to the DataFrame and write predictions_path as a compact JSON list.
    """
    test_df_out = attach_predictions(test_df, decisions)

    records: list[dict] = []
    for _, row in test_df_out.iterrows():
        record: dict[str, object] = {}

        if ORIGINAL_INDEX_KEY in test_df_out.columns:
            record[ORIGINAL_INDEX_KEY] = row[ORIGINAL_INDEX_KEY]

        record[PROMPT_KEY] = _cell(row, columns.prompt)
        record[EXPECTED_DOMAIN_KEY] = _cell(row, columns.expected_domain)
        record[MIN_CONFIDENCE_KEY] = _cell(row, columns.min_confidence)
        record[ISSUES_KEY] = _cell(row, columns.issues)

        for col in (PRED_DOMAIN_COL, PRED_CONFIDENCE_COL, PRED_INDICATORS_COL, PRED_TEMPLATES_COL, PRED_TIME_COL):
            record[col] = _cell(row, col)

        records.append(record)

    write_json(records, predictions_path)
    logger.info("Saved predictions JSON: %s", predictions_path)

    return test_df_out, predictions_path
