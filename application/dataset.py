"""Dataset column resolution and lint issue parsing."""

import logging
from dataclasses import dataclass

import pandas as pd

from application.constants import ISSUES_SEPARATOR
from domain.schemas import LintIssue, LintMetadata, LintResult, LintRuleType
from infrastructure.config.models import RunConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResolvedColumns:
    prompt: str
    expected_domain: str | None = None
    min_confidence: str | None = None
    issues: str | None = None


def _optional_column(df: pd.DataFrame, configured: str | None, key: str) -> str | None:
    if configured is None or not str(configured).strip():
        return None
    if configured not in df.columns:
        logger.warning("Configured %s='%s' not found in dataset; ignoring it.", key, configured)
        return None
    return configured


def detect_columns(cfg: RunConfig, df: pd.DataFrame) -> ResolvedColumns:
    """
    Resolve the prompt column (required) and the optional label/min-confidence/issues columns.

    Raises:
        KeyError: If the configured prompt column is not in the DataFrame
    """
    prompt_col = cfg.columns.prompt_col
    if prompt_col not in df.columns:
        raise KeyError(f"Configured prompt_col='{prompt_col}' not found in dataset columns: {list(df.columns)}")

    expected_col = _optional_column(df, cfg.columns.expected_domain_col, "expected_domain_col")
    if expected_col is None and cfg.columns.expected_domain_col:
        logger.warning("Proceeding without expected domains (classification only; evaluation will be skipped).")

    min_conf_col = _optional_column(df, cfg.columns.min_confidence_col, "min_confidence_col")
    if expected_col is None:
        min_conf_col = None

    return ResolvedColumns(
        prompt=prompt_col,
        expected_domain=expected_col,
        min_confidence=min_conf_col,
        issues=_optional_column(df, cfg.columns.issues_col, "issues_col"),
    )


def parse_issues(cell: object) -> list[LintRuleType]:
    """
    Parse an issues cell like "missing_language; vague_wording" into rule types.

    Raises:
        ValueError: On an unknown rule type
    """
    if pd.isna(cell):
        return []
    names = [part.strip().lower() for part in str(cell).split(ISSUES_SEPARATOR)]
    try:
        return [LintRuleType(name) for name in names if name]
    except ValueError as e:
        valid = [t.value for t in LintRuleType]
        raise ValueError(f"Unknown lint rule type in {cell!r}. Valid: {valid}") from e


def build_lint_result(prompt: str, issue_types: list[LintRuleType]) -> LintResult:
    """Wrap bare rule types into the LintResult shape the template selector consumes."""
    return LintResult(
        issues=[LintIssue(type=t, message=t.value.replace("_", " ")) for t in issue_types],
        metadata=LintMetadata(input_length=len(prompt)),
    )
