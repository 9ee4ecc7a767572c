"""Prompt classification workflow: single prompts and whole datasets."""

import logging
import time

import pandas as pd

from application.dataset import ResolvedColumns, build_lint_result, parse_issues
from domain.classifier import DomainClassifier, DomainClassifierConfig
from domain.schemas import LintResult, PromptDecision
from domain.selection import TemplateSelector
from domain.tables import ClassifierTables, SelectionTables
from infrastructure.observability.logging import prompt_context, set_log_context

logger = logging.getLogger(__name__)


async def build_engine(
    classifier_tables: ClassifierTables,
    selection_tables: SelectionTables,
    config: DomainClassifierConfig | None = None,
) -> tuple[DomainClassifier, TemplateSelector]:
    """Create and initialize the classifier facade and the template selector."""
    set_log_context(tables_version=f"{classifier_tables.version}/{selection_tables.version}")
    classifier = DomainClassifier(classifier_tables, config)
    await classifier.initialize()
    logger.info(
        "Engine ready: classifier tables v%s, selection tables v%s",
        classifier_tables.version,
        selection_tables.version,
    )
    return classifier, TemplateSelector(selection_tables)


def decide(
    prompt: str,
    lint_result: LintResult,
    classifier: DomainClassifier,
    selector: TemplateSelector | None,
) -> PromptDecision:
    """Classify one prompt and (optionally) pick its rewriting templates."""
    classification = classifier.classify_domain(prompt)
    templates = selector.select_templates(lint_result, classification, prompt) if selector is not None else []
    logger.debug(
        "Decision: domain=%s confidence=%d templates=%s",
        classification.domain.value,
        classification.confidence,
        [t.value for t in templates],
    )
    return PromptDecision(prompt=prompt, classification=classification, templates=templates)


def run_classification(
    test_df: pd.DataFrame,
    columns: ResolvedColumns,
    classifier: DomainClassifier,
    selector: TemplateSelector | None = None,
) -> dict[int, PromptDecision]:
    """
    Classify every prompt of the dataset.

    Returns:
        Mapping of DataFrame index -> decision
    """
    decisions: dict[int, PromptDecision] = {}
    logger.info("Total prompts: %d", len(test_df))
    start = time.perf_counter()

    for position, (df_idx, row) in enumerate(test_df.iterrows(), start=1):
        raw_prompt = row[columns.prompt]
        prompt = "" if pd.isna(raw_prompt) else str(raw_prompt)
        issue_types = parse_issues(row[columns.issues]) if columns.issues is not None else []

        with prompt_context(position):
            decisions[df_idx] = decide(prompt, build_lint_result(prompt, issue_types), classifier, selector)

    elapsed_ms = (time.perf_counter() - start) * 1000
    logger.info(
        "All prompts processed in %.1fms (avg %.2fms/prompt).",
        elapsed_ms,
        elapsed_ms / len(test_df) if len(test_df) else 0.0,
    )
    return decisions
