"""Derive template selection criteria from a prompt and its lint result."""

from collections.abc import Sequence

from domain.schemas import Complexity, LintResult, LintRuleType, TemplateSelectionCriteria
from domain.tables.selection import ComplexityLimits, SelectionTables


def contains_any(prompt: str, keywords: Sequence[str]) -> bool:
    """Substring match on the lowercased prompt ("steps" also matches "step")."""
    clean_prompt = prompt.lower()
    return any(keyword in clean_prompt for keyword in keywords)


def determine_complexity(prompt: str, issue_count: int, limits: ComplexityLimits) -> Complexity:
    # Words are space-separated tokens; an empty prompt counts as one word.
    word_count = len(prompt.split(" "))

    if word_count <= limits.simple_max_words and issue_count <= limits.simple_max_issues:
        return "simple"
    if word_count <= limits.medium_max_words and issue_count <= limits.medium_max_issues:
        return "medium"
    return "complex"


def resolve_prompt(lint_result: LintResult, original_prompt: str | None, placeholder: str) -> str:
    """Use the caller's prompt; without one, fall back to a placeholder if the lint run saw any input."""
    if original_prompt:
        return original_prompt
    if lint_result.metadata is not None and lint_result.metadata.input_length:
        return placeholder
    return ""


def analyze_prompt(
    lint_result: LintResult,
    original_prompt: str | None,
    tables: SelectionTables,
) -> TemplateSelectionCriteria:
    prompt = resolve_prompt(lint_result, original_prompt, tables.missing_prompt_placeholder)
    issue_types = lint_result.issue_types

    has_vague_wording = LintRuleType.VAGUE_WORDING in issue_types or contains_any(prompt, tables.keywords.vague)

    return TemplateSelectionCriteria(
        issues=tuple(lint_result.issues),
        complexity=determine_complexity(prompt, len(issue_types), tables.complexity),
        has_sequential_keywords=contains_any(prompt, tables.keywords.sequential),
        has_task_structure=contains_any(prompt, tables.keywords.task),
        needs_io_specification=LintRuleType.MISSING_IO_SPECIFICATION in issue_types,
        has_vague_wording=has_vague_wording,
    )
