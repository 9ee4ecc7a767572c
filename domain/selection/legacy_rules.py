"""
Rule-based template selection used for low-confidence classifications.

Each rule inspects the criteria and returns the templates it wants to add.
Rules run in the order of LEGACY_RULES; a template is only appended once,
so earlier rules win on ordering.
"""

from collections.abc import Callable

from domain.schemas import LintRuleType, TemplateSelectionCriteria, TemplateType

LegacyRule = Callable[[TemplateSelectionCriteria], list[TemplateType]]


def missing_language_and_io(c: TemplateSelectionCriteria) -> list[TemplateType]:
    if (
        c.has_issue(LintRuleType.MISSING_LANGUAGE)
        and c.has_issue(LintRuleType.MISSING_IO_SPECIFICATION)
        and c.complexity != "complex"
        and not c.has_vague_wording
    ):
        return [TemplateType.TASK_IO]
    return []


def vague_and_unclear_scope(c: TemplateSelectionCriteria) -> list[TemplateType]:
    if c.has_issue(LintRuleType.VAGUE_WORDING) and c.has_issue(LintRuleType.UNCLEAR_SCOPE):
        return [TemplateType.BULLET]
    return []


def sequential_keywords(c: TemplateSelectionCriteria) -> list[TemplateType]:
    return [TemplateType.SEQUENTIAL] if c.has_sequential_keywords else []


def simple_with_few_issues(c: TemplateSelectionCriteria) -> list[TemplateType]:
    if c.complexity == "simple" and len(c.issues) <= 1:
        return [TemplateType.MINIMAL]
    return []


def complex_multi_issue(c: TemplateSelectionCriteria) -> list[TemplateType]:
    if c.complexity == "complex" and len(c.issues) >= 3:
        return [TemplateType.BULLET, TemplateType.TASK_IO, TemplateType.SEQUENTIAL]
    return []


def missing_task_verb(c: TemplateSelectionCriteria) -> list[TemplateType]:
    if not c.has_issue(LintRuleType.MISSING_TASK_VERB):
        return []
    if c.has_vague_wording or c.complexity == "complex":
        return [TemplateType.BULLET]
    return [TemplateType.TASK_IO]


def needs_io_specification(c: TemplateSelectionCriteria) -> list[TemplateType]:
    if c.needs_io_specification and c.complexity != "complex" and not c.has_vague_wording:
        return [TemplateType.TASK_IO]
    return []


def vague_wording(c: TemplateSelectionCriteria) -> list[TemplateType]:
    return [TemplateType.BULLET] if c.has_vague_wording else []


def task_missing_language(c: TemplateSelectionCriteria) -> list[TemplateType]:
    if c.has_task_structure and c.has_issue(LintRuleType.MISSING_LANGUAGE) and c.complexity == "simple":
        return [TemplateType.TASK_IO]
    return []


def simple_task(c: TemplateSelectionCriteria) -> list[TemplateType]:
    if c.has_task_structure and c.complexity == "simple":
        return [TemplateType.MINIMAL]
    return []


# Priority order matters
LEGACY_RULES: tuple[LegacyRule, ...] = (
    missing_language_and_io,
    vague_and_unclear_scope,
    sequential_keywords,
    simple_with_few_issues,
    complex_multi_issue,
    missing_task_verb,
    needs_io_specification,
    vague_wording,
    task_missing_language,
    simple_task,
)


def apply_legacy_rules(
    criteria: TemplateSelectionCriteria,
    *,
    max_templates: int = 3,
    rules: tuple[LegacyRule, ...] = LEGACY_RULES,
) -> list[TemplateType]:
    """Run the rules in order; never empty, deduplicated, at most `max_templates`."""
    selected: list[TemplateType] = []
    for rule in rules:
        for template in rule(criteria):
            if template not in selected:
                selected.append(template)

    if not selected:
        selected.append(TemplateType.MINIMAL)
    return selected[:max_templates]
