"""
Confidence-banded template selection.

- high band: domain preferences lead, lint-derived templates are added only
  if the domain lists them as secondary choices;
- moderate band: a couple of domain preferences blended with one
  rule-based template;
- low band: the rule-based selection alone.
"""

import logging

from domain.schemas import (
    ConfidenceBand,
    DomainClassificationResult,
    DomainType,
    LintResult,
    LintRuleType,
    PreferenceTier,
    TemplateSelectionCriteria,
    TemplateType,
)
from domain.tables.selection import SelectionTables

from .criteria import analyze_prompt
from .legacy_rules import apply_legacy_rules

logger = logging.getLogger(__name__)


def _append_missing(selected: list[TemplateType], templates: list[TemplateType]) -> None:
    for template in templates:
        if template not in selected:
            selected.append(template)


def lint_refinements(criteria: TemplateSelectionCriteria) -> list[TemplateType]:
    """Templates the lint findings always ask for in the high and moderate bands."""
    templates: list[TemplateType] = []
    if criteria.has_issue(LintRuleType.MISSING_IO_SPECIFICATION):
        templates.append(TemplateType.TASK_IO)
    if criteria.has_vague_wording:
        templates.append(TemplateType.BULLET)
    if criteria.has_sequential_keywords:
        templates.append(TemplateType.SEQUENTIAL)
    return templates


def lint_based_templates(criteria: TemplateSelectionCriteria) -> list[TemplateType]:
    templates = lint_refinements(criteria)
    if criteria.complexity == "simple" and len(criteria.issues) <= 1:
        templates.append(TemplateType.MINIMAL)
    return templates


class TemplateSelector:
    """Choose up to `max_templates` rewriting templates for a classified prompt."""

    def __init__(self, tables: SelectionTables) -> None:
        self.tables = tables

    def band_for(self, confidence: int) -> ConfidenceBand:
        if confidence >= self.tables.bands.high:
            return ConfidenceBand.HIGH
        if confidence >= self.tables.bands.moderate:
            return ConfidenceBand.MODERATE
        return ConfidenceBand.LOW

    def preferences(self, domain: DomainType, tier: PreferenceTier) -> list[TemplateType]:
        return self.tables.preferences_for(domain, tier)

    def blend(self, domain_templates: list[TemplateType], rule_templates: list[TemplateType]) -> list[TemplateType]:
        blended = list(domain_templates[: self.tables.moderate_domain_slots])
        complementary = [t for t in rule_templates if t not in blended]
        blended.extend(complementary[: self.tables.moderate_rule_slots])
        return blended

    def select_templates(
        self,
        lint_result: LintResult,
        domain_result: DomainClassificationResult,
        original_prompt: str | None = None,
    ) -> list[TemplateType]:
        """
        Args:
            lint_result: Lint findings for the prompt
            domain_result: Output of the domain classifier
            original_prompt: Prompt text; without it a placeholder is analyzed

        Returns:
            Ordered, deduplicated templates; never empty, at most `max_templates`
        """
        criteria = analyze_prompt(lint_result, original_prompt, self.tables)
        band = self.band_for(domain_result.confidence)
        domain = domain_result.domain
        max_templates = self.tables.max_templates

        logger.debug(
            "Selecting templates: domain=%s confidence=%d band=%s complexity=%s",
            domain.value,
            domain_result.confidence,
            band.value,
            criteria.complexity,
        )

        if band is ConfidenceBand.LOW:
            return apply_legacy_rules(criteria, max_templates=max_templates)

        selected: list[TemplateType] = []
        refinements = lint_refinements(criteria)
        if band is ConfidenceBand.HIGH:
            high = self.preferences(domain, PreferenceTier.HIGH)
            secondary = self.preferences(domain, PreferenceTier.SECONDARY)
            _append_missing(selected, high)
            _append_missing(selected, [t for t in lint_based_templates(criteria) if t in secondary])
            # high band output stays within the domain's high and secondary preferences
            refinements = [t for t in refinements if t in high or t in secondary]
        else:
            rule_templates = apply_legacy_rules(criteria, max_templates=max_templates)
            _append_missing(selected, self.blend(self.preferences(domain, PreferenceTier.MODERATE), rule_templates))

        _append_missing(selected, refinements)

        if not selected:
            selected.append(TemplateType.MINIMAL)
        return selected[:max_templates]
