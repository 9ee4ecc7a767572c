"""Template selection: criteria extraction, legacy rule table and the banded selector."""

from domain.selection.criteria import analyze_prompt, determine_complexity
from domain.selection.legacy_rules import LEGACY_RULES, apply_legacy_rules
from domain.selection.selector import TemplateSelector, lint_based_templates

__all__ = [
    "LEGACY_RULES",
    "TemplateSelector",
    "analyze_prompt",
    "apply_legacy_rules",
    "determine_complexity",
    "lint_based_templates",
]
