"""
Domain layer: Business logic with minimal external dependencies.

Contains:
- schemas: Pydantic models for lint input and classification output
- tables: Versioned classifier and template selection tables
- classification: Scoring layers and the hybrid aggregator
- selection: Confidence-banded template selection
- evaluation: Metrics computation and statistical analysis
"""

from domain.schemas import (
    ClassificationResult,
    DomainClassificationResult,
    DomainType,
    LintIssue,
    LintResult,
    LintRuleType,
    TemplateType,
)

__all__ = [
    "ClassificationResult",
    "DomainClassificationResult",
    "DomainType",
    "LintIssue",
    "LintResult",
    "LintRuleType",
    "TemplateType",
]
