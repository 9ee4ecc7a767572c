"""
Scoring and selection tables: versioned configuration as data.

All functions in this module are pure (no file I/O); YAML files are read by
infrastructure.config.loader and handed to the parse_* functions here.
"""

from domain.tables.classifier import ClassifierTables, DomainRule
from domain.tables.loader import parse_classifier_tables, parse_selection_tables
from domain.tables.selection import SelectionTables, TemplatePreference

__all__ = [
    "ClassifierTables",
    "DomainRule",
    "SelectionTables",
    "TemplatePreference",
    "parse_classifier_tables",
    "parse_selection_tables",
]
