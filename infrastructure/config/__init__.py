"""
Configuration management: models, loading, and validation.

Handles:
- RunConfig: Main experiment configuration
- Classifier and template selection tables from YAML
- Environment variable overrides for the table files

The loader module performs file I/O; models are pure Pydantic classes.
"""

from infrastructure.config.loader import (
    load_classifier_tables,
    load_run_config,
    load_selection_tables,
    resolve_table_path,
)
from infrastructure.config.models import (
    DataColumnsConfig,
    RunConfig,
    StatsConfig,
)

__all__ = [
    # Main config (most commonly used)
    "RunConfig",
    "load_run_config",
    # Data columns
    "DataColumnsConfig",
    # Stats
    "StatsConfig",
    # Tables
    "load_classifier_tables",
    "load_selection_tables",
    "resolve_table_path",
]
