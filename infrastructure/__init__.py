"""
Infrastructure layer: External dependencies and I/O boundaries.

Contains adapters for:
- Configuration loading (YAML, environment)
- Dataset and artifact I/O
- Observability (logging)

This is the only layer that performs I/O operations.
"""

# Most commonly used - exposed at top level for convenience
from infrastructure.config import (
    RunConfig,
    StatsConfig,
    load_classifier_tables,
    load_run_config,
    load_selection_tables,
)

__all__ = [
    "load_classifier_tables",
    "load_selection_tables",
    "load_run_config",
    "RunConfig",
    "StatsConfig",
]
