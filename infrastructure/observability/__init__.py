"""
Observability: run-scoped logging.

Provides:
- Run tag, prompt index and tables version on every log line
- Console and rotating file handlers
"""

from infrastructure.observability.logging import (
    ContextInjectFilter,
    configure_logging,
    get_log_context,
    make_run_tag,
    prompt_context,
    set_log_context,
)

__all__ = [
    "ContextInjectFilter",
    "configure_logging",
    "get_log_context",
    "make_run_tag",
    "prompt_context",
    "set_log_context",
]
