"""
Logging setup for classification runs.

Every record carries the run tag, the index of the prompt being classified
and the version of the loaded tables, injected from contextvars, so the lines
of a single prompt can be grepped out of a dataset run.
"""

import contextvars
import hashlib
import logging
from collections.abc import Iterator
from contextlib import contextmanager
from logging.handlers import RotatingFileHandler
from pathlib import Path

UNSET = "-"

cv_run_id_full = contextvars.ContextVar("run_id_full", default=UNSET)
cv_run_tag = contextvars.ContextVar("run_tag", default=UNSET)
cv_prompt_idx = contextvars.ContextVar("prompt_idx", default=UNSET)
cv_tables_version = contextvars.ContextVar("tables_version", default=UNSET)

CONSOLE_FORMAT = "%(asctime)s [%(levelname)s] r=%(run)s p=%(prompt)s | %(message)s"
FILE_FORMAT = "%(asctime)s [%(levelname)s] %(name)s | r=%(run)s t=%(tables)s p=%(prompt)s | %(message)s"


def make_run_tag(run_id_full: str, length: int = 8) -> str:
    """Short stable tag for a run id (BLAKE2s hex prefix)."""
    return hashlib.blake2s(run_id_full.encode("utf-8"), digest_size=8).hexdigest()[:length]


class ContextInjectFilter(logging.Filter):
    """Copy run, prompt and tables context onto each record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.run = cv_run_tag.get()
        record.prompt = cv_prompt_idx.get()
        record.tables = cv_tables_version.get()
        return True


def set_log_context(*, run_id_full: str | None = None, tables_version: str | None = None) -> None:
    """Set run-wide context; the run tag is derived from the full id."""
    if run_id_full is not None:
        cv_run_id_full.set(str(run_id_full))
        cv_run_tag.set(make_run_tag(str(run_id_full)))
    if tables_version is not None:
        cv_tables_version.set(str(tables_version))


@contextmanager
def prompt_context(prompt_idx: int) -> Iterator[None]:
    """Tag records emitted inside the block with the (1-based) prompt index."""
    token = cv_prompt_idx.set(f"{int(prompt_idx):04d}")
    try:
        yield
    finally:
        cv_prompt_idx.reset(token)


def get_log_context() -> dict[str, str]:
    """Current context, used to stamp JSON artifacts."""
    return {
        "run_tag": cv_run_tag.get(),
        "run_id_full": cv_run_id_full.get(),
        "prompt_idx": cv_prompt_idx.get(),
        "tables_version": cv_tables_version.get(),
    }


def _attach(root: logging.Logger, handler: logging.Handler, level: int, fmt: str, datefmt: str) -> None:
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt, datefmt=datefmt))
    handler.addFilter(ContextInjectFilter())
    root.addHandler(handler)


def configure_logging(
    *,
    log_file: Path | None = None,
    console_level: int = logging.INFO,
    file_level: int = logging.DEBUG,
    max_bytes: int = 10_000_000,  # 10MB
    backup_count: int = 5,
) -> None:
    """
    Install console and (optionally) rotating file handlers on the root logger.

    Calling it again replaces the handlers. Layer-level DEBUG output from
    `domain.classification` is only enabled when a log file is configured.

    Args:
        log_file: Path to the run log (console only when None)
        console_level: Minimum level printed to the console
        file_level: Minimum level written to the file
        max_bytes: File size before rotation
        backup_count: Rotated files to keep
    """
    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(logging.DEBUG)  # handlers filter

    _attach(root, logging.StreamHandler(), console_level, CONSOLE_FORMAT, "%H:%M:%S")

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(log_file, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8")
        _attach(root, file_handler, file_level, FILE_FORMAT, "%Y-%m-%d %H:%M:%S")

    logging.getLogger("domain.classification").setLevel(logging.DEBUG if log_file is not None else logging.INFO)

    logging.getLogger(__name__).info(
        "Logging configured (console=%s, file=%s)",
        logging.getLevelName(console_level),
        log_file if log_file is not None else "-",
    )
