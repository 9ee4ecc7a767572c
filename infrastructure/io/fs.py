"""Run artifact helpers."""

import json
from pathlib import Path
from typing import Any


def require_file(path: Path, what: str) -> Path:
    """Return `path` if it is an existing file, else raise FileNotFoundError naming `what`."""
    if not path.is_file():
        raise FileNotFoundError(f"Missing {what} at: {path}")
    return path


def write_json(data: Any, path: Path) -> Path:
    # default=str covers Paths and enums in config snapshots
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, ensure_ascii=False, indent=2, default=str), encoding="utf-8")
    return path
