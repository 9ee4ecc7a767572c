"""I/O: prompt datasets in, run artifacts out."""

from infrastructure.io.datasets import read_table
from infrastructure.io.fs import require_file, write_json

__all__ = [
    "read_table",
    "require_file",
    "write_json",
]
