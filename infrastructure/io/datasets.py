"""Prompt dataset loading (CSV or Excel)."""

import logging
from collections.abc import Sequence
from pathlib import Path

import pandas as pd

logger = logging.getLogger(__name__)

_READERS = {".csv": pd.read_csv, ".xlsx": pd.read_excel, ".xls": pd.read_excel}


def read_table(path: Path, text_columns: Sequence[str] = ()) -> pd.DataFrame:
    """
    Load an evaluation dataset.

    `text_columns` (prompt, issues) are read with the pandas "string" dtype so
    a prompt like "42" stays text, and are stripped of surrounding whitespace.
    Rows in which every cell is empty are dropped.

    Raises:
        ValueError: If the extension is not .csv, .xlsx or .xls
        FileNotFoundError: If the file does not exist
    """
    reader = _READERS.get(path.suffix.lower())
    if reader is None:
        raise ValueError(f"Unsupported dataset format '{path.suffix}' for {path}. Supported: {sorted(_READERS)}")
    if not path.exists():
        raise FileNotFoundError(f"Dataset not found: {path}")

    df = reader(path, dtype={col: "string" for col in text_columns} or None)
    for col in text_columns:
        if col in df.columns:
            df[col] = df[col].str.strip()

    n_rows = len(df)
    df = df.dropna(how="all").reset_index(drop=True)
    if len(df) < n_rows:
        logger.info("Dropped %d empty rows from %s", n_rows - len(df), path.name)
    return df
