from pathlib import Path

import pytest
from pydantic import ValidationError

from infrastructure.config.models import DataColumnsConfig, RunConfig, StatsConfig


def test_min_confidence_col_is_ignored_without_expected_domain_col() -> None:
    cfg = RunConfig(
        test_file_path=Path("dataset/cases.csv"),
        columns=DataColumnsConfig(
            prompt_col="prompt",
            expected_domain_col=None,
            min_confidence_col="min_confidence",  # should be cleared by validator
        ),
    )

    assert cfg.columns.min_confidence_col is None


def test_min_confidence_col_is_kept_with_expected_domain_col() -> None:
    cfg = RunConfig(
        test_file_path=Path("dataset/cases.csv"),
        columns=DataColumnsConfig(
            prompt_col="prompt",
            expected_domain_col="expected_domain",
            min_confidence_col="min_confidence",
        ),
    )

    assert cfg.columns.min_confidence_col == "min_confidence"


def test_unknown_labels_are_rejected() -> None:
    with pytest.raises(ValidationError, match="unknown domains"):
        RunConfig(
            test_file_path=Path("dataset/cases.csv"),
            columns=DataColumnsConfig(prompt_col="prompt"),
            stats=StatsConfig(labels_order=["code", "poetry"]),
        )


def test_blank_prompt_col_is_rejected() -> None:
    with pytest.raises(ValidationError, match="prompt_col"):
        RunConfig(test_file_path=Path("dataset/cases.csv"), columns=DataColumnsConfig(prompt_col="  "))
