"""Configuration loading from YAML files."""

import logging
import os
from pathlib import Path
from typing import Any

import yaml

from domain.classifier import DomainClassifierConfig
from domain.tables import ClassifierTables, SelectionTables, parse_classifier_tables, parse_selection_tables
from infrastructure.config.models import DataColumnsConfig, RunConfig, StatsConfig
from infrastructure.constants import (
    CLASSIFIER_FILE,
    CLASSIFIER_FILE_ENV,
    DATA_DIR,
    TEMPLATES_FILE,
    TEMPLATES_FILE_ENV,
)

logger = logging.getLogger(__name__)


def _load_yaml(path: Path) -> dict[str, Any]:
    """Load YAML file and return as dict."""
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with path.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f)

    if not isinstance(data, dict):
        raise ValueError(f"Expected YAML dict in {path}, got {type(data)}")

    return data


def resolve_table_path(configured: Path | str | None, env_var: str, default: Path) -> Path:
    """Environment variable wins over the configured path, which wins over the default."""
    env_value = os.environ.get(env_var, "").strip()
    if env_value:
        return Path(env_value)
    if configured:
        return Path(configured)
    return default


def load_classifier_tables(path: Path | None = None) -> ClassifierTables:
    """
    Load classifier tables from YAML file.

    This function handles file I/O, then delegates parsing to domain layer.
    """
    path = path or resolve_table_path(None, CLASSIFIER_FILE_ENV, CLASSIFIER_FILE)
    tables = parse_classifier_tables(_load_yaml(path))
    logger.debug("Loaded classifier tables v%s from %s", tables.version, path)
    return tables


def load_selection_tables(path: Path | None = None) -> SelectionTables:
    """Load template selection tables from YAML file."""
    path = path or resolve_table_path(None, TEMPLATES_FILE_ENV, TEMPLATES_FILE)
    tables = parse_selection_tables(_load_yaml(path))
    logger.debug("Loaded selection tables v%s from %s", tables.version, path)
    return tables


def load_run_config(experiment_path: Path) -> RunConfig:
    """
    Load experiment.yaml and construct a fully-resolved RunConfig.

    Table paths are resolved as: environment variable, then experiment.yaml,
    then the repository default.
    """
    exp = _load_yaml(experiment_path)

    if "test_file" not in exp or not exp.get("test_file"):
        raise ValueError("experiment.yaml missing required key: test_file")
    if "prompt_col" not in exp or not exp.get("prompt_col"):
        raise ValueError("experiment.yaml missing required key: prompt_col")

    data_dir = Path(exp.get("data_dir", str(DATA_DIR)))

    columns = DataColumnsConfig(
        prompt_col=str(exp["prompt_col"]),
        expected_domain_col=exp.get("expected_domain_col"),
        min_confidence_col=exp.get("min_confidence_col"),
        issues_col=exp.get("issues_col"),
    )

    classifier_file = resolve_table_path(exp.get("classifier_file"), CLASSIFIER_FILE_ENV, CLASSIFIER_FILE)
    templates_file = resolve_table_path(exp.get("templates_file"), TEMPLATES_FILE_ENV, TEMPLATES_FILE)

    stats = StatsConfig(**(exp.get("stats") or {}))
    classifier = DomainClassifierConfig(**(exp.get("classifier") or {}))

    cfg = RunConfig(
        name=str(exp.get("name") or "domain-eval").strip(),
        columns=columns,
        stats=stats,
        classifier_file=classifier_file,
        templates_file=templates_file,
        classifier=classifier,
        select_templates=bool(exp.get("select_templates", True)),
        test_file_path=data_dir / exp["test_file"],
    )

    return cfg
