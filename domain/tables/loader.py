"""Parse classifier and selection tables from YAML dicts."""

from typing import Any

from domain.tables.classifier import ClassifierTables
from domain.tables.selection import SelectionTables

_CLASSIFIER_SECTIONS = ("embedding", "patterns", "rules", "heuristics", "aggregation", "calibration")


def _require_version(data: dict[str, Any], what: str) -> str:
    version = data.get("version")
    if version is None or not str(version).strip():
        raise ValueError(f"{what} must declare a non-empty 'version'")
    return str(version).strip()


def parse_classifier_tables(data: dict[str, Any]) -> ClassifierTables:
    """
    Parse pre-loaded YAML dict into ClassifierTables.

    This is a pure function - it does NOT perform file I/O.
    The YAML loading happens in infrastructure.config.loader.

    Args:
        data: Dictionary from yaml.safe_load()

    Returns:
        Validated ClassifierTables

    Raises:
        ValueError: If required keys are missing or have wrong types
        pydantic.ValidationError: If a section does not match its model
    """
    version = _require_version(data, "classifier tables")

    layers = data.get("layers") or []
    if not isinstance(layers, list) or not layers:
        raise ValueError("layers must be a non-empty list")

    for section in _CLASSIFIER_SECTIONS:
        if section in data and not isinstance(data[section], dict):
            raise ValueError(f"{section} must be a mapping")

    boosts = data.get("boosts", []) or []
    if not isinstance(boosts, list):
        raise ValueError("boosts must be a list")

    payload = {k: v for k, v in data.items() if v is not None}
    payload["version"] = version
    return ClassifierTables.model_validate(payload)


def parse_selection_tables(data: dict[str, Any]) -> SelectionTables:
    """
    Parse pre-loaded YAML dict into SelectionTables.

    The preference table is checked for exhaustiveness (every domain x tier row
    present exactly once) by the model validator.
    """
    version = _require_version(data, "selection tables")

    preferences = data.get("preferences", []) or []
    if not isinstance(preferences, list):
        raise ValueError("preferences must be a list of {domain, tier, templates} records")

    keywords = data.get("keywords", {}) or {}
    if not isinstance(keywords, dict):
        raise ValueError("keywords must be a mapping")

    payload = {k: v for k, v in data.items() if v is not None}
    payload.update(version=version, preferences=list(preferences), keywords=dict(keywords))
    return SelectionTables.model_validate(payload)
