"""Versioned scoring tables consumed by the classification layers."""

import re
from functools import cached_property
from typing import Literal

from pydantic import BaseModel, Field, model_validator

from domain.schemas import DomainType


class LayerSpec(BaseModel):
    """One entry of the layer stack: registered layer name and its aggregation weight."""

    name: str
    weight: float = Field(..., gt=0.0, le=1.0)
    enabled: bool = True


class ScoreTier(BaseModel):
    """Raw value at or above `min_value` maps to `score`."""

    min_value: float
    score: float = Field(..., ge=0.0, le=1.0)


def _resolve_tier(value: float, tiers: list[ScoreTier]) -> float | None:
    for tier in sorted(tiers, key=lambda t: t.min_value, reverse=True):
        if value >= tier.min_value:
            return tier.score
    return None


class EmbeddingConfig(BaseModel):
    """Term-frequency vectors per domain plus similarity calibration."""

    min_similarity: float = 0.1
    min_token_length: int = 3
    stop_words: list[str] = Field(default_factory=list)
    vectors: dict[DomainType, dict[str, float]] = Field(default_factory=dict)
    tiers: list[ScoreTier] = Field(default_factory=list)
    fallback_offset: float = 0.1
    fallback_ceiling: float = 0.4

    def calibrate(self, similarity: float) -> float:
        score = _resolve_tier(similarity, self.tiers)
        if score is not None:
            return score
        return min(self.fallback_ceiling, similarity + self.fallback_offset)


class PatternTemplate(BaseModel):
    pattern: str
    score: float = Field(..., ge=0.0, le=1.0)
    description: str

    @cached_property
    def compiled(self) -> re.Pattern[str]:
        return re.compile(self.pattern, re.IGNORECASE)


class PatternConfig(BaseModel):
    """Regex templates per domain and the calibration of the best match."""

    patterns: dict[DomainType, list[PatternTemplate]] = Field(default_factory=dict)
    tiers: list[ScoreTier] = Field(default_factory=list)
    multi_match_bonus: float = 0.1
    multi_match_ceiling: float = 0.9
    single_match_bonus: float = 0.05
    single_match_ceiling: float = 0.85

    def calibrate(self, raw_score: float, match_count: int) -> float:
        if match_count < 1:
            return raw_score
        score = _resolve_tier(raw_score, self.tiers)
        if score is not None:
            return score
        if match_count >= 2:
            return min(self.multi_match_ceiling, raw_score + self.multi_match_bonus)
        return min(self.single_match_ceiling, raw_score + self.single_match_bonus)


class DomainRule(BaseModel):
    """Keyword rule for one domain. Exclusions veto the domain before any scoring."""

    primary_keywords: list[str] = Field(default_factory=list)
    secondary_keywords: list[str] = Field(default_factory=list)
    context_requirements: list[str] = Field(default_factory=list)
    exclusions: list[str] = Field(default_factory=list)
    bonus_patterns: list[str] = Field(default_factory=list)


class RuleCalibrationTier(BaseModel):
    """Boost applied when the match counts reach the given minimums."""

    min_total: int | None = None
    min_primary: int | None = None
    bonus: float
    ceiling: float

    def applies(self, primary: int, total: int) -> bool:
        if self.min_total is not None and total >= self.min_total:
            return True
        return self.min_primary is not None and primary >= self.min_primary


class RuleConfig(BaseModel):
    rules: dict[DomainType, DomainRule] = Field(default_factory=dict)
    primary_weight: float = 0.3
    secondary_weight: float = 0.2
    context_weight: float = 0.1
    additive_cap: float = 0.8
    bonus_score: float = 0.9
    bonus_calibrated_score: float = 0.95
    tiers: list[RuleCalibrationTier] = Field(default_factory=list)
    min_score: float = 0.3


class HeuristicGroup(BaseModel):
    """Terms scored either once per matching term (`each`) or once for any match (`any`)."""

    name: str
    terms: list[str]
    weight: float
    mode: Literal["each", "any"] = "each"

    def score(self, prompt: str) -> float:
        hits = sum(1 for term in self.terms if term in prompt)
        if self.mode == "any":
            return self.weight if hits else 0.0
        return hits * self.weight


class HeuristicCombo(BaseModel):
    """Co-occurrence rule: all `all_of` terms and at least one `any_of` term (if given)."""

    all_of: list[str] = Field(default_factory=list)
    any_of: list[str] = Field(default_factory=list)
    delta: float
    replaces: str | None = Field(
        default=None,
        description="Name of a group whose contribution is dropped when this combo fires.",
    )

    def fires(self, prompt: str) -> bool:
        if not all(term in prompt for term in self.all_of):
            return False
        return not self.any_of or any(term in prompt for term in self.any_of)


class HeuristicProfile(BaseModel):
    indicator: str
    cap: float = 0.8
    groups: list[HeuristicGroup] = Field(default_factory=list)
    combos: list[HeuristicCombo] = Field(default_factory=list)

    @model_validator(mode="after")
    def _check_replaced_groups(self) -> "HeuristicProfile":
        names = {g.name for g in self.groups}
        unknown = sorted({c.replaces for c in self.combos if c.replaces and c.replaces not in names})
        if unknown:
            raise ValueError(f"Heuristic combos replace unknown groups: {unknown}")
        return self


class AggregationConfig(BaseModel):
    """Constants of the enhanced aggregation and winner selection."""

    high_confidence_threshold: float = 0.8
    high_confidence_share: float = 0.7
    agreement_min_layers: int = 2
    agreement_bonus: float = 0.1
    agreement_ceiling: float = 0.85
    tie_break_weight: float = 0.1
    min_weighted_score: float = 0.1
    unknown_layer_weight: float = 0.1
    default_domain: DomainType = DomainType.CODE
    default_score: float = 0.5
    default_indicator: str = "default classification"
    empty_prompt_confidence: int = 50
    empty_prompt_indicator: str = "empty prompt"


class CalibrationBand(BaseModel):
    min_strong: int | None = None
    min_moderate: int | None = None
    bonus: float
    ceiling: float

    def applies(self, strong: int, moderate: int) -> bool:
        if self.min_strong is not None and strong >= self.min_strong:
            return True
        return self.min_moderate is not None and moderate >= self.min_moderate


class CalibrationConfig(BaseModel):
    """Maps indicator strength to confidence bands to keep outputs spread out."""

    strong_markers: list[str] = Field(default_factory=list)
    moderate_markers: list[str] = Field(default_factory=list)
    bands: list[CalibrationBand] = Field(default_factory=list)
    fallback_ceiling: float = 0.39


class DomainBoost(BaseModel):
    domain: DomainType
    markers: list[str]
    boost: float = Field(..., gt=0.0, le=1.0)


class ClassifierTables(BaseModel):
    """Complete, versioned configuration of the hybrid classifier."""

    version: str
    layers: list[LayerSpec] = Field(default_factory=list)
    embedding: EmbeddingConfig = Field(default_factory=EmbeddingConfig)
    patterns: PatternConfig = Field(default_factory=PatternConfig)
    rules: RuleConfig = Field(default_factory=RuleConfig)
    heuristics: dict[DomainType, HeuristicProfile] = Field(default_factory=dict)
    aggregation: AggregationConfig = Field(default_factory=AggregationConfig)
    calibration: CalibrationConfig = Field(default_factory=CalibrationConfig)
    boosts: list[DomainBoost] = Field(default_factory=list)

    @model_validator(mode="after")
    def _validate(self) -> "ClassifierTables":
        names = [layer.name for layer in self.layers]
        duplicates = sorted({n for n in names if names.count(n) > 1})
        if duplicates:
            raise ValueError(f"Duplicate layer names in classifier tables: {duplicates}")
        if not any(layer.enabled for layer in self.layers):
            raise ValueError("Classifier tables must enable at least one layer")
        return self
