"""Template selection tables: band thresholds, preference records and keyword lists."""

from functools import cached_property

from pydantic import BaseModel, Field, model_validator

from domain.schemas import DomainType, PreferenceTier, TemplateType


class TemplatePreference(BaseModel):
    """One row of the domain x tier -> templates decision table."""

    domain: DomainType
    tier: PreferenceTier
    templates: list[TemplateType] = Field(..., min_length=1)


class BandThresholds(BaseModel):
    high: int = 90
    moderate: int = 70

    @model_validator(mode="after")
    def _ordered(self) -> "BandThresholds":
        if not 0 <= self.moderate < self.high <= 100:
            raise ValueError(f"Expected 0 <= moderate < high <= 100, got moderate={self.moderate}, high={self.high}")
        return self


class ComplexityLimits(BaseModel):
    simple_max_words: int = 5
    simple_max_issues: int = 1
    medium_max_words: int = 20
    medium_max_issues: int = 3


class KeywordLists(BaseModel):
    sequential: list[str] = Field(default_factory=list)
    task: list[str] = Field(default_factory=list)
    vague: list[str] = Field(default_factory=list)


class SelectionTables(BaseModel):
    """Complete, versioned configuration of the template selector."""

    version: str
    bands: BandThresholds = Field(default_factory=BandThresholds)
    preferences: list[TemplatePreference]
    keywords: KeywordLists = Field(default_factory=KeywordLists)
    complexity: ComplexityLimits = Field(default_factory=ComplexityLimits)
    max_templates: int = Field(default=3, ge=1)
    moderate_domain_slots: int = Field(default=2, ge=0)
    moderate_rule_slots: int = Field(default=1, ge=0)
    missing_prompt_placeholder: str = "prompt analysis"

    @model_validator(mode="after")
    def _check_exhaustive(self) -> "SelectionTables":
        seen = [(p.domain, p.tier) for p in self.preferences]
        expected = [(d, t) for d in DomainType for t in PreferenceTier]
        missing = [f"{d.value}/{t.value}" for d, t in expected if (d, t) not in seen]
        duplicates = sorted({f"{d.value}/{t.value}" for d, t in seen if seen.count((d, t)) > 1})
        if missing or duplicates:
            msg = "Template preference table is not exhaustive."
            if missing:
                msg += f" Missing rows: {missing}."
            if duplicates:
                msg += f" Duplicate rows: {duplicates}."
            raise ValueError(msg)
        return self

    @cached_property
    def preference_lookup(self) -> dict[tuple[DomainType, PreferenceTier], tuple[TemplateType, ...]]:
        return {(p.domain, p.tier): tuple(p.templates) for p in self.preferences}

    def preferences_for(self, domain: DomainType, tier: PreferenceTier) -> list[TemplateType]:
        return list(self.preference_lookup.get((domain, tier), (TemplateType.MINIMAL,)))
