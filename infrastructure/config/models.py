"""Configuration models (Pydantic classes)."""

from pathlib import Path

from pydantic import BaseModel, Field, model_validator

from domain.classifier import DomainClassifierConfig
from domain.schemas import DomainType
from infrastructure.constants import CLASSIFIER_FILE, TEMPLATES_FILE


class DataColumnsConfig(BaseModel):
    """Column name mapping for the evaluation dataset."""

    # The prompt column is always required
    prompt_col: str
    expected_domain_col: str | None = None
    min_confidence_col: str | None = None
    issues_col: str | None = None


class StatsConfig(BaseModel):
    """Configuration for evaluation statistics."""

    seed: int = 42
    n_boot: int = 2000
    alpha: float = Field(default=0.05, gt=0, lt=1)
    labels_order: list[str] = Field(default_factory=lambda: [d.value for d in DomainType])


class RunConfig(BaseModel):
    """
    Runtime configuration.
    - Loaded from experiment.yaml
    - Validated and enriched by configuration loader
    - Consumed by the classification runner and evaluation
    """

    name: str = Field(default="domain-eval", description="Short run name used in the output folder.")

    # Columns
    columns: DataColumnsConfig

    # Stats
    stats: StatsConfig = Field(default_factory=StatsConfig)

    # Versioned tables (resolved by loader; env overrides applied there)
    classifier_file: Path = Field(default_factory=lambda: CLASSIFIER_FILE)
    templates_file: Path = Field(default_factory=lambda: TEMPLATES_FILE)

    classifier: DomainClassifierConfig = Field(default_factory=DomainClassifierConfig)
    select_templates: bool = Field(
        default=True,
        description="If true, also run template selection for every prompt.",
    )

    test_file_path: Path = Field(..., description="Path to the evaluation dataset file (Excel or CSV).")

    @model_validator(mode="after")
    def _validate(self) -> "RunConfig":
        if not self.columns.prompt_col or not self.columns.prompt_col.strip():
            raise ValueError("columns.prompt_col is required in experiment.yaml")

        # Minimum confidence is only meaningful against an expected domain
        if self.columns.min_confidence_col and not self.columns.expected_domain_col:
            self.columns.min_confidence_col = None

        unknown = [label for label in self.stats.labels_order if label not in {d.value for d in DomainType}]
        if unknown:
            raise ValueError(f"stats.labels_order contains unknown domains: {unknown}")

        return self
