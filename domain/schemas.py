"""Pydantic models shared by classification and template selection."""

from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class DomainType(str, Enum):
    """Subject-matter domains a prompt can be classified into."""

    CODE = "code"
    WRITING = "writing"
    ANALYSIS = "analysis"
    RESEARCH = "research"


class TemplateType(str, Enum):
    """Structural rewriting strategies available to template generators."""

    TASK_IO = "task_io"
    BULLET = "bullet"
    SEQUENTIAL = "sequential"
    MINIMAL = "minimal"


class LintRuleType(str, Enum):
    """Issue categories produced by the external lint-rule engine."""

    MISSING_TASK_VERB = "missing_task_verb"
    MISSING_LANGUAGE = "missing_language"
    MISSING_IO_SPECIFICATION = "missing_io_specification"
    VAGUE_WORDING = "vague_wording"
    UNCLEAR_SCOPE = "unclear_scope"
    REDUNDANT_LANGUAGE = "redundant_language"


class ConfidenceBand(str, Enum):
    """Named confidence ranges driving the template selection strategy."""

    HIGH = "high"
    MODERATE = "moderate"
    LOW = "low"


class PreferenceTier(str, Enum):
    """Rows of the domain -> template preference table."""

    HIGH = "high"
    MODERATE = "moderate"
    SECONDARY = "secondary"


Complexity = Literal["simple", "medium", "complex"]
LintIssueSeverity = Literal["low", "medium", "high"]


class TextPosition(BaseModel):
    start: int
    end: int


class LintIssue(BaseModel):
    """Single issue reported by the lint-rule engine."""

    type: LintRuleType
    severity: LintIssueSeverity = "medium"
    message: str = ""
    position: TextPosition | None = None


class LintMetadata(BaseModel):
    processing_time_ms: float = 0.0
    input_length: int = 0


class LintResult(BaseModel):
    """Lint analysis of one prompt, consumed as a plain value."""

    score: int = Field(default=100, description="Composite quality score (0-100).")
    issues: list[LintIssue] = Field(default_factory=list)
    suggestions: list[str] = Field(default_factory=list)
    metadata: LintMetadata | None = None

    @property
    def issue_types(self) -> list[LintRuleType]:
        return [issue.type for issue in self.issues]


class DomainScore(BaseModel):
    """Opinion of one scoring layer about one domain."""

    domain: DomainType
    score: float = Field(..., ge=0.0, le=1.0)
    method: str = Field(..., description="Name of the layer that produced the score.")
    indicators: list[str] = Field(default_factory=list)


class AggregatedScore(BaseModel):
    """All layer opinions about one domain, merged for a single classification call."""

    domain: DomainType
    weighted_score: float = 0.0
    max_score: float = 0.0
    indicators: list[str] = Field(default_factory=list)
    layer_count: int = 0
    layer_scores: list[DomainScore] = Field(default_factory=list)

    def add(self, score: DomainScore) -> None:
        self.layer_scores.append(score)
        self.max_score = max(self.max_score, score.score)
        self.indicators.extend(score.indicators)
        self.layer_count = len(self.layer_scores)


class DomainClassificationResult(BaseModel):
    """Public classification outcome."""

    domain: DomainType
    confidence: int = Field(..., ge=0, le=100)
    indicators: list[str] = Field(default_factory=list)
    processing_time_ms: float = 0.0


class ClassificationResult(DomainClassificationResult):
    """Classification outcome with the per-layer breakdown."""

    method: str = "hybrid"
    layer_scores: list[DomainScore] = Field(default_factory=list)


class TemplateSelectionCriteria(BaseModel):
    """Prompt characteristics derived once per selection call."""

    model_config = ConfigDict(frozen=True)

    issues: tuple[LintIssue, ...] = ()
    complexity: Complexity = "simple"
    has_sequential_keywords: bool = False
    has_task_structure: bool = False
    needs_io_specification: bool = False
    has_vague_wording: bool = False

    def has_issue(self, issue_type: LintRuleType) -> bool:
        return any(issue.type == issue_type for issue in self.issues)


class PromptDecision(BaseModel):
    """Classification plus template choice for one prompt."""

    prompt: str
    classification: DomainClassificationResult
    templates: list[TemplateType] = Field(default_factory=list)
