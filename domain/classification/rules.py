"""
Rule layer with exclusions.

Keyword rules per domain, checked in a fixed precedence:
1. exclusions veto the domain outright,
2. bonus patterns set a high-confidence floor,
3. otherwise primary/secondary/context matches are summed and capped,
4. the result is calibrated by the number of matched indicators,
5. scores below the minimum are dropped.
"""

import logging
from dataclasses import dataclass, field

from domain.schemas import DomainScore, DomainType
from domain.tables.classifier import ClassifierTables, DomainRule, RuleConfig

from .base import ClassificationLayer
from .registry import register_layer

logger = logging.getLogger(__name__)


@dataclass
class RuleMatch:
    """Keyword hits of one domain rule against one prompt."""

    bonus: list[str] = field(default_factory=list)
    primary: list[str] = field(default_factory=list)
    secondary: list[str] = field(default_factory=list)
    context: list[str] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.primary) + len(self.secondary) + len(self.context)

    @property
    def indicators(self) -> list[str]:
        return (
            [f"bonus: {p}" for p in self.bonus]
            + [f"primary: {k}" for k in self.primary]
            + [f"secondary: {k}" for k in self.secondary]
            + [f"context: {c}" for c in self.context]
        )


def find_exclusion(rule: DomainRule, clean_prompt: str) -> str | None:
    """Return the first exclusion phrase contained in the prompt, if any."""
    for exclusion in rule.exclusions:
        if exclusion.lower() in clean_prompt:
            return exclusion
    return None


def match_rule(rule: DomainRule, clean_prompt: str) -> RuleMatch:
    return RuleMatch(
        bonus=[p for p in rule.bonus_patterns if p.lower() in clean_prompt],
        primary=[k for k in rule.primary_keywords if k.lower() in clean_prompt],
        secondary=[k for k in rule.secondary_keywords if k.lower() in clean_prompt],
        context=[c for c in rule.context_requirements if c.lower() in clean_prompt],
    )


class RuleLayer(ClassificationLayer):
    name = "rule"

    def __init__(self, config: RuleConfig, *, weight: float) -> None:
        super().__init__(weight=weight)
        self.config = config

    @classmethod
    def from_tables(cls, tables: ClassifierTables, *, weight: float) -> "RuleLayer":
        return cls(tables.rules, weight=weight)

    def raw_score(self, match: RuleMatch) -> float:
        cfg = self.config
        if match.bonus:
            return cfg.bonus_score
        additive = (
            len(match.primary) * cfg.primary_weight
            + len(match.secondary) * cfg.secondary_weight
            + len(match.context) * cfg.context_weight
        )
        return min(additive, cfg.additive_cap)

    def calibrate(self, score: float, match: RuleMatch) -> float:
        if score >= self.config.bonus_score:
            return self.config.bonus_calibrated_score
        for tier in self.config.tiers:
            if tier.applies(primary=len(match.primary), total=match.total):
                return min(tier.ceiling, score + tier.bonus)
        return score

    def score_domain(self, domain: DomainType, prompt: str) -> DomainScore | None:
        """Score a single domain; None when vetoed by an exclusion or below the minimum."""
        rule = self.config.rules.get(domain)
        if rule is None:
            return None

        clean_prompt = prompt.lower()
        exclusion = find_exclusion(rule, clean_prompt)
        if exclusion is not None:
            logger.debug("Rule layer: %s vetoed by exclusion %r", domain.value, exclusion)
            return None

        match = match_rule(rule, clean_prompt)
        score = self.calibrate(self.raw_score(match), match)
        if score < self.config.min_score:
            return None

        return DomainScore(domain=domain, score=score, method=self.name, indicators=match.indicators)

    def classify(self, prompt: str) -> list[DomainScore]:
        scores: list[DomainScore] = []
        for domain in self.config.rules:
            domain_score = self.score_domain(domain, prompt)
            if domain_score is not None:
                scores.append(domain_score)
        return scores


register_layer(RuleLayer.name, RuleLayer)
