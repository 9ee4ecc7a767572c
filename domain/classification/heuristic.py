"""Domain heuristic layer: one parameterized term-group scorer per domain."""

from domain.schemas import DomainScore, DomainType
from domain.tables.classifier import ClassifierTables, HeuristicProfile

from .base import ClassificationLayer
from .registry import register_layer


def score_profile(profile: HeuristicProfile, clean_prompt: str) -> float:
    """
    Sum term-group contributions and combo deltas, capped at the profile ceiling.

    A firing combo with `replaces` drops that group's contribution, so a strong
    co-occurrence signal takes the place of the weaker per-term count.
    """
    fired = [combo for combo in profile.combos if combo.fires(clean_prompt)]
    replaced = {combo.replaces for combo in fired if combo.replaces}

    score = sum(group.score(clean_prompt) for group in profile.groups if group.name not in replaced)
    score += sum(combo.delta for combo in fired)
    return min(score, profile.cap)


class HeuristicLayer(ClassificationLayer):
    name = "heuristic"

    def __init__(self, profiles: dict[DomainType, HeuristicProfile], *, weight: float) -> None:
        super().__init__(weight=weight)
        self.profiles = profiles

    @classmethod
    def from_tables(cls, tables: ClassifierTables, *, weight: float) -> "HeuristicLayer":
        return cls(tables.heuristics, weight=weight)

    def classify(self, prompt: str) -> list[DomainScore]:
        clean_prompt = prompt.lower()
        scores: list[DomainScore] = []
        for domain, profile in self.profiles.items():
            score = score_profile(profile, clean_prompt)
            if score > 0:
                scores.append(
                    DomainScore(domain=domain, score=score, method=self.name, indicators=[profile.indicator])
                )
        return scores


register_layer(HeuristicLayer.name, HeuristicLayer)
