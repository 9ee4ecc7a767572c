"""Confidence calibration and domain-specific boosts applied to the winning domain."""

from collections.abc import Sequence

from domain.schemas import DomainType
from domain.tables.classifier import CalibrationConfig, DomainBoost


def count_markers(indicators: Sequence[str], markers: Sequence[str]) -> int:
    """Number of indicators containing at least one of the marker substrings."""
    return sum(1 for ind in indicators if any(marker in ind for marker in markers))


def calibrate_distribution(base_score: float, indicators: Sequence[str], config: CalibrationConfig) -> float:
    """
    Map indicator strength to a confidence band so outputs stay spread out.

    With the default tables: two strong indicators land in [0.80, 0.95], one
    strong or three moderate in [0.60, 0.79], one moderate in [0.40, 0.59],
    anything else in [0.20, 0.39].
    """
    strong = count_markers(indicators, config.strong_markers)
    moderate = count_markers(indicators, config.moderate_markers)

    for band in config.bands:
        if band.applies(strong=strong, moderate=moderate):
            return min(band.ceiling, base_score + band.bonus)
    return min(config.fallback_ceiling, base_score)


def boosted_score(
    domain: DomainType,
    base_score: float,
    indicators: Sequence[str],
    boosts: Sequence[DomainBoost],
) -> float:
    """Add every boost of `domain` whose markers appear in at least one indicator."""
    score = base_score
    for boost in boosts:
        if boost.domain != domain:
            continue
        if any(marker in ind for ind in indicators for marker in boost.markers):
            score += boost.boost
    return score


def apply_domain_boosts(
    domain: DomainType,
    base_score: float,
    indicators: Sequence[str],
    *,
    calibration: CalibrationConfig,
    boosts: Sequence[DomainBoost],
    ceiling: float = 1.0,
) -> float:
    """Final score: the larger of calibrated and boosted score, capped at `ceiling`."""
    calibrated = calibrate_distribution(base_score, indicators, calibration)
    boosted = boosted_score(domain, base_score, indicators, boosts)
    return min(ceiling, max(calibrated, boosted))
