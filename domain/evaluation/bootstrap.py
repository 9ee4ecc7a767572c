"""Percentile bootstrap intervals for per-prompt evaluation results."""

import warnings
from collections.abc import Callable

import numpy as np
from sklearn.exceptions import UndefinedMetricWarning

NAN_INTERVAL = (float("nan"), float("nan"))


def resample_indices(n: int, n_boot: int, seed: int) -> np.ndarray:
    """(n_boot, n) matrix of row indices drawn with replacement."""
    return np.random.default_rng(seed).integers(0, n, size=(n_boot, n))


def percentile_interval(stats: np.ndarray, alpha: float) -> tuple[float, float]:
    """Two-sided percentile interval; NaN statistics are ignored."""
    stats = stats[~np.isnan(stats)]
    if stats.size == 0:
        return NAN_INTERVAL
    lower, upper = np.percentile(stats, [100 * alpha / 2, 100 * (1 - alpha / 2)])
    return float(lower), float(upper)


def bootstrap_ci(
    y_true: np.ndarray,
    y_pred: np.ndarray,
    stat_fn: Callable[[np.ndarray, np.ndarray], float],
    n_boot: int,
    alpha: float,
    seed: int,
) -> tuple[float, float]:
    """
    Bootstrap CI for a statistic over (expected, predicted) domain pairs.

    Prompts are resampled as pairs. Resamples that contain a single domain
    make kappa undefined; those NaN values are dropped before taking
    percentiles.

    Args:
        y_true: Expected domains
        y_pred: Predicted domains
        stat_fn: Metric computed from (y_true, y_pred), e.g. accuracy_score
        n_boot: Number of resamples
        alpha: Significance level (0.05 gives a 95% interval)
        seed: Seed of the resampling generator

    Returns:
        (lower, upper); (nan, nan) for empty input
    """
    y_true = np.asarray(y_true)
    y_pred = np.asarray(y_pred)
    if y_true.size == 0:
        return NAN_INTERVAL

    stats = np.empty(n_boot, dtype=float)
    with warnings.catch_warnings():
        warnings.filterwarnings("ignore", category=UserWarning, message="y_pred contains classes not in y_true")
        warnings.filterwarnings("ignore", category=UndefinedMetricWarning)
        warnings.filterwarnings("ignore", category=RuntimeWarning)
        for b, rows in enumerate(resample_indices(y_true.size, n_boot, seed)):
            stats[b] = stat_fn(y_true[rows], y_pred[rows])

    return percentile_interval(stats, alpha)


def bootstrap_mean_ci(values: np.ndarray, n_boot: int, alpha: float, seed: int) -> tuple[float, float]:
    """Bootstrap CI for the mean of per-prompt values (e.g. pass/fail flags)."""
    values = np.asarray(values, dtype=float)
    if values.size == 0:
        return NAN_INTERVAL
    return percentile_interval(values[resample_indices(values.size, n_boot, seed)].mean(axis=1), alpha)
