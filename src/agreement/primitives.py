"""Primitive moments shared by every estimator and metric.

All moments are *uncorrected*: variances and covariances divide by ``n`` and
not ``n - 1``.
"""

from __future__ import annotations

from collections.abc import Iterable

import numpy as np

from .errors import DegenerateInputError
from .stats import PrimitiveStats


def mean(seq: Iterable[float]) -> float:
    return float(np.mean(np.asarray(seq, dtype=float)))


def _deviations(x: np.ndarray) -> np.ndarray:
    """Deviations from the mean, exactly zero for a constant sequence."""
    # the mean of e.g. [0.1] * 7 is not exactly 0.1 in float64
    if np.ptp(x) == 0.0:
        return np.zeros_like(x)
    return x - x.mean()


def uncorrected_variance(seq: Iterable[float]) -> float:
    """Population variance, ``sum((x - mean)**2) / n``."""
    x = np.asarray(seq, dtype=float)
    return float(np.mean(_deviations(x) ** 2))


def uncorrected_std(seq: Iterable[float]) -> float:
    return float(np.sqrt(uncorrected_variance(seq)))


def covariance(x: Iterable[float], y: Iterable[float]) -> float:
    """Population covariance of two equally long sequences."""
    x = np.asarray(x, dtype=float)
    y = np.asarray(y, dtype=float)
    return float(np.mean(_deviations(x) * _deviations(y)))


def require_nonzero(value: float, what: str) -> float:
    """Return *value* or raise :class:`DegenerateInputError` when it is zero."""
    if value == 0.0:
        raise DegenerateInputError(f"{what} is zero", {what: value})
    return value


def correlation(x: Iterable[float], y: Iterable[float]) -> float:
    """Pearson correlation coefficient from uncorrected moments."""
    x = np.asarray(x, dtype=float)
    y = np.asarray(y, dtype=float)
    sx = require_nonzero(uncorrected_std(x), "std_obs")
    sy = require_nonzero(uncorrected_std(y), "std_pred")
    r = covariance(x, y) / (sx * sy)
    # rounding can push |r| a hair past one for perfectly collinear input
    return float(np.clip(r, -1.0, 1.0))


def primitive_stats(seq: Iterable[float]) -> PrimitiveStats:
    x = np.asarray(seq, dtype=float)
    var = uncorrected_variance(x)
    return PrimitiveStats(mean=mean(x), variance=var, std=float(np.sqrt(var)))
