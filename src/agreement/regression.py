"""Closed-form line estimators relating predicted to observed values.

Each estimator is registered under a short name and returns a
:class:`~agreement.stats.RegressionLine` expressed as
``predicted = slope * observed + intercept``, regardless of which variable
the estimator treats as the response.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable

import numpy as np

from .errors import DegenerateInputError
from .primitives import covariance, mean, require_nonzero, uncorrected_std, uncorrected_variance
from .sample import Sample
from .stats import RegressionLine

logger = logging.getLogger(__name__)

ESTIMATORS: dict[str, Callable[[Sample], RegressionLine]] = {}


def register_estimator(
    name: str,
) -> Callable[[Callable[[Sample], RegressionLine]], Callable[[Sample], RegressionLine]]:
    """Register *name* as a line estimator."""

    def decorator(fn: Callable[[Sample], RegressionLine]) -> Callable[[Sample], RegressionLine]:
        ESTIMATORS[name] = fn
        return fn

    return decorator


def _line(sample: Sample, slope: float, method: str) -> RegressionLine:
    intercept = mean(sample.predicted) - slope * mean(sample.observed)
    return RegressionLine(slope=float(slope), intercept=float(intercept), method=method)


@register_estimator("ols_v")
def ols_vertical(sample: Sample) -> RegressionLine:
    """Ordinary least squares of predicted on observed."""
    var_o = require_nonzero(uncorrected_variance(sample.observed), "var_obs")
    return _line(sample, covariance(sample.observed, sample.predicted) / var_o, "ols_v")


@register_estimator("ols_h")
def ols_horizontal(sample: Sample) -> RegressionLine:
    """Least squares of observed on predicted, re-expressed as predicted on observed."""
    cov = require_nonzero(covariance(sample.observed, sample.predicted), "covariance")
    return _line(sample, uncorrected_variance(sample.predicted) / cov, "ols_h")


@register_estimator("ma")
def major_axis(sample: Sample) -> RegressionLine:
    """Major axis: minimises perpendicular distances, equal error variances."""
    cov = require_nonzero(covariance(sample.observed, sample.predicted), "covariance")
    diff = uncorrected_variance(sample.predicted) - uncorrected_variance(sample.observed)
    slope = (diff + np.sqrt(diff**2 + 4.0 * cov**2)) / (2.0 * cov)
    return _line(sample, slope, "ma")


@register_estimator("sma")
def standardized_major_axis(sample: Sample) -> RegressionLine:
    """Standardized major axis: ratio of spreads, signed like the correlation.

    A correlation of exactly zero is treated as positive.
    """
    sd_o = require_nonzero(uncorrected_std(sample.observed), "std_obs")
    sign = -1.0 if covariance(sample.observed, sample.predicted) < 0 else 1.0
    return _line(sample, sign * uncorrected_std(sample.predicted) / sd_o, "sma")


def fit(sample: Sample, method: str) -> RegressionLine:
    """Fit the line estimator registered as *method*."""
    try:
        fn = ESTIMATORS[method]
    except KeyError:
        raise KeyError(f"unknown estimator {method!r}; choose from {sorted(ESTIMATORS)}") from None
    return fn(sample)


def fit_all(
    sample: Sample,
    methods: Iterable[str] | None = None,
    *,
    strict: bool = True,
) -> dict[str, RegressionLine]:
    """Fit every requested estimator.

    With ``strict=False`` estimators that hit a degenerate divisor are logged
    and left out of the result instead of aborting the others.
    """
    lines: dict[str, RegressionLine] = {}
    for name in methods or ESTIMATORS:
        try:
            lines[name] = fit(sample, name)
        except DegenerateInputError as exc:
            if strict:
                raise
            logger.warning("skipping %s line for %s: %s", name, sample.label, exc.message)
    return lines
