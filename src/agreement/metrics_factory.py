"""Collection of built-in aggregate metrics used by the analyzers.

Every metric is a plain function whose parameters are any of ``res``
(predicted minus observed), ``y_true`` (observed) and ``y_pred``
(predicted).  The analyzer inspects the signature and passes only what is
asked for.
"""

from __future__ import annotations

from collections.abc import Callable

import numpy as np

from .errors import DegenerateInputError
from .primitives import correlation, covariance, mean, require_nonzero, uncorrected_std
from .regression import standardized_major_axis
from .sample import Sample

METRICS: dict[str, Callable[..., float]] = {}

DEFAULT_METRICS: tuple[str, ...] = (
    "n",
    "mean_obs",
    "mean_pred",
    "mbe",
    "mse",
    "rmse",
    "r",
    "r2",
    "xa",
    "ccc",
    "sb",
    "sdsd",
    "lcs",
    "mla",
    "mlp",
    "pla",
    "plp",
    "pab",
    "ppb",
    "ub",
    "uc",
    "ue",
)


def register_metric(
    name: str,
) -> Callable[[Callable[..., float]], Callable[..., float]]:
    """Register *name* as a metric."""

    def decorator(fn: Callable[..., float]) -> Callable[..., float]:
        METRICS[name] = fn
        return fn

    return decorator


def _nonzero_tss(res: np.ndarray) -> float:
    value = float(np.sum(res**2))
    if value == 0.0:
        raise DegenerateInputError(
            "predicted matches observed exactly; error shares are undefined", {"tss": value}
        )
    return value


def _nonzero_mse(res: np.ndarray) -> float:
    return _nonzero_tss(res) / res.size


@register_metric("n")
def n(res: np.ndarray) -> float:
    return float(np.size(res))


@register_metric("mean_obs")
def mean_obs(y_true: np.ndarray) -> float:
    return mean(y_true)


@register_metric("mean_pred")
def mean_pred(y_pred: np.ndarray) -> float:
    return mean(y_pred)


@register_metric("tss")
def tss(res: np.ndarray) -> float:
    """Total sum of squared differences."""
    return float(np.sum(res**2))


@register_metric("mbe")
def mbe(res: np.ndarray) -> float:
    """Signed mean bias, ``mean(P) - mean(O)``."""
    return float(np.mean(res))


@register_metric("mse")
def mse(res: np.ndarray) -> float:
    return float(np.mean(res**2))


@register_metric("rmse")
def rmse(res: np.ndarray) -> float:
    return float(np.sqrt(np.mean(res**2)))


@register_metric("r")
def r(y_true: np.ndarray, y_pred: np.ndarray) -> float:
    """Pearson correlation coefficient."""
    return correlation(y_true, y_pred)


@register_metric("r2")
def r2(y_true: np.ndarray, y_pred: np.ndarray) -> float:
    return correlation(y_true, y_pred) ** 2


@register_metric("xa")
def xa(res: np.ndarray, y_true: np.ndarray, y_pred: np.ndarray) -> float:
    """Accuracy component of the concordance correlation."""
    sd_o = require_nonzero(uncorrected_std(y_true), "std_obs")
    sd_p = require_nonzero(uncorrected_std(y_pred), "std_pred")
    bias = float(np.mean(res))
    return 2.0 / (sd_p / sd_o + sd_o / sd_p + bias**2 / (sd_o * sd_p))


@register_metric("ccc")
def ccc(res: np.ndarray, y_true: np.ndarray, y_pred: np.ndarray) -> float:
    """Lin's concordance correlation coefficient."""
    return correlation(y_true, y_pred) * xa(res, y_true, y_pred)


@register_metric("sb")
def sb(y_true: np.ndarray, y_pred: np.ndarray) -> float:
    """Squared bias."""
    return (mean(y_true) - mean(y_pred)) ** 2


@register_metric("sdsd")
def sdsd(y_true: np.ndarray, y_pred: np.ndarray) -> float:
    """Squared difference of the standard deviations."""
    return (uncorrected_std(y_pred) - uncorrected_std(y_true)) ** 2


@register_metric("lcs")
def lcs(y_true: np.ndarray, y_pred: np.ndarray) -> float:
    """Lack of correlation weighted by the standard deviations."""
    return 2.0 * uncorrected_std(y_true) * uncorrected_std(y_pred) - 2.0 * covariance(y_true, y_pred)


@register_metric("mla")
def mla(y_true: np.ndarray, y_pred: np.ndarray) -> float:
    """Mean lack of accuracy: squared gap between the SMA line and the 1:1 line."""
    line = standardized_major_axis(Sample(y_true, y_pred))
    return float(np.mean((line.predict(y_true) - y_true) ** 2))


@register_metric("mlp")
def mlp(y_true: np.ndarray, y_pred: np.ndarray) -> float:
    """Mean lack of precision: scatter around the SMA line in both directions."""
    line = standardized_major_axis(Sample(y_true, y_pred))
    return float(np.mean(np.abs(y_true - line.inverse(y_pred)) * np.abs(y_pred - line.predict(y_true))))


@register_metric("pla")
def pla(res: np.ndarray, y_true: np.ndarray, y_pred: np.ndarray) -> float:
    """Share of MSE due to lack of accuracy, in percent."""
    return 100.0 * mla(y_true, y_pred) / _nonzero_mse(res)


@register_metric("plp")
def plp(res: np.ndarray, y_true: np.ndarray, y_pred: np.ndarray) -> float:
    """Share of MSE due to lack of precision, in percent."""
    return 100.0 * mlp(y_true, y_pred) / _nonzero_mse(res)


@register_metric("pab")
def pab(res: np.ndarray, y_true: np.ndarray, y_pred: np.ndarray) -> float:
    """Additive bias share of MSE, in percent."""
    return 100.0 * sb(y_true, y_pred) / _nonzero_mse(res)


@register_metric("ppb")
def ppb(res: np.ndarray, y_true: np.ndarray, y_pred: np.ndarray) -> float:
    """Proportional bias share of MSE, in percent."""
    return 100.0 * sdsd(y_true, y_pred) / _nonzero_mse(res)


@register_metric("ub")
def ub(res: np.ndarray, y_true: np.ndarray, y_pred: np.ndarray) -> float:
    """Theil's bias proportion, in percent of TSS."""
    return 100.0 * res.size * sb(y_true, y_pred) / _nonzero_tss(res)


@register_metric("uc")
def uc(res: np.ndarray, y_true: np.ndarray, y_pred: np.ndarray) -> float:
    """Theil's consistency (variance) proportion, in percent of TSS."""
    return 100.0 * res.size * sdsd(y_true, y_pred) / _nonzero_tss(res)


@register_metric("ue")
def ue(res: np.ndarray, y_true: np.ndarray, y_pred: np.ndarray) -> float:
    """Theil's unexplained (covariance) proportion, in percent of TSS."""
    rho = correlation(y_true, y_pred)
    spread = uncorrected_std(y_true) * uncorrected_std(y_pred)
    return 100.0 * 2.0 * res.size * (1.0 - rho) * spread / _nonzero_tss(res)
