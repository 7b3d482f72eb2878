"""Per-point partitions of squared error into unsystematic and systematic parts.

Three schemes are provided, each anchored on a different reference line:

``willmott``
    OLS fitted values (Willmott, 1981).  ``UD = (P_hat - P)**2`` and
    ``SD = (P_hat - O)**2``.  Only the vertical least-squares line makes the
    two parts add up to the total; any other reference line leaves a gap.
``ma``
    Major axis line (Duveiller et al., 2016).  ``UD = 2 * h**2`` where ``h``
    is the perpendicular distance to the line, ``SD = (P_hat - O)**2``.  Not
    additive to the total in general.
``sma``
    Standardized major axis (Ji & Gallo, 2006).  ``UD = |O - O_hat| * |P - P_hat|``
    and ``SD = (P_hat - O)**2``.  Adds up to the total for samples whose
    correlation is not negative.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Optional

import numpy as np
import pandas as pd

from .errors import DegenerateInputError
from .regression import major_axis as fit_major_axis
from .regression import ols_vertical, standardized_major_axis as fit_sma
from .sample import Sample
from .stats import RegressionLine

logger = logging.getLogger(__name__)

DECOMPOSITIONS: dict[str, Callable[[Sample], "Decomposition"]] = {}


def register_decomposition(
    name: str,
) -> Callable[[Callable[[Sample], "Decomposition"]], Callable[[Sample], "Decomposition"]]:
    """Register *name* as a decomposition scheme."""

    def decorator(fn: Callable[[Sample], "Decomposition"]) -> Callable[[Sample], "Decomposition"]:
        DECOMPOSITIONS[name] = fn
        return fn

    return decorator


@dataclass(frozen=True, eq=False)
class Decomposition:
    """Unsystematic (``ud``) and systematic (``sd``) squared error per point."""

    scheme: str
    sample: Sample
    line: RegressionLine
    ud: np.ndarray
    sd: np.ndarray
    fitted: Optional[np.ndarray] = None

    @property
    def sud(self) -> float:
        return float(np.sum(self.ud))

    @property
    def ssd(self) -> float:
        return float(np.sum(self.sd))

    @property
    def tss(self) -> float:
        return float(np.sum((self.sample.observed - self.sample.predicted) ** 2))

    @property
    def residual(self) -> float:
        """Part of the total the two sums leave unexplained (negative when they overshoot)."""
        return self.tss - (self.sud + self.ssd)

    def is_additive(self, rtol: float = 1e-9, atol: float = 1e-9) -> bool:
        return bool(np.isclose(self.sud + self.ssd, self.tss, rtol=rtol, atol=atol))

    def totals(self) -> dict[str, float]:
        return {"sud": self.sud, "ssd": self.ssd, "tss": self.tss, "residual": self.residual}

    def to_frame(self) -> pd.DataFrame:
        """Return the per-point table aligned with the input sample."""
        df = self.sample.to_frame()
        df["fitted"] = self.line.predict(self.sample.observed) if self.fitted is None else self.fitted
        df["ud"] = self.ud
        df["sd"] = self.sd
        df.insert(0, "scheme", self.scheme)
        return df


@register_decomposition("willmott")
def willmott(sample: Sample, line: RegressionLine | None = None) -> Decomposition:
    """Willmott's split around a least-squares line (vertical OLS by default).

    With the default vertical OLS line the residuals are orthogonal to the
    fitted values, so ``sud + ssd`` equals ``tss`` exactly.  The split stops
    adding up once another reference line is passed, e.g. the horizontal
    OLS line from ``regression.fit(sample, "ols_h")``.
    """
    line = line or ols_vertical(sample)
    fitted = line.predict(sample.observed)
    ud = (fitted - sample.predicted) ** 2
    sd = (fitted - sample.observed) ** 2
    return Decomposition("willmott", sample, line, ud, sd, fitted)


@register_decomposition("ma")
def major_axis(sample: Sample) -> Decomposition:
    """Duveiller's split around the major axis."""
    line = fit_major_axis(sample)
    fitted = line.predict(sample.observed)
    h = np.abs(sample.predicted - fitted) / np.sqrt(line.slope**2 + 1.0)
    ud = 2.0 * h**2
    sd = (fitted - sample.observed) ** 2
    return Decomposition("ma", sample, line, ud, sd, fitted)


@register_decomposition("sma")
def standardized_major_axis(sample: Sample) -> Decomposition:
    """Ji & Gallo's split around the standardized major axis."""
    line = fit_sma(sample)
    fitted = line.predict(sample.observed)
    obs_hat = line.inverse(sample.predicted)
    ud = np.abs(sample.observed - obs_hat) * np.abs(sample.predicted - fitted)
    sd = (fitted - sample.observed) ** 2
    return Decomposition("sma", sample, line, ud, sd, fitted)


def decompose(sample: Sample, scheme: str) -> Decomposition:
    try:
        fn = DECOMPOSITIONS[scheme]
    except KeyError:
        raise KeyError(f"unknown decomposition {scheme!r}; choose from {sorted(DECOMPOSITIONS)}") from None
    return fn(sample)


def decompose_all(
    sample: Sample,
    schemes: Iterable[str] | None = None,
    *,
    strict: bool = True,
) -> dict[str, Decomposition]:
    """Run every requested scheme, skipping degenerate ones when not *strict*."""
    out: dict[str, Decomposition] = {}
    for name in schemes or DECOMPOSITIONS:
        try:
            out[name] = decompose(sample, name)
        except DegenerateInputError as exc:
            if strict:
                raise
            logger.warning("skipping %s decomposition for %s: %s", name, sample.label, exc.message)
    return out
