"""Base class used to compute agreement statistics for one sample.

An analyzer holds a validated :class:`~agreement.sample.Sample` and
dispatches the metric functions declared in ``metrics_factory.METRICS``,
the line estimators in ``regression.ESTIMATORS`` and the schemes in
``decomposition.DECOMPOSITIONS``.  Concrete subclasses only differ in how
they build the sample from their input.
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Iterable

import numpy as np

from ..checks import IdentityCheck, check_identities
from ..decomposition import Decomposition, decompose_all
from ..errors import DegenerateInputError
from ..metrics_factory import DEFAULT_METRICS, METRICS
from ..regression import fit_all
from ..sample import Sample
from ..stats import MetricSet, RegressionLine

logger = logging.getLogger(__name__)


class BaseAnalyzer:
    """Compute metric summaries, regression lines and decompositions."""

    def __init__(self, sample: Sample) -> None:
        self.sample = sample
        self.res = sample.residuals
        self.y_true = sample.observed
        self.y_pred = sample.predicted

    def _run_metric(self, name: str) -> float:
        """Execute the metric *name* with the arrays its signature asks for."""
        try:
            fn = METRICS[name]
        except KeyError:
            raise KeyError(f"unknown metric {name!r}; choose from {sorted(METRICS)}") from None
        sig = inspect.signature(fn)
        kwargs = {}
        if "res" in sig.parameters:
            kwargs["res"] = self.res
        if "y_true" in sig.parameters:
            kwargs["y_true"] = self.y_true
        if "y_pred" in sig.parameters:
            kwargs["y_pred"] = self.y_pred
        return fn(**kwargs)

    def summary(self, metrics: Iterable[str] | None = None, *, strict: bool = True) -> MetricSet:
        """Return a :class:`MetricSet` with the requested metrics.

        With ``strict=False`` a metric that hits a degenerate divisor is
        logged and reported as NaN instead of aborting the summary.
        """
        results: dict[str, float] = {}
        for name in metrics or DEFAULT_METRICS:
            try:
                results[name] = self._run_metric(name)
            except DegenerateInputError as exc:
                if strict:
                    raise
                logger.warning("metric %s undefined for %s: %s", name, self.sample.label, exc.message)
                results[name] = np.nan
        return MetricSet(results, self.sample.label)

    def regressions(
        self, methods: Iterable[str] | None = None, *, strict: bool = True
    ) -> dict[str, RegressionLine]:
        return fit_all(self.sample, methods, strict=strict)

    def decompositions(
        self, schemes: Iterable[str] | None = None, *, strict: bool = True
    ) -> dict[str, Decomposition]:
        return decompose_all(self.sample, schemes, strict=strict)

    def identities(self, *, rtol: float = 1e-9, atol: float = 1e-9) -> list[IdentityCheck]:
        """Cross-check the metric identities on the unrounded values."""
        metrics = self.summary(strict=False)
        decs = self.decompositions(strict=False)
        return check_identities(metrics, decs, rtol=rtol, atol=atol, label=self.sample.label)
