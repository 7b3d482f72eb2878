"""High level entry points for the agreement package.

The package computes agreement and error decomposition statistics between
paired observed and predicted series.  :func:`analyze` dispatches the input
to the appropriate analyzer implementation; it supports pandas
``DataFrame`` objects, :class:`Sample` instances and plain iterables.
"""

from __future__ import annotations

from typing import Iterable

import pandas as pd

from .analyzer.array import ArrayAnalyzer
from .analyzer.base import BaseAnalyzer
from .analyzer.dataframe import DataFrameAnalyzer
from .errors import (
    AgreementError,
    DegenerateInputError,
    InsufficientDataError,
    LengthMismatchError,
    MissingValueError,
)
from .sample import Sample
from .stats import MetricSet, PrimitiveStats, RegressionLine

__all__ = [
    "AgreementError",
    "ArrayAnalyzer",
    "BaseAnalyzer",
    "DataFrameAnalyzer",
    "DegenerateInputError",
    "InsufficientDataError",
    "LengthMismatchError",
    "MetricSet",
    "MissingValueError",
    "PrimitiveStats",
    "RegressionLine",
    "Sample",
    "analyze",
]


def analyze(
    y_pred: Iterable[float] | pd.DataFrame | Sample,
    y_true: Iterable[float] | None = None,
    *,
    pred_col: str | list[str] = "predicted",
    true_col: str = "observed",
    dataset_col: str | None = None,
    metrics: Iterable[str] | None = None,
) -> pd.DataFrame | MetricSet:
    """Compute agreement statistics for various input types.

    Parameters
    ----------
    y_pred:
        Predicted values, a :class:`Sample`, or a :class:`pandas.DataFrame`
        holding both columns.
    y_true:
        Observed values matching ``y_pred`` index by index.
    pred_col, true_col, dataset_col:
        When ``y_pred`` is a DataFrame these specify the column names.
    metrics:
        Metric names to compute; defaults to ``DEFAULT_METRICS``.

    Returns
    -------
    pandas.DataFrame | MetricSet
        A table with one row per dataset for DataFrame input, otherwise a
        single ``MetricSet``.
    """

    if isinstance(y_pred, pd.DataFrame):
        return DataFrameAnalyzer(y_pred, pred_col, true_col, dataset_col).summary(metrics)

    if isinstance(y_pred, Sample):
        return BaseAnalyzer(y_pred).summary(metrics)

    if y_true is None:
        raise TypeError("y_true is required unless y_pred is a DataFrame or Sample")
    return ArrayAnalyzer(y_pred, y_true).summary(metrics)
