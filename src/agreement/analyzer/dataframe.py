from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import List

import pandas as pd

from ..errors import AgreementError
from ..metrics_factory import DEFAULT_METRICS
from ..sample import Sample
from .base import BaseAnalyzer

logger = logging.getLogger(__name__)


class DataFrameAnalyzer:
    """Analyzer operating directly on a ``pandas.DataFrame``.

    Parameters
    ----------
    df : pd.DataFrame
        Long-form data, one row per paired point.
    pred_col : str | list[str]
        One or multiple column names holding model predictions.
    true_col : str
        Observed column.
    dataset_col : str | None
        Optional column identifying the dataset each row belongs to.  Every
        dataset is analysed in isolation.
    """

    def __init__(
        self,
        df: pd.DataFrame,
        pred_col: str | list[str],
        true_col: str,
        dataset_col: str | None = None,
    ) -> None:
        self.df = df
        self.true_col = true_col
        self.dataset_col = dataset_col
        self.pred_cols: List[str] = [pred_col] if isinstance(pred_col, str) else list(pred_col)

        missing = [c for c in [true_col, dataset_col, *self.pred_cols] if c and c not in df.columns]
        if missing:
            raise KeyError(f"columns not found in DataFrame: {missing}")

    def _prepare_long(self) -> pd.DataFrame:
        """Return a *long* DataFrame with columns [dataset, ``var``, observed, ``pred``]."""
        id_vars = [self.true_col] + ([self.dataset_col] if self.dataset_col else [])
        return self.df[id_vars + self.pred_cols].melt(
            id_vars=id_vars,
            value_vars=self.pred_cols,
            var_name="var",
            value_name="pred",
        )

    def _groups(self):
        """Yield ``(label, observed, predicted)`` per dataset and prediction column."""
        df_long = self._prepare_long()
        keys = [self.dataset_col, "var"] if self.dataset_col else ["var"]
        for key, group in df_long.groupby(keys, sort=False):
            key = key if isinstance(key, tuple) else (key,)
            dataset = key[0] if self.dataset_col else None
            var = key[-1]
            if dataset is None:
                label = str(var)
            elif len(self.pred_cols) == 1:
                label = str(dataset)
            else:
                label = f"{dataset}:{var}"
            yield label, group[self.true_col], group["pred"]

    def samples(self, errors: dict[str, AgreementError] | None = None) -> dict[str, Sample]:
        """Split the frame into one :class:`Sample` per dataset and prediction column.

        When an *errors* mapping is given, datasets that fail validation are
        logged and recorded there instead of raising, so the remaining
        datasets are still returned.
        """
        out: dict[str, Sample] = {}
        for label, obs, pred in self._groups():
            try:
                out[label] = Sample(obs, pred, label)
            except AgreementError as exc:
                if errors is None:
                    raise
                logger.error("dataset %s skipped: %s", label, exc.message)
                errors[label] = exc
        return out

    def summary(
        self,
        metrics: Iterable[str] | None = None,
        *,
        precision: int | None = None,
    ) -> pd.DataFrame:
        """Compute agreement metrics for every dataset.

        Parameters
        ----------
        metrics : Iterable[str] | None
            Metric names registered in ``METRICS``; defaults to
            ``DEFAULT_METRICS``.
        precision : int | None
            Round the table to this many decimals.

        Returns
        -------
        pd.DataFrame
            A tidy DataFrame with a ``dataset`` column and one column per
            requested metric.  Metrics that are undefined for a dataset are
            NaN.
        """
        wanted = list(metrics or DEFAULT_METRICS)
        rows = []
        for label, obs, pred in self._groups():
            try:
                stats = BaseAnalyzer(Sample(obs, pred, label)).summary(wanted, strict=False)
            except AgreementError as exc:
                logger.error("dataset %s skipped: %s", label, exc.message)
                continue
            rows.append({"dataset": label, **stats.as_dict()})

        out = pd.DataFrame(rows, columns=["dataset"] + wanted)
        if precision is not None:
            out[wanted] = out[wanted].round(precision)
        return out
