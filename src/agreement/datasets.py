"""Built-in example data and table loaders.

``illustrative`` is the ten-point example used throughout the agreement
literature to contrast the decomposition schemes.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path

import pandas as pd

from .analyzer.dataframe import DataFrameAnalyzer
from .errors import AgreementError
from .sample import Sample

logger = logging.getLogger(__name__)

BUILTIN: dict[str, dict[str, list[float]]] = {
    "illustrative": {
        "observed": [2, 3, 4, 5, 6, 7, 8, 9, 10, 11],
        "predicted": [4, 5.5, 2.5, 4.5, 8, 5, 6, 10, 7.5, 8.5],
    },
}


def _select(
    samples: dict[str, Sample],
    names: Iterable[str] | None,
    failed: Iterable[str] = (),
) -> dict[str, Sample]:
    if names is None:
        return samples
    failed = set(failed)
    names = [n for n in names if n not in failed]
    unknown = [n for n in names if n not in samples]
    if unknown:
        raise KeyError(f"unknown dataset(s) {unknown}; available: {sorted(samples)}")
    return {n: samples[n] for n in names}


def load_builtin(names: Iterable[str] | None = None) -> dict[str, Sample]:
    """Return the built-in datasets, optionally restricted to *names*."""
    samples = {
        name: Sample(data["observed"], data["predicted"], name) for name, data in BUILTIN.items()
    }
    return _select(samples, names)


def read_table(path: str | Path, sheet_name: str | int = 0) -> pd.DataFrame:
    """Read a CSV or spreadsheet file into a DataFrame."""
    path = Path(path)
    suffix = path.suffix.lower()
    if suffix in {".xlsx", ".xlsm", ".xls"}:
        return pd.read_excel(path, sheet_name=sheet_name)
    if suffix in {".csv", ".txt"}:
        return pd.read_csv(path)
    if suffix == ".parquet":
        return pd.read_parquet(path)
    raise ValueError(f"unsupported file type {suffix!r} for {path}")


def load_table(
    path: str | Path,
    *,
    observed: str = "observed",
    predicted: str = "predicted",
    dataset_col: str | None = None,
    names: Iterable[str] | None = None,
    sheet_name: str | int = 0,
    errors: dict[str, AgreementError] | None = None,
) -> dict[str, Sample]:
    """Load ``{dataset: Sample}`` from a long-form table on disk.

    With an *errors* mapping, datasets that fail validation are recorded there
    (restricted to *names* when given) and the others are still returned.
    """
    names = None if names is None else list(names)
    df = read_table(path, sheet_name=sheet_name)
    logger.info("read %d rows from %s", len(df), path)
    failed: dict[str, AgreementError] = {}
    samples = DataFrameAnalyzer(df, predicted, observed, dataset_col).samples(
        failed if errors is not None else None
    )
    if errors is not None:
        errors.update({k: v for k, v in failed.items() if names is None or k in names})
    return _select(samples, names, failed)
