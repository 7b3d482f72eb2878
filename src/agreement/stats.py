"""Immutable value types produced by the agreement engine."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import asdict, dataclass, field
from typing import Optional

import numpy as np

from .errors import DegenerateInputError


@dataclass(frozen=True)
class PrimitiveStats:
    """Mean and uncorrected spread of a single sequence."""

    mean: float
    variance: float
    std: float

    def as_dict(self) -> dict[str, float]:
        return asdict(self)


@dataclass(frozen=True)
class RegressionLine:
    """A fitted line ``predicted = slope * observed + intercept``."""

    slope: float
    intercept: float
    method: str = ""

    def predict(self, x: Iterable[float] | float) -> np.ndarray:
        """Return fitted predicted values for observed values *x*."""
        return self.slope * np.asarray(x, dtype=float) + self.intercept

    def inverse(self, y: Iterable[float] | float) -> np.ndarray:
        """Return the observed values the line maps onto predicted values *y*."""
        if self.slope == 0.0:
            raise DegenerateInputError(
                f"{self.method or 'regression'} line is flat and cannot be inverted",
                {"slope": self.slope},
            )
        return (np.asarray(y, dtype=float) - self.intercept) / self.slope

    def as_dict(self) -> dict[str, float | str]:
        return asdict(self)


@dataclass(frozen=True, eq=False)
class MetricSet(Mapping[str, float]):
    """Read-only mapping of metric name to value for one sample.

    Equality follows :class:`~collections.abc.Mapping`; like a ``dict`` it is
    not hashable.
    """

    __hash__ = None  # type: ignore[assignment]

    values: Mapping[str, float] = field(default_factory=dict)
    label: Optional[str] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "values", {k: float(v) for k, v in self.values.items()})

    def __getitem__(self, name: str) -> float:
        return self.values[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self.values)

    def __len__(self) -> int:
        return len(self.values)

    def rounded(self, precision: int = 2) -> "MetricSet":
        """Return a copy with every value rounded to *precision* decimals."""
        return MetricSet({k: round(v, precision) for k, v in self.values.items()}, self.label)

    def as_dict(self) -> dict[str, float]:
        return dict(self.values)
