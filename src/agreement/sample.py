"""Paired observed/predicted series."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Optional

import numpy as np
import pandas as pd

from .errors import InsufficientDataError, LengthMismatchError, MissingValueError


@dataclass(frozen=True, eq=False)
class Sample:
    """Index-aligned observed and predicted values of one dataset.

    Construction validates the pairing: both sequences must have the same
    length, at least two points and no missing or infinite values.
    """

    observed: np.ndarray
    predicted: np.ndarray
    label: Optional[str] = None

    def __init__(
        self,
        observed: Iterable[float],
        predicted: Iterable[float],
        label: Optional[str] = None,
    ) -> None:
        obs = np.asarray(list(observed), dtype=float)
        pred = np.asarray(list(predicted), dtype=float)
        if obs.shape != pred.shape:
            raise LengthMismatchError(
                f"observed has {obs.size} values but predicted has {pred.size}",
                {"observed": obs.size, "predicted": pred.size, "label": label},
            )
        if obs.size < 2:
            raise InsufficientDataError(
                f"at least 2 paired points are required, got {obs.size}",
                {"n": obs.size, "label": label},
            )
        if not (np.isfinite(obs).all() and np.isfinite(pred).all()):
            raise MissingValueError(
                "observed and predicted must not contain NaN or infinite values",
                {"n_invalid": int((~np.isfinite(obs) | ~np.isfinite(pred)).sum()), "label": label},
            )
        obs.setflags(write=False)
        pred.setflags(write=False)
        object.__setattr__(self, "observed", obs)
        object.__setattr__(self, "predicted", pred)
        object.__setattr__(self, "label", label)

    @property
    def n(self) -> int:
        return int(self.observed.size)

    @property
    def residuals(self) -> np.ndarray:
        """Predicted minus observed."""
        return self.predicted - self.observed

    def swapped(self) -> "Sample":
        """Return the sample with the observed and predicted roles exchanged."""
        return Sample(self.predicted, self.observed, self.label)

    @classmethod
    def from_frame(
        cls,
        df: pd.DataFrame,
        observed: str = "observed",
        predicted: str = "predicted",
        label: Optional[str] = None,
    ) -> "Sample":
        return cls(df[observed].to_numpy(dtype=float), df[predicted].to_numpy(dtype=float), label)

    def to_frame(self) -> pd.DataFrame:
        return pd.DataFrame({"observed": self.observed, "predicted": self.predicted})
