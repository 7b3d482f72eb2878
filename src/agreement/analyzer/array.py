"""Analyzer for 1-D arrays."""

from __future__ import annotations

from collections.abc import Iterable

from ..sample import Sample
from .base import BaseAnalyzer


class ArrayAnalyzer(BaseAnalyzer):
    """Analyze a pair of plain sequences."""

    def __init__(self, y_pred: Iterable[float], y_true: Iterable[float], label: str | None = None) -> None:
        """Pair ``y_pred`` with ``y_true`` and initialise base."""
        super().__init__(Sample(y_true, y_pred, label))
