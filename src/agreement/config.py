"""Settings shared by the batch report and the command line."""

from __future__ import annotations

from dataclasses import dataclass

from .metrics_factory import DEFAULT_METRICS


@dataclass(frozen=True)
class AnalysisConfig:
    """Options for one analysis run.

    ``precision`` only affects rendered tables; identity checks always use
    the unrounded values with ``rtol``/``atol``.  With ``strict`` disabled a
    metric, line or decomposition that hits a degenerate divisor is logged
    and skipped while the rest of the sample is still evaluated.
    """

    precision: int = 2
    rtol: float = 1e-9
    atol: float = 1e-9
    strict: bool = False
    metrics: tuple[str, ...] = DEFAULT_METRICS

    def __post_init__(self) -> None:
        if not isinstance(self.precision, int) or self.precision < 0:
            raise ValueError("precision must be a non-negative integer.")
        if self.rtol < 0 or self.atol < 0:
            raise ValueError("rtol and atol must be non-negative.")
