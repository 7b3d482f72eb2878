"""Cross-checks of the algebraic identities linking the aggregate metrics."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import asdict, dataclass

import numpy as np

from .decomposition import Decomposition

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class IdentityCheck:
    """Outcome of comparing two sides of an identity.

    ``required`` identities must hold on every sample with non-negative
    correlation; the others are reported for information and are expected to
    fail on most data.
    """

    name: str
    lhs: float
    rhs: float
    holds: bool
    required: bool = True

    def as_dict(self) -> dict[str, float | str | bool]:
        return asdict(self)


# name -> (lhs metrics summed, rhs metrics summed or a constant)
_METRIC_IDENTITIES: dict[str, tuple[tuple[str, ...], tuple[str, ...] | float]] = {
    "ub+uc+ue=100": (("ub", "uc", "ue"), 100.0),
    "mla=sdsd+sb": (("mla",), ("sdsd", "sb")),
    "mlp=lcs": (("mlp",), ("lcs",)),
    "mla+mlp=mse": (("mla", "mlp"), ("mse",)),
    "ub+uc=pla": (("ub", "uc"), ("pla",)),
    "ue=plp": (("ue",), ("plp",)),
    "pab+ppb=pla": (("pab", "ppb"), ("pla",)),
}


def _close(lhs: float, rhs: float, rtol: float, atol: float) -> bool:
    return bool(np.isclose(lhs, rhs, rtol=rtol, atol=atol))


def check_identities(
    metrics: Mapping[str, float],
    decompositions: Mapping[str, Decomposition] | None = None,
    *,
    rtol: float = 1e-9,
    atol: float = 1e-9,
    label: str | None = None,
) -> list[IdentityCheck]:
    """Evaluate every identity whose inputs are present and finite."""
    results: list[IdentityCheck] = []
    for name, (left, right) in _METRIC_IDENTITIES.items():
        needed = set(left) | (set(right) if isinstance(right, tuple) else set())
        if not needed <= set(metrics) or not all(np.isfinite(metrics[m]) for m in needed):
            continue
        lhs = sum(metrics[m] for m in left)
        rhs = sum(metrics[m] for m in right) if isinstance(right, tuple) else right
        results.append(IdentityCheck(name, lhs, rhs, _close(lhs, rhs, rtol, atol)))

    for scheme, dec in (decompositions or {}).items():
        lhs = dec.sud + dec.ssd
        results.append(
            IdentityCheck(
                f"{scheme}: sud+ssd=tss",
                lhs,
                dec.tss,
                _close(lhs, dec.tss, rtol, atol),
                required=scheme == "sma",
            )
        )

    for check in results:
        if check.required and not check.holds:
            logger.warning(
                "identity %s fails for %s: %.12g != %.12g", check.name, label, check.lhs, check.rhs
            )
    return results
