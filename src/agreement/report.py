"""Batch evaluation of several datasets and the ``agreement-report`` command."""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field

import pandas as pd

from .analyzer.base import BaseAnalyzer
from .checks import IdentityCheck, check_identities
from .config import AnalysisConfig
from .datasets import BUILTIN, load_builtin, load_table
from .decomposition import Decomposition
from .errors import AgreementError
from .sample import Sample
from .stats import MetricSet, RegressionLine

logger = logging.getLogger(__name__)


@dataclass
class SampleReport:
    """Everything computed for one dataset."""

    sample: Sample
    metrics: MetricSet
    lines: dict[str, RegressionLine]
    decompositions: dict[str, Decomposition]
    identities: list[IdentityCheck]


@dataclass
class BatchReport:
    """Results of a batch run, keyed by dataset label."""

    config: AnalysisConfig
    reports: dict[str, SampleReport] = field(default_factory=dict)
    errors: dict[str, AgreementError] = field(default_factory=dict)

    def metrics_table(self) -> pd.DataFrame:
        rows = [{"dataset": k, **r.metrics.as_dict()} for k, r in self.reports.items()]
        out = pd.DataFrame(rows, columns=["dataset", *self.config.metrics])
        return out.round(self.config.precision)

    def regression_table(self) -> pd.DataFrame:
        rows = [
            {"dataset": k, **line.as_dict()}
            for k, r in self.reports.items()
            for line in r.lines.values()
        ]
        out = pd.DataFrame(rows, columns=["dataset", "method", "slope", "intercept"])
        return out.round(self.config.precision)

    def decomposition_table(self) -> pd.DataFrame:
        """Aggregate SUD/SSD/TSS per dataset and scheme."""
        rtol, atol = self.config.rtol, self.config.atol
        rows = [
            {"dataset": k, "scheme": name, **dec.totals(), "additive": dec.is_additive(rtol, atol)}
            for k, r in self.reports.items()
            for name, dec in r.decompositions.items()
        ]
        out = pd.DataFrame(rows, columns=["dataset", "scheme", "sud", "ssd", "tss", "residual", "additive"])
        return out.round(self.config.precision)

    def point_table(self, label: str, scheme: str = "sma") -> pd.DataFrame:
        """Per-point UD/SD values of one dataset, aligned with its input order."""
        return self.reports[label].decompositions[scheme].to_frame().round(self.config.precision)

    def identity_table(self) -> pd.DataFrame:
        rows = [{"dataset": k, **c.as_dict()} for k, r in self.reports.items() for c in r.identities]
        return pd.DataFrame(rows, columns=["dataset", "name", "lhs", "rhs", "holds", "required"])


def evaluate(sample: Sample, config: AnalysisConfig | None = None) -> SampleReport:
    """Compute metrics, lines, decompositions and identity checks for *sample*."""
    config = config or AnalysisConfig()
    analyzer = BaseAnalyzer(sample)
    metrics = analyzer.summary(config.metrics, strict=config.strict)
    lines = analyzer.regressions(strict=config.strict)
    decs = analyzer.decompositions(strict=config.strict)
    checks = check_identities(metrics, decs, rtol=config.rtol, atol=config.atol, label=sample.label)
    return SampleReport(sample, metrics, lines, decs, checks)


def run(samples: Mapping[str, Sample], config: AnalysisConfig | None = None) -> BatchReport:
    """Evaluate every sample in isolation; failures are recorded, not raised."""
    config = config or AnalysisConfig()
    batch = BatchReport(config)
    for label, sample in samples.items():
        try:
            batch.reports[label] = evaluate(sample, config)
        except AgreementError as exc:
            logger.error("dataset %s failed: %s", label, exc.message)
            batch.errors[label] = exc
        else:
            logger.info("dataset %s: %d points evaluated", label, sample.n)
    return batch


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="agreement-report",
        description="Agreement and error decomposition statistics for observed/predicted pairs.",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument("--input", help="CSV or spreadsheet file; built-in datasets when omitted.")
    parser.add_argument(
        "--dataset",
        action="append",
        help=f"Dataset(s) to process (repeatable). Built-in: {', '.join(BUILTIN)}.",
    )
    parser.add_argument("--observed", default="observed", help="Observed column name.")
    parser.add_argument("--predicted", default="predicted", help="Predicted column name.")
    parser.add_argument("--dataset-col", help="Column identifying datasets in --input.")
    parser.add_argument("--sheet", default=0, help="Sheet name or index for spreadsheets.")
    parser.add_argument("--precision", type=int, default=2, help="Decimals in printed tables.")
    parser.add_argument("--output", help="Write the metrics table to this CSV file.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s",
    )

    load_errors: dict[str, AgreementError] = {}
    try:
        if args.input:
            sheet = int(args.sheet) if str(args.sheet).isdigit() else args.sheet
            samples = load_table(
                args.input,
                observed=args.observed,
                predicted=args.predicted,
                dataset_col=args.dataset_col,
                names=args.dataset,
                sheet_name=sheet,
                errors=load_errors,
            )
        else:
            samples = load_builtin(args.dataset)
    except (AgreementError, KeyError, ValueError, OSError) as exc:
        logger.error("could not load data: %s", exc)
        return 2

    batch = run(samples, AnalysisConfig(precision=args.precision))
    batch.errors.update(load_errors)
    with pd.option_context("display.max_columns", None, "display.width", 200):
        print(batch.metrics_table().to_string(index=False))
        print()
        print(batch.regression_table().to_string(index=False))
        print()
        print(batch.decomposition_table().to_string(index=False))

    if args.output:
        batch.metrics_table().to_csv(args.output, index=False)
        logger.info("metrics written to %s", args.output)
    return 1 if batch.errors else 0


if __name__ == "__main__":
    sys.exit(main())
