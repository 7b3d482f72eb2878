import logging

import pandas as pd
import pytest

from agreement.checks import check_identities
from agreement.config import AnalysisConfig
from agreement.datasets import load_builtin, load_table
from agreement.decomposition import decompose_all
from agreement.analyzer.base import BaseAnalyzer
from agreement.report import evaluate, main, run
from conftest import OBSERVED, PREDICTED


def test_identities_hold_on_illustrative(illustrative) -> None:
    checks = {c.name: c for c in BaseAnalyzer(illustrative).identities()}

    required = ["ub+uc+ue=100", "mla=sdsd+sb", "mlp=lcs", "mla+mlp=mse", "ub+uc=pla", "ue=plp"]
    for name in required + ["pab+ppb=pla"]:
        assert checks[name].holds, name
    assert checks["sma: sud+ssd=tss"].holds
    assert checks["sma: sud+ssd=tss"].required
    assert not checks["ma: sud+ssd=tss"].holds
    assert not checks["ma: sud+ssd=tss"].required


def test_failed_identity_is_logged(illustrative, caplog) -> None:
    metrics = BaseAnalyzer(illustrative).summary().as_dict()
    metrics["mla"] += 1.0
    with caplog.at_level(logging.WARNING, logger="agreement.checks"):
        checks = check_identities(metrics, decompose_all(illustrative), label="tampered")
    assert not {c.name: c for c in checks}["mla=sdsd+sb"].holds
    assert "tampered" in caplog.text


def test_batch_isolates_degenerate_samples(illustrative, flat) -> None:
    batch = run({"flat": flat, "illustrative": illustrative}, AnalysisConfig(strict=True))

    assert list(batch.reports) == ["illustrative"]
    assert "flat" in batch.errors


def test_lenient_batch_reports_partial_results(illustrative, flat) -> None:
    batch = run({"illustrative": illustrative, "flat": flat})

    table = batch.metrics_table()
    assert list(table["dataset"]) == ["illustrative", "flat"]
    assert table.loc[0, "rmse"] == 1.96
    assert pd.isna(table.loc[1, "ccc"])
    assert set(batch.reports["flat"].lines) == {"ols_v", "sma"}

    lines = batch.regression_table()
    assert len(lines[lines["dataset"] == "illustrative"]) == 4

    decs = batch.decomposition_table()
    sma = decs[(decs["dataset"] == "illustrative") & (decs["scheme"] == "sma")].iloc[0]
    assert bool(sma["additive"])
    assert sma["tss"] == 38.25

    points = batch.point_table("illustrative", "ma")
    assert len(points) == 10

    assert not batch.identity_table().empty


def test_evaluate_with_precision(illustrative) -> None:
    report = evaluate(illustrative, AnalysisConfig(precision=3, metrics=("mse",)))
    assert report.metrics.as_dict() == {"mse": pytest.approx(3.825)}


def test_config_validation() -> None:
    with pytest.raises(ValueError):
        AnalysisConfig(precision=-1)


def test_load_builtin_selection() -> None:
    assert list(load_builtin()) == ["illustrative"]
    with pytest.raises(KeyError):
        load_builtin(["apsim"])


def test_load_table_csv(tmp_path) -> None:
    path = tmp_path / "pairs.csv"
    pd.DataFrame(
        {"crop": ["wheat"] * 10 + ["maize"] * 3, "O": OBSERVED + [1, 2, 3], "P": PREDICTED + [1.1, 2.2, 2.9]}
    ).to_csv(path, index=False)

    samples = load_table(path, observed="O", predicted="P", dataset_col="crop", names=["maize"])
    assert list(samples) == ["maize"]
    assert samples["maize"].n == 3


def test_cli_builtin(tmp_path, capsys) -> None:
    out = tmp_path / "metrics.csv"
    assert main(["--dataset", "illustrative", "--output", str(out)]) == 0

    printed = capsys.readouterr().out
    assert "illustrative" in printed
    assert "ols_h" in printed
    table = pd.read_csv(out)
    assert table.loc[0, "mean_obs"] == 6.5


def test_cli_unknown_dataset() -> None:
    assert main(["--dataset", "nope"]) == 2


def write_mixed_table(path) -> None:
    pd.DataFrame(
        {
            "crop": ["wheat"] * 10 + ["maize"] * 3 + ["rice"],
            "O": OBSERVED + [1, 2, 3] + [4],
            "P": PREDICTED + [1.1, None, 2.9] + [4.2],
        }
    ).to_csv(path, index=False)


def test_load_table_collects_bad_datasets(tmp_path) -> None:
    path = tmp_path / "mixed.csv"
    write_mixed_table(path)

    errors = {}
    samples = load_table(path, observed="O", predicted="P", dataset_col="crop", errors=errors)
    assert list(samples) == ["wheat"]
    assert set(errors) == {"maize", "rice"}

    errors = {}
    samples = load_table(path, observed="O", predicted="P", dataset_col="crop", names=["maize"], errors=errors)
    assert samples == {}
    assert list(errors) == ["maize"]


def test_cli_reports_good_datasets_next_to_bad_ones(tmp_path, capsys) -> None:
    path = tmp_path / "mixed.csv"
    write_mixed_table(path)

    code = main(["--input", str(path), "--observed", "O", "--predicted", "P", "--dataset-col", "crop"])
    assert code == 1
    assert "wheat" in capsys.readouterr().out
