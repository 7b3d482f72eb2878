import numpy as np
import pandas as pd
import pytest
from pytest import approx

from agreement import DataFrameAnalyzer, InsufficientDataError
from agreement.errors import MissingValueError
from conftest import OBSERVED, PREDICTED


def make_frame() -> pd.DataFrame:
    flat_obs = [1.0, 2.0, 3.0, 4.0]
    return pd.DataFrame(
        {
            "site": ["paper"] * len(OBSERVED) + ["flat"] * len(flat_obs),
            "obs": OBSERVED + flat_obs,
            "sim": PREDICTED + [2.0] * len(flat_obs),
            "sim2": [o + 1.0 for o in OBSERVED] + [o * 2.0 for o in flat_obs],
        }
    )


def test_summary_per_dataset() -> None:
    out = DataFrameAnalyzer(make_frame(), "sim", "obs", dataset_col="site").summary(
        ["mse", "ccc", "mbe"]
    )

    assert list(out.columns) == ["dataset", "mse", "ccc", "mbe"]
    assert list(out["dataset"]) == ["paper", "flat"]
    assert out.loc[0, "mse"] == approx(3.825)
    assert out.loc[1, "mse"] == approx(1.5)
    assert np.isnan(out.loc[1, "ccc"])


def test_summary_multiple_predictions_rounded() -> None:
    analyzer = DataFrameAnalyzer(make_frame(), ["sim", "sim2"], "obs", dataset_col="site")
    out = analyzer.summary(["rmse", "mbe"], precision=2)

    assert list(out["dataset"]) == ["paper:sim", "flat:sim", "paper:sim2", "flat:sim2"]
    assert out.loc[0, "rmse"] == 1.96
    assert out.loc[2, "mbe"] == approx(1.0)


def test_samples_without_dataset_column() -> None:
    df = pd.DataFrame({"observed": OBSERVED, "predicted": PREDICTED})
    samples = DataFrameAnalyzer(df, "predicted", "observed").samples()

    assert list(samples) == ["predicted"]
    np.testing.assert_allclose(samples["predicted"].observed, OBSERVED)


def test_short_dataset_is_skipped_in_summary() -> None:
    df = pd.DataFrame({"site": ["a", "a", "a", "b"], "o": [1.0, 2.0, 3.0, 4.0], "p": [1.5, 2.0, 3.5, 4.0]})
    analyzer = DataFrameAnalyzer(df, "p", "o", dataset_col="site")

    out = analyzer.summary(["mse"])
    assert list(out["dataset"]) == ["a"]
    with pytest.raises(InsufficientDataError):
        analyzer.samples()


def test_missing_column() -> None:
    with pytest.raises(KeyError):
        DataFrameAnalyzer(make_frame(), "nope", "obs")


def test_bad_datasets_do_not_hide_good_ones() -> None:
    df = pd.DataFrame(
        {
            "site": ["a", "a", "a", "b", "b", "b", "c"],
            "o": [1.0, 2.0, 3.0, 1.0, 2.0, 3.0, 1.0],
            "p": [1.5, 2.0, 3.5, 1.0, np.nan, 3.0, 1.0],
        }
    )
    analyzer = DataFrameAnalyzer(df, "p", "o", dataset_col="site")

    out = analyzer.summary(["mse"])
    assert list(out["dataset"]) == ["a"]
    assert out.loc[0, "mse"] == approx(0.5 / 3)

    errors = {}
    samples = analyzer.samples(errors)
    assert list(samples) == ["a"]
    assert isinstance(errors["b"], MissingValueError)
    assert isinstance(errors["c"], InsufficientDataError)
    with pytest.raises(MissingValueError):
        analyzer.samples()
