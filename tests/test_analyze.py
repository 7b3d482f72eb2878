import numpy as np
import pandas as pd
import pytest
from pytest import approx

from agreement import MetricSet, Sample, analyze
from conftest import OBSERVED, PREDICTED


def test_analyze_arrays() -> None:
    stats = analyze(PREDICTED, OBSERVED, metrics=("mse", "rmse", "mbe"))

    residuals = np.asarray(PREDICTED) - np.asarray(OBSERVED)
    assert isinstance(stats, MetricSet)
    np.testing.assert_allclose(stats["rmse"], np.sqrt(np.mean(residuals**2)))
    np.testing.assert_allclose(stats["mbe"], np.mean(residuals))


def test_analyze_sample(illustrative) -> None:
    stats = analyze(illustrative)
    assert stats.label == "illustrative"
    assert stats["ub"] + stats["uc"] + stats["ue"] == approx(100.0)


def test_analyze_dataframe() -> None:
    df = pd.DataFrame({"observed": OBSERVED, "predicted": PREDICTED})
    out = analyze(df, metrics=["mse"])
    assert out.loc[0, "mse"] == approx(3.825)


def test_analyze_requires_observed() -> None:
    with pytest.raises(TypeError):
        analyze(PREDICTED)


def test_swapping_preserves_symmetric_metrics(illustrative) -> None:
    a = analyze(illustrative, metrics=["mse", "r", "ccc"])
    b = analyze(Sample(PREDICTED, OBSERVED), metrics=["mse", "r", "ccc"])
    assert a.as_dict() == approx(b.as_dict())
