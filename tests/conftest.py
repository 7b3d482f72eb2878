import numpy as np
import pytest

from agreement import Sample

OBSERVED = [2, 3, 4, 5, 6, 7, 8, 9, 10, 11]
PREDICTED = [4, 5.5, 2.5, 4.5, 8, 5, 6, 10, 7.5, 8.5]


@pytest.fixture
def illustrative() -> Sample:
    return Sample(OBSERVED, PREDICTED, "illustrative")


@pytest.fixture
def correlated() -> Sample:
    rng = np.random.default_rng(42)
    obs = rng.normal(10.0, 3.0, 50)
    pred = 0.9 * obs + 2.0 + rng.normal(0.0, 1.0, 50)
    return Sample(obs, pred, "correlated")


@pytest.fixture
def flat() -> Sample:
    return Sample([1.0, 2.0, 3.0, 4.0], [2.0, 2.0, 2.0, 2.0], "flat")
