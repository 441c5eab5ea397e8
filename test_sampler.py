import math

import numpy as np
import pytest

from models import Asset, SimulationInput
from sampler import ReturnSampler, box_muller, sample_normal


class _FixedUniforms:
    def __init__(self, values):
        self.values = list(values)

    def random(self):
        return self.values.pop(0)


def test_box_muller_redraws_zero_uniforms():
    rng = _FixedUniforms([0.0, 0.5, 0.0, 0.5])
    assert box_muller(rng) == pytest.approx(-math.sqrt(2 * math.log(2)))

def test_sample_is_mean_centred():
    rng = np.random.default_rng(42)
    draws = np.array([sample_normal(rng, 0.05, 0.05) for _ in range(20000)])
    assert abs(draws.mean() - 0.05) < 0.005
    assert draws.std() == pytest.approx(0.05, rel=0.05)

def test_zero_std_returns_mean():
    rng = np.random.default_rng(1)
    assert sample_normal(rng, 0.07, 0.0) == 0.07

def test_draw_year_covers_every_asset():
    inp = SimulationInput(current_age=30, pension_age=65, inflation=0.02,
                          assets=[Asset("Stocks", 1, return_rate=0.07), Asset("Cash", 1, return_rate=0.0)])
    draws = ReturnSampler(np.random.default_rng(7)).draw_year(inp)
    assert set(draws.returns) == {"Stocks", "Cash"}
    # std dev scales with the mean, so a zero-mean asset never moves
    assert draws.returns["Cash"] == 0.0

def test_volatility_ratio_zero_is_deterministic():
    inp = SimulationInput(current_age=30, pension_age=65, inflation=0.02,
                          assets=[Asset("Stocks", 1, return_rate=0.07)])
    draws = ReturnSampler(np.random.default_rng(7), volatility_ratio=0.0).draw_year(inp)
    assert draws.inflation == 0.02
    assert draws.returns == {"Stocks": 0.07}

def test_same_seed_same_draws():
    a = ReturnSampler(np.random.default_rng(3))
    b = ReturnSampler(np.random.default_rng(3))
    assert [a.draw(0.05) for _ in range(5)] == [b.draw(0.05) for _ in range(5)]
