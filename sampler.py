import math
from dataclasses import dataclass
from typing import Dict

import numpy as np

from config import VOLATILITY_RATIO
from models import SimulationInput

def box_muller(rng: np.random.Generator) -> float:
    """One standard normal draw from two uniforms (cosine branch of Box-Muller)."""
    u1 = 0.0
    while u1 == 0.0:      # log(0) guard
        u1 = rng.random()
    u2 = 0.0
    while u2 == 0.0:
        u2 = rng.random()
    return math.sqrt(-2.0 * math.log(u1)) * math.cos(2.0 * math.pi * u2)

def sample_normal(rng: np.random.Generator, mean: float, std_dev: float) -> float:
    # Unbounded: returns below -100% are possible and must be tolerated downstream
    return mean + box_muller(rng) * std_dev


@dataclass
class YearDraws:
    inflation: float
    returns: Dict[str, float]   # asset name -> sampled annual return


class ReturnSampler:
    """
    Draws a year's worth of stochastic assumptions: one inflation rate and one
    return per asset definition, each centred on the plan's deterministic value
    with std dev = volatility_ratio * mean.
    """

    def __init__(self, rng: np.random.Generator, volatility_ratio: float = VOLATILITY_RATIO):
        self.rng = rng
        self.volatility_ratio = volatility_ratio

    def draw(self, mean: float) -> float:
        return sample_normal(self.rng, mean, self.volatility_ratio * mean)

    def draw_year(self, inp: SimulationInput) -> YearDraws:
        inflation = self.draw(inp.inflation)
        returns = {}
        # Every definition draws each year, active or not, so the stream layout is stable
        for asset in inp.assets:
            returns[asset.name] = self.draw(asset.return_rate)
        return YearDraws(inflation=inflation, returns=returns)
