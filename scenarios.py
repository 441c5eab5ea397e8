import copy
from dataclasses import replace
from typing import Dict, List, Tuple, Union

from models import MonteCarloResult, SimulationInput, SimulationResult
from simulation import run_monte_carlo, run_simulation

def clone_input(inp: SimulationInput, **overrides) -> SimulationInput:
    """Independent copy of a plan with top-level fields replaced."""
    return replace(copy.deepcopy(inp), **overrides)

def compare(inp: SimulationInput, variants: List[Tuple[str, dict]], monte_carlo: bool = False,
            **run_kwargs) -> Dict[str, Union[SimulationResult, MonteCarloResult]]:
    """
    variants: list of (name, overrides-dict)
    returns: dict name -> result of the deterministic run (or Monte Carlo summary)
    """
    runner = run_monte_carlo if monte_carlo else run_simulation
    res = {}
    for name, edits in variants:
        res[name] = runner(clone_input(inp, **edits), **run_kwargs)
    return res
