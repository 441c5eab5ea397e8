import copy
import logging
import math
from concurrent.futures import ProcessPoolExecutor
from datetime import date
from typing import Dict, List, Optional, Sequence

import numpy as np

from config import HORIZON_AGE, MONTE_CARLO_RUNS, PERCENTILE_BANDS, SUCCESS_NET_WORTH
from engine import SimulationState, step_year
from models import MonteCarloResult, SimulationInput, SimulationResult, YearSnapshot
from registry import EntityRegistry
from sampler import ReturnSampler

logger = logging.getLogger(__name__)

def find_early_retirement_year(results: Sequence[YearSnapshot], retirement_age: int,
                               withdrawal_rate: float) -> Optional[int]:
    """
    First year before `retirement_age` whose net worth could fund that year's
    expenses indefinitely at `withdrawal_rate`. None when the rate is not positive.
    """
    if withdrawal_rate <= 0:
        return None
    for snap in results:
        if snap.age >= retirement_age:
            continue
        required_capital = snap.expenses / withdrawal_rate
        if snap.net_worth >= required_capital:
            return snap.year
    return None

def run_simulation(inp: SimulationInput, stochastic: bool = False,
                   rng: Optional[np.random.Generator] = None,
                   start_year: Optional[int] = None) -> SimulationResult:
    """
    Project `inp` one year at a time from current_age up to HORIZON_AGE.
    `start_year` is the calendar year of the first step (defaults to today's);
    stochastic runs draw inflation and returns from `rng`.
    """
    first_year = start_year if start_year is not None else date.today().year
    registry = EntityRegistry.from_input(inp)
    state = SimulationState.initial(inp, first_year)
    sampler = None
    if stochastic:
        sampler = ReturnSampler(rng if rng is not None else np.random.default_rng())

    results: List[YearSnapshot] = []
    for offset in range(max(0, HORIZON_AGE - inp.current_age)):
        draws = sampler.draw_year(inp) if sampler else None
        results.append(step_year(first_year + offset, inp.current_age + offset, state, inp, registry, draws))

    early = find_early_retirement_year(results, inp.retirement_age, inp.withdrawal_rate)
    logger.debug("Simulated %d years from %d; early retirement year %s", len(results), first_year, early)
    return SimulationResult(
        results=results,
        early_retirement_year=early,
        amount_pension_message=state.amount_pension_message,
        uncovered_deficit=state.uncovered_deficit,
    )

def _net_worth_path(job) -> List[float]:
    # Top-level so it pickles for the process pool
    inp, seed_seq, first_year = job
    result = run_simulation(inp, stochastic=True, rng=np.random.default_rng(seed_seq), start_year=first_year)
    return [snap.net_worth for snap in result.results]

def percentile_bands(net_worths: np.ndarray) -> Dict[str, List[float]]:
    """
    net_worths: runs x years. Each band is the sorted column read at
    floor(runs * fraction), no interpolation between ranks.
    """
    runs = net_worths.shape[0]
    ranked = np.sort(net_worths, axis=0)
    bands = {}
    for label, fraction in PERCENTILE_BANDS:
        idx = min(int(math.floor(runs * fraction)), runs - 1)
        bands[label] = ranked[idx].tolist()
    return bands

def run_monte_carlo(inp: SimulationInput, num_runs: int = MONTE_CARLO_RUNS, seed: Optional[int] = None,
                    workers: int = 1, start_year: Optional[int] = None) -> MonteCarloResult:
    """
    Run `num_runs` independent stochastic projections and summarise them.
    Each run gets its own copy of the plan and its own generator spawned from one
    SeedSequence, so a fixed seed replays exactly whatever `workers` is.
    """
    if num_runs < 1:
        raise ValueError("num_runs must be at least 1")
    first_year = start_year if start_year is not None else date.today().year
    children = np.random.SeedSequence(seed).spawn(num_runs)
    jobs = [(copy.deepcopy(inp), child, first_year) for child in children]

    if workers > 1:
        with ProcessPoolExecutor(max_workers=workers) as pool:
            paths = list(pool.map(_net_worth_path, jobs))
    else:
        paths = [_net_worth_path(job) for job in jobs]

    years = max(0, HORIZON_AGE - inp.current_age)
    net_worths = np.array(paths, dtype=float).reshape(num_runs, years)
    successes = int(np.sum(np.all(net_worths >= SUCCESS_NET_WORTH, axis=1)))
    success_rate = successes / num_runs
    logger.info("Monte Carlo: %d runs, success rate %.1f%%", num_runs, 100.0 * success_rate)

    return MonteCarloResult(
        success_rate=success_rate,
        percentile_data=percentile_bands(net_worths),
        labels=[first_year + i for i in range(years)],
    )
