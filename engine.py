"""
Year-step engine: one call advances one household through one calendar year.

The order of the steps inside `step_year` is part of the model (growth before
cashflow, cashflow before rebalancing, snapshot before indexation), so changes
here shift every projection.
"""
import copy
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional

from allocation import resolve_allocation
from config import BUFFER_EXPENSE_FRACTION, DEFICIT_LIABILITY, SAVINGS_ACCOUNT
from models import AllocationPeriod, Liability, LiabilityState, SimulationInput, YearSnapshot
from registry import EntityRegistry
from sampler import YearDraws

logger = logging.getLogger(__name__)


class Phase(Enum):
    ACCUMULATION = "accumulation"   # before pension age: save surpluses, cover deficits
    DECUMULATION = "decumulation"   # from pension age: pension income plus a fixed real drawdown


def phase_for(age: int, inp: SimulationInput) -> Phase:
    return Phase.DECUMULATION if age >= inp.pension_age else Phase.ACCUMULATION


def amortization_repayment(principal: float, interest_rate: float, start_year: int, end_year: int) -> float:
    """
    Annual repayment over start_year..end_year inclusive: annuity when the loan
    carries interest, straight line otherwise. A window with end_year <= start_year
    (including an unbounded end of 0) never amortizes.
    """
    if end_year <= start_year:
        return 0.0
    n = end_year - start_year + 1
    r = interest_rate
    if r > 0:
        growth = (1 + r) ** n
        return principal * r * growth / (growth - 1)
    return principal / n


def _liability_start(liability: Liability, first_year: int) -> int:
    # start_year 0 means "already running in the first simulated year"
    return liability.start_year or first_year


def open_liability(liability: Liability, first_year: int) -> LiabilityState:
    start = _liability_start(liability, first_year)
    return LiabilityState(
        value=liability.value,
        initial_value=liability.value,
        annual_repayment=amortization_repayment(liability.value, liability.interest_rate, start, liability.end_year),
        interest_rate=liability.interest_rate,
    )


@dataclass
class SimulationState:
    first_year: int
    annual_pension: float
    assets: Dict[str, float] = field(default_factory=dict)
    liabilities: Dict[str, LiabilityState] = field(default_factory=dict)
    annual_incomes: Dict[str, float] = field(default_factory=dict)
    annual_expenses: Dict[str, float] = field(default_factory=dict)
    initial_pension_withdrawal: float = 0.0
    pension_withdrawal_latched: bool = False
    amount_pension_message: float = 0.0
    uncovered_deficit: float = 0.0

    @classmethod
    def initial(cls, inp: SimulationInput, first_year: int) -> "SimulationState":
        """State at the start of `first_year`: only entities already running are held."""
        state = cls(first_year=first_year, annual_pension=inp.estimated_pension * 12)
        for a in inp.assets:
            if a.is_active(first_year):
                state.assets[a.name] = a.value
        for l in inp.liabilities:
            if l.is_active(first_year):
                state.liabilities[l.name] = open_liability(l, first_year)
        return state

    def total_assets(self) -> float:
        return sum(self.assets.values())

    def total_liabilities(self) -> float:
        return sum(l.value for l in self.liabilities.values())

    def net_worth(self) -> float:
        return self.total_assets() - self.total_liabilities()


# ---------- Cashflow policies ----------
def withdraw_in_order(assets: Dict[str, float], registry: EntityRegistry, amount: float) -> float:
    """
    Draw `amount` from held assets, lowest withdrawal_order first (ties keep plan
    order). Returns whatever the assets could not cover.
    """
    held = [registry.assets[name] for name in registry.assets if name in assets]
    for definition in sorted(held, key=lambda a: a.withdrawal_order):
        if amount <= 0:
            break
        balance = assets[definition.name]
        if balance <= 0:
            continue
        taken = min(amount, balance)
        assets[definition.name] = balance - taken
        amount -= taken
    return max(0.0, amount)


def allocate_surplus(
    assets: Dict[str, float],
    registry: EntityRegistry,
    surplus: float,
    total_expenses: float,
    period: Optional[AllocationPeriod],
) -> float:
    """
    Invest a surplus: first top up the savings buffer to half a year of expenses,
    then split the rest by the period's fractions. Returns the uninvested remainder.
    """
    if SAVINGS_ACCOUNT in registry.assets:
        buffer_target = total_expenses * BUFFER_EXPENSE_FRACTION
        balance = assets.setdefault(SAVINGS_ACCOUNT, 0.0)
        if balance < buffer_target:
            top_up = min(surplus, buffer_target - balance)
            assets[SAVINGS_ACCOUNT] = balance + top_up
            surplus -= top_up

    if period is not None and surplus > 0:
        invested = 0.0
        for name, fraction in period.allocation.items():
            if name in assets:
                assets[name] += surplus * fraction
                invested += surplus * fraction
        surplus -= invested
    return surplus


def rebalance(assets: Dict[str, float], period: AllocationPeriod) -> None:
    """Reset held assets with a positive target to target * (their combined balance)."""
    targets = {name: f for name, f in period.allocation.items() if f > 0 and name in assets}
    total = sum(assets[name] for name in targets)
    for name, fraction in targets.items():
        assets[name] = total * fraction


# ---------- The transition ----------
def _update_entities(year: int, state: SimulationState, inp: SimulationInput) -> None:
    for a in inp.assets:
        if a.start_year == year:
            state.assets[a.name] = a.value
        if a.end_year == year:
            state.assets.pop(a.name, None)

    for l in inp.liabilities:
        if l.start_year == year:
            state.liabilities[l.name] = open_liability(l, state.first_year)
        # liabilities are still held in their end year, unlike assets
        if l.end_year and l.end_year < year:
            state.liabilities.pop(l.name, None)


def _amortize(year: int, state: SimulationState, registry: EntityRegistry) -> None:
    for name, liability in state.liabilities.items():
        if name == DEFICIT_LIABILITY:
            continue
        definition = registry.liabilities.get(name)
        if definition is None or liability.value <= 0:
            continue
        start = _liability_start(definition, state.first_year)
        if year < start or (definition.end_year and year > definition.end_year):
            continue
        principal = liability.annual_repayment
        if liability.interest_rate > 0:
            principal = max(0.0, principal - liability.value * liability.interest_rate)
        liability.value = max(0.0, liability.value - principal)


def _grow_assets(state: SimulationState, registry: EntityRegistry, draws: Optional[YearDraws]) -> None:
    for name, balance in state.assets.items():
        definition = registry.assets.get(name)
        if definition is None:
            continue
        rate = draws.returns.get(name, definition.return_rate) if draws else definition.return_rate
        state.assets[name] = max(0.0, balance * (1 + rate * (1 - definition.tax)))


def step_year(
    year: int,
    age: int,
    state: SimulationState,
    inp: SimulationInput,
    registry: EntityRegistry,
    draws: Optional[YearDraws] = None,
) -> YearSnapshot:
    """
    Advance `state` through `year` (mutated in place) and return the year-end
    snapshot. `draws` carries the sampled inflation/returns in Monte Carlo mode;
    without it the plan's deterministic rates are used.
    """
    _update_entities(year, state, inp)

    active_incomes = [i for i in registry.incomes.values() if i.is_active(year)]
    active_expenses = [e for e in registry.expenses.values() if e.is_active(year)]
    for i in active_incomes:
        state.annual_incomes.setdefault(i.name, i.annual_amount())
    for e in active_expenses:
        state.annual_expenses.setdefault(e.name, e.annual_amount())

    phase = phase_for(age, inp)
    gross_income = sum(state.annual_incomes[i.name] for i in active_incomes)
    if inp.early_retirement_age and inp.early_retirement_age <= age < inp.pension_age:
        gross_income = 0.0
    if phase is Phase.DECUMULATION:
        gross_income = state.annual_pension

    _amortize(year, state, registry)
    _grow_assets(state, registry, draws)

    total_expenses = sum(state.annual_expenses[e.name] for e in active_expenses)
    savings_capacity = gross_income - total_expenses
    period = resolve_allocation(year, inp.allocation_periods)

    if phase is Phase.ACCUMULATION:
        if savings_capacity < 0:
            # shortfalls before pension age are dropped, not carried as debt
            withdraw_in_order(state.assets, registry, -savings_capacity)
        else:
            allocate_surplus(state.assets, registry, savings_capacity, total_expenses, period)
    else:
        if not state.pension_withdrawal_latched:
            state.initial_pension_withdrawal = state.net_worth() * inp.withdrawal_rate
            state.pension_withdrawal_latched = True
            if age == inp.pension_age:
                state.amount_pension_message = state.initial_pension_withdrawal
            logger.debug("Year %s: pension drawdown fixed at %.2f", year, state.initial_pension_withdrawal)

        if savings_capacity > 0:
            allocate_surplus(state.assets, registry, savings_capacity, total_expenses, period)

        deficit = max(0.0, -savings_capacity)
        uncovered = withdraw_in_order(state.assets, registry, max(state.initial_pension_withdrawal, deficit))
        if uncovered > 0:
            logger.debug("Year %s: %.2f of drawdown not covered by assets", year, uncovered)
            state.uncovered_deficit += uncovered

    if period is not None and period.rebalance:
        rebalance(state.assets, period)

    snapshot = YearSnapshot(
        year=year,
        age=age,
        net_income=gross_income,
        expenses=total_expenses,
        savings_capacity=savings_capacity,
        savings_rate=savings_capacity / gross_income if gross_income > 0 else 0.0,
        net_worth=state.net_worth(),
        assets=dict(state.assets),
        liabilities=copy.deepcopy(state.liabilities),
    )

    # End-of-year indexation
    inflation = draws.inflation if draws else inp.inflation
    for i in active_incomes:
        if i.indexed:
            state.annual_incomes[i.name] *= (1 + inflation)
    for e in active_expenses:
        if e.indexed:
            state.annual_expenses[e.name] *= (1 + inflation)
    state.annual_pension *= (1 + inflation)
    if state.initial_pension_withdrawal != 0:
        state.initial_pension_withdrawal *= (1 + inflation)

    return snapshot
