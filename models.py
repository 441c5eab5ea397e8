from dataclasses import dataclass, field
from typing import Dict, List, Optional

from config import DEFAULT_WITHDRAWAL_ORDER, DEFAULTS, FREQUENCIES

# ---------- Plan definitions ----------
class _Dated:
    """Active from start_year through end_year inclusive; end_year 0 never ends."""

    def is_active(self, year: int) -> bool:
        return year >= self.start_year and (self.end_year == 0 or year <= self.end_year)


@dataclass
class Income(_Dated):
    name: str
    value: float                 # per period (see frequency)
    frequency: str = "monthly"   # "monthly" or "yearly"
    indexed: bool = False        # escalates with inflation every year
    start_year: int = 0          # 0 = this year
    end_year: int = 0            # 0 = unbounded

    def annual_amount(self) -> float:
        return self.value * 12 if self.frequency == "monthly" else self.value


@dataclass
class Expense(Income):
    pass


@dataclass
class Asset(_Dated):
    name: str
    value: float                 # starting balance
    return_rate: float = 0.0     # annual, decimal
    tax: float = 0.0             # flat tax on the return, decimal
    start_year: int = 0
    end_year: int = 0
    withdrawal_order: int = DEFAULT_WITHDRAWAL_ORDER  # lower is drawn first


@dataclass
class Liability(_Dated):
    name: str
    value: float                 # starting principal
    interest_rate: float = 0.0   # 0 = straight-line amortization
    start_year: int = 0
    end_year: int = 0


@dataclass
class AllocationPeriod:
    start_year: int
    allocation: Dict[str, float] = field(default_factory=dict)  # asset name -> share of surplus
    rebalance: bool = False


@dataclass
class SimulationInput:
    current_age: int
    pension_age: int
    early_retirement_age: int = 0      # 0 = unset
    inflation: float = 0.0
    estimated_pension: float = 0.0     # monthly
    withdrawal_rate: float = 0.0
    incomes: List[Income] = field(default_factory=list)
    expenses: List[Expense] = field(default_factory=list)
    assets: List[Asset] = field(default_factory=list)
    liabilities: List[Liability] = field(default_factory=list)
    allocation_periods: List[AllocationPeriod] = field(default_factory=list)

    @property
    def retirement_age(self) -> int:
        """Age at which working income stops: the early age when set, else the pension age."""
        return self.early_retirement_age or self.pension_age

    @classmethod
    def from_dict(cls, data: dict) -> "SimulationInput":
        """
        Build an input from a plan document (camelCase keys, rates as decimals).
        Missing ages fall back to DEFAULTS; other missing or blank numbers are 0,
        like the form layer that produces these documents. An unknown cashflow
        frequency is rejected.
        """
        periods = [
            AllocationPeriod(
                start_year=_int(p.get("startYear")),
                allocation={k: _num(v) for k, v in (p.get("allocation") or {}).items()},
                rebalance=bool(p.get("rebalance", DEFAULTS["rebalance"])),
            )
            for p in data.get("allocationPeriods") or []
        ]
        periods.sort(key=lambda p: p.start_year)
        return cls(
            current_age=_int(data.get("currentAge"), DEFAULTS["current_age"]),
            pension_age=_int(data.get("pensionAge"), DEFAULTS["pension_age"]),
            early_retirement_age=_int(data.get("earlyRetirementAge"), DEFAULTS["early_retirement_age"]),
            inflation=_num(data.get("inflation")),
            estimated_pension=_num(data.get("estimatedPension")),
            withdrawal_rate=_num(data.get("withdrawalRate")),
            incomes=[_cashflow(Income, d) for d in data.get("incomes") or []],
            expenses=[_cashflow(Expense, d) for d in data.get("expenses") or []],
            assets=[
                Asset(
                    name=d["name"],
                    value=_num(d.get("value")),
                    return_rate=_num(d.get("return")),
                    tax=_num(d.get("tax")),
                    start_year=_int(d.get("startYear")),
                    end_year=_int(d.get("endYear")),
                    withdrawal_order=_int(d.get("withdrawalOrder")) or DEFAULT_WITHDRAWAL_ORDER,
                )
                for d in data.get("assets") or []
            ],
            liabilities=[
                Liability(
                    name=d["name"],
                    value=_num(d.get("value")),
                    interest_rate=_num(d.get("interestRate")),
                    start_year=_int(d.get("startYear")),
                    end_year=_int(d.get("endYear")),
                )
                for d in data.get("liabilities") or []
            ],
            allocation_periods=periods,
        )

    def to_dict(self) -> dict:
        def cashflow(c):
            return {"name": c.name, "value": c.value, "frequency": c.frequency,
                    "indexed": c.indexed, "startYear": c.start_year, "endYear": c.end_year}

        return {
            "currentAge": self.current_age,
            "pensionAge": self.pension_age,
            "earlyRetirementAge": self.early_retirement_age,
            "inflation": self.inflation,
            "estimatedPension": self.estimated_pension,
            "withdrawalRate": self.withdrawal_rate,
            "incomes": [cashflow(i) for i in self.incomes],
            "expenses": [cashflow(e) for e in self.expenses],
            "assets": [
                {"name": a.name, "value": a.value, "return": a.return_rate, "tax": a.tax,
                 "startYear": a.start_year, "endYear": a.end_year,
                 "withdrawalOrder": a.withdrawal_order}
                for a in self.assets
            ],
            "liabilities": [
                {"name": l.name, "value": l.value, "interestRate": l.interest_rate,
                 "startYear": l.start_year, "endYear": l.end_year}
                for l in self.liabilities
            ],
            "allocationPeriods": [
                {"startYear": p.start_year, "allocation": dict(p.allocation), "rebalance": p.rebalance}
                for p in self.allocation_periods
            ],
        }


def _num(v, default: float = 0.0) -> float:
    if v is None or v == "":
        return default
    return float(v)

def _int(v, default: int = 0) -> int:
    if v is None or v == "":
        return default
    return int(float(v))

def _cashflow(kind, d: dict):
    frequency = d.get("frequency") or DEFAULTS["frequency"]
    if frequency not in FREQUENCIES:
        raise ValueError(f"Unknown frequency {frequency!r} for {d.get('name')!r}")
    return kind(
        name=d["name"],
        value=_num(d.get("value")),
        frequency=frequency,
        indexed=bool(d.get("indexed", DEFAULTS["indexed"])),
        start_year=_int(d.get("startYear")),
        end_year=_int(d.get("endYear")),
    )


# ---------- Run state & results ----------
@dataclass
class LiabilityState:
    value: float
    initial_value: float
    annual_repayment: float
    interest_rate: float


@dataclass
class YearSnapshot:
    year: int
    age: int
    net_income: float
    expenses: float
    savings_capacity: float
    savings_rate: float
    net_worth: float
    assets: Dict[str, float]
    liabilities: Dict[str, LiabilityState]


@dataclass
class SimulationResult:
    results: List[YearSnapshot]
    early_retirement_year: Optional[int]
    amount_pension_message: float      # first annual withdrawal at pension age
    uncovered_deficit: float = 0.0     # withdrawals assets could not cover, summed over the run


@dataclass
class MonteCarloResult:
    success_rate: float                     # 0..1
    percentile_data: Dict[str, List[float]]  # band label -> net worth per year
    labels: List[int]                        # calendar years
