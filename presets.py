# Starter plans by career stage. Rates are decimals; years are calendar years.
from models import SimulationInput

_RECENT_GRADUATE = {
    "assets": [
        {"name": "Stocks", "value": 5000, "return": 0.08, "tax": 0, "withdrawalOrder": 1},
        {"name": "Savings Account", "value": 10000, "return": 0.01, "tax": 0, "withdrawalOrder": 2},
    ],
    "liabilities": [],
    "incomes": [{"name": "Salary", "value": 2500, "frequency": "monthly", "indexed": True}],
    "expenses": [{"name": "Living Expenses", "value": 2000, "frequency": "monthly", "indexed": True}],
    "allocationPeriods": [{"allocation": {"Stocks": 1.0}}],
    "currentAge": 22,
    "pensionAge": 65,
    "estimatedPension": 1200,
    "inflation": 0.025,
    "withdrawalRate": 0,
}

_EARLY_CAREER = {
    "assets": [
        {"name": "Stocks", "value": 25000, "return": 0.08, "tax": 0, "withdrawalOrder": 1},
        {"name": "Bonds", "value": 5000, "return": 0.04, "tax": 0, "withdrawalOrder": 2},
        {"name": "Savings Account", "value": 25000, "return": 0.01, "tax": 0, "withdrawalOrder": 3},
    ],
    "liabilities": [],
    "incomes": [{"name": "Salary", "value": 3500, "frequency": "monthly", "indexed": True}],
    "expenses": [{"name": "Living Expenses", "value": 2500, "frequency": "monthly", "indexed": True}],
    "allocationPeriods": [
        {"allocation": {"Stocks": 0.9, "Savings Account": 0.1}},
        {"startYear": 2035, "allocation": {"Stocks": 0.8, "Bonds": 0.2}, "rebalance": True},
    ],
    "currentAge": 30,
    "pensionAge": 65,
    "estimatedPension": 1500,
    "inflation": 0.025,
    "withdrawalRate": 0,
}

_MID_CAREER = {
    "assets": [
        {"name": "Own Home", "value": 300000, "return": 0.04, "tax": 0, "withdrawalOrder": 4},
        {"name": "Stocks", "value": 100000, "return": 0.08, "tax": 0, "withdrawalOrder": 1},
        {"name": "Bonds", "value": 25000, "return": 0.04, "tax": 0, "withdrawalOrder": 2},
        {"name": "Savings Account", "value": 50000, "return": 0.01, "tax": 0, "withdrawalOrder": 3},
    ],
    "liabilities": [{"name": "Mortgage", "value": 200000, "endYear": 2044, "interestRate": 0.03}],
    "incomes": [{"name": "Salary", "value": 5000, "frequency": "monthly", "indexed": True}],
    "expenses": [
        {"name": "Living Expenses", "value": 3000, "frequency": "monthly", "indexed": True},
        {"name": "Mortgage Repayment", "value": 1500, "frequency": "monthly", "indexed": False, "endYear": 2044},
    ],
    "allocationPeriods": [
        {"allocation": {"Stocks": 0.7, "Bonds": 0.3}, "rebalance": True},
        {"startYear": 2045, "allocation": {"Stocks": 0.6, "Bonds": 0.4}, "rebalance": True},
    ],
    "currentAge": 45,
    "pensionAge": 65,
    "estimatedPension": 2000,
    "inflation": 0.025,
    "withdrawalRate": 0,
}

_LATE_CAREER = {
    "assets": [
        {"name": "Own Home", "value": 400000, "return": 0.03, "tax": 0, "withdrawalOrder": 4},
        {"name": "Stocks", "value": 250000, "return": 0.06, "tax": 0, "withdrawalOrder": 1},
        {"name": "Bonds", "value": 100000, "return": 0.03, "tax": 0, "withdrawalOrder": 2},
        {"name": "Savings Account", "value": 100000, "return": 0.01, "tax": 0, "withdrawalOrder": 3},
    ],
    "liabilities": [],
    "incomes": [{"name": "Salary", "value": 6000, "frequency": "monthly", "indexed": True, "endYear": 2035}],
    "expenses": [{"name": "Living Expenses", "value": 3500, "frequency": "monthly", "indexed": True}],
    "allocationPeriods": [{"allocation": {"Stocks": 0.5, "Bonds": 0.5}, "rebalance": True}],
    "currentAge": 55,
    "pensionAge": 65,
    "estimatedPension": 2500,
    "inflation": 0.025,
    "withdrawalRate": 0,
}

PRESETS = {
    "recent-graduate": _RECENT_GRADUATE,
    "early-career": _EARLY_CAREER,
    "mid-career": _MID_CAREER,
    "late-career": _LATE_CAREER,
}

def sample_plan(stage: str) -> SimulationInput:
    """Starter plan for a career stage; unknown stages get the early-career plan."""
    return SimulationInput.from_dict(PRESETS.get(stage, _EARLY_CAREER))
