APP_NAME = "Wealth Trajectory Planner"

# Fixed projection horizon: the year loop stops before this age
HORIZON_AGE = 95

# Monte Carlo
MONTE_CARLO_RUNS = 500
SUCCESS_NET_WORTH = 1.0
VOLATILITY_RATIO = 1.0            # std dev = ratio * mean for every sampled quantity

# (label, fractional rank) read off the sorted per-year net worths
PERCENTILE_BANDS = [
    ("Bottom 5%", 0.05),
    ("Bottom 10%", 0.10),
    ("Bottom 15%", 0.15),
    ("Bottom 25%", 0.25),
    ("Median", 0.50),
    ("Top 25%", 0.75),
    ("Top 15%", 0.85),
    ("Top 10%", 0.90),
    ("Top 5%", 0.95),
]

# Business rules keyed on entity names
SAVINGS_ACCOUNT = "Savings Account"   # buffer asset topped up to half a year of expenses
DEFICIT_LIABILITY = "Deficit"         # reserved liability name, never amortized
BUFFER_EXPENSE_FRACTION = 0.5

DEFAULT_WITHDRAWAL_ORDER = 99

FREQUENCIES = ("monthly", "yearly")

# Used when a plan file leaves a field out; missing rates and amounts are 0
DEFAULTS = {
    "current_age": 30,
    "pension_age": 65,
    "early_retirement_age": 0,
    "frequency": "monthly",
    "indexed": False,
    "rebalance": False,
}
