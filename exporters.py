# exporters.py
import json

import numpy as np
import pandas as pd

from models import MonteCarloResult, SimulationInput, SimulationResult

def results_frame(result: SimulationResult) -> pd.DataFrame:
    """
    One row per simulated year; asset balances and liability principals become
    `asset:<name>` / `liability:<name>` columns (0 where not held that year).
    """
    rows = []
    for snap in result.results:
        row = {
            "year": snap.year,
            "age": snap.age,
            "net_income": snap.net_income,
            "expenses": snap.expenses,
            "savings_capacity": snap.savings_capacity,
            "savings_rate": snap.savings_rate,
            "net_worth": snap.net_worth,
        }
        row.update({f"asset:{name}": balance for name, balance in snap.assets.items()})
        row.update({f"liability:{name}": l.value for name, l in snap.liabilities.items()})
        rows.append(row)
    df = pd.DataFrame(rows)
    balance_cols = [c for c in df.columns if c.startswith(("asset:", "liability:"))]
    if balance_cols:
        df[balance_cols] = df[balance_cols].fillna(0.0)
    return df

def export_results_csv(result: SimulationResult) -> tuple[str, bytes]:
    return "projection.csv", results_frame(result).to_csv(index=False).encode()

def export_percentiles_csv(summary: MonteCarloResult) -> tuple[str, bytes]:
    df = pd.DataFrame({"year": summary.labels, **summary.percentile_data})
    return "monte_carlo_bands.csv", df.to_csv(index=False).encode()

def _json_default(o):
    # plans built from numpy sweeps (np.arange of ages, rate grids) hold numpy scalars
    if isinstance(o, np.generic):
        return o.item()
    raise TypeError(f"Object of type {o.__class__.__name__} is not JSON serializable")

def export_plan(inp: SimulationInput) -> tuple[str, bytes]:
    """Serialise a plan to the JSON document `load_plan` reads back."""
    blob = json.dumps(inp.to_dict(), indent=2, default=_json_default)
    return "wealth-planner-data.json", blob.encode()

def load_plan(path: str) -> SimulationInput:
    with open(path, "r", encoding="utf-8") as f:
        return SimulationInput.from_dict(json.load(f))
