import json

import numpy as np
import pytest

from exporters import export_percentiles_csv, export_plan, export_results_csv, load_plan, results_frame
from models import Asset, Liability, SimulationInput
from scenarios import clone_input
from presets import sample_plan
from simulation import run_monte_carlo, run_simulation

START = 2025

def test_results_frame_has_a_row_per_year_and_balance_columns():
    inp = SimulationInput(current_age=90, pension_age=95,
                          assets=[Asset("Stocks", 100), Asset("Gift", 50, start_year=START + 2)],
                          liabilities=[Liability("Loan", 40, start_year=START, end_year=START + 3)])
    df = results_frame(run_simulation(inp, start_year=START))
    assert len(df) == 5
    assert {"year", "age", "net_worth", "asset:Stocks", "asset:Gift", "liability:Loan"} <= set(df.columns)
    # not yet held -> 0, not NaN
    assert df["asset:Gift"].tolist() == [0.0, 0.0, 50.0, 50.0, 50.0]
    assert df["liability:Loan"].tolist() == [30.0, 20.0, 10.0, 0.0, 0.0]

def test_export_results_csv():
    name, blob = export_results_csv(run_simulation(sample_plan("late-career"), start_year=START))
    assert name == "projection.csv"
    lines = blob.decode().splitlines()
    assert lines[0].startswith("year,age,net_income")
    assert len(lines) == 1 + 40

def test_export_percentiles_csv():
    summary = run_monte_carlo(SimulationInput(current_age=92, pension_age=95, assets=[Asset("Cash", 10)]),
                              num_runs=4, seed=0, start_year=START)
    name, blob = export_percentiles_csv(summary)
    header = blob.decode().splitlines()[0]
    assert name == "monte_carlo_bands.csv"
    assert header.split(",")[:2] == ["year", "Bottom 5%"]
    assert header.split(",")[-1] == "Top 5%"

def test_plan_export_then_load(tmp_path):
    inp = sample_plan("early-career")
    name, blob = export_plan(inp)
    assert json.loads(blob)["currentAge"] == 30
    path = tmp_path / name
    path.write_bytes(blob)
    assert load_plan(str(path)) == inp

def test_plan_export_accepts_numpy_sweep_values():
    base = sample_plan("mid-career")
    for age, rate in zip(np.arange(60, 63), np.linspace(0.03, 0.05, 3)):
        inp = clone_input(base, pension_age=age, withdrawal_rate=rate)
        doc = json.loads(export_plan(inp)[1])
        assert doc["pensionAge"] == int(age)
        assert doc["withdrawalRate"] == pytest.approx(float(rate))

def test_plan_export_rejects_unknown_objects():
    inp = sample_plan("mid-career")
    inp.inflation = object()
    with pytest.raises(TypeError):
        export_plan(inp)
