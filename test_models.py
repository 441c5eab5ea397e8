import pytest

from config import DEFAULT_WITHDRAWAL_ORDER, DEFAULTS
from models import Asset, Expense, Income, Liability, SimulationInput
from presets import PRESETS, sample_plan

def test_from_dict_fills_gaps_with_zero():
    inp = SimulationInput.from_dict({
        "currentAge": "40", "pensionAge": 67, "inflation": "",
        "assets": [{"name": "Stocks", "value": "1000", "return": 0.05}],
        "liabilities": [{"name": "Car loan", "value": 5000, "endYear": 2028}],
    })
    assert inp.current_age == 40
    assert inp.inflation == 0.0
    assert inp.early_retirement_age == 0
    stocks = inp.assets[0]
    assert (stocks.value, stocks.return_rate, stocks.tax, stocks.start_year) == (1000.0, 0.05, 0.0, 0)
    assert stocks.withdrawal_order == DEFAULT_WITHDRAWAL_ORDER
    assert inp.liabilities[0].interest_rate == 0.0

def test_zero_withdrawal_order_means_last():
    inp = SimulationInput.from_dict({"assets": [{"name": "Home", "value": 1, "withdrawalOrder": 0}]})
    assert inp.assets[0].withdrawal_order == DEFAULT_WITHDRAWAL_ORDER

def test_allocation_periods_are_sorted():
    inp = SimulationInput.from_dict({"allocationPeriods": [
        {"startYear": 2040, "allocation": {"Bonds": 1}},
        {"allocation": {"Stocks": "0.5"}, "rebalance": True},
    ]})
    assert [p.start_year for p in inp.allocation_periods] == [0, 2040]
    assert inp.allocation_periods[0].allocation == {"Stocks": 0.5}
    assert inp.allocation_periods[0].rebalance is True

def test_unknown_frequency_is_rejected():
    with pytest.raises(ValueError):
        SimulationInput.from_dict({"incomes": [{"name": "Salary", "value": 1, "frequency": "weekly"}]})

def test_cashflow_kinds_and_annual_amounts():
    inp = SimulationInput.from_dict({
        "incomes": [{"name": "Salary", "value": 2000, "frequency": "monthly", "indexed": True}],
        "expenses": [{"name": "Insurance", "value": 600, "frequency": "yearly"}],
    })
    assert isinstance(inp.incomes[0], Income)
    assert isinstance(inp.expenses[0], Expense)
    assert inp.incomes[0].annual_amount() == 24000
    assert inp.expenses[0].annual_amount() == 600

def test_activity_window():
    salary = Income("Salary", 1, start_year=2030, end_year=2035)
    assert not salary.is_active(2029)
    assert salary.is_active(2030) and salary.is_active(2035)
    assert not salary.is_active(2036)
    assert Income("Rent", 1).is_active(1999)

def test_retirement_age_prefers_early_age():
    assert SimulationInput(current_age=30, pension_age=67).retirement_age == 67
    assert SimulationInput(current_age=30, pension_age=67, early_retirement_age=55).retirement_age == 55

def test_plan_document_survives_a_round_trip():
    inp = sample_plan("mid-career")
    assert SimulationInput.from_dict(inp.to_dict()) == inp

def test_unknown_stage_falls_back_to_early_career():
    assert sample_plan("retired") == SimulationInput.from_dict(PRESETS["early-career"])

def test_missing_ages_use_plan_defaults():
    inp = SimulationInput.from_dict({"currentAge": 30})
    assert inp.pension_age == DEFAULTS["pension_age"]
    assert inp.early_retirement_age == DEFAULTS["early_retirement_age"]
    assert SimulationInput.from_dict({}).current_age == DEFAULTS["current_age"]
    # absent rates stay 0 rather than picking up a default
    assert (inp.inflation, inp.estimated_pension, inp.withdrawal_rate) == (0.0, 0.0, 0.0)

def test_blank_pension_age_uses_default():
    assert SimulationInput.from_dict({"pensionAge": ""}).pension_age == DEFAULTS["pension_age"]

def test_assets_and_liabilities_share_the_activity_window():
    for entity in (Asset("Gift", 1, start_year=2030, end_year=2035),
                   Liability("Loan", 1, start_year=2030, end_year=2035)):
        assert not entity.is_active(2029)
        assert entity.is_active(2030) and entity.is_active(2035)
        assert not entity.is_active(2036)
    assert Asset("Cash", 1).is_active(2100)
    assert Liability("Mortgage", 1).is_active(2100)
