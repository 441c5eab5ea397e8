# cli.py
import argparse
import json
import logging
import sys

from config import APP_NAME, MONTE_CARLO_RUNS
from exporters import export_percentiles_csv, export_results_csv, load_plan
from presets import PRESETS, sample_plan
from simulation import run_monte_carlo, run_simulation

logger = logging.getLogger(__name__)

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

def _positive_int(text: str) -> int:
    value = int(text)
    if value < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {value}")
    return value

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="wealth-trajectory", description=APP_NAME)
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("plan", nargs="?", help="Plan JSON file")
    source.add_argument("--sample", choices=sorted(PRESETS), help="Use a built-in starter plan")
    parser.add_argument("--monte-carlo", action="store_true", help="Run the stochastic simulation")
    parser.add_argument("--runs", type=_positive_int, default=MONTE_CARLO_RUNS, help="Monte Carlo runs")
    parser.add_argument("--seed", type=int, default=None, help="Seed for reproducible Monte Carlo runs")
    parser.add_argument("--workers", type=_positive_int, default=1, help="Processes for Monte Carlo runs")
    parser.add_argument("--start-year", type=int, default=None, help="Calendar year of the first step")
    parser.add_argument("--csv", default=None, help="Write the projection (or bands) to this CSV file")
    parser.add_argument("--log-level", type=str.upper, choices=LOG_LEVELS, default="WARNING",
                        help="Logging level")
    return parser

def _print_projection(result) -> None:
    last = result.results[-1] if result.results else None
    print(f"Years simulated: {len(result.results)}")
    if last is not None:
        print(f"Net worth at age {last.age}: {last.net_worth:,.0f}")
    if result.early_retirement_year is not None:
        age = next(s.age for s in result.results if s.year == result.early_retirement_year)
        print(f"Early retirement possible in {result.early_retirement_year} at age {age}")
    if result.amount_pension_message > 0:
        print(f"First annual withdrawal at pension age: {result.amount_pension_message:,.0f} "
              f"({result.amount_pension_message / 12:,.0f} per month)")

def _print_bands(summary) -> None:
    print(f"Success rate: {100.0 * summary.success_rate:.1f}%")
    if summary.labels:
        final = {label: series[-1] for label, series in summary.percentile_data.items()}
        print(f"Net worth in {summary.labels[-1]}:")
        for label, value in final.items():
            print(f"  {label:>11}: {value:,.0f}")

def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=args.log_level, format="%(levelname)s %(name)s: %(message)s")

    try:
        inp = sample_plan(args.sample) if args.sample else load_plan(args.plan)
    except (OSError, ValueError, KeyError, json.JSONDecodeError) as exc:
        print(f"Could not load plan: {exc}", file=sys.stderr)
        return 2

    if args.monte_carlo:
        summary = run_monte_carlo(inp, num_runs=args.runs, seed=args.seed,
                                  workers=args.workers, start_year=args.start_year)
        _print_bands(summary)
        name, blob = export_percentiles_csv(summary)
    else:
        result = run_simulation(inp, start_year=args.start_year)
        _print_projection(result)
        name, blob = export_results_csv(result)

    if args.csv:
        with open(args.csv, "wb") as f:
            f.write(blob)
        logger.info("Wrote %s to %s", name, args.csv)
    return 0

if __name__ == "__main__":
    sys.exit(main())
