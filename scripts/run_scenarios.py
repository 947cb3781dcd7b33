# scripts/run_scenarios.py
from __future__ import annotations

import sys
from pathlib import Path

# Add project root to Python path
project_root = Path(__file__).resolve().parents[1]
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

import argparse

import pandas as pd

from growth_engine.assumptions import ASSUMPTION_KEYS
from growth_engine.dashboard import CHART_MONTHS
from growth_engine.formatting import format_impact, format_mrr
from growth_engine.impact import lever_impacts, mrr_lift
from growth_engine.insights import rank_insight
from growth_engine.levers import LEVER_IDS, LeverOverrides
from growth_engine.plan import prioritize_initiatives
from growth_engine.session import GrowthSession
from growth_engine.simulator import projection_series

DEFAULT_OUT_DIR = Path("outputs/tables")


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Project MRR under lever overrides and rank the plan.")
    for key in ASSUMPTION_KEYS:
        parser.add_argument(f"--{key.replace('_', '-')}", dest=key, type=float, default=None)
    for lid in LEVER_IDS:
        parser.add_argument(
            f"--set-{lid}", dest=f"set_{lid}", type=float, default=None,
            help=f"Override for the {lid} lever (unset = baseline).",
        )
    parser.add_argument("--all-targets", action="store_true", help="Move every lever to its target.")
    parser.add_argument(
        "--out-dir",
        default=str(DEFAULT_OUT_DIR),
        help="Output directory (relative to repo root).",
    )
    return parser.parse_args(argv)


def build_session(args: argparse.Namespace) -> GrowthSession:
    session = GrowthSession()
    # baseline edits first: they clear the matching lever override
    for key in ASSUMPTION_KEYS:
        value = getattr(args, key)
        if value is not None:
            session.set_assumption(key, value)

    if args.all_targets:
        session.hit_all_targets()
    for lid in LEVER_IDS:
        value = getattr(args, f"set_{lid}")
        if value is not None:
            session.set_lever(lid, value)
    return session


def save_outputs(series: pd.DataFrame, impacts: pd.DataFrame, plan: pd.DataFrame, out_dir: Path) -> None:
    out_dir.mkdir(parents=True, exist_ok=True)

    series.to_csv(out_dir / "projection.csv", index=False)
    impacts.to_csv(out_dir / "lever_impacts.csv", index=False)
    plan.drop(columns=["what"]).to_csv(out_dir / "plan.csv", index=False)

    print("\nSaved outputs to:")
    print(f"  {out_dir / 'projection.csv'}")
    print(f"  {out_dir / 'lever_impacts.csv'}")
    print(f"  {out_dir / 'plan.csv'}")


def main(argv=None) -> None:
    args = parse_args(argv)
    session = build_session(args)
    assumptions, overrides = session.assumptions, session.overrides

    out_dir = Path(args.out_dir)
    if not out_dir.is_absolute():
        out_dir = (project_root / out_dir).resolve()

    print("[info] Assumptions: " + ", ".join(f"{k}={v:g}" for k, v in assumptions.to_dict().items()))
    churn, arpu, activation = overrides.resolve(assumptions)
    print(f"[info] Levers: churn={churn:g}% arpu=${arpu:g}K activation={activation:g}%")

    baseline = projection_series(assumptions, LeverOverrides(), CHART_MONTHS)
    projected = projection_series(assumptions, overrides, CHART_MONTHS)
    series = baseline.merge(projected, on="month", suffixes=("_baseline", "_projected"))

    print("\n=== PROJECTION ===")
    print(series.to_string(index=False))

    lift = mrr_lift(assumptions, overrides)
    print(
        f"\nMonth 18: {format_mrr(series['mrr_projected'].iloc[-1])} "
        f"vs {format_mrr(series['mrr_baseline'].iloc[-1])} baseline | "
        f"month-12 lift {format_impact(lift)}"
    )

    impacts = lever_impacts(assumptions, overrides)
    print("\n=== LEVER IMPACTS (month 12, one lever at a time) ===")
    print(impacts.to_string(index=False))

    insight = rank_insight(assumptions, churn, arpu, activation)
    print(f"\n=== INSIGHT ({insight.template}) ===")
    print(insight.text)

    plan = prioritize_initiatives(assumptions, overrides)
    print("\n=== 30-DAY PLAN (by remaining upside) ===")
    print(plan[["slot", "lever_label", "title", "upside", "current_impact", "remaining"]].to_string(index=False))

    save_outputs(series, impacts, plan, out_dir)
    print("[ok] Done")


if __name__ == "__main__":
    main()
