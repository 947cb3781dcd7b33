# growth_engine/impact.py
from __future__ import annotations

import math
from typing import Optional

import pandas as pd

from .assumptions import AssumptionSet
from .levers import DEFAULT_POLICY, LEVERS, LeverOverrides, ModelPolicy, get_lever
from .simulator import project_mrr, project_with_overrides, round_half_up


def percent_change(new: float, base: float) -> Optional[int]:
    """
    Rounded percent change from base to new.
    None when the change is undefined (zero baseline).
    """
    if base == 0:
        return None
    pct = (new - base) / base * 100
    if not math.isfinite(pct):
        return None
    return round_half_up(pct)


def independent_impact(
    assumptions: AssumptionSet,
    lever_id: str,
    value: float,
    policy: ModelPolicy = DEFAULT_POLICY,
) -> Optional[int]:
    """
    Percent change in MRR at the impact horizon from moving exactly one
    lever to `value`, with the other two held at baseline.
    """
    get_lever(lever_id)
    horizon = policy.impact_horizon
    base_mrr = project_mrr(assumptions, months=horizon, policy=policy)
    scenario = LeverOverrides().set(lever_id, value)
    new_mrr = project_with_overrides(assumptions, scenario, horizon, policy)
    return percent_change(new_mrr, base_mrr)


def impact_for_ranking(
    assumptions: AssumptionSet,
    lever_id: str,
    value: float,
    policy: ModelPolicy = DEFAULT_POLICY,
) -> int:
    """Absolute independent impact; undefined impacts count as zero."""
    pct = independent_impact(assumptions, lever_id, value, policy)
    return 0 if pct is None else abs(pct)


def mrr_lift(
    assumptions: AssumptionSet,
    overrides: LeverOverrides,
    policy: ModelPolicy = DEFAULT_POLICY,
) -> Optional[int]:
    """Combined percent lift of the current overrides vs baseline at the impact horizon."""
    horizon = policy.impact_horizon
    base_mrr = project_mrr(assumptions, months=horizon, policy=policy)
    new_mrr = project_with_overrides(assumptions, overrides, horizon, policy)
    return percent_change(new_mrr, base_mrr)


def lever_impacts(
    assumptions: AssumptionSet,
    overrides: LeverOverrides,
    policy: ModelPolicy = DEFAULT_POLICY,
) -> pd.DataFrame:
    """
    One row per lever: current value, baseline, target, impact at the current
    value and potential impact at the target. Object dtype keeps undefined
    impacts as None instead of NaN.
    """
    rows = []
    for lid, lever in LEVERS.items():
        base = lever.baseline(assumptions)
        current = overrides.effective(lid, assumptions)
        rows.append({
            "lever": lid,
            "label": lever.label,
            "direction": lever.direction,
            "baseline": base,
            "current": current,
            "target": lever.target,
            "overridden": overrides.get(lid) is not None,
            "impact": independent_impact(assumptions, lid, current, policy),
            "potential": independent_impact(assumptions, lid, lever.target, policy),
            "at_baseline": current == base,
        })
    return pd.DataFrame(rows, dtype=object)
