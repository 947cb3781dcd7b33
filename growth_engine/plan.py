# growth_engine/plan.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

import pandas as pd

from .assumptions import AssumptionSet
from .impact import impact_for_ranking
from .levers import DEFAULT_POLICY, LeverOverrides, ModelPolicy, get_lever


@dataclass(frozen=True)
class Initiative:
    lever_id: str
    title: str
    what: str
    deliverable: str
    metric: str


# Declared order is the tie-break order for equal remaining upside.
INITIATIVES: Tuple[Initiative, ...] = (
    Initiative(
        lever_id="churn",
        title="Build an automated early-warning system for churn",
        what=(
            "A lightweight health score built on existing product data (usage trends, login "
            "frequency, error rates) wired to automated email triggers, so at-risk accounts get "
            "a nudge without anyone watching a dashboard."
        ),
        deliverable="Health score logic + automated email sequences",
        metric="Catch at-risk accounts 14 days before they would otherwise go silent",
    ),
    Initiative(
        lever_id="activation",
        title="Cut the integration drop-off in half",
        what=(
            "Map the onboarding funnel with real data, find the step with the biggest drop and "
            "design a self-serve integration wizard plus a test mode with dummy data."
        ),
        deliverable="Funnel analysis + integration wizard PRD + test mode prototype",
        metric="Activation rate from 35% to 50% within the first cohort",
    ),
    Initiative(
        lever_id="arpu",
        title="Run the pricing research that unlocks ARPU",
        what=(
            "Van Westendorp survey for the acceptable price range, MaxDiff survey for feature "
            "value, and a Good-Better-Best tier draft built from both."
        ),
        deliverable="Pricing research report + proposed tiers + migration plan",
        metric="Confirm whether current pricing sits below the point of marginal cheapness",
    ),
)

WEEK_SLOTS = ("Week 1–2", "Week 2–3", "Week 3–4")


def prioritize_initiatives(
    assumptions: AssumptionSet,
    overrides: LeverOverrides,
    policy: ModelPolicy = DEFAULT_POLICY,
) -> pd.DataFrame:
    """
    Rank the plan by remaining upside:
      upside    = |impact at the lever's target|
      current   = |impact at the lever's current value|
      remaining = max(0, upside - current)
    Sorted by remaining descending; ties keep the declared order.
    """
    rows = []
    for item in INITIATIVES:
        lever = get_lever(item.lever_id)
        upside = impact_for_ranking(assumptions, item.lever_id, lever.target, policy)
        current = impact_for_ranking(
            assumptions, item.lever_id, overrides.effective(item.lever_id, assumptions), policy
        )
        rows.append({
            "lever": item.lever_id,
            "lever_label": lever.label,
            "title": item.title,
            "what": item.what,
            "deliverable": item.deliverable,
            "metric": item.metric,
            "upside": upside,
            "current_impact": current,
            "remaining": max(0, upside - current),
        })

    plan = (
        pd.DataFrame(rows)
        .sort_values("remaining", ascending=False, kind="stable")
        .reset_index(drop=True)
    )
    plan.insert(0, "slot", list(WEEK_SLOTS[: len(plan)]))
    return plan
