# growth_engine/dashboard.py
from __future__ import annotations

from typing import Any, Dict, List

from .assumptions import DEFAULT_ASSUMPTIONS, AssumptionSet
from .formatting import format_impact, format_lever_value, format_mrr
from .impact import lever_impacts, mrr_lift
from .insights import rank_insight
from .levers import DEFAULT_POLICY, LEVERS, LeverOverrides, ModelPolicy
from .plan import prioritize_initiatives
from .simulator import project_with_overrides, projection_series, round_half_up

CHART_MONTHS = (0, 3, 6, 9, 12, 15, 18)


def _lever_cards(
    assumptions: AssumptionSet,
    overrides: LeverOverrides,
    policy: ModelPolicy,
) -> List[Dict[str, Any]]:
    cards = lever_impacts(assumptions, overrides, policy).to_dict(orient="records")
    for card in cards:
        card["display"] = format_lever_value(LEVERS[card["lever"]], card["current"])
        card["impact_display"] = format_impact(card["impact"])
    return cards


def build_dashboard(
    assumptions: AssumptionSet,
    overrides: LeverOverrides,
    months=CHART_MONTHS,
    policy: ModelPolicy = DEFAULT_POLICY,
) -> Dict[str, Any]:
    """
    Every value the display layer needs for one state:
    - baseline and projected series at the chart months
    - headline MRR at months 12 and 18, plus the month-12 lift
    - per-lever cards (impact now, potential at target)
    - the selected insight and the upside-ranked plan
    """
    baseline = projection_series(assumptions, LeverOverrides(), months, policy)
    projected = projection_series(assumptions, overrides, months, policy)

    churn, arpu, activation = overrides.resolve(assumptions)
    insight = rank_insight(assumptions, churn, arpu, activation, policy)
    plan = prioritize_initiatives(assumptions, overrides, policy)

    base_last = int(baseline["mrr"].iloc[-1]) if len(baseline) else 0
    proj_last = int(projected["mrr"].iloc[-1]) if len(projected) else 0

    return {
        "months": [int(m) for m in baseline["month"]],
        "baseline": baseline.to_dict(orient="records"),
        "projected": projected.to_dict(orient="records"),
        "headline": {
            "current_mrr": round_half_up(assumptions.customers * assumptions.arpu * 1000),
            "baseline_12": project_with_overrides(assumptions, LeverOverrides(), policy.impact_horizon, policy),
            "projected_12": project_with_overrides(assumptions, overrides, policy.impact_horizon, policy),
            "baseline_final": base_last,
            "projected_final": proj_last,
            "baseline_final_display": format_mrr(base_last),
            "projected_final_display": format_mrr(proj_last),
            "lift": mrr_lift(assumptions, overrides, policy),
            "is_modified": overrides.is_modified,
            "assumptions_edited": assumptions != DEFAULT_ASSUMPTIONS,
        },
        "levers": _lever_cards(assumptions, overrides, policy),
        "insight": {
            "template": insight.template,
            "fields": insight.fields,
            "text": insight.text,
        },
        "plan": plan.to_dict(orient="records"),
    }
