# growth_engine/insights.py
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Tuple

from .assumptions import AssumptionSet
from .impact import impact_for_ranking
from .levers import DEFAULT_POLICY, LEVERS, ModelPolicy

# lever id -> name used inside insight sentences
INSIGHT_NAMES = {
    "churn": "retention",
    "arpu": "monetization",
    "activation": "activation",
}

TEMPLATES = {
    "baseline_upside": (
        "At these baselines, {top} (+{top_pct}%) and {second} (+{second_pct}%) have the "
        "largest upside at their target values. Drag the sliders to explore."
    ),
    "single_lever": (
        "With your current adjustments, {top} is driving all the MRR movement (+{top_pct}%). "
        "Try combining levers: the effects multiply."
    ),
    "retention_monetization": (
        "Retention + monetization are driving {combined_pct}% combined uplift vs "
        "{activation_pct}% from activation alone. Fixing the bucket matters more than pouring faster."
    ),
    "largest_lever": (
        "Largest lever: {top} at +{top_pct}%. Combined with {second} (+{second_pct}%), these "
        "compound: the chart reflects their multiplicative effect."
    ),
}


@dataclass(frozen=True)
class Insight:
    template: str
    ranking: Tuple[Tuple[str, int], ...]
    combined_pct: int = 0
    activation_pct: int = 0

    @property
    def fields(self) -> dict:
        out = {"combined_pct": self.combined_pct, "activation_pct": self.activation_pct}
        for slot, (lid, pct) in zip(("top", "second"), self.ranking):
            out[slot] = INSIGHT_NAMES[lid]
            out[f"{slot}_pct"] = pct
        return out

    @property
    def text(self) -> str:
        return TEMPLATES[self.template].format(**self.fields)


def _rank(impacts: List[Tuple[str, int]]) -> List[Tuple[str, int]]:
    # sorted() is stable: ties keep retention, monetization, activation order
    return sorted(impacts, key=lambda item: item[1], reverse=True)


def rank_insight(
    assumptions: AssumptionSet,
    churn: float,
    arpu: float,
    activation: float,
    policy: ModelPolicy = DEFAULT_POLICY,
) -> Insight:
    """
    Pick the insight template for the current lever values.

    - nothing moved: rank impacts at each lever's target, report the top two
    - one lever moved: that lever drives everything
    - retention + monetization beat activation by `dominance_factor`:
      say so
    - otherwise: largest lever, with the runner-up
    """
    current = {"churn": churn, "arpu": arpu, "activation": activation}
    impacts = _rank([
        (lid, impact_for_ranking(assumptions, lid, current[lid], policy)) for lid in LEVERS
    ])
    modified = [item for item in impacts if item[1] > 0]

    if not modified:
        at_target = _rank([
            (lid, impact_for_ranking(assumptions, lid, lever.target, policy))
            for lid, lever in LEVERS.items()
        ])
        return Insight("baseline_upside", tuple(at_target[:2]))

    if len(modified) == 1:
        return Insight("single_lever", tuple(modified[:1]))

    activation_item = next((item for item in modified if item[0] == "activation"), None)
    ret_mon = [item for item in modified if item[0] != "activation"]
    combined = sum(pct for _, pct in ret_mon)
    if (
        len(ret_mon) >= 2
        and activation_item is not None
        and combined > activation_item[1] * policy.dominance_factor
    ):
        return Insight(
            "retention_monetization",
            tuple(modified[:2]),
            combined_pct=combined,
            activation_pct=activation_item[1],
        )

    return Insight("largest_lever", tuple(modified[:2]))
