# growth_engine/levers.py
from __future__ import annotations

import math
from dataclasses import dataclass, field, replace
from typing import Dict, Optional, Tuple

from .assumptions import AssumptionSet


@dataclass(frozen=True)
class ModelPolicy:
    """
    Tunable model constants.

    activation_weight: share of new-customer volume explained by activation;
                       the rest is held constant (sales effort, timing, ...).
    dominance_factor:  retention + monetization must beat activation by this
                       multiple before the insight calls them dominant.
    impact_horizon:    month at which independent impacts are measured.
    max_horizon:       projections beyond this month are clamped.
    """
    activation_weight: float = 0.4
    dominance_factor: float = 1.5
    impact_horizon: int = 12
    max_horizon: int = 60


DEFAULT_POLICY = ModelPolicy()


@dataclass(frozen=True)
class Lever:
    id: str
    label: str
    subtitle: str
    base_key: str
    target: float
    min: float
    max: float
    step: float
    direction: str
    unit: str = ""
    prefix: str = ""
    insight: str = ""
    tactics: Tuple[str, ...] = field(default_factory=tuple)
    analogy: str = ""

    def baseline(self, assumptions: AssumptionSet) -> float:
        return getattr(assumptions, self.base_key)

    def clamp(self, value: float) -> float:
        value = float(value)
        if not math.isfinite(value):
            raise ValueError(f"{self.id} lever value must be a finite number, got {value}.")
        return min(max(value, self.min), self.max)


LEVERS: Dict[str, Lever] = {
    "churn": Lever(
        "churn", "Retention", "Monthly churn rate",
        base_key="churn_rate", target=2, min=0.5, max=10, step=0.5,
        direction="lower-is-better", unit="%",
        insight=(
            "Each percentage point of churn compounds monthly. At 5% monthly churn you lose "
            "~46% of your base in a year; at 2% you keep ~78%. The gap widens every month."
        ),
        tactics=(
            "Health score dashboard: flag accounts when usage drops >30% MoM",
            "Recovery playbook: auto-email (day 1), call (day 3), incentive (day 7), founder outreach (day 14)",
            "Monthly check-in emails showing ROI delivered",
            "Weekly value reports summarising what the product caught or saved",
        ),
        analogy="A leaky bucket: plugging the holes beats pouring faster.",
    ),
    "arpu": Lever(
        "arpu", "Monetization", "Average revenue per user",
        base_key="arpu", target=9, min=2, max=20, step=0.5,
        direction="higher-is-better", unit="K", prefix="$",
        insight=(
            "Price against the value delivered, not against cost. A Van Westendorp survey of the "
            "current base shows the acceptable range; early B2B infrastructure is usually underpriced."
        ),
        tactics=(
            "Run a Van Westendorp pricing survey",
            "Structure Good-Better-Best tiers from a MaxDiff feature ranking",
            "Expand within accounts into adjacent document types",
            "Reach out when customers hit 80% of their tier volume",
        ),
        analogy="A gym membership: show members the pool and the classes, not just the treadmill.",
    ),
    "activation": Lever(
        "activation", "Activation", "% reaching Aha! in 14 days",
        base_key="activation_rate", target=60, min=10, max=90, step=5,
        direction="higher-is-better", unit="%",
        insight=(
            "Every customer that does not activate is acquisition spend wasted. The typical "
            "drop-off is at integration; removing that friction multiplies funnel efficiency."
        ),
        tactics=(
            "White-glove setup call within 48 hours of signing",
            "Integration wizard that auto-configures the API by document type",
            "Test mode with dummy data so no real integration is needed to see value",
            "Free first 1,000 documents to de-risk the integration",
        ),
        analogy="A restaurant where most guests leave before tasting the food.",
    ),
}

LEVER_IDS = tuple(LEVERS)


def get_lever(lever_id: str) -> Lever:
    if lever_id not in LEVERS:
        raise ValueError(f"Unknown lever: {lever_id}. Use one of {list(LEVER_IDS)}.")
    return LEVERS[lever_id]


@dataclass(frozen=True)
class LeverOverrides:
    """Per-lever override values; None means the lever follows its baseline."""
    churn: Optional[float] = None
    arpu: Optional[float] = None
    activation: Optional[float] = None

    def get(self, lever_id: str) -> Optional[float]:
        get_lever(lever_id)
        return getattr(self, lever_id)

    def set(self, lever_id: str, value: Optional[float]) -> "LeverOverrides":
        get_lever(lever_id)
        return replace(self, **{lever_id: value})

    def effective(self, lever_id: str, assumptions: AssumptionSet) -> float:
        value = self.get(lever_id)
        if value is None:
            return LEVERS[lever_id].baseline(assumptions)
        return value

    def resolve(self, assumptions: AssumptionSet) -> Tuple[float, float, float]:
        """(churn, arpu, activation) with unset levers at their baseline."""
        return tuple(self.effective(lid, assumptions) for lid in LEVER_IDS)

    @property
    def is_modified(self) -> bool:
        return any(getattr(self, lid) is not None for lid in LEVER_IDS)


NO_OVERRIDES = LeverOverrides()


def target_overrides() -> LeverOverrides:
    return LeverOverrides(**{lid: lever.target for lid, lever in LEVERS.items()})
