# growth_engine/assumptions.py
from __future__ import annotations

import math
from dataclasses import asdict, dataclass, fields, replace
from typing import Any, Dict


@dataclass(frozen=True)
class AssumptionSet:
    customers: float = 15
    arpu: float = 6
    churn_rate: float = 5
    activation_rate: float = 35
    leads_per_month: float = 50
    demo_rate: float = 45
    trial_rate: float = 65
    paid_rate: float = 55
    lead_growth_rate: float = 8

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)

    def with_value(self, key: str, value: float) -> "AssumptionSet":
        """Return a copy with one field replaced (clamped to its input range)."""
        return replace(self, **{key: clamp_assumption(key, value)})


@dataclass(frozen=True)
class FieldMeta:
    label: str
    min: float
    max: float
    step: float
    group: str
    unit: str = ""
    prefix: str = ""


DEFAULT_ASSUMPTIONS = AssumptionSet()

ASSUMPTION_META: Dict[str, FieldMeta] = {
    "customers":        FieldMeta("Current customers", min=1,   max=200, step=1,   group="business"),
    "arpu":             FieldMeta("ARPU",              min=1,   max=30,  step=0.5, group="business", unit="K", prefix="$"),
    "churn_rate":       FieldMeta("Monthly churn",     min=0.5, max=15,  step=0.5, group="business", unit="%"),
    "activation_rate":  FieldMeta("Activation rate",   min=10,  max=90,  step=5,   group="business", unit="%"),
    "leads_per_month":  FieldMeta("Leads / month",     min=10,  max=500, step=5,   group="funnel"),
    "demo_rate":        FieldMeta("Lead → Demo",       min=10,  max=90,  step=5,   group="funnel", unit="%"),
    "trial_rate":       FieldMeta("Demo → Trial",      min=10,  max=90,  step=5,   group="funnel", unit="%"),
    "paid_rate":        FieldMeta("Trial → Paid",      min=10,  max=90,  step=5,   group="funnel", unit="%"),
    "lead_growth_rate": FieldMeta("Lead growth / mo",  min=0,   max=30,  step=1,   group="funnel", unit="%"),
}

ASSUMPTION_KEYS = tuple(f.name for f in fields(AssumptionSet))


def _check_key(key: str) -> FieldMeta:
    if key not in ASSUMPTION_META:
        raise ValueError(f"Unknown assumption: {key}. Use one of {list(ASSUMPTION_KEYS)}.")
    return ASSUMPTION_META[key]


def clamp_assumption(key: str, value: float) -> float:
    meta = _check_key(key)
    value = float(value)
    if not math.isfinite(value):
        raise ValueError(f"{key} must be a finite number, got {value}.")
    return min(max(value, meta.min), meta.max)


def build_assumptions(values: Dict[str, Any]) -> AssumptionSet:
    """
    Build an AssumptionSet from raw input values.

    Missing keys fall back to the defaults; every supplied value is clamped
    to its field range. Unknown keys raise ValueError.
    """
    data = DEFAULT_ASSUMPTIONS.to_dict()
    for key, value in values.items():
        data[key] = clamp_assumption(key, value)
    return AssumptionSet(**data)


def keys_in_group(group: str) -> list:
    return [k for k, m in ASSUMPTION_META.items() if m.group == group]
