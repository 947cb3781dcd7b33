# growth_engine/simulator.py
from __future__ import annotations

import math
from functools import lru_cache
from typing import Iterable, Optional

import numpy as np
import pandas as pd

from .assumptions import AssumptionSet
from .levers import DEFAULT_POLICY, LeverOverrides, ModelPolicy, NO_OVERRIDES


def round_half_up(x: float) -> int:
    """Round to the nearest integer, halves toward +inf (not banker's rounding)."""
    return int(math.floor(x + 0.5))


def clamp_horizon(months: int, policy: ModelPolicy = DEFAULT_POLICY) -> int:
    return min(max(int(months), 0), policy.max_horizon)


@lru_cache(maxsize=4096)
def _customers_after(
    assumptions: AssumptionSet,
    churn: float,
    activation: float,
    months: int,
    policy: ModelPolicy,
) -> float:
    a = assumptions
    w = policy.activation_weight
    activation_ratio = activation / a.activation_rate
    funnel = (a.demo_rate / 100) * (a.trial_rate / 100) * (a.paid_rate / 100)
    blend = activation_ratio * w + (1 - w)

    customers = float(a.customers)
    for m in range(1, months + 1):
        # compounded from month zero, not from last month's lead count
        leads = a.leads_per_month * np.power(1 + a.lead_growth_rate / 100, m)
        new_customers = leads * funnel * blend
        retained = max(customers * (1 - churn / 100), 0.0)
        customers = float(retained + new_customers)
    return customers


def project_customers(
    assumptions: AssumptionSet,
    churn: Optional[float] = None,
    activation: Optional[float] = None,
    months: int = 12,
    policy: ModelPolicy = DEFAULT_POLICY,
) -> float:
    """
    Customer count after `months` of simulation.

    Each month:
      leads     = leads_per_month * (1 + lead_growth_rate)^month
      new       = leads * demo * trial * paid * (ratio * W + (1 - W))
      retained  = customers * (1 - churn), floored at zero
      customers = retained + new

    where ratio = activation / baseline activation_rate and W is the
    activation weight. Unset churn/activation follow the baseline.
    """
    if churn is None:
        churn = assumptions.churn_rate
    if activation is None:
        activation = assumptions.activation_rate
    return _customers_after(
        assumptions, float(churn), float(activation), clamp_horizon(months, policy), policy
    )


def project_mrr(
    assumptions: AssumptionSet,
    churn: Optional[float] = None,
    arpu: Optional[float] = None,
    activation: Optional[float] = None,
    months: int = 12,
    policy: ModelPolicy = DEFAULT_POLICY,
) -> int:
    """
    MRR (whole currency units) at month `months`. ARPU is in thousands.

    Returns 0 if the simulation leaves the finite range.
    """
    if arpu is None:
        arpu = assumptions.arpu
    customers = project_customers(assumptions, churn, activation, months, policy)
    mrr = customers * arpu * 1000
    if not np.isfinite(mrr):
        return 0
    return round_half_up(mrr)


def project_with_overrides(
    assumptions: AssumptionSet,
    overrides: LeverOverrides = NO_OVERRIDES,
    months: int = 12,
    policy: ModelPolicy = DEFAULT_POLICY,
) -> int:
    churn, arpu, activation = overrides.resolve(assumptions)
    return project_mrr(assumptions, churn, arpu, activation, months, policy)


def projection_series(
    assumptions: AssumptionSet,
    overrides: LeverOverrides = NO_OVERRIDES,
    months: Iterable[int] = (0, 3, 6, 9, 12, 15, 18),
    policy: ModelPolicy = DEFAULT_POLICY,
) -> pd.DataFrame:
    """
    Projection result for a set of horizon points.
    Columns: month, customers, mrr. Months outside [0, max_horizon] are
    reported at the clamped horizon they were simulated at.
    """
    churn, arpu, activation = overrides.resolve(assumptions)
    rows = []
    for m in months:
        rows.append({
            "month": clamp_horizon(m, policy),
            "customers": project_customers(assumptions, churn, activation, m, policy),
            "mrr": project_mrr(assumptions, churn, arpu, activation, m, policy),
        })
    return pd.DataFrame(rows, columns=["month", "customers", "mrr"])
