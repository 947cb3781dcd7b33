# growth_engine/session.py
from __future__ import annotations

from typing import Any, Dict, Optional

from .assumptions import DEFAULT_ASSUMPTIONS, AssumptionSet
from .dashboard import CHART_MONTHS, build_dashboard
from .levers import DEFAULT_POLICY, LEVERS, LeverOverrides, ModelPolicy, get_lever, target_overrides

# assumption field -> lever that overrides it
_LEVER_BY_FIELD = {lever.base_key: lid for lid, lever in LEVERS.items()}


class GrowthSession:
    """
    In-memory state for one calculator view: the current assumptions plus
    one optional override per lever. Every read recomputes from scratch.

    Editing a baseline field clears the override of the lever built on it,
    so a stale override never sits on top of a new baseline.
    """

    def __init__(
        self,
        assumptions: AssumptionSet = DEFAULT_ASSUMPTIONS,
        policy: ModelPolicy = DEFAULT_POLICY,
    ):
        self.assumptions = assumptions
        self.overrides = LeverOverrides()
        self.policy = policy

    def set_assumption(self, key: str, value: float) -> None:
        self.assumptions = self.assumptions.with_value(key, value)
        lever_id = _LEVER_BY_FIELD.get(key)
        if lever_id is not None:
            self.overrides = self.overrides.set(lever_id, None)

    def set_lever(self, lever_id: str, value: Optional[float]) -> None:
        lever = get_lever(lever_id)
        if value is not None:
            value = lever.clamp(value)
        self.overrides = self.overrides.set(lever_id, value)

    def effective(self, lever_id: str) -> float:
        return self.overrides.effective(lever_id, self.assumptions)

    def reset_levers(self) -> None:
        self.overrides = LeverOverrides()

    def reset_all(self) -> None:
        self.assumptions = DEFAULT_ASSUMPTIONS
        self.reset_levers()

    def hit_all_targets(self) -> None:
        self.overrides = target_overrides()

    @property
    def is_modified(self) -> bool:
        return self.overrides.is_modified

    @property
    def assumptions_edited(self) -> bool:
        return self.assumptions != DEFAULT_ASSUMPTIONS

    def dashboard(self, months=CHART_MONTHS) -> Dict[str, Any]:
        return build_dashboard(self.assumptions, self.overrides, months, self.policy)
