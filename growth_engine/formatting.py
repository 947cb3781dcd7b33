# growth_engine/formatting.py
from __future__ import annotations

from typing import Optional

from .levers import Lever
from .simulator import round_half_up


def format_mrr(value: float) -> str:
    """
    Compact currency, halves rounded up:
      >= 1,000,000 -> $1.2M
      >= 1,000     -> $340K
      otherwise    -> $512
    """
    if value >= 1_000_000:
        return f"${round_half_up(value / 100_000) / 10:.1f}M"
    if value >= 1_000:
        return f"${round_half_up(value / 1_000)}K"
    return f"${round_half_up(value)}"


def format_impact(pct: Optional[int]) -> str:
    if pct is None:
        return "n/a"
    sign = "+" if pct > 0 else ""
    return f"{sign}{pct}%"


def format_lever_value(lever: Lever, value: float) -> str:
    # 2.0 -> "2", 2.5 -> "2.5"
    return f"{lever.prefix}{value:g}{lever.unit}"
