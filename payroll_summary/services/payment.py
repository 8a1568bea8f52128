from __future__ import annotations

from typing import Any

from .normalize import is_number, round_half_up

"""Payment resolution.

Multiplier precedence (highest first):
1. individual (per-row operator) multiplier
2. worker name contains "SRBN"  -> SRBN multiplier
3. worker name contains "HF-EX" -> HF-EX multiplier
4. otherwise 0

payment = round_half_up(points * multiplier)
"""

__all__ = [
    "SRBN_MARKER",
    "HFEX_MARKER",
    "default_multiplier",
    "resolve_multiplier",
    "compute_payment",
]

SRBN_MARKER = "SRBN"
HFEX_MARKER = "HF-EX"


def default_multiplier(name: Any, srbn_multiplier: float, hfex_multiplier: float) -> float:
    """Multiplier derived from the worker-name rule alone."""
    if name is None or name == "" or name is False:
        return 0
    upper = str(name).upper()
    if SRBN_MARKER in upper:
        return srbn_multiplier
    if HFEX_MARKER in upper:
        return hfex_multiplier
    return 0


def resolve_multiplier(
    name: Any,
    srbn_multiplier: float,
    hfex_multiplier: float,
    individual_multiplier: float | None = None,
) -> float:
    """Apply the precedence rule; an individual override always wins."""
    if individual_multiplier is not None:
        return individual_multiplier
    return default_multiplier(name, srbn_multiplier, hfex_multiplier)


def compute_payment(
    name: Any,
    metric_b: Any,
    srbn_multiplier: float,
    hfex_multiplier: float,
    individual_multiplier: float | None = None,
) -> int:
    """Payment for one row; 0 for a missing name or non-numeric points."""
    if not name or not is_number(metric_b):
        return 0
    multiplier = resolve_multiplier(name, srbn_multiplier, hfex_multiplier, individual_multiplier)
    return round_half_up(metric_b * multiplier)
