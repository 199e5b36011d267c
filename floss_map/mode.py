# floss_map/mode.py
from __future__ import annotations
from typing import Literal, Optional

"""
Reduction strategy selection helpers.

Exports:
- ReductionStrategy: Literal["anchored", "kmeans"]
- resolve_strategy(name) -> ReductionStrategy
- reduction_enabled(max_colors) -> bool

Notes:
- "greedy" is accepted as an alias of "anchored", "quantize" of "kmeans".
"""


ReductionStrategy = Literal["anchored", "kmeans"]
STRATEGY_CHOICES = ("anchored", "kmeans")

_ALIASES = {
    "anchored": "anchored",
    "greedy": "anchored",
    "kmeans": "kmeans",
    "k-means": "kmeans",
    "quantize": "kmeans",
}


def resolve_strategy(name: str) -> ReductionStrategy:
    """Normalise a user-supplied strategy name. Raises ValueError if unknown."""
    key = str(name).strip().lower()
    if key not in _ALIASES:
        raise ValueError(
            f"unknown strategy {name!r}; expected one of {', '.join(STRATEGY_CHOICES)}"
        )
    return _ALIASES[key]  # type: ignore[return-value]


def reduction_enabled(max_colors: Optional[int]) -> bool:
    """A missing or non-positive colour cap means: keep every matched colour."""
    return max_colors is not None and int(max_colors) > 0


__all__ = ["ReductionStrategy", "STRATEGY_CHOICES", "resolve_strategy", "reduction_enabled"]
