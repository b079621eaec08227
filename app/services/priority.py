# app/services/priority.py
from __future__ import annotations

from typing import Optional, Tuple

# Anything due today or overdue outranks every not-yet-due item
EXPIRED_PRIORITY_WEIGHT = 10000


def priority_score(days_remaining: Optional[int], impact_score: int) -> float:
    """
    Higher = more urgent.
      - no expiration            -> 0
      - due today or overdue     -> 10000 x accounts affected
      - otherwise                -> (1 / days) x accounts affected x 100
    """
    if days_remaining is None:
        return 0.0
    if days_remaining <= 0:
        return float(EXPIRED_PRIORITY_WEIGHT * impact_score)
    return (1 / days_remaining) * impact_score * 100


def priority_sort_key(item) -> Tuple[float, str]:
    # score desc, then credential id asc so equal scores sort the same everywhere
    return (-item.priority_score, item.id)
