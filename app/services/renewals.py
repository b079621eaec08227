# app/services/renewals.py
from __future__ import annotations

from typing import Dict, Iterable, List

from app.schemas.dashboard import RenewalGroup

# (inclusive upper bound in days, label), chronological
WEEK_BUCKETS = [
    (-1, "Overdue"),
    (7, "This week"),
    (14, "Next week"),
    (21, "In 2 weeks"),
    (28, "In 3 weeks"),
    (35, "In 4 weeks"),
    (60, "In 5-8 weeks"),
]
LATER_LABEL = "Later"

WEEK_LABELS = tuple(label for _, label in WEEK_BUCKETS) + (LATER_LABEL,)


def week_label(days_remaining: int) -> str:
    for upper, label in WEEK_BUCKETS:
        if days_remaining <= upper:
            return label
    return LATER_LABEL


def group_by_week(credentials: Iterable) -> List[RenewalGroup]:
    """
    Bucket credentials into renewal windows.
    Items without days_remaining have no timeline and are skipped; groups come
    out in WEEK_LABELS order and empty groups are omitted.
    """
    buckets: Dict[str, list] = {}
    for cred in credentials:
        if cred.days_remaining is None:
            continue
        buckets.setdefault(week_label(cred.days_remaining), []).append(cred)

    return [
        RenewalGroup(label=label, credentials=buckets[label])
        for label in WEEK_LABELS
        if buckets.get(label)
    ]
