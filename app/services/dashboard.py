# app/services/dashboard.py
from __future__ import annotations

import math
from typing import Iterable, List, Optional, Sequence

from app.core.errors import require
from app.schemas.account import AccountPage, AccountSummary
from app.schemas.credential import ActionItem, CredentialRecord, EnrichedCredential
from app.schemas.dashboard import AccountHealth, CredentialStats
from app.schemas.enums import (
    AccessStatus,
    CredentialCategory,
    CredentialStatus,
    RegistrationStatus,
)
from app.services.priority import priority_sort_key
from app.services.urgency import DateLike, as_calendar_date, days_until, format_days_remaining, local_today

# Statuses that still need something from the user
ACTIONABLE_STATUSES = frozenset(
    {CredentialStatus.MISSING, CredentialStatus.EXPIRED, CredentialStatus.PENDING}
)
NON_COMPLIANT_STATUSES = frozenset({CredentialStatus.MISSING, CredentialStatus.EXPIRED})

CREDENTIAL_STATUS_FILTERS = ("all", "verified", "non-compliant", "expiring")
ACCOUNT_STATUS_FILTERS = ("all", "pass", "fail")
ACCOUNT_TABS = ("registered", "invitations")


# ---------- summary cards ----------
def compute_stats(
    credentials: Iterable[CredentialRecord],
    as_of: DateLike = None,
    window_days: int = 30,
) -> CredentialStats:
    """
    total / compliant (verified) / non_compliant (everything else) /
    expiring_soon (verified with an expiration within window_days of as_of).
    """
    ref = as_calendar_date(as_of) or local_today()
    total = compliant = expiring = 0
    for cred in credentials:
        total += 1
        if cred.status != CredentialStatus.VERIFIED:
            continue
        compliant += 1
        days = days_until(cred.expiration_date, ref)
        if days is not None and days <= window_days:
            expiring += 1
    return CredentialStats(
        total=total,
        compliant=compliant,
        non_compliant=total - compliant,
        expiring_soon=expiring,
    )


# ---------- ranked lists ----------
def action_items(enriched: Iterable[EnrichedCredential], limit: int = 5) -> List[EnrichedCredential]:
    """Missing / expired / pending credentials, most urgent first, at most `limit`."""
    require(isinstance(limit, int) and limit >= 1, "limit must be a positive integer")
    actionable = [c for c in enriched if c.status in ACTIONABLE_STATUSES]
    return sorted(actionable, key=priority_sort_key)[:limit]


def expiring_soon(enriched: Iterable[EnrichedCredential], within_days: int = 60) -> List[EnrichedCredential]:
    """Verified credentials lapsing within `within_days`, soonest first."""
    require(isinstance(within_days, int) and within_days >= 0, "within_days must be >= 0")
    items = [
        c
        for c in enriched
        if c.status == CredentialStatus.VERIFIED
        and c.days_remaining is not None
        and c.days_remaining <= within_days
    ]
    return sorted(items, key=lambda c: (c.days_remaining, c.id))


def impact_label(impact_score: int) -> str:
    return f"Blocks {impact_score} account{'s' if impact_score != 1 else ''}"


def to_action_item(credential: EnrichedCredential) -> ActionItem:
    return ActionItem(
        credential=credential,
        urgency_label=format_days_remaining(credential.days_remaining),
        impact_label=impact_label(credential.impact_score),
    )


def account_health(summaries: Iterable[AccountSummary]) -> AccountHealth:
    """Pass/fail split for the health bar, on derived access status."""
    pass_count = fail_count = 0
    for s in summaries:
        if s.access_status == AccessStatus.PASS:
            pass_count += 1
        else:
            fail_count += 1
    total = pass_count + fail_count
    pct = round(pass_count / total * 100) if total else 0
    return AccountHealth(pass_count=pass_count, fail_count=fail_count, total=total, pass_percent=pct)


# ---------- list filters ----------
def _matches(query: str, *fields: Optional[str]) -> bool:
    return any(f and query in f.lower() for f in fields)


def filter_credentials(
    enriched: Iterable[EnrichedCredential],
    *,
    category: Optional[CredentialCategory] = None,
    status_filter: str = "all",
    query: Optional[str] = None,
    expiring_within_days: int = 30,
) -> List[EnrichedCredential]:
    """
    Credentials table: category tab, status filter and text search, sorted by
    priority (highest first).
      - verified       -> status verified
      - non-compliant  -> missing or expired
      - expiring       -> verified and due within expiring_within_days
    """
    require(
        status_filter in CREDENTIAL_STATUS_FILTERS,
        f"status must be one of {', '.join(CREDENTIAL_STATUS_FILTERS)}",
    )
    items = list(enriched)

    if category is not None:
        items = [c for c in items if c.category == category]

    if status_filter == "verified":
        items = [c for c in items if c.status == CredentialStatus.VERIFIED]
    elif status_filter == "non-compliant":
        items = [c for c in items if c.status in NON_COMPLIANT_STATUSES]
    elif status_filter == "expiring":
        items = [
            c
            for c in items
            if c.status == CredentialStatus.VERIFIED
            and c.days_remaining is not None
            and c.days_remaining <= expiring_within_days
        ]

    q = (query or "").strip().lower()
    if q:
        items = [c for c in items if _matches(q, c.name, c.description)]

    return sorted(items, key=priority_sort_key)


def filter_accounts(
    summaries: Iterable[AccountSummary],
    *,
    tab: str = "registered",
    status_filter: str = "all",
    query: Optional[str] = None,
) -> List[AccountSummary]:
    """
    Accounts table. `registered` = registration complete, `invitations` =
    registration pending. Status filter uses derived access status; search
    matches name, city and state.
    """
    require(tab in ACCOUNT_TABS, f"tab must be one of {', '.join(ACCOUNT_TABS)}")
    require(
        status_filter in ACCOUNT_STATUS_FILTERS,
        f"status must be one of {', '.join(ACCOUNT_STATUS_FILTERS)}",
    )
    wanted = RegistrationStatus.COMPLETE if tab == "registered" else RegistrationStatus.PENDING
    items = [s for s in summaries if s.registration_status == wanted]

    if status_filter != "all":
        items = [s for s in items if s.access_status == AccessStatus(status_filter)]

    q = (query or "").strip().lower()
    if q:
        items = [s for s in items if _matches(q, s.name, s.city, s.state)]
    return items


def paginate(items: Sequence[AccountSummary], page: int = 1, page_size: int = 10) -> AccountPage:
    require(isinstance(page, int) and page >= 1, "page must be >= 1")
    require(isinstance(page_size, int) and page_size >= 1, "page_size must be >= 1")
    total = len(items)
    start = (page - 1) * page_size
    return AccountPage(
        items=list(items[start : start + page_size]),
        total=total,
        page=page,
        page_size=page_size,
        total_pages=math.ceil(total / page_size),
    )
