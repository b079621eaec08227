# app/services/relationships.py
"""
Joins between credentials and accounts.

The relation only exists as `Credential.required_by`; RequirementIndex turns
one snapshot of it into lookups in both directions. It is rebuilt from every
snapshot and never kept across mutations.

Account access status is derived here: an account fails iff at least one of
its required credentials is blocking (missing or expired). The stored value
from the source is carried alongside as `stored_access_status`.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

from app.schemas.account import (
    AccountDetail,
    AccountRecord,
    AccountSummary,
    AffectedAccount,
    CredentialWithAccounts,
)
from app.schemas.credential import CredentialRecord, EnrichedCredential
from app.schemas.enums import AccessStatus, CredentialStatus
from app.services.priority import priority_score
from app.services.urgency import (
    DateLike,
    as_calendar_date,
    days_until,
    local_today,
    urgency_level,
)

log = logging.getLogger("app.engine")

# Every status must be listed; checked below so a new status cannot slip through
BLOCKING_BY_STATUS: Dict[CredentialStatus, bool] = {
    CredentialStatus.MISSING: True,
    CredentialStatus.EXPIRED: True,
    CredentialStatus.VERIFIED: False,
    CredentialStatus.PENDING: False,
}

_unmapped = set(CredentialStatus) - set(BLOCKING_BY_STATUS)
if _unmapped:  # pragma: no cover
    raise RuntimeError(f"Credential statuses without a blocking rule: {sorted(_unmapped)}")


def is_blocking(status: Union[CredentialStatus, str]) -> bool:
    return BLOCKING_BY_STATUS[CredentialStatus(status)]


def derive_access_status(blocking_credentials: Sequence) -> AccessStatus:
    return AccessStatus.FAIL if blocking_credentials else AccessStatus.PASS


# ---------- index ----------
@dataclass(frozen=True)
class RequirementIndex:
    """account id -> credential ids and credential id -> account ids, snapshot order kept."""

    by_account: Dict[str, Tuple[str, ...]] = field(default_factory=dict)
    by_credential: Dict[str, Tuple[str, ...]] = field(default_factory=dict)

    @classmethod
    def build(cls, credentials: Iterable[CredentialRecord]) -> "RequirementIndex":
        by_account: Dict[str, List[str]] = {}
        by_credential: Dict[str, Tuple[str, ...]] = {}
        for cred in credentials:
            by_credential[cred.id] = tuple(cred.required_by)
            for account_id in cred.required_by:
                by_account.setdefault(account_id, []).append(cred.id)
        return cls(
            by_account={k: tuple(v) for k, v in by_account.items()},
            by_credential=by_credential,
        )

    def credentials_for(self, account_id: str) -> Tuple[str, ...]:
        return self.by_account.get(account_id, ())

    def accounts_for(self, credential_id: str) -> Tuple[str, ...]:
        return self.by_credential.get(credential_id, ())


def _by_id(records: Union[Mapping, Iterable]) -> Mapping:
    if isinstance(records, Mapping):
        return records
    return {r.id: r for r in records}


def _required_credentials(
    account_id: str, index: RequirementIndex, creds_by_id: Mapping
) -> List[CredentialRecord]:
    return [creds_by_id[cid] for cid in index.credentials_for(account_id)]


def _blocking_for(account_id: str, index: RequirementIndex, creds_by_id: Mapping) -> List[CredentialRecord]:
    return [c for c in _required_credentials(account_id, index, creds_by_id) if is_blocking(c.status)]


# ---------- per-account ----------
def account_detail(
    account_id: str,
    credentials: Sequence[CredentialRecord],
    accounts: Union[Mapping, Iterable[AccountRecord]],
    index: Optional[RequirementIndex] = None,
) -> Optional[AccountDetail]:
    """Blocking / compliant split of the credentials an account requires. None if unknown."""
    account = _by_id(accounts).get(account_id)
    if account is None:
        return None

    index = index or RequirementIndex.build(credentials)
    required = _required_credentials(account_id, index, _by_id(credentials))
    blocking = tuple(c for c in required if is_blocking(c.status))
    compliant = tuple(c for c in required if not is_blocking(c.status))

    return AccountDetail(
        **account.model_dump(exclude={"access_status"}),
        access_status=derive_access_status(blocking),
        stored_access_status=account.access_status,
        blocking_count=len(blocking),
        blocking_credentials=blocking,
        compliant_credentials=compliant,
        total_required_credentials=len(required),
    )


def summarize_accounts(
    accounts: Iterable[AccountRecord],
    credentials: Sequence[CredentialRecord],
    index: Optional[RequirementIndex] = None,
) -> List[AccountSummary]:
    index = index or RequirementIndex.build(credentials)
    creds_by_id = _by_id(credentials)
    out: List[AccountSummary] = []
    for account in accounts:
        blocking = _blocking_for(account.id, index, creds_by_id)
        derived = derive_access_status(blocking)
        if derived != account.access_status:
            log.debug(
                "account %s stored access=%s but derived=%s",
                account.id,
                account.access_status.value,
                derived.value,
            )
        out.append(
            AccountSummary(
                **account.model_dump(exclude={"access_status"}),
                access_status=derived,
                stored_access_status=account.access_status,
                blocking_count=len(blocking),
            )
        )
    return out


# ---------- per-credential ----------
def credential_with_accounts(
    credential_id: str,
    credentials: Sequence[CredentialRecord],
    accounts: Union[Mapping, Iterable[AccountRecord]],
    index: Optional[RequirementIndex] = None,
) -> Optional[CredentialWithAccounts]:
    """
    The credential plus every account that requires it. IDs in required_by
    that do not resolve to an account are dropped, not reported.
    """
    creds_by_id = _by_id(credentials)
    credential = creds_by_id.get(credential_id)
    if credential is None:
        return None

    index = index or RequirementIndex.build(creds_by_id.values())
    accounts_by_id = _by_id(accounts)
    blocks = is_blocking(credential.status)

    affected: List[AffectedAccount] = []
    for account_id in credential.required_by:
        account = accounts_by_id.get(account_id)
        if account is None:
            log.debug("credential %s: dropping dangling account %s", credential_id, account_id)
            continue
        affected.append(
            AffectedAccount(
                account=account,
                access_status=derive_access_status(_blocking_for(account_id, index, creds_by_id)),
                blocked_by_credential=blocks,
            )
        )

    return CredentialWithAccounts(credential=credential, affected_accounts=tuple(affected))


def enrich_credential(
    credential: CredentialRecord,
    accounts: Union[Mapping, Iterable[AccountRecord]],
    today: DateLike = None,
) -> EnrichedCredential:
    accounts_by_id = _by_id(accounts)
    days = days_until(credential.expiration_date, today)
    impact = len(credential.required_by)
    names = tuple(
        accounts_by_id[aid].name for aid in credential.required_by if aid in accounts_by_id
    )
    return EnrichedCredential(
        **credential.model_dump(),
        impact_score=impact,
        days_remaining=days,
        priority_score=priority_score(days, impact),
        urgency_level=urgency_level(days),
        affected_account_names=names,
    )


def enrich_credentials(
    credentials: Iterable[CredentialRecord],
    accounts: Union[Mapping, Iterable[AccountRecord]],
    today: DateLike = None,
) -> List[EnrichedCredential]:
    accounts_by_id = _by_id(accounts)
    # one "today" for the whole batch
    ref = as_calendar_date(today) or local_today()
    return [enrich_credential(c, accounts_by_id, ref) for c in credentials]
