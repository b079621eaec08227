# app/services/engine.py
"""
Compliance engine: the caller-facing boundary over a record source.

Stateless: every getter fetches a fresh snapshot, computes, and forgets.
Unknown ids give None; malformed arguments raise InvalidArgument.
"""
from __future__ import annotations

import logging
from datetime import date
from typing import Callable, List, Optional

from app.core import config
from app.schemas.account import AccountDetail, AccountPage, CredentialWithAccounts
from app.schemas.credential import CredentialRecord, DocumentSubmission, EnrichedCredential
from app.schemas.dashboard import AccountHealth, CredentialStats, RenewalGroup
from app.schemas.enums import CredentialCategory
from app.services import dashboard, relationships, renewals
from app.services.records import RecordSource
from app.services.urgency import local_today

log = logging.getLogger("app.engine")


class ComplianceEngine:
    def __init__(
        self,
        source: RecordSource,
        today_provider: Callable[[], date] = local_today,
        expiring_soon_days: Optional[int] = None,
    ):
        self.source = source
        self.today_provider = today_provider
        self.expiring_soon_days = (
            config.EXPIRING_SOON_DAYS if expiring_soon_days is None else expiring_soon_days
        )

    # ---- enrichment ----
    def get_enriched_credentials(self) -> List[EnrichedCredential]:
        return relationships.enrich_credentials(
            self.source.fetch_credentials(),
            self.source.fetch_accounts(),
            self.today_provider(),
        )

    def get_credential(self, credential_id: str) -> Optional[EnrichedCredential]:
        for cred in self.get_enriched_credentials():
            if cred.id == credential_id:
                return cred
        return None

    # ---- dashboard ----
    def get_stats(self) -> CredentialStats:
        return dashboard.compute_stats(
            self.source.fetch_credentials(),
            as_of=self.today_provider(),
            window_days=self.expiring_soon_days,
        )

    def get_action_items(self, limit: int = config.ACTION_QUEUE_LIMIT) -> List[EnrichedCredential]:
        return dashboard.action_items(self.get_enriched_credentials(), limit)

    def get_expiring_credentials(
        self, within_days: int = config.RENEWAL_WINDOW_DAYS
    ) -> List[EnrichedCredential]:
        return dashboard.expiring_soon(self.get_enriched_credentials(), within_days)

    def get_renewal_groups(
        self, within_days: int = config.RENEWAL_WINDOW_DAYS
    ) -> List[RenewalGroup]:
        return renewals.group_by_week(self.get_expiring_credentials(within_days))

    def get_account_health(self) -> AccountHealth:
        summaries = relationships.summarize_accounts(
            self.source.fetch_accounts(), self.source.fetch_credentials()
        )
        registered = dashboard.filter_accounts(summaries, tab="registered")
        return dashboard.account_health(registered)

    # ---- relationships ----
    def get_account_detail(self, account_id: str) -> Optional[AccountDetail]:
        return relationships.account_detail(
            account_id, self.source.fetch_credentials(), self.source.fetch_accounts()
        )

    def get_credential_with_accounts(self, credential_id: str) -> Optional[CredentialWithAccounts]:
        return relationships.credential_with_accounts(
            credential_id, self.source.fetch_credentials(), self.source.fetch_accounts()
        )

    # ---- lists ----
    def list_credentials(
        self,
        *,
        category: Optional[CredentialCategory] = None,
        status_filter: str = "all",
        query: Optional[str] = None,
    ) -> List[EnrichedCredential]:
        return dashboard.filter_credentials(
            self.get_enriched_credentials(),
            category=category,
            status_filter=status_filter,
            query=query,
            expiring_within_days=self.expiring_soon_days,
        )

    def list_accounts(
        self,
        *,
        tab: str = "registered",
        status_filter: str = "all",
        query: Optional[str] = None,
        page: int = 1,
        page_size: int = config.ACCOUNTS_PAGE_SIZE,
    ) -> AccountPage:
        summaries = relationships.summarize_accounts(
            self.source.fetch_accounts(), self.source.fetch_credentials()
        )
        filtered = dashboard.filter_accounts(
            summaries, tab=tab, status_filter=status_filter, query=query
        )
        return dashboard.paginate(filtered, page, page_size)

    # ---- mutation ----
    def submit_document(
        self, credential_id: str, submission: DocumentSubmission
    ) -> Optional[CredentialRecord]:
        updated = self.source.submit_document(credential_id, submission)
        if updated is None:
            log.info("document submission for unknown credential %s", credential_id)
        return updated
