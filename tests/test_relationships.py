import logging

import pytest

from app.schemas.enums import AccessStatus, CredentialStatus, UrgencyLevel
from app.services.relationships import (
    BLOCKING_BY_STATUS,
    RequirementIndex,
    account_detail,
    credential_with_accounts,
    derive_access_status,
    enrich_credential,
    enrich_credentials,
    is_blocking,
    summarize_accounts,
)

from conftest import TODAY, make_account, make_credential


class TestBlockingRules:
    def test_every_status_has_a_rule(self):
        assert set(BLOCKING_BY_STATUS) == set(CredentialStatus)

    @pytest.mark.parametrize(
        "status,blocks",
        [("missing", True), ("expired", True), ("verified", False), ("pending", False)],
    )
    def test_blocking_statuses(self, status, blocks):
        assert is_blocking(status) is blocks
        assert is_blocking(CredentialStatus(status)) is blocks

    def test_unknown_status_is_rejected(self):
        with pytest.raises(ValueError):
            is_blocking("revoked")

    def test_derived_access(self):
        assert derive_access_status([]) == AccessStatus.PASS
        assert derive_access_status(["anything"]) == AccessStatus.FAIL


class TestRequirementIndex:
    def test_both_directions_keep_snapshot_order(self, credentials):
        index = RequirementIndex.build(credentials)
        assert index.credentials_for("A1") == ("C1", "C2", "C4")
        assert index.credentials_for("A3") == ("C3", "C4", "C5", "C6")
        assert index.accounts_for("C5") == ("A3", "GHOST")

    def test_unknown_ids_are_empty(self, credentials):
        index = RequirementIndex.build(credentials)
        assert index.credentials_for("nope") == ()
        assert index.accounts_for("nope") == ()

    def test_duplicate_required_by_entries_collapse(self):
        cred = make_credential("D", "missing", required_by=["A1", "A1", "A2"])
        assert cred.required_by == ("A1", "A2")
        assert RequirementIndex.build([cred]).credentials_for("A1") == ("D",)


class TestAccountDetail:
    def test_blocking_and_compliant_split(self, credentials, accounts):
        detail = account_detail("A1", credentials, accounts)

        assert [c.id for c in detail.blocking_credentials] == ["C1", "C2"]
        assert [c.id for c in detail.compliant_credentials] == ["C4"]
        assert detail.total_required_credentials == 3
        assert detail.blocking_count == 2
        assert detail.access_status == AccessStatus.FAIL

    def test_derived_status_wins_over_stored(self, credentials, accounts):
        detail = account_detail("A3", credentials, accounts)
        # stored fail, but nothing blocking
        assert detail.stored_access_status == AccessStatus.FAIL
        assert detail.access_status == AccessStatus.PASS
        assert detail.blocking_credentials == ()

    def test_account_without_requirements(self, credentials, accounts):
        detail = account_detail("I1", credentials, accounts)
        assert detail.total_required_credentials == 0
        assert detail.access_status == AccessStatus.PASS

    def test_unknown_account_is_none(self, credentials, accounts):
        assert account_detail("missing-account", credentials, accounts) is None


class TestCredentialWithAccounts:
    def test_affected_accounts_in_required_by_order(self, credentials, accounts):
        result = credential_with_accounts("C1", credentials, accounts)
        assert result.credential.id == "C1"
        assert [a.account.id for a in result.affected_accounts] == ["A1", "A2"]
        assert all(a.blocked_by_credential for a in result.affected_accounts)
        assert all(a.access_status == AccessStatus.FAIL for a in result.affected_accounts)

    def test_dangling_account_ids_are_dropped(self, credentials, accounts, caplog):
        with caplog.at_level(logging.DEBUG, logger="app.engine"):
            result = credential_with_accounts("C5", credentials, accounts)
        assert [a.account.id for a in result.affected_accounts] == ["A3"]
        assert result.affected_accounts[0].blocked_by_credential is False
        assert "GHOST" in caplog.text

    def test_unknown_credential_is_none(self, credentials, accounts):
        assert credential_with_accounts("C404", credentials, accounts) is None

    def test_agrees_with_account_detail(self, credentials, accounts):
        """Both joins must tell the same story for every pair."""
        for cred in credentials:
            joined = credential_with_accounts(cred.id, credentials, accounts)
            for affected in joined.affected_accounts:
                detail = account_detail(affected.account.id, credentials, accounts)
                blocking_ids = {c.id for c in detail.blocking_credentials}
                compliant_ids = {c.id for c in detail.compliant_credentials}
                assert cred.id in blocking_ids | compliant_ids
                assert (cred.id in blocking_ids) == affected.blocked_by_credential
                assert affected.access_status == detail.access_status


class TestSummaries:
    def test_summaries_carry_derived_and_stored_status(self, credentials, accounts):
        by_id = {s.id: s for s in summarize_accounts(accounts, credentials)}

        assert by_id["A1"].access_status == AccessStatus.FAIL
        assert by_id["A1"].blocking_count == 2
        assert by_id["A2"].access_status == AccessStatus.FAIL
        assert by_id["A2"].stored_access_status == AccessStatus.PASS
        assert by_id["A3"].access_status == AccessStatus.PASS
        assert by_id["A3"].blocking_count == 0

    def test_drift_is_logged(self, credentials, accounts, caplog):
        with caplog.at_level(logging.DEBUG, logger="app.engine"):
            summarize_accounts(accounts, credentials)
        assert "account A3 stored access=fail but derived=pass" in caplog.text


class TestEnrichment:
    def test_scenario_missing_credential(self, accounts):
        cred = make_credential("C1", "missing", 5, ["A1", "A2"])
        e = enrich_credential(cred, accounts, TODAY)

        assert e.impact_score == 2
        assert e.days_remaining == 5
        assert e.priority_score == pytest.approx(40.0)
        assert e.urgency_level == UrgencyLevel.CRITICAL
        assert e.affected_account_names == ("Mercy General", "St. Luke's")

    def test_scenario_expired_credential(self, accounts):
        e = enrich_credential(make_credential("C2", "expired", -3, ["A1"]), accounts, TODAY)
        assert e.days_remaining == -3
        assert e.priority_score == 10000

    def test_impact_counts_dangling_ids_but_names_skip_them(self, credentials, accounts):
        c5 = next(c for c in credentials if c.id == "C5")
        e = enrich_credential(c5, accounts, TODAY)
        assert e.impact_score == 2
        assert e.affected_account_names == ("Riverside Health",)

    def test_enrichment_is_idempotent(self, credentials, accounts):
        first = enrich_credentials(credentials, accounts, TODAY)
        second = enrich_credentials(credentials, accounts, TODAY)
        assert first == second
        # inputs stay untouched
        assert [c.id for c in first] == [c.id for c in credentials]
        assert credentials[0].status == CredentialStatus.MISSING

    def test_no_accounts_at_all(self, credentials):
        enriched = enrich_credentials(credentials, [], TODAY)
        assert all(e.affected_account_names == () for e in enriched)

    def test_account_lookup_accepts_mapping(self):
        accounts = {"Z": make_account("Z", "Zeta")}
        e = enrich_credential(make_credential("Q", required_by=["Z"]), accounts, TODAY)
        assert e.affected_account_names == ("Zeta",)
