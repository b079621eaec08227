from datetime import timedelta

import pytest
from sqlalchemy.exc import IntegrityError

from app.crud import account as account_crud
from app.crud import credential as credential_crud
from app.db.seed import DEMO_ACCOUNTS, DEMO_CREDENTIALS, seed_demo_records
from app.models.credential import Credential
from app.schemas.account import AccountCreate
from app.schemas.credential import CredentialCreate, DocumentSubmission
from app.schemas.enums import AccessStatus, CredentialStatus
from app.services.engine import ComplianceEngine
from app.services.records import SqlRecordSource

from conftest import TODAY


class TestSeed:
    def test_seed_is_idempotent(self, db_session):
        created = seed_demo_records(db_session, today=TODAY)
        assert created == len(DEMO_ACCOUNTS) + len(DEMO_CREDENTIALS)
        assert seed_demo_records(db_session, today=TODAY) == 0

    def test_default_today_follows_app_timezone(self, db_session, monkeypatch):
        from app.db import seed

        monkeypatch.setattr(seed, "local_today", lambda: TODAY)
        seed.seed_demo_records(db_session)
        cred = credential_crud.get_credential(db_session, "cred-01")
        assert cred.expiration_date == TODAY + timedelta(days=12)

    def test_expirations_are_relative_to_today(self, seeded_db):
        cred = credential_crud.get_credential(seeded_db, "cred-05")
        assert cred.expiration_date == TODAY - timedelta(days=3)
        assert credential_crud.get_credential(seeded_db, "cred-03").expiration_date is None


class TestCrud:
    def test_required_by_keeps_insert_order_and_dedupes(self, db_session):
        obj = credential_crud.create_credential(
            db_session,
            CredentialCreate(id="x", name="X", required_by=["b", "a", "b", "c"]),
        )
        assert obj.required_by == ["b", "a", "c"]

    def test_dangling_account_ids_are_stored(self, db_session):
        obj = credential_crud.create_credential(
            db_session, CredentialCreate(id="x", name="X", required_by=["not-an-account"])
        )
        assert obj.required_by == ["not-an-account"]

    def test_status_check_constraint(self, db_session):
        db_session.add(Credential(id="bad", name="Bad", category="document", status="revoked"))
        with pytest.raises(IntegrityError):
            db_session.commit()
        db_session.rollback()

    def test_list_accounts_ordered_by_id(self, db_session):
        for aid in ("b", "a"):
            account_crud.create_account(db_session, AccountCreate(id=aid, name=aid.upper()))
        assert [a.id for a in account_crud.list_accounts(db_session)] == ["a", "b"]

    def test_document_submission_unknown_id(self, db_session):
        assert credential_crud.record_document_submission(db_session, "nope", "/x") is None


class TestSqlRecordSource:
    def test_snapshot_records(self, seeded_db):
        source = SqlRecordSource(seeded_db)
        creds = source.fetch_credentials()
        accounts = source.fetch_accounts()

        assert [c.id for c in creds][:3] == ["cred-01", "cred-02", "cred-03"]
        assert creds[0].required_by == ("acc-01", "acc-02", "acc-03")
        assert len(accounts) == len(DEMO_ACCOUNTS)
        assert creds[3].status == CredentialStatus.MISSING

    def test_submit_document(self, seeded_db):
        source = SqlRecordSource(seeded_db)
        updated = source.submit_document("cred-04", DocumentSubmission(filename="bg.pdf"))

        assert updated.status == CredentialStatus.PENDING
        assert updated.document_url == "/documents/uploaded-cred-04-bg.pdf"
        assert updated.required_by == ("acc-01", "acc-03")
        assert source.submit_document("nope", DocumentSubmission(filename="bg.pdf")) is None

    def test_engine_over_database(self, seeded_db):
        engine = ComplianceEngine(SqlRecordSource(seeded_db), today_provider=lambda: TODAY)
        stats = engine.get_stats()
        assert (stats.total, stats.compliant, stats.non_compliant, stats.expiring_soon) == (10, 6, 4, 3)

        assert engine.get_account_detail("acc-01").access_status == AccessStatus.FAIL
        engine.submit_document("cred-04", DocumentSubmission(filename="bg.pdf"))

        acc = engine.get_account_detail("acc-01")
        assert acc.access_status == AccessStatus.PASS
        assert acc.stored_access_status == AccessStatus.FAIL
        assert engine.get_credential("cred-04").impact_score == 2
