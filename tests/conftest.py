"""
Pytest fixtures.

Every test runs against a fixed TODAY so day counts are deterministic.
HTTP tests use an in-memory SQLite database shared through StaticPool.
"""
import os

# must be set before app.main / app.db.session are imported
os.environ.setdefault("ENABLE_CREATE_ALL", "0")
os.environ.setdefault("SEED_DEMO_DATA", "0")
os.environ.setdefault("DATABASE_URL", "sqlite://")

from datetime import date, timedelta
from typing import Iterable, Optional

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.db.base import Base
from app.models import account, credential  # noqa: F401
from app.schemas.account import AccountRecord
from app.schemas.credential import CredentialRecord
from app.services.engine import ComplianceEngine
from app.services.records import InMemoryRecordSource, SqlRecordSource

TODAY = date(2026, 3, 2)


# =============================================================================
# RECORD BUILDERS
# =============================================================================

def make_credential(
    cid: str,
    status: str = "verified",
    days: Optional[int] = None,
    required_by: Iterable[str] = (),
    category: str = "document",
    name: Optional[str] = None,
    description: Optional[str] = None,
) -> CredentialRecord:
    return CredentialRecord(
        id=cid,
        name=name or f"Credential {cid}",
        category=category,
        status=status,
        expiration_date=TODAY + timedelta(days=days) if days is not None else None,
        required_by=tuple(required_by),
        description=description,
    )


def make_account(
    aid: str,
    name: Optional[str] = None,
    access_status: str = "pass",
    registration_status: str = "complete",
    city: Optional[str] = None,
    state: Optional[str] = None,
) -> AccountRecord:
    return AccountRecord(
        id=aid,
        name=name or f"Account {aid}",
        location_count=1,
        access_status=access_status,
        registration_status=registration_status,
        city=city,
        state=state,
    )


# =============================================================================
# IN-MEMORY SNAPSHOT
# =============================================================================

@pytest.fixture
def accounts():
    return [
        make_account("A1", "Mercy General", access_status="pass", city="Columbus", state="OH"),
        make_account("A2", "St. Luke's", access_status="pass", city="Boise", state="ID"),
        make_account("A3", "Riverside Health", access_status="fail", city="Tampa", state="FL"),
        make_account("I1", "Harbor Point", access_status="fail", registration_status="pending"),
    ]


@pytest.fixture
def credentials():
    return [
        make_credential("C1", "missing", 5, ["A1", "A2"], name="Background Check Policy", category="policy"),
        make_credential("C2", "expired", -3, ["A1"], name="HIPAA Attestation", category="policy"),
        make_credential("C3", "verified", 12, ["A2", "A3"], name="Liability Insurance"),
        make_credential("C4", "verified", None, ["A1", "A2", "A3"], name="W-9 Form"),
        make_credential("C5", "pending", 20, ["A3", "GHOST"], name="Vaccination Records"),
        make_credential("C6", "verified", 90, ["A3"], name="Recall Policy", category="policy"),
    ]


@pytest.fixture
def source(credentials, accounts):
    return InMemoryRecordSource(credentials, accounts)


@pytest.fixture
def engine(source):
    return ComplianceEngine(source, today_provider=lambda: TODAY)


# =============================================================================
# DATABASE / HTTP
# =============================================================================

@pytest.fixture
def db_session():
    db_engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        future=True,
    )
    Base.metadata.create_all(bind=db_engine)
    Session = sessionmaker(bind=db_engine, autocommit=False, autoflush=False, future=True)
    db = Session()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=db_engine)
        db_engine.dispose()


@pytest.fixture
def seeded_db(db_session):
    from app.db.seed import seed_demo_records

    seed_demo_records(db_session, today=TODAY)
    return db_session


@pytest.fixture
def client(seeded_db, tmp_path, monkeypatch):
    monkeypatch.setenv("DOC_STORAGE_DIR", str(tmp_path / "docs"))

    from app.core.deps import get_engine
    from app.db.session import get_db
    from app.main import app

    app.dependency_overrides[get_db] = lambda: seeded_db
    app.dependency_overrides[get_engine] = lambda: ComplianceEngine(
        SqlRecordSource(seeded_db), today_provider=lambda: TODAY
    )
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
