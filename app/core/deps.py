# app/core/deps.py
from fastapi import Depends
from sqlalchemy.orm import Session

from app.db.session import get_db
from app.services.engine import ComplianceEngine
from app.services.records import SqlRecordSource


def get_engine(db: Session = Depends(get_db)) -> ComplianceEngine:
    """Engine bound to this request's DB session."""
    return ComplianceEngine(SqlRecordSource(db))
