# app/crud/account.py
from typing import List, Optional

from sqlalchemy.orm import Session

from app.models.account import Account
from app.schemas.account import AccountCreate


def get_account(db: Session, account_id: str) -> Optional[Account]:
    return db.query(Account).filter(Account.id == account_id).first()


def list_accounts(db: Session) -> List[Account]:
    return db.query(Account).order_by(Account.id.asc()).all()


def create_account(db: Session, payload: AccountCreate) -> Account:
    obj = Account(
        id=payload.id,
        name=payload.name,
        location_count=payload.location_count,
        access_status=payload.access_status.value,
        registration_status=payload.registration_status.value,
        city=payload.city,
        state=payload.state,
    )
    db.add(obj)
    db.commit()
    db.refresh(obj)
    return obj
