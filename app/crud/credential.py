# app/crud/credential.py
from datetime import datetime
from typing import List, Optional

from sqlalchemy import update
from sqlalchemy.orm import Session

from app.models.credential import Credential, CredentialRequirement
from app.schemas.credential import CredentialCreate
from app.schemas.enums import CredentialStatus


def get_credential(db: Session, credential_id: str) -> Optional[Credential]:
    return db.query(Credential).filter(Credential.id == credential_id).first()


def list_credentials(db: Session) -> List[Credential]:
    # requirements are loaded with selectin, so no N+1 here
    return db.query(Credential).order_by(Credential.id.asc()).all()


def create_credential(db: Session, payload: CredentialCreate) -> Credential:
    obj = Credential(
        id=payload.id,
        name=payload.name,
        description=payload.description,
        category=payload.category.value,
        status=payload.status.value,
        expiration_date=payload.expiration_date,
        document_url=payload.document_url,
    )
    seen = set()
    for position, account_id in enumerate(payload.required_by):
        if account_id in seen:
            continue
        seen.add(account_id)
        obj.requirements.append(
            CredentialRequirement(account_id=account_id, position=position)
        )
    db.add(obj)
    db.commit()
    db.refresh(obj)
    return obj


def record_document_submission(
    db: Session, credential_id: str, document_url: str
) -> Optional[Credential]:
    """
    Move a credential to 'pending' and point it at the submitted document.
    Single UPDATE in one transaction: readers see the old row or the new one.
    Returns None if the credential does not exist.
    """
    try:
        result = db.execute(
            update(Credential)
            .where(Credential.id == credential_id)
            .values(
                status=CredentialStatus.PENDING.value,
                document_url=document_url,
                updated_at=datetime.utcnow(),
            )
        )
        if result.rowcount == 0:
            db.rollback()
            return None
        db.commit()
    except Exception:
        db.rollback()
        raise
    return get_credential(db, credential_id)
