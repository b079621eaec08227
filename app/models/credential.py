# app/models/credential.py
from datetime import datetime

from sqlalchemy import (
    CheckConstraint,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import relationship

from app.db.base import Base
from app.schemas.enums import CredentialCategory, CredentialStatus, values_of

CREDENTIAL_STATUS = values_of(CredentialStatus)
CREDENTIAL_CATEGORY = values_of(CredentialCategory)


class CredentialRequirement(Base):
    """
    One edge of the credential -> account relation (`required_by`).
    account_id is deliberately NOT a foreign key: requirements may point at
    accounts that no longer exist and readers filter those out.
    """

    __tablename__ = "credential_requirements"

    credential_id = Column(
        String(64),
        ForeignKey("credentials.id", ondelete="CASCADE"),
        primary_key=True,
    )
    account_id = Column(String(64), primary_key=True, index=True)

    # keeps the display order of required_by
    position = Column(Integer, nullable=False, default=0)


class Credential(Base):
    __tablename__ = "credentials"

    id = Column(String(64), primary_key=True)

    name = Column(String(255), nullable=False, index=True)
    description = Column(Text, nullable=True)

    # document | policy
    category = Column(String(20), nullable=False, default="document", index=True)

    # verified | missing | expired | pending
    status = Column(String(20), nullable=False, default="missing", index=True)

    # calendar date only; NULL = never lapses
    expiration_date = Column(Date, nullable=True, index=True)

    # reference to the last submitted document
    document_url = Column(Text, nullable=True)

    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    requirements = relationship(
        CredentialRequirement,
        order_by=CredentialRequirement.position,
        cascade="all, delete-orphan",
        passive_deletes=True,
        lazy="selectin",
    )

    __table_args__ = (
        CheckConstraint(
            f"status IN {CREDENTIAL_STATUS}",
            name="ck_credentials_status_allowed",
        ),
        CheckConstraint(
            f"category IN {CREDENTIAL_CATEGORY}",
            name="ck_credentials_category_allowed",
        ),
        Index("ix_credentials_status_expiration", "status", "expiration_date"),
    )

    @property
    def required_by(self) -> list:
        return [r.account_id for r in self.requirements]

    def __repr__(self) -> str:
        return f"<Credential id={self.id} name={self.name!r} status={self.status} expires={self.expiration_date}>"
