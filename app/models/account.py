# app/models/account.py
from datetime import datetime

from sqlalchemy import CheckConstraint, Column, DateTime, Index, Integer, String

from app.db.base import Base
from app.schemas.enums import AccessStatus, RegistrationStatus, values_of

ACCESS_STATUS = values_of(AccessStatus)
REGISTRATION_STATUS = values_of(RegistrationStatus)


class Account(Base):
    """
    A facility whose access depends on the credentials it requires.
    `access_status` is the value delivered by the source data; the engine
    derives its own from blocking credentials and reports both.
    """

    __tablename__ = "accounts"

    id = Column(String(64), primary_key=True)

    name = Column(String(255), nullable=False, index=True)
    location_count = Column(Integer, nullable=False, default=0)

    # pass | fail
    access_status = Column(String(10), nullable=False, default="fail", index=True)
    # complete | pending  (pending = open invitation)
    registration_status = Column(String(20), nullable=False, default="complete", index=True)

    city = Column(String(120), nullable=True)
    state = Column(String(60), nullable=True)

    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    __table_args__ = (
        CheckConstraint("location_count >= 0", name="ck_accounts_location_count_positive"),
        CheckConstraint(
            f"access_status IN {ACCESS_STATUS}",
            name="ck_accounts_access_status_allowed",
        ),
        CheckConstraint(
            f"registration_status IN {REGISTRATION_STATUS}",
            name="ck_accounts_registration_status_allowed",
        ),
        Index("ix_accounts_registration_access", "registration_status", "access_status"),
    )

    def __repr__(self) -> str:
        return f"<Account id={self.id} name={self.name!r} access={self.access_status}>"
