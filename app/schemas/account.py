# app/schemas/account.py
from __future__ import annotations

from typing import List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, conint, constr

from app.schemas.credential import CredentialRecord
from app.schemas.enums import AccessStatus, RegistrationStatus


class AccountRecord(BaseModel):
    """Immutable view of one account as delivered by a record source."""

    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: str
    name: str
    location_count: conint(ge=0) = 0
    access_status: AccessStatus = AccessStatus.FAIL
    registration_status: RegistrationStatus = RegistrationStatus.COMPLETE
    city: Optional[str] = None
    state: Optional[str] = None


class AccountCreate(BaseModel):
    id: constr(strip_whitespace=True, min_length=1, max_length=64)
    name: constr(strip_whitespace=True, min_length=1, max_length=255)
    location_count: conint(ge=0) = 0
    access_status: AccessStatus = AccessStatus.FAIL
    registration_status: RegistrationStatus = RegistrationStatus.COMPLETE
    city: Optional[constr(strip_whitespace=True, max_length=120)] = None
    state: Optional[constr(strip_whitespace=True, max_length=60)] = None


class AccountSummary(AccountRecord):
    # access_status here is the derived one
    stored_access_status: AccessStatus
    blocking_count: int = 0


class AccountDetail(AccountSummary):
    blocking_credentials: Tuple[CredentialRecord, ...] = ()
    compliant_credentials: Tuple[CredentialRecord, ...] = ()
    total_required_credentials: int = 0


class AffectedAccount(BaseModel):
    model_config = ConfigDict(frozen=True)

    account: AccountRecord
    access_status: AccessStatus = Field(..., description="Derived from blocking credentials.")
    blocked_by_credential: bool


class CredentialWithAccounts(BaseModel):
    model_config = ConfigDict(frozen=True)

    credential: CredentialRecord
    affected_accounts: Tuple[AffectedAccount, ...] = ()


class AccountPage(BaseModel):
    items: List[AccountSummary]
    total: int
    page: int
    page_size: int
    total_pages: int
