# app/schemas/credential.py
from __future__ import annotations

from datetime import date
from typing import List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, conint, constr, field_validator

from app.schemas.enums import CredentialCategory, CredentialStatus, UrgencyLevel


def _unique_in_order(values) -> Tuple[str, ...]:
    seen = set()
    out = []
    for v in values or ():
        v = str(v)
        if v not in seen:
            seen.add(v)
            out.append(v)
    return tuple(out)


# -----------------------------
# Snapshot record (what the engine reads)
# -----------------------------
class CredentialRecord(BaseModel):
    """Immutable view of one credential as delivered by a record source."""

    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: str
    name: str
    category: CredentialCategory
    status: CredentialStatus
    expiration_date: Optional[date] = None
    required_by: Tuple[str, ...] = Field(
        default=(), description="Account IDs that require this credential."
    )
    document_url: Optional[str] = None
    description: Optional[str] = None

    @field_validator("required_by", mode="before")
    @classmethod
    def _dedupe_required_by(cls, v):
        return _unique_in_order(v)


# -----------------------------
# Create / submit
# -----------------------------
class CredentialCreate(BaseModel):
    id: constr(strip_whitespace=True, min_length=1, max_length=64)
    name: constr(strip_whitespace=True, min_length=1, max_length=255)
    category: CredentialCategory = CredentialCategory.DOCUMENT
    status: CredentialStatus = CredentialStatus.MISSING
    expiration_date: Optional[date] = None
    required_by: List[constr(strip_whitespace=True, min_length=1, max_length=64)] = Field(
        default_factory=list
    )
    document_url: Optional[str] = None
    description: Optional[str] = None


class DocumentSubmission(BaseModel):
    """Metadata of an uploaded document; the bytes themselves live elsewhere."""

    filename: constr(strip_whitespace=True, min_length=1, max_length=255)
    content_type: Optional[constr(strip_whitespace=True, max_length=120)] = None
    size_bytes: Optional[conint(ge=0)] = None
    storage_url: Optional[str] = Field(
        default=None, description="Where the stored file can be fetched from."
    )


# -----------------------------
# Derived views
# -----------------------------
class EnrichedCredential(CredentialRecord):
    impact_score: int = Field(..., description="Number of accounts requiring it.")
    days_remaining: Optional[int] = Field(
        None, description="Calendar days until expiration; negative when overdue."
    )
    priority_score: float = 0.0
    urgency_level: UrgencyLevel = UrgencyLevel.OK
    affected_account_names: Tuple[str, ...] = ()


class ActionItem(BaseModel):
    credential: EnrichedCredential
    urgency_label: str
    impact_label: str
