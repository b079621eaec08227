# app/schemas/dashboard.py
from typing import List

from pydantic import BaseModel

from app.schemas.credential import EnrichedCredential


class CredentialStats(BaseModel):
    total: int = 0
    compliant: int = 0
    non_compliant: int = 0
    expiring_soon: int = 0


class RenewalGroup(BaseModel):
    label: str
    credentials: List[EnrichedCredential]


class AccountHealth(BaseModel):
    pass_count: int = 0
    fail_count: int = 0
    total: int = 0
    pass_percent: int = 0  # rounded, 0 when there are no accounts
