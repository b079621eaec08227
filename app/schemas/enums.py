# app/schemas/enums.py
from enum import Enum


class CredentialStatus(str, Enum):
    VERIFIED = "verified"
    MISSING = "missing"
    EXPIRED = "expired"
    PENDING = "pending"


class CredentialCategory(str, Enum):
    DOCUMENT = "document"
    POLICY = "policy"


class AccessStatus(str, Enum):
    PASS = "pass"
    FAIL = "fail"


class RegistrationStatus(str, Enum):
    COMPLETE = "complete"
    PENDING = "pending"


class UrgencyLevel(str, Enum):
    CRITICAL = "critical"
    WARNING = "warning"
    ATTENTION = "attention"
    OK = "ok"


def values_of(enum_cls) -> tuple:
    """Tuple of raw values, used for SQL CHECK constraints."""
    return tuple(member.value for member in enum_cls)
