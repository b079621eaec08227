# app/services/records.py
"""
Record sources feed snapshots to the engine.

A record source exposes two reads and one write. The write (a document
submission) must replace the credential by id atomically so that a
concurrent reader sees either the old record or the new one.
"""
from __future__ import annotations

import logging
import os
import threading
from typing import Dict, Iterable, Optional, Protocol, Tuple

from sqlalchemy.orm import Session

from app.crud import account as account_crud
from app.crud import credential as credential_crud
from app.schemas.account import AccountRecord
from app.schemas.credential import CredentialRecord, DocumentSubmission
from app.schemas.enums import CredentialStatus

log = logging.getLogger("app.records")


class RecordSource(Protocol):
    def fetch_credentials(self) -> Tuple[CredentialRecord, ...]: ...

    def fetch_accounts(self) -> Tuple[AccountRecord, ...]: ...

    def submit_document(
        self, credential_id: str, submission: DocumentSubmission
    ) -> Optional[CredentialRecord]: ...


# Stored names are prefixed with the credential id and an upload stamp; the
# client part stays well under the usual 255-byte filesystem limit.
MAX_FILENAME_BYTES = 120


def _clip_utf8(value: str, limit: int) -> str:
    return value.encode("utf-8")[:limit].decode("utf-8", "ignore")


def safe_filename(name: str) -> str:
    cleaned = (name or "document").strip().replace("/", "_").replace("\\", "_") or "document"
    if len(cleaned.encode("utf-8")) <= MAX_FILENAME_BYTES:
        return cleaned
    stem, ext = os.path.splitext(cleaned)
    ext = _clip_utf8(ext, 16)
    return _clip_utf8(stem, MAX_FILENAME_BYTES - len(ext.encode("utf-8"))) + ext


def submitted_document_url(credential_id: str, submission: DocumentSubmission) -> str:
    if submission.storage_url:
        return submission.storage_url
    return f"/documents/uploaded-{credential_id}-{safe_filename(submission.filename)}"


def apply_submission(credential: CredentialRecord, submission: DocumentSubmission) -> CredentialRecord:
    """New record: pending verification, pointing at the submitted document."""
    return credential.model_copy(
        update={
            "status": CredentialStatus.PENDING,
            "document_url": submitted_document_url(credential.id, submission),
        }
    )


# ---------- in-memory ----------
class InMemoryRecordSource:
    """
    Snapshot store held in process memory. Reads return tuples of frozen
    records taken under the lock; the only write swaps a whole record.
    """

    def __init__(
        self,
        credentials: Iterable[CredentialRecord] = (),
        accounts: Iterable[AccountRecord] = (),
    ):
        self._lock = threading.Lock()
        self._credentials: Dict[str, CredentialRecord] = {c.id: c for c in credentials}
        self._accounts: Tuple[AccountRecord, ...] = tuple(accounts)

    def fetch_credentials(self) -> Tuple[CredentialRecord, ...]:
        with self._lock:
            return tuple(self._credentials.values())

    def fetch_accounts(self) -> Tuple[AccountRecord, ...]:
        return self._accounts

    def replace_credential(self, record: CredentialRecord) -> Optional[CredentialRecord]:
        """Replace by id. Unknown ids are left alone and yield None."""
        with self._lock:
            if record.id not in self._credentials:
                return None
            self._credentials[record.id] = record
        return record

    def submit_document(
        self, credential_id: str, submission: DocumentSubmission
    ) -> Optional[CredentialRecord]:
        with self._lock:
            current = self._credentials.get(credential_id)
            if current is None:
                return None
            updated = apply_submission(current, submission)
            self._credentials[credential_id] = updated
        log.info(
            "document submitted for credential %s (%s -> %s)",
            credential_id,
            current.status.value,
            updated.status.value,
        )
        return updated


# ---------- SQL ----------
class SqlRecordSource:
    """Record source over the SQLAlchemy session of the current request."""

    def __init__(self, db: Session):
        self.db = db

    def fetch_credentials(self) -> Tuple[CredentialRecord, ...]:
        return tuple(
            CredentialRecord.model_validate(obj)
            for obj in credential_crud.list_credentials(self.db)
        )

    def fetch_accounts(self) -> Tuple[AccountRecord, ...]:
        return tuple(
            AccountRecord.model_validate(obj) for obj in account_crud.list_accounts(self.db)
        )

    def submit_document(
        self, credential_id: str, submission: DocumentSubmission
    ) -> Optional[CredentialRecord]:
        obj = credential_crud.record_document_submission(
            self.db, credential_id, submitted_document_url(credential_id, submission)
        )
        if obj is None:
            return None
        log.info("document submitted for credential %s -> %s", credential_id, obj.status)
        return CredentialRecord.model_validate(obj)
