# app/api/v1/credentials.py
from __future__ import annotations

import logging
import os
import uuid
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile, status

from app.core.config import doc_storage_dir
from app.core.deps import get_engine
from app.schemas.account import CredentialWithAccounts
from app.schemas.credential import CredentialRecord, DocumentSubmission, EnrichedCredential
from app.schemas.enums import CredentialCategory
from app.services.engine import ComplianceEngine
from app.services.records import safe_filename

log = logging.getLogger("app.api.credentials")

router = APIRouter()


def _discard(path: str) -> None:
    try:
        os.remove(path)
    except FileNotFoundError:
        pass


@router.get("/credentials", response_model=List[EnrichedCredential])
def list_credentials(
    category: Optional[CredentialCategory] = Query(None, description="document | policy"),
    status_filter: str = Query(
        "all", alias="status", description="all | verified | non-compliant | expiring"
    ),
    q: Optional[str] = Query(None, description="Search in name and description"),
    engine: ComplianceEngine = Depends(get_engine),
):
    """Enriched credentials, highest priority first."""
    return engine.list_credentials(category=category, status_filter=status_filter, query=q)


@router.get("/credentials/{credential_id}", response_model=EnrichedCredential)
def get_credential(credential_id: str, engine: ComplianceEngine = Depends(get_engine)):
    cred = engine.get_credential(credential_id)
    if cred is None:
        raise HTTPException(status_code=404, detail="Credential not found")
    return cred


@router.get("/credentials/{credential_id}/accounts", response_model=CredentialWithAccounts)
def get_credential_accounts(credential_id: str, engine: ComplianceEngine = Depends(get_engine)):
    result = engine.get_credential_with_accounts(credential_id)
    if result is None:
        raise HTTPException(status_code=404, detail="Credential not found")
    return result


@router.post(
    "/credentials/{credential_id}/documents",
    response_model=CredentialRecord,
    status_code=status.HTTP_201_CREATED,
)
async def upload_credential_document(
    credential_id: str,
    file: UploadFile = File(...),
    engine: ComplianceEngine = Depends(get_engine),
):
    """
    Upload a document for a credential (multipart/form-data).
    The credential moves to 'pending' until someone verifies the document.
    """
    # 404 before touching the disk
    if engine.get_credential(credential_id) is None:
        await file.close()
        raise HTTPException(status_code=404, detail="Credential not found")

    folder = doc_storage_dir()
    os.makedirs(folder, exist_ok=True)
    base_name = safe_filename(file.filename or "document")
    # unique per upload so concurrent uploads never share a file
    ts = datetime.utcnow().strftime("%Y%m%d-%H%M%S")
    fname = f"uploaded-{credential_id}-{ts}-{uuid.uuid4().hex[:8]}-{base_name}"
    path = os.path.join(folder, fname)

    size_bytes = 0
    try:
        with open(path, "wb") as out:
            while True:
                chunk = await file.read(1024 * 1024)
                if not chunk:
                    break
                size_bytes += len(chunk)
                out.write(chunk)

        submission = DocumentSubmission(
            filename=base_name,
            content_type=file.content_type or "application/octet-stream",
            size_bytes=size_bytes,
            storage_url=f"/documents/{fname}",
        )
        updated = engine.submit_document(credential_id, submission)
    except Exception:
        _discard(path)
        raise
    finally:
        await file.close()

    if updated is None:
        # credential vanished between the check and the write
        _discard(path)
        raise HTTPException(status_code=404, detail="Credential not found")

    log.info(
        "stored %s bytes for credential %s at %s", size_bytes, credential_id, path
    )
    return updated
