# app/api/v1/accounts.py
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from app.core.config import ACCOUNTS_PAGE_SIZE, MAX_PAGE_SIZE
from app.core.deps import get_engine
from app.schemas.account import AccountDetail, AccountPage
from app.services.engine import ComplianceEngine

router = APIRouter()


@router.get("/accounts", response_model=AccountPage)
def list_accounts(
    tab: str = Query("registered", description="registered | invitations"),
    status_filter: str = Query("all", alias="status", description="all | pass | fail"),
    q: Optional[str] = Query(None, description="Search in name, city, state"),
    page: int = Query(1),
    page_size: int = Query(ACCOUNTS_PAGE_SIZE, le=MAX_PAGE_SIZE),
    engine: ComplianceEngine = Depends(get_engine),
):
    """Accounts with derived access status, filtered and paginated (1-based)."""
    return engine.list_accounts(
        tab=tab, status_filter=status_filter, query=q, page=page, page_size=page_size
    )


@router.get("/accounts/{account_id}", response_model=AccountDetail)
def get_account(account_id: str, engine: ComplianceEngine = Depends(get_engine)):
    detail = engine.get_account_detail(account_id)
    if detail is None:
        raise HTTPException(status_code=404, detail="Account not found")
    return detail
