# app/api/v1/dashboard.py
from typing import List

from fastapi import APIRouter, Depends, Query

from app.core.config import ACTION_QUEUE_LIMIT, RENEWAL_WINDOW_DAYS
from app.core.deps import get_engine
from app.schemas.credential import ActionItem, EnrichedCredential
from app.schemas.dashboard import AccountHealth, CredentialStats, RenewalGroup
from app.services.dashboard import to_action_item
from app.services.engine import ComplianceEngine

router = APIRouter()


@router.get("/dashboard/stats", response_model=CredentialStats)
def dashboard_stats(engine: ComplianceEngine = Depends(get_engine)):
    return engine.get_stats()


@router.get("/dashboard/action-items", response_model=List[ActionItem])
def dashboard_action_items(
    limit: int = Query(ACTION_QUEUE_LIMIT, description="Maximum number of items"),
    engine: ComplianceEngine = Depends(get_engine),
):
    """Missing / expired / pending credentials, most urgent first."""
    return [to_action_item(c) for c in engine.get_action_items(limit)]


@router.get("/dashboard/expiring", response_model=List[EnrichedCredential])
def dashboard_expiring(
    within_days: int = Query(RENEWAL_WINDOW_DAYS),
    engine: ComplianceEngine = Depends(get_engine),
):
    return engine.get_expiring_credentials(within_days)


@router.get("/dashboard/renewals", response_model=List[RenewalGroup])
def dashboard_renewals(
    within_days: int = Query(RENEWAL_WINDOW_DAYS),
    engine: ComplianceEngine = Depends(get_engine),
):
    """Upcoming renewals bucketed by week, chronological."""
    return engine.get_renewal_groups(within_days)


@router.get("/dashboard/account-health", response_model=AccountHealth)
def dashboard_account_health(engine: ComplianceEngine = Depends(get_engine)):
    return engine.get_account_health()
