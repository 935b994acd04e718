from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel
from sqlalchemy.orm import Session

from app.data.base import SessionLocal
from app.data.gateway import FinanceGateway, get_gateway
from app.domain.helpers.classifier import notification_for_alert
from app.domain.helpers.periods import current_period
from app.domain.models.aggregate import BudgetOverview, BudgetStatus
from app.domain.models.alert import BudgetAlert
from app.domain.models.budget import BudgetAllocation
from app.domain.models.user import AuthSession
from app.domain.services.auth_service import get_current_user
from app.domain.services.budget_service import (
    alert_history,
    budget_overview,
    check_all_budget_alerts,
    check_category_alert,
    daily_alert_summary,
    delete_budget,
    list_budgets,
    log_alerts,
    save_budget,
)
from app.presentation.responses import unwrap


class BudgetRequest(BaseModel):
    category: str
    allocated_amount: Decimal
    month: int
    year: int
    notes: str = ""


class BudgetResponse(BaseModel):
    id: str
    category: str
    allocated_amount: float
    month: int
    year: int
    notes: str = ""

    @staticmethod
    def from_domain(b: BudgetAllocation) -> "BudgetResponse":
        return BudgetResponse(
            id=b.id or "",
            category=b.category,
            allocated_amount=b.allocated_amount,
            month=b.month,
            year=b.year,
            notes=b.notes,
        )


class BudgetStatusResponse(BaseModel):
    budget_id: Optional[str] = None
    category: str
    allocated_amount: float
    spent: float
    remaining: float
    percentage_used: float
    display_tier: str

    @staticmethod
    def from_domain(s: BudgetStatus) -> "BudgetStatusResponse":
        return BudgetStatusResponse(
            budget_id=s.budget_id,
            category=s.category,
            allocated_amount=s.allocated_amount,
            spent=s.spent,
            remaining=s.remaining,
            percentage_used=s.percentage_used,
            display_tier=s.display_tier.value,
        )


class BudgetOverviewResponse(BaseModel):
    month: int
    year: int
    items: List[BudgetStatusResponse]
    total_allocated: float
    total_spent: float
    progress: float

    @staticmethod
    def from_domain(o: BudgetOverview) -> "BudgetOverviewResponse":
        return BudgetOverviewResponse(
            month=o.month,
            year=o.year,
            items=[BudgetStatusResponse.from_domain(s) for s in o.items],
            total_allocated=o.total_allocated,
            total_spent=o.total_spent,
            progress=o.progress,
        )


class BudgetAlertResponse(BaseModel):
    category: str
    budget_amount: float
    current_spending: float
    overage: float
    percentage_used: float
    percentage_exceeded: float
    has_exceeded: bool
    tier: str
    message: str
    checked_at: datetime
    notification_title: Optional[str] = None
    notification_message: Optional[str] = None

    @staticmethod
    def from_domain(a: BudgetAlert) -> "BudgetAlertResponse":
        title, message = notification_for_alert(a) or (None, None)
        return BudgetAlertResponse(
            category=a.category,
            budget_amount=a.budget_amount,
            current_spending=a.current_spending,
            overage=a.overage,
            percentage_used=a.percentage_used,
            percentage_exceeded=a.percentage_exceeded,
            has_exceeded=a.has_exceeded,
            tier=a.tier.value,
            message=a.message,
            checked_at=a.checked_at,
            notification_title=title,
            notification_message=message,
        )


class NotificationResponse(BaseModel):
    title: str
    message: str


router = APIRouter(prefix="/api/budgets", tags=["budgets"])


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@router.get("", response_model=List[BudgetResponse])
def list_budgets_endpoint(
    month: Optional[int] = Query(None, ge=1, le=12),
    year: Optional[int] = Query(None, ge=1),
    gateway: FinanceGateway = Depends(get_gateway),
    current_user: AuthSession = Depends(get_current_user),
):
    if month is None or year is None:
        month, year = current_period()
    budgets = list_budgets(gateway, current_user.user_id, month, year)
    return [BudgetResponse.from_domain(b) for b in budgets]


@router.post("", response_model=BudgetResponse)
def save_budget_endpoint(
    req: BudgetRequest,
    gateway: FinanceGateway = Depends(get_gateway),
    current_user: AuthSession = Depends(get_current_user),
):
    result = save_budget(
        gateway,
        current_user.user_id,
        req.category,
        req.allocated_amount,
        req.month,
        req.year,
        req.notes,
    )
    return BudgetResponse.from_domain(unwrap(result))


@router.get("/overview", response_model=BudgetOverviewResponse)
def budget_overview_endpoint(
    month: Optional[int] = Query(None, ge=1, le=12),
    year: Optional[int] = Query(None, ge=1),
    gateway: FinanceGateway = Depends(get_gateway),
    current_user: AuthSession = Depends(get_current_user),
):
    overview = budget_overview(gateway, current_user.user_id, month, year)
    return BudgetOverviewResponse.from_domain(overview)


@router.get("/alerts", response_model=List[BudgetAlertResponse])
def budget_alerts_endpoint(
    record: bool = Query(False, description="Append the alerts to the alert log"),
    gateway: FinanceGateway = Depends(get_gateway),
    db: Session = Depends(get_db),
    current_user: AuthSession = Depends(get_current_user),
):
    alerts = check_all_budget_alerts(gateway, current_user.user_id)
    if record:
        log_alerts(db, current_user.user_id, alerts)
    return [BudgetAlertResponse.from_domain(a) for a in alerts]


@router.get("/alerts/log", response_model=List[BudgetAlertResponse])
def alert_log_endpoint(
    limit: int = Query(50, ge=1, le=500),
    db: Session = Depends(get_db),
    current_user: AuthSession = Depends(get_current_user),
):
    return [
        BudgetAlertResponse.from_domain(a)
        for a in alert_history(db, current_user.user_id, limit)
    ]


@router.get("/alerts/summary", response_model=Optional[NotificationResponse])
def alert_summary_endpoint(
    gateway: FinanceGateway = Depends(get_gateway),
    current_user: AuthSession = Depends(get_current_user),
):
    summary = daily_alert_summary(gateway, current_user.user_id)
    if summary is None:
        return None
    title, message = summary
    return NotificationResponse(title=title, message=message)


@router.get("/alerts/{category}", response_model=Optional[BudgetAlertResponse])
def category_alert_endpoint(
    category: str,
    gateway: FinanceGateway = Depends(get_gateway),
    current_user: AuthSession = Depends(get_current_user),
):
    alert = check_category_alert(gateway, current_user.user_id, category)
    return BudgetAlertResponse.from_domain(alert) if alert else None


@router.delete("/{budget_id}")
def delete_budget_endpoint(
    budget_id: str,
    gateway: FinanceGateway = Depends(get_gateway),
    current_user: AuthSession = Depends(get_current_user),
):
    result = delete_budget(gateway, current_user.user_id, budget_id)
    if not result.success:
        raise HTTPException(status_code=400, detail=result.message)
    return {"deleted": True}
