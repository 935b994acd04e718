from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from app.data.gateway import FinanceGateway, get_gateway
from app.domain.models.aggregate import DashboardSnapshot
from app.domain.models.suggestion import BudgetSuggestion, SpendingInsight
from app.domain.models.user import AuthSession
from app.domain.services.auth_service import get_current_user
from app.domain.services.dashboard_service import build_dashboard
from app.domain.services.suggestion_service import (
    get_spending_trends,
    get_suggestions,
)
from app.presentation.responses import CategoryAggregateResponse


class RecentExpenseResponse(BaseModel):
    id: str
    category: str
    amount: float
    date: datetime
    description: str = ""
    icon: str = ""


class DashboardResponse(BaseModel):
    month: int
    year: int
    monthly_salary: float
    total_investments: float
    total_spent: float
    budget_progress: float
    savings_rate: float
    is_new_user: bool
    recent_expenses: List[RecentExpenseResponse]
    category_breakdown: List[CategoryAggregateResponse]

    @staticmethod
    def from_domain(d: DashboardSnapshot) -> "DashboardResponse":
        return DashboardResponse(
            month=d.month,
            year=d.year,
            monthly_salary=d.monthly_salary,
            total_investments=d.total_investments,
            total_spent=d.total_spent,
            budget_progress=d.budget_progress,
            savings_rate=d.savings_rate,
            is_new_user=d.is_new_user,
            recent_expenses=[
                RecentExpenseResponse(
                    id=e.id or "",
                    category=e.category,
                    amount=e.amount,
                    date=e.date,
                    description=e.description,
                    icon=e.icon,
                )
                for e in d.recent_expenses
            ],
            category_breakdown=[
                CategoryAggregateResponse.from_domain(a) for a in d.category_breakdown
            ],
        )


class SuggestionResponse(BaseModel):
    type: str
    category: Optional[str] = None
    current_amount: float
    suggested_amount: float
    reason: str
    priority: str

    @staticmethod
    def from_domain(s: BudgetSuggestion) -> "SuggestionResponse":
        return SuggestionResponse(
            type=s.type.value,
            category=s.category,
            current_amount=s.current_amount,
            suggested_amount=s.suggested_amount,
            reason=s.reason,
            priority=s.priority.name.capitalize(),
        )


class SpendingInsightResponse(BaseModel):
    total_spent: float
    average_spending: float
    highest_spending_category: str
    highest_spending_amount: float
    insight: str

    @staticmethod
    def from_domain(i: SpendingInsight) -> "SpendingInsightResponse":
        return SpendingInsightResponse(
            total_spent=i.total_spent,
            average_spending=i.average_spending,
            highest_spending_category=i.highest_spending_category,
            highest_spending_amount=i.highest_spending_amount,
            insight=i.insight,
        )


router = APIRouter(prefix="/api/insights", tags=["insights"])


@router.get("/dashboard", response_model=DashboardResponse)
async def dashboard_endpoint(
    gateway: FinanceGateway = Depends(get_gateway),
    current_user: AuthSession = Depends(get_current_user),
):
    snapshot = await build_dashboard(gateway, current_user.user_id)
    return DashboardResponse.from_domain(snapshot)


@router.get("/suggestions", response_model=List[SuggestionResponse])
def suggestions_endpoint(
    gateway: FinanceGateway = Depends(get_gateway),
    current_user: AuthSession = Depends(get_current_user),
):
    return [
        SuggestionResponse.from_domain(s)
        for s in get_suggestions(gateway, current_user.user_id)
    ]


@router.get("/trends", response_model=SpendingInsightResponse)
def trends_endpoint(
    gateway: FinanceGateway = Depends(get_gateway),
    current_user: AuthSession = Depends(get_current_user),
):
    return SpendingInsightResponse.from_domain(
        get_spending_trends(gateway, current_user.user_id)
    )
