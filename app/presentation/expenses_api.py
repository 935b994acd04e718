from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel

from app.data.gateway import FinanceGateway, get_gateway
from app.domain.helpers.categorizer import DEFAULT_CATEGORIES
from app.domain.helpers.periods import utc_now
from app.domain.models.expense import ExpenseRecord
from app.domain.models.user import AuthSession
from app.domain.services.auth_service import get_current_user
from app.domain.services.expense_service import (
    add_expense,
    delete_expense,
    expense_summary,
    get_expense,
    list_expenses,
    update_expense,
)
from app.presentation.responses import CategoryAggregateResponse, unwrap


class ExpenseRequest(BaseModel):
    category: str
    amount: Decimal
    date: Optional[datetime] = None
    description: str = ""
    icon: str = ""
    shop_name: str = ""
    address: str = ""
    location: str = ""

    def to_domain(self) -> ExpenseRecord:
        return ExpenseRecord(
            category=self.category,
            amount=self.amount,
            date=self.date or utc_now(),
            description=self.description,
            icon=self.icon,
            shop_name=self.shop_name,
            address=self.address,
            location=self.location,
        )


class ExpenseResponse(BaseModel):
    id: str
    category: str
    amount: float
    date: datetime
    description: str = ""
    icon: str = ""
    shop_name: str = ""
    address: str = ""
    location: str = ""
    created_at: Optional[datetime] = None
    modified_at: Optional[datetime] = None

    @staticmethod
    def from_domain(e: ExpenseRecord) -> "ExpenseResponse":
        return ExpenseResponse(
            id=e.id or "",
            category=e.category,
            amount=e.amount,
            date=e.date,
            description=e.description,
            icon=e.icon,
            shop_name=e.shop_name,
            address=e.address,
            location=e.location,
            created_at=e.created_at,
            modified_at=e.modified_at,
        )


class ExpenseSummaryResponse(BaseModel):
    total: float
    categories: List[CategoryAggregateResponse]


router = APIRouter(prefix="/api/expenses", tags=["expenses"])


@router.get("", response_model=List[ExpenseResponse])
def list_expenses_endpoint(
    month: Optional[int] = Query(None, ge=1, le=12),
    year: Optional[int] = Query(None, ge=1),
    gateway: FinanceGateway = Depends(get_gateway),
    current_user: AuthSession = Depends(get_current_user),
):
    expenses = list_expenses(gateway, current_user.user_id, month, year)
    return [ExpenseResponse.from_domain(e) for e in expenses]


@router.get("/summary", response_model=ExpenseSummaryResponse)
def expense_summary_endpoint(
    month: Optional[int] = Query(None, ge=1, le=12),
    year: Optional[int] = Query(None, ge=1),
    gateway: FinanceGateway = Depends(get_gateway),
    current_user: AuthSession = Depends(get_current_user),
):
    total, breakdown = expense_summary(gateway, current_user.user_id, month, year)
    return ExpenseSummaryResponse(
        total=total,
        categories=[CategoryAggregateResponse.from_domain(a) for a in breakdown],
    )


@router.get("/categories", response_model=List[str])
def list_categories_endpoint(current_user: AuthSession = Depends(get_current_user)):
    return DEFAULT_CATEGORIES


@router.get("/{expense_id}", response_model=ExpenseResponse)
def get_expense_endpoint(
    expense_id: str,
    gateway: FinanceGateway = Depends(get_gateway),
    current_user: AuthSession = Depends(get_current_user),
):
    expense = get_expense(gateway, current_user.user_id, expense_id)
    if expense is None:
        raise HTTPException(status_code=404, detail="Expense not found")
    return ExpenseResponse.from_domain(expense)


@router.post("", response_model=ExpenseResponse, status_code=201)
def create_expense_endpoint(
    req: ExpenseRequest,
    gateway: FinanceGateway = Depends(get_gateway),
    current_user: AuthSession = Depends(get_current_user),
):
    result = add_expense(gateway, current_user.user_id, req.to_domain())
    return ExpenseResponse.from_domain(unwrap(result))


@router.put("/{expense_id}", response_model=ExpenseResponse)
def update_expense_endpoint(
    expense_id: str,
    req: ExpenseRequest,
    gateway: FinanceGateway = Depends(get_gateway),
    current_user: AuthSession = Depends(get_current_user),
):
    result = update_expense(gateway, current_user.user_id, expense_id, req.to_domain())
    return ExpenseResponse.from_domain(unwrap(result, not_found="Expense not found"))


@router.delete("/{expense_id}")
def delete_expense_endpoint(
    expense_id: str,
    gateway: FinanceGateway = Depends(get_gateway),
    current_user: AuthSession = Depends(get_current_user),
):
    unwrap(delete_expense(gateway, current_user.user_id, expense_id))
    return {"deleted": True}
