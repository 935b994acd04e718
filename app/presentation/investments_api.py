from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel

from app.data.gateway import FinanceGateway, get_gateway
from app.domain.helpers.investments import (
    compound_value,
    expected_annual_return,
    future_value,
)
from app.domain.helpers.periods import utc_now
from app.domain.models.investment import InvestmentFrequency, InvestmentRecord
from app.domain.models.user import AuthSession
from app.domain.services.auth_service import get_current_user
from app.domain.services.investment_service import (
    add_investment,
    delete_investment,
    get_investment,
    get_portfolio,
    update_investment,
)
from app.presentation.responses import unwrap


class InvestmentRequest(BaseModel):
    investment_type: str
    amount: Decimal
    return_rate: Optional[Decimal] = None
    investment_date: Optional[datetime] = None
    frequency: InvestmentFrequency = InvestmentFrequency.ONE_TIME
    description: str = ""

    def to_domain(self) -> InvestmentRecord:
        return InvestmentRecord(
            investment_type=self.investment_type,
            amount=self.amount,
            return_rate=self.return_rate,
            investment_date=self.investment_date or utc_now(),
            frequency=self.frequency,
            description=self.description,
        )


class InvestmentResponse(BaseModel):
    id: str
    investment_type: str
    amount: float
    return_rate: Optional[float] = None
    investment_date: datetime
    frequency: str
    is_recurring: bool = False
    description: str = ""
    expected_return: float
    future_value: float

    @staticmethod
    def from_domain(i: InvestmentRecord) -> "InvestmentResponse":
        return InvestmentResponse(
            id=i.id or "",
            investment_type=i.investment_type,
            amount=i.amount,
            return_rate=i.return_rate,
            investment_date=i.investment_date,
            frequency=i.frequency.value,
            is_recurring=i.is_recurring,
            description=i.description,
            expected_return=expected_annual_return(i),
            future_value=future_value(i.amount, i.return_rate or Decimal("0")),
        )


class PortfolioResponse(BaseModel):
    investments: List[InvestmentResponse]
    total_invested: float
    total_expected_return: float
    count: int
    monthly_commitment: float = 0.0


class ProjectionResponse(BaseModel):
    investment_id: str
    years: int
    principal: float
    return_rate: float
    projected_value: float


router = APIRouter(prefix="/api/investments", tags=["investments"])


@router.get("", response_model=PortfolioResponse)
def list_investments_endpoint(
    gateway: FinanceGateway = Depends(get_gateway),
    current_user: AuthSession = Depends(get_current_user),
):
    investments, summary = get_portfolio(gateway, current_user.user_id)
    return PortfolioResponse(
        investments=[InvestmentResponse.from_domain(i) for i in investments],
        total_invested=summary.total_invested,
        total_expected_return=summary.total_expected_return,
        count=summary.count,
        monthly_commitment=summary.monthly_commitment,
    )


@router.get("/{investment_id}", response_model=InvestmentResponse)
def get_investment_endpoint(
    investment_id: str,
    gateway: FinanceGateway = Depends(get_gateway),
    current_user: AuthSession = Depends(get_current_user),
):
    investment = get_investment(gateway, current_user.user_id, investment_id)
    if investment is None:
        raise HTTPException(status_code=404, detail="Investment not found")
    return InvestmentResponse.from_domain(investment)


@router.get("/{investment_id}/projection", response_model=ProjectionResponse)
def investment_projection_endpoint(
    investment_id: str,
    years: int = Query(5, ge=0, le=50),
    gateway: FinanceGateway = Depends(get_gateway),
    current_user: AuthSession = Depends(get_current_user),
):
    investment = get_investment(gateway, current_user.user_id, investment_id)
    if investment is None:
        raise HTTPException(status_code=404, detail="Investment not found")
    rate = investment.return_rate or Decimal("0")
    return ProjectionResponse(
        investment_id=investment_id,
        years=years,
        principal=investment.amount,
        return_rate=rate,
        projected_value=compound_value(investment.amount, rate, years),
    )


@router.post("", response_model=InvestmentResponse, status_code=201)
def create_investment_endpoint(
    req: InvestmentRequest,
    gateway: FinanceGateway = Depends(get_gateway),
    current_user: AuthSession = Depends(get_current_user),
):
    result = add_investment(gateway, current_user.user_id, req.to_domain())
    return InvestmentResponse.from_domain(unwrap(result))


@router.put("/{investment_id}", response_model=InvestmentResponse)
def update_investment_endpoint(
    investment_id: str,
    req: InvestmentRequest,
    gateway: FinanceGateway = Depends(get_gateway),
    current_user: AuthSession = Depends(get_current_user),
):
    result = update_investment(
        gateway, current_user.user_id, investment_id, req.to_domain()
    )
    return InvestmentResponse.from_domain(
        unwrap(result, not_found="Investment not found")
    )


@router.delete("/{investment_id}")
def delete_investment_endpoint(
    investment_id: str,
    gateway: FinanceGateway = Depends(get_gateway),
    current_user: AuthSession = Depends(get_current_user),
):
    unwrap(delete_investment(gateway, current_user.user_id, investment_id))
    return {"deleted": True}
