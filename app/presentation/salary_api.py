from datetime import datetime
from decimal import Decimal
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from app.data.gateway import FinanceGateway, get_gateway
from app.domain.models.salary import SalaryFrequency, SalaryRecord
from app.domain.models.user import AuthSession
from app.domain.services.auth_service import get_current_user
from app.domain.services.salary_service import get_current_salary, save_salary
from app.presentation.responses import unwrap


class SalaryRequest(BaseModel):
    amount: Decimal
    frequency: SalaryFrequency = SalaryFrequency.MONTHLY
    start_date: Optional[datetime] = None
    notes: str = ""


class SalaryResponse(BaseModel):
    id: str
    amount: float
    frequency: str
    monthly_amount: float
    start_date: Optional[datetime] = None
    notes: str = ""
    created_at: Optional[datetime] = None

    @staticmethod
    def from_domain(s: SalaryRecord) -> "SalaryResponse":
        return SalaryResponse(
            id=s.id or "",
            amount=s.amount,
            frequency=s.frequency.value,
            monthly_amount=s.monthly_amount(),
            start_date=s.start_date,
            notes=s.notes,
            created_at=s.created_at,
        )


router = APIRouter(prefix="/api/salary", tags=["salary"])


@router.get("", response_model=SalaryResponse)
def get_salary_endpoint(
    gateway: FinanceGateway = Depends(get_gateway),
    current_user: AuthSession = Depends(get_current_user),
):
    salary = get_current_salary(gateway, current_user.user_id)
    if salary is None:
        raise HTTPException(status_code=404, detail="No salary recorded")
    return SalaryResponse.from_domain(salary)


@router.post("", response_model=SalaryResponse)
def save_salary_endpoint(
    req: SalaryRequest,
    gateway: FinanceGateway = Depends(get_gateway),
    current_user: AuthSession = Depends(get_current_user),
):
    result = save_salary(
        gateway,
        current_user.user_id,
        req.amount,
        req.frequency,
        req.start_date,
        req.notes,
    )
    return SalaryResponse.from_domain(unwrap(result))
