# app/domain/models/investment.py
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional


class InvestmentFrequency(Enum):
    ONE_TIME = "One-Time"
    MONTHLY_SIP = "Monthly SIP"


@dataclass
class InvestmentRecord:
    investment_type: str
    amount: Decimal
    investment_date: datetime
    return_rate: Optional[Decimal] = None  # annual percentage
    frequency: InvestmentFrequency = InvestmentFrequency.ONE_TIME
    description: str = ""
    user_id: str = ""
    id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def is_recurring(self) -> bool:
        return self.frequency == InvestmentFrequency.MONTHLY_SIP
