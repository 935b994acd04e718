# app/domain/models/salary.py
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional


class SalaryFrequency(Enum):
    DAILY = "Daily"
    WEEKLY = "Weekly"
    BI_WEEKLY = "Bi-weekly"
    MONTHLY = "Monthly"
    QUARTERLY = "Quarterly"
    ANNUAL = "Annual"


# How many pay periods of each frequency fall into one year
PERIODS_PER_YEAR = {
    SalaryFrequency.DAILY: 365,
    SalaryFrequency.WEEKLY: 52,
    SalaryFrequency.BI_WEEKLY: 26,
    SalaryFrequency.MONTHLY: 12,
    SalaryFrequency.QUARTERLY: 4,
    SalaryFrequency.ANNUAL: 1,
}


@dataclass
class SalaryRecord:
    amount: Decimal
    frequency: SalaryFrequency = SalaryFrequency.MONTHLY
    start_date: Optional[datetime] = None
    user_id: str = ""
    id: Optional[str] = None
    notes: str = ""
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def monthly_amount(self) -> Decimal:
        """Normalise the salary to a monthly figure."""
        return self.amount * PERIODS_PER_YEAR[self.frequency] / 12
