# app/domain/models/budget.py
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional


@dataclass
class BudgetAllocation:
    category: str
    allocated_amount: Decimal
    month: int
    year: int
    user_id: str = ""
    id: Optional[str] = None
    notes: str = ""
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def covers(self, category: str, month: int, year: int) -> bool:
        return self.category == category and self.month == month and self.year == year
