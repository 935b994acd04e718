# app/domain/models/alert.py
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum


class AlertTier(Enum):
    LOW = "Low"  # < 90%
    MEDIUM = "Medium"  # 90-99%
    HIGH = "High"  # 100-109%
    CRITICAL = "Critical"  # 110%+


class DisplayTier(Enum):
    GREEN = "Green"
    YELLOW = "Yellow"
    ORANGE = "Orange"
    RED = "Red"


@dataclass
class BudgetAlert:
    category: str
    budget_amount: Decimal
    current_spending: Decimal
    overage: Decimal
    percentage_used: float
    has_exceeded: bool
    tier: AlertTier
    message: str
    checked_at: datetime

    @property
    def percentage_exceeded(self) -> float:
        if self.budget_amount <= 0:
            return 0.0
        return float(self.overage / self.budget_amount * 100)
