# app/domain/models/suggestion.py
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum, IntEnum
from typing import Optional


class SuggestionType(Enum):
    INCREASE_CATEGORY = "IncreaseCategory"
    DECREASE_CATEGORY = "DecreaseCategory"
    INCREASE_SAVINGS = "IncreaseSavings"


class Priority(IntEnum):
    LOW = 0
    MEDIUM = 1
    HIGH = 2


@dataclass
class BudgetSuggestion:
    type: SuggestionType
    reason: str
    priority: Priority
    category: Optional[str] = None
    current_amount: Decimal = Decimal("0")
    suggested_amount: Decimal = Decimal("0")


@dataclass
class SpendingInsight:
    total_spent: Decimal = Decimal("0")
    average_spending: Decimal = Decimal("0")
    highest_spending_category: str = "Unknown"
    highest_spending_amount: Decimal = Decimal("0")
    insight: str = ""
