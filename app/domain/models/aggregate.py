# app/domain/models/aggregate.py
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, List, Optional

from app.domain.models.alert import DisplayTier
from app.domain.models.expense import ExpenseRecord


@dataclass
class CategoryAggregate:
    category: str
    amount: Decimal
    percentage: float
    icon: str = ""
    icon_background_color: str = ""
    progress_color: str = ""


@dataclass
class PortfolioSummary:
    total_invested: Decimal
    total_expected_return: Decimal
    count: int
    # amount committed every month by recurring (SIP) investments
    monthly_commitment: Decimal = Decimal("0")


@dataclass
class OperationResult:
    """Outcome of a write against the store; failures carry a readable message."""

    success: bool
    message: str = ""
    data: Optional[Any] = None

    @classmethod
    def ok(cls, message: str, data: Any = None) -> "OperationResult":
        return cls(success=True, message=message, data=data)

    @classmethod
    def fail(cls, message: str) -> "OperationResult":
        return cls(success=False, message=message)


@dataclass
class BudgetStatus:
    """One allocation of a period next to what was actually spent on it."""

    budget_id: Optional[str]
    category: str
    allocated_amount: Decimal
    spent: Decimal
    remaining: Decimal
    percentage_used: float
    display_tier: DisplayTier


@dataclass
class BudgetOverview:
    month: int
    year: int
    items: List[BudgetStatus] = field(default_factory=list)
    total_allocated: Decimal = Decimal("0")
    total_spent: Decimal = Decimal("0")
    progress: float = 0.0


@dataclass
class DashboardSnapshot:
    month: int
    year: int
    monthly_salary: Decimal = Decimal("0")
    total_investments: Decimal = Decimal("0")
    total_spent: Decimal = Decimal("0")
    budget_progress: float = 0.0
    savings_rate: float = 0.0
    recent_expenses: List[ExpenseRecord] = field(default_factory=list)
    category_breakdown: List[CategoryAggregate] = field(default_factory=list)

    @property
    def is_new_user(self) -> bool:
        return (
            self.monthly_salary == 0
            and self.total_investments == 0
            and not self.recent_expenses
            and self.budget_progress == 0
        )
