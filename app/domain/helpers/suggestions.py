"""
Rule-based budget suggestions.

The heuristic looks at the last few months of expenses, the current salary and
the allocations of the current period, and proposes:

- IncreaseCategory: the monthly average of a category is above its allocation
- DecreaseCategory: the monthly average is well below its allocation
- IncreaseSavings: salary minus the mean expense leaves less than 10% savings

`months_tracked` is one coarse figure shared by every category: the whole
days since the earliest expense in the window, divided by 30, plus one.
"""

from datetime import datetime
from decimal import Decimal
from typing import Dict, Iterable, List, Optional

from app.domain.helpers.aggregation import ZERO, category_totals, total_spent
from app.domain.helpers.periods import as_utc
from app.domain.models.budget import BudgetAllocation
from app.domain.models.expense import ExpenseRecord
from app.domain.models.salary import SalaryRecord
from app.domain.models.suggestion import (
    BudgetSuggestion,
    Priority,
    SpendingInsight,
    SuggestionType,
)

ANALYSIS_WINDOW_MONTHS = 3
DAYS_PER_TRACKED_MONTH = 30

INCREASE_BUFFER_RATIO = Decimal("1.1")
# Average above allocation * this ratio escalates an increase to High priority
OVERSPEND_ESCALATION_RATIO = Decimal("1.2")
UNDERSPEND_RATIO = Decimal("0.5")
DECREASE_BUFFER_RATIO = Decimal("1.2")
MIN_DECREASE_MONTHS = 2
MIN_SAVINGS_RATE = 0.10
TARGET_SAVINGS_RATE = Decimal("0.20")


def months_tracked(expenses: Iterable[ExpenseRecord], now: datetime) -> int:
    earliest = min(as_utc(e.date) for e in expenses)
    # expenses dated in the future count as the current month
    days = max(0, (as_utc(now) - earliest).days)
    return days // DAYS_PER_TRACKED_MONTH + 1


def mean_expense_savings_rate(
    salary: Decimal, expenses: List[ExpenseRecord]
) -> float:
    """
    Fraction of salary left after the mean individual expense amount.
    A coarse proxy, not a monthly-total based rate.
    """
    if salary <= 0:
        return 0.0
    mean_expense = total_spent(expenses) / len(expenses) if expenses else ZERO
    return float((salary - mean_expense) / salary)


def _allocations_by_category(
    budgets: Iterable[BudgetAllocation],
) -> Dict[str, Decimal]:
    allocations: Dict[str, Decimal] = {}
    for b in budgets:
        allocations.setdefault(b.category, b.allocated_amount)
    return allocations


def _increase_suggestion(
    category: str, average: Decimal, allocated: Decimal
) -> BudgetSuggestion:
    recommended = average * INCREASE_BUFFER_RATIO
    priority = (
        Priority.HIGH
        if average > allocated * OVERSPEND_ESCALATION_RATIO
        else Priority.MEDIUM
    )
    return BudgetSuggestion(
        type=SuggestionType.INCREASE_CATEGORY,
        category=category,
        current_amount=allocated,
        suggested_amount=recommended,
        reason=(
            f"You've been spending ₹{average:,.2f}/month on {category}. "
            f"Consider increasing budget to ₹{recommended:,.2f} "
            "to accommodate your needs."
        ),
        priority=priority,
    )


def _decrease_suggestion(
    category: str, average: Decimal, allocated: Decimal
) -> BudgetSuggestion:
    recommended = average * DECREASE_BUFFER_RATIO
    return BudgetSuggestion(
        type=SuggestionType.DECREASE_CATEGORY,
        category=category,
        current_amount=allocated,
        suggested_amount=recommended,
        reason=(
            f"Your actual {category} spending (₹{average:,.2f}/month) is much "
            f"lower than your budget. You could reduce to ₹{recommended:,.2f}."
        ),
        priority=Priority.LOW,
    )


def _savings_suggestion(salary: Decimal, rate: float) -> BudgetSuggestion:
    return BudgetSuggestion(
        type=SuggestionType.INCREASE_SAVINGS,
        reason=(
            f"Your savings rate is only {rate:.1%}. Consider aiming for at least "
            f"20% of your income (₹{salary * TARGET_SAVINGS_RATE:,.2f}) in savings."
        ),
        priority=Priority.HIGH,
    )


def generate_suggestions(
    expenses: Iterable[ExpenseRecord],
    salary: Optional[SalaryRecord],
    budgets: Iterable[BudgetAllocation],
    now: datetime,
) -> List[BudgetSuggestion]:
    """
    expenses must already be trimmed to the analysis window.
    Returns suggestions ordered High > Medium > Low, stable within a priority.
    """
    expenses = list(expenses)
    if not expenses or salary is None:
        return []

    tracked = months_tracked(expenses, now)
    allocations = _allocations_by_category(budgets)

    suggestions: List[BudgetSuggestion] = []
    for category, total in category_totals(expenses).items():
        average = total / tracked
        allocated = allocations.get(category, ZERO)

        if average > allocated:
            suggestions.append(_increase_suggestion(category, average, allocated))

        if average < allocated * UNDERSPEND_RATIO and tracked >= MIN_DECREASE_MONTHS:
            suggestions.append(_decrease_suggestion(category, average, allocated))

    rate = mean_expense_savings_rate(salary.amount, expenses)
    if rate < MIN_SAVINGS_RATE:
        suggestions.append(_savings_suggestion(salary.amount, rate))

    return sorted(suggestions, key=lambda s: s.priority, reverse=True)


def analyze_spending_trends(expenses: Iterable[ExpenseRecord]) -> SpendingInsight:
    expenses = list(expenses)
    if not expenses:
        return SpendingInsight()

    total = total_spent(expenses)
    totals = category_totals(expenses)
    top_category = max(totals, key=totals.get)
    return SpendingInsight(
        total_spent=total,
        average_spending=total / len(expenses),
        highest_spending_category=top_category,
        highest_spending_amount=totals[top_category],
        insight=(
            f"Your spending is trending high in {top_category}. "
            "Consider reviewing this category for potential savings."
        ),
    )
