from datetime import datetime
from decimal import Decimal
from typing import Dict, Iterable, List

from app.domain.helpers.categorizer import decorate_aggregate
from app.domain.helpers.periods import as_utc, months_ago
from app.domain.models.aggregate import CategoryAggregate
from app.domain.models.expense import ExpenseRecord

ZERO = Decimal("0")


def in_period(expense: ExpenseRecord, month: int, year: int) -> bool:
    date = as_utc(expense.date)
    return date.month == month and date.year == year


def filter_by_period(
    expenses: Iterable[ExpenseRecord], month: int, year: int
) -> List[ExpenseRecord]:
    return [e for e in expenses if in_period(e, month, year)]


def total_spent(expenses: Iterable[ExpenseRecord]) -> Decimal:
    return sum((e.amount for e in expenses), ZERO)


def category_totals(expenses: Iterable[ExpenseRecord]) -> Dict[str, Decimal]:
    """
    Sum amounts per category. Keys keep the stored spelling and the order in
    which each category was first seen.
    """
    totals: Dict[str, Decimal] = {}
    for e in expenses:
        totals[e.category] = totals.get(e.category, ZERO) + e.amount
    return totals


def category_breakdown(expenses: Iterable[ExpenseRecord]) -> List[CategoryAggregate]:
    """
    Group expenses by category and compute each category's share of the total.
    Ordered by amount descending; equal amounts keep first-seen order.
    """
    expenses = list(expenses)
    total = total_spent(expenses)
    totals = category_totals(expenses)
    ordered = sorted(totals.items(), key=lambda kv: kv[1], reverse=True)
    return [
        decorate_aggregate(
            CategoryAggregate(
                category=category,
                amount=amount,
                percentage=safe_percentage(amount, total),
            )
        )
        for category, amount in ordered
    ]


def category_spend(
    expenses: Iterable[ExpenseRecord], category: str, month: int, year: int
) -> Decimal:
    """
    Amount spent on exactly `category` during month/year. Shared by the budget
    overview, the dashboard and the alert checks.
    """
    return total_spent(
        e for e in expenses if e.category == category and in_period(e, month, year)
    )


def safe_percentage(part: Decimal, whole: Decimal) -> float:
    if whole == 0:
        return 0.0
    return float(part * 100 / whole)


def raw_percentage(part: Decimal, whole: Decimal) -> float:
    """Unguarded percentage; raises ZeroDivisionError when whole is 0."""
    return float(part * 100 / whole)


def overage(budget: Decimal, spend: Decimal) -> Decimal:
    return max(ZERO, spend - budget)


def savings_rate(salary: Decimal, spent: Decimal) -> float:
    if salary <= 0:
        return 0.0
    return float((salary - spent) * 100 / salary)


def budget_progress(total_allocated: Decimal, spent: Decimal) -> float:
    if total_allocated <= 0:
        return 0.0
    return float(spent * 100 / total_allocated)


def recent_expenses(
    expenses: Iterable[ExpenseRecord], limit: int = 3
) -> List[ExpenseRecord]:
    return sorted(expenses, key=lambda e: as_utc(e.date), reverse=True)[:limit]


def trim_to_recent_months(
    expenses: Iterable[ExpenseRecord], now: datetime, months: int = 3
) -> List[ExpenseRecord]:
    cutoff = months_ago(as_utc(now), months)
    return [e for e in expenses if as_utc(e.date) >= cutoff]
