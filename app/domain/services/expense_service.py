import logging
from decimal import Decimal
from typing import List, Optional, Tuple

from app.data.gateway import FinanceGateway
from app.data.realtime_db import GatewayError
from app.domain.helpers.aggregation import (
    category_breakdown,
    filter_by_period,
    total_spent,
)
from app.domain.helpers.categorizer import icon_for_category
from app.domain.helpers.periods import current_period
from app.domain.helpers.validation import (
    validate_amount,
    validate_category,
    validate_period,
)
from app.domain.models.aggregate import CategoryAggregate, OperationResult
from app.domain.models.expense import ExpenseRecord

logger = logging.getLogger(__name__)


def list_expenses(
    gateway: FinanceGateway,
    user_id: str,
    month: Optional[int] = None,
    year: Optional[int] = None,
) -> List[ExpenseRecord]:
    """Newest first; restricted to month/year when both are given."""
    try:
        expenses = gateway.get_expenses(user_id)
    except GatewayError as e:
        logger.warning("Could not load expenses for %s: %s", user_id, e)
        return []
    if month is not None and year is not None:
        return filter_by_period(expenses, month, year)
    return expenses


def get_expense(
    gateway: FinanceGateway, user_id: str, expense_id: str
) -> Optional[ExpenseRecord]:
    try:
        return gateway.get_expense(user_id, expense_id)
    except GatewayError as e:
        logger.warning("Could not load expense %s: %s", expense_id, e)
        return None


def refresh_total_expenses(
    gateway: FinanceGateway, user_id: str
) -> Optional[Decimal]:
    """
    Re-compute the cached total on the profile. Not atomic with the expense
    write that triggered it; on failure the cached total stays stale.
    """
    try:
        total = total_spent(gateway.get_expenses(user_id))
        gateway.set_total_expenses(user_id, total)
        return total
    except GatewayError as e:
        logger.warning("Could not refresh total expenses for %s: %s", user_id, e)
        return None


def _validated(expense: ExpenseRecord) -> ExpenseRecord:
    expense.category = validate_category(expense.category)
    expense.amount = validate_amount(expense.amount)
    if not expense.icon:
        expense.icon = icon_for_category(expense.category)
    return expense


def add_expense(
    gateway: FinanceGateway, user_id: str, expense: ExpenseRecord
) -> OperationResult:
    try:
        expense = _validated(expense)
        expense.id = None
        saved = gateway.save_expense(user_id, expense)
    except ValueError as e:
        return OperationResult.fail(str(e))
    except GatewayError as e:
        logger.warning("Could not save expense for %s: %s", user_id, e)
        return OperationResult.fail(f"Failed to save expense: {e}")
    refresh_total_expenses(gateway, user_id)
    return OperationResult.ok("Expense saved successfully", saved)


def update_expense(
    gateway: FinanceGateway, user_id: str, expense_id: str, changes: ExpenseRecord
) -> OperationResult:
    try:
        existing = gateway.get_expense(user_id, expense_id)
        if existing is None:
            return OperationResult.fail("Expense not found")
        changes = _validated(changes)
        changes.id = expense_id
        changes.created_at = existing.created_at
        saved = gateway.save_expense(user_id, changes)
    except ValueError as e:
        return OperationResult.fail(str(e))
    except GatewayError as e:
        logger.warning("Could not update expense %s: %s", expense_id, e)
        return OperationResult.fail(f"Failed to update expense: {e}")
    refresh_total_expenses(gateway, user_id)
    return OperationResult.ok("Expense updated successfully", saved)


def delete_expense(
    gateway: FinanceGateway, user_id: str, expense_id: str
) -> OperationResult:
    try:
        gateway.delete_expense(user_id, expense_id)
    except GatewayError as e:
        logger.warning("Could not delete expense %s: %s", expense_id, e)
        return OperationResult.fail(f"Failed to delete expense: {e}")
    refresh_total_expenses(gateway, user_id)
    return OperationResult.ok("Expense deleted successfully")


def expense_summary(
    gateway: FinanceGateway,
    user_id: str,
    month: Optional[int] = None,
    year: Optional[int] = None,
) -> Tuple[Decimal, List[CategoryAggregate]]:
    """Total and per-category breakdown of one period (current by default)."""
    if month is None or year is None:
        month, year = current_period()
    validate_period(month, year)
    expenses = list_expenses(gateway, user_id, month, year)
    return total_spent(expenses), category_breakdown(expenses)
