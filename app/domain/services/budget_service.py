import logging
from datetime import datetime
from decimal import Decimal
from typing import List, Optional, Tuple

from sqlalchemy.orm import Session

from app.data.gateway import FinanceGateway
from app.data.realtime_db import GatewayError
from app.data.repositories.alert_log_repository import add_alerts, list_alerts
from app.domain.helpers.aggregation import (
    ZERO,
    budget_progress,
    category_spend,
    filter_by_period,
    safe_percentage,
    total_spent,
)
from app.domain.helpers.classifier import (
    classify_display_tier,
    daily_summary_notification,
    evaluate_budget_alert,
    exceeded_only,
)
from app.domain.helpers.periods import as_utc, current_period, utc_now
from app.domain.helpers.validation import (
    validate_amount,
    validate_category,
    validate_period,
)
from app.domain.models.aggregate import BudgetOverview, BudgetStatus, OperationResult
from app.domain.models.alert import BudgetAlert
from app.domain.models.budget import BudgetAllocation

logger = logging.getLogger(__name__)


def list_budgets(
    gateway: FinanceGateway, user_id: str, month: int, year: int
) -> List[BudgetAllocation]:
    try:
        return gateway.get_budgets(user_id, month, year)
    except GatewayError as e:
        logger.warning("Could not load budgets for %s: %s", user_id, e)
        return []


def save_budget(
    gateway: FinanceGateway,
    user_id: str,
    category: str,
    allocated_amount: Decimal,
    month: int,
    year: int,
    notes: str = "",
) -> OperationResult:
    """
    Create the allocation for (category, month, year), or update it in place
    when one already exists. The store has no unique constraint of its own.
    """
    try:
        category = validate_category(category)
        allocated_amount = validate_amount(allocated_amount, "budget amount")
        validate_period(month, year)
        existing = next(
            (
                b
                for b in gateway.get_budgets(user_id, month, year)
                if b.covers(category, month, year)
            ),
            None,
        )
        if existing:
            existing.allocated_amount = allocated_amount
            existing.notes = notes or existing.notes
            saved = gateway.save_budget(user_id, existing)
            return OperationResult.ok("Budget updated successfully", saved)
        saved = gateway.save_budget(
            user_id,
            BudgetAllocation(
                category=category,
                allocated_amount=allocated_amount,
                month=month,
                year=year,
                notes=notes,
            ),
        )
    except ValueError as e:
        return OperationResult.fail(str(e))
    except GatewayError as e:
        logger.warning("Could not save budget for %s: %s", user_id, e)
        return OperationResult.fail(f"Failed to save budget: {e}")
    return OperationResult.ok("Budget saved successfully", saved)


def delete_budget(
    gateway: FinanceGateway, user_id: str, budget_id: str
) -> OperationResult:
    try:
        gateway.delete_budget(user_id, budget_id)
    except GatewayError as e:
        logger.warning("Could not delete budget %s: %s", budget_id, e)
        return OperationResult.fail(f"Failed to delete budget: {e}")
    return OperationResult.ok("Budget deleted successfully")


def budget_overview(
    gateway: FinanceGateway,
    user_id: str,
    month: Optional[int] = None,
    year: Optional[int] = None,
) -> BudgetOverview:
    if month is None or year is None:
        month, year = current_period()
    validate_period(month, year)
    try:
        budgets = gateway.get_budgets(user_id, month, year)
        expenses = gateway.get_expenses(user_id)
    except GatewayError as e:
        logger.warning("Could not build budget overview for %s: %s", user_id, e)
        return BudgetOverview(month=month, year=year)

    items = []
    for b in budgets:
        spent = category_spend(expenses, b.category, month, year)
        pct = safe_percentage(spent, b.allocated_amount)
        items.append(
            BudgetStatus(
                budget_id=b.id,
                category=b.category,
                allocated_amount=b.allocated_amount,
                spent=spent,
                remaining=b.allocated_amount - spent,
                percentage_used=pct,
                display_tier=classify_display_tier(pct),
            )
        )
    total_allocated = sum((b.allocated_amount for b in budgets), ZERO)
    spent_in_period = total_spent(filter_by_period(expenses, month, year))
    return BudgetOverview(
        month=month,
        year=year,
        items=items,
        total_allocated=total_allocated,
        total_spent=spent_in_period,
        progress=budget_progress(total_allocated, spent_in_period),
    )


def check_all_budget_alerts(
    gateway: FinanceGateway, user_id: str, now: Optional[datetime] = None
) -> List[BudgetAlert]:
    """Exceeded allocations of the current period; empty when the store fails."""
    now = as_utc(now or utc_now())
    month, year = current_period(now)
    try:
        budgets = gateway.get_budgets(user_id, month, year)
        if not budgets:
            return []
        expenses = gateway.get_expenses(user_id)
    except GatewayError as e:
        logger.warning("Budget alert check failed for %s: %s", user_id, e)
        return []

    alerts = [
        evaluate_budget_alert(
            b, category_spend(expenses, b.category, month, year), now
        )
        for b in budgets
    ]
    return exceeded_only(alerts)


def check_category_alert(
    gateway: FinanceGateway,
    user_id: str,
    category: str,
    now: Optional[datetime] = None,
) -> Optional[BudgetAlert]:
    now = as_utc(now or utc_now())
    month, year = current_period(now)
    try:
        allocation = next(
            (
                b
                for b in gateway.get_budgets(user_id, month, year)
                if b.covers(category, month, year)
            ),
            None,
        )
        if allocation is None:
            return None
        expenses = gateway.get_expenses(user_id)
    except GatewayError as e:
        logger.warning("Alert check for %s failed for %s: %s", category, user_id, e)
        return None

    alert = evaluate_budget_alert(
        allocation, category_spend(expenses, category, month, year), now
    )
    return alert if alert.has_exceeded else None


def daily_alert_summary(
    gateway: FinanceGateway, user_id: str, now: Optional[datetime] = None
) -> Optional[Tuple[str, str]]:
    """
    (title, message) listing every allocation of the current period that is
    over budget; None when nothing is exceeded.
    """
    month, year = current_period(as_utc(now or utc_now()))
    overview = budget_overview(gateway, user_id, month, year)
    return daily_summary_notification(
        (s.category, s.spent, s.allocated_amount) for s in overview.items
    )


def log_alerts(db: Session, user_id: str, alerts: List[BudgetAlert]) -> int:
    if not alerts:
        return 0
    return add_alerts(db, user_id, alerts)


def alert_history(db: Session, user_id: str, limit: int = 50) -> List[BudgetAlert]:
    return list_alerts(db, user_id, limit)
