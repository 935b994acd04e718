import asyncio
import logging
from datetime import datetime
from typing import Optional

from app.data.gateway import FinanceGateway
from app.data.realtime_db import GatewayError
from app.domain.helpers.aggregation import (
    ZERO,
    budget_progress,
    category_breakdown,
    filter_by_period,
    recent_expenses,
    savings_rate,
    total_spent,
)
from app.domain.helpers.periods import as_utc, current_period, utc_now
from app.domain.models.aggregate import DashboardSnapshot

logger = logging.getLogger(__name__)


def _or_empty(result, empty, what: str, user_id: str):
    if isinstance(result, GatewayError):
        logger.warning("Dashboard could not load %s for %s: %s", what, user_id, result)
        return empty
    if isinstance(result, BaseException):
        raise result
    return result


async def build_dashboard(
    gateway: FinanceGateway, user_id: str, now: Optional[datetime] = None
) -> DashboardSnapshot:
    """
    Current-month totals for the landing page. The four reads are independent
    and run concurrently; any one of them failing leaves its figures at zero.
    """
    now = as_utc(now or utc_now())
    month, year = current_period(now)

    results = await asyncio.gather(
        asyncio.to_thread(gateway.get_salary, user_id),
        asyncio.to_thread(gateway.get_investments, user_id),
        asyncio.to_thread(gateway.get_expenses, user_id),
        asyncio.to_thread(gateway.get_budgets, user_id, month, year),
        return_exceptions=True,
    )
    salary = _or_empty(results[0], None, "salary", user_id)
    investments = _or_empty(results[1], [], "investments", user_id)
    expenses = _or_empty(results[2], [], "expenses", user_id)
    budgets = _or_empty(results[3], [], "budgets", user_id)

    month_expenses = filter_by_period(expenses, month, year)
    spent = total_spent(month_expenses)
    monthly_salary = salary.amount if salary else ZERO
    total_allocated = sum((b.allocated_amount for b in budgets), ZERO)

    return DashboardSnapshot(
        month=month,
        year=year,
        monthly_salary=monthly_salary,
        total_investments=sum((i.amount for i in investments), ZERO),
        total_spent=spent,
        budget_progress=budget_progress(total_allocated, spent),
        savings_rate=savings_rate(monthly_salary, spent),
        recent_expenses=recent_expenses(month_expenses, 3),
        category_breakdown=category_breakdown(month_expenses),
    )
