import logging
from datetime import datetime
from typing import List, Optional

from app.data.gateway import FinanceGateway
from app.data.realtime_db import GatewayError
from app.domain.helpers.aggregation import trim_to_recent_months
from app.domain.helpers.periods import as_utc, current_period, utc_now
from app.domain.helpers.suggestions import (
    ANALYSIS_WINDOW_MONTHS,
    analyze_spending_trends,
    generate_suggestions,
)
from app.domain.models.suggestion import BudgetSuggestion, SpendingInsight

logger = logging.getLogger(__name__)


def get_suggestions(
    gateway: FinanceGateway, user_id: str, now: Optional[datetime] = None
) -> List[BudgetSuggestion]:
    now = as_utc(now or utc_now())
    month, year = current_period(now)
    try:
        expenses = gateway.get_expenses(user_id)
        salary = gateway.get_salary(user_id)
        budgets = gateway.get_budgets(user_id, month, year)
    except GatewayError as e:
        logger.warning("Could not load data for suggestions (%s): %s", user_id, e)
        return []

    recent = trim_to_recent_months(expenses, now, ANALYSIS_WINDOW_MONTHS)
    return generate_suggestions(recent, salary, budgets, now)


def get_spending_trends(
    gateway: FinanceGateway, user_id: str, now: Optional[datetime] = None
) -> SpendingInsight:
    now = as_utc(now or utc_now())
    try:
        expenses = gateway.get_expenses(user_id)
    except GatewayError as e:
        logger.warning("Could not load expenses for trends (%s): %s", user_id, e)
        return SpendingInsight()
    return analyze_spending_trends(
        trim_to_recent_months(expenses, now, ANALYSIS_WINDOW_MONTHS)
    )
