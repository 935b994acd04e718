import logging
from datetime import datetime
from decimal import Decimal
from typing import Optional

from app.data.gateway import FinanceGateway
from app.data.realtime_db import GatewayError
from app.domain.helpers.validation import validate_amount
from app.domain.models.aggregate import OperationResult
from app.domain.models.salary import SalaryFrequency, SalaryRecord

logger = logging.getLogger(__name__)


def get_current_salary(gateway: FinanceGateway, user_id: str) -> Optional[SalaryRecord]:
    try:
        return gateway.get_salary(user_id)
    except GatewayError as e:
        logger.warning("Could not load salary for %s: %s", user_id, e)
        return None


def save_salary(
    gateway: FinanceGateway,
    user_id: str,
    amount: Decimal,
    frequency: SalaryFrequency = SalaryFrequency.MONTHLY,
    start_date: Optional[datetime] = None,
    notes: str = "",
) -> OperationResult:
    """Each save adds a new record; the newest one is the current salary."""
    try:
        salary = SalaryRecord(
            amount=validate_amount(amount, "salary amount"),
            frequency=frequency,
            start_date=start_date,
            notes=notes,
        )
        saved = gateway.save_salary(user_id, salary)
    except ValueError as e:
        return OperationResult.fail(str(e))
    except GatewayError as e:
        logger.warning("Could not save salary for %s: %s", user_id, e)
        return OperationResult.fail(f"Failed to save salary: {e}")
    return OperationResult.ok("Salary saved successfully", saved)
