import logging
from typing import List, Optional, Tuple

from app.data.gateway import FinanceGateway
from app.data.realtime_db import GatewayError
from app.domain.helpers.investments import portfolio_summary
from app.domain.helpers.validation import (
    validate_amount,
    validate_category,
    validate_return_rate,
)
from app.domain.models.aggregate import OperationResult, PortfolioSummary
from app.domain.models.investment import InvestmentRecord

logger = logging.getLogger(__name__)


def list_investments(gateway: FinanceGateway, user_id: str) -> List[InvestmentRecord]:
    try:
        return gateway.get_investments(user_id)
    except GatewayError as e:
        logger.warning("Could not load investments for %s: %s", user_id, e)
        return []


def get_portfolio(
    gateway: FinanceGateway, user_id: str
) -> Tuple[List[InvestmentRecord], PortfolioSummary]:
    investments = list_investments(gateway, user_id)
    return investments, portfolio_summary(investments)


def get_investment(
    gateway: FinanceGateway, user_id: str, investment_id: str
) -> Optional[InvestmentRecord]:
    try:
        return gateway.get_investment(user_id, investment_id)
    except GatewayError as e:
        logger.warning("Could not load investment %s: %s", investment_id, e)
        return None


def _validated(investment: InvestmentRecord) -> InvestmentRecord:
    try:
        investment.investment_type = validate_category(investment.investment_type)
    except ValueError:
        raise ValueError("Please select an investment type")
    investment.amount = validate_amount(investment.amount, "investment amount")
    investment.return_rate = validate_return_rate(investment.return_rate)
    return investment


def add_investment(
    gateway: FinanceGateway, user_id: str, investment: InvestmentRecord
) -> OperationResult:
    try:
        investment = _validated(investment)
        investment.id = None
        saved = gateway.save_investment(user_id, investment)
    except ValueError as e:
        return OperationResult.fail(str(e))
    except GatewayError as e:
        logger.warning("Could not save investment for %s: %s", user_id, e)
        return OperationResult.fail(f"Failed to save investment: {e}")
    return OperationResult.ok("Investment saved successfully", saved)


def update_investment(
    gateway: FinanceGateway,
    user_id: str,
    investment_id: str,
    changes: InvestmentRecord,
) -> OperationResult:
    """The record being edited is identified explicitly by investment_id."""
    try:
        existing = gateway.get_investment(user_id, investment_id)
        if existing is None:
            return OperationResult.fail("Investment not found")
        changes = _validated(changes)
        changes.id = investment_id
        changes.created_at = existing.created_at
        saved = gateway.save_investment(user_id, changes)
    except ValueError as e:
        return OperationResult.fail(str(e))
    except GatewayError as e:
        logger.warning("Could not update investment %s: %s", investment_id, e)
        return OperationResult.fail(f"Failed to update investment: {e}")
    return OperationResult.ok("Investment updated successfully", saved)


def delete_investment(
    gateway: FinanceGateway, user_id: str, investment_id: str
) -> OperationResult:
    try:
        gateway.delete_investment(user_id, investment_id)
    except GatewayError as e:
        logger.warning("Could not delete investment %s: %s", investment_id, e)
        return OperationResult.fail(f"Failed to delete investment: {e}")
    return OperationResult.ok("Investment deleted successfully")
