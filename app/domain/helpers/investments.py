from decimal import Decimal
from typing import Iterable

from app.domain.helpers.aggregation import ZERO
from app.domain.models.aggregate import PortfolioSummary
from app.domain.models.investment import InvestmentRecord


def expected_annual_return(investment: InvestmentRecord) -> Decimal:
    return investment.amount * (investment.return_rate or ZERO) / 100


def future_value(amount: Decimal, rate: Decimal) -> Decimal:
    """Value after one year at `rate` percent."""
    return amount * (1 + rate / 100)


def compound_value(principal: Decimal, rate: Decimal, years: int) -> Decimal:
    """Annually compounded value: P * (1 + r/100) ** t."""
    return principal * (1 + rate / 100) ** years


def portfolio_summary(investments: Iterable[InvestmentRecord]) -> PortfolioSummary:
    investments = list(investments)
    return PortfolioSummary(
        total_invested=sum((i.amount for i in investments), ZERO),
        total_expected_return=sum(
            (expected_annual_return(i) for i in investments), ZERO
        ),
        count=len(investments),
        monthly_commitment=sum(
            (i.amount for i in investments if i.is_recurring), ZERO
        ),
    )
