from decimal import Decimal
from typing import List, Optional

from app.data.realtime_db import RealtimeDbClient, create_client_from_env
from app.data.repositories import (
    budget_repository,
    expense_repository,
    investment_repository,
    salary_repository,
    user_repository,
)
from app.domain.models.budget import BudgetAllocation
from app.domain.models.expense import ExpenseRecord
from app.domain.models.investment import InvestmentRecord
from app.domain.models.salary import SalaryRecord
from app.domain.models.user import UserProfile


class FinanceGateway:
    """
    Typed access to every per-user collection of the document store.
    Methods raise GatewayError on transport or store failures.
    """

    def __init__(self, client: RealtimeDbClient):
        self.client = client

    # expenses
    def get_expenses(self, user_id: str) -> List[ExpenseRecord]:
        return expense_repository.get_expenses(self.client, user_id)

    def get_expense(self, user_id: str, expense_id: str) -> Optional[ExpenseRecord]:
        return expense_repository.get_expense(self.client, user_id, expense_id)

    def save_expense(self, user_id: str, expense: ExpenseRecord) -> ExpenseRecord:
        return expense_repository.save_expense(self.client, user_id, expense)

    def delete_expense(self, user_id: str, expense_id: str) -> bool:
        return expense_repository.delete_expense(self.client, user_id, expense_id)

    # budgets
    def get_budgets(self, user_id: str, month: int, year: int) -> List[BudgetAllocation]:
        return budget_repository.get_budgets(self.client, user_id, month, year)

    def get_all_budgets(self, user_id: str) -> List[BudgetAllocation]:
        return budget_repository.get_all_budgets(self.client, user_id)

    def save_budget(self, user_id: str, budget: BudgetAllocation) -> BudgetAllocation:
        return budget_repository.save_budget(self.client, user_id, budget)

    def delete_budget(self, user_id: str, budget_id: str) -> bool:
        return budget_repository.delete_budget(self.client, user_id, budget_id)

    # salary
    def get_salary(self, user_id: str) -> Optional[SalaryRecord]:
        return salary_repository.get_salary(self.client, user_id)

    def save_salary(self, user_id: str, salary: SalaryRecord) -> SalaryRecord:
        return salary_repository.save_salary(self.client, user_id, salary)

    # investments
    def get_investments(self, user_id: str) -> List[InvestmentRecord]:
        return investment_repository.get_investments(self.client, user_id)

    def get_investment(
        self, user_id: str, investment_id: str
    ) -> Optional[InvestmentRecord]:
        return investment_repository.get_investment(self.client, user_id, investment_id)

    def save_investment(
        self, user_id: str, investment: InvestmentRecord
    ) -> InvestmentRecord:
        return investment_repository.save_investment(self.client, user_id, investment)

    def delete_investment(self, user_id: str, investment_id: str) -> bool:
        return investment_repository.delete_investment(
            self.client, user_id, investment_id
        )

    # profile
    def get_profile(self, user_id: str) -> Optional[UserProfile]:
        return user_repository.get_profile(self.client, user_id)

    def save_profile(
        self, user_id: str, profile: UserProfile, id_token: Optional[str] = None
    ) -> UserProfile:
        return user_repository.save_profile(self.client, user_id, profile, id_token)

    def set_total_expenses(self, user_id: str, total: Decimal) -> None:
        user_repository.set_total_expenses(self.client, user_id, total)


_gateway: Optional[FinanceGateway] = None


def get_gateway() -> FinanceGateway:
    """FastAPI dependency; builds the store-backed gateway on first use."""
    global _gateway
    if _gateway is None:
        _gateway = FinanceGateway(create_client_from_env())
    return _gateway
