from datetime import timedelta

import pytest

from app.domain.models.budget import BudgetAllocation
from app.domain.models.expense import ExpenseRecord
from app.domain.models.investment import InvestmentRecord
from app.domain.models.salary import SalaryRecord
from app.domain.services.dashboard_service import build_dashboard

USER = "u1"


def seed(gateway, now):
    gateway.save_salary(USER, SalaryRecord(amount=50000))
    gateway.save_investment(
        USER, InvestmentRecord(investment_type="Gold", amount=5000, investment_date=now)
    )
    gateway.save_budget(
        USER,
        BudgetAllocation(category="Food", allocated_amount=2000, month=now.month, year=now.year),
    )
    for category, amount, days_ago in [
        ("Food", 400, 1),
        ("Travel", 300, 2),
        ("Food", 100, 3),
        ("Bills", 200, 4),
        ("Food", 9999, 40),
    ]:
        gateway.save_expense(
            USER,
            ExpenseRecord(
                category=category, amount=amount, date=now - timedelta(days=days_ago)
            ),
        )


@pytest.mark.asyncio
async def test_dashboard_current_month_figures(gateway, now):
    seed(gateway, now)
    snapshot = await build_dashboard(gateway, USER, now)
    assert (snapshot.month, snapshot.year) == (6, 2025)
    assert snapshot.monthly_salary == 50000
    assert snapshot.total_investments == 5000
    assert snapshot.total_spent == 1000
    assert snapshot.budget_progress == pytest.approx(50)
    assert snapshot.savings_rate == pytest.approx(98)
    assert [e.amount for e in snapshot.recent_expenses] == [400, 300, 100]
    assert [a.category for a in snapshot.category_breakdown] == ["Food", "Travel", "Bills"]
    assert not snapshot.is_new_user


@pytest.mark.asyncio
async def test_dashboard_for_new_user(gateway, now):
    snapshot = await build_dashboard(gateway, USER, now)
    assert snapshot.is_new_user
    assert snapshot.savings_rate == 0
    assert snapshot.category_breakdown == []


@pytest.mark.asyncio
async def test_dashboard_survives_partial_store_failure(store, gateway, now):
    seed(gateway, now)
    store.fail_paths = {f"users/{USER}/investments", f"users/{USER}/salary"}
    snapshot = await build_dashboard(gateway, USER, now)
    assert snapshot.total_investments == 0
    assert snapshot.monthly_salary == 0
    assert snapshot.savings_rate == 0
    assert snapshot.total_spent == 1000
