from datetime import datetime, timezone
from decimal import Decimal

from app.data.repositories.salary_repository import get_salary, parse_frequency
from app.domain.models.budget import BudgetAllocation
from app.domain.models.expense import ExpenseRecord
from app.domain.models.investment import InvestmentFrequency, InvestmentRecord
from app.domain.models.salary import SalaryFrequency, SalaryRecord
from app.domain.models.user import UserProfile


def test_expenses_read_case_insensitively_newest_first(store, gateway):
    store.data = {
        "users": {
            "u1": {
                "expenses": {
                    "e1": {
                        "Category": "Food",
                        "Amount": 120.5,
                        "Date": "2025-06-01T10:00:00.1234567Z",
                        "ShopName": "Deli",
                    },
                    "e2": {"category": "Travel", "amount": "80", "date": "2025-06-03"},
                    "broken": "not-a-record",
                }
            }
        }
    }
    expenses = gateway.get_expenses("u1")
    assert [e.id for e in expenses] == ["e2", "e1"]
    assert expenses[1].shop_name == "Deli"
    assert expenses[1].amount == Decimal("120.5")
    assert expenses[1].date == datetime(2025, 6, 1, 10, 0, 0, 123456, tzinfo=timezone.utc)
    assert expenses[0].amount == 80
    assert expenses[0].date.tzinfo == timezone.utc


def test_amounts_read_back_as_exact_decimals(store, gateway):
    saved = gateway.save_expense(
        "u1",
        ExpenseRecord(
            category="Food",
            amount=Decimal("0.1"),
            date=datetime(2025, 6, 2, tzinfo=timezone.utc),
        ),
    )
    assert store.data["users"]["u1"]["expenses"][saved.id]["amount"] == 0.1
    assert gateway.get_expense("u1", saved.id).amount == Decimal("0.1")


def test_unreadable_expense_date_falls_back_to_created_at_only(store, gateway):
    store.data = {
        "users": {
            "u1": {
                "expenses": {
                    "legacy": {
                        "category": "Food",
                        "amount": 40,
                        "date": "15/01/2020",
                        "createdAt": "2020-01-15T08:00:00Z",
                    },
                    "corrupt": {"category": "Food", "amount": 60, "date": "15/01/2020"},
                }
            }
        }
    }
    [legacy] = gateway.get_expenses("u1")
    assert legacy.id == "legacy"
    assert legacy.date == datetime(2020, 1, 15, 8, 0, tzinfo=timezone.utc)
    assert gateway.get_expense("u1", "corrupt") is None


def test_missing_collections_read_as_empty(gateway):
    assert gateway.get_expenses("nobody") == []
    assert gateway.get_all_budgets("nobody") == []
    assert gateway.get_investments("nobody") == []
    assert gateway.get_salary("nobody") is None
    assert gateway.get_profile("nobody") is None


def test_save_expense_assigns_id_and_writes_camel_case(store, gateway):
    saved = gateway.save_expense(
        "u1",
        ExpenseRecord(
            category="Food",
            amount=50,
            date=datetime(2025, 6, 2, tzinfo=timezone.utc),
            shop_name="Cafe",
        ),
    )
    assert saved.id
    assert saved.user_id == "u1"
    assert saved.created_at is not None
    raw = store.data["users"]["u1"]["expenses"][saved.id]
    assert raw["shopName"] == "Cafe"
    assert raw["userId"] == "u1"
    assert raw["date"] == "2025-06-02T00:00:00+00:00"
    assert gateway.get_expense("u1", saved.id).shop_name == "Cafe"


def test_resaving_expense_sets_modified_at(gateway):
    saved = gateway.save_expense(
        "u1", ExpenseRecord(category="Food", amount=5, date=datetime.now(timezone.utc))
    )
    assert saved.modified_at is None
    again = gateway.save_expense("u1", saved)
    assert again.id == saved.id
    assert again.modified_at is not None


def test_delete_expense(store, gateway):
    saved = gateway.save_expense(
        "u1", ExpenseRecord(category="Food", amount=5, date=datetime.now(timezone.utc))
    )
    assert gateway.delete_expense("u1", saved.id)
    assert gateway.get_expense("u1", saved.id) is None


def test_budgets_filtered_by_period_and_ordered_by_category(gateway):
    for category, month in [("Travel", 6), ("Food", 6), ("Bills", 5)]:
        gateway.save_budget(
            "u1",
            BudgetAllocation(category=category, allocated_amount=100, month=month, year=2025),
        )
    june = gateway.get_budgets("u1", 6, 2025)
    assert [b.category for b in june] == ["Food", "Travel"]
    assert len(gateway.get_all_budgets("u1")) == 3


def test_salary_most_recent_by_created_at(store, gateway):
    store.data = {
        "users": {
            "u1": {
                "salary": {
                    "s1": {"amount": 40000, "createdAt": "2025-01-01T00:00:00Z"},
                    "s2": {
                        "amount": 52000,
                        "frequency": "Annual",
                        "createdAt": "2025-03-01T00:00:00Z",
                    },
                    "s3": {"amount": 45000, "createdAt": "2025-02-01T00:00:00Z"},
                }
            }
        }
    }
    salary = gateway.get_salary("u1")
    assert salary.id == "s2"
    assert salary.frequency == SalaryFrequency.ANNUAL
    assert salary.monthly_amount() == Decimal(52000) / 12


def test_salary_single_unkeyed_object_is_accepted(store):
    store.data = {"users": {"u1": {"salary": {"Amount": 30000, "Frequency": "Weekly"}}}}

    salary = get_salary(store, "u1")
    assert salary.amount == 30000
    assert salary.frequency == SalaryFrequency.WEEKLY


def test_unknown_salary_frequency_falls_back_to_monthly(gateway):
    saved = gateway.save_salary("u1", SalaryRecord(amount=1000))
    assert gateway.get_salary("u1").id == saved.id

    assert parse_frequency("Fortnightly") == SalaryFrequency.MONTHLY


def test_investments_round_trip(store, gateway):
    saved = gateway.save_investment(
        "u1",
        InvestmentRecord(
            investment_type="Mutual Fund",
            amount=10000,
            return_rate=8.5,
            investment_date=datetime(2025, 1, 1, tzinfo=timezone.utc),
            frequency=InvestmentFrequency.MONTHLY_SIP,
        ),
    )
    raw = store.data["users"]["u1"]["investments"][saved.id]
    assert raw["investmentFrequency"] == "Monthly SIP"
    assert raw["returnRate"] == 8.5
    loaded = gateway.get_investment("u1", saved.id)
    assert loaded.is_recurring
    assert loaded.return_rate == Decimal("8.5")
    assert [i.id for i in gateway.get_investments("u1")] == [saved.id]
    gateway.delete_investment("u1", saved.id)
    assert gateway.get_investments("u1") == []


def test_profile_save_keeps_nested_collections(store, gateway):
    gateway.save_expense(
        "u1", ExpenseRecord(category="Food", amount=5, date=datetime.now(timezone.utc))
    )
    gateway.save_profile("u1", UserProfile(id="u1", email="a@b.co", full_name="Ann"))
    gateway.set_total_expenses("u1", 5)
    profile = gateway.get_profile("u1")
    assert profile.full_name == "Ann"
    assert profile.total_expenses == 5
    assert "expenses" in store.data["users"]["u1"]
    assert ("PUT", "users/u1/totalExpenses") in store.calls
