from datetime import datetime, timezone
from decimal import Decimal

import pytest

from app.domain.helpers.aggregation import category_spend
from app.domain.helpers.classifier import (
    alert_message,
    classify_alert_tier,
    classify_display_tier,
    critical_alert_notification,
    daily_summary_notification,
    evaluate_budget_alert,
    exceeded_only,
    notification_for_alert,
    warning_notification,
)
from app.domain.models.alert import AlertTier, DisplayTier
from app.domain.models.budget import BudgetAllocation
from app.domain.models.expense import ExpenseRecord

NOW = datetime(2025, 6, 15, tzinfo=timezone.utc)


def allocation(category="Food", amount="900"):
    return BudgetAllocation(
        category=category, allocated_amount=Decimal(amount), month=6, year=2025
    )


@pytest.mark.parametrize(
    "pct, tier",
    [
        (74.9, DisplayTier.GREEN),
        (75, DisplayTier.YELLOW),
        (89.9, DisplayTier.YELLOW),
        (90, DisplayTier.ORANGE),
        (99.9, DisplayTier.ORANGE),
        (100, DisplayTier.RED),
        (250, DisplayTier.RED),
    ],
)
def test_display_tier_boundaries(pct, tier):
    assert classify_display_tier(pct) == tier


@pytest.mark.parametrize(
    "pct, tier",
    [
        (0, AlertTier.LOW),
        (89.9, AlertTier.LOW),
        (90, AlertTier.MEDIUM),
        (99.9, AlertTier.MEDIUM),
        (100, AlertTier.HIGH),
        (109.9, AlertTier.HIGH),
        (110, AlertTier.CRITICAL),
    ],
)
def test_alert_tier_boundaries(pct, tier):
    assert classify_alert_tier(pct) == tier


def test_exceeded_food_budget_is_critical():
    alert = evaluate_budget_alert(allocation(), 1000, NOW)
    assert alert.has_exceeded
    assert alert.overage == 100
    assert alert.percentage_used == pytest.approx(111.11, abs=0.01)
    assert alert.percentage_exceeded == pytest.approx(11.11, abs=0.01)
    assert alert.tier == AlertTier.CRITICAL
    assert alert.message == (
        "Food budget exceeded! Spent ₹1000.00 of ₹900.00 (Overage: ₹100.00)"
    )
    assert alert.checked_at == NOW


def test_within_budget_alert_message():
    alert = evaluate_budget_alert(allocation("Travel", 500), 400, NOW)
    assert not alert.has_exceeded
    assert alert.overage == 0
    assert alert.tier == AlertTier.LOW
    assert alert.message == "Travel budget: ₹400.00 / ₹500.00 (80.0% used)"


def test_spending_exactly_the_budget_is_not_exceeded():
    alert = evaluate_budget_alert(allocation("Bills", 500), 500, NOW)
    assert not alert.has_exceeded
    assert alert.tier == AlertTier.HIGH


def test_spend_adding_up_to_the_budget_in_cents_is_not_exceeded():
    expenses = [
        ExpenseRecord(category="Food", amount=Decimal("0.1"), date=NOW),
        ExpenseRecord(category="Food", amount=Decimal("0.2"), date=NOW),
    ]
    spend = category_spend(expenses, "Food", 6, 2025)
    assert spend == Decimal("0.3")

    alert = evaluate_budget_alert(allocation("Food", "0.30"), spend, NOW)
    assert not alert.has_exceeded
    assert alert.overage == 0
    assert alert.percentage_used == 100
    assert alert.tier == AlertTier.HIGH
    assert alert.message == "Food budget: ₹0.30 / ₹0.30 (100.0% used)"


def test_one_cent_over_is_exceeded():
    alert = evaluate_budget_alert(allocation("Food", "0.30"), Decimal("0.31"), NOW)
    assert alert.has_exceeded
    assert alert.overage == Decimal("0.01")


def test_zero_allocation_is_guarded():
    alert = evaluate_budget_alert(allocation("Other", 0), 50, NOW)
    assert alert.percentage_used == 0
    assert alert.percentage_exceeded == 0
    assert alert.has_exceeded
    assert alert.overage == 50


def test_exceeded_only_filters():
    alerts = [
        evaluate_budget_alert(allocation("Food", 900), 1000, NOW),
        evaluate_budget_alert(allocation("Travel", 500), 100, NOW),
    ]
    assert [a.category for a in exceeded_only(alerts)] == ["Food"]


def test_alert_message_formats_percentage_with_one_decimal():
    assert alert_message("Food", 300, 100, 33.333) == (
        "Food budget: ₹100.00 / ₹300.00 (33.3% used)"
    )


def test_notifications():
    title, message = critical_alert_notification("Food", Decimal("1234.5"))
    assert title == "🚨 Food Budget Exceeded!"
    assert "₹1,234.50" in message

    title, message = warning_notification("Travel", 92.34)
    assert title == "⚠️ Travel Budget Warning"
    assert message == "You've used 92.3% of your Travel budget."


def test_notification_for_alert_picks_by_state():
    exceeded = evaluate_budget_alert(allocation("Food", 900), 1000, NOW)
    warning = evaluate_budget_alert(allocation("Travel", 100), 95, NOW)
    quiet = evaluate_budget_alert(allocation("Bills", 100), 10, NOW)
    assert notification_for_alert(exceeded)[0] == "🚨 Food Budget Exceeded!"
    assert notification_for_alert(warning)[0] == "⚠️ Travel Budget Warning"
    assert notification_for_alert(quiet) is None


def test_daily_summary_lists_exceeded_categories_only():
    assert daily_summary_notification([("Food", 100, 200)]) is None
    title, message = daily_summary_notification(
        [("Food", 1000, 900), ("Travel", 100, 500), ("Bills", 2500, 2000)]
    )
    assert title == "Daily Budget Summary - 2 Category Alert(s)"
    assert message.splitlines() == [
        "• Food: ₹1,000.00 / ₹900.00",
        "• Bills: ₹2,500.00 / ₹2,000.00",
    ]
