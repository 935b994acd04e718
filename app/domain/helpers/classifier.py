from datetime import datetime
from decimal import Decimal
from typing import Iterable, List, Optional, Tuple

from app.domain.helpers.aggregation import overage, safe_percentage
from app.domain.models.alert import AlertTier, BudgetAlert, DisplayTier
from app.domain.models.budget import BudgetAllocation

# Alert severity thresholds, in percent of the allocation used
CRITICAL_THRESHOLD = 110.0
HIGH_THRESHOLD = 100.0
MEDIUM_THRESHOLD = 90.0

# Display color thresholds; intentionally separate from the alert tiers
RED_THRESHOLD = 100.0
ORANGE_THRESHOLD = 90.0
YELLOW_THRESHOLD = 75.0


def classify_alert_tier(percentage_used: float) -> AlertTier:
    if percentage_used >= CRITICAL_THRESHOLD:
        return AlertTier.CRITICAL
    if percentage_used >= HIGH_THRESHOLD:
        return AlertTier.HIGH
    if percentage_used >= MEDIUM_THRESHOLD:
        return AlertTier.MEDIUM
    return AlertTier.LOW


def classify_display_tier(percentage_used: float) -> DisplayTier:
    if percentage_used < YELLOW_THRESHOLD:
        return DisplayTier.GREEN
    if percentage_used < ORANGE_THRESHOLD:
        return DisplayTier.YELLOW
    if percentage_used < RED_THRESHOLD:
        return DisplayTier.ORANGE
    return DisplayTier.RED


def alert_message(
    category: str, allocated: Decimal, spend: Decimal, percentage_used: float
) -> str:
    if spend > allocated:
        return (
            f"{category} budget exceeded! Spent ₹{spend:.2f} of ₹{allocated:.2f} "
            f"(Overage: ₹{spend - allocated:.2f})"
        )
    return (
        f"{category} budget: ₹{spend:.2f} / ₹{allocated:.2f} "
        f"({percentage_used:.1f}% used)"
    )


def evaluate_budget_alert(
    allocation: BudgetAllocation, spend: Decimal, now: datetime
) -> BudgetAlert:
    """
    Compare a category's spending with its allocation. A zero allocation
    yields 0% used rather than raising.
    """
    allocated = allocation.allocated_amount
    percentage_used = safe_percentage(spend, allocated)
    return BudgetAlert(
        category=allocation.category,
        budget_amount=allocated,
        current_spending=spend,
        overage=overage(allocated, spend),
        percentage_used=percentage_used,
        has_exceeded=spend > allocated,
        tier=classify_alert_tier(percentage_used),
        message=alert_message(allocation.category, allocated, spend, percentage_used),
        checked_at=now,
    )


def exceeded_only(alerts: Iterable[BudgetAlert]) -> List[BudgetAlert]:
    return [a for a in alerts if a.has_exceeded]


def critical_alert_notification(
    category: str, overage_amount: Decimal
) -> Tuple[str, str]:
    title = f"🚨 {category} Budget Exceeded!"
    message = (
        f"You've exceeded the budget by ₹{overage_amount:,.2f}. "
        "Please review your spending."
    )
    return title, message


def warning_notification(category: str, percentage_used: float) -> Tuple[str, str]:
    title = f"⚠️ {category} Budget Warning"
    message = f"You've used {percentage_used:.1f}% of your {category} budget."
    return title, message


def notification_for_alert(alert: BudgetAlert) -> Optional[Tuple[str, str]]:
    """Pick the notification matching an evaluated alert, if it deserves one."""
    if alert.has_exceeded:
        return critical_alert_notification(alert.category, alert.overage)
    if alert.tier == AlertTier.MEDIUM:
        return warning_notification(alert.category, alert.percentage_used)
    return None


def daily_summary_notification(
    rows: Iterable[Tuple[str, Decimal, Decimal]],
) -> Optional[Tuple[str, str]]:
    """
    rows: (category, spent, budget). Returns (title, message) listing every
    exceeded category, or None when nothing is over budget.
    """
    exceeded = [(c, s, b) for c, s, b in rows if s > b]
    if not exceeded:
        return None
    title = f"Daily Budget Summary - {len(exceeded)} Category Alert(s)"
    message = "\n".join(f"• {c}: ₹{s:,.2f} / ₹{b:,.2f}" for c, s, b in exceeded)
    return title, message
