import uuid
from typing import Any, Dict, List

from app.data.json_fields import (
    decimal_to_json,
    format_datetime,
    normalize_keys,
    parse_datetime,
    records_of,
    to_decimal,
    to_int,
)
from app.data.realtime_db import RealtimeDbClient
from app.domain.helpers.periods import utc_now
from app.domain.models.budget import BudgetAllocation


def budgets_path(user_id: str) -> str:
    return f"users/{user_id}/budgets"


def budget_from_json(
    record_id: str, data: Dict[str, Any], user_id: str = ""
) -> BudgetAllocation:
    d = normalize_keys(data)
    return BudgetAllocation(
        id=d.get("id") or record_id,
        user_id=d.get("userid") or user_id,
        category=d.get("category") or "",
        allocated_amount=to_decimal(d.get("allocatedamount")),
        month=to_int(d.get("month")),
        year=to_int(d.get("year")),
        notes=d.get("notes") or "",
        created_at=parse_datetime(d.get("createdat")),
        updated_at=parse_datetime(d.get("updatedat")),
    )


def budget_to_json(budget: BudgetAllocation) -> Dict[str, Any]:
    return {
        "id": budget.id,
        "userId": budget.user_id,
        "category": budget.category,
        "allocatedAmount": decimal_to_json(budget.allocated_amount),
        "month": budget.month,
        "year": budget.year,
        "notes": budget.notes,
        "createdAt": format_datetime(budget.created_at),
        "updatedAt": format_datetime(budget.updated_at),
    }


def get_all_budgets(client: RealtimeDbClient, user_id: str) -> List[BudgetAllocation]:
    raw = records_of(client.get(budgets_path(user_id)))
    return [budget_from_json(k, v, user_id) for k, v in raw.items()]


def get_budgets(
    client: RealtimeDbClient, user_id: str, month: int, year: int
) -> List[BudgetAllocation]:
    """Allocations of one period, ordered by category."""
    budgets = [
        b
        for b in get_all_budgets(client, user_id)
        if b.month == month and b.year == year
    ]
    budgets.sort(key=lambda b: b.category)
    return budgets


def save_budget(
    client: RealtimeDbClient, user_id: str, budget: BudgetAllocation
) -> BudgetAllocation:
    now = utc_now()
    budget.id = budget.id or str(uuid.uuid4())
    budget.user_id = user_id
    budget.created_at = budget.created_at or now
    budget.updated_at = now
    client.put(f"{budgets_path(user_id)}/{budget.id}", budget_to_json(budget))
    return budget


def delete_budget(client: RealtimeDbClient, user_id: str, budget_id: str) -> bool:
    client.delete(f"{budgets_path(user_id)}/{budget_id}")
    return True
