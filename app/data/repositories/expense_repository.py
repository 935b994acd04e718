import logging
import uuid
from typing import Any, Dict, List, Optional

from app.data.json_fields import (
    decimal_to_json,
    format_datetime,
    normalize_keys,
    parse_datetime,
    records_of,
    to_decimal,
)
from app.data.realtime_db import RealtimeDbClient
from app.domain.helpers.periods import as_utc, utc_now
from app.domain.models.expense import ExpenseRecord

logger = logging.getLogger(__name__)


def expenses_path(user_id: str) -> str:
    return f"users/{user_id}/expenses"


def expense_path(user_id: str, expense_id: str) -> str:
    return f"{expenses_path(user_id)}/{expense_id}"


def expense_from_json(
    record_id: str, data: Dict[str, Any], user_id: str = ""
) -> Optional[ExpenseRecord]:
    """
    Map a stored record. An unreadable date falls back to the creation time;
    with neither readable the record cannot be placed in a period and is
    skipped (None).
    """
    d = normalize_keys(data)
    created_at = parse_datetime(d.get("createdat"))
    date = parse_datetime(d.get("date")) or created_at
    if date is None:
        logger.warning(
            "Skipping expense %s of %s: unreadable date %r",
            record_id,
            user_id,
            d.get("date"),
        )
        return None
    return ExpenseRecord(
        id=d.get("id") or record_id,
        user_id=d.get("userid") or user_id,
        category=d.get("category") or "",
        amount=to_decimal(d.get("amount")),
        date=date,
        description=d.get("description") or "",
        icon=d.get("icon") or "",
        shop_name=d.get("shopname") or "",
        address=d.get("address") or "",
        location=d.get("location") or "",
        created_at=created_at,
        modified_at=parse_datetime(d.get("modifiedat")),
    )


def expense_to_json(expense: ExpenseRecord) -> Dict[str, Any]:
    return {
        "id": expense.id,
        "userId": expense.user_id,
        "category": expense.category,
        "description": expense.description,
        "amount": decimal_to_json(expense.amount),
        "date": format_datetime(expense.date),
        "icon": expense.icon,
        "shopName": expense.shop_name,
        "address": expense.address,
        "location": expense.location,
        "createdAt": format_datetime(expense.created_at),
        "modifiedAt": format_datetime(expense.modified_at),
    }


def get_expenses(client: RealtimeDbClient, user_id: str) -> List[ExpenseRecord]:
    """All expenses of a user, newest first."""
    raw = records_of(client.get(expenses_path(user_id)))
    expenses = [
        e
        for e in (expense_from_json(k, v, user_id) for k, v in raw.items())
        if e is not None
    ]
    expenses.sort(key=lambda e: as_utc(e.date), reverse=True)
    return expenses


def get_expense(
    client: RealtimeDbClient, user_id: str, expense_id: str
) -> Optional[ExpenseRecord]:
    raw = client.get(expense_path(user_id, expense_id))
    if not isinstance(raw, dict):
        return None
    return expense_from_json(expense_id, raw, user_id)


def save_expense(
    client: RealtimeDbClient, user_id: str, expense: ExpenseRecord
) -> ExpenseRecord:
    """Insert or overwrite; assigns id and creation time on first save."""
    now = utc_now()
    if not expense.id:
        expense.id = str(uuid.uuid4())
        expense.created_at = expense.created_at or now
    else:
        expense.modified_at = now
    expense.user_id = user_id
    expense.created_at = expense.created_at or now
    client.put(expense_path(user_id, expense.id), expense_to_json(expense))
    return expense


def delete_expense(client: RealtimeDbClient, user_id: str, expense_id: str) -> bool:
    client.delete(expense_path(user_id, expense_id))
    return True
