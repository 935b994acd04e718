import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from app.data.json_fields import (
    decimal_to_json,
    format_datetime,
    normalize_keys,
    parse_datetime,
    records_of,
    to_decimal,
)
from app.data.realtime_db import RealtimeDbClient
from app.domain.helpers.periods import utc_now
from app.domain.models.salary import SalaryFrequency, SalaryRecord

logger = logging.getLogger(__name__)

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


def salary_path(user_id: str) -> str:
    return f"users/{user_id}/salary"


def parse_frequency(value: Any) -> SalaryFrequency:
    try:
        return SalaryFrequency(value)
    except ValueError:
        logger.debug("Unknown salary frequency %r, treating as Monthly", value)
        return SalaryFrequency.MONTHLY


def salary_from_json(
    record_id: str, data: Dict[str, Any], user_id: str = ""
) -> SalaryRecord:
    d = normalize_keys(data)
    return SalaryRecord(
        id=d.get("id") or record_id,
        user_id=d.get("userid") or user_id,
        amount=to_decimal(d.get("amount")),
        frequency=parse_frequency(d.get("frequency") or "Monthly"),
        start_date=parse_datetime(d.get("startdate")),
        notes=d.get("notes") or "",
        created_at=parse_datetime(d.get("createdat")),
        updated_at=parse_datetime(d.get("updatedat")),
    )


def salary_to_json(salary: SalaryRecord) -> Dict[str, Any]:
    return {
        "id": salary.id,
        "userId": salary.user_id,
        "amount": decimal_to_json(salary.amount),
        "frequency": salary.frequency.value,
        "startDate": format_datetime(salary.start_date),
        "notes": salary.notes,
        "createdAt": format_datetime(salary.created_at),
        "updatedAt": format_datetime(salary.updated_at),
    }


def get_salary(client: RealtimeDbClient, user_id: str) -> Optional[SalaryRecord]:
    """
    The most recently created salary record. Older stores keep a single
    record directly under the salary node, which is accepted too.
    """
    raw = client.get(salary_path(user_id))
    if not isinstance(raw, dict):
        return None
    if "amount" in normalize_keys(raw):
        return salary_from_json("", raw, user_id)

    salaries = [salary_from_json(k, v, user_id) for k, v in records_of(raw).items()]
    if not salaries:
        return None
    return max(salaries, key=lambda s: s.created_at or _EPOCH)


def save_salary(
    client: RealtimeDbClient, user_id: str, salary: SalaryRecord
) -> SalaryRecord:
    now = utc_now()
    salary.id = salary.id or str(uuid.uuid4())
    salary.user_id = user_id
    salary.created_at = salary.created_at or now
    salary.updated_at = now
    client.put(f"{salary_path(user_id)}/{salary.id}", salary_to_json(salary))
    return salary
