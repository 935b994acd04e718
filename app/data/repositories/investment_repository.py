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
from app.domain.helpers.periods import utc_now
from app.domain.models.investment import InvestmentFrequency, InvestmentRecord


def investments_path(user_id: str) -> str:
    return f"users/{user_id}/investments"


def investment_from_json(
    record_id: str, data: Dict[str, Any], user_id: str = ""
) -> InvestmentRecord:
    d = normalize_keys(data)
    rate = d.get("returnrate")
    try:
        frequency = InvestmentFrequency(d.get("investmentfrequency") or "One-Time")
    except ValueError:
        frequency = InvestmentFrequency.ONE_TIME
    created_at = parse_datetime(d.get("createdat"))
    return InvestmentRecord(
        id=d.get("id") or record_id,
        user_id=d.get("userid") or user_id,
        investment_type=d.get("investmenttype") or "",
        amount=to_decimal(d.get("amount")),
        return_rate=None if rate is None else to_decimal(rate),
        investment_date=parse_datetime(d.get("investmentdate"))
        or created_at
        or utc_now(),
        frequency=frequency,
        description=d.get("description") or "",
        created_at=created_at,
        updated_at=parse_datetime(d.get("updatedat")),
    )


def investment_to_json(investment: InvestmentRecord) -> Dict[str, Any]:
    return {
        "id": investment.id,
        "userId": investment.user_id,
        "investmentType": investment.investment_type,
        "amount": decimal_to_json(investment.amount),
        "returnRate": decimal_to_json(investment.return_rate),
        "investmentDate": format_datetime(investment.investment_date),
        "description": investment.description,
        "investmentFrequency": investment.frequency.value,
        "createdAt": format_datetime(investment.created_at),
        "updatedAt": format_datetime(investment.updated_at),
    }


def get_investments(client: RealtimeDbClient, user_id: str) -> List[InvestmentRecord]:
    raw = records_of(client.get(investments_path(user_id)))
    return [investment_from_json(k, v, user_id) for k, v in raw.items()]


def get_investment(
    client: RealtimeDbClient, user_id: str, investment_id: str
) -> Optional[InvestmentRecord]:
    raw = client.get(f"{investments_path(user_id)}/{investment_id}")
    if not isinstance(raw, dict):
        return None
    return investment_from_json(investment_id, raw, user_id)


def save_investment(
    client: RealtimeDbClient, user_id: str, investment: InvestmentRecord
) -> InvestmentRecord:
    now = utc_now()
    investment.id = investment.id or str(uuid.uuid4())
    investment.user_id = user_id
    investment.created_at = investment.created_at or now
    investment.updated_at = now
    client.put(
        f"{investments_path(user_id)}/{investment.id}", investment_to_json(investment)
    )
    return investment


def delete_investment(
    client: RealtimeDbClient, user_id: str, investment_id: str
) -> bool:
    client.delete(f"{investments_path(user_id)}/{investment_id}")
    return True
