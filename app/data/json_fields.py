import re
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, Optional

from app.domain.helpers.periods import as_utc
from app.domain.helpers.validation import as_decimal

# Fractions longer than microseconds (e.g. 7 digits written by .NET clients)
_LONG_FRACTION = re.compile(r"(\.\d{6})\d+")


def normalize_keys(data: Dict[str, Any]) -> Dict[str, Any]:
    """Lower-case keys so camelCase, PascalCase and lower-case records all read alike."""
    return {str(k).lower(): v for k, v in (data or {}).items()}


def parse_datetime(value: Any) -> Optional[datetime]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return as_utc(value)
    text = str(value).strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    text = _LONG_FRACTION.sub(r"\1", text)
    try:
        return as_utc(datetime.fromisoformat(text))
    except ValueError:
        return None


def format_datetime(value: Optional[datetime]) -> Optional[str]:
    return as_utc(value).isoformat() if value else None


def to_decimal(value: Any, default: Decimal = Decimal("0")) -> Decimal:
    """
    Read a stored number as Decimal. Floats go through their shortest repr,
    so 0.1 in the store reads back as Decimal("0.1").
    """
    amount = as_decimal(value)
    return default if amount is None else amount


def decimal_to_json(value: Optional[Decimal]) -> Optional[float]:
    # the store only knows JSON numbers
    return None if value is None else float(value)


def to_int(value: Any, default: int = 0) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def records_of(raw: Any) -> Dict[str, Dict[str, Any]]:
    """
    Collections are stored as {record_id: record}; anything else reads as empty.
    """
    if not isinstance(raw, dict):
        return {}
    return {k: v for k, v in raw.items() if isinstance(v, dict)}
