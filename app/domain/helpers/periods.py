from calendar import monthrange
from datetime import datetime, timezone
from typing import Optional


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """
    Normalise a datetime to UTC. Naive datetimes are taken to already be UTC.
    """
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def current_period(now: Optional[datetime] = None) -> tuple[int, int]:
    now = as_utc(now or utc_now())
    return now.month, now.year


def months_ago(now: datetime, months: int) -> datetime:
    """
    Shift `now` back by whole calendar months, clamping the day to the
    length of the target month (e.g. 31 May - 3 months = 28/29 Feb).
    """
    year = now.year
    month = now.month - months
    while month <= 0:
        year -= 1
        month += 12
    day = min(now.day, monthrange(year, month)[1])
    return now.replace(year=year, month=month, day=day)
