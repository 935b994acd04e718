# app/domain/models/expense.py
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional


@dataclass
class ExpenseRecord:
    category: str
    amount: Decimal
    date: datetime
    user_id: str = ""
    id: Optional[str] = None
    description: str = ""
    icon: str = ""
    shop_name: str = ""
    address: str = ""
    location: str = ""
    created_at: Optional[datetime] = None
    modified_at: Optional[datetime] = None
