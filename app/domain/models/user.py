# app/domain/models/user.py
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional


@dataclass
class UserProfile:
    id: str
    email: str
    full_name: str = "User"
    created_at: Optional[datetime] = None
    profile_image_url: Optional[str] = None
    phone_number: Optional[str] = None
    location: Optional[str] = None
    total_expenses: Decimal = Decimal("0")
    last_login: Optional[datetime] = None


@dataclass
class AuthSession:
    user_id: str
    email: str
    id_token: str
    refresh_token: str = ""
    expires_in: int = 3600
