from decimal import Decimal
from typing import Any, Dict, Optional

from app.data.json_fields import (
    decimal_to_json,
    format_datetime,
    normalize_keys,
    parse_datetime,
    to_decimal,
)
from app.data.realtime_db import RealtimeDbClient
from app.domain.helpers.periods import utc_now
from app.domain.models.user import UserProfile


def user_path(user_id: str) -> str:
    return f"users/{user_id}"


def profile_from_json(user_id: str, data: Dict[str, Any]) -> UserProfile:
    d = normalize_keys(data)
    return UserProfile(
        id=d.get("id") or user_id,
        email=d.get("email") or "",
        full_name=d.get("fullname") or "User",
        created_at=parse_datetime(d.get("createdat")),
        profile_image_url=d.get("profileimageurl"),
        phone_number=d.get("phonenumber"),
        location=d.get("location"),
        total_expenses=to_decimal(d.get("totalexpenses")),
        last_login=parse_datetime(d.get("lastlogin")),
    )


def profile_fields(profile: UserProfile) -> Dict[str, Any]:
    return {
        "id": profile.id,
        "fullName": profile.full_name,
        "email": profile.email,
        "createdAt": format_datetime(profile.created_at),
        "profileImageUrl": profile.profile_image_url,
        "phoneNumber": profile.phone_number,
        "location": profile.location,
        "totalExpenses": decimal_to_json(profile.total_expenses),
        "lastLogin": format_datetime(profile.last_login),
    }


def get_profile(client: RealtimeDbClient, user_id: str) -> Optional[UserProfile]:
    raw = client.get(user_path(user_id))
    if not isinstance(raw, dict):
        return None
    return profile_from_json(user_id, raw)


def save_profile(
    client: RealtimeDbClient,
    user_id: str,
    profile: UserProfile,
    id_token: Optional[str] = None,
) -> UserProfile:
    """
    Write the profile fields one by one so the nested expense, budget, salary
    and investment collections under the user node are left untouched.
    """
    profile.created_at = profile.created_at or utc_now()
    for name, value in profile_fields(profile).items():
        client.put(f"{user_path(user_id)}/{name}", value, auth_token=id_token)
    return profile


def set_total_expenses(
    client: RealtimeDbClient, user_id: str, total: Decimal
) -> None:
    client.put(f"{user_path(user_id)}/totalExpenses", decimal_to_json(total))
