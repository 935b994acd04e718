import logging
import os
from datetime import datetime, timedelta, timezone
from typing import Optional

from dotenv import load_dotenv
from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError, jwt

from app.data.gateway import FinanceGateway
from app.data.realtime_db import GatewayError
from app.domain.helpers.periods import utc_now
from app.domain.helpers.validation import (
    validate_email,
    validate_full_name,
    validate_password,
)
from app.domain.models.user import AuthSession, UserProfile
from app.integrations.identity_service import IdentityClient

load_dotenv()
logger = logging.getLogger(__name__)

SECRET_KEY = os.getenv("SECRET_KEY")
if not SECRET_KEY:
    raise RuntimeError("SECRET_KEY environment variable is not set")

ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", 60))

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/token")


def create_access_token(data: dict, expires_delta: timedelta | None = None):
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)


def access_token_for(session: AuthSession) -> str:
    """The identity token rides along so store writes can be authorised as the user."""
    return create_access_token(
        data={"sub": session.user_id, "email": session.email, "idt": session.id_token}
    )


def get_current_user(token: str = Depends(oauth2_scheme)) -> AuthSession:
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    try:
        payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
    except JWTError:
        raise credentials_exception
    user_id: Optional[str] = payload.get("sub")
    if not user_id:
        raise credentials_exception
    return AuthSession(
        user_id=user_id,
        email=payload.get("email", ""),
        id_token=payload.get("idt", ""),
    )


def authenticate_user(identity: IdentityClient, email: str, password: str) -> AuthSession:
    email = validate_email(email)
    if not password:
        raise ValueError("Password is required")
    return identity.sign_in(email, password)


def register_user(
    identity: IdentityClient,
    gateway: FinanceGateway,
    full_name: str,
    email: str,
    password: str,
) -> UserProfile:
    full_name = validate_full_name(full_name)
    email = validate_email(email)
    validate_password(password)

    session = identity.sign_up(email, password)
    profile = UserProfile(
        id=session.user_id, email=email, full_name=full_name, created_at=utc_now()
    )
    try:
        gateway.save_profile(session.user_id, profile, session.id_token)
    except GatewayError as e:
        # the account exists; the profile is re-created on the next save
        logger.warning("Could not store profile for %s: %s", session.user_id, e)
    return profile


def request_password_reset(identity: IdentityClient, email: str) -> None:
    identity.send_password_reset(validate_email(email))


def reset_password(identity: IdentityClient, oob_code: str, new_password: str) -> str:
    if not oob_code:
        raise ValueError("Reset code is required")
    return identity.confirm_password_reset(oob_code, validate_password(new_password))


def change_password(
    identity: IdentityClient, session: AuthSession, new_password: str
) -> AuthSession:
    validate_password(new_password)
    if not session.id_token:
        raise ValueError("Session expired. Please log in again.")
    updated = identity.change_password(session.id_token, new_password)
    updated.user_id = updated.user_id or session.user_id
    updated.email = updated.email or session.email
    return updated


def get_user_profile(gateway: FinanceGateway, user_id: str) -> Optional[UserProfile]:
    try:
        return gateway.get_profile(user_id)
    except GatewayError as e:
        logger.warning("Could not load profile for %s: %s", user_id, e)
        return None
