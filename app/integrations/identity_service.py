import logging
import os
from typing import Any, Dict, Optional

import requests
from dotenv import load_dotenv

from app.domain.helpers.validation import is_valid_api_key
from app.domain.models.user import AuthSession

load_dotenv()
logger = logging.getLogger(__name__)

DEFAULT_IDENTITY_API_URL = "https://identitytoolkit.googleapis.com/v1"
API_KEY_MESSAGE = (
    "Identity service API key is not configured. "
    "Set IDENTITY_API_KEY to a valid web API key."
)

FRIENDLY_ERRORS = {
    "INVALID_PASSWORD": "Invalid email or password",
    "INVALID_LOGIN_CREDENTIALS": "Invalid email or password",
    "INVALID_EMAIL": "Invalid email format",
    "EMAIL_NOT_FOUND": "Email not found",
    "EMAIL_EXISTS": "This email is already registered",
    "WEAK_PASSWORD": "Password is too weak. Use at least 6 characters",
    "USER_DISABLED": "This account has been disabled",
    "TOO_MANY_ATTEMPTS_LOGIN_RETRY_AFTER": (
        "Too many failed login attempts. Try again later."
    ),
}


class IdentityError(ValueError):
    """Rejected identity request; the message is safe to show to the user."""


def friendly_identity_error(code: str) -> str:
    # codes may carry a detail suffix, e.g. "WEAK_PASSWORD : Password should be..."
    code = (code or "").split(":")[0].strip()
    if code in FRIENDLY_ERRORS:
        return FRIENDLY_ERRORS[code]
    if "API" in code or "KEY" in code:
        return API_KEY_MESSAGE
    if not code:
        return "Authentication failed"
    text = code.replace("_", " ").lower()
    return text[0].upper() + text[1:]


def _error_code(resp: requests.Response) -> str:
    try:
        data = resp.json()
    except ValueError:
        return ""
    error = data.get("error") if isinstance(data, dict) else None
    if isinstance(error, dict):
        return str(error.get("message", ""))
    return str(error or "")


class IdentityClient:
    """Email/password accounts against the hosted identity toolkit REST API."""

    def __init__(
        self,
        api_key: Optional[str],
        base_url: str = DEFAULT_IDENTITY_API_URL,
        timeout: float = 30,
        session: Optional[requests.Session] = None,
    ):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    def _post(self, action: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        if not is_valid_api_key(self.api_key):
            raise IdentityError(API_KEY_MESSAGE)
        url = f"{self.base_url}/accounts:{action}"
        try:
            resp = self.session.post(
                url, params={"key": self.api_key}, json=payload, timeout=self.timeout
            )
        except requests.RequestException as e:
            logger.warning("Identity request %s failed: %s", action, e)
            raise IdentityError(f"Network error: {e}") from e
        if not resp.ok:
            code = _error_code(resp)
            logger.info("Identity request %s rejected: %s", action, code)
            raise IdentityError(friendly_identity_error(code))
        try:
            return resp.json()
        except ValueError as e:
            raise IdentityError("Invalid response from identity service") from e

    def _session_from(self, data: Dict[str, Any], email: str) -> AuthSession:
        return AuthSession(
            user_id=data.get("localId", ""),
            email=data.get("email") or email,
            id_token=data.get("idToken", ""),
            refresh_token=data.get("refreshToken", ""),
            expires_in=int(data.get("expiresIn") or 3600),
        )

    def sign_in(self, email: str, password: str) -> AuthSession:
        data = self._post(
            "signInWithPassword",
            {"email": email, "password": password, "returnSecureToken": True},
        )
        return self._session_from(data, email)

    def sign_up(self, email: str, password: str) -> AuthSession:
        data = self._post(
            "signUp",
            {"email": email, "password": password, "returnSecureToken": True},
        )
        return self._session_from(data, email)

    def send_password_reset(self, email: str) -> None:
        self._post("sendOobCode", {"requestType": "PASSWORD_RESET", "email": email})

    def change_password(self, id_token: str, new_password: str) -> AuthSession:
        data = self._post(
            "update",
            {"idToken": id_token, "password": new_password, "returnSecureToken": True},
        )
        return self._session_from(data, data.get("email", ""))

    def confirm_password_reset(self, oob_code: str, new_password: str) -> str:
        """Returns the email of the account whose password was reset."""
        data = self._post(
            "resetPassword", {"oobCode": oob_code, "newPassword": new_password}
        )
        return data.get("email", "")


_identity_client: Optional[IdentityClient] = None


def get_identity_client() -> IdentityClient:
    global _identity_client
    if _identity_client is None:
        _identity_client = IdentityClient(
            os.getenv("IDENTITY_API_KEY"),
            base_url=os.getenv("IDENTITY_API_URL", DEFAULT_IDENTITY_API_URL),
            timeout=float(os.getenv("HTTP_TIMEOUT_SECONDS", 30)),
        )
    return _identity_client
