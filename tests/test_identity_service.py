import pytest
import requests

from app.integrations.identity_service import (
    API_KEY_MESSAGE,
    IdentityClient,
    IdentityError,
    friendly_identity_error,
)
from tests.fakes import FakeResponse, FakeSession

API_KEY = "AIzaTestKey1234567890"


def make_client(*responses, api_key=API_KEY):
    session = FakeSession(*responses)
    return IdentityClient(api_key, base_url="https://id.test/v1", session=session), session


@pytest.mark.parametrize(
    "code, message",
    [
        ("INVALID_PASSWORD", "Invalid email or password"),
        ("INVALID_LOGIN_CREDENTIALS", "Invalid email or password"),
        ("INVALID_EMAIL", "Invalid email format"),
        ("EMAIL_NOT_FOUND", "Email not found"),
        ("EMAIL_EXISTS", "This email is already registered"),
        (
            "WEAK_PASSWORD : Password should be at least 6 characters",
            "Password is too weak. Use at least 6 characters",
        ),
        ("USER_DISABLED", "This account has been disabled"),
        (
            "TOO_MANY_ATTEMPTS_LOGIN_RETRY_AFTER",
            "Too many failed login attempts. Try again later.",
        ),
        ("API_KEY_INVALID", API_KEY_MESSAGE),
        ("OPERATION_NOT_ALLOWED", "Operation not allowed"),
    ],
)
def test_friendly_identity_error(code, message):
    assert friendly_identity_error(code) == message


def test_sign_in_returns_session():
    client, session = make_client(
        FakeResponse(
            body={
                "localId": "uid-1",
                "email": "ann@example.com",
                "idToken": "id-token",
                "refreshToken": "refresh",
                "expiresIn": "3600",
            }
        )
    )
    result = client.sign_in("ann@example.com", "secret1")
    assert result.user_id == "uid-1"
    assert result.id_token == "id-token"
    assert result.expires_in == 3600
    sent = session.requests[0]
    assert sent["url"] == "https://id.test/v1/accounts:signInWithPassword"
    assert sent["params"] == {"key": API_KEY}
    assert sent["json"]["returnSecureToken"] is True


def test_rejected_sign_in_maps_error_code():
    client, _ = make_client(
        FakeResponse(
            status_code=400, body={"error": {"code": 400, "message": "EMAIL_NOT_FOUND"}}
        )
    )
    with pytest.raises(IdentityError, match="Email not found"):
        client.sign_in("ann@example.com", "secret1")


def test_placeholder_api_key_is_refused_before_any_request():
    client, session = make_client(api_key="YOUR_FIREBASE_WEB_API_KEY")
    with pytest.raises(IdentityError, match="API key"):
        client.sign_up("ann@example.com", "secret1")
    assert session.requests == []


def test_network_error_is_identity_error():
    client, _ = make_client(requests.Timeout("timed out"))
    with pytest.raises(IdentityError, match="Network error"):
        client.send_password_reset("ann@example.com")


def test_password_reset_flow_requests():
    client, session = make_client(
        FakeResponse(body={"email": "ann@example.com"}),
        FakeResponse(body={"email": "ann@example.com", "requestType": "PASSWORD_RESET"}),
    )
    client.send_password_reset("ann@example.com")
    assert client.confirm_password_reset("oob", "newpass") == "ann@example.com"
    assert session.requests[0]["json"] == {
        "requestType": "PASSWORD_RESET",
        "email": "ann@example.com",
    }
    assert session.requests[1]["url"].endswith("accounts:resetPassword")


def test_change_password_uses_update():
    client, session = make_client(
        FakeResponse(body={"localId": "uid-1", "idToken": "new-token"})
    )
    result = client.change_password("old-token", "newpass")
    assert result.id_token == "new-token"
    assert session.requests[0]["url"].endswith("accounts:update")
    assert session.requests[0]["json"]["idToken"] == "old-token"
