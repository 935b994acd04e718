import pytest
import requests

from app.data.realtime_db import GatewayError, RealtimeDbClient, create_client_from_env
from tests.fakes import FakeResponse, FakeSession


def make_client(*responses, token=None):
    session = FakeSession(*responses)
    client = RealtimeDbClient(
        "https://example-db.test/", auth_token=token, session=session
    )
    return client, session


def test_url_for_appends_json_suffix():
    client, _ = make_client()
    assert client.url_for("/users/u1/expenses") == (
        "https://example-db.test/users/u1/expenses.json"
    )


def test_get_returns_parsed_json_and_passes_auth():
    client, session = make_client(FakeResponse(body={"a": {"amount": 5}}), token="tok")
    assert client.get("users/u1/expenses") == {"a": {"amount": 5}}
    sent = session.requests[0]
    assert sent["method"] == "GET"
    assert sent["params"] == {"auth": "tok"}


def test_per_call_token_overrides_default():
    client, session = make_client(FakeResponse(body=True), token="tok")
    client.put("users/u1/fullName", "Ann", auth_token="user-token")
    assert session.requests[0]["params"] == {"auth": "user-token"}
    assert session.requests[0]["json"] == "Ann"


def test_no_token_means_no_auth_param():
    client, session = make_client(FakeResponse(text="null"))
    assert client.get("users/u1/salary") is None
    assert session.requests[0]["params"] == {}


def test_empty_body_reads_as_none():
    client, _ = make_client(FakeResponse(text=""))
    assert client.delete("users/u1/expenses/e1") is None


def test_error_status_raises_gateway_error_with_store_message():
    client, _ = make_client(
        FakeResponse(
            status_code=401, body={"error": "Permission denied"}, reason="Unauthorized"
        )
    )
    with pytest.raises(GatewayError, match="401.*Permission denied"):
        client.get("users/u1/expenses")


def test_network_error_is_wrapped():
    client, _ = make_client(requests.ConnectionError("connection refused"))
    with pytest.raises(GatewayError, match="Network error"):
        client.get("users/u1/expenses")


def test_invalid_json_raises_gateway_error():
    client, _ = make_client(FakeResponse(text="<html>"))
    with pytest.raises(GatewayError, match="Invalid JSON"):
        client.get("users/u1/expenses")


def test_missing_base_url_is_rejected():
    with pytest.raises(ValueError):
        RealtimeDbClient("")


def test_create_client_from_env(monkeypatch):
    monkeypatch.setenv("REALTIME_DB_URL", "https://env-db.test")
    monkeypatch.setenv("HTTP_TIMEOUT_SECONDS", "5")
    client = create_client_from_env()
    assert client.base_url == "https://env-db.test"
    assert client.timeout == 5

    monkeypatch.delenv("REALTIME_DB_URL")
    with pytest.raises(RuntimeError):
        create_client_from_env()
