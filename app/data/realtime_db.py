import logging
import os
from typing import Any, Optional

import requests
from dotenv import load_dotenv

load_dotenv()
logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 30


class GatewayError(Exception):
    """Transport or store failure while talking to the realtime database."""


class RealtimeDbClient:
    """
    Minimal REST client for a hierarchical JSON document store.
    Every node is addressed as `{base_url}/{path}.json`; an empty node reads as None.
    """

    def __init__(
        self,
        base_url: str,
        auth_token: Optional[str] = None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        session: Optional[requests.Session] = None,
    ):
        if not base_url:
            raise ValueError("Realtime database URL must be provided.")
        self.base_url = base_url.rstrip("/")
        self.auth_token = auth_token
        self.timeout = timeout
        self.session = session or requests.Session()

    def url_for(self, path: str) -> str:
        return f"{self.base_url}/{path.strip('/')}.json"

    def _params(self, auth_token: Optional[str]) -> dict:
        token = auth_token or self.auth_token
        return {"auth": token} if token else {}

    def _request(
        self,
        method: str,
        path: str,
        payload: Any = None,
        auth_token: Optional[str] = None,
    ) -> Any:
        url = self.url_for(path)
        logger.debug("%s %s", method, url)
        try:
            resp = self.session.request(
                method,
                url,
                params=self._params(auth_token),
                json=payload,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise GatewayError(f"Network error talking to {path}: {e}") from e

        if not resp.ok:
            raise GatewayError(
                f"Store request failed ({resp.status_code}): {parse_store_error(resp)}"
            )

        body = resp.text
        if not body or body.strip() == "null":
            return None
        try:
            return resp.json()
        except ValueError as e:
            raise GatewayError(f"Invalid JSON returned for {path}") from e

    def get(self, path: str, auth_token: Optional[str] = None) -> Any:
        return self._request("GET", path, auth_token=auth_token)

    def put(self, path: str, payload: Any, auth_token: Optional[str] = None) -> Any:
        return self._request("PUT", path, payload=payload, auth_token=auth_token)

    def delete(self, path: str, auth_token: Optional[str] = None) -> None:
        self._request("DELETE", path, auth_token=auth_token)


def parse_store_error(resp: requests.Response) -> str:
    try:
        data = resp.json()
    except ValueError:
        return resp.text or resp.reason or "unknown error"
    if isinstance(data, dict) and data.get("error"):
        error = data["error"]
        if isinstance(error, dict):
            return str(error.get("message", error))
        return str(error)
    return resp.reason or "unknown error"


def create_client_from_env() -> RealtimeDbClient:
    base_url = os.getenv("REALTIME_DB_URL")
    if not base_url:
        raise RuntimeError("REALTIME_DB_URL environment variable is not set")
    timeout = float(os.getenv("HTTP_TIMEOUT_SECONDS", DEFAULT_TIMEOUT_SECONDS))
    return RealtimeDbClient(
        base_url, auth_token=os.getenv("REALTIME_DB_AUTH") or None, timeout=timeout
    )
