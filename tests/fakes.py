import copy
import json

from app.data.realtime_db import GatewayError


class FakeStoreClient:
    """In-memory stand-in for RealtimeDbClient, addressed by the same paths."""

    def __init__(self, data=None):
        self.data = data or {}
        self.failing = False
        self.fail_paths = set()
        self.calls = []

    def _check(self, method, path):
        self.calls.append((method, path))
        if self.failing or any(path.startswith(p) for p in self.fail_paths):
            raise GatewayError(f"{method} {path} failed")

    def _parts(self, path):
        return [p for p in path.strip("/").split("/") if p]

    def get(self, path, auth_token=None):
        self._check("GET", path)
        node = self.data
        for part in self._parts(path):
            if not isinstance(node, dict) or part not in node:
                return None
            node = node[part]
        return copy.deepcopy(node)

    def put(self, path, payload, auth_token=None):
        self._check("PUT", path)
        parts = self._parts(path)
        node = self.data
        for part in parts[:-1]:
            node = node.setdefault(part, {})
        node[parts[-1]] = copy.deepcopy(payload)
        return payload

    def delete(self, path, auth_token=None):
        self._check("DELETE", path)
        parts = self._parts(path)
        node = self.data
        for part in parts[:-1]:
            node = node.get(part, {})
        node.pop(parts[-1], None)


class FakeResponse:
    def __init__(self, status_code=200, body=None, text=None, reason="OK"):
        self.status_code = status_code
        self.text = text if text is not None else json.dumps(body)
        self.reason = reason

    @property
    def ok(self):
        return self.status_code < 400

    def json(self):
        return json.loads(self.text)


class FakeSession:
    """Records outgoing requests and replays queued responses or errors."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.requests = []

    def _next(self):
        item = self.responses.pop(0)
        if isinstance(item, Exception):
            raise item
        return item

    def request(self, method, url, params=None, json=None, timeout=None):
        self.requests.append(
            {"method": method, "url": url, "params": params, "json": json}
        )
        return self._next()

    def post(self, url, params=None, json=None, timeout=None):
        return self.request("POST", url, params=params, json=json, timeout=timeout)
