"""Shared fixtures: an in-memory rewards backend behind httpx.MockTransport."""

import json
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

import httpx
import pytest

from managers.auth.auth_store import AuthStore
from managers.notifications.notifier import Notifier
from modules.api_client.http_client import BackendHTTPClient

BASE_URL = "http://backend.test"

Answer = Union[Dict[str, Any], Callable[[httpx.Request], httpx.Response]]


class FakeBackend:
    """Records every request and answers from a route table."""

    def __init__(self):
        self.requests: List[httpx.Request] = []
        self._routes: Dict[Tuple[str, str], Tuple[int, Answer]] = {}

    def on(self, method: str, path: str, body: Answer, status: int = 200) -> None:
        self._routes[(method.upper(), path)] = (status, body)

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self._routes.get((request.method, request.url.path))
        if route is None:
            return httpx.Response(404, json={"success": False, "message": "Not found"})
        status, body = route
        if callable(body):
            return body(request)
        return httpx.Response(status, json=body)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)

    def calls(self, method: str, path: str) -> List[httpx.Request]:
        return [r for r in self.requests if r.method == method.upper() and r.url.path == path]

    @staticmethod
    def json_body(request: httpx.Request) -> Dict[str, Any]:
        return json.loads(request.content.decode())


def list_envelope(records: List[Dict[str, Any]], total: Optional[int] = None, page: int = 1,
                  limit: int = 15, total_pages: Optional[int] = None) -> Dict[str, Any]:
    """Top-level pagination layout."""
    envelope = {"success": True, "data": records, "total": len(records) if total is None else total,
                "page": page, "limit": limit}
    if total_pages is not None:
        envelope["totalPages"] = total_pages
    return envelope


@pytest.fixture
def backend():
    return FakeBackend()


@pytest.fixture
def auth_store():
    return AuthStore("test-token")


@pytest.fixture
def client(backend, auth_store):
    return BackendHTTPClient(BASE_URL, auth_store=auth_store, timeout=5.0, transport=backend.transport)


@pytest.fixture
def notifier():
    return Notifier()


@pytest.fixture
def make_list():
    return list_envelope
