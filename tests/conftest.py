"""Shared fixtures for tko-subs tests."""

import json
from typing import Any, Dict, List, Optional, Tuple

import pytest
import requests

from tkosubs.registry import ProviderRegistry

FINGERPRINT_ROWS = [
    ["github", r"github\.io", "There isn't a GitHub Pages site here", "true"],
    ["heroku", r"herokuapp\.com", r"no-such-app\.html", "true"],
    ["shopify", r"myshopify\.com", "Sorry, this shop is currently unavailable", "false"],
    ["tumblr", r"domains\.tumblr\.com", "Whatever you were looking for", "false"],
]


@pytest.fixture
def registry():
    return ProviderRegistry.from_rows(FINGERPRINT_ROWS)


class FakeResolver:
    """CnameResolver stand-in answering from a dict."""

    def __init__(self, answers: Optional[Dict[str, str]] = None):
        self.answers = answers or {}
        self.calls: List[str] = []

    def resolve(self, domain, context=None):
        self.calls.append(domain)
        return self.answers.get(domain)


class FakeResponse:
    """Streaming response with the parts of requests.Response the probe uses."""

    def __init__(self, body: bytes = b"", status_code: int = 200, encoding: Optional[str] = "utf-8",
                 url: str = "", read_error: Optional[Exception] = None):
        self.body = body
        self.status_code = status_code
        self.encoding = encoding
        self.url = url
        self.read_error = read_error
        self.closed = False

    def iter_content(self, chunk_size=1):
        for start in range(0, len(self.body), chunk_size):
            yield self.body[start:start + chunk_size]
        if self.read_error:
            raise self.read_error

    def close(self):
        self.closed = True

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()


class FakeSession:
    """Session returning canned responses, or raising, for probe tests."""

    def __init__(self, response: Optional[FakeResponse] = None, error: Optional[Exception] = None):
        self.response = response or FakeResponse()
        self.error = error
        self.headers: Dict[str, str] = {}
        self.verify = True
        self.closed = False
        self.requests: List[Tuple[str, Dict[str, Any]]] = []

    def get(self, url, **kwargs):
        self.requests.append((url, kwargs))
        if self.error:
            raise self.error
        self.response.url = url
        return self.response

    def close(self):
        self.closed = True


def make_response(status_code: int = 200, payload: Any = None,
                  headers: Optional[Dict[str, str]] = None) -> requests.Response:
    response = requests.Response()
    response.status_code = status_code
    response._content = json.dumps(payload).encode() if payload is not None else b""
    response.headers.update(headers or {})
    response.reason = "OK" if status_code < 400 else "Error"
    return response


class FakeAPISession:
    """
    Session for provider API tests.

    Routes map (method, path suffix) to a response, or to a list of responses
    consumed in order.
    """

    def __init__(self, routes: Dict[Tuple[str, str], Any]):
        self.routes = routes
        self.headers: Dict[str, str] = {}
        self.auth = None
        self.calls: List[Tuple[str, str, Dict[str, Any]]] = []

    def request(self, method, url, **kwargs):
        self.calls.append((method, url, kwargs))
        for (route_method, suffix), response in self.routes.items():
            if route_method == method and url.endswith(suffix):
                if isinstance(response, list):
                    return response.pop(0)
                return response
        return make_response(404, {"message": "Not Found"})

    def paths(self) -> List[str]:
        return [f"{method} {url}" for method, url, _ in self.calls]
