"""Shared test fixtures."""

from typing import Any, Dict
from unittest.mock import MagicMock

import pytest
import requests

from core.config import Settings


def make_response(status: int = 200, payload: Any = None, invalid_json: bool = False):
    resp = MagicMock()
    resp.status_code = status
    if invalid_json:
        resp.json.side_effect = ValueError("Expecting value")
    else:
        resp.json.return_value = payload
    return resp


class FakeSession:
    """
    Stands in for requests.Session. Responses are keyed by the exact URL;
    a value may be a response mock or an exception instance to raise.
    Unknown URLs answer 404. Every call is recorded in ``calls``.
    """

    def __init__(self, routes: Dict[str, Any] | None = None):
        self.routes = dict(routes or {})
        self.calls = []

    def get(self, url, params=None, headers=None, timeout=None):
        self.calls.append({"url": url, "params": params, "headers": headers})
        route = self.routes.get(url)
        if route is None:
            return make_response(404, {"errors": "Not Found"})
        if isinstance(route, BaseException):
            raise route
        return route

    def __enter__(self):
        return self

    def __exit__(self, *args):
        return None

    @property
    def urls(self):
        return [c["url"] for c in self.calls]


@pytest.fixture
def settings():
    """Settings with politeness delays disabled and no sources file."""
    return Settings(
        github_owner="octo",
        github_repo="catalog",
        github_label="source",
        sources_location="",
        descriptor_delay_ms=0,
        issue_page_delay_ms=0,
        collection_page_delay_ms=0,
    )


@pytest.fixture
def connection_error():
    return requests.ConnectionError("connection refused")


@pytest.fixture
def widget_payload():
    return {
        "product": {
            "title": "Widget",
            "vendor": "Acme",
            "handle": "widget",
            "images": [{"src": "https://cdn.example.com/widget.jpg"}],
            "variants": [{"price": "9.5"}],
        }
    }
