"""Tests for core/http.py"""

from unittest.mock import patch

import pytest

from conftest import FakeSession, make_response
from core.config import Settings
from core.http import HttpStatusError, PayloadError, TransportError, build_session, get_json

URL = "https://shop.example.com/products/widget.json"


class TestGetJson:
    def test_success(self, settings):
        session = FakeSession({URL: make_response(200, {"title": "Widget"})})
        assert get_json(session, URL, settings) == {"title": "Widget"}

    def test_status_error(self, settings):
        with pytest.raises(HttpStatusError) as exc:
            get_json(FakeSession(), URL, settings)
        assert exc.value.status == 404

    def test_transport_error(self, settings, connection_error):
        with pytest.raises(TransportError):
            get_json(FakeSession({URL: connection_error}), URL, settings)

    def test_payload_error(self, settings):
        with pytest.raises(PayloadError):
            get_json(FakeSession({URL: make_response(200, invalid_json=True)}), URL, settings)

    def test_no_retry_by_default(self, settings):
        session = FakeSession({URL: make_response(503, {})})
        with pytest.raises(HttpStatusError):
            get_json(session, URL, settings)
        assert len(session.calls) == 1

    def test_retries_when_enabled(self):
        settings = Settings(fetch_attempts=3)
        session = FakeSession({URL: make_response(503, {})})
        with patch("time.sleep"):
            with pytest.raises(HttpStatusError):
                get_json(session, URL, settings)
        assert len(session.calls) == 3

    def test_client_errors_not_retried(self):
        settings = Settings(fetch_attempts=3)
        session = FakeSession({URL: make_response(404, {})})
        with pytest.raises(HttpStatusError):
            get_json(session, URL, settings)
        assert len(session.calls) == 1


def test_build_session_headers(settings):
    session = build_session(settings)
    assert session.headers["User-Agent"] == settings.user_agent
    assert session.headers["Accept"] == "application/json"
