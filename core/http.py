# core/http.py
from typing import Any, Dict, Optional

import requests
from tenacity import (
    Retrying,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential_jitter,
)

from .config import Settings
from .logger import get_logger

logger = get_logger(__name__)

RETRYABLE_STATUS_CODES = {429, 500, 502, 503, 504}


class FetchError(Exception):
    """Base error for a single failed fetch."""

    def __init__(self, url: str, reason: str):
        super().__init__(f"{reason} ({url})")
        self.url = url
        self.reason = reason


class HttpStatusError(FetchError):
    def __init__(self, url: str, status: int):
        super().__init__(url, f"HTTP {status}")
        self.status = status


class TransportError(FetchError):
    pass


class PayloadError(FetchError):
    pass


def _is_retryable(exc: BaseException) -> bool:
    if isinstance(exc, TransportError):
        return True
    return isinstance(exc, HttpStatusError) and exc.status in RETRYABLE_STATUS_CODES


def build_session(settings: Settings) -> requests.Session:
    session = requests.Session()
    session.headers.update({
        "User-Agent": settings.user_agent,
        "Accept": "application/json",
    })
    return session


def _get_once(
    session: requests.Session,
    url: str,
    timeout: float,
    params: Optional[Dict[str, Any]],
    headers: Optional[Dict[str, str]],
) -> Any:
    logger.debug("GET %s", url)
    try:
        resp = session.get(url, params=params, headers=headers, timeout=timeout)
    except requests.RequestException as e:
        raise TransportError(url, str(e)) from e

    if not 200 <= resp.status_code < 300:
        raise HttpStatusError(url, resp.status_code)

    try:
        return resp.json()
    except ValueError as e:
        raise PayloadError(url, f"invalid JSON: {e}") from e


def get_json(
    session: requests.Session,
    url: str,
    settings: Settings,
    params: Optional[Dict[str, Any]] = None,
    headers: Optional[Dict[str, str]] = None,
) -> Any:
    """
    Fetch url and decode its JSON body.

    Raises FetchError (or a subclass) on any failure. With the default
    fetch_attempts=1 nothing is retried; larger values retry transport
    failures and 429/5xx responses with exponential jitter.
    """
    retrying = Retrying(
        stop=stop_after_attempt(settings.fetch_attempts),
        wait=wait_exponential_jitter(initial=1, max=30),
        retry=retry_if_exception(_is_retryable),
        reraise=True,
    )
    return retrying(_get_once, session, url, settings.request_timeout, params, headers)
