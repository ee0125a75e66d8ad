# fetchers/static.py
import json
import time
from typing import Any, List

import requests

from core.config import Settings
from core.http import FetchError, get_json
from core.logger import get_logger
from core.urls import is_http_url

logger = get_logger(__name__)


def _keep(entry: Any) -> bool:
    if isinstance(entry, str):
        return bool(entry.strip())
    if isinstance(entry, dict):
        return bool(entry.get("url") or entry.get("link") or entry.get("type"))
    return False


def _read_local(path: str) -> Any:
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def load_static_sources(session: requests.Session, settings: Settings) -> List[Any]:
    """
    Read the sources document (a JSON array of URL strings or descriptor
    objects) from a URL or a local path. Any failure yields an empty list.
    """
    location = settings.sources_location
    if not location:
        return []

    if is_http_url(location):
        # cache-busting, the document is usually served from a static host
        params = {"ts": int(time.time() * 1000)}
        try:
            data = get_json(session, location, settings, params=params)
        except FetchError as e:
            logger.warning("Static sources unavailable at %s: %s", location, e)
            return []
    else:
        try:
            data = _read_local(location)
        except FileNotFoundError:
            logger.info("No static sources file at %s.", location)
            return []
        except (OSError, ValueError) as e:
            logger.warning("Failed to read static sources at %s: %s", location, e)
            return []

    if not isinstance(data, list):
        logger.warning("Static sources at %s is not a JSON array; ignoring.", location)
        return []

    entries = [e for e in data if _keep(e)]
    logger.info("Loaded %d static sources from %s", len(entries), location)
    return entries
