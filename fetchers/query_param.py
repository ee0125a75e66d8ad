# fetchers/query_param.py
from typing import List, Optional
from urllib.parse import parse_qs, urlsplit

from core.config import Settings
from core.logger import get_logger
from core.urls import is_http_url

logger = get_logger(__name__)


def get_param_added_url(page_url: str, key: str = "add") -> Optional[str]:
    if not page_url:
        return None
    try:
        query = urlsplit(page_url).query
    except ValueError:
        return None
    values = parse_qs(query).get(key)
    if not values:
        return None
    added = values[0].strip()
    return added if is_http_url(added) else None


def load_param_source(settings: Settings) -> List[str]:
    """The ad-hoc URL passed via ADD_URL or the page URL's query string."""
    candidate = settings.add_url.strip() if settings.add_url else None
    if candidate and not is_http_url(candidate):
        logger.warning("Ignoring added URL that is not http(s): %s", candidate)
        candidate = None
    if not candidate:
        candidate = get_param_added_url(settings.page_url, settings.add_param)
    if candidate:
        logger.info("Captured added link: %s", candidate)
        return [candidate]
    return []
