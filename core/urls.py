# core/urls.py
import re
from enum import Enum
from typing import Callable, List, Optional
from urllib.parse import urlsplit, urlunsplit

URL_RE = re.compile(r"(https?://[^\s)]+[^\s.,)])", re.IGNORECASE)
HTTP_PREFIX_RE = re.compile(r"^https?://", re.IGNORECASE)
PRODUCT_PATH_RE = re.compile(r"/products/", re.IGNORECASE)
COLLECTION_PATH_RE = re.compile(r"/collections/", re.IGNORECASE)


class UrlKind(str, Enum):
    PRODUCT = "product"
    COLLECTION = "collection"
    UNKNOWN = "unknown"


def classify_url(url: str | None) -> UrlKind:
    # product wins when both segments appear
    if not url:
        return UrlKind.UNKNOWN
    if PRODUCT_PATH_RE.search(url):
        return UrlKind.PRODUCT
    if COLLECTION_PATH_RE.search(url):
        return UrlKind.COLLECTION
    return UrlKind.UNKNOWN


def is_http_url(value: object) -> bool:
    return isinstance(value, str) and bool(HTTP_PREFIX_RE.match(value))


def get_domain(url: str | None) -> str:
    """Host of url without a leading "www.", or "" when it cannot be parsed."""
    if not url:
        return ""
    try:
        host = urlsplit(url).hostname or ""
    except ValueError:
        return ""
    return host[4:] if host.startswith("www.") else host


def extract_urls(text: object) -> List[str]:
    """All http(s) URLs in text, minus trailing punctuation. Non-strings have none."""
    if not isinstance(text, str):
        return []
    return URL_RE.findall(text)


def normalize_link(url: str | None) -> str:
    """
    Canonical form used as an item link: surrounding whitespace, the fragment
    and one trailing path slash are removed. The query string is kept.
    """
    if not url:
        return ""
    url = url.strip()
    try:
        parts = urlsplit(url)
    except ValueError:
        return url
    path = parts.path
    if len(path) > 1 and path.endswith("/"):
        path = path[:-1]
    return urlunsplit((parts.scheme, parts.netloc, path, parts.query, ""))


def product_json_url(product_url: str | None) -> Optional[str]:
    if not product_url or classify_url(product_url) is not UrlKind.PRODUCT:
        return None
    try:
        parts = urlsplit(product_url.strip())
    except ValueError:
        return None
    path = parts.path
    if path.endswith("/"):
        path = path[:-1]
    return urlunsplit((parts.scheme, parts.netloc, path + ".json", "", ""))


def origin_of(url: str) -> str:
    parts = urlsplit(url)
    return f"{parts.scheme}://{parts.netloc}"


def collection_handle(collection_url: str | None) -> Optional[str]:
    if not collection_url:
        return None
    try:
        segments = [s for s in urlsplit(collection_url.strip()).path.split("/") if s]
    except ValueError:
        return None
    if "collections" not in segments:
        return None
    idx = segments.index("collections")
    if idx + 1 >= len(segments):
        return None
    return segments[idx + 1]


def collection_page_url_builder(
    collection_url: str | None, limit: int = 50
) -> Optional[Callable[[int], str]]:
    """Return page -> products.json URL for the collection, or None without a handle."""
    handle = collection_handle(collection_url)
    if not handle:
        return None
    base = f"{origin_of(collection_url.strip())}/collections/{handle}/products.json?limit={limit}"
    return lambda page: f"{base}&page={page}"
