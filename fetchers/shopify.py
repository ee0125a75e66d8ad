# fetchers/shopify.py
import time
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Callable, Dict, List

import requests

from core.config import Settings
from core.http import FetchError, get_json
from core.logger import get_logger
from core.models import Expansion, Item
from core.urls import (
    collection_page_url_builder,
    get_domain,
    normalize_link,
    origin_of,
    product_json_url,
)

logger = get_logger(__name__)

CENT = Decimal("0.01")


def format_price(raw: Any, symbol: str = "$") -> str:
    """Two-decimal currency string, half-up rounded; "" when missing or not a number."""
    if raw is None or raw == "" or isinstance(raw, bool):
        return ""
    try:
        value = Decimal(str(raw).strip())
    except InvalidOperation:
        return ""
    if not value.is_finite():
        return ""
    try:
        cents = value.quantize(CENT, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        # beyond decimal context precision
        return ""
    return f"{symbol}{cents}"


def _first_image(p: Dict[str, Any], precedence: List[str]) -> str:
    for source in precedence:
        if source == "images":
            images = p.get("images")
            if isinstance(images, list) and images and isinstance(images[0], dict):
                src = images[0].get("src")
                if src:
                    return str(src)
        elif source == "image":
            image = p.get("image")
            if isinstance(image, dict) and image.get("src"):
                return str(image["src"])
    return ""


def _raw_price(p: Dict[str, Any]) -> Any:
    variants = p.get("variants")
    if isinstance(variants, list) and variants and isinstance(variants[0], dict):
        price = variants[0].get("price")
        if price is not None:
            return price
    return p.get("price")


def _site(p: Dict[str, Any], link: str, precedence: List[str]) -> str:
    for source in precedence:
        if source == "vendor" and p.get("vendor"):
            return str(p["vendor"])
        if source == "host":
            host = get_domain(link)
            if host:
                return host
    return ""


def map_product(p: Dict[str, Any], origin_link: str, settings: Settings) -> Item:
    link = normalize_link(origin_link)
    return Item(
        name=str(p.get("title") or ""),
        image=_first_image(p, settings.image_precedence),
        price=format_price(_raw_price(p), settings.currency_symbol),
        site=_site(p, link, settings.site_precedence),
        link=link,
    )


def resolve_product(
    url: str, session: requests.Session, settings: Settings
) -> Expansion:
    json_url = product_json_url(url)
    if not json_url:
        return Expansion.failed(f"not a product URL: {url!r}")

    try:
        data = get_json(session, json_url, settings)
    except FetchError as e:
        logger.warning("Shopify product fetch failed for %s: %s", url, e)
        return Expansion.failed(str(e))

    if not isinstance(data, dict):
        logger.warning("Shopify product payload for %s is not an object.", url)
        return Expansion.failed("product payload is not an object")

    product = data.get("product") if isinstance(data.get("product"), dict) else data
    return Expansion(items=[map_product(product, url, settings)])


def resolve_collection(
    url: str,
    session: requests.Session,
    settings: Settings,
    sleep: Callable[[float], None] = time.sleep,
) -> Expansion:
    make_url = collection_page_url_builder(url, settings.collection_page_limit)
    if not make_url:
        return Expansion.failed(f"no collection handle in {url!r}")

    origin = origin_of(url.strip())
    out: List[Item] = []
    for page in range(1, settings.collection_max_pages + 1):
        page_url = make_url(page)
        try:
            data = get_json(session, page_url, settings)
        except FetchError as e:
            logger.warning("Shopify collection page %d failed for %s: %s", page, url, e)
            return Expansion.failed(str(e), out)

        products = data.get("products") if isinstance(data, dict) else None
        if not isinstance(products, list) or not products:
            logger.debug("Collection %s exhausted at page %d.", url, page)
            break

        for p in products:
            if not isinstance(p, dict) or not p.get("handle"):
                logger.debug("Skipping collection product without handle: %s", p)
                continue
            out.append(map_product(p, f"{origin}/products/{p['handle']}", settings))

        if page < settings.collection_max_pages:
            sleep(settings.collection_page_delay_ms / 1000.0)

    logger.info("Shopify collection %s: %d products", url, len(out))
    return Expansion(items=out)
