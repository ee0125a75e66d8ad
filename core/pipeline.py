# core/pipeline.py
import time
from dataclasses import dataclass
from typing import Any, Callable, Iterable, List, Optional

import requests

from fetchers.shopify import resolve_collection, resolve_product

from .config import Settings
from .logger import get_logger
from .models import (
    Descriptor,
    Expansion,
    Item,
    ManualDescriptor,
    RawUrlDescriptor,
    ShopifyCollectionDescriptor,
    ShopifyProductDescriptor,
    UnrecognizedDescriptor,
)
from .urls import UrlKind, classify_url, get_domain, is_http_url, normalize_link

logger = get_logger(__name__)


def _text(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def parse_descriptor(raw: Any) -> Descriptor:
    """Turn a sources entry (URL string or descriptor object) into a tagged variant."""
    if isinstance(raw, str):
        url = raw.strip()
        return RawUrlDescriptor(url) if is_http_url(url) else UnrecognizedDescriptor(raw)

    if not isinstance(raw, dict):
        return UnrecognizedDescriptor(raw)

    kind = raw.get("type")
    url = _text(raw.get("url") or raw.get("link")).strip()

    if kind == "manual":
        return ManualDescriptor(
            name=_text(raw.get("name")),
            image=_text(raw.get("image")),
            price=_text(raw.get("price")),
            site=_text(raw.get("site")),
            link=_text(raw.get("link") or raw.get("url")).strip(),
        )
    if kind == "shopify_product":
        return ShopifyProductDescriptor(url)
    if kind == "shopify_collection":
        return ShopifyCollectionDescriptor(url)
    if is_http_url(url):
        return RawUrlDescriptor(url)
    return UnrecognizedDescriptor(raw)


@dataclass
class AggregationReport:
    descriptors: int = 0
    failures: int = 0
    duplicates: int = 0
    unidentifiable: int = 0
    items: int = 0

    def summary(self) -> str:
        return (
            f"{self.descriptors} sources · {self.items} items · "
            f"{self.duplicates} duplicates · {self.failures} failed · "
            f"{self.unidentifiable} unidentifiable"
        )


def minimal_item_for(url: str) -> Item:
    link = normalize_link(url)
    return Item(site=get_domain(link), link=link)


class Aggregator:
    """
    Expands descriptors one at a time and keeps the first item seen for each
    dedup key. Not reusable across runs; build one per aggregation pass.
    """

    def __init__(
        self,
        session: requests.Session,
        settings: Settings,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.session = session
        self.settings = settings
        self.sleep = sleep
        self.report = AggregationReport()

    def expand(self, descriptor: Descriptor) -> Expansion:
        if isinstance(descriptor, ManualDescriptor):
            return Expansion(items=[
                Item(
                    name=descriptor.name,
                    image=descriptor.image,
                    price=descriptor.price,
                    site=descriptor.site or get_domain(descriptor.link),
                    link=descriptor.link,
                )
            ])
        if isinstance(descriptor, ShopifyProductDescriptor):
            if not descriptor.url:
                return Expansion.failed("shopify_product without url")
            return resolve_product(descriptor.url, self.session, self.settings)
        if isinstance(descriptor, ShopifyCollectionDescriptor):
            if not descriptor.url:
                return Expansion.failed("shopify_collection without url")
            return resolve_collection(
                descriptor.url, self.session, self.settings, sleep=self.sleep
            )
        if isinstance(descriptor, RawUrlDescriptor):
            kind = classify_url(descriptor.url)
            if kind is UrlKind.PRODUCT:
                return resolve_product(descriptor.url, self.session, self.settings)
            if kind is UrlKind.COLLECTION:
                return resolve_collection(
                    descriptor.url, self.session, self.settings, sleep=self.sleep
                )
            return Expansion(items=[minimal_item_for(descriptor.url)])
        return Expansion.failed(f"unrecognized source entry: {descriptor.raw!r}")

    def _expand_safely(self, raw: Any) -> Expansion:
        try:
            return self.expand(parse_descriptor(raw))
        except Exception as e:
            logger.exception("Unhandled error expanding %r: %s", raw, e)
            return Expansion.failed(f"{type(e).__name__}: {e}")

    def run(self, entries: Iterable[Any]) -> List[Item]:
        results: List[Item] = []
        seen: set[str] = set()

        for raw in entries:
            expansion = self._expand_safely(raw)
            self.report.descriptors += 1
            if not expansion.ok:
                self.report.failures += 1
                logger.warning("Source %r contributed partial or no items: %s", raw, expansion.error)

            for item in expansion.items:
                if not item.identifiable:
                    self.report.unidentifiable += 1
                    continue
                key = item.dedup_key
                if key in seen:
                    self.report.duplicates += 1
                    continue
                seen.add(key)
                results.append(item)

            # be polite to stores
            self.sleep(self.settings.descriptor_delay_ms / 1000.0)

        self.report.items = len(results)
        logger.info("Aggregation finished: %s", self.report.summary())
        return results


def aggregate(
    entries: Iterable[Any],
    session: requests.Session,
    settings: Settings,
    sleep: Callable[[float], None] = time.sleep,
    report: Optional[AggregationReport] = None,
) -> List[Item]:
    aggregator = Aggregator(session, settings, sleep=sleep)
    if report is not None:
        aggregator.report = report
    return aggregator.run(entries)
