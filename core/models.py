# core/models.py
from dataclasses import dataclass, field
from typing import Any, List, Optional, Union


@dataclass
class Item:
    """
    Normalized catalog entry rendered as one card.
    Every field is a display string; price is already formatted (e.g. "$19.99").
    """
    name: str = ""
    image: str = ""
    price: str = ""
    site: str = ""
    link: str = ""

    @property
    def dedup_key(self) -> str:
        if self.link:
            return self.link
        return f"{self.name}|{self.site}"

    @property
    def identifiable(self) -> bool:
        return bool(self.link or (self.name and self.site))


@dataclass
class ManualDescriptor:
    name: str = ""
    image: str = ""
    price: str = ""
    site: str = ""
    link: str = ""


@dataclass
class ShopifyProductDescriptor:
    url: str = ""


@dataclass
class ShopifyCollectionDescriptor:
    url: str = ""


@dataclass
class RawUrlDescriptor:
    url: str


@dataclass
class UnrecognizedDescriptor:
    raw: Any = None


Descriptor = Union[
    ManualDescriptor,
    ShopifyProductDescriptor,
    ShopifyCollectionDescriptor,
    RawUrlDescriptor,
    UnrecognizedDescriptor,
]


@dataclass
class Expansion:
    """
    Outcome of expanding one descriptor. A failed expansion can still carry
    items gathered before the failure (e.g. earlier collection pages).
    """
    items: List[Item] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def failed(cls, reason: str, items: Optional[List[Item]] = None) -> "Expansion":
        return cls(items=list(items or []), error=reason)
