import datetime
import os
from pathlib import Path
from typing import Dict, List, Sequence

import pytz
from jinja2 import Environment, FileSystemLoader, select_autoescape

from core.models import Item
from core.urls import get_domain

# Resolve template directory relative to this file
TEMPLATE_DIR = Path(__file__).resolve().parent.parent / "templates"
env = Environment(
    loader=FileSystemLoader(str(TEMPLATE_DIR)),
    autoescape=select_autoescape(["html"]),
    trim_blocks=True,
    lstrip_blocks=True,
)

CATALOG_THEME = os.getenv("CATALOG_THEME", "light").strip().lower()
if CATALOG_THEME not in ("light", "dark"):
    CATALOG_THEME = "light"

THEMES = {
    "light": {
        "page_bg": "#f7f7f7",
        "card_bg": "#ffffff",
        "card_border": "#e5e5e5",
        "text_primary": "#111111",
        "text_secondary": "#444444",
        "link_color": "#111111",
    },
    "dark": {
        "page_bg": "#121212",
        "card_bg": "#1E1E1E",
        "card_border": "#333333",
        "text_primary": "#F1F1F1",
        "text_secondary": "#BBBBBB",
        "link_color": "#8AB4F8",
    },
}


def count_label(n: int) -> str:
    return f"{n} items"


def _card(it: Item) -> Dict[str, str]:
    site = it.site or get_domain(it.link)
    return {
        "title": it.name or site or "Item",
        "alt": it.name,
        "image": it.image,
        "site": site,
        "price": it.price,
        "link": it.link,
    }


def _generated_at() -> str:
    return datetime.datetime.now(tz=pytz.UTC).strftime("%Y-%m-%d %H:%M UTC")


def build_html_catalog(
    items: Sequence[Item],
    title: str = "My Shared Catalog",
    theme: str = CATALOG_THEME,
) -> str:
    template = env.get_template("catalog.html")
    colors = THEMES.get(theme, THEMES["light"])
    cards: List[Dict[str, str]] = [_card(it) for it in items]
    return template.render(
        title=title,
        count=count_label(len(cards)),
        cards=cards,
        colors=colors,
        generated_at=_generated_at(),
    )


def build_plaintext_catalog(items: Sequence[Item], title: str = "My Shared Catalog") -> str:
    template = env.get_template("catalog.txt")
    return template.render(
        title=title,
        count=count_label(len(items)),
        cards=[_card(it) for it in items],
        generated_at=_generated_at(),
    )
