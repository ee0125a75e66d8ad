"""Tests for fetchers/shopify.py"""

from unittest.mock import MagicMock

import pytest

from conftest import FakeSession, make_response
from core.config import Settings
from fetchers.shopify import format_price, map_product, resolve_collection, resolve_product

PRODUCT_URL = "https://shop.example.com/products/widget"
PRODUCT_JSON = "https://shop.example.com/products/widget.json"
COLLECTION_URL = "https://shop.example.com/collections/summer"


def page_url(page):
    return f"https://shop.example.com/collections/summer/products.json?limit=50&page={page}"


def products(*handles):
    return {"products": [{"handle": h, "title": h.title(), "variants": [{"price": "1"}]} for h in handles]}


class TestFormatPrice:
    @pytest.mark.parametrize("raw,expected", [
        ("19.9", "$19.90"),
        ("9.5", "$9.50"),
        ("10", "$10.00"),
        (12, "$12.00"),
        (4.999, "$5.00"),
        ("2.345", "$2.35"),
        ("0.00", "$0.00"),
    ])
    def test_formats_two_decimals(self, raw, expected):
        assert format_price(raw) == expected

    @pytest.mark.parametrize("raw", [None, "", "abc", "NaN", True, "1e30"])
    def test_missing_or_invalid(self, raw):
        assert format_price(raw) == ""

    def test_custom_symbol(self):
        assert format_price("3", "€") == "€3.00"


class TestMapProduct:
    def test_full_mapping(self, settings):
        p = {
            "title": "Widget",
            "vendor": "Acme",
            "images": [{"src": "https://cdn/a.jpg"}, {"src": "https://cdn/b.jpg"}],
            "image": {"src": "https://cdn/single.jpg"},
            "variants": [{"price": "19.9"}, {"price": "29.9"}],
            "price": "5",
        }
        item = map_product(p, "https://www.shop.example.com/products/widget/", settings)
        assert item.name == "Widget"
        assert item.image == "https://cdn/a.jpg"
        assert item.price == "$19.90"
        assert item.site == "Acme"
        assert item.link == "https://www.shop.example.com/products/widget"

    def test_fallbacks(self, settings):
        p = {"image": {"src": "https://cdn/single.jpg"}, "price": "7.1"}
        item = map_product(p, "https://www.shop.example.com/products/widget", settings)
        assert item.name == ""
        assert item.image == "https://cdn/single.jpg"
        assert item.price == "$7.10"
        assert item.site == "shop.example.com"

    def test_empty_images_list_falls_back(self, settings):
        p = {"images": [], "image": {"src": "https://cdn/single.jpg"}, "variants": []}
        item = map_product(p, PRODUCT_URL, settings)
        assert item.image == "https://cdn/single.jpg"
        assert item.price == ""

    def test_precedence_is_configurable(self):
        settings = Settings(image_precedence=["image", "images"], site_precedence=["host", "vendor"])
        p = {
            "vendor": "Acme",
            "images": [{"src": "https://cdn/a.jpg"}],
            "image": {"src": "https://cdn/single.jpg"},
        }
        item = map_product(p, PRODUCT_URL, settings)
        assert item.image == "https://cdn/single.jpg"
        assert item.site == "shop.example.com"


class TestResolveProduct:
    def test_wrapped_payload(self, settings, widget_payload):
        session = FakeSession({PRODUCT_JSON: make_response(200, widget_payload)})
        result = resolve_product(PRODUCT_URL, session, settings)
        assert result.ok
        assert len(result.items) == 1
        assert result.items[0].name == "Widget"
        assert result.items[0].price == "$9.50"
        assert session.urls == [PRODUCT_JSON]

    def test_bare_payload(self, settings):
        session = FakeSession({PRODUCT_JSON: make_response(200, {"title": "Bare", "vendor": "V"})})
        result = resolve_product(PRODUCT_URL + "/", session, settings)
        assert [it.name for it in result.items] == ["Bare"]
        assert result.items[0].link == PRODUCT_URL

    def test_http_error_yields_no_items(self, settings):
        session = FakeSession({PRODUCT_JSON: make_response(404, {})})
        result = resolve_product(PRODUCT_URL, session, settings)
        assert result.items == []
        assert not result.ok
        assert "404" in result.error

    def test_transport_error_yields_no_items(self, settings, connection_error):
        session = FakeSession({PRODUCT_JSON: connection_error})
        result = resolve_product(PRODUCT_URL, session, settings)
        assert result.items == []
        assert not result.ok

    def test_invalid_json_yields_no_items(self, settings):
        session = FakeSession({PRODUCT_JSON: make_response(200, invalid_json=True)})
        result = resolve_product(PRODUCT_URL, session, settings)
        assert result.items == []
        assert not result.ok

    def test_non_object_payload(self, settings):
        session = FakeSession({PRODUCT_JSON: make_response(200, ["nope"])})
        assert resolve_product(PRODUCT_URL, session, settings).items == []

    def test_not_a_product_url(self, settings):
        session = FakeSession()
        result = resolve_product("https://shop.example.com/pages/about", session, settings)
        assert result.items == []
        assert session.calls == []


class TestResolveCollection:
    def test_pages_until_empty(self, settings):
        session = FakeSession({
            page_url(1): make_response(200, products("a", "b")),
            page_url(2): make_response(200, products("c")),
            page_url(3): make_response(200, {"products": []}),
        })
        result = resolve_collection(COLLECTION_URL, session, settings, sleep=MagicMock())
        assert result.ok
        assert [it.link for it in result.items] == [
            "https://shop.example.com/products/a",
            "https://shop.example.com/products/b",
            "https://shop.example.com/products/c",
        ]
        assert session.urls == [page_url(1), page_url(2), page_url(3)]

    def test_stops_immediately_on_empty_first_page(self, settings):
        session = FakeSession({page_url(1): make_response(200, {"products": []})})
        result = resolve_collection(COLLECTION_URL, session, settings, sleep=MagicMock())
        assert result.items == []
        assert session.urls == [page_url(1)]

    def test_page_cap(self, settings):
        session = FakeSession({page_url(n): make_response(200, products(f"p{n}")) for n in range(1, 10)})
        result = resolve_collection(COLLECTION_URL, session, settings, sleep=MagicMock())
        assert len(result.items) == 6
        assert session.urls == [page_url(n) for n in range(1, 7)]

    def test_pauses_between_pages(self, settings):
        settings.collection_page_delay_ms = 250
        sleep = MagicMock()
        session = FakeSession({
            page_url(1): make_response(200, products("a")),
            page_url(2): make_response(200, products("b")),
        })
        resolve_collection(COLLECTION_URL, session, settings, sleep=sleep)
        # after pages 1 and 2; page 3 answers 404 and ends paging
        assert [c.args[0] for c in sleep.call_args_list] == [0.25, 0.25]

    def test_failure_keeps_earlier_pages(self, settings, connection_error):
        session = FakeSession({
            page_url(1): make_response(200, products("a")),
            page_url(2): connection_error,
        })
        result = resolve_collection(COLLECTION_URL, session, settings, sleep=MagicMock())
        assert not result.ok
        assert [it.link for it in result.items] == ["https://shop.example.com/products/a"]

    def test_status_error_on_first_page(self, settings):
        session = FakeSession({page_url(1): make_response(500, {})})
        result = resolve_collection(COLLECTION_URL, session, settings, sleep=MagicMock())
        assert result.items == []
        assert session.urls == [page_url(1)]

    def test_products_without_handle_are_skipped(self, settings):
        session = FakeSession({
            page_url(1): make_response(200, {"products": [{"title": "No handle"}, {"handle": "ok", "title": "Ok"}]}),
            page_url(2): make_response(200, {"products": []}),
        })
        result = resolve_collection(COLLECTION_URL, session, settings, sleep=MagicMock())
        assert [it.name for it in result.items] == ["Ok"]

    def test_out_of_range_price_keeps_other_products(self, settings):
        session = FakeSession({
            page_url(1): make_response(200, {"products": [
                {"handle": "a", "title": "A", "variants": [{"price": "10"}]},
                {"handle": "b", "title": "B", "variants": [{"price": "1e30"}]},
            ]}),
            page_url(2): make_response(200, {"products": []}),
        })
        result = resolve_collection(COLLECTION_URL, session, settings, sleep=MagicMock())
        assert result.ok
        assert [(it.name, it.price) for it in result.items] == [("A", "$10.00"), ("B", "")]

    def test_no_handle(self, settings):
        session = FakeSession()
        result = resolve_collection("https://shop.example.com/collections/", session, settings)
        assert result.items == []
        assert not result.ok
        assert session.calls == []
