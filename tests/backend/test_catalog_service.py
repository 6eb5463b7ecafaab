from __future__ import annotations

import math
from datetime import datetime

import pytest

from riftbound_catalog.models import Price, Product, ProductWithPrice
from riftbound_catalog.services.catalog_service import (
    PAGE_SIZE,
    CatalogBrowser,
    featured_products,
    filter_products,
    format_price,
    format_usd,
    latest_modified,
    product_type_label,
    search_and_paginate,
)


def _item(
    product_id: int,
    name: str,
    clean_name: str | None = None,
    subtype: str | None = None,
    modified_on: datetime | None = None,
) -> ProductWithPrice:
    product = Product(
        product_id=product_id,
        name=name,
        clean_name=clean_name if clean_name is not None else name,
        modified_on=modified_on,
    )
    price = Price(product_id=product_id, sub_type_name=subtype) if subtype is not None else None
    return ProductWithPrice(product=product, price=price)


def _catalog(count: int) -> list[ProductWithPrice]:
    return [_item(1000 + index, f"Product {index}", subtype="Normal") for index in range(count)]


@pytest.fixture
def products() -> list[ProductWithPrice]:
    return [
        _item(652771, "Origins Booster Box", subtype="Normal"),
        _item(652772, "Origins Booster Pack", subtype="Foil"),
        _item(652780, "Champion Deck (Kai'Sa)", "Champion Deck KaiSa"),
        _item(77, "Spiritforged Bundle", subtype="Normal"),
    ]


def test_empty_query_returns_everything(products: list[ProductWithPrice]) -> None:
    assert filter_products(products, "") == products
    assert filter_products(products, "   ") == products


def test_query_matches_name_case_insensitively(products: list[ProductWithPrice]) -> None:
    assert [item.product_id for item in filter_products(products, "BOOSTER")] == [652771, 652772]


def test_query_matches_clean_name(products: list[ProductWithPrice]) -> None:
    assert [item.product_id for item in filter_products(products, "kaisa")] == [652780]


def test_query_matches_subtype_and_tolerates_missing_price(products: list[ProductWithPrice]) -> None:
    assert [item.product_id for item in filter_products(products, "foil")] == [652772]


def test_query_matches_product_id_substring(products: list[ProductWithPrice]) -> None:
    assert [item.product_id for item in filter_products(products, "6527")] == [652771, 652772, 652780]
    assert [item.product_id for item in filter_products(products, " 780 ")] == [652780]


@pytest.mark.parametrize("count", [0, 1, 23, 24, 25, 48, 49, 100])
def test_total_pages_has_floor_of_one(count: int) -> None:
    page = search_and_paginate(_catalog(count), "", 1)

    assert page.total_items == count
    assert page.total_pages == max(1, math.ceil(count / PAGE_SIZE))


@pytest.mark.parametrize("requested, expected", [(-3, 1), (0, 1), (1, 1), (3, 3), (4, 3), (99, 3)])
def test_requested_page_is_clamped(requested: int, expected: int) -> None:
    page = search_and_paginate(_catalog(60), "", requested)

    assert page.current_page == expected


def test_last_page_holds_remainder() -> None:
    page = search_and_paginate(_catalog(60), "", 3)

    assert [item.product_id for item in page.items] == list(range(1048, 1060))
    assert (page.start_index, page.end_index) == (49, 60)
    assert page.has_previous is True
    assert page.has_next is False


def test_first_page_controls() -> None:
    page = search_and_paginate(_catalog(60), "", 1)

    assert len(page.items) == PAGE_SIZE
    assert (page.start_index, page.end_index) == (1, 24)
    assert page.has_previous is False
    assert page.has_next is True


def test_no_matches_yields_single_empty_page(products: list[ProductWithPrice]) -> None:
    page = search_and_paginate(products, "no such product", 5)

    assert page.items == []
    assert page.total_items == 0
    assert page.current_page == 1
    assert page.total_pages == 1
    assert (page.start_index, page.end_index) == (0, 0)
    assert page.has_previous is False
    assert page.has_next is False


def test_custom_page_size() -> None:
    page = search_and_paginate(_catalog(10), "", 2, page_size=4)

    assert page.total_pages == 3
    assert [item.product_id for item in page.items] == [1004, 1005, 1006, 1007]


def test_invalid_page_size_rejected() -> None:
    with pytest.raises(ValueError):
        search_and_paginate(_catalog(3), "", 1, page_size=0)


def test_browser_resets_page_when_query_changes() -> None:
    browser = CatalogBrowser(products=_catalog(100))
    browser.go_to(3)
    assert browser.page == 3

    page = browser.set_query("product")

    assert browser.page == 1
    assert page.current_page == 1

    browser.go_to(2)
    browser.set_query("product")
    assert browser.page == 1


def test_browser_navigation_stays_in_bounds() -> None:
    browser = CatalogBrowser(products=_catalog(30))

    assert browser.previous_page().current_page == 1
    assert browser.next_page().current_page == 2
    assert browser.next_page().current_page == 2
    assert browser.page == 2


def test_latest_modified_and_featured() -> None:
    items = [
        _item(1, "Old", modified_on=datetime(2025, 1, 1)),
        _item(2, "Undated"),
        _item(3, "New", modified_on=datetime(2025, 10, 30)),
    ]

    assert latest_modified(items) == datetime(2025, 10, 30)
    assert latest_modified([]) is None
    assert [item.product_id for item in featured_products(items, limit=2)] == [3, 1]
    assert [item.product_id for item in featured_products(items)] == [3, 1, 2]


@pytest.mark.parametrize(
    "name, label",
    [
        ("Origins Booster Pack", "Booster"),
        ("Champion Deck (Jinx)", "Champion Deck"),
        ("Origins Display Case", "Box / Display"),
        ("Worlds Bundle 2025", "Bundle"),
        ("Playmat", "Product"),
    ],
)
def test_product_type_label(name: str, label: str) -> None:
    assert product_type_label(name) == label


def test_format_usd() -> None:
    assert format_usd(1234.5) == "$1,234.50"
    assert format_usd(0.0) == "$0.00"
    assert format_usd(None) is None
    assert format_usd(float("nan")) is None


def test_format_price_omits_thousands_separator() -> None:
    assert format_price(1234.5) == "$1234.50"
    assert format_price(12.5) == "$12.50"
    assert format_price(None) is None
    assert format_price(float("nan")) is None
