"""Search, filter and paginate the merged product catalog in memory."""
from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from ..models import ProductWithPrice

PAGE_SIZE = 24


@dataclass(slots=True)
class CatalogPage:
    """One visible page of search results plus pagination metadata."""

    items: list[ProductWithPrice]
    total_items: int
    current_page: int
    total_pages: int
    page_size: int = PAGE_SIZE

    @property
    def start_index(self) -> int:
        """1-based position of the first item shown, 0 when nothing matched."""

        if self.total_items == 0:
            return 0
        return (self.current_page - 1) * self.page_size + 1

    @property
    def end_index(self) -> int:
        return min(self.current_page * self.page_size, self.total_items)

    @property
    def has_previous(self) -> bool:
        return self.current_page > 1

    @property
    def has_next(self) -> bool:
        return self.current_page < self.total_pages


def _matches(product: ProductWithPrice, query: str) -> bool:
    subtype = product.price.sub_type_name if product.price is not None else ""
    fields = (product.name, product.clean_name, subtype)
    return any(query in value.lower() for value in fields) or query in str(product.product_id)


def filter_products(products: Sequence[ProductWithPrice], query: str) -> list[ProductWithPrice]:
    """Return products whose name, clean name, subtype or id contains ``query``."""

    needle = query.strip().lower()
    if not needle:
        return list(products)
    return [product for product in products if _matches(product, needle)]


def total_pages_for(total_items: int, page_size: int = PAGE_SIZE) -> int:
    return max(1, math.ceil(total_items / page_size))


def search_and_paginate(
    products: Sequence[ProductWithPrice],
    query: str,
    page: int,
    page_size: int = PAGE_SIZE,
) -> CatalogPage:
    """Filter ``products`` by ``query`` and slice out ``page``.

    The requested page is clamped into ``[1, total_pages]``; an empty result
    still reports a single (empty) page.
    """

    if page_size < 1:
        raise ValueError("page_size must be positive")

    matched = filter_products(products, query)
    total_items = len(matched)
    total_pages = total_pages_for(total_items, page_size)
    current_page = min(max(page, 1), total_pages)
    start = (current_page - 1) * page_size
    return CatalogPage(
        items=matched[start : start + page_size],
        total_items=total_items,
        current_page=current_page,
        total_pages=total_pages,
        page_size=page_size,
    )


@dataclass(slots=True)
class CatalogBrowser:
    """Tracks the query and page of an interactive catalog view."""

    products: list[ProductWithPrice] = field(default_factory=list)
    query: str = ""
    page: int = 1
    page_size: int = PAGE_SIZE

    def set_query(self, query: str) -> CatalogPage:
        self.query = query
        self.page = 1
        return self.current()

    def go_to(self, page: int) -> CatalogPage:
        self.page = page
        current = self.current()
        self.page = current.current_page
        return current

    def next_page(self) -> CatalogPage:
        return self.go_to(self.page + 1)

    def previous_page(self) -> CatalogPage:
        return self.go_to(self.page - 1)

    def current(self) -> CatalogPage:
        return search_and_paginate(self.products, self.query, self.page, self.page_size)


def latest_modified(products: Sequence[ProductWithPrice]) -> Optional[datetime]:
    """Most recent ``modified_on`` timestamp across ``products``."""

    timestamps = [product.modified_on for product in products if product.modified_on is not None]
    return max(timestamps, default=None)


def featured_products(products: Sequence[ProductWithPrice], limit: int = 8) -> list[ProductWithPrice]:
    """Newest products first; entries without a timestamp sort last."""

    dated = [product for product in products if product.modified_on is not None]
    undated = [product for product in products if product.modified_on is None]
    dated.sort(key=lambda product: product.modified_on, reverse=True)
    return (dated + undated)[:limit]


def product_type_label(name: str) -> str:
    lower = name.lower()
    if "booster" in lower:
        return "Booster"
    if "deck" in lower:
        return "Champion Deck"
    if "box" in lower or "display" in lower or "case" in lower:
        return "Box / Display"
    if "bundle" in lower:
        return "Bundle"
    return "Product"


def format_usd(value: Optional[float]) -> Optional[str]:
    """Format ``value`` as US dollars, ``None`` for missing or NaN amounts."""

    if value is None or math.isnan(value):
        return None
    return f"${value:,.2f}"


def format_price(value: Optional[float]) -> Optional[str]:
    """Compact dollar amount for deck card rows, without thousands separators."""

    if value is None or math.isnan(value):
        return None
    return f"${value:.2f}"
