"""Merges product listings with prices and fans fetches out across groups."""
from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass

from ..api.client import TcgCsvClient
from ..models import Group, Price, Product, ProductWithPrice

logger = logging.getLogger(__name__)

PROMOS = Group(group_id=24343, name="Riftbound Promotional Cards")
ORIGINS = Group(group_id=24344, name="Origins")
ORIGINS_PROVING_GROUNDS = Group(group_id=24439, name="Origins: Proving Grounds")
WORLDS_BUNDLE_2025 = Group(group_id=24502, name="Riftbound Worlds Bundle 2025")
SPIRITFORGED = Group(group_id=24519, name="Spiritforged")

RIFTBOUND_GROUPS: tuple[Group, ...] = (
    PROMOS,
    ORIGINS,
    ORIGINS_PROVING_GROUNDS,
    WORLDS_BUNDLE_2025,
    SPIRITFORGED,
)


def select_representative_prices(prices: Iterable[Price]) -> dict[int, Price]:
    """Pick one price per product id.

    The default finish wins over any other subtype; otherwise the first price
    seen for a product id is kept.
    """

    chosen: dict[int, Price] = {}
    for price in prices:
        existing = chosen.get(price.product_id)
        if existing is None:
            chosen[price.product_id] = price
        elif price.is_default_finish and not existing.is_default_finish:
            chosen[price.product_id] = price
    return chosen


def merge_products_with_prices(products: Iterable[Product], prices: Iterable[Price]) -> list[ProductWithPrice]:
    """Pair every product with its representative price, or ``None``."""

    price_map = select_representative_prices(prices)
    return [ProductWithPrice(product=product, price=price_map.get(product.product_id)) for product in products]


@dataclass(slots=True)
class PricingService:
    """High-level service producing merged product and price listings."""

    client: TcgCsvClient
    max_workers: int = 4

    def fetch_group(self, group_id: int) -> list[ProductWithPrice]:
        """Fetch products and prices for ``group_id`` concurrently and merge them.

        Either request failing raises its ``TcgCsvError``; nothing partial is
        returned.
        """

        with ThreadPoolExecutor(max_workers=2) as executor:
            products_future = executor.submit(self.client.fetch_products, group_id)
            prices_future = executor.submit(self.client.fetch_prices, group_id)
            products = products_future.result()
            prices = prices_future.result()

        merged = merge_products_with_prices(products, prices)
        logger.info("Fetched %s products (%s price lines) for group %s", len(merged), len(prices), group_id)
        return merged

    def fetch_all_groups(self, groups: Sequence[Group] = RIFTBOUND_GROUPS) -> list[ProductWithPrice]:
        """Fetch every group concurrently and concatenate in registry order.

        Products are not de-duplicated across groups.
        """

        if not groups:
            return []

        with ThreadPoolExecutor(max_workers=max(1, min(self.max_workers, len(groups)))) as executor:
            futures = [executor.submit(self.fetch_group, group.group_id) for group in groups]
            lists = [future.result() for future in futures]

        combined: list[ProductWithPrice] = []
        for products in lists:
            combined.extend(products)
        return combined

    def fetch_origins(self) -> list[ProductWithPrice]:
        return self.fetch_group(ORIGINS.group_id)
