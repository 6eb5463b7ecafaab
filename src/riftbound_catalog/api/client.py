"""Client for the TCGCSV mirror of the TCGplayer pricing API."""
from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

import requests
from cachetools import TTLCache

from ..config import PricingConfig
from ..models import DEFAULT_SUBTYPE, PresaleInfo, Price, Product

logger = logging.getLogger(__name__)

CACHE_MAX_ENTRIES = 256


class TcgCsvError(RuntimeError):
    """Raised when the upstream API answers with a non-success HTTP status."""

    def __init__(self, resource: str, group_id: int, status_code: int | None, detail: str | None = None) -> None:
        self.resource = resource
        self.group_id = group_id
        self.status_code = status_code
        if status_code is None:
            message = f"TCGCSV {resource} request failed for group {group_id}: {detail}"
        else:
            message = f"TCGCSV {resource} error {status_code} for group {group_id}"
        super().__init__(message)


@dataclass(slots=True)
class TcgCsvClient:
    """Handles communication with the TCGCSV API.

    Requests are plain unauthenticated GETs. Each URL's JSON payload is kept
    for ``config.revalidate_seconds`` so repeated page renders inside the
    window do not hit the network again.
    """

    config: PricingConfig = field(default_factory=PricingConfig)
    timer: Callable[[], float] = time.monotonic
    _cache: TTLCache = field(init=False, repr=False)
    _cache_lock: threading.Lock = field(init=False, repr=False)

    def __post_init__(self) -> None:
        # TTLCache is not thread-safe; fetches run on worker threads.
        self._cache = TTLCache(maxsize=CACHE_MAX_ENTRIES, ttl=self.config.revalidate_seconds, timer=self.timer)
        self._cache_lock = threading.Lock()

    def group_url(self, group_id: int, resource: str) -> str:
        return f"{self.config.category_url}/{group_id}/{resource}"

    def fetch_products(self, group_id: int) -> list[Product]:
        """Fetch the raw product listing for ``group_id``."""

        payload = self._get_json(group_id, "products")
        products: list[Product] = []
        for record in self._extract_results(payload):
            product = self._parse_product(record)
            if product is not None:
                products.append(product)
        return products

    def fetch_prices(self, group_id: int) -> list[Price]:
        """Fetch every price line for ``group_id`` in upstream order."""

        payload = self._get_json(group_id, "prices")
        prices: list[Price] = []
        for record in self._extract_results(payload):
            price = self._parse_price(record)
            if price is not None:
                prices.append(price)
        return prices

    def clear_cache(self) -> None:
        with self._cache_lock:
            self._cache.clear()

    def _get_json(self, group_id: int, resource: str) -> Any:
        url = self.group_url(group_id, resource)
        with self._cache_lock:
            cached = self._cache.get(url)
        if cached is not None:
            logger.debug("Cache hit for %s", url)
            return cached

        try:
            response = requests.get(url, timeout=self.config.request_timeout)
        except requests.RequestException as exc:
            raise TcgCsvError(resource, group_id, None, str(exc)) from exc

        if not response.ok:
            raise TcgCsvError(resource, group_id, response.status_code)

        try:
            payload = response.json()
        except ValueError as exc:
            raise TcgCsvError(resource, group_id, None, "invalid JSON body") from exc

        if isinstance(payload, Mapping) and payload.get("success") is False:
            logger.warning("TCGCSV %s returned errors for group %s: %s", resource, group_id, payload.get("errors"))

        with self._cache_lock:
            self._cache[url] = payload
        return payload

    @staticmethod
    def _extract_results(payload: Any) -> list[Mapping[str, Any]]:
        """Return the mapping entries of ``payload['results']``.

        A payload flagged unsuccessful may still carry results, or none at all.
        """

        if not isinstance(payload, Mapping):
            return []
        results = payload.get("results")
        if not isinstance(results, list):
            return []
        return [item for item in results if isinstance(item, Mapping)]

    @classmethod
    def _parse_product(cls, record: Mapping[str, Any]) -> Product | None:
        product_id = cls._to_int(record.get("productId"))
        if product_id is None:
            return None

        name = str(record.get("name") or "")
        presale = record.get("presaleInfo")
        presale_info = PresaleInfo()
        if isinstance(presale, Mapping):
            presale_info = PresaleInfo(
                is_presale=bool(presale.get("isPresale")),
                released_on=cls._to_datetime(presale.get("releasedOn")),
                note=presale.get("note") or None,
            )

        return Product(
            product_id=product_id,
            name=name,
            clean_name=str(record.get("cleanName") or name),
            image_url=str(record.get("imageUrl") or ""),
            category_id=cls._to_int(record.get("categoryId")) or 0,
            group_id=cls._to_int(record.get("groupId")) or 0,
            url=str(record.get("url") or ""),
            modified_on=cls._to_datetime(record.get("modifiedOn")),
            image_count=cls._to_int(record.get("imageCount")) or 0,
            presale_info=presale_info,
        )

    @classmethod
    def _parse_price(cls, record: Mapping[str, Any]) -> Price | None:
        product_id = cls._to_int(record.get("productId"))
        if product_id is None:
            return None

        return Price(
            product_id=product_id,
            low_price=cls._to_float(record.get("lowPrice")),
            mid_price=cls._to_float(record.get("midPrice")),
            high_price=cls._to_float(record.get("highPrice")),
            market_price=cls._to_float(record.get("marketPrice")),
            direct_low_price=cls._to_float(record.get("directLowPrice")),
            sub_type_name=str(record.get("subTypeName") or DEFAULT_SUBTYPE),
        )

    @staticmethod
    def _to_int(value: Any) -> int | None:
        if value is None or isinstance(value, bool):
            return None
        try:
            return int(value)
        except (TypeError, ValueError):
            return None

    @staticmethod
    def _to_float(value: Any) -> float | None:
        if value is None or isinstance(value, bool):
            return None
        try:
            return float(value)
        except (TypeError, ValueError):
            return None

    @staticmethod
    def _to_datetime(value: Any) -> datetime | None:
        if not value:
            return None
        try:
            return datetime.fromisoformat(str(value))
        except ValueError:
            return None

    def health_check(self) -> dict[str, Any]:
        """Ask TCGCSV for the category's group list without touching the cache.

        The result carries the upstream status code (``None`` when the
        request never got an answer) so the web layer can report it.
        """

        url = f"{self.config.category_url}/groups"
        checked_at = datetime.now(UTC)
        try:
            response = requests.get(url, timeout=self.config.request_timeout)
        except requests.RequestException as exc:
            logger.warning("TCGCSV health check failed: %s", exc)
            return {"ok": False, "status_code": None, "error": str(exc), "checked_at": checked_at}

        if not response.ok:
            logger.warning("TCGCSV health check returned %s", response.status_code)
            return {
                "ok": False,
                "status_code": response.status_code,
                "error": f"HTTP {response.status_code}",
                "checked_at": checked_at,
            }
        return {"ok": True, "status_code": response.status_code, "error": None, "checked_at": checked_at}
