"""Configuration settings for the Riftbound catalog application."""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal

PACKAGE_DATA_DIRECTORY = Path(__file__).resolve().parent / "data"


@dataclass(slots=True)
class PricingConfig:
    """Settings related to fetching product and price data from TCGCSV."""

    base_url: str = "https://tcgcsv.com/tcgplayer"
    """Root of the TCGCSV mirror of the TCGplayer pricing API."""

    category_id: int = 89
    """TCGplayer category identifier for Riftbound."""

    revalidate_seconds: int = 60
    """How long a cached upstream response stays fresh."""

    request_timeout: int = 10
    """Seconds to wait for a single upstream response."""

    max_concurrent_requests: int = 4
    """Upper bound on concurrent API calls issued by a single fetch."""

    @property
    def category_url(self) -> str:
        return f"{self.base_url.rstrip('/')}/{self.category_id}"


@dataclass(slots=True)
class CatalogConfig:
    """Settings for the in-memory catalog view."""

    page_size: int = 24
    featured_count: int = 8


@dataclass(slots=True)
class AppConfig:
    """Top-level configuration for the application."""

    environment: Literal["development", "production"] = "development"
    deck_data_path: Path = field(default_factory=lambda: PACKAGE_DATA_DIRECTORY / "decks.json")
    pricing: PricingConfig = field(default_factory=PricingConfig)
    catalog: CatalogConfig = field(default_factory=CatalogConfig)


DEFAULT_CONFIG = AppConfig()
