"""Domain models used throughout the Riftbound catalog application."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Literal, Optional

DeckTier = Literal["S", "A", "B", "C"]

TIER_ORDER: tuple[DeckTier, ...] = ("S", "A", "B", "C")
"""Deck tiers from strongest to weakest."""

DEFAULT_SUBTYPE = "Normal"


@dataclass(slots=True, frozen=True)
class Group:
    """A numbered release used by the pricing API to segment products."""

    group_id: int
    name: str


@dataclass(slots=True)
class PresaleInfo:
    """Marks a product that has not been released yet."""

    is_presale: bool = False
    released_on: Optional[datetime] = None
    note: Optional[str] = None


@dataclass(slots=True)
class Product:
    """Sealed product listing returned from the products endpoint."""

    product_id: int
    name: str
    clean_name: str = ""
    image_url: str = ""
    category_id: int = 0
    group_id: int = 0
    url: str = ""
    modified_on: Optional[datetime] = None
    image_count: int = 0
    presale_info: PresaleInfo = field(default_factory=PresaleInfo)


@dataclass(slots=True)
class Price:
    """One price line for a product variant."""

    product_id: int
    low_price: Optional[float] = None
    mid_price: Optional[float] = None
    high_price: Optional[float] = None
    market_price: Optional[float] = None
    direct_low_price: Optional[float] = None
    sub_type_name: str = DEFAULT_SUBTYPE

    @property
    def is_default_finish(self) -> bool:
        return self.sub_type_name == DEFAULT_SUBTYPE


@dataclass(slots=True)
class ProductWithPrice:
    """A product paired with its representative price, if one exists."""

    product: Product
    price: Optional[Price] = None

    @property
    def product_id(self) -> int:
        return self.product.product_id

    @property
    def name(self) -> str:
        return self.product.name

    @property
    def clean_name(self) -> str:
        return self.product.clean_name

    @property
    def image_url(self) -> str:
        return self.product.image_url

    @property
    def url(self) -> str:
        return self.product.url

    @property
    def modified_on(self) -> Optional[datetime]:
        return self.product.modified_on

    @property
    def presale_info(self) -> PresaleInfo:
        return self.product.presale_info


@dataclass(slots=True, frozen=True)
class DeckCard:
    """A card entry in a deck list."""

    name: str
    quantity: int


@dataclass(slots=True)
class Deck:
    """Hand-curated deck entry in the tier list."""

    slug: str
    name: str
    tier: DeckTier
    champions: list[str]
    archetype: str
    short_description: str
    strengths: list[str]
    weaknesses: list[str]
    last_updated: date
    cards: Optional[list[DeckCard]] = None
    sideboard: Optional[list[DeckCard]] = None
    cover_image_hint: Optional[str] = None
    long_description: Optional[str] = None

    @property
    def main_count(self) -> int:
        return sum(card.quantity for card in self.cards or [])

    @property
    def sideboard_count(self) -> int:
        return sum(card.quantity for card in self.sideboard or [])
