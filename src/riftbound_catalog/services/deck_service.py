"""Read-only access to the deck tier list."""
from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Optional

from ..models import TIER_ORDER, Deck, DeckCard, DeckTier, ProductWithPrice
from ..storage.repository import DeckRepository
from .matching import resolve_cover_product, resolve_product


@dataclass(slots=True)
class DeckCardRow:
    """A deck list entry with the product it resolved to, if any."""

    card: DeckCard
    product: Optional[ProductWithPrice] = None

    @property
    def image_url(self) -> Optional[str]:
        if self.product is None:
            return None
        return self.product.image_url or None

    @property
    def display_price(self) -> Optional[float]:
        """Market price, falling back to mid price."""

        if self.product is None or self.product.price is None:
            return None
        price = self.product.price
        return price.market_price if price.market_price is not None else price.mid_price


@dataclass(slots=True)
class DeckService:
    """Serves deck lookups from a loaded ``DeckRepository``."""

    repository: DeckRepository

    @property
    def meta_description(self) -> str:
        return self.repository.meta_description

    def all_decks(self) -> list[Deck]:
        return self.repository.all()

    def list_decks_by_tier(self, tier: str) -> list[Deck]:
        if tier not in TIER_ORDER:
            raise ValueError(f"Unknown tier: {tier!r}")
        return [deck for deck in self.repository.all() if deck.tier == tier]

    def get_deck_by_slug(self, slug: str) -> Deck | None:
        return next((deck for deck in self.repository.all() if deck.slug == slug), None)

    def decks_grouped_by_tier(self) -> list[tuple[DeckTier, list[Deck]]]:
        """Decks per tier from S to C, skipping tiers with no decks."""

        grouped: list[tuple[DeckTier, list[Deck]]] = []
        for tier in TIER_ORDER:
            decks = self.list_decks_by_tier(tier)
            if decks:
                grouped.append((tier, decks))
        return grouped

    def tier_explanation(self, tier: DeckTier) -> str:
        return self.repository.tier_explanation(tier)

    def deck_cover(self, deck: Deck, products: Sequence[ProductWithPrice]) -> Optional[ProductWithPrice]:
        return resolve_cover_product(deck.name, products, hint=deck.cover_image_hint)

    def deck_card_rows(self, cards: Sequence[DeckCard] | None, products: Sequence[ProductWithPrice]) -> list[DeckCardRow]:
        return [DeckCardRow(card=card, product=resolve_product(card.name, products)) for card in cards or []]
