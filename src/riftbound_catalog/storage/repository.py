"""JSON-backed storage for the curated deck tier list."""
from __future__ import annotations

import json
from collections.abc import Mapping
from datetime import date
from pathlib import Path
from typing import Any

from ..models import TIER_ORDER, Deck, DeckCard, DeckTier


class DeckDataError(ValueError):
    """Raised when the deck data file is missing fields or holds invalid values."""


class DeckRepository:
    """Loads deck records from a JSON file once and serves them read-only."""

    def __init__(self, path: Path) -> None:
        with path.open("r", encoding="utf-8") as handle:
            try:
                document = json.load(handle)
            except json.JSONDecodeError as exc:
                raise DeckDataError(f"{path} is not valid JSON: {exc}") from exc

        if not isinstance(document, Mapping):
            raise DeckDataError(f"{path} must contain a JSON object")

        self.meta_description: str = str(document.get("meta_description", ""))
        self._tier_explanations = self._parse_explanations(document.get("tier_explanations", {}))
        self._decks = self._parse_decks(document.get("decks", []))

    def all(self) -> list[Deck]:
        """Return every deck in file order."""

        return list(self._decks)

    def tier_explanation(self, tier: DeckTier) -> str:
        return self._tier_explanations.get(tier, "")

    def _parse_explanations(self, raw: Any) -> dict[DeckTier, str]:
        if not isinstance(raw, Mapping):
            raise DeckDataError("tier_explanations must be an object")
        explanations: dict[DeckTier, str] = {}
        for tier, text in raw.items():
            if tier not in TIER_ORDER:
                raise DeckDataError(f"Unknown tier in explanations: {tier!r}")
            explanations[tier] = str(text)
        return explanations

    def _parse_decks(self, raw: Any) -> list[Deck]:
        if not isinstance(raw, list):
            raise DeckDataError("decks must be a list")

        decks: list[Deck] = []
        seen: set[str] = set()
        for record in raw:
            deck = self._parse_deck(record)
            if deck.slug in seen:
                raise DeckDataError(f"Duplicate deck slug: {deck.slug}")
            seen.add(deck.slug)
            decks.append(deck)
        return decks

    def _parse_deck(self, record: Any) -> Deck:
        if not isinstance(record, Mapping):
            raise DeckDataError(f"Deck entry must be an object, got {type(record).__name__}")

        try:
            slug = str(record["slug"])
            tier = record["tier"]
            if tier not in TIER_ORDER:
                raise DeckDataError(f"Deck {slug} has unknown tier {tier!r}")
            return Deck(
                slug=slug,
                name=str(record["name"]),
                tier=tier,
                champions=[str(champion) for champion in record.get("champions", [])],
                archetype=str(record["archetype"]),
                short_description=str(record["short_description"]),
                strengths=[str(item) for item in record.get("strengths", [])],
                weaknesses=[str(item) for item in record.get("weaknesses", [])],
                last_updated=date.fromisoformat(record["last_updated"]),
                cards=self._parse_cards(slug, record.get("cards")),
                sideboard=self._parse_cards(slug, record.get("sideboard")),
                cover_image_hint=record.get("cover_image_hint"),
                long_description=record.get("long_description"),
            )
        except DeckDataError:
            raise
        except KeyError as exc:
            raise DeckDataError(f"Deck entry is missing field {exc.args[0]!r}") from exc
        except (TypeError, ValueError) as exc:
            raise DeckDataError(f"Deck entry has an invalid value: {exc}") from exc

    @staticmethod
    def _parse_cards(slug: str, raw: Any) -> list[DeckCard] | None:
        if raw is None:
            return None
        if not isinstance(raw, list):
            raise DeckDataError(f"Card list for {slug} must be a list")

        cards: list[DeckCard] = []
        for entry in raw:
            quantity = entry.get("quantity") if isinstance(entry, Mapping) else None
            if not isinstance(quantity, int) or isinstance(quantity, bool) or quantity < 1:
                raise DeckDataError(f"Card in {slug} needs a positive integer quantity: {entry!r}")
            cards.append(DeckCard(name=str(entry["name"]), quantity=quantity))
        return cards
