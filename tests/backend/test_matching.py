from __future__ import annotations

import pytest

from riftbound_catalog.models import Product, ProductWithPrice
from riftbound_catalog.services.matching import normalize_name, resolve_cover_product, resolve_product


def _item(product_id: int, name: str, clean_name: str | None = None) -> ProductWithPrice:
    return ProductWithPrice(
        product=Product(product_id=product_id, name=name, clean_name=clean_name if clean_name is not None else name)
    )


@pytest.mark.parametrize("value", ["Kai'Sa", "  KAI’SA ", "kaisa", "", "Reaver's Row"])
def test_normalize_is_idempotent(value: str) -> None:
    assert normalize_name(normalize_name(value)) == normalize_name(value)


def test_normalize_ignores_case_and_apostrophes() -> None:
    assert normalize_name("Kai'Sa") == normalize_name("kaisa") == normalize_name("KAI’SA") == "kaisa"


def test_exact_clean_name_wins_over_substring() -> None:
    candidates = [
        _item(1, "Kai'Sa - Survivor (Alt)", "Kai'Sa - Survivor"),
        _item(2, "Kai'Sa - Daughter of the Void"),
    ]

    assert resolve_product("Kai'Sa - Survivor", candidates) is candidates[0]


def test_exact_match_later_in_list_beats_earlier_substring() -> None:
    candidates = [
        _item(1, "Kai'Sa - Survivor Foil Promo"),
        _item(2, "Kai'Sa - Survivor"),
    ]

    assert resolve_product("kaisa - survivor", candidates) is candidates[1]


def test_raw_name_exact_match_used_when_clean_name_differs() -> None:
    candidates = [
        _item(1, "Cleave Extended", "Cleave Extended"),
        _item(2, "Cleave", "Cleave Showcase"),
    ]

    assert resolve_product("Cleave", candidates) is candidates[1]


def test_clean_name_substring_precedes_raw_name_substring() -> None:
    candidates = [
        _item(1, "Hextech Ray Promo", "Promo Card"),
        _item(2, "Promo", "Hextech Ray (Showcase)"),
    ]

    assert resolve_product("Hextech Ray", candidates) is candidates[1]


def test_first_candidate_wins_within_a_rule() -> None:
    candidates = [_item(1, "Fury Rune"), _item(2, "Fury Rune")]

    assert resolve_product("fury rune", candidates) is candidates[0]


def test_no_match_returns_none() -> None:
    candidates = [_item(1, "Origins Booster Box")]

    assert resolve_product("Targon's Peak", candidates) is None
    assert resolve_product("Targon's Peak", []) is None


def test_cover_uses_hint_when_provided() -> None:
    candidates = [
        _item(1, "Kai'Sa - Survivor"),
        _item(2, "Champion Deck (Kai'Sa)", "Champion Deck KaiSa"),
        _item(3, "Origins Champion Deck (Kai'Sa)"),
    ]

    assert resolve_cover_product("Kai'Sa", candidates, hint="Champion Deck (Kai'Sa)") is candidates[2]


def test_cover_falls_back_to_deck_name() -> None:
    candidates = [_item(1, "Origins Booster Box"), _item(2, "Jinx - Loose Cannon")]

    assert resolve_cover_product("Jinx", candidates) is candidates[1]
    assert resolve_cover_product("Lux", candidates) is None
