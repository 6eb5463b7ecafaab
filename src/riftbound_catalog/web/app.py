"""Flask application exposing the catalog and tier list as JSON."""
from __future__ import annotations

import logging
from typing import Any

from flask import Flask, jsonify, request

from ..api.client import TcgCsvClient, TcgCsvError
from ..config import DEFAULT_CONFIG, AppConfig
from ..models import Deck, ProductWithPrice
from ..services.catalog_service import (
    CatalogPage,
    featured_products,
    format_price,
    format_usd,
    latest_modified,
    product_type_label,
    search_and_paginate,
)
from ..services.deck_service import DeckCardRow, DeckService
from ..services.pricing_service import PricingService
from ..storage.repository import DeckRepository

logger = logging.getLogger(__name__)


def _isoformat(value: Any) -> str | None:
    return value.isoformat() if value is not None else None


def serialize_product(product: ProductWithPrice) -> dict[str, Any]:
    price = product.price
    presale = product.presale_info
    return {
        "product_id": product.product_id,
        "name": product.name,
        "clean_name": product.clean_name,
        "image_url": product.image_url or None,
        "url": product.url,
        "modified_on": _isoformat(product.modified_on),
        "product_type": product_type_label(product.name),
        "presale": {
            "is_presale": presale.is_presale,
            "released_on": _isoformat(presale.released_on),
            "note": presale.note,
        },
        "price": None
        if price is None
        else {
            "sub_type_name": price.sub_type_name,
            "low": format_usd(price.low_price),
            "mid": format_usd(price.mid_price),
            "high": format_usd(price.high_price),
            "market": format_usd(price.market_price),
            "direct_low": format_usd(price.direct_low_price),
        },
    }


def serialize_page(page: CatalogPage) -> dict[str, Any]:
    return {
        "items": [serialize_product(product) for product in page.items],
        "total_items": page.total_items,
        "current_page": page.current_page,
        "total_pages": page.total_pages,
        "showing": [page.start_index, page.end_index],
        "has_previous": page.has_previous,
        "has_next": page.has_next,
    }


def serialize_deck(deck: Deck) -> dict[str, Any]:
    return {
        "slug": deck.slug,
        "name": deck.name,
        "tier": deck.tier,
        "champions": deck.champions,
        "archetype": deck.archetype,
        "short_description": deck.short_description,
        "long_description": deck.long_description,
        "strengths": deck.strengths,
        "weaknesses": deck.weaknesses,
        "last_updated": deck.last_updated.isoformat(),
        "main_count": deck.main_count,
        "sideboard_count": deck.sideboard_count,
    }


def serialize_card_row(row: DeckCardRow) -> dict[str, Any]:
    return {
        "name": row.card.name,
        "quantity": row.card.quantity,
        "image_url": row.image_url,
        "price": format_price(row.display_price),
        "url": row.product.url if row.product is not None else None,
    }


def create_app(pricing_service: PricingService, deck_service: DeckService, config: AppConfig = DEFAULT_CONFIG) -> Flask:
    app = Flask(__name__)

    app.config["pricing_service"] = pricing_service
    app.config["deck_service"] = deck_service

    @app.errorhandler(TcgCsvError)
    def upstream_failure(exc: TcgCsvError):
        logger.error("Upstream fetch failed: %s", exc)
        return jsonify({"error": {"code": "UPSTREAM_ERROR", "message": str(exc)}}), 502

    @app.route("/health")
    def health():
        result = pricing_service.client.health_check()
        payload = {
            "ok": result["ok"],
            "upstream": {
                "status_code": result.get("status_code"),
                "error": result.get("error"),
                "checked_at": _isoformat(result["checked_at"]),
            },
        }
        return jsonify(payload), 200 if result["ok"] else 503

    @app.route("/")
    def index():
        products = pricing_service.fetch_origins()
        featured = featured_products(products, limit=config.catalog.featured_count)
        return jsonify({"featured": [serialize_product(product) for product in featured]})

    @app.route("/products")
    def products():
        query = request.args.get("q", "")
        try:
            page_number = int(request.args.get("page", "1"))
        except ValueError:
            page_number = 1

        all_products = pricing_service.fetch_origins()
        page = search_and_paginate(all_products, query, page_number, config.catalog.page_size)
        payload = serialize_page(page)
        payload["query"] = query
        payload["latest_modified"] = _isoformat(latest_modified(all_products))
        return jsonify(payload)

    @app.route("/decks")
    def decks():
        all_products = pricing_service.fetch_all_groups()
        tiers = []
        for tier, tier_decks in deck_service.decks_grouped_by_tier():
            entries = []
            for deck in tier_decks:
                entry = serialize_deck(deck)
                cover = deck_service.deck_cover(deck, all_products)
                entry["cover_image_url"] = cover.image_url if cover is not None and cover.image_url else None
                entries.append(entry)
            tiers.append(
                {
                    "tier": tier,
                    "explanation": deck_service.tier_explanation(tier),
                    "decks": entries,
                }
            )
        return jsonify({"meta_description": deck_service.meta_description, "tiers": tiers})

    @app.route("/decks/<slug>")
    def deck_detail(slug: str):
        deck = deck_service.get_deck_by_slug(slug)
        if deck is None:
            return jsonify({"error": {"code": "NOT_FOUND", "message": f"Unknown deck: {slug}"}}), 404

        all_products = pricing_service.fetch_all_groups()
        payload = serialize_deck(deck)
        payload["tier_explanation"] = deck_service.tier_explanation(deck.tier)
        payload["cards"] = [serialize_card_row(row) for row in deck_service.deck_card_rows(deck.cards, all_products)]
        payload["sideboard"] = [
            serialize_card_row(row) for row in deck_service.deck_card_rows(deck.sideboard, all_products)
        ]
        return jsonify(payload)

    return app


def bootstrap_app(config: AppConfig = DEFAULT_CONFIG) -> tuple[Flask, PricingService, DeckService]:
    """Factory used by the entrypoint for running the web API."""

    client = TcgCsvClient(config=config.pricing)
    pricing_service = PricingService(client=client, max_workers=config.pricing.max_concurrent_requests)
    deck_service = DeckService(repository=DeckRepository(config.deck_data_path))

    app = create_app(pricing_service, deck_service, config)
    return app, pricing_service, deck_service
