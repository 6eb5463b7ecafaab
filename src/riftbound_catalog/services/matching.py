"""Resolve card and deck names to catalog products."""
from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
from typing import Optional

from ..models import ProductWithPrice

_APOSTROPHES = str.maketrans("", "", "'’")


def normalize_name(name: str) -> str:
    """Lower-case ``name``, drop apostrophes and trim surrounding whitespace."""

    return name.lower().translate(_APOSTROPHES).strip()


def _first(candidates: Iterable[ProductWithPrice], predicate: Callable[[ProductWithPrice], bool]) -> Optional[ProductWithPrice]:
    return next((candidate for candidate in candidates if predicate(candidate)), None)


def resolve_product(name: str, candidates: Sequence[ProductWithPrice]) -> Optional[ProductWithPrice]:
    """Return the best product for ``name`` or ``None``.

    Rules are tried in order and the first one with any hit wins: exact clean
    name, exact raw name, clean name containing the target, raw name
    containing the target. Within a rule the earliest candidate is returned.
    """

    target = normalize_name(name)
    rules: tuple[Callable[[ProductWithPrice], bool], ...] = (
        lambda p: normalize_name(p.clean_name) == target,
        lambda p: normalize_name(p.name) == target,
        lambda p: target in normalize_name(p.clean_name),
        lambda p: target in normalize_name(p.name),
    )
    for rule in rules:
        match = _first(candidates, rule)
        if match is not None:
            return match
    return None


def resolve_cover_product(
    deck_name: str,
    candidates: Sequence[ProductWithPrice],
    hint: Optional[str] = None,
) -> Optional[ProductWithPrice]:
    """Find a cover product by containment against ``hint`` or ``deck_name``."""

    target = normalize_name(hint if hint is not None else deck_name)
    return _first(candidates, lambda p: target in normalize_name(p.clean_name)) or _first(
        candidates, lambda p: target in normalize_name(p.name)
    )
