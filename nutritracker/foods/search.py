# -*- coding: utf-8 -*-
"""Foods — combined catalog/USDA search and the barcode lookup chain."""

from __future__ import annotations

import logging
from typing import List, Tuple

import httpx

from .cache import get_cached_foods, set_cached_foods
from .http import FoodLookupError
from .models import BarcodeLookupResponse, FoodItem, FoodSourceType, SearchSource
from .openfoodfacts import lookup_off_barcode
from .storage import find_by_barcode, list_foods, search_local_foods
from .usda import search_usda_by_barcode, search_usda_foods

logger = logging.getLogger(__name__)

BROWSE_LIMIT = 10
LOCAL_LIMIT = 25
USDA_LIMIT = 25
RESULT_LIMIT = 50
MIN_EXTERNAL_QUERY = 3


def _usda_results(query: str, transport: httpx.BaseTransport | None) -> Tuple[List[FoodItem], List[str]]:
    cached = get_cached_foods(query)
    if cached is not None:
        return cached, []
    try:
        results = search_usda_foods(query, USDA_LIMIT, transport=transport)
    except FoodLookupError as exc:
        logger.warning("USDA search failed for %r: %s", query, exc)
        return [], [f"USDA search unavailable: {exc}"]
    set_cached_foods(query, results)
    return results, []


def rank_foods(foods: List[FoodItem], query: str) -> List[FoodItem]:
    """Exact name matches first, then catalog foods before external ones."""
    term = query.strip().lower()

    def key(food: FoodItem) -> Tuple[int, int]:
        exact = 0 if food.name.lower() == term else 1
        local = 0 if food.source == FoodSourceType.local else 1
        return exact, local

    return sorted(foods, key=key)[:RESULT_LIMIT]


def search_foods(
    query: str,
    source: SearchSource = SearchSource.all,
    *,
    transport: httpx.BaseTransport | None = None,
) -> Tuple[List[FoodItem], List[str]]:
    term = (query or "").strip()
    warnings: List[str] = []
    local: List[FoodItem] = []
    external: List[FoodItem] = []

    if source in (SearchSource.all, SearchSource.local):
        local = search_local_foods(term, LOCAL_LIMIT) if term else list_foods(limit=BROWSE_LIMIT)

    if source in (SearchSource.all, SearchSource.usda) and len(term) >= MIN_EXTERNAL_QUERY:
        external, usda_warnings = _usda_results(term, transport)
        warnings.extend(usda_warnings)

    return rank_foods(local + external, term), warnings


def lookup_barcode(barcode: str, *, transport: httpx.BaseTransport | None = None) -> BarcodeLookupResponse:
    """Resolve a scanned barcode: local catalog, then Open Food Facts, then USDA."""
    code = barcode.strip()
    warnings: List[str] = []

    local = find_by_barcode(code)
    if local:
        return BarcodeLookupResponse(barcode=code, found=True, source=FoodSourceType.local, food=local, candidates=[local])

    try:
        off = lookup_off_barcode(code, transport=transport)
    except FoodLookupError as exc:
        logger.warning("Open Food Facts lookup failed for %s: %s", code, exc)
        warnings.append(f"Open Food Facts unavailable: {exc}")
        off = None
    if off:
        return BarcodeLookupResponse(
            barcode=code,
            found=True,
            source=FoodSourceType.openfoodfacts,
            food=off,
            candidates=[off],
            warnings=warnings,
        )

    try:
        usda = search_usda_by_barcode(code, transport=transport)
    except FoodLookupError as exc:
        logger.warning("USDA barcode lookup failed for %s: %s", code, exc)
        warnings.append(f"USDA search unavailable: {exc}")
        usda = []
    if usda:
        return BarcodeLookupResponse(
            barcode=code,
            found=True,
            source=FoodSourceType.usda,
            food=usda[0],
            candidates=usda,
            warnings=warnings,
        )

    warnings.append(f"No product found for barcode: {code}")
    return BarcodeLookupResponse(barcode=code, found=False, warnings=warnings)
