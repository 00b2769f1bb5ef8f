# -*- coding: utf-8 -*-
"""Foods — USDA FoodData Central client."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import httpx

from ..config import settings
from .http import FoodLookupError, get_json
from .models import FoodItem, FoodSourceType

logger = logging.getLogger(__name__)

# FoodData Central nutrient ids.
NUTRIENT_IDS: Dict[str, int] = {
    "calories": 1008,  # Energy (kcal)
    "protein_g": 1003,
    "carbs_g": 1005,  # Carbohydrate, by difference
    "fat_g": 1004,  # Total lipid
    "fiber_g": 1079,
    "sugar_g": 2000,  # Sugars, total including NLEA
    "sodium_mg": 1093,
}

SEARCH_DATA_TYPES = "Branded,Foundation,SR Legacy"


def _nutrient_value(nutrients: List[Dict[str, Any]], nutrient_id: int) -> float:
    for n in nutrients:
        if isinstance(n, dict) and n.get("nutrientId") == nutrient_id:
            try:
                return max(float(n.get("value") or 0.0), 0.0)
            except (TypeError, ValueError):
                return 0.0
    return 0.0


def _serving_size(raw: Dict[str, Any]) -> str:
    household = raw.get("householdServingFullText")
    if household:
        return str(household)
    size = raw.get("servingSize")
    unit = raw.get("servingSizeUnit")
    if size and unit:
        return f"{size:g} {unit}" if isinstance(size, float) else f"{size} {unit}"
    return "100g"


def _text(value: Any) -> Optional[str]:
    text = str(value).strip() if value is not None else ""
    return text or None


def normalize_usda_food(raw: Dict[str, Any]) -> FoodItem:
    nutrients = raw.get("foodNutrients")
    if not isinstance(nutrients, list):
        nutrients = []
    return FoodItem(
        id=f"usda-{raw.get('fdcId')}",
        name=_text(raw.get("description")) or "Unknown food",
        brand=_text(raw.get("brandOwner")) or _text(raw.get("brandName")),
        category=_text(raw.get("foodCategory")),
        serving_size=_serving_size(raw),
        barcode=raw.get("gtinUpc") or None,
        source=FoodSourceType.usda,
        **{field: _nutrient_value(nutrients, nid) for field, nid in NUTRIENT_IDS.items()},
    )


def _search(params: Dict[str, Any], transport: httpx.BaseTransport | None) -> List[Dict[str, Any]]:
    url = f"{settings.usda_base_url.rstrip('/')}/foods/search"
    payload = get_json(url, params={**params, "api_key": settings.usda_api_key}, transport=transport)
    if payload is None:
        return []
    if not isinstance(payload, dict):
        raise FoodLookupError("unexpected USDA search payload")
    foods = payload.get("foods") or []
    return [f for f in foods if isinstance(f, dict)]


def _normalize_all(raw: List[Dict[str, Any]]) -> List[FoodItem]:
    foods = []
    for item in raw:
        try:
            foods.append(normalize_usda_food(item))
        except ValueError as exc:
            logger.warning("skipping unusable USDA record %s: %s", item.get("fdcId"), exc)
    return foods


def search_usda_foods(
    query: str,
    limit: int = 25,
    *,
    transport: httpx.BaseTransport | None = None,
) -> List[FoodItem]:
    raw = _search({"query": query, "pageSize": limit, "dataType": SEARCH_DATA_TYPES}, transport)
    return _normalize_all(raw)


def search_usda_by_barcode(
    barcode: str,
    *,
    transport: httpx.BaseTransport | None = None,
) -> List[FoodItem]:
    """Branded foods whose GTIN/UPC equals `barcode` exactly."""
    raw = _search({"query": barcode, "pageSize": 10, "dataType": "Branded"}, transport)
    return _normalize_all([f for f in raw if f.get("gtinUpc") == barcode])


def get_usda_food(fdc_id: int, *, transport: httpx.BaseTransport | None = None) -> Optional[FoodItem]:
    url = f"{settings.usda_base_url.rstrip('/')}/food/{int(fdc_id)}"
    payload = get_json(url, params={"api_key": settings.usda_api_key}, transport=transport)
    if not isinstance(payload, dict):
        return None
    # The details endpoint nests nutrient ids; flatten to the search shape.
    flat = []
    for n in payload.get("foodNutrients") or []:
        if not isinstance(n, dict):
            continue
        nutrient = n.get("nutrient") or {}
        flat.append({"nutrientId": n.get("nutrientId") or nutrient.get("id"), "value": n.get("value", n.get("amount"))})
    try:
        return normalize_usda_food({**payload, "foodNutrients": flat})
    except ValueError as exc:
        raise FoodLookupError(f"unusable USDA record {fdc_id}: {exc}") from exc
