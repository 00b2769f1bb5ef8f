# -*- coding: utf-8 -*-
"""Foods — Open Food Facts barcode client.

Open Food Facts reports nutriments per 100 g, so normalized items always use a
"100g" serving. Sodium is given in grams and converted to milligrams. Products
without any nutriments cannot be logged and count as lookup failures.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

import httpx

from ..config import settings
from .http import FoodLookupError, get_json
from .models import FoodItem, FoodSourceType


def _per_100g(nutriments: Dict[str, Any], key: str) -> float:
    value = nutriments.get(f"{key}_100g")
    if value is None:
        return 0.0
    try:
        return max(float(value), 0.0)
    except (TypeError, ValueError):
        return 0.0


def _energy_kcal(nutriments: Dict[str, Any]) -> float:
    kcal = _per_100g(nutriments, "energy-kcal")
    if kcal:
        return kcal
    kj = _per_100g(nutriments, "energy")
    return round(kj / 4.184, 1) if kj else 0.0


def _first_category(product: Dict[str, Any]) -> Optional[str]:
    raw = product.get("categories") or ""
    first = str(raw).split(",")[0].strip()
    return first or None


def _text(value: Any) -> str:
    return str(value).strip() if value is not None else ""


def normalize_off_product(barcode: str, product: Dict[str, Any]) -> FoodItem:
    nutriments = product.get("nutriments")
    if not isinstance(nutriments, dict) or not nutriments:
        raise ValueError("product has no nutrition facts")
    name = (
        _text(product.get("product_name"))
        or _text(product.get("product_name_en"))
        or _text(product.get("generic_name"))
        or f"Product {barcode}"
    )
    brand = str(product.get("brands") or "").split(",")[0].strip() or None
    return FoodItem(
        id=f"off-{barcode}",
        name=name,
        brand=brand,
        category=_first_category(product),
        serving_size="100g",
        calories=_energy_kcal(nutriments),
        protein_g=_per_100g(nutriments, "proteins"),
        carbs_g=_per_100g(nutriments, "carbohydrates"),
        fat_g=_per_100g(nutriments, "fat"),
        fiber_g=_per_100g(nutriments, "fiber"),
        sugar_g=_per_100g(nutriments, "sugars"),
        sodium_mg=round(_per_100g(nutriments, "sodium") * 1000, 1),
        barcode=barcode,
        source=FoodSourceType.openfoodfacts,
    )


def lookup_off_barcode(
    barcode: str,
    *,
    transport: httpx.BaseTransport | None = None,
) -> Optional[FoodItem]:
    url = f"{settings.off_base_url.rstrip('/')}/api/v0/product/{barcode}.json"
    payload = get_json(url, transport=transport)
    if not isinstance(payload, dict) or payload.get("status") != 1:
        return None
    product = payload.get("product")
    if not isinstance(product, dict):
        return None
    try:
        return normalize_off_product(barcode, product)
    except ValueError as exc:
        raise FoodLookupError(f"unusable Open Food Facts record for {barcode}: {exc}") from exc
