# -*- coding: utf-8 -*-
"""Food log — serving conversion and per-log nutrient totals."""

from __future__ import annotations

import re
from typing import Optional

from fastapi import HTTPException

from ..foods.models import FoodItem
from .models import LogTotals, MeasurementType

DEFAULT_SERVING_GRAMS = 100.0

_GRAMS_RE = re.compile(r"(\d+(?:\.\d+)?)\s*g", re.IGNORECASE)


def parse_serving_size(serving_size: str | None) -> float:
    """Grams in a serving label like '1 cup (228 g)'; 100 when none is given."""
    match = _GRAMS_RE.search(serving_size or "")
    if match:
        grams = float(match.group(1))
        if grams > 0:
            return grams
    return DEFAULT_SERVING_GRAMS


def resolve_quantity(
    measurement: MeasurementType,
    *,
    quantity: Optional[float],
    grams: Optional[float],
    serving_size: str | None,
) -> float:
    if MeasurementType(measurement) == MeasurementType.grams:
        if not grams or grams <= 0:
            raise HTTPException(status_code=400, detail="grams must be a positive number")
        return grams / parse_serving_size(serving_size)
    if not quantity or quantity <= 0:
        raise HTTPException(status_code=400, detail="quantity must be a positive number")
    return float(quantity)


def compute_log_totals(food: FoodItem, quantity: float) -> LogTotals:
    """Nutrients for `quantity` servings; left unrounded, daily sums round."""
    return LogTotals(
        calories=food.calories * quantity,
        protein_g=(food.protein_g or 0.0) * quantity,
        carbs_g=(food.carbs_g or 0.0) * quantity,
        fat_g=(food.fat_g or 0.0) * quantity,
        fiber_g=(food.fiber_g or 0.0) * quantity,
        sugar_g=(food.sugar_g or 0.0) * quantity,
        sodium_mg=(food.sodium_mg or 0.0) * quantity,
    )
