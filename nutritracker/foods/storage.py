# -*- coding: utf-8 -*-
"""Foods — local catalog storage (SQLite)."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
from uuid import uuid4

from ..app_db import db_conn
from ..config import settings
from .models import FoodItem

_NUTRIENT_FIELDS = ("calories", "protein_g", "carbs_g", "fat_g", "fiber_g", "sugar_g", "sodium_mg")


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def row_to_food(row: Dict[str, Any]) -> FoodItem:
    return FoodItem(
        id=row["id"],
        name=row["name"],
        brand=row.get("brand") or None,
        category=row.get("category"),
        serving_size=row.get("serving_size") or "100g",
        barcode=row.get("barcode"),
        source=row.get("source") or "local",
        **{k: float(row.get(k) or 0.0) for k in _NUTRIENT_FIELDS},
    )


def list_foods(limit: Optional[int] = None) -> List[FoodItem]:
    sql = "SELECT * FROM food_items ORDER BY name COLLATE NOCASE ASC"
    params: tuple = ()
    if limit is not None:
        sql += " LIMIT ?"
        params = (int(limit),)
    with db_conn(settings.db_path) as conn:
        rows = conn.execute(sql, params).fetchall()
    return [row_to_food(dict(r)) for r in rows]


def get_food(food_id: str) -> Optional[FoodItem]:
    with db_conn(settings.db_path) as conn:
        row = conn.execute("SELECT * FROM food_items WHERE id = ?", (food_id,)).fetchone()
    return row_to_food(dict(row)) if row else None


def find_by_barcode(barcode: str) -> Optional[FoodItem]:
    with db_conn(settings.db_path) as conn:
        row = conn.execute(
            "SELECT * FROM food_items WHERE barcode = ? ORDER BY created_at ASC LIMIT 1",
            (barcode,),
        ).fetchone()
    return row_to_food(dict(row)) if row else None


def find_by_name_brand(name: str, brand: Optional[str]) -> Optional[FoodItem]:
    with db_conn(settings.db_path) as conn:
        row = conn.execute(
            "SELECT * FROM food_items WHERE name = ? AND brand = ? LIMIT 1",
            (name, brand or ""),
        ).fetchone()
    return row_to_food(dict(row)) if row else None


def search_local_foods(query: str, limit: int = 25) -> List[FoodItem]:
    """Case-insensitive substring match on name/brand/category, or exact barcode."""
    term = query.strip()
    escaped = term.lower().replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    pattern = f"%{escaped}%"
    with db_conn(settings.db_path) as conn:
        rows = conn.execute(
            """
            SELECT * FROM food_items
            WHERE LOWER(name) LIKE :pattern ESCAPE '\\'
               OR LOWER(brand) LIKE :pattern ESCAPE '\\'
               OR LOWER(COALESCE(category, '')) LIKE :pattern ESCAPE '\\'
               OR barcode = :term
            ORDER BY name COLLATE NOCASE ASC
            LIMIT :limit
            """,
            {"pattern": pattern, "term": term, "limit": int(limit)},
        ).fetchall()
    return [row_to_food(dict(r)) for r in rows]


def create_food(values: Dict[str, Any], *, source: str = "local") -> FoodItem:
    food_id = str(uuid4())
    now = _utc_now()
    with db_conn(settings.db_path) as conn:
        conn.execute(
            """
            INSERT INTO food_items (
                id, name, brand, category, serving_size,
                calories, protein_g, carbs_g, fat_g, fiber_g, sugar_g, sodium_mg,
                barcode, source, created_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                food_id,
                values["name"],
                values.get("brand") or "",
                values.get("category"),
                values.get("serving_size") or "100g",
                *[float(values.get(k) or 0.0) for k in _NUTRIENT_FIELDS],
                values.get("barcode"),
                source,
                now,
            ),
        )
        row = conn.execute("SELECT * FROM food_items WHERE id = ?", (food_id,)).fetchone()
    return row_to_food(dict(row))


def ensure_catalog_food(food: FoodItem) -> FoodItem:
    """Return the catalog row for `food`, adding external foods on first use."""
    if food.source.value == "local":
        existing = get_food(food.id)
        if existing:
            return existing
    existing = find_by_name_brand(food.name, food.brand)
    if existing:
        return existing
    values = food.model_dump(exclude={"id", "source"})
    return create_food(values, source=food.source.value)
