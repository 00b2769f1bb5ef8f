# -*- coding: utf-8 -*-
"""Food log — SQLite storage."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
from uuid import uuid4

from ..app_db import db_conn
from ..config import settings
from ..foods.models import FoodItem
from ..foods.storage import row_to_food
from .models import FoodLogEntry, LogTotals

_TOTAL_COLUMNS = {
    "calories": "total_calories",
    "protein_g": "total_protein_g",
    "carbs_g": "total_carbs_g",
    "fat_g": "total_fat_g",
    "fiber_g": "total_fiber_g",
    "sugar_g": "total_sugar_g",
    "sodium_mg": "total_sodium_mg",
}

_SELECT = """
    SELECT l.*, f.id AS f_id, f.name AS f_name, f.brand AS f_brand, f.category AS f_category,
           f.serving_size AS f_serving_size, f.calories AS f_calories, f.protein_g AS f_protein_g,
           f.carbs_g AS f_carbs_g, f.fat_g AS f_fat_g, f.fiber_g AS f_fiber_g, f.sugar_g AS f_sugar_g,
           f.sodium_mg AS f_sodium_mg, f.barcode AS f_barcode, f.source AS f_source
    FROM food_logs l
    LEFT JOIN food_items f ON f.id = l.food_item_id
"""


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def today_iso() -> str:
    return datetime.now(timezone.utc).date().isoformat()


def _row_to_entry(row: Dict[str, Any]) -> FoodLogEntry:
    food: Optional[FoodItem] = None
    if row.get("f_id"):
        food = row_to_food({k[2:]: v for k, v in row.items() if k.startswith("f_")})
    return FoodLogEntry(
        id=row["id"],
        food_item_id=row["food_item_id"],
        logged_date=row["logged_date"],
        meal_type=row["meal_type"],
        quantity=float(row["quantity"]),
        totals=LogTotals(**{k: float(row.get(col) or 0.0) for k, col in _TOTAL_COLUMNS.items()}),
        food=food,
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


def create_log(
    user_id: str,
    *,
    food_item_id: str,
    logged_date: str,
    meal_type: str,
    quantity: float,
    totals: LogTotals,
) -> FoodLogEntry:
    log_id = str(uuid4())
    now = _utc_now()
    with db_conn(settings.db_path) as conn:
        conn.execute(
            f"""
            INSERT INTO food_logs (
                id, user_id, food_item_id, logged_date, meal_type, quantity,
                {", ".join(_TOTAL_COLUMNS.values())}, created_at, updated_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                log_id,
                user_id,
                food_item_id,
                logged_date,
                meal_type,
                quantity,
                *[getattr(totals, k) for k in _TOTAL_COLUMNS],
                now,
                now,
            ),
        )
        row = conn.execute(_SELECT + " WHERE l.id = ?", (log_id,)).fetchone()
    return _row_to_entry(dict(row))


def get_log(user_id: str, log_id: str) -> Optional[FoodLogEntry]:
    with db_conn(settings.db_path) as conn:
        row = conn.execute(_SELECT + " WHERE l.id = ? AND l.user_id = ?", (log_id, user_id)).fetchone()
    return _row_to_entry(dict(row)) if row else None


def list_logs(
    user_id: str,
    *,
    start: Optional[str] = None,
    end: Optional[str] = None,
) -> List[FoodLogEntry]:
    """Logs within [start, end] (inclusive YYYY-MM-DD bounds), newest first."""
    start_date = start or "0000-01-01"
    end_date = end or "9999-12-31"
    with db_conn(settings.db_path) as conn:
        rows = conn.execute(
            _SELECT
            + " WHERE l.user_id = ? AND l.logged_date >= ? AND l.logged_date <= ?"
            + " ORDER BY l.logged_date DESC, l.created_at DESC",
            (user_id, start_date, end_date),
        ).fetchall()
    return [_row_to_entry(dict(r)) for r in rows]


def update_log(
    user_id: str,
    log_id: str,
    *,
    meal_type: str,
    quantity: float,
    totals: LogTotals,
) -> Optional[FoodLogEntry]:
    assignments = ", ".join(f"{col} = ?" for col in _TOTAL_COLUMNS.values())
    with db_conn(settings.db_path) as conn:
        cur = conn.execute(
            f"UPDATE food_logs SET meal_type = ?, quantity = ?, {assignments}, updated_at = ? WHERE id = ? AND user_id = ?",
            (
                meal_type,
                quantity,
                *[getattr(totals, k) for k in _TOTAL_COLUMNS],
                _utc_now(),
                log_id,
                user_id,
            ),
        )
        if cur.rowcount == 0:
            return None
    return get_log(user_id, log_id)


def delete_log(user_id: str, log_id: str) -> bool:
    with db_conn(settings.db_path) as conn:
        cur = conn.execute("DELETE FROM food_logs WHERE id = ? AND user_id = ?", (log_id, user_id))
        return cur.rowcount > 0


def sum_totals(entries: List[FoodLogEntry]) -> LogTotals:
    acc = {k: 0.0 for k in _TOTAL_COLUMNS}
    for entry in entries:
        for k in acc:
            acc[k] += getattr(entry.totals, k)
    return LogTotals(**{k: round(v, 1) for k, v in acc.items()})
