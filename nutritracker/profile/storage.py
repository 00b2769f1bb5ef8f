# -*- coding: utf-8 -*-
"""Profile — SQLite storage helpers."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, Optional

from ..app_db import db_conn
from ..config import settings

PROFILE_FIELDS = (
    "name",
    "age",
    "gender",
    "height_cm",
    "weight_kg",
    "activity_level",
    "daily_calories",
    "daily_protein_g",
    "daily_carbs_g",
    "daily_fat_g",
    "daily_fiber_g",
    "daily_sugar_g",
    "daily_sodium_mg",
    "daily_steps_goal",
)

DEFAULT_PROFILE: Dict[str, Any] = {
    "name": "User",
    "age": 30,
    "gender": "other",
    "height_cm": 170,
    "weight_kg": 70,
    "activity_level": "moderately_active",
    "daily_calories": 2000,
    "daily_protein_g": 150,
    "daily_carbs_g": 250,
    "daily_fat_g": 67,
    "daily_fiber_g": 25,
    "daily_sugar_g": 50,
    "daily_sodium_mg": 2300,
    "daily_steps_goal": 10000,
}


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def default_profile() -> Dict[str, Any]:
    return {**DEFAULT_PROFILE, "is_default": True, "updated_at": None}


def get_profile(user_id: str) -> Optional[Dict[str, Any]]:
    with db_conn(settings.db_path) as conn:
        row = conn.execute("SELECT * FROM user_profiles WHERE user_id = ?", (user_id,)).fetchone()
    if not row:
        return None
    data = dict(row)
    profile = {k: data[k] for k in PROFILE_FIELDS}
    profile["is_default"] = False
    profile["updated_at"] = data.get("updated_at")
    return profile


def get_profile_or_default(user_id: str) -> Dict[str, Any]:
    return get_profile(user_id) or default_profile()


def upsert_profile(user_id: str, values: Dict[str, Any]) -> Dict[str, Any]:
    missing = [k for k in PROFILE_FIELDS if values.get(k) is None]
    if missing:
        raise ValueError(f"missing profile fields: {', '.join(missing)}")
    now = _utc_now()
    row = [values[k] for k in PROFILE_FIELDS]
    columns = ", ".join(PROFILE_FIELDS)
    placeholders = ", ".join("?" for _ in PROFILE_FIELDS)
    updates = ", ".join(f"{k} = excluded.{k}" for k in PROFILE_FIELDS)
    with db_conn(settings.db_path) as conn:
        conn.execute(
            f"""
            INSERT INTO user_profiles (user_id, {columns}, created_at, updated_at)
            VALUES (?, {placeholders}, ?, ?)
            ON CONFLICT(user_id) DO UPDATE SET {updates}, updated_at = excluded.updated_at
            """,
            (user_id, *row, now, now),
        )
    profile = {k: values[k] for k in PROFILE_FIELDS}
    profile["is_default"] = False
    profile["updated_at"] = now
    return profile


def reset_profile(user_id: str) -> Dict[str, Any]:
    return upsert_profile(user_id, dict(DEFAULT_PROFILE))


def count_user_rows(user_id: str) -> Dict[str, int]:
    with db_conn(settings.db_path) as conn:
        food = conn.execute("SELECT COUNT(*) FROM food_logs WHERE user_id = ?", (user_id,)).fetchone()[0]
        steps = conn.execute("SELECT COUNT(*) FROM steps_logs WHERE user_id = ?", (user_id,)).fetchone()[0]
    return {"food_logs": int(food), "steps_logs": int(steps)}


def clear_user_logs(user_id: str) -> Dict[str, int]:
    with db_conn(settings.db_path) as conn:
        food = conn.execute("DELETE FROM food_logs WHERE user_id = ?", (user_id,)).rowcount
        steps = conn.execute("DELETE FROM steps_logs WHERE user_id = ?", (user_id,)).rowcount
    return {"food_logs": int(food), "steps_logs": int(steps)}
