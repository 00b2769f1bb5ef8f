# -*- coding: utf-8 -*-
"""Steps — SQLite storage (one row per user per day)."""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from typing import Any, Dict, List, Optional
from uuid import uuid4

from ..app_db import db_conn
from ..config import settings
from .models import StepsLog

KM_PER_STEP = 0.0008
KCAL_PER_STEP = 0.04


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def estimate_distance_km(steps: int) -> float:
    return round(steps * KM_PER_STEP, 1)


def estimate_calories(steps: int) -> int:
    return int(steps * KCAL_PER_STEP + 0.5)


def _row_to_log(row: Dict[str, Any]) -> StepsLog:
    return StepsLog(
        id=row["id"],
        logged_date=row["logged_date"],
        steps=int(row["steps"]),
        distance_km=float(row.get("distance_km") or 0.0),
        calories_burned=int(row.get("calories_burned") or 0),
        data_source=row.get("data_source") or "manual",
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


def upsert_steps(user_id: str, *, logged_date: str, steps: int, data_source: str = "manual") -> StepsLog:
    now = _utc_now()
    with db_conn(settings.db_path) as conn:
        conn.execute(
            """
            INSERT INTO steps_logs (
                id, user_id, logged_date, steps, distance_km, calories_burned, data_source, created_at, updated_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
            ON CONFLICT(user_id, logged_date) DO UPDATE SET
                steps = excluded.steps,
                distance_km = excluded.distance_km,
                calories_burned = excluded.calories_burned,
                data_source = excluded.data_source,
                updated_at = excluded.updated_at
            """,
            (
                str(uuid4()),
                user_id,
                logged_date,
                int(steps),
                estimate_distance_km(steps),
                estimate_calories(steps),
                data_source,
                now,
                now,
            ),
        )
        row = conn.execute(
            "SELECT * FROM steps_logs WHERE user_id = ? AND logged_date = ?",
            (user_id, logged_date),
        ).fetchone()
    return _row_to_log(dict(row))


def get_steps_for_date(user_id: str, logged_date: str) -> Optional[StepsLog]:
    with db_conn(settings.db_path) as conn:
        row = conn.execute(
            "SELECT * FROM steps_logs WHERE user_id = ? AND logged_date = ?",
            (user_id, logged_date),
        ).fetchone()
    return _row_to_log(dict(row)) if row else None


def list_steps(
    user_id: str,
    *,
    start: Optional[str] = None,
    end: Optional[str] = None,
) -> List[StepsLog]:
    """Steps logs within [start, end], newest first."""
    with db_conn(settings.db_path) as conn:
        rows = conn.execute(
            """
            SELECT * FROM steps_logs
            WHERE user_id = ? AND logged_date >= ? AND logged_date <= ?
            ORDER BY logged_date DESC
            """,
            (user_id, start or "0000-01-01", end or "9999-12-31"),
        ).fetchall()
    return [_row_to_log(dict(r)) for r in rows]


def window_start(days: int, today: date | None = None) -> str:
    today = today or datetime.now(timezone.utc).date()
    return (today - timedelta(days=int(days))).isoformat()


def delete_steps(user_id: str, logged_date: str) -> bool:
    with db_conn(settings.db_path) as conn:
        cur = conn.execute(
            "DELETE FROM steps_logs WHERE user_id = ? AND logged_date = ?",
            (user_id, logged_date),
        )
        return cur.rowcount > 0
