# -*- coding: utf-8 -*-
"""Foods — capped key/value cache for external search results."""

from __future__ import annotations

import json
import logging
import sqlite3
import time
from typing import List, Optional

from ..app_db import db_conn
from ..config import settings
from .models import FoodItem

logger = logging.getLogger(__name__)


def _key(query: str) -> str:
    return query.strip().lower()


def get_cached_foods(query: str, *, now: float | None = None) -> Optional[List[FoodItem]]:
    """Cached foods for `query`, or None on a miss or an expired entry."""
    now = time.time() if now is None else now
    ttl_sec = settings.cache_ttl_hours * 3600
    try:
        with db_conn(settings.db_path) as conn:
            row = conn.execute(
                "SELECT payload_json, cached_at FROM food_search_cache WHERE query = ?",
                (_key(query),),
            ).fetchone()
        if not row or now - float(row["cached_at"]) >= ttl_sec:
            return None
        return [FoodItem.model_validate(item) for item in json.loads(row["payload_json"])]
    except (sqlite3.Error, ValueError) as exc:
        logger.warning("food cache read failed for %r: %s", query, exc)
        return None


def set_cached_foods(query: str, foods: List[FoodItem], *, now: float | None = None) -> None:
    if not foods:
        return
    now = time.time() if now is None else now
    payload = json.dumps([f.model_dump(mode="json") for f in foods], ensure_ascii=False)
    try:
        with db_conn(settings.db_path) as conn:
            conn.execute(
                """
                INSERT INTO food_search_cache (query, payload_json, cached_at) VALUES (?, ?, ?)
                ON CONFLICT(query) DO UPDATE SET payload_json = excluded.payload_json, cached_at = excluded.cached_at
                """,
                (_key(query), payload, now),
            )
            count = conn.execute("SELECT COUNT(*) FROM food_search_cache").fetchone()[0]
            if count > settings.cache_max_entries:
                conn.execute(
                    """
                    DELETE FROM food_search_cache WHERE query NOT IN (
                        SELECT query FROM food_search_cache ORDER BY cached_at DESC LIMIT ?
                    )
                    """,
                    (settings.cache_keep_entries,),
                )
    except sqlite3.Error as exc:
        logger.warning("food cache write failed for %r: %s", query, exc)


def cache_size() -> int:
    with db_conn(settings.db_path) as conn:
        return int(conn.execute("SELECT COUNT(*) FROM food_search_cache").fetchone()[0])
