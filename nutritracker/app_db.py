# -*- coding: utf-8 -*-
"""App database — SQLite helpers for users, profiles, the food catalog and logs."""

from __future__ import annotations

import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator


def connect(db_path: Path) -> sqlite3.Connection:
    db_path.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(str(db_path), check_same_thread=False)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON;")
    return conn


def init_app_db(db_path: Path) -> None:
    conn = connect(db_path)
    try:
        cur = conn.cursor()
        cur.execute(
            """
            CREATE TABLE IF NOT EXISTS users (
                id TEXT PRIMARY KEY,
                email TEXT NOT NULL UNIQUE,
                password_hash TEXT NOT NULL,
                created_at TEXT NOT NULL,
                last_login_at TEXT
            );
            """
        )
        cur.execute(
            """
            CREATE TABLE IF NOT EXISTS user_profiles (
                user_id TEXT PRIMARY KEY,
                name TEXT NOT NULL,
                age INTEGER NOT NULL,
                gender TEXT NOT NULL,
                height_cm REAL NOT NULL,
                weight_kg REAL NOT NULL,
                activity_level TEXT NOT NULL,
                daily_calories INTEGER NOT NULL,
                daily_protein_g INTEGER NOT NULL,
                daily_carbs_g INTEGER NOT NULL,
                daily_fat_g INTEGER NOT NULL,
                daily_fiber_g INTEGER NOT NULL,
                daily_sugar_g INTEGER NOT NULL,
                daily_sodium_mg INTEGER NOT NULL,
                daily_steps_goal INTEGER NOT NULL,
                created_at TEXT NOT NULL,
                updated_at TEXT NOT NULL,
                FOREIGN KEY(user_id) REFERENCES users(id) ON DELETE CASCADE
            );
            """
        )
        cur.execute(
            """
            CREATE TABLE IF NOT EXISTS food_items (
                id TEXT PRIMARY KEY,
                name TEXT NOT NULL,
                brand TEXT NOT NULL DEFAULT '',
                category TEXT,
                serving_size TEXT NOT NULL,
                calories REAL NOT NULL DEFAULT 0,
                protein_g REAL NOT NULL DEFAULT 0,
                carbs_g REAL NOT NULL DEFAULT 0,
                fat_g REAL NOT NULL DEFAULT 0,
                fiber_g REAL NOT NULL DEFAULT 0,
                sugar_g REAL NOT NULL DEFAULT 0,
                sodium_mg REAL NOT NULL DEFAULT 0,
                barcode TEXT,
                source TEXT NOT NULL DEFAULT 'local',
                created_at TEXT NOT NULL
            );
            """
        )
        cur.execute("CREATE INDEX IF NOT EXISTS idx_food_items_name ON food_items(name COLLATE NOCASE);")
        cur.execute("CREATE INDEX IF NOT EXISTS idx_food_items_barcode ON food_items(barcode);")
        cur.execute(
            """
            CREATE TABLE IF NOT EXISTS food_logs (
                id TEXT PRIMARY KEY,
                user_id TEXT NOT NULL,
                food_item_id TEXT NOT NULL,
                logged_date TEXT NOT NULL,
                meal_type TEXT NOT NULL,
                quantity REAL NOT NULL,
                total_calories REAL NOT NULL DEFAULT 0,
                total_protein_g REAL NOT NULL DEFAULT 0,
                total_carbs_g REAL NOT NULL DEFAULT 0,
                total_fat_g REAL NOT NULL DEFAULT 0,
                total_fiber_g REAL NOT NULL DEFAULT 0,
                total_sugar_g REAL NOT NULL DEFAULT 0,
                total_sodium_mg REAL NOT NULL DEFAULT 0,
                created_at TEXT NOT NULL,
                updated_at TEXT NOT NULL,
                FOREIGN KEY(user_id) REFERENCES users(id) ON DELETE CASCADE,
                FOREIGN KEY(food_item_id) REFERENCES food_items(id)
            );
            """
        )
        cur.execute(
            "CREATE INDEX IF NOT EXISTS idx_food_logs_user_date ON food_logs(user_id, logged_date DESC, created_at DESC);"
        )
        cur.execute(
            """
            CREATE TABLE IF NOT EXISTS steps_logs (
                id TEXT PRIMARY KEY,
                user_id TEXT NOT NULL,
                logged_date TEXT NOT NULL,
                steps INTEGER NOT NULL,
                distance_km REAL NOT NULL DEFAULT 0,
                calories_burned INTEGER NOT NULL DEFAULT 0,
                data_source TEXT NOT NULL DEFAULT 'manual',
                created_at TEXT NOT NULL,
                updated_at TEXT NOT NULL,
                UNIQUE (user_id, logged_date),
                FOREIGN KEY(user_id) REFERENCES users(id) ON DELETE CASCADE
            );
            """
        )
        cur.execute(
            """
            CREATE TABLE IF NOT EXISTS food_search_cache (
                query TEXT PRIMARY KEY,
                payload_json TEXT NOT NULL,
                cached_at REAL NOT NULL
            );
            """
        )
        conn.commit()
    finally:
        conn.close()


@contextmanager
def db_conn(db_path: Path) -> Iterator[sqlite3.Connection]:
    conn = connect(db_path)
    try:
        yield conn
        conn.commit()
    finally:
        conn.close()
