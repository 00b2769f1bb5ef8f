# -*- coding: utf-8 -*-
"""Auth — user accounts in the app DB."""

from __future__ import annotations

import sqlite3
from datetime import datetime, timezone
from typing import Any, Dict, Optional
from uuid import uuid4

from ..app_db import db_conn
from ..config import settings


class EmailTakenError(ValueError):
    pass


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def normalize_email(email: str) -> str:
    return email.strip().lower()


def find_user(email: str) -> Optional[Dict[str, Any]]:
    with db_conn(settings.db_path) as conn:
        row = conn.execute("SELECT * FROM users WHERE email = ?", (normalize_email(email),)).fetchone()
    return dict(row) if row else None


def get_user(user_id: str) -> Optional[Dict[str, Any]]:
    with db_conn(settings.db_path) as conn:
        row = conn.execute("SELECT * FROM users WHERE id = ?", (user_id,)).fetchone()
    return dict(row) if row else None


def create_user(*, email: str, password_hash: str) -> Dict[str, Any]:
    user = {
        "id": str(uuid4()),
        "email": normalize_email(email),
        "password_hash": password_hash,
        "created_at": _utc_now(),
        "last_login_at": None,
    }
    try:
        with db_conn(settings.db_path) as conn:
            conn.execute(
                "INSERT INTO users (id, email, password_hash, created_at) VALUES (?, ?, ?, ?)",
                (user["id"], user["email"], password_hash, user["created_at"]),
            )
    except sqlite3.IntegrityError as exc:
        raise EmailTakenError(user["email"]) from exc
    return user


def record_login(user_id: str) -> str:
    now = _utc_now()
    with db_conn(settings.db_path) as conn:
        conn.execute("UPDATE users SET last_login_at = ? WHERE id = ?", (now, user_id))
    return now
