from __future__ import annotations

import os
from pathlib import Path
from typing import List


class Settings:
    """Centralized configuration for the NutriTracker backend."""

    def __init__(self) -> None:
        base_dir = Path(__file__).resolve().parent
        repo_root = base_dir.parent
        data_root_default = repo_root / "data"

        self.data_root: Path = Path(
            os.environ.get("NUTRI_DATA_ROOT") or data_root_default
        ).expanduser()
        self.db_path: Path = Path(
            os.environ.get("NUTRI_DB_PATH") or (self.data_root / "nutritracker.db")
        ).expanduser()
        # In production you MUST set NUTRI_JWT_SECRET. The dev secret only keeps local demos easy.
        self.jwt_secret: str = os.environ.get("NUTRI_JWT_SECRET") or "dev-secret-change-me"
        self.token_ttl_days: int = int(os.environ.get("NUTRI_TOKEN_TTL_DAYS") or "7")
        self.cookie_secure: bool = (os.environ.get("NUTRI_COOKIE_SECURE") or "").strip() in {"1", "true", "True"}

        # ---- External food lookups ----
        self.usda_api_key: str = os.environ.get("USDA_API_KEY") or "DEMO_KEY"
        self.usda_base_url: str = os.environ.get(
            "USDA_BASE_URL", "https://api.nal.usda.gov/fdc/v1"
        )
        self.off_base_url: str = os.environ.get(
            "OFF_BASE_URL", "https://world.openfoodfacts.org"
        )
        self.lookup_timeout: float = float(os.environ.get("FOOD_LOOKUP_TIMEOUT", "10"))
        self.cache_ttl_hours: float = float(os.environ.get("FOOD_CACHE_TTL_HOURS", "24"))
        self.cache_max_entries: int = int(os.environ.get("FOOD_CACHE_MAX_ENTRIES", "50"))
        self.cache_keep_entries: int = int(os.environ.get("FOOD_CACHE_KEEP_ENTRIES", "40"))

        self.analytics_days: int = int(os.environ.get("NUTRI_ANALYTICS_DAYS", "30"))
        self.log_level: str = (os.environ.get("NUTRI_LOG_LEVEL") or "INFO").upper()

        cors = os.environ.get("NUTRI_CORS_ORIGINS", "*")
        if cors.strip() == "*":
            self.cors_origins: List[str] = ["*"]
        else:
            self.cors_origins = [
                origin.strip() for origin in cors.split(",") if origin.strip()
            ]


settings = Settings()
