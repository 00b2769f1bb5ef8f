# -*- coding: utf-8 -*-
"""Foods — shared HTTP helper for the external nutrition databases."""

from __future__ import annotations

from typing import Any, Dict, Optional

import httpx

from ..config import settings


class FoodLookupError(RuntimeError):
    """An external food database could not be queried."""


def get_json(
    url: str,
    *,
    params: Optional[Dict[str, Any]] = None,
    transport: httpx.BaseTransport | None = None,
) -> Any:
    headers = {"Accept": "application/json", "User-Agent": "NutriTracker/1.0"}
    try:
        with httpx.Client(timeout=settings.lookup_timeout, follow_redirects=True, transport=transport) as client:
            resp = client.get(url, params=params, headers=headers)
            if resp.status_code == 404:
                return None
            resp.raise_for_status()
            try:
                return resp.json()
            except ValueError as exc:
                snippet = (resp.text or "").replace("\n", " ").strip()[:200]
                raise FoodLookupError(f"non-JSON response from {url}: {snippet}") from exc
    except httpx.HTTPStatusError as exc:
        raise FoodLookupError(f"{url} returned HTTP {exc.response.status_code}") from exc
    except httpx.HTTPError as exc:
        raise FoodLookupError(f"{url} request failed: {exc}") from exc
