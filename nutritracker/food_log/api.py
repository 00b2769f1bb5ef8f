# -*- coding: utf-8 -*-
"""Food log — API endpoints."""

from __future__ import annotations

from typing import Dict, List

from fastapi import APIRouter, Depends, HTTPException, Query

from ..analytics.aggregation import nutrition_progress
from ..auth.security import get_current_user
from ..foods.storage import ensure_catalog_food, get_food
from ..profile.storage import get_profile_or_default
from .models import (
    MEAL_ORDER,
    DailyLogResponse,
    FoodLogCreateRequest,
    FoodLogEntry,
    FoodLogListResponse,
    FoodLogUpdateRequest,
)
from .portions import compute_log_totals, resolve_quantity
from .storage import create_log, delete_log, get_log, list_logs, sum_totals, today_iso, update_log

router = APIRouter(prefix="/api/food-logs", tags=["Food log"])


@router.post("", response_model=FoodLogEntry, summary="Log a food")
def create_entry(request: FoodLogCreateRequest, user: dict = Depends(get_current_user)):
    if request.food_item_id:
        food = get_food(request.food_item_id)
        if not food:
            raise HTTPException(status_code=404, detail="Food not found")
    elif request.food is not None:
        food = ensure_catalog_food(request.food)
    else:
        raise HTTPException(status_code=400, detail="either food_item_id or food is required")

    quantity = resolve_quantity(
        request.measurement,
        quantity=request.quantity,
        grams=request.grams,
        serving_size=food.serving_size,
    )
    try:
        return create_log(
            user["id"],
            food_item_id=food.id,
            logged_date=request.logged_date or today_iso(),
            meal_type=request.meal_type.value,
            quantity=quantity,
            totals=compute_log_totals(food, quantity),
        )
    except Exception as exc:
        raise HTTPException(status_code=500, detail=f"Failed to save food log: {exc}") from exc


@router.get("", response_model=FoodLogListResponse, summary="List food logs")
def list_entries(
    date: str | None = Query(default=None, description="YYYY-MM-DD; overrides start/end"),
    start: str | None = Query(default=None, description="YYYY-MM-DD"),
    end: str | None = Query(default=None, description="YYYY-MM-DD"),
    limit: int = Query(default=100, ge=1, le=500),
    offset: int = Query(default=0, ge=0),
    user: dict = Depends(get_current_user),
):
    if date:
        start = end = date
    logs = list_logs(user["id"], start=start, end=end)
    return FoodLogListResponse(count=len(logs), logs=logs[offset : offset + limit])


@router.get("/daily", response_model=DailyLogResponse, summary="A day's logs grouped by meal, with goal progress")
def daily(
    date: str | None = Query(default=None, description="YYYY-MM-DD, defaults to today"),
    user: dict = Depends(get_current_user),
):
    day = date or today_iso()
    logs = list_logs(user["id"], start=day, end=day)
    meals: Dict[str, List[FoodLogEntry]] = {m.value: [] for m in MEAL_ORDER}
    for log in logs:
        meals[log.meal_type.value].append(log)
    totals = sum_totals(logs)
    profile = get_profile_or_default(user["id"])
    return DailyLogResponse(date=day, meals=meals, totals=totals, progress=nutrition_progress(totals, profile))


@router.get("/{log_id}", response_model=FoodLogEntry, summary="Get a food log")
def get_entry(log_id: str, user: dict = Depends(get_current_user)):
    entry = get_log(user["id"], log_id)
    if not entry:
        raise HTTPException(status_code=404, detail="Food log not found")
    return entry


@router.patch("/{log_id}", response_model=FoodLogEntry, summary="Change quantity or meal type")
def update_entry(log_id: str, request: FoodLogUpdateRequest, user: dict = Depends(get_current_user)):
    entry = get_log(user["id"], log_id)
    if not entry:
        raise HTTPException(status_code=404, detail="Food log not found")
    food = entry.food or get_food(entry.food_item_id)
    if not food:
        raise HTTPException(status_code=409, detail="Logged food no longer exists in the catalog")

    if request.quantity is None and request.grams is None:
        quantity = entry.quantity
    else:
        quantity = resolve_quantity(
            request.measurement,
            quantity=request.quantity,
            grams=request.grams,
            serving_size=food.serving_size,
        )
    meal_type = (request.meal_type or entry.meal_type).value
    updated = update_log(
        user["id"],
        log_id,
        meal_type=meal_type,
        quantity=quantity,
        totals=compute_log_totals(food, quantity),
    )
    if not updated:
        raise HTTPException(status_code=404, detail="Food log not found")
    return updated


@router.delete("/{log_id}", summary="Delete a food log")
def delete_entry(log_id: str, user: dict = Depends(get_current_user)):
    if not delete_log(user["id"], log_id):
        raise HTTPException(status_code=404, detail="Food log not found")
    return {"status": "ok"}
