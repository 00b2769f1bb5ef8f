# -*- coding: utf-8 -*-
"""Profile — API endpoints."""

from __future__ import annotations

from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException

from ..analytics.aggregation import compute_streaks, group_daily_nutrition, round_half_up
from ..auth.security import get_current_user
from ..food_log.storage import list_logs
from ..steps.storage import list_steps
from .goals import calculate_nutrition_goals
from .models import (
    DataExportResponse,
    ProfileSetupRequest,
    ProfileStatsResponse,
    ProfileUpdateRequest,
    UserProfile,
)
from .storage import (
    clear_user_logs,
    count_user_rows,
    get_profile,
    get_profile_or_default,
    reset_profile,
    upsert_profile,
)

router = APIRouter(prefix="/api/profile", tags=["Profile"])

_BIOMETRIC_FIELDS = {"age", "gender", "height_cm", "weight_kg", "activity_level"}


def _save(user_id: str, values: dict) -> UserProfile:
    try:
        return UserProfile.model_validate(upsert_profile(user_id, values))
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc


@router.get("", response_model=UserProfile, summary="Get the profile (defaults until set up)")
def read_profile(user: dict = Depends(get_current_user)):
    return UserProfile.model_validate(get_profile_or_default(user["id"]))


@router.post("/setup", response_model=UserProfile, summary="Create the profile and compute nutrition goals")
def setup_profile(request: ProfileSetupRequest, user: dict = Depends(get_current_user)):
    goals = calculate_nutrition_goals(
        age=request.age,
        gender=request.gender,
        height_cm=request.height_cm,
        weight_kg=request.weight_kg,
        activity_level=request.activity_level,
    )
    values = {**request.model_dump(mode="json"), **goals.model_dump()}
    return _save(user["id"], values)


@router.put("", response_model=UserProfile, summary="Update profile fields")
def update_profile(request: ProfileUpdateRequest, user: dict = Depends(get_current_user)):
    current = get_profile(user["id"])
    if current is None:
        raise HTTPException(status_code=404, detail="Profile not set up")

    changes = request.model_dump(mode="json", exclude_none=True)
    merged = {**current, **changes}
    if _BIOMETRIC_FIELDS & changes.keys():
        goals = calculate_nutrition_goals(
            age=merged["age"],
            gender=merged["gender"],
            height_cm=merged["height_cm"],
            weight_kg=merged["weight_kg"],
            activity_level=merged["activity_level"],
        ).model_dump()
        # Explicit goal values in the same request win over recomputed ones.
        merged.update({k: v for k, v in goals.items() if k not in changes})
    return _save(user["id"], merged)


@router.get("/stats", response_model=ProfileStatsResponse, summary="Log counts, streak and average calories")
def profile_stats(user: dict = Depends(get_current_user)):
    counts = count_user_rows(user["id"])
    profile = get_profile_or_default(user["id"])
    days = group_daily_nutrition(list_logs(user["id"]))
    streaks = compute_streaks(days, float(profile["daily_calories"]))
    average = round_half_up(sum(d.calories for d in days) / len(days)) if days else 0
    return ProfileStatsResponse(
        total_food_logs=counts["food_logs"],
        total_steps_logs=counts["steps_logs"],
        streak_days=streaks.current,
        average_calories=average,
    )


@router.get("/export", response_model=DataExportResponse, summary="Export profile and all logs as JSON")
def export_data(user: dict = Depends(get_current_user)):
    profile = UserProfile.model_validate(get_profile_or_default(user["id"]))
    return DataExportResponse(
        profile=profile,
        food_logs=[log.model_dump(mode="json") for log in list_logs(user["id"])],
        steps_logs=[log.model_dump(mode="json") for log in list_steps(user["id"])],
        export_date=datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
    )


@router.delete("/data", response_model=UserProfile, summary="Delete all logs and reset the profile")
def clear_data(user: dict = Depends(get_current_user)):
    try:
        clear_user_logs(user["id"])
        return UserProfile.model_validate(reset_profile(user["id"]))
    except Exception as exc:
        raise HTTPException(status_code=500, detail=f"Failed to clear data: {exc}") from exc
