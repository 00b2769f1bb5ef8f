# -*- coding: utf-8 -*-
"""Steps — API endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query

from ..analytics.aggregation import goal_progress, round_half_up
from ..auth.security import get_current_user
from ..food_log.storage import today_iso
from ..profile.storage import get_profile_or_default
from .models import StepsListResponse, StepsLog, StepsLogRequest, StepsStatsResponse, TodayStepsResponse
from .storage import delete_steps, get_steps_for_date, list_steps, upsert_steps, window_start

router = APIRouter(prefix="/api/steps", tags=["Steps"])


@router.post("", response_model=StepsLog, summary="Log (or update) the step count for a day")
def log_steps(request: StepsLogRequest, user: dict = Depends(get_current_user)):
    logged_date = request.logged_date or today_iso()
    try:
        return upsert_steps(user["id"], logged_date=logged_date, steps=request.steps, data_source=request.data_source)
    except Exception as exc:
        raise HTTPException(status_code=500, detail=f"Failed to save steps: {exc}") from exc


@router.get("", response_model=StepsListResponse, summary="Recent steps logs")
def recent_steps(
    days: int = Query(default=30, ge=1, le=366),
    user: dict = Depends(get_current_user),
):
    logs = list_steps(user["id"], start=window_start(days))
    return StepsListResponse(days=days, count=len(logs), logs=logs)


@router.get("/today", response_model=TodayStepsResponse, summary="Today's steps and goal progress")
def today_steps(user: dict = Depends(get_current_user)):
    today = today_iso()
    log = get_steps_for_date(user["id"], today)
    profile = get_profile_or_default(user["id"])
    progress = goal_progress(float(log.steps if log else 0), float(profile["daily_steps_goal"]))
    return TodayStepsResponse(date=today, log=log, progress=progress)


@router.get("/stats", response_model=StepsStatsResponse, summary="Weekly average, goal days and best day")
def steps_stats(
    days: int = Query(default=30, ge=1, le=366),
    user: dict = Depends(get_current_user),
):
    logs = list_steps(user["id"], start=window_start(days))
    goal = int(get_profile_or_default(user["id"])["daily_steps_goal"])
    last7 = logs[:7]
    weekly_average = round_half_up(sum(l.steps for l in last7) / len(last7)) if last7 else 0
    return StepsStatsResponse(
        weekly_average=weekly_average,
        days_goal_achieved=sum(1 for l in last7 if l.steps >= goal),
        best_day=max((l.steps for l in logs), default=0),
        daily_goal=goal,
    )


@router.delete("/{logged_date}", summary="Delete the steps log for a day")
def remove_steps(logged_date: str, user: dict = Depends(get_current_user)):
    if not delete_steps(user["id"], logged_date):
        raise HTTPException(status_code=404, detail="Steps log not found")
    return {"status": "ok"}
