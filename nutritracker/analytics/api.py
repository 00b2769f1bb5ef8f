# -*- coding: utf-8 -*-
"""Analytics — API endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from ..auth.security import get_current_user
from ..config import settings
from ..food_log.storage import list_logs, today_iso
from ..profile.storage import get_profile_or_default
from ..steps.storage import get_steps_for_date, list_steps, window_start
from .aggregation import (
    build_insights,
    compute_analytics,
    dashboard_overview,
    goal_achievement_series,
    group_daily_nutrition,
    macro_distribution,
)
from .models import AnalyticsResponse, DashboardResponse

router = APIRouter(prefix="/api", tags=["Analytics"])


@router.get("/analytics", response_model=AnalyticsResponse, summary="Trends, streaks and goal achievement")
def analytics(
    days: int | None = Query(default=None, ge=1, le=366, description="Window size, defaults to NUTRI_ANALYTICS_DAYS"),
    user: dict = Depends(get_current_user),
):
    window = days or settings.analytics_days
    start = window_start(window)
    end = today_iso()
    profile = get_profile_or_default(user["id"])
    food_logs = list_logs(user["id"], start=start, end=end)
    steps_logs = list_steps(user["id"], start=start, end=end)

    summary = compute_analytics(profile, food_logs, steps_logs)
    nutrition_days = group_daily_nutrition(food_logs)
    return AnalyticsResponse(
        start=start,
        end=end,
        summary=summary,
        nutrition_days=nutrition_days,
        macro_distribution=macro_distribution(nutrition_days),
        goal_achievement=goal_achievement_series(nutrition_days, steps_logs, profile),
        insights=build_insights(summary, profile),
    )


@router.get("/dashboard", response_model=DashboardResponse, summary="Today's totals and goal progress")
def dashboard(user: dict = Depends(get_current_user)):
    today = today_iso()
    profile = get_profile_or_default(user["id"])
    steps_log = get_steps_for_date(user["id"], today)
    overview = dashboard_overview(profile, list_logs(user["id"], start=today, end=today), steps_log)
    return DashboardResponse(
        date=today,
        name=profile["name"],
        profile_is_default=bool(profile.get("is_default")),
        steps_log_id=steps_log.id if steps_log else None,
        **overview,
    )
