# -*- coding: utf-8 -*-
"""Analytics — Pydantic models."""

from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from ..food_log.models import GoalProgress, LogTotals


class DailyNutrition(BaseModel):
    date: str = Field(..., description="YYYY-MM-DD")
    calories: float = 0.0
    protein: float = 0.0
    carbs: float = 0.0
    fat: float = 0.0
    fiber: float = 0.0
    sodium: float = 0.0


class Streaks(BaseModel):
    current: int = Field(0, ge=0)
    longest: int = Field(0, ge=0)


class MacroShare(BaseModel):
    name: str
    percent: int = Field(..., ge=0, le=100)
    avg_grams: int = Field(..., ge=0)


class GoalAchievementDay(BaseModel):
    date: str
    calorie_progress: float = Field(..., ge=0, le=150)
    steps_progress: float = Field(..., ge=0, le=150)
    calories: int
    steps: int


class Insights(BaseModel):
    nutrition: List[str] = Field(default_factory=list)
    activity: List[str] = Field(default_factory=list)


class AnalyticsSummary(BaseModel):
    avg_calories: int = 0
    avg_steps: int = 0
    calorie_goal_rate: int = 0
    steps_goal_rate: int = 0
    weekly_trend: int = 0
    total_days: int = 0
    current_streak: int = 0
    longest_streak: int = 0
    unique_foods: int = 0
    most_active_day: str = "N/A"
    consistency_score: int = 0
    total_calories_logged: float = 0.0
    total_steps_logged: int = 0
    health_score: int = 0
    health_label: str = "Needs Improvement"


class AnalyticsResponse(BaseModel):
    start: str
    end: str
    summary: AnalyticsSummary
    nutrition_days: List[DailyNutrition]
    macro_distribution: List[MacroShare]
    goal_achievement: List[GoalAchievementDay]
    insights: Insights


class DashboardResponse(BaseModel):
    date: str
    name: str
    totals: LogTotals
    steps: int = 0
    progress: Dict[str, GoalProgress]
    profile_is_default: bool = False
    steps_log_id: Optional[str] = None
