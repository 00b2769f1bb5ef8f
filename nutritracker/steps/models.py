# -*- coding: utf-8 -*-
"""Steps — Pydantic models."""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from ..food_log.models import GoalProgress, check_calendar_date


class StepsLogRequest(BaseModel):
    steps: int = Field(..., ge=0, le=100_000)
    logged_date: Optional[str] = Field(None, pattern=r"^\d{4}-\d{2}-\d{2}$", description="Defaults to today")
    data_source: str = Field("manual", min_length=1, max_length=64)

    @field_validator("logged_date")
    @classmethod
    def _calendar_date(cls, value: Optional[str]) -> Optional[str]:
        return check_calendar_date(value)


class StepsLog(BaseModel):
    id: str
    logged_date: str = Field(..., description="YYYY-MM-DD")
    steps: int = Field(..., ge=0)
    distance_km: float = Field(0.0, ge=0)
    calories_burned: int = Field(0, ge=0)
    data_source: str = "manual"
    created_at: str
    updated_at: str


class StepsListResponse(BaseModel):
    days: int
    count: int
    logs: List[StepsLog]


class TodayStepsResponse(BaseModel):
    date: str
    log: Optional[StepsLog] = None
    progress: GoalProgress


class StepsStatsResponse(BaseModel):
    weekly_average: int = 0
    days_goal_achieved: int = Field(0, ge=0, le=7)
    best_day: int = 0
    daily_goal: int
