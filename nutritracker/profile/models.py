# -*- coding: utf-8 -*-
"""Profile — Pydantic models."""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class Gender(str, Enum):
    male = "male"
    female = "female"
    other = "other"


class ActivityLevel(str, Enum):
    sedentary = "sedentary"
    lightly_active = "lightly_active"
    moderately_active = "moderately_active"
    very_active = "very_active"
    extra_active = "extra_active"


class NutritionGoals(BaseModel):
    daily_calories: int = Field(..., ge=0)
    daily_protein_g: int = Field(..., ge=0)
    daily_carbs_g: int = Field(..., ge=0)
    daily_fat_g: int = Field(..., ge=0)
    daily_fiber_g: int = Field(..., ge=0)
    daily_sugar_g: int = Field(..., ge=0)
    daily_sodium_mg: int = Field(..., ge=0)


class ProfileSetupRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=120)
    age: int = Field(..., ge=13, le=120)
    gender: Gender
    height_cm: float = Field(..., ge=100, le=250)
    weight_kg: float = Field(..., ge=30, le=300)
    activity_level: ActivityLevel = ActivityLevel.moderately_active
    daily_steps_goal: int = Field(10000, ge=1000, le=50000)


class ProfileUpdateRequest(BaseModel):
    """Partial update; goal fields given here win over recomputed ones."""

    name: Optional[str] = Field(None, min_length=1, max_length=120)
    age: Optional[int] = Field(None, ge=13, le=120)
    gender: Optional[Gender] = None
    height_cm: Optional[float] = Field(None, ge=100, le=250)
    weight_kg: Optional[float] = Field(None, ge=30, le=300)
    activity_level: Optional[ActivityLevel] = None
    daily_steps_goal: Optional[int] = Field(None, ge=1000, le=50000)
    daily_calories: Optional[int] = Field(None, ge=0)
    daily_protein_g: Optional[int] = Field(None, ge=0)
    daily_carbs_g: Optional[int] = Field(None, ge=0)
    daily_fat_g: Optional[int] = Field(None, ge=0)
    daily_fiber_g: Optional[int] = Field(None, ge=0)
    daily_sugar_g: Optional[int] = Field(None, ge=0)
    daily_sodium_mg: Optional[int] = Field(None, ge=0)


class UserProfile(NutritionGoals):
    name: str
    age: int
    gender: Gender
    height_cm: float
    weight_kg: float
    activity_level: ActivityLevel
    daily_steps_goal: int = Field(..., ge=0)
    is_default: bool = Field(False, description="True when no profile has been saved yet")
    updated_at: Optional[str] = None


class ProfileStatsResponse(BaseModel):
    total_food_logs: int = Field(0, ge=0)
    total_steps_logs: int = Field(0, ge=0)
    streak_days: int = Field(0, ge=0)
    average_calories: int = Field(0, ge=0)


class DataExportResponse(BaseModel):
    profile: UserProfile
    food_logs: List[Dict[str, Any]] = []
    steps_logs: List[Dict[str, Any]] = []
    export_date: str
