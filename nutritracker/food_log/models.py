# -*- coding: utf-8 -*-
"""Food log — Pydantic models."""

from __future__ import annotations

from datetime import date
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from ..foods.models import FoodItem


class MealType(str, Enum):
    breakfast = "breakfast"
    lunch = "lunch"
    dinner = "dinner"
    snack = "snack"


MEAL_ORDER = [MealType.breakfast, MealType.lunch, MealType.dinner, MealType.snack]


def check_calendar_date(value: Optional[str]) -> Optional[str]:
    if value is not None:
        date.fromisoformat(value)
    return value


class MeasurementType(str, Enum):
    servings = "servings"
    grams = "grams"


class LogTotals(BaseModel):
    calories: float = Field(0.0, ge=0)
    protein_g: float = Field(0.0, ge=0)
    carbs_g: float = Field(0.0, ge=0)
    fat_g: float = Field(0.0, ge=0)
    fiber_g: float = Field(0.0, ge=0)
    sugar_g: float = Field(0.0, ge=0)
    sodium_mg: float = Field(0.0, ge=0)


class FoodLogCreateRequest(BaseModel):
    food_item_id: Optional[str] = Field(None, description="Catalog food id")
    food: Optional[FoodItem] = Field(None, description="External food picked from search/barcode results")
    meal_type: MealType = MealType.breakfast
    measurement: MeasurementType = MeasurementType.servings
    quantity: Optional[float] = Field(1.0, gt=0, description="Servings")
    grams: Optional[float] = Field(None, gt=0)
    logged_date: Optional[str] = Field(None, pattern=r"^\d{4}-\d{2}-\d{2}$")

    @field_validator("logged_date")
    @classmethod
    def _calendar_date(cls, value: Optional[str]) -> Optional[str]:
        return check_calendar_date(value)

    @model_validator(mode="after")
    def _require_food(self) -> "FoodLogCreateRequest":
        if not self.food_item_id and self.food is None:
            raise ValueError("either food_item_id or food is required")
        return self


class FoodLogUpdateRequest(BaseModel):
    meal_type: Optional[MealType] = None
    measurement: MeasurementType = MeasurementType.servings
    quantity: Optional[float] = Field(None, gt=0)
    grams: Optional[float] = Field(None, gt=0)


class FoodLogEntry(BaseModel):
    id: str
    food_item_id: str
    logged_date: str = Field(..., description="YYYY-MM-DD")
    meal_type: MealType
    quantity: float = Field(..., ge=0)
    totals: LogTotals
    food: Optional[FoodItem] = None
    created_at: str
    updated_at: str


class FoodLogListResponse(BaseModel):
    count: int
    logs: List[FoodLogEntry]


class GoalProgress(BaseModel):
    consumed: float
    goal: float
    percent: float = Field(..., ge=0, le=100)
    remaining: float


class DailyLogResponse(BaseModel):
    date: str
    meals: Dict[str, List[FoodLogEntry]]
    totals: LogTotals
    progress: Dict[str, GoalProgress]
