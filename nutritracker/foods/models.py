# -*- coding: utf-8 -*-
"""Foods — Pydantic models."""

from __future__ import annotations

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field


class FoodSourceType(str, Enum):
    local = "local"
    usda = "usda"
    openfoodfacts = "openfoodfacts"


class SearchSource(str, Enum):
    all = "all"
    local = "local"
    usda = "usda"


class FoodItem(BaseModel):
    """A food with per-serving nutrition facts."""

    id: str
    name: str = Field(..., min_length=1)
    brand: Optional[str] = None
    category: Optional[str] = None
    serving_size: str = Field("100g", description="Human-readable serving, e.g. '1 cup (240 ml)'")
    calories: float = Field(0.0, ge=0)
    protein_g: float = Field(0.0, ge=0)
    carbs_g: float = Field(0.0, ge=0)
    fat_g: float = Field(0.0, ge=0)
    fiber_g: float = Field(0.0, ge=0)
    sugar_g: float = Field(0.0, ge=0)
    sodium_mg: float = Field(0.0, ge=0)
    barcode: Optional[str] = None
    source: FoodSourceType = FoodSourceType.local


class FoodCreateRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    brand: Optional[str] = Field(None, max_length=200)
    category: Optional[str] = Field(None, max_length=120)
    serving_size: str = Field("100g", min_length=1, max_length=120)
    calories: float = Field(..., ge=0)
    protein_g: float = Field(0.0, ge=0)
    carbs_g: float = Field(0.0, ge=0)
    fat_g: float = Field(0.0, ge=0)
    fiber_g: float = Field(0.0, ge=0)
    sugar_g: float = Field(0.0, ge=0)
    sodium_mg: float = Field(0.0, ge=0)
    barcode: Optional[str] = Field(None, pattern=r"^\d{6,14}$")


class FoodSearchResponse(BaseModel):
    query: str
    source: SearchSource
    count: int
    foods: List[FoodItem]
    warnings: List[str] = Field(default_factory=list)


class BarcodeLookupResponse(BaseModel):
    barcode: str
    found: bool
    source: Optional[FoodSourceType] = None
    food: Optional[FoodItem] = None
    candidates: List[FoodItem] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)
