# -*- coding: utf-8 -*-
"""Foods — API endpoints."""

from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, HTTPException, Path, Query

from ..auth.security import get_current_user
from .http import FoodLookupError
from .models import BarcodeLookupResponse, FoodCreateRequest, FoodItem, FoodSearchResponse, SearchSource
from .search import lookup_barcode, search_foods
from .storage import create_food, find_by_barcode, get_food, list_foods
from .usda import get_usda_food

router = APIRouter(prefix="/api/foods", tags=["Foods"])


@router.get("/search", response_model=FoodSearchResponse, summary="Search the catalog and USDA")
def search(
    q: str = Query(default="", max_length=200, description="Food name, brand, category or barcode"),
    source: SearchSource = Query(default=SearchSource.all),
    user: dict = Depends(get_current_user),  # noqa: ARG001
):
    foods, warnings = search_foods(q, source)
    return FoodSearchResponse(query=q, source=source, count=len(foods), foods=foods, warnings=warnings)


@router.get("/barcode/{barcode}", response_model=BarcodeLookupResponse, summary="Look up a scanned barcode")
def barcode_lookup(
    barcode: str = Path(..., pattern=r"^\d{6,14}$"),
    user: dict = Depends(get_current_user),  # noqa: ARG001
):
    return lookup_barcode(barcode)


@router.get("/usda/{fdc_id}", response_model=FoodItem, summary="Fetch a single USDA food")
def usda_food(fdc_id: int, user: dict = Depends(get_current_user)):  # noqa: ARG001
    try:
        food = get_usda_food(fdc_id)
    except FoodLookupError as exc:
        raise HTTPException(status_code=502, detail=f"USDA lookup failed: {exc}") from exc
    if not food:
        raise HTTPException(status_code=404, detail="USDA food not found")
    return food


@router.get("", response_model=List[FoodItem], summary="List catalog foods")
def list_catalog(
    limit: int = Query(default=100, ge=1, le=1000),
    user: dict = Depends(get_current_user),  # noqa: ARG001
):
    return list_foods(limit=limit)


@router.post("", response_model=FoodItem, summary="Add a food to the catalog")
def create(request: FoodCreateRequest, user: dict = Depends(get_current_user)):  # noqa: ARG001
    if request.barcode and find_by_barcode(request.barcode):
        raise HTTPException(status_code=409, detail="A food with this barcode already exists")
    return create_food(request.model_dump(), source="local")


@router.get("/{food_id}", response_model=FoodItem, summary="Get a catalog food")
def get_one(food_id: str, user: dict = Depends(get_current_user)):  # noqa: ARG001
    food = get_food(food_id)
    if not food:
        raise HTTPException(status_code=404, detail="Food not found")
    return food
