# -*- coding: utf-8 -*-
"""Profile — daily nutrition goals from biometrics.

BMR uses the Mifflin-St Jeor equation; total daily energy expenditure is the
BMR scaled by an activity multiplier. Macro targets split calories 25/45/30
between protein, carbohydrates and fat.
"""

from __future__ import annotations

from typing import Dict

from ..analytics.aggregation import round_half_up
from .models import ActivityLevel, Gender, NutritionGoals

ACTIVITY_MULTIPLIERS: Dict[ActivityLevel, float] = {
    ActivityLevel.sedentary: 1.2,
    ActivityLevel.lightly_active: 1.375,
    ActivityLevel.moderately_active: 1.55,
    ActivityLevel.very_active: 1.725,
    ActivityLevel.extra_active: 1.9,
}

PROTEIN_SHARE = 0.25
CARBS_SHARE = 0.45
FAT_SHARE = 0.30
SUGAR_SHARE = 0.10
FIBER_G_PER_1000_KCAL = 14
SODIUM_MG = 2300

KCAL_PER_G_PROTEIN = 4
KCAL_PER_G_CARBS = 4
KCAL_PER_G_FAT = 9


def basal_metabolic_rate(*, age: int, gender: Gender, height_cm: float, weight_kg: float) -> float:
    bmr = 10 * weight_kg + 6.25 * height_cm - 5 * age
    if Gender(gender) == Gender.male:
        return bmr + 5
    return bmr - 161


def calculate_nutrition_goals(
    *,
    age: int,
    gender: Gender,
    height_cm: float,
    weight_kg: float,
    activity_level: ActivityLevel,
) -> NutritionGoals:
    bmr = basal_metabolic_rate(age=age, gender=gender, height_cm=height_cm, weight_kg=weight_kg)
    tdee = bmr * ACTIVITY_MULTIPLIERS[ActivityLevel(activity_level)]
    calories = round_half_up(tdee)
    return NutritionGoals(
        daily_calories=max(calories, 0),
        daily_protein_g=max(round_half_up(calories * PROTEIN_SHARE / KCAL_PER_G_PROTEIN), 0),
        daily_carbs_g=max(round_half_up(calories * CARBS_SHARE / KCAL_PER_G_CARBS), 0),
        daily_fat_g=max(round_half_up(calories * FAT_SHARE / KCAL_PER_G_FAT), 0),
        daily_fiber_g=max(round_half_up(calories / 1000 * FIBER_G_PER_1000_KCAL), 0),
        daily_sugar_g=max(round_half_up(calories * SUGAR_SHARE / KCAL_PER_G_CARBS), 0),
        daily_sodium_mg=SODIUM_MG,
    )
