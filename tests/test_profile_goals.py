# -*- coding: utf-8 -*-

from __future__ import annotations

import unittest

from nutritracker.profile.goals import basal_metabolic_rate, calculate_nutrition_goals
from nutritracker.profile.models import ActivityLevel, Gender


class TestNutritionGoals(unittest.TestCase):
    def test_bmr_male_and_female(self) -> None:
        male = basal_metabolic_rate(age=30, gender=Gender.male, height_cm=180, weight_kg=80)
        female = basal_metabolic_rate(age=30, gender=Gender.female, height_cm=180, weight_kg=80)
        self.assertAlmostEqual(male, 1780.0)
        self.assertAlmostEqual(female, 1614.0)

    def test_other_gender_uses_female_offset(self) -> None:
        other = basal_metabolic_rate(age=30, gender=Gender.other, height_cm=180, weight_kg=80)
        self.assertAlmostEqual(other, 1614.0)

    def test_goals_for_moderately_active_male(self) -> None:
        goals = calculate_nutrition_goals(
            age=30,
            gender=Gender.male,
            height_cm=180,
            weight_kg=80,
            activity_level=ActivityLevel.moderately_active,
        )
        self.assertEqual(goals.daily_calories, 2759)
        self.assertEqual(goals.daily_protein_g, 172)
        self.assertEqual(goals.daily_carbs_g, 310)
        self.assertEqual(goals.daily_fat_g, 92)
        self.assertEqual(goals.daily_fiber_g, 39)
        self.assertEqual(goals.daily_sugar_g, 69)
        self.assertEqual(goals.daily_sodium_mg, 2300)

    def test_goals_accept_plain_strings(self) -> None:
        goals = calculate_nutrition_goals(
            age=25,
            gender="female",
            height_cm=165,
            weight_kg=60,
            activity_level="sedentary",
        )
        # (600 + 1031.25 - 125 - 161) * 1.2 = 1614.3
        self.assertEqual(goals.daily_calories, 1614)

    def test_activity_level_scales_calories(self) -> None:
        common = dict(age=40, gender=Gender.male, height_cm=175, weight_kg=75)
        sedentary = calculate_nutrition_goals(activity_level=ActivityLevel.sedentary, **common)
        extra = calculate_nutrition_goals(activity_level=ActivityLevel.extra_active, **common)
        self.assertLess(sedentary.daily_calories, extra.daily_calories)


if __name__ == "__main__":
    unittest.main()
