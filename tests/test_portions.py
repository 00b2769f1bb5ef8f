# -*- coding: utf-8 -*-

from __future__ import annotations

import unittest

from fastapi import HTTPException

from nutritracker.food_log.models import FoodLogEntry, MeasurementType
from nutritracker.food_log.portions import compute_log_totals, parse_serving_size, resolve_quantity
from nutritracker.food_log.storage import sum_totals
from nutritracker.foods.models import FoodItem


def _food(**overrides) -> FoodItem:
    base = dict(
        id="f1",
        name="Greek Yogurt",
        serving_size="1 cup (227 g)",
        calories=130,
        protein_g=23,
        carbs_g=9,
        fat_g=0.7,
        sodium_mg=82,
    )
    base.update(overrides)
    return FoodItem(**base)


class TestServingSize(unittest.TestCase):
    def test_grams_in_label(self) -> None:
        self.assertEqual(parse_serving_size("1 cup (227 g)"), 227.0)
        self.assertEqual(parse_serving_size("100g"), 100.0)
        self.assertEqual(parse_serving_size("2.5 G"), 2.5)

    def test_defaults_to_100(self) -> None:
        self.assertEqual(parse_serving_size("2 slices"), 100.0)
        self.assertEqual(parse_serving_size(""), 100.0)
        self.assertEqual(parse_serving_size(None), 100.0)
        self.assertEqual(parse_serving_size("0 g"), 100.0)


class TestResolveQuantity(unittest.TestCase):
    def test_servings_pass_through(self) -> None:
        q = resolve_quantity(MeasurementType.servings, quantity=1.5, grams=None, serving_size="100g")
        self.assertEqual(q, 1.5)

    def test_grams_convert_to_servings(self) -> None:
        q = resolve_quantity(MeasurementType.grams, quantity=None, grams=150, serving_size="100g")
        self.assertAlmostEqual(q, 1.5)
        q = resolve_quantity("grams", quantity=None, grams=227, serving_size="1 cup (227 g)")
        self.assertAlmostEqual(q, 1.0)

    def test_missing_amount_is_rejected(self) -> None:
        with self.assertRaises(HTTPException) as ctx:
            resolve_quantity(MeasurementType.grams, quantity=1, grams=None, serving_size="100g")
        self.assertEqual(ctx.exception.status_code, 400)
        with self.assertRaises(HTTPException):
            resolve_quantity(MeasurementType.servings, quantity=0, grams=None, serving_size="100g")


class TestLogTotals(unittest.TestCase):
    def test_totals_scale_with_quantity(self) -> None:
        totals = compute_log_totals(_food(), 2)
        self.assertEqual(totals.calories, 260.0)
        self.assertEqual(totals.protein_g, 46.0)
        self.assertAlmostEqual(totals.fat_g, 1.4)
        self.assertEqual(totals.fiber_g, 0.0)
        self.assertEqual(totals.sodium_mg, 164.0)

    def test_totals_are_not_rounded_per_log(self) -> None:
        totals = compute_log_totals(_food(calories=133), 1 / 3)
        self.assertAlmostEqual(totals.calories, 133 / 3)
        # Three thirds add back up to the full serving.
        self.assertAlmostEqual(totals.calories * 3, 133.0)

    def test_daily_sum_rounds_once(self) -> None:
        third = compute_log_totals(_food(calories=100.1), 1 / 3)
        entries = [
            FoodLogEntry(
                id=str(i),
                food_item_id="f1",
                logged_date="2024-03-01",
                meal_type="snack",
                quantity=1 / 3,
                totals=third,
                created_at="2024-03-01T00:00:00Z",
                updated_at="2024-03-01T00:00:00Z",
            )
            for i in range(3)
        ]
        # Rounding each log to 33.4 would sum to 100.2.
        self.assertEqual(sum_totals(entries).calories, 100.1)


if __name__ == "__main__":
    unittest.main()
