# -*- coding: utf-8 -*-

from __future__ import annotations

import os
import shutil
import sys
import tempfile
import unittest
from pathlib import Path

import httpx

USDA_BASE = "https://usda.test/fdc/v1"
OFF_BASE = "https://off.test"


def _usda_food(fdc_id: int, description: str, *, gtin: str | None = None, kcal: float = 52.0) -> dict:
    return {
        "fdcId": fdc_id,
        "description": description,
        "brandOwner": "Orchard Co",
        "foodCategory": "Fruits",
        "servingSize": 150.0,
        "servingSizeUnit": "g",
        "gtinUpc": gtin,
        "foodNutrients": [
            {"nutrientId": 1008, "value": kcal},
            {"nutrientId": 1003, "value": 0.3},
            {"nutrientId": 1005, "value": 13.8},
            {"nutrientId": 1004, "value": 0.2},
            {"nutrientId": 1079, "value": 2.4},
            {"nutrientId": 2000, "value": 10.4},
            {"nutrientId": 1093, "value": 1.0},
        ],
    }


OFF_PRODUCT = {
    "status": 1,
    "product": {
        "product_name": "Chocolate Spread",
        "brands": "Nutty, Other Brand",
        "categories": "Spreads, Sweet spreads",
        "nutriments": {
            "energy-kcal_100g": 539,
            "proteins_100g": 6.3,
            "carbohydrates_100g": 57.5,
            "fat_100g": 30.9,
            "sugars_100g": 56.3,
            "sodium_100g": 0.041,
        },
    },
}


class _FoodLookupCase(unittest.TestCase):
    @classmethod
    def setUpClass(cls) -> None:
        cls._tmp = Path(tempfile.mkdtemp(prefix="nutritracker-test-"))
        data_root = cls._tmp / "data"
        os.environ["NUTRI_DATA_ROOT"] = str(data_root)
        os.environ["NUTRI_DB_PATH"] = str(data_root / "nutritracker.db")
        os.environ["USDA_BASE_URL"] = USDA_BASE
        os.environ["USDA_API_KEY"] = "test-key"
        os.environ["OFF_BASE_URL"] = OFF_BASE
        os.environ["FOOD_CACHE_MAX_ENTRIES"] = "5"
        os.environ["FOOD_CACHE_KEEP_ENTRIES"] = "3"

        for name in list(sys.modules.keys()):
            if name.startswith("nutritracker"):
                sys.modules.pop(name, None)

        from nutritracker.app_db import init_app_db  # noqa: WPS433
        from nutritracker.config import settings  # noqa: WPS433

        init_app_db(settings.db_path)

    @classmethod
    def tearDownClass(cls) -> None:
        for key in ("FOOD_CACHE_MAX_ENTRIES", "FOOD_CACHE_KEEP_ENTRIES"):
            os.environ.pop(key, None)
        shutil.rmtree(cls._tmp, ignore_errors=True)

    def setUp(self) -> None:
        from nutritracker.app_db import db_conn  # noqa: WPS433
        from nutritracker.config import settings  # noqa: WPS433

        with db_conn(settings.db_path) as conn:
            conn.execute("DELETE FROM food_search_cache")
            conn.execute("DELETE FROM food_items")
        self.requests: list[httpx.Request] = []

    def _transport(self, handler) -> httpx.MockTransport:
        def record(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            return handler(request)

        return httpx.MockTransport(record)


class TestUsdaClient(_FoodLookupCase):
    def test_search_normalizes_nutrients(self) -> None:
        from nutritracker.foods.usda import search_usda_foods

        transport = self._transport(lambda req: httpx.Response(200, json={"foods": [_usda_food(1750340, "Apple, raw")]}))
        foods = search_usda_foods("apple", transport=transport)

        self.assertEqual(len(foods), 1)
        food = foods[0]
        self.assertEqual(food.id, "usda-1750340")
        self.assertEqual(food.source.value, "usda")
        self.assertEqual(food.calories, 52.0)
        self.assertEqual(food.carbs_g, 13.8)
        self.assertEqual(food.sugar_g, 10.4)
        self.assertEqual(food.sodium_mg, 1.0)
        self.assertEqual(food.serving_size, "150 g")

        params = self.requests[0].url.params
        self.assertEqual(params["query"], "apple")
        self.assertEqual(params["api_key"], "test-key")
        self.assertTrue(str(self.requests[0].url).startswith(f"{USDA_BASE}/foods/search"))

    def test_barcode_requires_exact_gtin(self) -> None:
        from nutritracker.foods.usda import search_usda_by_barcode

        payload = {
            "foods": [
                _usda_food(1, "Near miss", gtin="0001234567890"),
                _usda_food(2, "Exact", gtin="001234567890"),
            ]
        }
        transport = self._transport(lambda req: httpx.Response(200, json=payload))
        foods = search_usda_by_barcode("001234567890", transport=transport)
        self.assertEqual([f.name for f in foods], ["Exact"])
        self.assertEqual(self.requests[0].url.params["dataType"], "Branded")

    def test_unusable_records_are_skipped(self) -> None:
        from nutritracker.foods.usda import search_usda_foods

        bad_barcode = dict(_usda_food(2, "Odd"), gtinUpc=12345678)
        blank = dict(_usda_food(3, "   "), foodNutrients="none", brandOwner=" ")
        payload = {"foods": [_usda_food(1, "Apple"), bad_barcode, blank]}
        foods = search_usda_foods("apple", transport=self._transport(lambda req: httpx.Response(200, json=payload)))

        self.assertEqual([f.id for f in foods], ["usda-1", "usda-3"])
        self.assertEqual(foods[1].name, "Unknown food")
        self.assertIsNone(foods[1].brand)
        self.assertEqual(foods[1].calories, 0.0)

    def test_server_error_raises_lookup_error(self) -> None:
        from nutritracker.foods.http import FoodLookupError
        from nutritracker.foods.usda import search_usda_foods

        transport = self._transport(lambda req: httpx.Response(503, text="busy"))
        with self.assertRaises(FoodLookupError):
            search_usda_foods("apple", transport=transport)

    def test_single_food_flattens_nested_nutrients(self) -> None:
        from nutritracker.foods.usda import get_usda_food

        detail = {
            "fdcId": 42,
            "description": "Banana",
            "foodNutrients": [
                {"nutrient": {"id": 1008}, "amount": 89},
                {"nutrient": {"id": 1003}, "amount": 1.1},
            ],
        }
        transport = self._transport(lambda req: httpx.Response(200, json=detail))
        food = get_usda_food(42, transport=transport)
        assert food is not None
        self.assertEqual(food.calories, 89.0)
        self.assertEqual(food.protein_g, 1.1)

        missing = get_usda_food(43, transport=self._transport(lambda req: httpx.Response(404)))
        self.assertIsNone(missing)


class TestOpenFoodFactsClient(_FoodLookupCase):
    def test_found_product(self) -> None:
        from nutritracker.foods.openfoodfacts import lookup_off_barcode

        transport = self._transport(lambda req: httpx.Response(200, json=OFF_PRODUCT))
        food = lookup_off_barcode("3017620422003", transport=transport)
        assert food is not None
        self.assertEqual(food.id, "off-3017620422003")
        self.assertEqual(food.name, "Chocolate Spread")
        self.assertEqual(food.brand, "Nutty")
        self.assertEqual(food.category, "Spreads")
        self.assertEqual(food.serving_size, "100g")
        self.assertEqual(food.calories, 539.0)
        self.assertEqual(food.sodium_mg, 41.0)
        self.assertEqual(food.fiber_g, 0.0)
        self.assertEqual(self.requests[0].url.path, "/api/v0/product/3017620422003.json")

    def test_unknown_product(self) -> None:
        from nutritracker.foods.openfoodfacts import lookup_off_barcode

        transport = self._transport(lambda req: httpx.Response(200, json={"status": 0}))
        self.assertIsNone(lookup_off_barcode("12345678", transport=transport))

    def test_energy_falls_back_to_kilojoules(self) -> None:
        from nutritracker.foods.openfoodfacts import normalize_off_product

        food = normalize_off_product("12345678", {"nutriments": {"energy_100g": 418.4}})
        self.assertEqual(food.calories, 100.0)
        self.assertEqual(food.name, "Product 12345678")

    def test_blank_names_fall_back(self) -> None:
        from nutritracker.foods.openfoodfacts import normalize_off_product

        product = {"product_name": "   ", "product_name_en": "", "generic_name": " Oat Drink ", "nutriments": {"fat_100g": 1.5}}
        self.assertEqual(normalize_off_product("12345678", product).name, "Oat Drink")
        product["generic_name"] = None
        self.assertEqual(normalize_off_product("12345678", product).name, "Product 12345678")

    def test_record_without_nutriments_is_a_lookup_error(self) -> None:
        from nutritracker.foods.http import FoodLookupError
        from nutritracker.foods.openfoodfacts import lookup_off_barcode

        for nutriments in ({}, None, "n/a", [1, 2]):
            payload = {"status": 1, "product": {"product_name": "Water", "nutriments": nutriments}}
            transport = self._transport(lambda req, body=payload: httpx.Response(200, json=body))
            with self.assertRaises(FoodLookupError):
                lookup_off_barcode("12345678", transport=transport)


class TestFoodSearch(_FoodLookupCase):
    def test_local_before_external_and_exact_first(self) -> None:
        from nutritracker.foods.models import SearchSource
        from nutritracker.foods.search import search_foods
        from nutritracker.foods.storage import create_food

        create_food({"name": "Apple Pie", "calories": 237})
        create_food({"name": "apple", "calories": 52})
        usda = {"foods": [_usda_food(1, "Apple juice"), _usda_food(2, "Apple")]}
        transport = self._transport(lambda req: httpx.Response(200, json=usda))

        foods, warnings = search_foods("Apple", SearchSource.all, transport=transport)

        self.assertEqual(warnings, [])
        self.assertEqual([(f.name, f.source.value) for f in foods[:2]], [("apple", "local"), ("Apple", "usda")])
        self.assertEqual(foods[2].name, "Apple Pie")
        self.assertEqual(foods[3].name, "Apple juice")

    def test_results_are_cached(self) -> None:
        from nutritracker.foods.models import SearchSource
        from nutritracker.foods.search import search_foods

        ok = self._transport(lambda req: httpx.Response(200, json={"foods": [_usda_food(7, "Banana")]}))
        first, _ = search_foods("banana", SearchSource.usda, transport=ok)
        self.assertEqual(len(self.requests), 1)

        def fail(request: httpx.Request) -> httpx.Response:
            raise AssertionError("cached query must not hit the network")

        second, warnings = search_foods("  BANANA ", SearchSource.usda, transport=httpx.MockTransport(fail))
        self.assertEqual([f.id for f in second], [f.id for f in first])
        self.assertEqual(warnings, [])

    def test_short_query_stays_local(self) -> None:
        from nutritracker.foods.models import SearchSource
        from nutritracker.foods.search import search_foods
        from nutritracker.foods.storage import create_food

        create_food({"name": "Egg", "calories": 78})
        transport = self._transport(lambda req: httpx.Response(500))
        foods, warnings = search_foods("eg", SearchSource.all, transport=transport)
        self.assertEqual([f.name for f in foods], ["Egg"])
        self.assertEqual(self.requests, [])
        self.assertEqual(warnings, [])

    def test_local_search_matches_brand_category_and_barcode(self) -> None:
        from nutritracker.foods.storage import create_food, search_local_foods

        create_food({"name": "Crunchy Bites", "brand": "Oatly", "calories": 120})
        create_food({"name": "Brown Rice", "category": "Grains", "calories": 216})
        create_food({"name": "Protein Bar", "barcode": "40084107", "calories": 200})
        create_food({"name": "100% Juice", "calories": 110})
        create_food({"name": "1000 Island Dressing", "calories": 60})

        self.assertEqual([f.name for f in search_local_foods("OATLY")], ["Crunchy Bites"])
        self.assertEqual([f.name for f in search_local_foods("grain")], ["Brown Rice"])
        self.assertEqual([f.name for f in search_local_foods("40084107")], ["Protein Bar"])
        # LIKE wildcards in the query match literally.
        self.assertEqual([f.name for f in search_local_foods("100%")], ["100% Juice"])
        self.assertEqual(search_local_foods("_"), [])
        self.assertEqual(len(search_local_foods("r", limit=2)), 2)

    def test_empty_query_browses_catalog(self) -> None:
        from nutritracker.foods.search import search_foods
        from nutritracker.foods.storage import create_food

        for i in range(12):
            create_food({"name": f"Food {i:02d}", "calories": i})
        foods, _ = search_foods("", transport=self._transport(lambda req: httpx.Response(500)))
        self.assertEqual(len(foods), 10)
        self.assertEqual(self.requests, [])

    def test_usda_failure_becomes_warning(self) -> None:
        from nutritracker.foods.models import SearchSource
        from nutritracker.foods.search import search_foods
        from nutritracker.foods.storage import create_food

        create_food({"name": "Oatmeal", "calories": 150})

        def boom(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        foods, warnings = search_foods("oatmeal", SearchSource.all, transport=httpx.MockTransport(boom))
        self.assertEqual([f.name for f in foods], ["Oatmeal"])
        self.assertEqual(len(warnings), 1)
        self.assertIn("USDA search unavailable", warnings[0])


class TestSearchCache(_FoodLookupCase):
    def test_expired_entries_miss(self) -> None:
        from nutritracker.foods.cache import get_cached_foods, set_cached_foods
        from nutritracker.foods.models import FoodItem

        set_cached_foods("kiwi", [FoodItem(id="usda-1", name="Kiwi", source="usda")], now=1000.0)
        self.assertIsNotNone(get_cached_foods("kiwi", now=1000.0 + 3600))
        self.assertIsNone(get_cached_foods("kiwi", now=1000.0 + 24 * 3600))

    def test_empty_results_are_not_cached(self) -> None:
        from nutritracker.foods.cache import cache_size, set_cached_foods

        set_cached_foods("nothing", [], now=1000.0)
        self.assertEqual(cache_size(), 0)

    def test_prunes_to_newest_entries(self) -> None:
        from nutritracker.foods.cache import cache_size, get_cached_foods, set_cached_foods
        from nutritracker.foods.models import FoodItem

        food = [FoodItem(id="usda-1", name="Kiwi", source="usda")]
        for i in range(6):
            set_cached_foods(f"q{i}", food, now=1000.0 + i)
        self.assertEqual(cache_size(), 3)
        self.assertIsNone(get_cached_foods("q0", now=1010.0))
        self.assertIsNotNone(get_cached_foods("q5", now=1010.0))


class TestBarcodeLookup(_FoodLookupCase):
    def _router(self, *, off=None, usda=None):
        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.host == "off.test":
                return off(request) if off else httpx.Response(200, json={"status": 0})
            return usda(request) if usda else httpx.Response(200, json={"foods": []})

        return self._transport(handler)

    def test_catalog_hit_skips_network(self) -> None:
        from nutritracker.foods.search import lookup_barcode
        from nutritracker.foods.storage import create_food

        create_food({"name": "House Granola", "calories": 200, "barcode": "12345678"})
        result = lookup_barcode("12345678", transport=self._router())
        self.assertTrue(result.found)
        self.assertEqual(result.source.value, "local")
        self.assertEqual(result.food.name, "House Granola")
        self.assertEqual(self.requests, [])

    def test_open_food_facts_before_usda(self) -> None:
        from nutritracker.foods.search import lookup_barcode

        result = lookup_barcode(
            "3017620422003",
            transport=self._router(off=lambda req: httpx.Response(200, json=OFF_PRODUCT)),
        )
        self.assertTrue(result.found)
        self.assertEqual(result.source.value, "openfoodfacts")
        self.assertEqual(len(self.requests), 1)

    def test_falls_back_to_usda(self) -> None:
        from nutritracker.foods.search import lookup_barcode

        usda = {"foods": [_usda_food(9, "Branded Apple Sauce", gtin="041498123456")]}
        result = lookup_barcode(
            "041498123456",
            transport=self._router(usda=lambda req: httpx.Response(200, json=usda)),
        )
        self.assertTrue(result.found)
        self.assertEqual(result.source.value, "usda")
        self.assertEqual(result.food.name, "Branded Apple Sauce")

    def test_off_outage_is_reported_but_usda_still_tried(self) -> None:
        from nutritracker.foods.search import lookup_barcode

        usda = {"foods": [_usda_food(9, "Branded Apple Sauce", gtin="041498123456")]}
        result = lookup_barcode(
            "041498123456",
            transport=self._router(
                off=lambda req: httpx.Response(502, text="bad gateway"),
                usda=lambda req: httpx.Response(200, json=usda),
            ),
        )
        self.assertTrue(result.found)
        self.assertEqual(result.source.value, "usda")
        self.assertEqual(len(result.warnings), 1)
        self.assertIn("Open Food Facts unavailable", result.warnings[0])

    def test_empty_open_food_facts_record_falls_through_to_usda(self) -> None:
        from nutritracker.foods.search import lookup_barcode

        blank = {"status": 1, "product": {"product_name": "  ", "nutriments": {}}}
        usda = {"foods": [_usda_food(9, "Branded Apple Sauce", gtin="12345678")]}
        result = lookup_barcode(
            "12345678",
            transport=self._router(
                off=lambda req: httpx.Response(200, json=blank),
                usda=lambda req: httpx.Response(200, json=usda),
            ),
        )
        self.assertTrue(result.found)
        self.assertEqual(result.source.value, "usda")
        self.assertEqual(result.food.name, "Branded Apple Sauce")
        self.assertEqual(len(result.warnings), 1)
        self.assertIn("Open Food Facts unavailable", result.warnings[0])

    def test_malformed_nutriments_fall_through_to_usda(self) -> None:
        from nutritracker.foods.search import lookup_barcode

        broken = {"status": 1, "product": {"product_name": "Mystery", "nutriments": "n/a"}}
        usda = {"foods": [_usda_food(9, "Branded Apple Sauce", gtin="12345678")]}
        result = lookup_barcode(
            "12345678",
            transport=self._router(
                off=lambda req: httpx.Response(200, json=broken),
                usda=lambda req: httpx.Response(200, json=usda),
            ),
        )
        self.assertEqual(result.source.value, "usda")

    def test_not_found(self) -> None:
        from nutritracker.foods.search import lookup_barcode

        result = lookup_barcode("99999999", transport=self._router())
        self.assertFalse(result.found)
        self.assertIsNone(result.food)
        self.assertEqual(result.warnings, ["No product found for barcode: 99999999"])


if __name__ == "__main__":
    unittest.main()
