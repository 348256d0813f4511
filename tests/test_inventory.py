"""
Tests for inventory usage calculation and sufficiency checks.
"""
import pytest

from merchant_pos.inventory import (
    OutOfStockError,
    calculate_dish_inventory_usage,
    calculate_order_inventory_usage,
    check_inventory_sufficiency,
    estimate_dish_inventory_usage,
    format_inventory_usage_display,
    get_inventory_usage_details,
)


RICE_AND_CUP_DISH = {
    "id": "d1",
    "name": "Rice Bowl",
    "inventory_config": {
        "base_inventory": [{"inventory_id": "rice", "quantity": 1}],
        "conditional_inventory": [
            {
                "inventory_id": "cup",
                "base_quantity": 1,
                "conditions": [
                    {"option_type": "size", "option_value": "large", "multiplier": 2},
                ],
            },
        ],
    },
}


class TestDishUsage:
    """Per-unit usage of a single dish."""

    def test_large_size_doubles_cup(self):
        usage = calculate_dish_inventory_usage(RICE_AND_CUP_DISH, {"size": "large"})
        assert usage == {"rice": 1, "cup": 2}

    def test_unmatched_option_uses_base_quantity(self):
        usage = calculate_dish_inventory_usage(RICE_AND_CUP_DISH, {"size": "small"})
        assert usage == {"rice": 1, "cup": 1}

    def test_no_options_selected(self):
        usage = calculate_dish_inventory_usage(RICE_AND_CUP_DISH, None)
        assert usage == {"rice": 1, "cup": 1}

    @pytest.mark.parametrize("dish", [
        None,
        {},
        {"name": "Plain"},
        {"name": "Plain", "inventory_config": None},
        {"name": "Plain", "inventory_config": {}},
    ])
    def test_missing_config_gives_empty_usage(self, dish):
        assert calculate_dish_inventory_usage(dish, {"size": "large"}) == {}

    def test_matching_conditions_overwrite_in_sequence(self):
        """Each match rewrites the running quantity: (1*2+1)*3+0 = 9."""
        dish = {
            "inventory_config": {
                "conditional_inventory": [
                    {
                        "inventory_id": "syrup",
                        "base_quantity": 1,
                        "conditions": [
                            {"option_type": "size", "option_value": "large",
                             "multiplier": 2, "additional_quantity": 1},
                            {"option_type": "sugar", "option_value": "extra", "multiplier": 3},
                        ],
                    },
                ],
            },
        }
        usage = calculate_dish_inventory_usage(dish, {"size": "large", "sugar": "extra"})
        assert usage == {"syrup": 9}

    def test_malformed_entries_are_skipped(self):
        dish = {
            "inventory_config": {
                "base_inventory": [
                    {"quantity": 5},
                    {"inventory_id": "salt", "quantity": 0},
                    {"inventory_id": "oil", "quantity": "abc"},
                    "garbage",
                    {"inventory_id": "egg", "quantity": 2},
                ],
                "conditional_inventory": [
                    {"inventory_id": "cup", "conditions": []},
                ],
            },
        }
        assert calculate_dish_inventory_usage(dish, {}) == {"egg": 2}

    def test_repeated_inventory_ids_are_summed(self):
        dish = {
            "inventory_config": {
                "base_inventory": [
                    {"inventory_id": 7, "quantity": 2},
                    {"inventory_id": "7", "quantity": 3},
                ],
            },
        }
        assert calculate_dish_inventory_usage(dish, {}) == {"7": 5}

    @pytest.mark.parametrize("condition", [
        {"option_type": "size", "option_value": "large", "multiplier": -3},
        {"option_type": "size", "option_value": "large", "multiplier": 1, "additional_quantity": -5},
        {"option_type": "size", "option_value": "large", "multiplier": 0},
    ])
    def test_non_positive_conditional_quantity_contributes_nothing(self, condition):
        dish = {
            "inventory_config": {
                "base_inventory": [{"inventory_id": "rice", "quantity": 1}],
                "conditional_inventory": [
                    {"inventory_id": "cup", "base_quantity": 1, "conditions": [condition]},
                ],
            },
        }
        usage = calculate_dish_inventory_usage(dish, {"size": "large"})
        assert usage == {"rice": 1}
        assert all(amount >= 0 for amount in usage.values())

    def test_estimate_matches_calculation(self):
        options = {"size": "large"}
        assert estimate_dish_inventory_usage(RICE_AND_CUP_DISH, options) == \
            calculate_dish_inventory_usage(RICE_AND_CUP_DISH, options)


class TestOrderUsage:
    """Usage summed across order lines."""

    def test_lines_are_scaled_and_summed(self):
        items = [
            {"dish": RICE_AND_CUP_DISH, "selected_options": {"size": "large"}, "quantity": 2},
            {"dish": RICE_AND_CUP_DISH, "selected_options": {"size": "small"}, "quantity": 3},
        ]
        usage = calculate_order_inventory_usage(items)
        assert usage == {"rice": 5, "cup": 7}

    def test_quantity_defaults_to_one(self):
        items = [{"dish": RICE_AND_CUP_DISH, "selected_options": {"size": "large"}}]
        assert calculate_order_inventory_usage(items) == {"rice": 1, "cup": 2}

    @pytest.mark.parametrize("quantity", [0, None, -2])
    def test_non_positive_quantity_counts_as_one(self, quantity):
        items = [{"dish": RICE_AND_CUP_DISH, "selected_options": {"size": "large"}, "quantity": quantity}]
        assert calculate_order_inventory_usage(items) == {"rice": 1, "cup": 2}

    def test_order_usage_is_sum_of_line_usage(self):
        noodle_dish = {
            "inventory_config": {
                "base_inventory": [
                    {"inventory_id": "rice", "quantity": 3},
                    {"inventory_id": "egg", "quantity": 1},
                ],
                "conditional_inventory": [
                    {
                        "inventory_id": "cup",
                        "base_quantity": 1,
                        "conditions": [
                            {"option_type": "spicy", "option_value": True, "additional_quantity": 2},
                        ],
                    },
                ],
            },
        }
        items = [
            {"dish": RICE_AND_CUP_DISH, "selected_options": {"size": "large"}, "quantity": 2},
            {"dish": noodle_dish, "selected_options": {"spicy": True}, "quantity": 4},
            {"dish": RICE_AND_CUP_DISH, "selected_options": {}, "quantity": 1},
        ]

        expected = {}
        for item in items:
            line_usage = calculate_dish_inventory_usage(item["dish"], item["selected_options"])
            for inventory_id, amount in line_usage.items():
                expected[inventory_id] = expected.get(inventory_id, 0) + amount * item["quantity"]

        usage = calculate_order_inventory_usage(items)
        assert usage == expected
        assert usage == {"rice": 15, "cup": 17, "egg": 4}

    def test_empty_order(self):
        assert calculate_order_inventory_usage([]) == {}


class TestSufficiency:
    """Sufficiency checks against a stock snapshot."""

    def test_zero_stock_is_short(self):
        result = check_inventory_sufficiency({"rice": 1}, [{"_id": "rice", "name": "Rice", "stock": 0}])
        assert result.is_sufficient is False
        assert len(result.insufficient_items) == 1
        entry = result.insufficient_items[0]
        assert entry.inventory_id == "rice"
        assert entry.required == 1
        assert entry.available == 0
        assert entry.shortfall == 1

    def test_unlimited_stock_never_short(self):
        result = check_inventory_sufficiency({"water": 10_000}, [{"id": "water", "stock": -1}])
        assert result.is_sufficient is True
        assert result.insufficient_items == []

    def test_unknown_inventory_is_reported(self):
        result = check_inventory_sufficiency({"ghost": 3}, [])
        assert result.is_sufficient is False
        entry = result.insufficient_items[0]
        assert entry.name == "unknown"
        assert entry.available == 0
        assert entry.shortfall == 3

    def test_exact_stock_is_sufficient(self):
        result = check_inventory_sufficiency({"1": 5}, [{"id": 1, "name": "cup", "stock": 5}])
        assert result.is_sufficient is True

    def test_to_dict_shape(self):
        result = check_inventory_sufficiency({"1": 8}, [{"id": "1", "name": "cup", "stock": 5}])
        assert result.to_dict() == {
            "is_sufficient": False,
            "insufficient_items": [
                {"inventory_id": "1", "name": "cup", "required": 8, "available": 5, "shortfall": 3},
            ],
        }

    def test_out_of_stock_error_names_items(self):
        result = check_inventory_sufficiency({"1": 8}, [{"id": "1", "name": "cup", "stock": 5}])
        error = OutOfStockError(result.insufficient_items)
        assert error.insufficient_items == result.insufficient_items
        assert "cup" in str(error)


class TestUsageDetails:
    """Detail rows and display formatting."""

    AVAILABLE = [
        {"id": "rice", "name": "Rice", "category": "grain", "unit": "g", "stock": 100},
        {"_id": "water", "name": "Water", "category": "utility", "unit": "ml", "stock": -1},
    ]

    def test_one_row_per_usage_key(self):
        details = get_inventory_usage_details({"rice": 500, "water": 200, "ghost": 1}, self.AVAILABLE)
        by_id = {detail.inventory_id: detail for detail in details}

        assert set(by_id) == {"rice", "water", "ghost"}
        assert by_id["rice"].required == 500
        assert by_id["rice"].available == 100
        assert by_id["rice"].is_unlimited is False
        assert by_id["water"].is_unlimited is True
        assert by_id["ghost"].name == "unknown"

    def test_display_rows_use_names_and_units(self):
        rows = format_inventory_usage_display({"rice": 200, "ghost": 1}, self.AVAILABLE)
        assert rows == [
            {"key": "rice", "display_name": "Rice", "quantity": 200, "unit": "g"},
            {"key": "ghost", "display_name": "unknown", "quantity": 1, "unit": ""},
        ]
