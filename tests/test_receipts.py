"""
Tests for receipt line merging and receipt data generation.
"""
from collections import Counter
from datetime import datetime

import pytest

from merchant_pos.receipts import (
    InvalidOrderError,
    canonical_options_key,
    generate_bill_number,
    generate_receipt_data,
    merge_items,
    normalize_identifier,
    receipt_item_key,
)


def _multiset(rows):
    return Counter(
        (row["dish_id"], canonical_options_key(row["selected_options"]), row["quantity"], row["total_price"])
        for row in rows
    )


class TestIdentifiers:

    @pytest.mark.parametrize("raw, expected", [
        ("abc", "abc"),
        (42, "42"),
        ({"_id": "abc"}, "abc"),
        ({"id": 7, "name": "Tea"}, "7"),
        (None, None),
        ("", None),
        ({}, None),
    ])
    def test_normalize_identifier(self, raw, expected):
        assert normalize_identifier(raw) == expected

    def test_option_order_does_not_change_key(self):
        first = {"dish_id": "d1", "selected_options": {"size": "large", "sugar": "half"}}
        second = {"dish_id": "d1", "selected_options": {"sugar": "half", "size": "large"}}
        assert receipt_item_key(first) == receipt_item_key(second)

    def test_option_mapping_values_render_by_label(self):
        assert canonical_options_key({"size": {"label": "Large", "price": 1}}) == "size:Large"
        assert canonical_options_key({"size": {"name": "L"}}) == "size:L"
        assert canonical_options_key({"size": {"value": "l"}}) == "size:l"

    def test_embedded_dish_document_matches_plain_id(self):
        embedded = {"dish_id": {"_id": "d1", "name": "Tea"}, "selected_options": {}}
        plain = {"dish_id": "d1", "selected_options": {}}
        assert receipt_item_key(embedded) == receipt_item_key(plain)


class TestMergeItems:

    def test_same_dish_and_options_merge(self):
        items = [
            {"dish_id": "d1", "name": "Tea", "selected_options": {"size": "large"}, "quantity": 1, "price": 50},
            {"dish_id": "d1", "name": "Tea", "selected_options": {"size": "large"}, "quantity": 2, "price": 50},
        ]
        merged = merge_items(items)
        assert len(merged) == 1
        assert merged[0]["quantity"] == 3
        assert merged[0]["total_price"] == 150

    def test_merged_row_uses_first_seen_price(self):
        items = [
            {"dish_id": "d1", "selected_options": {}, "quantity": 1, "price": 40},
            {"dish_id": "d1", "selected_options": {}, "quantity": 2, "price": 55},
        ]
        merged = merge_items(items)
        assert merged[0]["quantity"] == 3
        assert merged[0]["total_price"] == 120

    def test_swapped_order_sums_quantity(self):
        first = {"dish_id": "d1", "selected_options": {"size": "large"}, "quantity": 1, "price": 40}
        second = {"dish_id": "d1", "selected_options": {"size": "large"}, "quantity": 4, "price": 60}

        forward = merge_items([first, second])
        backward = merge_items([second, first])

        assert forward[0]["quantity"] == backward[0]["quantity"] == 5
        assert forward[0]["total_price"] == 200
        assert backward[0]["total_price"] == 300

    def test_different_options_stay_separate(self):
        items = [
            {"dish_id": "d1", "selected_options": {"size": "large"}, "quantity": 1, "price": 5},
            {"dish_id": "d1", "selected_options": {"size": "small"}, "quantity": 1, "price": 5},
            {"dish_id": "d2", "selected_options": {"size": "large"}, "quantity": 1, "price": 5},
        ]
        merged = merge_items(items)
        assert [row["dish_id"] for row in merged] == ["d1", "d1", "d2"]

    def test_merging_merged_rows_changes_nothing(self):
        items = [
            {"dish_id": "d1", "selected_options": {"size": "large"}, "quantity": 1, "price": 5},
            {"dish_id": "d1", "selected_options": {"size": "large"}, "quantity": 2, "price": 5},
            {"dish_id": "d2", "selected_options": {}, "quantity": 1, "price": 8},
        ]
        once = merge_items(items)
        twice = merge_items(once)
        assert _multiset(once) == _multiset(twice)

    def test_missing_quantity_counts_as_one(self):
        merged = merge_items([{"dish_id": "d1", "selected_options": {}, "price": 7}])
        assert merged[0]["quantity"] == 1
        assert merged[0]["total_price"] == 7

    def test_unit_price_used_when_price_missing(self):
        merged = merge_items([{"dish_id": 3, "selected_options": {}, "quantity": 2, "unit_price": 4.5}])
        assert merged[0]["dish_id"] == "3"
        assert merged[0]["total_price"] == 9.0

    def test_input_items_are_not_modified(self):
        item = {"dish_id": "d1", "selected_options": {"size": "large"}, "quantity": 1, "price": 5}
        merge_items([item, dict(item)])
        assert item["quantity"] == 1

    def test_none_raises(self):
        with pytest.raises(InvalidOrderError):
            merge_items(None)


class TestGenerateReceiptData:

    def test_order_without_items_raises(self):
        with pytest.raises(InvalidOrderError):
            generate_receipt_data({"_id": "o1"}, "e1", "A1")

    def test_missing_order_raises(self):
        with pytest.raises(InvalidOrderError):
            generate_receipt_data(None, "e1", "A1")

    def test_invalid_order_error_is_value_error(self):
        with pytest.raises(ValueError):
            generate_receipt_data({}, "e1", "A1")

    def test_two_identical_lines_become_one(self):
        order = {
            "_id": "o1",
            "order_number": "20240101-ABCD1234",
            "items": [
                {"dish_id": "d1", "name": "Tea", "selected_options": {"size": "large"}, "quantity": 1, "price": 50},
                {"dish_id": "d1", "name": "Tea", "selected_options": {"size": "large"}, "quantity": 2, "price": 50},
            ],
        }
        data = generate_receipt_data(
            order, "e1", "A1", store_name="Corner Cafe",
            checkout_time=datetime(2024, 1, 2, 9, 5),
        )

        assert len(data["items"]) == 1
        line = data["items"][0]
        assert line["quantity"] == 3
        assert line["unit_price"] == 50
        assert line["total_price"] == 150
        assert data["subtotal"] == 150
        assert data["total"] == 150
        assert data["order_id"] == "o1"
        assert data["order_number"] == "20240101-ABCD1234"
        assert data["table_number"] == "A1"
        assert data["employee_id"] == "e1"
        assert data["store_name"] == "Corner Cafe"
        assert data["checkout_time"] == "2024/01/02 09:05"

    @pytest.mark.parametrize("order, expected", [
        ({"id": 0, "items": []}, "0"),
        ({"_id": 0, "id": 5, "items": []}, "0"),
        ({"_id": None, "id": 5, "items": []}, "5"),
    ])
    def test_falsy_order_id_is_kept(self, order, expected):
        assert generate_receipt_data(order, "e1", "A1")["order_id"] == expected

    def test_existing_bill_number_is_kept(self):
        data = generate_receipt_data({"items": []}, "e1", "A1", existing_bill_number="1234567890")
        assert data["bill_number"] == "1234567890"
        assert data["items"] == []
        assert data["subtotal"] == 0

    def test_store_name_defaults_from_config(self, monkeypatch):
        monkeypatch.setattr("merchant_pos.config.DEFAULT_STORE_NAME", "Test Bistro")
        data = generate_receipt_data({"items": []}, "e1", None)
        assert data["store_name"] == "Test Bistro"


class TestBillNumber:

    def test_ten_digit_string(self):
        for _ in range(50):
            bill_number = generate_bill_number()
            assert len(bill_number) == 10
            assert bill_number.isdigit()
            assert 1_000_000_000 <= int(bill_number) <= 9_999_999_999
