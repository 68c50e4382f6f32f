"""Tests for normalising the heterogeneous orders.items column."""

import json

import pytest

from backoffice.services.order_items import Decoded, NotMatched, decode_items, parse_order_items


def _plain(items):
    return [(i.name, i.quantity, i.price) for i in items]


def test_list_of_line_items():
    items = parse_order_items([{"name": "Pizza", "price": "12.99", "quantity": 2}])
    assert _plain(items) == [("Pizza", 2, "12.99")]


def test_trailing_token_after_x_is_quantity():
    items = parse_order_items({"Garlic Bread": "3 slices x 1"})
    assert _plain(items) == [("Garlic Bread", 1, "")]


def test_original_wins_over_formatted():
    raw = {
        "formatted": {"Pizza": 5},
        "original": [{"name": "Pizza", "price": "12.99", "quantity": 2}],
    }
    assert decode_items(raw).shape == "original"
    assert _plain(parse_order_items(raw)) == [("Pizza", 2, "12.99")]


def test_formatted_map_defaults_non_numeric_to_one():
    items = parse_order_items({"formatted": {"Soup": "2", "Salad": "lots", "Tea": 3}})
    assert _plain(items) == [("Soup", 2, ""), ("Salad", 1, ""), ("Tea", 3, "")]


def test_list_entries_default_quantity_and_price():
    items = parse_order_items([{"name": "Chips"}, {"name": "Cola", "quantity": "0"}, "Bread"])
    assert _plain(items) == [("Chips", 1, ""), ("Cola", 1, ""), ("Bread", 1, "")]


@pytest.mark.parametrize(
    "value, expected",
    [
        (2, ("Wings", 2, "")),
        ("4", ("Wings", 4, "")),
        ("2 large", ("Wings (2 large)", 2, "")),
        ("extra spicy", ("Wings (extra spicy)", 1, "")),
    ],
)
def test_name_map_values(value, expected):
    assert _plain(parse_order_items({"Wings": value})) == [expected]


def test_name_map_skips_private_keys():
    items = parse_order_items({"_meta": 1, "Burger": 1})
    assert _plain(items) == [("Burger", 1, "")]


def test_json_string_is_decoded_once():
    raw = json.dumps([{"name": "Pasta", "price": "9.50", "quantity": 3}])
    assert _plain(parse_order_items(raw)) == [("Pasta", 3, "9.50")]


def test_unparseable_string_is_empty():
    assert parse_order_items("not json at all") == []


def test_unrecognised_scalar_is_empty():
    assert parse_order_items(42) == []
    assert parse_order_items(None) == []
    assert isinstance(decode_items(42), NotMatched)


def test_nameless_entries_are_dropped():
    items = parse_order_items([{"price": "1.00"}, {"name": "  "}, {"name": "Rice", "quantity": 2}])
    assert _plain(items) == [("Rice", 2, "")]


def test_every_shape_yields_positive_quantities_and_names():
    shapes = [
        [{"name": "A", "quantity": -3}],
        {"original": [{"name": "B", "quantity": None}]},
        {"formatted": {"C": 0}},
        {"D": "0", "E": "x 2", "F": {"quantity": 7, "price": 4}},
        json.dumps({"G": 1.5}),
    ]
    for raw in shapes:
        outcome = decode_items(json.loads(raw) if isinstance(raw, str) else raw)
        assert isinstance(outcome, Decoded)
        for item in parse_order_items(raw):
            assert item.name
            assert item.quantity >= 1
            assert isinstance(item.price, str)
