from decimal import Decimal

import pytest

from menu.catalog import get_item
from orders.api import APIResponse
from orders.exceptions import BackendError, OrderValidationError
from storefront.composer import (
    CART_KEY,
    MISSING_INPUT,
    SUBMIT_FAILED,
    OrderComposer,
    parse_quantity,
)


PIZZA = get_item(1)   # 12.99
BURGER = get_item(2)  # 9.99


@pytest.fixture
def composer():
    return OrderComposer({})


def test_adding_same_item_twice_increments_quantity(composer):
    assert composer.add_item(PIZZA) == 1
    assert composer.add_item(PIZZA) == 2
    entries = composer.entries()
    assert len(entries) == 1
    assert entries[0].item == PIZZA
    assert entries[0].quantity == 2


@pytest.mark.parametrize("value", [0, "0", -1, "-0.5", "abc", "", None, "NaN", "inf", True])
def test_invalid_quantity_removes_entry(composer, value):
    composer.add_item(PIZZA)
    composer.add_item(BURGER)
    assert composer.set_quantity(PIZZA.id, value) == 0
    assert [e.item.id for e in composer.entries()] == [BURGER.id]


def test_valid_quantity_sets_exactly(composer):
    composer.add_item(PIZZA)
    assert composer.set_quantity(PIZZA.id, "3") == 3
    assert composer.quantity_of(PIZZA.id) == 3
    assert composer.set_quantity(PIZZA.id, 1) == 1
    assert composer.quantity_of(PIZZA.id) == 1


@pytest.mark.parametrize("value,expected", [("1.5", 2), ("2.4", 2), ("0.4", 1), (3.0, 3)])
def test_fractional_quantity_is_rounded_not_removed(composer, value, expected):
    composer.add_item(PIZZA)
    assert composer.set_quantity(PIZZA.id, value) == expected
    assert composer.quantity_of(PIZZA.id) == expected
    assert composer.compute_total() == PIZZA.price * expected


def test_set_quantity_for_item_not_in_cart_does_not_add(composer):
    assert composer.set_quantity(PIZZA.id, 4) == 0
    assert composer.is_empty


def test_total_is_sum_of_lines(composer):
    composer.add_item(PIZZA)
    composer.add_item(PIZZA)
    composer.add_item(BURGER)
    assert composer.compute_total() == Decimal("35.97")
    composer.set_quantity(BURGER.id, 0)
    assert composer.compute_total() == Decimal("25.98")


def test_total_of_empty_cart_is_zero(composer):
    assert composer.compute_total() == Decimal("0.00")


def test_unknown_catalog_ids_in_session_are_dropped():
    composer = OrderComposer({CART_KEY: [{"id": 99, "quantity": 1}, {"id": 1, "quantity": 2}]})
    assert [(e.item.id, e.quantity) for e in composer.entries()] == [(1, 2)]


def test_parse_quantity():
    assert parse_quantity("2") == 2
    assert parse_quantity(" 7 ") == 7
    assert parse_quantity("2.0") == 2
    assert parse_quantity("1.5") == 2
    assert parse_quantity("inf") is None
    assert parse_quantity(False) is None


@pytest.mark.parametrize("name", ["", "   "])
def test_submit_requires_a_name(composer, orders_client, name):
    composer.add_item(PIZZA)
    composer.customer_name = name
    with pytest.raises(OrderValidationError) as exc:
        composer.submit(orders_client)
    assert str(exc.value) == MISSING_INPUT
    assert orders_client.calls_named("create") == []


def test_submit_requires_items(composer, orders_client):
    composer.customer_name = "Alice"
    with pytest.raises(OrderValidationError):
        composer.submit(orders_client)
    assert orders_client.calls == []


def test_submit_sends_cart_and_resets(composer, orders_client):
    composer.customer_name = "  Alice "
    composer.add_item(PIZZA)
    composer.add_item(PIZZA)
    composer.add_item(BURGER)

    composer.submit(orders_client)

    (_, name, items, total), = orders_client.calls_named("create")
    assert name == "Alice"
    assert items == [
        {"id": 1, "name": "Pizza Margherita", "price": 12.99, "quantity": 2},
        {"id": 2, "name": "Chicken Burger", "price": 9.99, "quantity": 1},
    ]
    assert total == Decimal("35.97")
    assert composer.is_empty
    assert composer.customer_name == ""
    assert composer.is_submitting is False


def test_failed_submit_keeps_cart_and_name(composer, orders_client):
    orders_client.create_response = APIResponse(False, 500, None, error="boom")
    composer.customer_name = "Alice"
    composer.add_item(PIZZA)

    with pytest.raises(BackendError) as exc:
        composer.submit(orders_client)

    assert str(exc.value) == SUBMIT_FAILED
    assert exc.value.status == 500
    assert composer.quantity_of(PIZZA.id) == 1
    assert composer.customer_name == "Alice"
    assert composer.is_submitting is False


def test_submit_rejected_while_in_flight(composer, orders_client):
    composer.customer_name = "Alice"
    composer.add_item(PIZZA)
    composer.is_submitting = True
    with pytest.raises(OrderValidationError):
        composer.submit(orders_client)
    assert orders_client.calls == []
