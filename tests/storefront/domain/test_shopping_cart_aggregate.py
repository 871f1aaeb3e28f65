"""Tests for the ShoppingCart aggregate."""

import pytest
from protean.exceptions import ValidationError
from storefront.cart.cart import ShoppingCart
from storefront.cart.events import CartItemAdded, CartItemRemoved, CartQuantityUpdated


def _make_cart():
    return ShoppingCart.create(user_id="user-001")


class TestCreateCart:
    def test_new_cart_is_empty(self):
        cart = _make_cart()
        assert cart.user_id == "user-001"
        assert len(cart.items) == 0
        assert cart.created_at is not None


class TestAddItem:
    def test_add_new_product(self):
        cart = _make_cart()
        cart.add_item("prod-001", 2)
        assert len(cart.items) == 1
        assert cart.line_for("prod-001").quantity == 2

    def test_add_existing_product_increments(self):
        cart = _make_cart()
        cart.add_item("prod-001", 2)
        cart.add_item("prod-001", 3)
        assert len(cart.items) == 1
        assert cart.line_for("prod-001").quantity == 5

    def test_default_quantity_is_one(self):
        cart = _make_cart()
        cart.add_item("prod-001")
        assert cart.line_for("prod-001").quantity == 1

    def test_add_raises_event(self):
        cart = _make_cart()
        cart.add_item("prod-001", 2)
        cart.add_item("prod-001", 1)
        events = [e for e in cart._events if isinstance(e, CartItemAdded)]
        assert len(events) == 2
        assert events[1].quantity_added == 1
        assert events[1].quantity == 3

    def test_zero_quantity_rejected(self):
        cart = _make_cart()
        with pytest.raises(ValidationError):
            cart.add_item("prod-001", 0)


class TestSetQuantity:
    def test_set_replaces_quantity(self):
        cart = _make_cart()
        cart.add_item("prod-001", 2)
        cart.set_quantity("prod-001", 7)
        assert cart.line_for("prod-001").quantity == 7

    def test_set_on_missing_product_adds_line(self):
        cart = _make_cart()
        cart.set_quantity("prod-002", 4)
        assert cart.line_for("prod-002").quantity == 4

    def test_set_raises_event(self):
        cart = _make_cart()
        cart.add_item("prod-001", 2)
        cart.set_quantity("prod-001", 5)
        events = [e for e in cart._events if isinstance(e, CartQuantityUpdated)]
        assert len(events) == 1
        assert events[0].previous_quantity == 2
        assert events[0].new_quantity == 5

    def test_set_zero_removes_line(self):
        cart = _make_cart()
        cart.add_item("prod-001", 2)
        cart.set_quantity("prod-001", 0)
        assert cart.line_for("prod-001") is None
        assert any(isinstance(e, CartItemRemoved) for e in cart._events)

    def test_set_negative_removes_line(self):
        cart = _make_cart()
        cart.add_item("prod-001", 2)
        cart.set_quantity("prod-001", -1)
        assert len(cart.items) == 0

    def test_set_zero_on_missing_product_is_noop(self):
        cart = _make_cart()
        cart.set_quantity("prod-001", 0)
        assert len(cart.items) == 0
        assert not any(isinstance(e, CartItemRemoved) for e in cart._events)


class TestRemoveItem:
    def test_remove_item(self):
        cart = _make_cart()
        cart.add_item("prod-001", 1)
        cart.add_item("prod-002", 1)
        cart.remove_item("prod-001")
        assert [str(i.product_id) for i in cart.items] == ["prod-002"]

    def test_remove_missing_item_rejected(self):
        cart = _make_cart()
        with pytest.raises(ValidationError):
            cart.remove_item("prod-404")
