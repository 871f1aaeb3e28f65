"""Cart Store — the read/modify surface the checkout engine depends on.

Reads return priced ``CartLine`` snapshots: quantity comes from the stored
cart, the unit price from the live catalogue. Writes go through the cart
commands, serialised per user so that two concurrent increments of the same
product both land.
"""

import threading
import weakref
from collections.abc import Iterable
from dataclasses import dataclass

import structlog
from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from storefront.cart.cart import ShoppingCart
from storefront.cart.items import AddToCart, SetCartQuantity
from storefront.catalogue.product import Product

logger = structlog.get_logger(__name__)

# An entry lives only while some caller holds a reference to its lock
_user_locks: weakref.WeakValueDictionary[str, threading.Lock] = weakref.WeakValueDictionary()
_user_locks_guard = threading.Lock()


def _lock_for(user_id) -> threading.Lock:
    with _user_locks_guard:
        lock = _user_locks.get(str(user_id))
        if lock is None:
            lock = threading.Lock()
            _user_locks[str(user_id)] = lock
        return lock


@dataclass(frozen=True)
class CartLine:
    """One product in a user's cart, priced at read time."""

    product_id: str
    quantity: int
    unit_price_cents: int

    @property
    def line_total_cents(self) -> int:
        return self.unit_price_cents * self.quantity


def cart_subtotal(lines: Iterable[CartLine]) -> int:
    """Sum of line totals in minor units."""
    return sum(line.line_total_cents for line in lines)


class CartStore:
    """Persisted ``(user, product, quantity)`` tuples joined with catalogue prices."""

    def get_lines(self, user_id) -> list[CartLine]:
        cart = current_domain.repository_for(ShoppingCart).for_user(user_id)
        if cart is None:
            return []

        products = current_domain.repository_for(Product)
        lines = []
        for item in sorted(cart.items, key=lambda i: str(i.product_id)):
            try:
                product = products.get(item.product_id)
            except ObjectNotFoundError:
                # Same as an inner join: a line without a catalogue entry is not priced
                logger.warning(
                    "Cart line references unknown product",
                    user_id=str(user_id),
                    product_id=str(item.product_id),
                )
                continue

            lines.append(
                CartLine(
                    product_id=str(item.product_id),
                    quantity=item.quantity,
                    unit_price_cents=product.price_cents,
                )
            )
        return lines

    def product_ids(self, user_id) -> set[str]:
        return {line.product_id for line in self.get_lines(user_id)}

    def add(self, user_id, product_id, quantity=1) -> None:
        """Increment a product's quantity, creating the line if needed."""
        with _lock_for(user_id):
            current_domain.process(
                AddToCart(user_id=user_id, product_id=product_id, quantity=quantity),
                asynchronous=False,
            )

    def set_quantity(self, user_id, product_id, quantity) -> None:
        """Set an absolute quantity; ``quantity <= 0`` deletes the line."""
        with _lock_for(user_id):
            current_domain.process(
                SetCartQuantity(user_id=user_id, product_id=product_id, quantity=quantity),
                asynchronous=False,
            )
