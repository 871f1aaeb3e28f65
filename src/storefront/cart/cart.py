"""Shopping Cart aggregate — one cart per user.

The cart stores product identity and quantity only. Unit prices are never
kept here; they are joined from the catalogue on every read so a price change
shows up immediately.
"""

from datetime import UTC, datetime

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, HasMany, Identifier, Integer

from storefront.cart.events import CartItemAdded, CartItemRemoved, CartQuantityUpdated
from storefront.domain import storefront


@storefront.entity(part_of="ShoppingCart")
class CartItem:
    product_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)
    added_at = DateTime()


@storefront.aggregate
class ShoppingCart:
    user_id = Identifier(required=True)
    items = HasMany(CartItem)
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def one_line_per_product(self):
        product_ids = [str(i.product_id) for i in self.items]
        if len(product_ids) != len(set(product_ids)):
            raise ValidationError({"items": ["A product can appear only once in a cart"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(cls, user_id):
        now = datetime.now(UTC)
        return cls(user_id=user_id, created_at=now, updated_at=now)

    # -------------------------------------------------------------------
    # Item management
    # -------------------------------------------------------------------
    def line_for(self, product_id):
        return next((i for i in self.items if str(i.product_id) == str(product_id)), None)

    def add_item(self, product_id, quantity=1):
        """Add a product to the cart, or increase its quantity if already present."""
        if quantity < 1:
            raise ValidationError({"quantity": ["Quantity to add must be at least 1"]})

        now = datetime.now(UTC)
        existing = self.line_for(product_id)

        if existing:
            existing.quantity += quantity
            new_quantity = existing.quantity
        else:
            self.add_items(CartItem(product_id=product_id, quantity=quantity, added_at=now))
            new_quantity = quantity

        self.updated_at = now

        self.raise_(
            CartItemAdded(
                cart_id=str(self.id),
                user_id=str(self.user_id),
                product_id=str(product_id),
                quantity_added=quantity,
                quantity=new_quantity,
            )
        )

    def set_quantity(self, product_id, quantity):
        """Set a line to an absolute quantity. Zero or less removes the line."""
        existing = self.line_for(product_id)

        if quantity <= 0:
            if existing is not None:
                self.remove_item(product_id)
            return

        now = datetime.now(UTC)
        if existing is None:
            self.add_items(CartItem(product_id=product_id, quantity=quantity, added_at=now))
            previous_quantity = 0
        else:
            previous_quantity = existing.quantity
            existing.quantity = quantity

        self.updated_at = now

        self.raise_(
            CartQuantityUpdated(
                cart_id=str(self.id),
                user_id=str(self.user_id),
                product_id=str(product_id),
                previous_quantity=previous_quantity,
                new_quantity=quantity,
            )
        )

    def remove_item(self, product_id):
        """Remove a product from the cart."""
        item = self.line_for(product_id)
        if item is None:
            raise ValidationError({"product_id": ["Product is not in the cart"]})

        self.remove_items(item)
        self.updated_at = datetime.now(UTC)

        self.raise_(
            CartItemRemoved(
                cart_id=str(self.id),
                user_id=str(self.user_id),
                product_id=str(product_id),
            )
        )
