"""Cart lookups keyed by the owning user."""

from storefront.cart.cart import ShoppingCart
from storefront.domain import storefront


@storefront.repository(part_of=ShoppingCart)
class ShoppingCartRepository:
    def for_user(self, user_id) -> ShoppingCart | None:
        """Return the user's cart, or None if they have never added anything."""
        carts = self._dao.query.filter(user_id=str(user_id)).all().items
        return carts[0] if carts else None
