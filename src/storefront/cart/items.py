"""Cart item management — commands and handler.

Both commands load the user's cart (creating it on first use), apply the
change and save it inside one unit of work.
"""

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Identifier, Integer
from protean.utils.globals import current_domain

from storefront.cart.cart import ShoppingCart
from storefront.catalogue.product import Product
from storefront.domain import storefront


@storefront.command(part_of="ShoppingCart")
class AddToCart:
    user_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)


@storefront.command(part_of="ShoppingCart")
class SetCartQuantity:
    """Set an absolute quantity; zero or negative deletes the line."""

    user_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity = Integer(required=True)


def _ensure_on_sale(product_id):
    # Raises ObjectNotFoundError for an unknown product
    product = current_domain.repository_for(Product).get(product_id)
    if not product.is_active:
        raise ValidationError({"product_id": ["Product is no longer on sale"]})


@storefront.command_handler(part_of=ShoppingCart)
class ManageCartItemsHandler:
    @handle(AddToCart)
    def add_to_cart(self, command):
        _ensure_on_sale(command.product_id)

        repo = current_domain.repository_for(ShoppingCart)
        cart = repo.for_user(command.user_id) or ShoppingCart.create(user_id=command.user_id)
        cart.add_item(product_id=command.product_id, quantity=command.quantity)
        repo.add(cart)
        return str(cart.id)

    @handle(SetCartQuantity)
    def set_cart_quantity(self, command):
        repo = current_domain.repository_for(ShoppingCart)
        cart = repo.for_user(command.user_id)

        if command.quantity > 0:
            if cart is None or cart.line_for(command.product_id) is None:
                _ensure_on_sale(command.product_id)
            if cart is None:
                cart = ShoppingCart.create(user_id=command.user_id)
        elif cart is None:
            return None

        cart.set_quantity(product_id=command.product_id, quantity=command.quantity)
        repo.add(cart)
        return str(cart.id)
