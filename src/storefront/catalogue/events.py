"""Domain events for the Shop and Product aggregates."""

from protean.fields import DateTime, Identifier, Integer, String

from storefront.domain import storefront


@storefront.event(part_of="Shop")
class ShopOpened:
    """A shop was added to the storefront."""

    __version__ = 1

    shop_id = Identifier(required=True)
    name = String(required=True, max_length=200)
    opened_at = DateTime(required=True)


@storefront.event(part_of="Product")
class ProductListed:
    """A product was listed in a shop."""

    __version__ = 1

    product_id = Identifier(required=True)
    shop_id = Identifier(required=True)
    name = String(required=True, max_length=200)
    price_cents = Integer(required=True)


@storefront.event(part_of="Product")
class ProductPriceChanged:
    """The catalogue price of a product changed. Carts pick it up on next read."""

    __version__ = 1

    product_id = Identifier(required=True)
    previous_price_cents = Integer(required=True)
    new_price_cents = Integer(required=True)


@storefront.event(part_of="Product")
class ProductDelisted:
    """A product was withdrawn from sale."""

    __version__ = 1

    product_id = Identifier(required=True)
    delisted_at = DateTime(required=True)
