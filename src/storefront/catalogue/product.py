"""Product aggregate — the source of truth for unit prices.

Prices are integer minor units. Carts never copy them; every cart read joins
the current ``price_cents`` of each product.
"""

from datetime import UTC, datetime

from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Identifier, Integer, String, Text

from storefront.catalogue.events import ProductDelisted, ProductListed, ProductPriceChanged
from storefront.domain import storefront


@storefront.aggregate
class Product:
    shop_id = Identifier(required=True)
    name = String(required=True, max_length=200)
    description = Text()
    price_cents = Integer(required=True, min_value=0)
    photo = String(max_length=500)
    is_active = Boolean(default=True)
    created_at = DateTime()
    updated_at = DateTime()

    @classmethod
    def list_in_shop(cls, shop_id, name, price_cents, description=None, photo=None):
        now = datetime.now(UTC)
        product = cls(
            shop_id=shop_id,
            name=name,
            price_cents=price_cents,
            description=description,
            photo=photo,
            created_at=now,
            updated_at=now,
        )
        product.raise_(
            ProductListed(
                product_id=str(product.id),
                shop_id=str(shop_id),
                name=name,
                price_cents=price_cents,
            )
        )
        return product

    def update_details(self, name=None, description=None, photo=None, price_cents=None):
        """Edit the listing. A new photo replaces the old one only when supplied."""
        if not self.is_active:
            raise ValidationError({"product": ["Delisted products cannot be edited"]})

        if name is not None:
            self.name = name
        if description is not None:
            self.description = description
        if photo is not None:
            self.photo = photo
        if price_cents is not None and price_cents != self.price_cents:
            previous = self.price_cents
            self.price_cents = price_cents
            self.raise_(
                ProductPriceChanged(
                    product_id=str(self.id),
                    previous_price_cents=previous,
                    new_price_cents=price_cents,
                )
            )

        self.updated_at = datetime.now(UTC)

    def delist(self):
        if not self.is_active:
            raise ValidationError({"product": ["Product is already delisted"]})

        now = datetime.now(UTC)
        self.is_active = False
        self.updated_at = now
        self.raise_(ProductDelisted(product_id=str(self.id), delisted_at=now))
