"""Catalogue queries beyond plain get-by-id."""

from storefront.catalogue.product import Product
from storefront.domain import storefront


@storefront.repository(part_of=Product)
class ProductRepository:
    def active_in_shop(self, shop_id) -> list[Product]:
        """Products on sale in a shop, newest first."""
        products = self._dao.query.filter(shop_id=str(shop_id), is_active=True).all().items
        return sorted(products, key=lambda p: p.created_at, reverse=True)
