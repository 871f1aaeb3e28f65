"""Shop aggregate — a storefront that groups products for browsing."""

from datetime import UTC, datetime

from protean.fields import DateTime, String

from storefront.catalogue.events import ShopOpened
from storefront.domain import storefront


@storefront.aggregate
class Shop:
    name = String(required=True, max_length=200)
    address = String(max_length=500)
    photo = String(max_length=500)
    created_at = DateTime()

    @classmethod
    def open(cls, name, address=None, photo=None):
        now = datetime.now(UTC)
        shop = cls(name=name, address=address, photo=photo, created_at=now)
        shop.raise_(ShopOpened(shop_id=str(shop.id), name=name, opened_at=now))
        return shop
