"""Domain events for the PromoCode aggregate."""

from protean.fields import DateTime, Identifier, Integer, String

from storefront.domain import storefront


@storefront.event(part_of="PromoCode")
class PromoCodeCreated:
    __version__ = 1

    promo_id = Identifier(required=True)
    code = String(required=True, max_length=50)
    percent_off = Integer()
    amount_off_cents = Integer()
    product_id = Identifier()
    starts_at = DateTime()
    ends_at = DateTime()


@storefront.event(part_of="PromoCode")
class PromoCodeRevised:
    """An administrator changed the terms of a promo code."""

    __version__ = 1

    promo_id = Identifier(required=True)
    code = String(required=True, max_length=50)
    percent_off = Integer()
    amount_off_cents = Integer()
    product_id = Identifier()
    starts_at = DateTime()
    ends_at = DateTime()
