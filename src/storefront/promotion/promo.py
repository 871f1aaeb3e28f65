"""PromoCode aggregate — administrator-managed discount codes.

A promo carries a percentage, a fixed amount in minor units, or both, an
optional product scope and an optional activation window. The pricing engine
only ever reads promo codes.
"""

from datetime import UTC

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Identifier, Integer, String

from storefront.domain import storefront
from storefront.promotion.events import PromoCodeCreated, PromoCodeRevised


def normalize_code(code) -> str:
    """Codes are matched case-insensitively and stored upper-cased."""
    return str(code or "").strip().upper()


def as_utc(moment):
    """Treat naive datetimes as UTC so window checks never mix naive and aware values."""
    if moment is None:
        return None
    if moment.tzinfo is None:
        return moment.replace(tzinfo=UTC)
    return moment.astimezone(UTC)


def product_scope(product_id):
    """Blank or non-positive product ids mean the promo applies to the whole cart."""
    if product_id is None or str(product_id).strip() == "":
        return None
    try:
        if int(product_id) <= 0:
            return None
    except (TypeError, ValueError):
        pass
    return str(product_id)


@storefront.aggregate
class PromoCode:
    code = String(required=True, max_length=50)
    percent_off = Integer(min_value=1, max_value=100)
    amount_off_cents = Integer(min_value=1)
    product_id = Identifier()
    starts_at = DateTime()
    ends_at = DateTime()

    @invariant.post
    def code_must_be_normalized(self):
        if not self.code or self.code != normalize_code(self.code):
            raise ValidationError({"code": ["Promo code must be non-blank, trimmed and upper-case"]})

    @invariant.post
    def must_carry_a_discount(self):
        if self.percent_off is None and self.amount_off_cents is None:
            raise ValidationError({"discount": ["Provide a percent off or amount off value."]})

    @invariant.post
    def window_must_be_ordered(self):
        if self.starts_at is not None and self.ends_at is not None:
            if as_utc(self.starts_at) >= as_utc(self.ends_at):
                raise ValidationError({"ends_at": ["End date must be after the start date."]})

    @classmethod
    def create(
        cls,
        code,
        percent_off=None,
        amount_off_cents=None,
        product_id=None,
        starts_at=None,
        ends_at=None,
    ):
        normalized = normalize_code(code)
        if not normalized:
            raise ValidationError({"code": ["Promo code is required."]})

        promo = cls(
            code=normalized,
            percent_off=percent_off,
            amount_off_cents=amount_off_cents,
            product_id=product_scope(product_id),
            starts_at=starts_at,
            ends_at=ends_at,
        )
        promo.raise_(
            PromoCodeCreated(
                promo_id=str(promo.id),
                code=promo.code,
                percent_off=promo.percent_off,
                amount_off_cents=promo.amount_off_cents,
                product_id=promo.product_id,
                starts_at=promo.starts_at,
                ends_at=promo.ends_at,
            )
        )
        return promo

    def revise(
        self,
        code,
        percent_off=None,
        amount_off_cents=None,
        product_id=None,
        starts_at=None,
        ends_at=None,
    ):
        """Replace every term of the promo, as the admin edit form submits them all."""
        normalized = normalize_code(code)
        if not normalized:
            raise ValidationError({"code": ["Promo code is required."]})

        with atomic_change(self):
            self.code = normalized
            self.percent_off = percent_off
            self.amount_off_cents = amount_off_cents
            self.product_id = product_scope(product_id)
            self.starts_at = starts_at
            self.ends_at = ends_at

        self.raise_(
            PromoCodeRevised(
                promo_id=str(self.id),
                code=self.code,
                percent_off=self.percent_off,
                amount_off_cents=self.amount_off_cents,
                product_id=self.product_id,
                starts_at=self.starts_at,
                ends_at=self.ends_at,
            )
        )

    def is_started(self, now) -> bool:
        return self.starts_at is None or as_utc(now) >= as_utc(self.starts_at)

    def is_expired(self, now) -> bool:
        return self.ends_at is not None and as_utc(now) > as_utc(self.ends_at)

    def applies_to_whole_cart(self) -> bool:
        return self.product_id is None
