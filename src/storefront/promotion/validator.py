"""Promo Validator — decides whether a code may be used on a cart right now.

Validation is read-only and returns a tagged result instead of raising, so
callers branch on ``PromoValid`` / ``PromoRejection`` explicitly. Rejection
reasons are checked in a fixed order and the first one that applies wins:

    not_found -> not_started -> expired -> wrong_product

The result is never cached. Every pricing computation validates again, so a
promo that expired or lost its target product since it was first applied is
caught at checkout.
"""

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import ClassVar

from protean.utils.globals import current_domain

from storefront.promotion.promo import PromoCode, normalize_code


class RejectionReason(Enum):
    NOT_FOUND = "not_found"
    NOT_STARTED = "not_started"
    EXPIRED = "expired"
    WRONG_PRODUCT = "wrong_product"
    # Raised by the checkout assembler, not by validation itself
    REDUCES_BELOW_ZERO = "reduces_below_zero"


_REJECTION_MESSAGES = {
    RejectionReason.NOT_FOUND: "That promo code could not be found.",
    RejectionReason.NOT_STARTED: "That promo code isn't active yet.",
    RejectionReason.EXPIRED: "That promo code has expired.",
    RejectionReason.WRONG_PRODUCT: "That promo code doesn't apply to the items in your cart.",
    RejectionReason.REDUCES_BELOW_ZERO: "That promo code would reduce the total below zero.",
}


def describe_rejection(reason: RejectionReason) -> str:
    """User-displayable message for a rejection reason."""
    return _REJECTION_MESSAGES.get(reason, "That promo code isn't valid for your cart.")


@dataclass(frozen=True)
class ValidatedPromo:
    """The discount terms of a promo that passed validation."""

    code: str
    percent_off: int | None = None
    amount_off_cents: int | None = None
    product_id: str | None = None

    @classmethod
    def from_promo(cls, promo: PromoCode) -> "ValidatedPromo":
        return cls(
            code=promo.code,
            percent_off=promo.percent_off,
            amount_off_cents=promo.amount_off_cents,
            product_id=str(promo.product_id) if promo.product_id is not None else None,
        )


@dataclass(frozen=True)
class PromoValid:
    promo: ValidatedPromo

    is_valid: ClassVar[bool] = True


@dataclass(frozen=True)
class PromoRejection:
    code: str
    reason: RejectionReason

    is_valid: ClassVar[bool] = False

    @property
    def message(self) -> str:
        return describe_rejection(self.reason)


PromoValidation = PromoValid | PromoRejection


def evaluate_promo(
    promo: PromoCode | None,
    code: str,
    now: datetime,
    cart_product_ids: Iterable,
) -> PromoValidation:
    """Apply the rejection rules, in priority order, to an already looked-up promo."""
    if promo is None:
        return PromoRejection(code=code, reason=RejectionReason.NOT_FOUND)

    if not promo.is_started(now):
        return PromoRejection(code=code, reason=RejectionReason.NOT_STARTED)

    if promo.is_expired(now):
        return PromoRejection(code=code, reason=RejectionReason.EXPIRED)

    if not promo.applies_to_whole_cart():
        in_cart = {str(product_id) for product_id in cart_product_ids}
        if str(promo.product_id) not in in_cart:
            return PromoRejection(code=code, reason=RejectionReason.WRONG_PRODUCT)

    return PromoValid(promo=ValidatedPromo.from_promo(promo))


def validate_promo(
    code: str,
    now: datetime,
    cart_product_ids: Iterable,
    find_by_code: Callable[[str], PromoCode | None] | None = None,
) -> PromoValidation:
    """Normalise ``code``, look it up and validate it against ``now`` and the cart.

    ``find_by_code`` defaults to the PromoCode repository of the active domain.
    """
    normalized = normalize_code(code)
    if not normalized:
        return PromoRejection(code=normalized, reason=RejectionReason.NOT_FOUND)

    if find_by_code is None:
        find_by_code = current_domain.repository_for(PromoCode).find_by_code

    return evaluate_promo(find_by_code(normalized), normalized, now, cart_product_ids)
