"""Discount Calculator.

Works purely on integer minor units. Percentages are floored, never rounded,
so a percentage discount can favour the merchant by at most one minor unit.
"""

from collections.abc import Sequence

from storefront.cart.store import CartLine, cart_subtotal
from storefront.promotion.validator import ValidatedPromo


def eligible_lines(lines: Sequence[CartLine], promo: ValidatedPromo) -> list[CartLine]:
    """All lines for a whole-cart promo, otherwise only the scoped product's lines."""
    if promo.product_id is None:
        return list(lines)
    return [line for line in lines if str(line.product_id) == str(promo.product_id)]


def compute_discount(lines: Sequence[CartLine], promo: ValidatedPromo) -> int:
    """Discount in minor units, never negative and never above what it applies to."""
    eligible_subtotal = cart_subtotal(eligible_lines(lines, promo))
    if eligible_subtotal <= 0:
        return 0

    discount = 0
    if promo.percent_off:
        discount += (eligible_subtotal * promo.percent_off) // 100
    # A record may carry both mechanisms; they stack.
    if promo.amount_off_cents:
        discount += promo.amount_off_cents

    discount = min(discount, eligible_subtotal)
    return max(0, min(discount, cart_subtotal(lines)))
