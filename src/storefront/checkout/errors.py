"""Typed, user-displayable checkout failures.

None of these are retried inside the engine; the caller decides whether to
resubmit the checkout.
"""

from storefront.promotion.validator import RejectionReason, describe_rejection


class CheckoutError(Exception):
    """Base class. ``reason`` is the machine-readable code sent to clients."""

    reason = "checkout_failed"

    def __init__(self, detail: str | None = None) -> None:
        self.detail = detail
        super().__init__(detail or self.reason)

    def to_payload(self) -> dict:
        payload = {"reason": self.reason}
        if self.detail:
            payload["detail"] = self.detail
        return payload


class CartEmpty(CheckoutError):
    reason = "cart_empty"

    def __init__(self, detail: str | None = "Cart is empty") -> None:
        super().__init__(detail)


class PromoRejected(CheckoutError):
    """The supplied promo code cannot be used. Never downgraded to "no discount"."""

    reason = "promo_invalid"

    def __init__(self, rejection: RejectionReason, code: str | None = None) -> None:
        self.rejection = rejection
        self.code = code
        super().__init__(describe_rejection(rejection))

    def to_payload(self) -> dict:
        payload = super().to_payload()
        payload["rejection"] = self.rejection.value
        return payload


class UpstreamPaymentFailure(CheckoutError):
    reason = "payment_failed"
