"""Checkout Total Assembler — the only place a charge amount is decided.

One attempt walks a fixed path and never loops back:

    Idle -> CartLoaded -> PromoValidated | PromoSkipped -> TotalComputed
         -> IntentRequested -> IntentCreated | Failed

Everything is re-derived from stored state on every call: cart lines and
catalogue prices are read fresh and the promo code is validated again. The
client never supplies an amount, and whatever total it displays stays
provisional until this module recomputes it.
"""

import os
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime
from enum import Enum

import structlog

from storefront.cart.store import CartLine, CartStore, cart_subtotal
from storefront.checkout.errors import CartEmpty, CheckoutError, PromoRejected, UpstreamPaymentFailure
from storefront.gateway import get_gateway
from storefront.gateway.port import PaymentIntentGateway
from storefront.promotion.discount import compute_discount
from storefront.promotion.validator import (
    PromoRejection,
    RejectionReason,
    ValidatedPromo,
    validate_promo,
)

logger = structlog.get_logger(__name__)

DEFAULT_CURRENCY = "aud"


def charge_currency() -> str:
    """Base currency of every charge, from STOREFRONT_CURRENCY."""
    return os.environ.get("STOREFRONT_CURRENCY", DEFAULT_CURRENCY).strip().lower()


class CheckoutStage(Enum):
    IDLE = "Idle"
    CART_LOADED = "CartLoaded"
    PROMO_VALIDATED = "PromoValidated"
    PROMO_SKIPPED = "PromoSkipped"
    TOTAL_COMPUTED = "TotalComputed"
    INTENT_REQUESTED = "IntentRequested"
    INTENT_CREATED = "IntentCreated"
    FAILED = "Failed"


@dataclass(frozen=True)
class CartQuote:
    """Authoritative pricing of a cart at one instant."""

    user_id: str
    lines: tuple[CartLine, ...]
    subtotal_cents: int
    discount_cents: int
    charge_cents: int
    promo: ValidatedPromo | None = None


@dataclass(frozen=True)
class CheckoutCharge:
    """A payment intent created for exactly ``charge_cents``."""

    charge_cents: int
    currency: str
    intent_id: str
    client_secret: str
    quote: CartQuote
    stages: tuple[CheckoutStage, ...] = ()


class _Attempt:
    """Tracks and logs the stages of a single checkout attempt."""

    def __init__(self, user_id) -> None:
        self.log = logger.bind(user_id=str(user_id))
        self.stages = [CheckoutStage.IDLE]

    @property
    def stage(self) -> CheckoutStage:
        return self.stages[-1]

    def advance(self, stage: CheckoutStage, **details) -> None:
        self.stages.append(stage)
        self.log.debug("Checkout stage reached", stage=stage.value, **details)

    def fail(self, error: CheckoutError) -> CheckoutError:
        self.stages.append(CheckoutStage.FAILED)
        self.log.info(
            "Checkout failed",
            failed_after=self.stages[-2].value,
            reason=error.reason,
            detail=error.detail,
        )
        return error


class CheckoutAssembler:
    """Combines the Cart Store, Promo Validator and Discount Calculator.

    Collaborators default to the live domain: the CartStore over the active
    Protean domain, the PromoCode repository and the configured gateway.
    """

    def __init__(
        self,
        cart_store: CartStore | None = None,
        gateway: PaymentIntentGateway | None = None,
        find_promo: Callable | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.cart_store = cart_store or CartStore()
        self._gateway = gateway
        self.find_promo = find_promo
        self.clock = clock or (lambda: datetime.now(UTC))

    @property
    def gateway(self) -> PaymentIntentGateway:
        return self._gateway or get_gateway()

    def quote(self, user_id, promo_code: str | None = None, now: datetime | None = None) -> CartQuote:
        """Price the user's cart without creating a payment intent."""
        return self._quote(_Attempt(user_id), user_id, promo_code, now or self.clock())

    def build_charge(self, user_id, promo_code: str | None = None, now: datetime | None = None) -> CheckoutCharge:
        """Price the cart and request a payment intent for exactly the charge."""
        attempt = _Attempt(user_id)
        quote = self._quote(attempt, user_id, promo_code, now or self.clock())

        currency = charge_currency()
        attempt.advance(CheckoutStage.INTENT_REQUESTED, charge_cents=quote.charge_cents, currency=currency)
        try:
            result = self.gateway.create_intent(quote.charge_cents, currency)
        except Exception as exc:
            raise attempt.fail(UpstreamPaymentFailure(f"Payment gateway error: {exc}")) from exc

        if not result.success:
            raise attempt.fail(UpstreamPaymentFailure(result.failure_reason or "Payment intent was not created"))

        attempt.advance(CheckoutStage.INTENT_CREATED, intent_id=result.intent_id)
        attempt.log.info(
            "Payment intent created",
            intent_id=result.intent_id,
            charge_cents=quote.charge_cents,
            discount_cents=quote.discount_cents,
            promo_code=quote.promo.code if quote.promo else None,
        )
        return CheckoutCharge(
            charge_cents=quote.charge_cents,
            currency=currency,
            intent_id=result.intent_id,
            client_secret=result.client_secret,
            quote=quote,
            stages=tuple(attempt.stages),
        )

    def _quote(self, attempt: _Attempt, user_id, promo_code, now) -> CartQuote:
        lines = tuple(self.cart_store.get_lines(user_id))
        subtotal = cart_subtotal(lines)
        if not lines or subtotal <= 0:
            raise attempt.fail(CartEmpty())
        attempt.advance(CheckoutStage.CART_LOADED, line_count=len(lines), subtotal_cents=subtotal)

        promo = None
        discount = 0
        if promo_code is not None and promo_code.strip():
            validation = validate_promo(
                promo_code,
                now,
                {line.product_id for line in lines},
                find_by_code=self.find_promo,
            )
            if isinstance(validation, PromoRejection):
                raise attempt.fail(PromoRejected(validation.reason, code=validation.code))

            promo = validation.promo
            discount = compute_discount(lines, promo)
            attempt.advance(CheckoutStage.PROMO_VALIDATED, promo_code=promo.code, discount_cents=discount)
        else:
            attempt.advance(CheckoutStage.PROMO_SKIPPED)

        charge = subtotal - min(discount, subtotal)
        if charge <= 0:
            # The gateway only accepts strictly positive amounts
            raise attempt.fail(PromoRejected(RejectionReason.REDUCES_BELOW_ZERO, code=promo.code if promo else None))
        attempt.advance(CheckoutStage.TOTAL_COMPUTED, charge_cents=charge)

        return CartQuote(
            user_id=str(user_id),
            lines=lines,
            subtotal_cents=subtotal,
            discount_cents=discount,
            charge_cents=charge,
            promo=promo,
        )


def quote_cart(user_id, promo_code: str | None = None, now: datetime | None = None) -> CartQuote:
    return CheckoutAssembler().quote(user_id, promo_code, now)


def build_charge(user_id, promo_code: str | None = None, now: datetime | None = None) -> CheckoutCharge:
    return CheckoutAssembler().build_charge(user_id, promo_code, now)
