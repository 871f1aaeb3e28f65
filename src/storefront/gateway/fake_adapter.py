"""Configurable fake payment gateway for development and testing.

Simulates a hosted payment processor without any external calls. It records
every request so tests can assert on the exact amount that was sent, and can
be switched to fail at runtime via /payments/gateway/configure.
"""

from uuid import uuid4

from storefront.gateway.port import IntentResult, PaymentIntentGateway


class FakeGateway(PaymentIntentGateway):
    """Configurable fake payment gateway."""

    def __init__(self) -> None:
        self.should_succeed: bool = True
        self.failure_reason: str = "Card processor unavailable"
        self.calls: list[dict] = []

    def configure(self, should_succeed: bool, failure_reason: str = "Card processor unavailable") -> None:
        """Configure gateway behavior at runtime."""
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason

    def create_intent(self, amount_cents: int, currency: str) -> IntentResult:
        self.calls.append(
            {
                "method": "create_intent",
                "amount_cents": amount_cents,
                "currency": currency,
            }
        )

        if not self.should_succeed:
            return IntentResult(success=False, failure_reason=self.failure_reason)

        intent_id = f"pi_fake_{uuid4().hex[:16]}"
        return IntentResult(
            success=True,
            intent_id=intent_id,
            client_secret=f"{intent_id}_secret_{uuid4().hex[:12]}",
            amount_cents=amount_cents,
            currency=currency,
        )
