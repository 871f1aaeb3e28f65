"""Payment intent gateway port (abstract interface).

The checkout engine hands the gateway exactly two things: a strictly positive
amount in minor units and a currency code. No other pricing data crosses this
boundary, and the gateway never decides an amount.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class IntentResult:
    """Result of a payment intent creation attempt."""

    success: bool
    intent_id: str | None = None
    client_secret: str | None = None
    amount_cents: int | None = None
    currency: str | None = None
    failure_reason: str | None = None


class PaymentIntentGateway(ABC):
    """Abstract hosted-payment processor interface."""

    @abstractmethod
    def create_intent(self, amount_cents: int, currency: str) -> IntentResult:
        """Create a fresh payment intent for ``amount_cents``.

        Every call creates a new intent; an intent's amount is never changed
        after creation.
        """
        ...
