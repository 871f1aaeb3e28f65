"""Payment gateway factory.

Provides get_gateway() / set_gateway() to swap implementations. FakeGateway
is the default; a real processor adapter is installed with set_gateway() at
application start-up.

The active gateway is a module global rather than a per-request dependency:
a process talks to exactly one card processor, and the adapter holds its own
connection state (or, for FakeGateway, its recorded calls and configured
outcome) that must survive across requests. Tests and the non-production
``/payments/gateway/configure`` route swap or reset this single instance;
CheckoutAssembler takes an explicit gateway where isolation is needed.
"""

from storefront.gateway.fake_adapter import FakeGateway
from storefront.gateway.port import PaymentIntentGateway

_current_gateway: PaymentIntentGateway | None = None


def get_gateway() -> PaymentIntentGateway:
    """Return the current payment gateway. Defaults to FakeGateway."""
    global _current_gateway
    if _current_gateway is None:
        _current_gateway = FakeGateway()
    return _current_gateway


def set_gateway(gateway: PaymentIntentGateway) -> None:
    """Override the active payment gateway (useful for tests)."""
    global _current_gateway
    _current_gateway = gateway


def reset_gateway() -> None:
    """Reset to default gateway."""
    global _current_gateway
    _current_gateway = None
