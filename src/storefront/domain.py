"""Storefront bounded context — catalogue, carts, promotions and checkout.

The checkout engine turns a user's stored cart plus an optional promo code
into the authoritative charge amount handed to the payment gateway.
"""

from protean.domain import Domain

from storefront.utils.logging import configure_logging, get_logger

# Configure logging for the application
configure_logging()

# Get logger for this module
logger = get_logger(__name__)

# Domain Composition Root
storefront = Domain(name="storefront")
