"""Pydantic request/response schemas for the Storefront API.

These are external contracts, separate from the internal Protean commands.
Money is always integer minor units. Checkout requests carry at most a promo
code: quantities and amounts are never accepted from the client there.
"""

from datetime import datetime

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Catalogue
# ---------------------------------------------------------------------------
class OpenShopRequest(BaseModel):
    name: str = Field(min_length=1)
    address: str | None = None
    photo: str | None = None


class ShopSchema(BaseModel):
    shop_id: str
    name: str
    address: str | None = None
    photo: str | None = None


class ListProductRequest(BaseModel):
    name: str = Field(min_length=1)
    description: str | None = None
    price_cents: int = Field(ge=0)
    photo: str | None = None


class UpdateProductRequest(BaseModel):
    name: str | None = None
    description: str | None = None
    price_cents: int | None = Field(default=None, ge=0)
    photo: str | None = None


class ProductSchema(BaseModel):
    product_id: str
    shop_id: str
    name: str
    description: str | None = None
    price_cents: int
    photo: str | None = None


class ShopIdResponse(BaseModel):
    shop_id: str


class ProductIdResponse(BaseModel):
    product_id: str


# ---------------------------------------------------------------------------
# Cart
# ---------------------------------------------------------------------------
class AddToCartRequest(BaseModel):
    product_id: str | int
    quantity: int = Field(ge=1, default=1)


class SetCartQuantityRequest(BaseModel):
    quantity: int


class CartLineSchema(BaseModel):
    product_id: str
    quantity: int
    unit_price_cents: int
    line_total_cents: int


class CartResponse(BaseModel):
    lines: list[CartLineSchema]
    subtotal_cents: int


# ---------------------------------------------------------------------------
# Promo codes
# ---------------------------------------------------------------------------
class PromoCodeRequest(BaseModel):
    code: str
    percent_off: int | None = Field(default=None, ge=1, le=100)
    amount_off_cents: int | None = Field(default=None, ge=1)
    product_id: str | int | None = None
    starts_at: datetime | None = None
    ends_at: datetime | None = None

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "code": "WINTER10",
                    "percent_off": 10,
                    "amount_off_cents": None,
                    "product_id": None,
                    "starts_at": "2026-06-01T00:00:00Z",
                    "ends_at": "2026-08-31T23:59:59Z",
                }
            ]
        }
    }


class PromoCodeSchema(BaseModel):
    promo_id: str
    code: str
    percent_off: int | None = None
    amount_off_cents: int | None = None
    product_id: str | None = None
    starts_at: datetime | None = None
    ends_at: datetime | None = None


class PromoIdResponse(BaseModel):
    promo_id: str


class ValidatePromoRequest(BaseModel):
    code: str


class PromoValidationResponse(BaseModel):
    valid: bool
    code: str
    reason: str | None = None
    message: str | None = None
    percent_off: int | None = None
    amount_off_cents: int | None = None
    product_id: str | None = None


# ---------------------------------------------------------------------------
# Checkout
# ---------------------------------------------------------------------------
class CheckoutRequest(BaseModel):
    promo_code: str | None = None

    model_config = {"json_schema_extra": {"examples": [{"promo_code": "WINTER10"}]}}


class QuoteResponse(BaseModel):
    subtotal_cents: int
    discount_cents: int
    charge_cents: int
    promo_code: str | None = None


class CheckoutResponse(BaseModel):
    client_secret: str
    intent_id: str
    charge_cents: int
    currency: str


class CheckoutErrorResponse(BaseModel):
    reason: str
    detail: str | None = None
    rejection: str | None = None


# ---------------------------------------------------------------------------
# Payment gateway (non-production)
# ---------------------------------------------------------------------------
class ConfigureGatewayRequest(BaseModel):
    should_succeed: bool = True
    failure_reason: str = "Card processor unavailable"


class GatewayConfigResponse(BaseModel):
    gateway: str
    should_succeed: bool
    failure_reason: str


class StatusResponse(BaseModel):
    status: str = "ok"
