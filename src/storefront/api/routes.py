"""FastAPI routes for the Storefront — catalogue, cart, promo codes and checkout.

The caller's identity arrives explicitly on every request: ``X-User-Id`` for
the shopper and ``X-User-Role`` for administrative routes. Both headers are
set by the authentication layer in front of this service.
"""

import os

from fastapi import APIRouter, Depends, Header, HTTPException
from protean.utils.globals import current_domain

from storefront.api.schemas import (
    AddToCartRequest,
    CartLineSchema,
    CartResponse,
    CheckoutErrorResponse,
    CheckoutRequest,
    CheckoutResponse,
    ConfigureGatewayRequest,
    GatewayConfigResponse,
    ListProductRequest,
    OpenShopRequest,
    ProductIdResponse,
    ProductSchema,
    PromoCodeRequest,
    PromoCodeSchema,
    PromoIdResponse,
    PromoValidationResponse,
    QuoteResponse,
    SetCartQuantityRequest,
    ShopIdResponse,
    ShopSchema,
    StatusResponse,
    UpdateProductRequest,
    ValidatePromoRequest,
)
from storefront.cart.store import CartStore, cart_subtotal
from storefront.catalogue.management import DelistProduct, ListProduct, OpenShop, UpdateProduct
from storefront.catalogue.product import Product
from storefront.catalogue.shop import Shop
from storefront.checkout.assembler import CheckoutAssembler, quote_cart
from storefront.gateway import get_gateway
from storefront.gateway.fake_adapter import FakeGateway
from storefront.promotion.management import CreatePromoCode, DeletePromoCode, RevisePromoCode
from storefront.promotion.promo import PromoCode
from storefront.promotion.validator import PromoRejection, validate_promo


# ---------------------------------------------------------------------------
# Caller identity
# ---------------------------------------------------------------------------
def current_user_id(x_user_id: str = Header(default="")) -> str:
    user_id = x_user_id.strip()
    if not user_id:
        raise HTTPException(status_code=401, detail="unauthorized")
    return user_id


def require_admin(
    user_id: str = Depends(current_user_id),
    x_user_role: str = Header(default=""),
) -> str:
    if x_user_role.strip().lower() != "admin":
        raise HTTPException(status_code=403, detail="forbidden")
    return user_id


def _product_schema(product) -> ProductSchema:
    return ProductSchema(
        product_id=str(product.id),
        shop_id=str(product.shop_id),
        name=product.name,
        description=product.description,
        price_cents=product.price_cents,
        photo=product.photo,
    )


def _promo_schema(promo) -> PromoCodeSchema:
    return PromoCodeSchema(
        promo_id=str(promo.id),
        code=promo.code,
        percent_off=promo.percent_off,
        amount_off_cents=promo.amount_off_cents,
        product_id=str(promo.product_id) if promo.product_id is not None else None,
        starts_at=promo.starts_at,
        ends_at=promo.ends_at,
    )


# ---------------------------------------------------------------------------
# Shop & Product Routers
# ---------------------------------------------------------------------------
shop_router = APIRouter(prefix="/shops", tags=["catalogue"])
product_router = APIRouter(prefix="/products", tags=["catalogue"])


@shop_router.get("", response_model=list[ShopSchema])
async def list_shops() -> list[ShopSchema]:
    shops = current_domain.repository_for(Shop)._dao.query.all().items
    return [
        ShopSchema(shop_id=str(s.id), name=s.name, address=s.address, photo=s.photo)
        for s in sorted(shops, key=lambda s: s.name)
    ]


@shop_router.post("", status_code=201, response_model=ShopIdResponse)
async def open_shop(body: OpenShopRequest, _admin: str = Depends(require_admin)) -> ShopIdResponse:
    command = OpenShop(name=body.name, address=body.address, photo=body.photo)
    result = current_domain.process(command, asynchronous=False)
    return ShopIdResponse(shop_id=result)


@shop_router.get("/{shop_id}/products", response_model=list[ProductSchema])
async def list_shop_products(shop_id: str) -> list[ProductSchema]:
    products = current_domain.repository_for(Product).active_in_shop(shop_id)
    return [_product_schema(p) for p in products]


@shop_router.post("/{shop_id}/products", status_code=201, response_model=ProductIdResponse)
async def list_product(
    shop_id: str,
    body: ListProductRequest,
    _admin: str = Depends(require_admin),
) -> ProductIdResponse:
    command = ListProduct(
        shop_id=shop_id,
        name=body.name,
        description=body.description,
        price_cents=body.price_cents,
        photo=body.photo,
    )
    result = current_domain.process(command, asynchronous=False)
    return ProductIdResponse(product_id=result)


@product_router.put("/{product_id}", response_model=StatusResponse)
async def update_product(
    product_id: str,
    body: UpdateProductRequest,
    _admin: str = Depends(require_admin),
) -> StatusResponse:
    command = UpdateProduct(
        product_id=product_id,
        name=body.name,
        description=body.description,
        price_cents=body.price_cents,
        photo=body.photo,
    )
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@product_router.delete("/{product_id}", response_model=StatusResponse)
async def delist_product(product_id: str, _admin: str = Depends(require_admin)) -> StatusResponse:
    current_domain.process(DelistProduct(product_id=product_id), asynchronous=False)
    return StatusResponse()


# ---------------------------------------------------------------------------
# Cart Router
# ---------------------------------------------------------------------------
cart_router = APIRouter(prefix="/cart", tags=["cart"])


@cart_router.get("", response_model=CartResponse)
async def get_cart(user_id: str = Depends(current_user_id)) -> CartResponse:
    lines = CartStore().get_lines(user_id)
    return CartResponse(
        lines=[
            CartLineSchema(
                product_id=line.product_id,
                quantity=line.quantity,
                unit_price_cents=line.unit_price_cents,
                line_total_cents=line.line_total_cents,
            )
            for line in lines
        ],
        subtotal_cents=cart_subtotal(lines),
    )


@cart_router.post("/items", response_model=StatusResponse)
async def add_to_cart(body: AddToCartRequest, user_id: str = Depends(current_user_id)) -> StatusResponse:
    CartStore().add(user_id, str(body.product_id), body.quantity)
    return StatusResponse()


@cart_router.put("/items/{product_id}", response_model=StatusResponse)
async def set_cart_quantity(
    product_id: str,
    body: SetCartQuantityRequest,
    user_id: str = Depends(current_user_id),
) -> StatusResponse:
    CartStore().set_quantity(user_id, product_id, body.quantity)
    return StatusResponse()


# ---------------------------------------------------------------------------
# Promo Code Router
# ---------------------------------------------------------------------------
promo_router = APIRouter(prefix="/promos", tags=["promotions"])


@promo_router.get("", response_model=list[PromoCodeSchema])
async def list_promo_codes(_admin: str = Depends(require_admin)) -> list[PromoCodeSchema]:
    return [_promo_schema(p) for p in current_domain.repository_for(PromoCode).listing()]


@promo_router.post("", status_code=201, response_model=PromoIdResponse)
async def create_promo_code(body: PromoCodeRequest, _admin: str = Depends(require_admin)) -> PromoIdResponse:
    command = CreatePromoCode(
        code=body.code,
        percent_off=body.percent_off,
        amount_off_cents=body.amount_off_cents,
        product_id=str(body.product_id) if body.product_id is not None else None,
        starts_at=body.starts_at,
        ends_at=body.ends_at,
    )
    result = current_domain.process(command, asynchronous=False)
    return PromoIdResponse(promo_id=result)


@promo_router.put("/{promo_id}", response_model=StatusResponse)
async def revise_promo_code(
    promo_id: str,
    body: PromoCodeRequest,
    _admin: str = Depends(require_admin),
) -> StatusResponse:
    command = RevisePromoCode(
        promo_id=promo_id,
        code=body.code,
        percent_off=body.percent_off,
        amount_off_cents=body.amount_off_cents,
        product_id=str(body.product_id) if body.product_id is not None else None,
        starts_at=body.starts_at,
        ends_at=body.ends_at,
    )
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@promo_router.delete("/{promo_id}", response_model=StatusResponse)
async def delete_promo_code(promo_id: str, _admin: str = Depends(require_admin)) -> StatusResponse:
    current_domain.process(DeletePromoCode(promo_id=promo_id), asynchronous=False)
    return StatusResponse()


@promo_router.post("/validate", response_model=PromoValidationResponse)
async def validate_promo_code(
    body: ValidatePromoRequest,
    user_id: str = Depends(current_user_id),
) -> PromoValidationResponse:
    """Check a code against the caller's stored cart.

    Display-only: checkout validates the code again before charging.
    """
    assembler = CheckoutAssembler()
    validation = validate_promo(body.code, assembler.clock(), assembler.cart_store.product_ids(user_id))
    if isinstance(validation, PromoRejection):
        return PromoValidationResponse(
            valid=False,
            code=validation.code,
            reason=validation.reason.value,
            message=validation.message,
        )

    promo = validation.promo
    return PromoValidationResponse(
        valid=True,
        code=promo.code,
        percent_off=promo.percent_off,
        amount_off_cents=promo.amount_off_cents,
        product_id=promo.product_id,
    )


# ---------------------------------------------------------------------------
# Checkout Router
# ---------------------------------------------------------------------------
checkout_router = APIRouter(prefix="/checkout", tags=["checkout"])

_CHECKOUT_ERRORS = {
    400: {"model": CheckoutErrorResponse, "description": "Cart empty or promo code rejected"},
    502: {"model": CheckoutErrorResponse, "description": "Payment intent could not be created"},
}


@checkout_router.get("/quote", response_model=QuoteResponse, responses={400: _CHECKOUT_ERRORS[400]})
async def quote_checkout(promo_code: str | None = None, user_id: str = Depends(current_user_id)) -> QuoteResponse:
    quote = quote_cart(user_id, promo_code)
    return QuoteResponse(
        subtotal_cents=quote.subtotal_cents,
        discount_cents=quote.discount_cents,
        charge_cents=quote.charge_cents,
        promo_code=quote.promo.code if quote.promo else None,
    )


@checkout_router.post("", status_code=201, response_model=CheckoutResponse, responses=_CHECKOUT_ERRORS)
async def checkout(body: CheckoutRequest, user_id: str = Depends(current_user_id)) -> CheckoutResponse:
    """Create a payment intent for the server-computed total of the caller's cart."""
    charge = CheckoutAssembler().build_charge(user_id, body.promo_code)
    return CheckoutResponse(
        client_secret=charge.client_secret,
        intent_id=charge.intent_id,
        charge_cents=charge.charge_cents,
        currency=charge.currency,
    )


# ---------------------------------------------------------------------------
# Payment Gateway Router
# ---------------------------------------------------------------------------
payment_router = APIRouter(prefix="/payments", tags=["payments"])


@payment_router.post("/gateway/configure", response_model=GatewayConfigResponse)
async def configure_gateway(body: ConfigureGatewayRequest) -> GatewayConfigResponse:
    """Configure the FakeGateway behavior (non-production only)."""
    if os.environ.get("PROTEAN_ENV") == "production":
        raise HTTPException(status_code=403, detail="Gateway configuration not available in production")

    gateway = get_gateway()
    if not isinstance(gateway, FakeGateway):
        raise HTTPException(status_code=400, detail="Gateway configuration only available for FakeGateway")

    gateway.configure(should_succeed=body.should_succeed, failure_reason=body.failure_reason)
    return GatewayConfigResponse(
        gateway=type(gateway).__name__,
        should_succeed=gateway.should_succeed,
        failure_reason=gateway.failure_reason,
    )
