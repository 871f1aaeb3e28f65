"""Shared BDD fixtures and step definitions for the Storefront."""

import pytest
from protean import current_domain
from pytest_bdd import given, parsers, then, when
from storefront.cart.store import CartStore, cart_subtotal
from storefront.catalogue.management import UpdateProduct
from storefront.checkout.assembler import build_charge, quote_cart
from storefront.checkout.errors import CheckoutError
from storefront.gateway import set_gateway
from storefront.gateway.fake_adapter import FakeGateway


# ---------------------------------------------------------------------------
# Scalar fixtures
# ---------------------------------------------------------------------------
@pytest.fixture()
def user_id():
    return "shopper-001"


@pytest.fixture()
def products():
    """Product ids keyed by the names used in the feature files."""
    return {}


@pytest.fixture()
def checkout():
    """Container for checkout outcomes: previewed quotes, created charges and the captured error."""
    return {"charges": [], "quotes": [], "exc": None}


@pytest.fixture()
def gateway():
    fake = FakeGateway()
    set_gateway(fake)
    return fake


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(parsers.cfparse('a product "{name}" priced at {price:d} cents'))
def product_priced_at(list_product, products, name, price):
    products[name] = list_product(name=name, price_cents=price)


@given(parsers.cfparse('the shopper has {qty:d} "{name}" in the cart'))
def shopper_has_in_cart(user_id, products, qty, name):
    CartStore().add(user_id, products[name], qty)


@given(parsers.cfparse('the price of "{name}" changes to {price:d} cents'))
def price_changes(products, name, price):
    current_domain.process(UpdateProduct(product_id=products[name], price_cents=price), asynchronous=False)


# ---------------------------------------------------------------------------
# When steps
# ---------------------------------------------------------------------------
def _check_out(user_id, promo_code, checkout):
    try:
        checkout["charges"].append(build_charge(user_id, promo_code))
    except CheckoutError as exc:
        checkout["exc"] = exc


@when(parsers.cfparse('the shopper previews the total with promo "{code}"'))
def preview_total(user_id, checkout, code):
    checkout["quotes"].append(quote_cart(user_id, code))


@when(parsers.cfparse('the shopper sets the quantity of "{name}" to {qty:d}'))
def set_quantity(user_id, products, name, qty):
    CartStore().set_quantity(user_id, products[name], qty)


@when(parsers.cfparse('the shopper checks out with promo "{code}"'))
def check_out_with_promo(user_id, gateway, checkout, code):
    _check_out(user_id, code, checkout)


@when("the shopper checks out without a promo")
def check_out_without_promo(user_id, gateway, checkout):
    _check_out(user_id, None, checkout)


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse("a payment intent is created for {amount:d} cents"))
def intent_created_for(checkout, amount):
    assert checkout["exc"] is None
    assert checkout["charges"][-1].charge_cents == amount


@then(parsers.cfparse("the previewed total was {amount:d} cents"))
def previewed_total(checkout, amount):
    assert checkout["quotes"][-1].charge_cents == amount


@then(parsers.cfparse("the gateway was asked to charge exactly {amount:d} cents"))
def gateway_charged_exactly(gateway, amount):
    assert [call["amount_cents"] for call in gateway.calls] == [amount]


@then(parsers.cfparse('checkout is rejected with "{reason}"'))
def checkout_rejected_with(checkout, reason):
    exc = checkout["exc"]
    assert exc is not None
    rejection = getattr(exc, "rejection", None)
    assert reason in (exc.reason, rejection.value if rejection else None)


@then("no payment intent is requested")
def no_intent_requested(gateway, checkout):
    assert checkout["charges"] == []
    assert gateway.calls == []


@then(parsers.cfparse("every payment intent was created for {amount:d} cents"))
def every_intent_for(gateway, checkout, amount):
    assert {charge.charge_cents for charge in checkout["charges"]} == {amount}
    assert {call["amount_cents"] for call in gateway.calls} == {amount}


@then(parsers.cfparse("{count:d} distinct payment intents were created"))
def distinct_intents(checkout, count):
    assert len({charge.intent_id for charge in checkout["charges"]}) == count


@then(parsers.cfparse("the cart subtotal is {amount:d} cents"))
def cart_subtotal_is(user_id, amount):
    assert cart_subtotal(CartStore().get_lines(user_id)) == amount
