"""BDD tests for checkout pricing and promo validation."""

from datetime import UTC, datetime, timedelta

from pytest_bdd import given, parsers, scenarios

scenarios("features/checkout_pricing.feature")


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(parsers.cfparse('a promo "{code}" with {percent:d} percent off'))
def whole_cart_percent_promo(create_promo, code, percent):
    create_promo(code=code, percent_off=percent)


@given(parsers.cfparse('a promo "{code}" with {amount:d} cents off'))
def whole_cart_amount_promo(create_promo, code, amount):
    create_promo(code=code, amount_off_cents=amount)


@given(parsers.cfparse('a promo "{code}" with {percent:d} percent off "{name}"'))
def product_percent_promo(create_promo, products, code, percent, name):
    create_promo(code=code, percent_off=percent, product_id=products[name])


@given(parsers.cfparse('a promo "{code}" with {percent:d} percent off "{name}" that expired yesterday'))
def expired_product_promo(create_promo, products, code, percent, name):
    now = datetime.now(UTC)
    create_promo(
        code=code,
        percent_off=percent,
        product_id=products[name],
        starts_at=now - timedelta(days=30),
        ends_at=now - timedelta(days=1),
    )


@given(parsers.cfparse('a promo "{code}" with {percent:d} percent off that starts tomorrow'))
def future_promo(create_promo, code, percent):
    create_promo(code=code, percent_off=percent, starts_at=datetime.now(UTC) + timedelta(days=1))
