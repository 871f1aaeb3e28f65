import pytest
from protean import current_domain
from protean.integrations.pytest import DomainFixture


@pytest.fixture(scope="session")
def storefront_bed():
    from storefront.domain import storefront

    bed = DomainFixture(storefront)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(storefront_bed):
    with storefront_bed.domain_context():
        yield


@pytest.fixture()
def shop_id():
    from storefront.catalogue.management import OpenShop

    return current_domain.process(OpenShop(name="Corner Shop"), asynchronous=False)


@pytest.fixture()
def list_product(shop_id):
    """Factory: list a product in the test shop and return its id."""
    from storefront.catalogue.management import ListProduct

    def _list(name="Widget", price_cents=1000, **kwargs):
        return current_domain.process(
            ListProduct(shop_id=shop_id, name=name, price_cents=price_cents, **kwargs),
            asynchronous=False,
        )

    return _list


@pytest.fixture()
def create_promo():
    """Factory: create a promo code through the admin command and return its id."""
    from storefront.promotion.management import CreatePromoCode

    def _create(code="SAVE10", **kwargs):
        return current_domain.process(CreatePromoCode(code=code, **kwargs), asynchronous=False)

    return _create
