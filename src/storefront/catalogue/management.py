"""Catalogue management — commands and handlers for shops and products."""

from protean import handle
from protean.fields import Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from storefront.catalogue.product import Product
from storefront.catalogue.shop import Shop
from storefront.domain import storefront


@storefront.command(part_of="Shop")
class OpenShop:
    name = String(required=True, max_length=200)
    address = String(max_length=500)
    photo = String(max_length=500)


@storefront.command(part_of="Product")
class ListProduct:
    shop_id = Identifier(required=True)
    name = String(required=True, max_length=200)
    description = Text()
    price_cents = Integer(required=True, min_value=0)
    photo = String(max_length=500)


@storefront.command(part_of="Product")
class UpdateProduct:
    product_id = Identifier(required=True)
    name = String(max_length=200)
    description = Text()
    price_cents = Integer(min_value=0)
    photo = String(max_length=500)


@storefront.command(part_of="Product")
class DelistProduct:
    product_id = Identifier(required=True)


@storefront.command_handler(part_of=Shop)
class ManageShopsHandler:
    @handle(OpenShop)
    def open_shop(self, command):
        shop = Shop.open(name=command.name, address=command.address, photo=command.photo)
        current_domain.repository_for(Shop).add(shop)
        return str(shop.id)


@storefront.command_handler(part_of=Product)
class ManageProductsHandler:
    @handle(ListProduct)
    def list_product(self, command):
        # Raises ObjectNotFoundError for an unknown shop
        current_domain.repository_for(Shop).get(command.shop_id)

        product = Product.list_in_shop(
            shop_id=command.shop_id,
            name=command.name,
            price_cents=command.price_cents,
            description=command.description,
            photo=command.photo,
        )
        current_domain.repository_for(Product).add(product)
        return str(product.id)

    @handle(UpdateProduct)
    def update_product(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        product.update_details(
            name=command.name,
            description=command.description,
            photo=command.photo,
            price_cents=command.price_cents,
        )
        repo.add(product)

    @handle(DelistProduct)
    def delist_product(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        product.delist()
        repo.add(product)
