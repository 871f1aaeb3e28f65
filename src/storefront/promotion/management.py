"""Promo code administration — commands and handler.

Only administrators reach these commands; the pricing engine never writes
promo codes.
"""

import structlog
from protean import handle
from protean.exceptions import ValidationError
from protean.fields import DateTime, Identifier, Integer, String
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.promotion.promo import PromoCode

logger = structlog.get_logger(__name__)

_DUPLICATE_CODE = {"code": ["A promo with that code already exists."]}


@storefront.command(part_of="PromoCode")
class CreatePromoCode:
    code = String(required=True, max_length=50)
    percent_off = Integer(min_value=1, max_value=100)
    amount_off_cents = Integer(min_value=1)
    product_id = Identifier()
    starts_at = DateTime()
    ends_at = DateTime()


@storefront.command(part_of="PromoCode")
class RevisePromoCode:
    promo_id = Identifier(required=True)
    code = String(required=True, max_length=50)
    percent_off = Integer(min_value=1, max_value=100)
    amount_off_cents = Integer(min_value=1)
    product_id = Identifier()
    starts_at = DateTime()
    ends_at = DateTime()


@storefront.command(part_of="PromoCode")
class DeletePromoCode:
    promo_id = Identifier(required=True)


@storefront.command_handler(part_of=PromoCode)
class ManagePromoCodesHandler:
    @handle(CreatePromoCode)
    def create_promo_code(self, command):
        repo = current_domain.repository_for(PromoCode)
        if repo.find_by_code(command.code) is not None:
            raise ValidationError(_DUPLICATE_CODE)

        promo = PromoCode.create(
            code=command.code,
            percent_off=command.percent_off,
            amount_off_cents=command.amount_off_cents,
            product_id=command.product_id,
            starts_at=command.starts_at,
            ends_at=command.ends_at,
        )
        repo.add(promo)
        return str(promo.id)

    @handle(RevisePromoCode)
    def revise_promo_code(self, command):
        repo = current_domain.repository_for(PromoCode)
        promo = repo.get(command.promo_id)

        clash = repo.find_by_code(command.code)
        if clash is not None and str(clash.id) != str(promo.id):
            raise ValidationError(_DUPLICATE_CODE)

        promo.revise(
            code=command.code,
            percent_off=command.percent_off,
            amount_off_cents=command.amount_off_cents,
            product_id=command.product_id,
            starts_at=command.starts_at,
            ends_at=command.ends_at,
        )
        repo.add(promo)

    @handle(DeletePromoCode)
    def delete_promo_code(self, command):
        repo = current_domain.repository_for(PromoCode)
        promo = repo.get(command.promo_id)
        repo._dao.delete(promo)
        logger.info("Promo code deleted", promo_id=str(promo.id), code=promo.code)
