"""Promo code lookups."""

from storefront.domain import storefront
from storefront.promotion.promo import PromoCode, normalize_code


@storefront.repository(part_of=PromoCode)
class PromoCodeRepository:
    def find_by_code(self, code) -> PromoCode | None:
        """Case-insensitive lookup; codes are stored upper-cased."""
        normalized = normalize_code(code)
        if not normalized:
            return None
        matches = self._dao.query.filter(code=normalized).all().items
        return matches[0] if matches else None

    def listing(self) -> list[PromoCode]:
        return sorted(self._dao.query.all().items, key=lambda p: p.code)
