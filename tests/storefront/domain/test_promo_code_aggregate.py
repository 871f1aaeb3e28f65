"""Tests for the PromoCode aggregate."""

from datetime import UTC, datetime, timedelta

import pytest
from protean.exceptions import ValidationError
from storefront.promotion.events import PromoCodeCreated, PromoCodeRevised
from storefront.promotion.promo import PromoCode, as_utc, normalize_code, product_scope

START = datetime(2026, 6, 1, tzinfo=UTC)
END = datetime(2026, 8, 31, tzinfo=UTC)


class TestHelpers:
    def test_normalize_code(self):
        assert normalize_code("  winter10 ") == "WINTER10"

    def test_normalize_blank(self):
        assert normalize_code(None) == ""
        assert normalize_code("   ") == ""

    def test_as_utc_keeps_aware_instant(self):
        aware = datetime(2026, 6, 1, 10, tzinfo=UTC)
        assert as_utc(aware) == aware

    def test_as_utc_tags_naive_values(self):
        assert as_utc(datetime(2026, 6, 1)).tzinfo is UTC

    @pytest.mark.parametrize("value", [None, "", "  ", 0, -3, "0"])
    def test_product_scope_none(self, value):
        assert product_scope(value) is None

    @pytest.mark.parametrize("value, expected", [(7, "7"), ("12", "12"), ("prod-abc", "prod-abc")])
    def test_product_scope_kept(self, value, expected):
        assert product_scope(value) == expected


class TestCreatePromoCode:
    def test_create_normalizes_code(self):
        promo = PromoCode.create(code=" summer ", percent_off=15)
        assert promo.code == "SUMMER"
        assert promo.percent_off == 15
        assert promo.applies_to_whole_cart()

    def test_create_raises_event(self):
        promo = PromoCode.create(code="SUMMER", amount_off_cents=500, product_id="p-1")
        events = [e for e in promo._events if isinstance(e, PromoCodeCreated)]
        assert len(events) == 1
        assert events[0].code == "SUMMER"
        assert events[0].amount_off_cents == 500
        assert events[0].product_id == "p-1"

    def test_blank_code_rejected(self):
        with pytest.raises(ValidationError) as exc:
            PromoCode.create(code="  ", percent_off=10)
        assert "code" in exc.value.messages

    def test_discount_required(self):
        with pytest.raises(ValidationError) as exc:
            PromoCode.create(code="NOTHING")
        assert "discount" in exc.value.messages

    def test_percent_above_hundred_rejected(self):
        with pytest.raises(ValidationError):
            PromoCode.create(code="TOOMUCH", percent_off=101)

    def test_non_positive_amount_rejected(self):
        with pytest.raises(ValidationError):
            PromoCode.create(code="ZERO", amount_off_cents=0)

    def test_window_must_be_ordered(self):
        with pytest.raises(ValidationError) as exc:
            PromoCode.create(code="BACKWARDS", percent_off=10, starts_at=END, ends_at=START)
        assert "ends_at" in exc.value.messages

    def test_non_positive_product_means_whole_cart(self):
        promo = PromoCode.create(code="ALL", percent_off=10, product_id=0)
        assert promo.product_id is None


class TestRevisePromoCode:
    def test_revise_replaces_terms(self):
        promo = PromoCode.create(code="SUMMER", percent_off=15)
        promo.revise(code="summer", amount_off_cents=300, product_id="p-2", starts_at=START, ends_at=END)
        assert promo.percent_off is None
        assert promo.amount_off_cents == 300
        assert promo.product_id == "p-2"
        assert promo.ends_at == END

    def test_revise_raises_event(self):
        promo = PromoCode.create(code="SUMMER", percent_off=15)
        promo.revise(code="SUMMER", percent_off=20)
        events = [e for e in promo._events if isinstance(e, PromoCodeRevised)]
        assert len(events) == 1
        assert events[0].percent_off == 20

    def test_revise_cannot_drop_every_discount(self):
        promo = PromoCode.create(code="SUMMER", percent_off=15)
        with pytest.raises(ValidationError):
            promo.revise(code="SUMMER")


class TestActivationWindow:
    def test_open_ended_promo_is_always_active(self):
        promo = PromoCode.create(code="ALWAYS", percent_off=5)
        now = datetime.now(UTC)
        assert promo.is_started(now)
        assert not promo.is_expired(now)

    def test_boundaries_are_inclusive(self):
        promo = PromoCode.create(code="WINDOW", percent_off=5, starts_at=START, ends_at=END)
        assert promo.is_started(START)
        assert not promo.is_expired(END)
        assert promo.is_expired(END + timedelta(microseconds=1))
        assert not promo.is_started(START - timedelta(microseconds=1))
