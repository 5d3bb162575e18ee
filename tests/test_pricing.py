# tests/test_pricing.py
from decimal import Decimal

import pytest

from shop_pos.config import ShopConfig, TotalPolicy
from shop_pos.errors import ValidationError
from shop_pos.modules.sales import pricing
from shop_pos.modules.sales.composer import DraftSale, LineItem


def _draft(rice, soap, shipping_weight=None):
    items = [
        LineItem(product=rice, quantity=Decimal("2"), weight_kg=Decimal("2")),
        LineItem(product=soap, quantity=Decimal("3"), weight_kg=Decimal("1.0")),
    ]
    d = DraftSale(customer_name="Ann", line_items=items)
    d.shipping_weight_kg = pricing.total_weight_kg(d) if shipping_weight is None else Decimal(shipping_weight)
    return d


def test_subtotal_and_weight(rice, soap):
    d = _draft(rice, soap)
    assert pricing.subtotal(d) == Decimal("35.00")
    assert pricing.total_weight_kg(d) == Decimal("3.0")


def test_shipping_fee_is_weight_times_rate(rice, soap):
    d = _draft(rice, soap)
    assert pricing.shipping_fee(d, Decimal("2.00")) == Decimal("6.00")


@pytest.mark.parametrize("weight", ["0", "-1"])
@pytest.mark.parametrize("rate", ["0", "2.00", "999"])
def test_shipping_fee_zero_without_weight(rice, soap, weight, rate):
    d = _draft(rice, soap, shipping_weight=weight)
    assert pricing.shipping_fee(d, Decimal(rate)) == 0


def test_total_policy_excluded_vs_included(rice, soap):
    d = _draft(rice, soap)
    rate = Decimal("2.00")
    assert pricing.total(d, rate, TotalPolicy.SHIPPING_EXCLUDED) == Decimal("35.00")
    assert pricing.total(d, rate, TotalPolicy.SHIPPING_INCLUDED) == Decimal("41.00")
    # default keeps shipping out of the total
    assert pricing.total(d, rate) == Decimal("35.00")


def test_compute_totals_uses_config(rice, soap, config):
    d = _draft(rice, soap)
    t = pricing.compute_totals(d, config)
    assert (t.subtotal, t.total_weight_kg, t.shipping_weight_kg) == (Decimal("35"), Decimal("3"), Decimal("3"))
    assert t.shipping_fee == Decimal("6.00")
    assert t.total == Decimal("35.00")

    included = ShopConfig(
        owner_id=config.owner_id,
        shipping_price_per_kg=config.shipping_price_per_kg,
        total_policy=TotalPolicy.SHIPPING_INCLUDED,
    )
    assert pricing.compute_totals(d, included).total == Decimal("41.00")


def test_manual_shipping_weight_drives_fee(rice, soap, config):
    d = _draft(rice, soap, shipping_weight="4.5")
    t = pricing.compute_totals(d, config)
    assert t.total_weight_kg == Decimal("3.0")
    assert t.shipping_fee == Decimal("9.00")


def test_empty_draft_totals(config):
    t = pricing.compute_totals(DraftSale(), config)
    assert t.subtotal == 0 and t.total == 0 and t.shipping_fee == 0


def test_no_cent_drift_over_many_items(config):
    from shop_pos.database.repositories import Product, Unit

    dime = Product(product_id=9, name="Candy", price=Decimal("0.10"), unit=Unit.COUNT)
    items = [LineItem(product=dime, quantity=Decimal("1"), weight_kg=Decimal("0.01")) for _ in range(1000)]
    d = DraftSale(line_items=items)
    assert pricing.subtotal(d) == Decimal("100.00")


def test_policy_flag_round_trip():
    assert TotalPolicy.from_flag(True) is TotalPolicy.SHIPPING_INCLUDED
    assert TotalPolicy.from_flag(0) is TotalPolicy.SHIPPING_EXCLUDED


def test_config_rejects_negative_rate():
    with pytest.raises(ValidationError):
        ShopConfig(owner_id="x", shipping_price_per_kg=Decimal("-0.01"))
