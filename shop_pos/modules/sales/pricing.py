"""
Sale pricing: pure functions over a draft sale.

All arithmetic is exact Decimal; nothing is rounded here. Rounding happens
half-up to cents when amounts are displayed (utils.helpers.fmt_money).
Inputs are validated by the sale composer before they reach these functions.
"""
from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, Protocol

from ...config import ShopConfig, TotalPolicy

ZERO = Decimal("0")


class _PricedItem(Protocol):
    subtotal: Decimal
    weight_kg: Decimal


class _Draft(Protocol):
    line_items: Iterable[_PricedItem]
    shipping_weight_kg: Decimal


@dataclass(frozen=True)
class SaleTotals:
    subtotal: Decimal
    total_weight_kg: Decimal
    shipping_weight_kg: Decimal
    shipping_fee: Decimal
    total: Decimal


def subtotal(draft: _Draft) -> Decimal:
    return sum((it.subtotal for it in draft.line_items), ZERO)


def total_weight_kg(draft: _Draft) -> Decimal:
    return sum((it.weight_kg for it in draft.line_items), ZERO)


def shipping_fee(draft: _Draft, rate_per_kg: Decimal) -> Decimal:
    """weight x rate; zero when there is no shipping weight."""
    if draft.shipping_weight_kg <= 0:
        return ZERO
    return draft.shipping_weight_kg * rate_per_kg


def total(draft: _Draft, rate_per_kg: Decimal, policy: TotalPolicy = TotalPolicy.SHIPPING_EXCLUDED) -> Decimal:
    amount = subtotal(draft)
    if policy == TotalPolicy.SHIPPING_INCLUDED:
        amount += shipping_fee(draft, rate_per_kg)
    return amount


def compute_totals(draft: _Draft, config: ShopConfig) -> SaleTotals:
    rate = config.shipping_price_per_kg
    return SaleTotals(
        subtotal=subtotal(draft),
        total_weight_kg=total_weight_kg(draft),
        shipping_weight_kg=draft.shipping_weight_kg,
        shipping_fee=shipping_fee(draft, rate),
        total=total(draft, rate, config.total_policy),
    )
