"""
Sale composer: builds one draft sale and commits it to the sales ledger.

States: EMPTY -> COMPOSING -> FINALIZING -> COMMITTED | FAILED

- Validation failures raise ValidationError and leave the draft untouched.
- finish() makes a single attempt; a ledger error moves the sale to FAILED,
  is re-raised as-is, and the draft stays editable so finish() can be retried.
- Once COMMITTED, the draft is frozen; discard() starts a new one.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
import logging
from typing import Iterator, Protocol, Sequence

from ...config import ShopConfig
from ...database.repositories.products_repo import Product, Unit
from ...database.repositories.sales_repo import (
    FinalizedSale,
    FinalizedSaleInput,
    LineItemSnapshot,
)
from ...errors import SaleStateError, ValidationError
from ...utils.helpers import fmt_money
from ...utils.loggers import get_audit_logger, log_event
from ...utils.validators import try_parse_decimal
from . import pricing

_log = logging.getLogger(__name__)


class SaleState(str, Enum):
    EMPTY = "empty"
    COMPOSING = "composing"
    FINALIZING = "finalizing"
    COMMITTED = "committed"
    FAILED = "failed"


@dataclass(frozen=True)
class LineItem:
    product: Product
    quantity: Decimal
    weight_kg: Decimal

    @property
    def subtotal(self) -> Decimal:
        return self.product.price * self.quantity

    def snapshot(self) -> LineItemSnapshot:
        return LineItemSnapshot(
            product_name=self.product.name,
            quantity=self.quantity,
            unit=self.product.unit,
            unit_price=self.product.price,
            subtotal=self.subtotal,
            product_id=self.product.product_id,
        )


@dataclass
class DraftSale:
    customer_name: str = ""
    line_items: list[LineItem] = field(default_factory=list)
    shipping_weight_kg: Decimal = Decimal("0")


class CatalogStore(Protocol):
    def list_products(self, owner_id: str) -> Sequence[Product]: ...


class SalesLedger(Protocol):
    def create_sale(self, data: FinalizedSaleInput) -> FinalizedSale: ...


class ProductMatches:
    """
    Products whose name contains the query (case-insensitive). Filtering runs
    lazily on each iteration, so the same object can be iterated again.
    """

    def __init__(self, products: Sequence[Product], query: str = ""):
        self._products = tuple(products)
        self.query = (query or "").strip()

    def __iter__(self) -> Iterator[Product]:
        needle = self.query.casefold()
        return (p for p in self._products if needle in p.name.casefold())


_EDITABLE = (SaleState.EMPTY, SaleState.COMPOSING, SaleState.FAILED)


class SaleComposer:
    def __init__(
        self,
        config: ShopConfig,
        catalog: CatalogStore,
        ledger: SalesLedger,
        audit_logger: logging.Logger | None = None,
    ):
        self.config = config
        self.catalog = catalog
        self.ledger = ledger
        self.audit = audit_logger or get_audit_logger()
        self._products: tuple[Product, ...] = ()
        self._draft = DraftSale()
        self._state = SaleState.EMPTY
        self._committed: FinalizedSale | None = None

    # ------------------------------------------------------------------
    # read access
    # ------------------------------------------------------------------
    @property
    def state(self) -> SaleState:
        return self._state

    @property
    def draft(self) -> DraftSale:
        return self._draft

    @property
    def line_items(self) -> tuple[LineItem, ...]:
        return tuple(self._draft.line_items)

    @property
    def customer_name(self) -> str:
        return self._draft.customer_name

    @property
    def shipping_weight_kg(self) -> Decimal:
        return self._draft.shipping_weight_kg

    @property
    def products(self) -> tuple[Product, ...]:
        return self._products

    @property
    def committed_sale(self) -> FinalizedSale | None:
        return self._committed

    def totals(self) -> pricing.SaleTotals:
        return pricing.compute_totals(self._draft, self.config)

    # ------------------------------------------------------------------
    # catalog
    # ------------------------------------------------------------------
    def load_catalog(self) -> tuple[Product, ...]:
        """Snapshot the shop's catalog once; StoreError propagates untouched."""
        self._products = tuple(self.catalog.list_products(self.config.owner_id))
        _log.debug("catalog loaded: %d products", len(self._products))
        return self._products

    def select_product(self, query: str = "") -> ProductMatches:
        return ProductMatches(self._products, query)

    # ------------------------------------------------------------------
    # draft mutations
    # ------------------------------------------------------------------
    def _require_editable(self):
        if self._state not in _EDITABLE:
            raise SaleStateError(f"Sale cannot be changed while {self._state.value}.")

    def _after_change(self):
        self._state = SaleState.COMPOSING if self._draft.line_items else SaleState.EMPTY

    def _sync_shipping_weight(self):
        self._draft.shipping_weight_kg = pricing.total_weight_kg(self._draft)

    def add_line_item(self, product: Product, quantity, weight_override=None) -> LineItem:
        self._require_editable()

        ok, qty = try_parse_decimal(quantity)
        if not ok:
            raise ValidationError("Quantity must be a number.")
        if qty <= 0:
            raise ValidationError("Quantity must be greater than zero.")

        if product.unit == Unit.COUNT:
            ok, weight = try_parse_decimal(weight_override)
            if not ok:
                raise ValidationError(f"Enter the weight in kg for '{product.name}'.")
            if weight <= 0:
                raise ValidationError("Weight must be greater than zero.")
        else:
            weight = qty

        item = LineItem(product=product, quantity=qty, weight_kg=weight)
        self._draft.line_items.append(item)
        self._sync_shipping_weight()
        self._after_change()
        return item

    def remove_line_item(self, index: int) -> LineItem:
        self._require_editable()
        if not isinstance(index, int) or not 0 <= index < len(self._draft.line_items):
            raise IndexError(f"No line item at position {index}.")
        item = self._draft.line_items.pop(index)
        self._sync_shipping_weight()
        self._after_change()
        return item

    def set_shipping_weight(self, value) -> Decimal:
        self._require_editable()
        ok, weight = try_parse_decimal(value)
        if not ok:
            raise ValidationError("Shipping weight must be a number.")
        if weight < 0:
            raise ValidationError("Shipping weight cannot be negative.")
        self._draft.shipping_weight_kg = weight
        self._after_change()
        return weight

    def set_customer_name(self, name: str) -> str:
        self._require_editable()
        self._draft.customer_name = (name or "").strip()
        self._after_change()
        return self._draft.customer_name

    def discard(self) -> None:
        """Drop the current draft (committed or not) and start an empty one."""
        self._draft = DraftSale()
        self._committed = None
        self._state = SaleState.EMPTY

    # ------------------------------------------------------------------
    # finish
    # ------------------------------------------------------------------
    def finish(self) -> FinalizedSale:
        if self._state not in _EDITABLE:
            raise SaleStateError(f"Sale is already {self._state.value}.")
        if not self._draft.line_items:
            raise ValidationError("empty sale")
        if not self._draft.customer_name.strip():
            raise ValidationError("missing customer")

        totals = self.totals()
        data = FinalizedSaleInput(
            owner_id=self.config.owner_id,
            customer_name=self._draft.customer_name.strip(),
            items=tuple(it.snapshot() for it in self._draft.line_items),
            subtotal=totals.subtotal,
            shipping_fee=totals.shipping_fee,
            shipping_weight_kg=totals.shipping_weight_kg,
            total=totals.total,
            total_policy=self.config.total_policy,
        )

        self._state = SaleState.FINALIZING
        try:
            sale = self.ledger.create_sale(data)
        except Exception as e:
            self._state = SaleState.FAILED
            log_event(
                self.audit, "sale", "failed", "sale could not be stored",
                {"owner_id": data.owner_id, "customer": data.customer_name, "error": str(e)},
                level=logging.ERROR,
            )
            raise

        self._state = SaleState.COMMITTED
        self._committed = sale
        log_event(
            self.audit, "sale", "commit", "sale stored",
            {
                "owner_id": sale.owner_id,
                "sale_id": sale.sale_id,
                "items": len(sale.items),
                "total": fmt_money(sale.total),
                "policy": self.config.total_policy.value,
            },
        )
        return sale
