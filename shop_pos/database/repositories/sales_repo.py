from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
import logging
import sqlite3

from ...config import TotalPolicy
from ...constants import RECEIPT_SHORT_ID_LENGTH
from ...errors import LedgerError
from ...utils.helpers import new_sale_id, utc_now
from .products_repo import Unit

_log = logging.getLogger(__name__)


@dataclass(frozen=True)
class LineItemSnapshot:
    """A sold line, copied from the product at finalize time."""
    product_name: str
    quantity: Decimal
    unit: Unit
    unit_price: Decimal
    subtotal: Decimal
    product_id: int | None = None


@dataclass(frozen=True)
class FinalizedSaleInput:
    owner_id: str
    customer_name: str
    items: tuple[LineItemSnapshot, ...]
    subtotal: Decimal
    shipping_fee: Decimal
    shipping_weight_kg: Decimal
    total: Decimal
    total_policy: TotalPolicy = TotalPolicy.SHIPPING_EXCLUDED


@dataclass(frozen=True)
class FinalizedSale:
    sale_id: str
    owner_id: str
    customer_name: str
    subtotal: Decimal
    shipping_fee: Decimal
    shipping_weight_kg: Decimal
    total: Decimal
    created_at: datetime
    items: tuple[LineItemSnapshot, ...] = field(default_factory=tuple)
    total_policy: TotalPolicy = TotalPolicy.SHIPPING_EXCLUDED

    @property
    def short_id(self) -> str:
        """Receipt number shown to customers."""
        return self.sale_id[:RECEIPT_SHORT_ID_LENGTH]


class SalesRepo:
    """
    Sales ledger.

    Key behavior:
      - A sale and its items are written in one IMMEDIATE transaction; either
        everything lands or nothing does.
      - Finalized sales are never updated (the schema rejects UPDATEs); the only
        mutation after creation is an explicit delete.
      - Amounts are kept as exact decimal strings and come back as Decimal.
    """

    def __init__(self, conn: sqlite3.Connection):
        # ensure rows behave like dicts/tuples
        conn.row_factory = sqlite3.Row
        self.conn = conn

    @contextmanager
    def _immediate_tx(self):
        cur = self.conn.cursor()
        try:
            cur.execute("BEGIN IMMEDIATE")
            yield
            self.conn.commit()
        except Exception:
            self.conn.rollback()
            raise
        finally:
            cur.close()

    # ---------------------------------------------------------------------
    # WRITE
    # ---------------------------------------------------------------------
    def create_sale(self, data: FinalizedSaleInput) -> FinalizedSale:
        if not data.items:
            raise LedgerError("A sale needs at least one item.")
        if not (data.customer_name or "").strip():
            raise LedgerError("A sale needs a customer name.")

        sale_id = new_sale_id()
        created_at = utc_now()
        try:
            with self._immediate_tx():
                self.conn.execute(
                    """
                    INSERT INTO sales(
                        sale_id, owner_id, customer_name, subtotal, shipping_fee,
                        shipping_weight_kg, total, total_policy, created_at
                    ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        sale_id,
                        data.owner_id,
                        data.customer_name.strip(),
                        str(data.subtotal),
                        str(data.shipping_fee),
                        str(data.shipping_weight_kg),
                        str(data.total),
                        TotalPolicy(data.total_policy).value,
                        created_at.isoformat(),
                    ),
                )
                self.conn.executemany(
                    """
                    INSERT INTO sale_items(
                        sale_id, position, product_id, product_name, quantity,
                        unit, unit_price, subtotal
                    ) VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    [
                        (
                            sale_id,
                            pos,
                            it.product_id,
                            it.product_name,
                            str(it.quantity),
                            Unit(it.unit).value,
                            str(it.unit_price),
                            str(it.subtotal),
                        )
                        for pos, it in enumerate(data.items)
                    ],
                )
        except sqlite3.Error as e:
            raise LedgerError(f"Could not save sale: {e}") from e

        _log.info("sale %s stored (%d items) for %s", sale_id, len(data.items), data.owner_id)
        return FinalizedSale(
            sale_id=sale_id,
            owner_id=data.owner_id,
            customer_name=data.customer_name.strip(),
            subtotal=data.subtotal,
            shipping_fee=data.shipping_fee,
            shipping_weight_kg=data.shipping_weight_kg,
            total=data.total,
            created_at=created_at,
            items=tuple(data.items),
            total_policy=TotalPolicy(data.total_policy),
        )

    def delete_sale(self, owner_id: str, sale_id: str) -> None:
        try:
            with self._immediate_tx():
                cur = self.conn.execute(
                    "DELETE FROM sales WHERE owner_id=? AND sale_id=?",
                    (owner_id, sale_id),
                )
                changed = cur.rowcount
        except sqlite3.Error as e:
            raise LedgerError(f"Could not delete sale: {e}") from e
        if not changed:
            raise LedgerError(f"Sale {sale_id} not found.")
        _log.info("sale %s deleted for %s", sale_id, owner_id)

    # ---------------------------------------------------------------------
    # READ
    # ---------------------------------------------------------------------
    def list_sales(self, owner_id: str) -> list[FinalizedSale]:
        """All sales of one shop, newest first, items included."""
        try:
            headers = self.conn.execute(
                "SELECT * FROM sales WHERE owner_id=? ORDER BY created_at DESC, sale_id",
                (owner_id,),
            ).fetchall()
            item_rows = self.conn.execute(
                """
                SELECT si.*
                FROM sale_items si
                JOIN sales s ON s.sale_id = si.sale_id
                WHERE s.owner_id = ?
                ORDER BY si.sale_id, si.position
                """,
                (owner_id,),
            ).fetchall()
        except sqlite3.Error as e:
            raise LedgerError(f"Could not load sales: {e}") from e

        items: dict[str, list[LineItemSnapshot]] = {}
        for r in item_rows:
            items.setdefault(r["sale_id"], []).append(self._item_from_row(r))
        return [self._sale_from_row(h, items.get(h["sale_id"], [])) for h in headers]

    def get_sale(self, owner_id: str, sale_id: str) -> FinalizedSale | None:
        try:
            h = self.conn.execute(
                "SELECT * FROM sales WHERE owner_id=? AND sale_id=?",
                (owner_id, sale_id),
            ).fetchone()
            if h is None:
                return None
            rows = self.conn.execute(
                "SELECT * FROM sale_items WHERE sale_id=? ORDER BY position",
                (sale_id,),
            ).fetchall()
        except sqlite3.Error as e:
            raise LedgerError(f"Could not load sale: {e}") from e
        return self._sale_from_row(h, [self._item_from_row(r) for r in rows])

    # ---------------------------------------------------------------------
    # row mapping
    # ---------------------------------------------------------------------
    @staticmethod
    def _item_from_row(r: sqlite3.Row) -> LineItemSnapshot:
        return LineItemSnapshot(
            product_name=r["product_name"],
            quantity=Decimal(r["quantity"]),
            unit=Unit(r["unit"]),
            unit_price=Decimal(r["unit_price"]),
            subtotal=Decimal(r["subtotal"]),
            product_id=r["product_id"],
        )

    @staticmethod
    def _sale_from_row(h: sqlite3.Row, items) -> FinalizedSale:
        return FinalizedSale(
            sale_id=h["sale_id"],
            owner_id=h["owner_id"],
            customer_name=h["customer_name"],
            subtotal=Decimal(h["subtotal"]),
            shipping_fee=Decimal(h["shipping_fee"]),
            shipping_weight_kg=Decimal(h["shipping_weight_kg"]),
            total=Decimal(h["total"]),
            created_at=datetime.fromisoformat(h["created_at"]),
            items=tuple(items),
            total_policy=TotalPolicy(h["total_policy"]),
        )
