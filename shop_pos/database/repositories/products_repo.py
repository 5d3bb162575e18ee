# shop_pos/database/repositories/products_repo.py
from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
import logging
import sqlite3

from ...errors import StoreError, ValidationError
from ...utils.validators import non_empty, try_parse_decimal

_log = logging.getLogger(__name__)


class Unit(str, Enum):
    """How a product is sold: by weight (kg) or by count (un)."""
    WEIGHT = "kg"
    COUNT = "un"

    @classmethod
    def parse(cls, value) -> "Unit":
        if isinstance(value, Unit):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ValidationError("Unit must be 'kg' or 'un'.") from None


@dataclass(frozen=True)
class Product:
    product_id: int | None
    name: str
    price: Decimal
    unit: Unit

    @classmethod
    def from_row(cls, r: sqlite3.Row) -> "Product":
        return cls(
            product_id=int(r["product_id"]),
            name=r["name"],
            price=Decimal(r["price"]),
            unit=Unit(r["unit"]),
        )


def _clean_product(name, price, unit) -> tuple[str, Decimal, Unit]:
    if not non_empty(name):
        raise ValidationError("Product name is required.")
    ok, value = try_parse_decimal(price)
    if not ok:
        raise ValidationError("Price must be a number.")
    if value < 0:
        raise ValidationError("Price cannot be negative.")
    return str(name).strip(), value, Unit.parse(unit)


class ProductsRepo:
    """
    Catalog store for one or more shop accounts. Every read and write is
    scoped by owner_id; sqlite failures surface as StoreError.
    """

    def __init__(self, conn: sqlite3.Connection):
        self.conn = conn
        # Use Row for named access
        self.conn.row_factory = sqlite3.Row

    # ---------------------------- TX helper ----------------------------

    @contextmanager
    def _immediate_tx(self):
        """
        Start an IMMEDIATE transaction (write lock once first write happens),
        commit on success, rollback on error.
        """
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

    # ---------------------------- Products ----------------------------

    def list_products(self, owner_id: str) -> list[Product]:
        try:
            rows = self.conn.execute(
                "SELECT product_id, name, price, unit "
                "FROM products WHERE owner_id=? "
                "ORDER BY name COLLATE NOCASE, product_id",
                (owner_id,),
            ).fetchall()
        except sqlite3.Error as e:
            raise StoreError(f"Could not load products: {e}") from e
        return [Product.from_row(r) for r in rows]

    def get_product(self, owner_id: str, product_id: int) -> Product | None:
        try:
            r = self.conn.execute(
                "SELECT product_id, name, price, unit "
                "FROM products WHERE owner_id=? AND product_id=?",
                (owner_id, product_id),
            ).fetchone()
        except sqlite3.Error as e:
            raise StoreError(f"Could not load product: {e}") from e
        return Product.from_row(r) if r else None

    def create_product(self, owner_id: str, name: str, price, unit) -> Product:
        name, price, unit = _clean_product(name, price, unit)
        try:
            with self._immediate_tx():
                cur = self.conn.execute(
                    "INSERT INTO products(owner_id, name, price, unit) VALUES (?, ?, ?, ?)",
                    (owner_id, name, str(price), unit.value),
                )
                product_id = int(cur.lastrowid)
        except sqlite3.Error as e:
            raise StoreError(f"Could not save product: {e}") from e
        _log.info("product %s created for %s", product_id, owner_id)
        return Product(product_id, name, price, unit)

    def update_product(self, owner_id: str, product_id: int, name: str, price, unit) -> Product:
        name, price, unit = _clean_product(name, price, unit)
        try:
            with self._immediate_tx():
                cur = self.conn.execute(
                    "UPDATE products SET name=?, price=?, unit=? "
                    "WHERE owner_id=? AND product_id=?",
                    (name, str(price), unit.value, owner_id, product_id),
                )
                changed = cur.rowcount
        except sqlite3.Error as e:
            raise StoreError(f"Could not update product: {e}") from e
        if not changed:
            raise StoreError(f"Product {product_id} not found.")
        return Product(product_id, name, price, unit)

    def delete_product(self, owner_id: str, product_id: int) -> None:
        """
        Finalized sales keep their own snapshot of name/price/unit, so a product
        can be removed from the catalog without touching the sales history.
        """
        try:
            with self._immediate_tx():
                cur = self.conn.execute(
                    "DELETE FROM products WHERE owner_id=? AND product_id=?",
                    (owner_id, product_id),
                )
                changed = cur.rowcount
        except sqlite3.Error as e:
            raise StoreError(f"Could not delete product: {e}") from e
        if not changed:
            raise StoreError(f"Product {product_id} not found.")
        _log.info("product %s deleted for %s", product_id, owner_id)
