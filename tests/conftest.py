# tests/conftest.py
# ---------------------------------------------------------------------
# Ground rules:
# - pytest-qt owns QApplication (use qapp/qtbot fixtures)
# - Qt runs offscreen so the suite works without a display
# - Every test gets its own SQLite file under tmp_path (schema applied
#   by get_connection), so nothing leaks between tests
# - conn.row_factory = sqlite3.Row, PRAGMA foreign_keys=ON
# - Provide repos, a shop config and in-memory catalog/ledger fakes
# ---------------------------------------------------------------------

from __future__ import annotations

import logging
import os
from decimal import Decimal

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest

from shop_pos.config import ShopConfig, TotalPolicy
from shop_pos.database import get_connection
from shop_pos.database.repositories import (
    FinalizedSale,
    Product,
    ProductsRepo,
    SalesRepo,
    ShopProfileRepo,
    Unit,
)
from shop_pos.utils.helpers import new_sale_id, utc_now

OWNER = "shop-1"


# ---------- Qt: let pytest-qt own the app ----------
@pytest.fixture(scope="session")
def app(qapp):  # alias to match code that expects an `app` fixture
    return qapp


# ---------- Per-test database ----------
@pytest.fixture()
def conn(tmp_path):
    con = get_connection(tmp_path / "shop.db")
    try:
        yield con
    finally:
        con.close()


@pytest.fixture()
def owner() -> str:
    return OWNER


@pytest.fixture()
def products_repo(conn) -> ProductsRepo:
    return ProductsRepo(conn)


@pytest.fixture()
def sales_repo(conn) -> SalesRepo:
    return SalesRepo(conn)


@pytest.fixture()
def profile_repo(conn, tmp_path) -> ShopProfileRepo:
    return ShopProfileRepo(conn, data_dir=tmp_path / "data")


# ---------- Domain objects ----------
@pytest.fixture()
def rice() -> Product:
    """Sold by weight, 10.00 per kg."""
    return Product(product_id=1, name="Rice", price=Decimal("10.00"), unit=Unit.WEIGHT)


@pytest.fixture()
def soap() -> Product:
    """Sold by unit, 5.00 each."""
    return Product(product_id=2, name="Soap Bar", price=Decimal("5.00"), unit=Unit.COUNT)


@pytest.fixture()
def config() -> ShopConfig:
    return ShopConfig(
        owner_id=OWNER,
        shop_name="Corner Shop",
        shipping_price_per_kg=Decimal("2.00"),
        total_policy=TotalPolicy.SHIPPING_EXCLUDED,
    )


@pytest.fixture()
def audit_logger() -> logging.Logger:
    """Propagating logger so caplog sees the structured events."""
    logger = logging.getLogger("tests.audit")
    logger.setLevel(logging.INFO)
    return logger


# ---------- Fakes for the external collaborators ----------
class FakeCatalog:
    def __init__(self, products=(), error: Exception | None = None):
        self.products = list(products)
        self.error = error
        self.calls = 0

    def list_products(self, owner_id):
        self.calls += 1
        if self.error is not None:
            raise self.error
        return list(self.products)


class FakeLedger:
    """Keeps created sales in memory; `fail_with` makes the next calls raise."""

    def __init__(self):
        self.inputs = []
        self.fail_with: Exception | None = None

    def create_sale(self, data):
        if self.fail_with is not None:
            raise self.fail_with
        self.inputs.append(data)
        return FinalizedSale(
            sale_id=new_sale_id(),
            owner_id=data.owner_id,
            customer_name=data.customer_name,
            subtotal=data.subtotal,
            shipping_fee=data.shipping_fee,
            shipping_weight_kg=data.shipping_weight_kg,
            total=data.total,
            created_at=utc_now(),
            items=data.items,
            total_policy=data.total_policy,
        )


@pytest.fixture()
def catalog(rice, soap) -> FakeCatalog:
    return FakeCatalog([rice, soap])


@pytest.fixture()
def ledger() -> FakeLedger:
    return FakeLedger()


