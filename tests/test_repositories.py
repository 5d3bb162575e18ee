# tests/test_repositories.py
import sqlite3
from dataclasses import replace
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from pathlib import Path

import pytest

from shop_pos.constants import LOGO_MAX_BYTES, SCHEMA_VERSION
from shop_pos.config import TotalPolicy
from shop_pos.database import get_connection
from shop_pos.database.repositories import FinalizedSaleInput, LineItemSnapshot, SalesRepo, Unit
from shop_pos.database.repositories import sales_repo as sales_repo_mod
from shop_pos.database.versioning import get_current_version
from shop_pos.errors import LedgerError, StoreError, ValidationError


def _sale_input(owner, customer="Ann", items=None):
    items = items if items is not None else (
        LineItemSnapshot("Rice", Decimal("2"), Unit.WEIGHT, Decimal("10.00"), Decimal("20.00"), 1),
        LineItemSnapshot("Soap Bar", Decimal("3"), Unit.COUNT, Decimal("5.00"), Decimal("15.00"), 2),
    )
    return FinalizedSaleInput(
        owner_id=owner,
        customer_name=customer,
        items=tuple(items),
        subtotal=Decimal("35.00"),
        shipping_fee=Decimal("6.00"),
        shipping_weight_kg=Decimal("3.0"),
        total=Decimal("35.00"),
    )


# ---------------- schema ----------------

def test_connection_records_schema_version(conn):
    assert get_current_version(conn) == SCHEMA_VERSION
    assert conn.execute("PRAGMA foreign_keys").fetchone()[0] == 1


# ---------------- products ----------------

def test_product_crud(products_repo, owner):
    p = products_repo.create_product(owner, "  Rice ", "10.5", "kg")
    assert p.product_id and p.name == "Rice" and p.price == Decimal("10.5") and p.unit is Unit.WEIGHT

    products_repo.create_product(owner, "apple", "3", Unit.COUNT)
    assert [x.name for x in products_repo.list_products(owner)] == ["apple", "Rice"]

    upd = products_repo.update_product(owner, p.product_id, "Rice 5kg", "49.90", "un")
    assert upd.unit is Unit.COUNT
    again = products_repo.get_product(owner, p.product_id)
    assert again == upd

    products_repo.delete_product(owner, p.product_id)
    assert products_repo.get_product(owner, p.product_id) is None


@pytest.mark.parametrize(
    "name, price, unit",
    [("", "1", "kg"), ("  ", "1", "kg"), ("X", "abc", "kg"), ("X", "-1", "kg"), ("X", "1", "box")],
)
def test_product_validation(products_repo, owner, name, price, unit):
    with pytest.raises(ValidationError):
        products_repo.create_product(owner, name, price, unit)
    assert products_repo.list_products(owner) == []


def test_products_are_scoped_by_owner(products_repo, owner):
    p = products_repo.create_product(owner, "Rice", "1", "kg")
    products_repo.create_product("other-shop", "Beans", "1", "kg")
    assert [x.name for x in products_repo.list_products(owner)] == ["Rice"]
    assert products_repo.get_product("other-shop", p.product_id) is None
    with pytest.raises(StoreError):
        products_repo.delete_product("other-shop", p.product_id)
    with pytest.raises(StoreError):
        products_repo.update_product("other-shop", p.product_id, "Hack", "0", "kg")


def test_list_products_wraps_sqlite_errors(products_repo, owner, conn):
    conn.execute("DROP TABLE products")
    with pytest.raises(StoreError):
        products_repo.list_products(owner)


# ---------------- sales ledger ----------------

def test_create_and_get_sale(sales_repo, owner):
    sale = sales_repo.create_sale(_sale_input(owner, customer="  Ann "))
    assert len(sale.sale_id) == 32
    assert sale.short_id == sale.sale_id[:8]
    assert sale.customer_name == "Ann"
    assert sale.created_at.tzinfo is not None

    stored = sales_repo.get_sale(owner, sale.sale_id)
    assert stored == sale
    assert stored.items[0].unit is Unit.WEIGHT
    assert stored.items[1].quantity == Decimal("3")


def test_sale_snapshot_survives_product_delete(sales_repo, products_repo, owner):
    p = products_repo.create_product(owner, "Rice", "10", "kg")
    item = LineItemSnapshot("Rice", Decimal("1"), Unit.WEIGHT, Decimal("10"), Decimal("10"), p.product_id)
    sale = sales_repo.create_sale(_sale_input(owner, items=[item]))
    products_repo.delete_product(owner, p.product_id)
    assert sales_repo.get_sale(owner, sale.sale_id).items[0].product_name == "Rice"


def test_create_sale_is_all_or_nothing(sales_repo, owner, conn):
    bad = LineItemSnapshot(None, Decimal("1"), Unit.WEIGHT, Decimal("1"), Decimal("1"))
    with pytest.raises(LedgerError):
        sales_repo.create_sale(_sale_input(owner, items=[bad]))
    assert conn.execute("SELECT COUNT(*) FROM sales").fetchone()[0] == 0
    assert conn.execute("SELECT COUNT(*) FROM sale_items").fetchone()[0] == 0


@pytest.mark.parametrize("kwargs", [{"items": []}, {"customer": "  "}])
def test_create_sale_rejects_incomplete_input(sales_repo, owner, kwargs):
    with pytest.raises(LedgerError):
        sales_repo.create_sale(_sale_input(owner, **kwargs))


def test_finalized_sales_cannot_be_updated(sales_repo, owner, conn):
    sale = sales_repo.create_sale(_sale_input(owner))
    with pytest.raises(sqlite3.DatabaseError):
        conn.execute("UPDATE sales SET total='0' WHERE sale_id=?", (sale.sale_id,))
    conn.rollback()
    assert sales_repo.get_sale(owner, sale.sale_id).total == Decimal("35.00")


def test_list_sales_newest_first_and_scoped(sales_repo, owner, monkeypatch):
    base = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)
    stamps = iter([base, base + timedelta(days=2), base + timedelta(days=1)])
    monkeypatch.setattr(sales_repo_mod, "utc_now", lambda: next(stamps))
    a = sales_repo.create_sale(_sale_input(owner, customer="A"))
    b = sales_repo.create_sale(_sale_input(owner, customer="B"))
    sales_repo.create_sale(_sale_input("other-shop", customer="C"))

    listed = sales_repo.list_sales(owner)
    assert [s.sale_id for s in listed] == [b.sale_id, a.sale_id]
    assert all(len(s.items) == 2 for s in listed)


def test_delete_sale_cascades_items(sales_repo, owner, conn):
    sale = sales_repo.create_sale(_sale_input(owner))
    with pytest.raises(LedgerError):
        sales_repo.delete_sale("other-shop", sale.sale_id)
    sales_repo.delete_sale(owner, sale.sale_id)
    assert sales_repo.get_sale(owner, sale.sale_id) is None
    assert conn.execute("SELECT COUNT(*) FROM sale_items").fetchone()[0] == 0


# ---------------- shop profile ----------------

def test_profile_defaults_and_update(profile_repo, owner):
    prof = profile_repo.get(owner)
    assert prof.shop_name == "My Shop"
    assert prof.shipping_price_per_kg == 0
    assert prof.shipping_in_total is False
    assert prof.to_config().total_policy is TotalPolicy.SHIPPING_EXCLUDED

    prof = profile_repo.update_settings(owner, " Corner Shop ", "2,50", True)
    assert prof.shop_name == "Corner Shop"
    assert prof.shipping_price_per_kg == Decimal("2.50")
    cfg = prof.to_config()
    assert cfg.total_policy is TotalPolicy.SHIPPING_INCLUDED
    assert cfg.shipping_price_per_kg == Decimal("2.50")
    assert cfg.owner_id == owner


@pytest.mark.parametrize("name, rate", [("", "1"), ("Shop", "-1"), ("Shop", "x")])
def test_profile_validation(profile_repo, owner, name, rate):
    with pytest.raises(ValidationError):
        profile_repo.update_settings(owner, name, rate, False)
    assert profile_repo.get(owner).shop_name == "My Shop"


def test_set_logo_copies_image(profile_repo, owner, tmp_path):
    src = tmp_path / "brand.PNG"
    src.write_bytes(b"\x89PNG fake")
    prof = profile_repo.set_logo(owner, src)
    assert prof.logo_path.endswith("logo.png")
    assert (profile_repo.data_dir / "logos" / owner / "logo.png").read_bytes() == b"\x89PNG fake"

    # a new logo with another extension replaces the old file
    jpg = tmp_path / "brand.jpg"
    jpg.write_bytes(b"jpg")
    prof = profile_repo.set_logo(owner, jpg)
    files = sorted(p.name for p in (profile_repo.data_dir / "logos" / owner).iterdir())
    assert files == ["logo.jpg"]


def test_set_logo_rejects_bad_files(profile_repo, owner, tmp_path):
    txt = tmp_path / "notes.txt"
    txt.write_text("hi")
    with pytest.raises(ValidationError):
        profile_repo.set_logo(owner, txt)

    big = tmp_path / "big.png"
    big.write_bytes(b"0" * (LOGO_MAX_BYTES + 1))
    with pytest.raises(ValidationError):
        profile_repo.set_logo(owner, big)

    with pytest.raises(ValidationError):
        profile_repo.set_logo(owner, tmp_path / "missing.png")
    assert profile_repo.get(owner).logo_path is None


def test_sale_keeps_its_total_policy(sales_repo, owner):
    plain = sales_repo.create_sale(_sale_input(owner))
    assert sales_repo.get_sale(owner, plain.sale_id).total_policy is TotalPolicy.SHIPPING_EXCLUDED

    data = replace(_sale_input(owner), total=Decimal("41.00"), total_policy=TotalPolicy.SHIPPING_INCLUDED)
    sale = sales_repo.create_sale(data)
    assert sale.total_policy is TotalPolicy.SHIPPING_INCLUDED
    assert sales_repo.get_sale(owner, sale.sale_id).total_policy is TotalPolicy.SHIPPING_INCLUDED


def test_older_sales_table_gains_total_policy(tmp_path):
    path = tmp_path / "old.db"
    old = sqlite3.connect(path)
    old.executescript(
        """
        CREATE TABLE sales (
            sale_id TEXT PRIMARY KEY, owner_id TEXT NOT NULL, customer_name TEXT NOT NULL,
            subtotal TEXT NOT NULL, shipping_fee TEXT NOT NULL DEFAULT '0',
            shipping_weight_kg TEXT NOT NULL DEFAULT '0', total TEXT NOT NULL,
            created_at TEXT NOT NULL
        );
        INSERT INTO sales VALUES ('a', 'shop-1', 'Ann', '35.00', '6.00', '3', '35.00', '2026-03-01T12:00:00+00:00');
        INSERT INTO sales VALUES ('b', 'shop-1', 'Bob', '35.00', '6.00', '3', '41.00', '2026-03-02T12:00:00+00:00');
        INSERT INTO sales VALUES ('c', 'shop-1', 'Cid', '10.00', '0', '0', '10.00', '2026-03-03T12:00:00+00:00');
        """
    )
    old.commit()
    old.close()

    conn = get_connection(path)
    try:
        repo = SalesRepo(conn)
        policies = {s.sale_id: s.total_policy for s in repo.list_sales("shop-1")}
        assert policies == {
            "a": TotalPolicy.SHIPPING_EXCLUDED,
            "b": TotalPolicy.SHIPPING_INCLUDED,
            "c": TotalPolicy.SHIPPING_EXCLUDED,
        }
        assert get_current_version(conn) == SCHEMA_VERSION
        with pytest.raises(sqlite3.DatabaseError):
            conn.execute("UPDATE sales SET total='0' WHERE sale_id='a'")
        conn.rollback()
    finally:
        conn.close()


def test_failed_logo_copy_keeps_previous_logo(profile_repo, owner, tmp_path):
    png = tmp_path / "brand.png"
    png.write_bytes(b"\x89PNG old")
    before = profile_repo.set_logo(owner, png)

    # a directory named like an image passes the checks but cannot be copied
    broken = tmp_path / "broken.jpg"
    broken.mkdir()
    with pytest.raises(StoreError):
        profile_repo.set_logo(owner, broken)

    after = profile_repo.get(owner)
    assert after.logo_path == before.logo_path
    assert Path(after.logo_path).read_bytes() == b"\x89PNG old"
    files = sorted(p.name for p in (profile_repo.data_dir / "logos" / owner).iterdir())
    assert files == ["logo.png"]
