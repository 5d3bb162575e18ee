from decimal import Decimal
from pathlib import Path
import logging
import sqlite3
import sys

_log = logging.getLogger(__name__)

SQL = r"""
PRAGMA foreign_keys = ON;

/* ======================== CORE TABLES ======================== */

/* -------- shop profile (one row per shop account) -------- */
CREATE TABLE IF NOT EXISTS shop_profiles (
    owner_id              TEXT PRIMARY KEY,
    shop_name             TEXT NOT NULL,
    logo_path             TEXT,
    /* decimal string, >= 0 */
    shipping_price_per_kg TEXT NOT NULL DEFAULT '0',
    /* 0 = shipping charged apart from the total, 1 = shipping summed into it */
    shipping_in_total     INTEGER NOT NULL DEFAULT 0 CHECK (shipping_in_total IN (0,1)),
    updated_at            TEXT
);

/* -------- catalog -------- */
CREATE TABLE IF NOT EXISTS products (
    product_id INTEGER PRIMARY KEY AUTOINCREMENT,
    owner_id   TEXT NOT NULL,
    name       TEXT NOT NULL,
    price      TEXT NOT NULL,
    unit       TEXT NOT NULL CHECK (unit IN ('kg','un')),
    created_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP
);
CREATE INDEX IF NOT EXISTS idx_products_owner_name ON products(owner_id, name COLLATE NOCASE);

/* ======================== SALES LEDGER ======================== */

/* Finalized sales are immutable; items are snapshots, not product references. */
CREATE TABLE IF NOT EXISTS sales (
    sale_id            TEXT PRIMARY KEY,
    owner_id           TEXT NOT NULL,
    customer_name      TEXT NOT NULL CHECK (length(trim(customer_name)) > 0),
    subtotal           TEXT NOT NULL,
    shipping_fee       TEXT NOT NULL DEFAULT '0',
    shipping_weight_kg TEXT NOT NULL DEFAULT '0',
    total              TEXT NOT NULL,
    /* how shipping related to the total when the sale was made */
    total_policy       TEXT NOT NULL DEFAULT 'shipping_excluded'
                       CHECK (total_policy IN ('shipping_excluded','shipping_included')),
    created_at         TEXT NOT NULL
);
CREATE INDEX IF NOT EXISTS idx_sales_owner_created ON sales(owner_id, created_at);

CREATE TABLE IF NOT EXISTS sale_items (
    item_id      INTEGER PRIMARY KEY AUTOINCREMENT,
    sale_id      TEXT NOT NULL,
    position     INTEGER NOT NULL,
    product_id   INTEGER,
    product_name TEXT NOT NULL,
    quantity     TEXT NOT NULL,
    unit         TEXT NOT NULL CHECK (unit IN ('kg','un')),
    unit_price   TEXT NOT NULL,
    subtotal     TEXT NOT NULL,
    FOREIGN KEY (sale_id) REFERENCES sales(sale_id) ON DELETE CASCADE,
    UNIQUE (sale_id, position)
);
CREATE INDEX IF NOT EXISTS idx_sale_items_sale ON sale_items(sale_id);

/* a finalized sale is never updated */
DROP TRIGGER IF EXISTS trg_sales_immutable;
CREATE TRIGGER trg_sales_immutable
BEFORE UPDATE ON sales
BEGIN
  SELECT RAISE(ABORT, 'Finalized sales cannot be modified');
END;

DROP TRIGGER IF EXISTS trg_sale_items_immutable;
CREATE TRIGGER trg_sale_items_immutable
BEFORE UPDATE ON sale_items
BEGIN
  SELECT RAISE(ABORT, 'Finalized sale items cannot be modified');
END;
"""


def _ensure_sales_total_policy(conn: sqlite3.Connection) -> None:
    """
    Migration for databases whose `sales` table predates `total_policy`.
    Adds the column and marks old sales whose total already carries the
    shipping fee. No-op on fresh or migrated databases.
    """
    cols = {row[1] for row in conn.execute("PRAGMA table_info(sales);").fetchall()}
    if not cols or "total_policy" in cols:
        return
    # the immutability trigger is recreated by SQL right after
    conn.execute("DROP TRIGGER IF EXISTS trg_sales_immutable;")
    conn.execute(
        "ALTER TABLE sales ADD COLUMN total_policy TEXT NOT NULL DEFAULT 'shipping_excluded' "
        "CHECK (total_policy IN ('shipping_excluded','shipping_included'));"
    )
    included = [
        (sale_id,)
        for sale_id, subtotal, fee, total in conn.execute(
            "SELECT sale_id, subtotal, shipping_fee, total FROM sales"
        ).fetchall()
        if Decimal(fee) > 0 and Decimal(total) == Decimal(subtotal) + Decimal(fee)
    ]
    conn.executemany(
        "UPDATE sales SET total_policy='shipping_included' WHERE sale_id=?", included
    )
    _log.info("sales.total_policy added (%d sales marked shipping_included)", len(included))


def init_schema(db_path: Path | str = "shop.db") -> None:
    db_path = Path(db_path)
    db_path.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(db_path)
    try:
        conn.execute("PRAGMA journal_mode=WAL;")
        _ensure_sales_total_policy(conn)
        # Apply (idempotent) schema
        conn.executescript(SQL)
        conn.commit()
    finally:
        conn.close()
    _log.debug("schema applied to %s", db_path)


if __name__ == "__main__":
    from ..config import DB_PATH

    target = sys.argv[1] if len(sys.argv) > 1 else DB_PATH
    init_schema(target)
    print(f"✓ DB applied to {target}")
