from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from decimal import Decimal
from pathlib import Path
import logging
import os
import shutil
import sqlite3

from ...config import DATA_PATH, ShopConfig, TotalPolicy
from ...constants import DEFAULT_SHOP_NAME, LOGO_EXTENSIONS, LOGO_MAX_BYTES, LOGOS_DIR
from ...errors import StoreError, ValidationError
from ...utils.helpers import utc_now
from ...utils.validators import non_empty, try_parse_decimal

_log = logging.getLogger(__name__)


@dataclass(frozen=True)
class ShopProfile:
    owner_id: str
    shop_name: str
    logo_path: str | None
    shipping_price_per_kg: Decimal
    shipping_in_total: bool

    def to_config(self) -> ShopConfig:
        """Freeze the profile into the per-session config the sale composer uses."""
        return ShopConfig(
            owner_id=self.owner_id,
            shop_name=self.shop_name,
            logo_path=self.logo_path,
            shipping_price_per_kg=self.shipping_price_per_kg,
            total_policy=TotalPolicy.from_flag(self.shipping_in_total),
        )


class ShopProfileRepo:
    """
    One settings row per shop account. A missing row is created with defaults
    on first read so a fresh database is usable right away.
    """

    def __init__(self, conn: sqlite3.Connection, data_dir: Path | str | None = None):
        conn.row_factory = sqlite3.Row
        self.conn = conn
        self.data_dir = Path(data_dir) if data_dir is not None else DATA_PATH

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

    def get(self, owner_id: str) -> ShopProfile:
        try:
            with self._immediate_tx():
                self.conn.execute(
                    "INSERT OR IGNORE INTO shop_profiles(owner_id, shop_name) VALUES (?, ?)",
                    (owner_id, DEFAULT_SHOP_NAME),
                )
            r = self.conn.execute(
                "SELECT owner_id, shop_name, logo_path, shipping_price_per_kg, shipping_in_total "
                "FROM shop_profiles WHERE owner_id=?",
                (owner_id,),
            ).fetchone()
        except sqlite3.Error as e:
            raise StoreError(f"Could not load shop settings: {e}") from e
        return ShopProfile(
            owner_id=r["owner_id"],
            shop_name=r["shop_name"],
            logo_path=r["logo_path"],
            shipping_price_per_kg=Decimal(r["shipping_price_per_kg"]),
            shipping_in_total=bool(r["shipping_in_total"]),
        )

    def update_settings(
        self,
        owner_id: str,
        shop_name: str,
        shipping_price_per_kg,
        shipping_in_total: bool,
    ) -> ShopProfile:
        if not non_empty(shop_name):
            raise ValidationError("Shop name is required.")
        ok, rate = try_parse_decimal(shipping_price_per_kg)
        if not ok:
            raise ValidationError("Shipping price per kg must be a number.")
        if rate < 0:
            raise ValidationError("Shipping price per kg cannot be negative.")

        self.get(owner_id)
        try:
            with self._immediate_tx():
                self.conn.execute(
                    """
                    UPDATE shop_profiles
                    SET shop_name=?, shipping_price_per_kg=?, shipping_in_total=?, updated_at=?
                    WHERE owner_id=?
                    """,
                    (
                        str(shop_name).strip(),
                        str(rate),
                        1 if shipping_in_total else 0,
                        utc_now().isoformat(),
                        owner_id,
                    ),
                )
        except sqlite3.Error as e:
            raise StoreError(f"Could not save shop settings: {e}") from e
        _log.info("settings updated for %s", owner_id)
        return self.get(owner_id)

    def set_logo(self, owner_id: str, source: Path | str) -> ShopProfile:
        """
        Copy an image into <data>/logos/<owner>/logo.<ext> and remember its path.
        Only image files up to LOGO_MAX_BYTES are accepted.
        """
        src = Path(source)
        ext = src.suffix.lower()
        if ext not in LOGO_EXTENSIONS:
            raise ValidationError("Logo must be an image file (" + ", ".join(LOGO_EXTENSIONS) + ").")
        try:
            size = src.stat().st_size
        except OSError as e:
            raise ValidationError(f"Logo file not readable: {src}") from e
        if size > LOGO_MAX_BYTES:
            raise ValidationError("Logo must be 2 MB or smaller.")

        dest_dir = self.data_dir / LOGOS_DIR / owner_id
        dest = dest_dir / f"logo{ext}"
        # copy next to the target, then swap it in; the old logo stays until this succeeds
        tmp_dest = dest_dir / f".logo{ext}.part"
        try:
            dest_dir.mkdir(parents=True, exist_ok=True)
            shutil.copyfile(src, tmp_dest)
            os.replace(tmp_dest, dest)
        except OSError as e:
            if tmp_dest.exists():
                tmp_dest.unlink()
            raise StoreError(f"Could not store logo: {e}") from e

        self.get(owner_id)
        try:
            with self._immediate_tx():
                self.conn.execute(
                    "UPDATE shop_profiles SET logo_path=?, updated_at=? WHERE owner_id=?",
                    (str(dest), utc_now().isoformat(), owner_id),
                )
        except sqlite3.Error as e:
            raise StoreError(f"Could not save shop settings: {e}") from e

        # one logo per shop; drop a previous one saved with another extension
        for old in dest_dir.glob("logo.*"):
            if old != dest:
                try:
                    old.unlink()
                except OSError as e:
                    _log.warning("could not remove old logo %s: %s", old, e)
        _log.info("logo stored for %s at %s", owner_id, dest)
        return self.get(owner_id)
