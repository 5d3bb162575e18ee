from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from pathlib import Path
import os

from .errors import ValidationError
from .constants import (
    AUDIT_LOG_FILE_NAME,
    DATA_DIR,
    DB_FILE_NAME,
    DEFAULT_SHOP_NAME,
    LOGS_DIR,
)

BASE_DIR = Path(__file__).resolve().parent
# data lives under the working directory unless SHOP_POS_DATA_DIR says otherwise
DATA_PATH = Path(os.environ.get("SHOP_POS_DATA_DIR") or (Path.cwd() / DATA_DIR))
DB_PATH = DATA_PATH / DB_FILE_NAME
LOGS_PATH = DATA_PATH / LOGS_DIR
AUDIT_LOG_PATH = LOGS_PATH / AUDIT_LOG_FILE_NAME


class TotalPolicy(str, Enum):
    """
    How the shipping fee relates to the sale total.

    SHIPPING_EXCLUDED: total = subtotal; shipping is charged and reported apart.
    SHIPPING_INCLUDED: total = subtotal + shipping fee.
    """
    SHIPPING_EXCLUDED = "shipping_excluded"
    SHIPPING_INCLUDED = "shipping_included"

    @classmethod
    def from_flag(cls, shipping_in_total) -> "TotalPolicy":
        return cls.SHIPPING_INCLUDED if bool(shipping_in_total) else cls.SHIPPING_EXCLUDED


@dataclass(frozen=True)
class ShopConfig:
    """
    Per-session shop settings handed to the pricing engine and sale composer.
    Read once when a sale session starts; never mutated afterwards.
    """
    owner_id: str
    shop_name: str = DEFAULT_SHOP_NAME
    logo_path: str | None = None
    shipping_price_per_kg: Decimal = Decimal("0")
    total_policy: TotalPolicy = TotalPolicy.SHIPPING_EXCLUDED

    def __post_init__(self):
        if self.shipping_price_per_kg < 0:
            raise ValidationError("Shipping price per kg cannot be negative.")

    @property
    def display_name(self) -> str:
        return (self.shop_name or "").strip() or DEFAULT_SHOP_NAME
