# shop_pos/utils/helpers.py
from datetime import datetime, timezone
from decimal import Decimal, ROUND_HALF_UP
import logging
import re
import uuid
from typing import Union, Optional

NumberLike = Union[Decimal, float, int, str]

_log = logging.getLogger(__name__)

_CENTS = Decimal("0.01")


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def to_local(ts: datetime) -> datetime:
    """Convert an aware timestamp to local time; naive values are taken as UTC."""
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return ts.astimezone()


def round_money(v: Decimal, places: int = 2) -> Decimal:
    """Round half-up to `places` decimals (display/persist boundary only)."""
    q = _CENTS if places == 2 else Decimal(1).scaleb(-places)
    return v.quantize(q, rounding=ROUND_HALF_UP)


def fmt_money(
    v: NumberLike,
    places: int = 2,
    *,
    strict: bool = False,
    sentinel: Optional[str] = None,
) -> str:
    """
    Format a number as money with thousands separators and a fixed number of
    decimals, rounding half-up.

    Behavior on parse failure:
      - By default (strict=False, sentinel=None), returns str(v).
      - If `sentinel` is provided (e.g., "N/A"), returns that sentinel instead.
      - If `strict=True`, raises ValueError on parse failures.
    """
    try:
        x = v if isinstance(v, Decimal) else Decimal(str(v).replace(",", ""))
        if not x.is_finite():
            raise ValueError("not a finite number")
    except Exception as e:
        _log.debug("fmt_money: failed to parse %r as a number: %s", v, e)
        if strict:
            raise ValueError(f"Could not parse {v!r} as a number.") from e
        return str(sentinel) if sentinel is not None else str(v)
    return f"{round_money(x, places):,.{places}f}"


def fmt_qty(v: NumberLike) -> str:
    """Compact quantity/weight text: 2 -> '2', 2.50 -> '2.5'."""
    try:
        x = v if isinstance(v, Decimal) else Decimal(str(v))
    except Exception:
        return str(v)
    x = x.normalize()
    # normalize() turns 100 into 1E+2
    return f"{x:f}"


def new_sale_id() -> str:
    return uuid.uuid4().hex


def sanitize_filename(filename: str, max_length: int = 100) -> str:
    """
    Sanitize a string for safe use as a filename: runs of whitespace become
    '-', anything else outside [A-Za-z0-9-] is dropped, and the result is
    truncated. Falls back to a short random token when nothing is left.
    """
    cleaned = re.sub(r"[^A-Za-z0-9\s-]", "", filename or "")
    cleaned = re.sub(r"\s+", "-", cleaned.strip())
    cleaned = cleaned[:max_length].strip("-")
    if not cleaned:
        cleaned = f"file_{uuid.uuid4().hex[:8]}"
    return cleaned
