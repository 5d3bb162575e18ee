# shop_pos/utils/validators.py
from decimal import Decimal, InvalidOperation


def non_empty(text: str) -> bool:
    """
    True if `text` is not None/empty after stripping whitespace.
    """
    return bool(text and str(text).strip())


# ---- Numeric parsing & validators ----

def try_parse_decimal(x):
    """
    Best-effort parse to a finite Decimal.

    Floats go through str() so 0.1 becomes Decimal("0.1"), not its binary
    expansion. Blank strings, NaN and infinities are rejected. A comma is
    accepted as the decimal separator when no dot is present ("2,5").

    Returns:
        (ok: bool, value: Decimal|None)
    """
    if x is None or isinstance(x, bool):
        return False, None
    if isinstance(x, Decimal):
        val = x
    else:
        text = str(x).strip()
        if not text:
            return False, None
        if "," in text and "." not in text:
            text = text.replace(",", ".")
        try:
            val = Decimal(text)
        except (InvalidOperation, ValueError):
            return False, None
    if not val.is_finite():
        return False, None
    return True, val


