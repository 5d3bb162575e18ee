# tests/test_helpers_validators.py
import json
import logging
from decimal import Decimal

import pytest

from shop_pos.utils.helpers import fmt_money, fmt_qty, round_money, sanitize_filename
from shop_pos.utils.loggers import _JsonLineFormatter, log_event
from shop_pos.utils.validators import non_empty, try_parse_decimal


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("2.5", Decimal("2.5")),
        ("2,5", Decimal("2.5")),
        (" 3 ", Decimal("3")),
        (0.1, Decimal("0.1")),
        (7, Decimal("7")),
        (Decimal("1.10"), Decimal("1.10")),
    ],
)
def test_try_parse_decimal_ok(raw, expected):
    ok, val = try_parse_decimal(raw)
    assert ok and val == expected


@pytest.mark.parametrize("raw", [None, "", "  ", "abc", "NaN", "inf", True, "1.2.3"])
def test_try_parse_decimal_rejects(raw):
    assert try_parse_decimal(raw) == (False, None)


def test_non_empty():
    assert non_empty(" a ") and not non_empty("   ") and not non_empty(None)


def test_money_rounds_half_up_at_display():
    assert round_money(Decimal("2.675")) == Decimal("2.68")
    assert round_money(Decimal("2.665")) == Decimal("2.67")
    assert fmt_money(Decimal("1234.5")) == "1,234.50"
    assert fmt_money("0.005") == "0.01"
    assert fmt_money("oops") == "oops"
    assert fmt_money("oops", sentinel="N/A") == "N/A"
    with pytest.raises(ValueError):
        fmt_money("oops", strict=True)


def test_fmt_qty():
    assert fmt_qty(Decimal("2.50")) == "2.5"
    assert fmt_qty(Decimal("100")) == "100"
    assert fmt_qty("3.0") == "3"


def test_sanitize_filename():
    assert sanitize_filename("Ana  Maria") == "Ana-Maria"
    assert sanitize_filename("a/b\\c:d") == "abcd"
    assert sanitize_filename("!!!").startswith("file_")
    assert len(sanitize_filename("x" * 300)) == 100


def test_json_line_formatter_includes_extra(caplog):
    logger = logging.getLogger("tests.audit.format")
    caplog.set_level(logging.INFO, logger="tests.audit.format")
    log_event(logger, "sale", "commit", "stored", {"sale_id": "abc", "op": "ignored"})
    rec = caplog.records[-1]
    line = json.loads(_JsonLineFormatter().format(rec))
    assert line["msg"] == "stored"
    assert line["level"] == "INFO"
    assert line["extra"] == {"op": "sale", "phase": "commit", "sale_id": "abc"}
    assert line["ts"].endswith("Z")
