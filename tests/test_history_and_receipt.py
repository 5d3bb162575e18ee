# tests/test_history_and_receipt.py
from datetime import datetime
from decimal import Decimal

import pytest

from shop_pos.config import ShopConfig, TotalPolicy
from shop_pos.database.repositories import FinalizedSale, LineItemSnapshot, Unit
from shop_pos.errors import ReceiptError
from shop_pos.modules.history.summary import filter_sales, summarize
from shop_pos.modules.sales.receipt import ReceiptRenderer, receipt_filename


def _local(*args) -> datetime:
    """Aware datetime for a local wall-clock time."""
    return datetime(*args).astimezone()


def _sale(sale_id, customer, created_at, total="35.00", subtotal=None, fee="6.00",
          policy=TotalPolicy.SHIPPING_EXCLUDED):
    subtotal = subtotal or total
    return FinalizedSale(
        sale_id=sale_id,
        owner_id="shop-1",
        customer_name=customer,
        subtotal=Decimal(subtotal),
        shipping_fee=Decimal(fee),
        shipping_weight_kg=Decimal("3.0"),
        total=Decimal(total),
        created_at=created_at,
        items=(
            LineItemSnapshot("Rice", Decimal("2"), Unit.WEIGHT, Decimal("10.00"), Decimal("20.00")),
            LineItemSnapshot("Soap <Bar>", Decimal("3"), Unit.COUNT, Decimal("5.00"), Decimal("15.00")),
        ),
        total_policy=policy,
    )


@pytest.fixture()
def history():
    return [
        _sale("abcdef1200000000000000000000000a", "Ana Maria", _local(2026, 3, 15, 12, 0), total="35.00"),
        _sale("99887766000000000000000000000000", "bruno", _local(2026, 3, 5, 9, 30), total="10.50"),
        _sale("11223344000000000000000000000000", "Carla", _local(2026, 2, 27, 18, 0), total="100.00"),
    ]


# ---------------- history ----------------

def test_summary_counts_today_and_month(history):
    s = summarize(history, now=_local(2026, 3, 15, 20, 0))
    assert s.count == 3
    assert s.today_total == Decimal("35.00")
    assert s.month_total == Decimal("45.50")


def test_summary_of_nothing():
    s = summarize([], now=_local(2026, 3, 15, 20, 0))
    assert (s.count, s.today_total, s.month_total) == (0, 0, 0)


@pytest.mark.parametrize(
    "term, expected",
    [
        ("", ["Ana Maria", "bruno", "Carla"]),
        ("ABCDEF12", ["Ana Maria"]),
        ("9988", ["bruno"]),
        ("BRU", ["bruno"]),
        ("maria", ["Ana Maria"]),
        ("15/03/2026", ["Ana Maria"]),
        ("/03/2026", ["Ana Maria", "bruno"]),
        ("nobody", []),
    ],
)
def test_filter_sales(history, term, expected):
    assert [s.customer_name for s in filter_sales(history, term)] == expected


def test_filter_does_not_match_beyond_short_id(history):
    # the receipt number is only the first 8 characters of the id
    assert filter_sales(history, "0000000a") == []


# ---------------- receipt ----------------

@pytest.fixture()
def renderer(audit_logger):
    return ReceiptRenderer(audit_logger=audit_logger)


def test_receipt_html_shipping_additional(renderer, history, config):
    html = renderer.render_html(history[0], config)
    assert "Corner Shop" in html
    assert "Ana Maria" in html
    assert "#abcdef12" in html
    assert "15/03/2026 12:00" in html
    assert "Shipping (additional)" in html
    assert "6.00" in html
    assert "TOTAL:" in html and "35.00" in html
    assert "2 kg" in html and "3 un" in html
    # item names are escaped
    assert "Soap &lt;Bar&gt;" in html


def test_receipt_html_shipping_included(renderer, config):
    sale = _sale("ffffffff00000000000000000000000f", "Ann", _local(2026, 3, 15, 8, 0),
                 total="41.00", subtotal="35.00", policy=TotalPolicy.SHIPPING_INCLUDED)
    html = renderer.render_html(sale, config)
    assert "Shipping (additional)" not in html
    assert "Shipping" in html and "41.00" in html


def test_receipt_shipping_label_follows_stored_policy(renderer, config):
    # a zero-priced basket under the excluded policy still reads as additional
    sale = _sale("dddddddd00000000000000000000000d", "Ann", _local(2026, 3, 15, 8, 0),
                 total="6.00", subtotal="0", fee="6.00")
    assert "Shipping (additional)" in renderer.render_html(sale, config)


def test_receipt_without_shipping_has_no_shipping_row(renderer, config):
    sale = _sale("eeeeeeee00000000000000000000000e", "Ann", _local(2026, 3, 15, 8, 0), fee="0")
    assert "Shipping" not in renderer.render_html(sale, config)


def test_receipt_shop_name_fallback_and_logo(renderer, history, tmp_path):
    logo = tmp_path / "logo.png"
    logo.write_bytes(b"\x89PNG")
    cfg = ShopConfig(owner_id="shop-1", shop_name="   ", logo_path=str(logo))
    html = renderer.render_html(history[0], cfg)
    assert "My Shop" in html
    assert logo.resolve().as_uri() in html

    missing = ShopConfig(owner_id="shop-1", logo_path=str(tmp_path / "gone.png"))
    assert "<img" not in renderer.render_html(history[0], missing)


def test_receipt_missing_template(history, config, tmp_path):
    r = ReceiptRenderer(template_path=tmp_path / "nope.html")
    with pytest.raises(ReceiptError):
        r.render_html(history[0], config)


def test_receipt_filename(history):
    assert receipt_filename(history[0]) == "Ana-Maria-2026-03-15-receipt-abcdef12.pdf"
    odd = _sale("12345678000000000000000000000000", "../../etc!", _local(2026, 1, 2, 10, 0))
    name = receipt_filename(odd)
    assert name.endswith("-2026-01-02-receipt-12345678.pdf")
    assert "/" not in name and ".." not in name


def test_export_pdf(renderer, history, config, tmp_path, caplog):
    try:
        import weasyprint  # noqa: F401
    except (ImportError, OSError):
        pytest.skip("WeasyPrint not usable here")
    caplog.set_level("INFO", logger="tests.audit")
    path = renderer.export_pdf(history[0], config, tmp_path / "out")
    assert path.name == receipt_filename(history[0])
    assert path.read_bytes().startswith(b"%PDF")
    events = [r.extra_payload for r in caplog.records if r.name == "tests.audit"]
    assert events[-1]["op"] == "receipt" and events[-1]["phase"] == "export"
