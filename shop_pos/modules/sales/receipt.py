"""
Receipt rendering for finalized sales.

HTML comes from a Jinja2 template under resources/templates/receipts; PDF is
produced from that HTML with WeasyPrint, which is imported only when a PDF is
actually requested.
"""
from __future__ import annotations

import logging
from pathlib import Path

from jinja2 import Environment

from ...config import BASE_DIR, ShopConfig, TotalPolicy
from ...constants import DATETIME_DISPLAY_FORMAT, RECEIPT_TEMPLATE_PATH, RECEIPT_TITLE
from ...database.repositories.sales_repo import FinalizedSale
from ...errors import ReceiptError
from ...utils.helpers import fmt_money, fmt_qty, sanitize_filename, to_local
from ...utils.loggers import get_audit_logger, log_event

_log = logging.getLogger(__name__)

# A4 with comfortable margins for printing
_RECEIPT_PDF_CSS = """
@page { size: A4; margin: 15mm 12mm; }
body { font-size: 11pt; }
"""


def receipt_filename(sale: FinalizedSale) -> str:
    """<customer>-<yyyy-mm-dd>-receipt-<short id>.pdf"""
    day = to_local(sale.created_at).date().isoformat()
    return f"{sanitize_filename(sale.customer_name, max_length=50)}-{day}-receipt-{sale.short_id}.pdf"


class ReceiptRenderer:
    def __init__(self, template_path: Path | str | None = None, audit_logger: logging.Logger | None = None):
        self.template_path = Path(template_path) if template_path else BASE_DIR / RECEIPT_TEMPLATE_PATH
        self.audit = audit_logger or get_audit_logger()
        self._env = Environment(autoescape=True)
        self._env.filters["money"] = fmt_money
        self._env.filters["qty"] = fmt_qty

    def _load_template(self):
        try:
            source = self.template_path.read_text(encoding="utf-8")
        except OSError as e:
            raise ReceiptError(f"Receipt template not found at: {self.template_path}") from e
        return self._env.from_string(source)

    def context(self, sale: FinalizedSale, config: ShopConfig) -> dict:
        logo_uri = None
        if config.logo_path and Path(config.logo_path).is_file():
            logo_uri = Path(config.logo_path).resolve().as_uri()
        has_shipping = sale.shipping_fee > 0
        return {
            "title": RECEIPT_TITLE,
            "shop_name": config.display_name,
            "logo_uri": logo_uri,
            "sale": sale,
            "receipt_no": sale.short_id,
            "created_at": to_local(sale.created_at).strftime(DATETIME_DISPLAY_FORMAT),
            "items": sale.items,
            "has_shipping": has_shipping,
            # the policy stored with the sale, not today's setting
            "shipping_included": has_shipping and sale.total_policy == TotalPolicy.SHIPPING_INCLUDED,
        }

    def render_html(self, sale: FinalizedSale, config: ShopConfig) -> str:
        template = self._load_template()
        return template.render(**self.context(sale, config))

    def render_pdf(self, sale: FinalizedSale, config: ShopConfig) -> bytes:
        html_content = self.render_html(sale, config)
        try:
            from weasyprint import CSS, HTML
        except (ImportError, OSError) as e:
            raise ReceiptError("WeasyPrint is not available. Please install WeasyPrint: pip install weasyprint") from e
        doc = HTML(string=html_content, base_url=str(BASE_DIR))
        return doc.write_pdf(stylesheets=[CSS(string=_RECEIPT_PDF_CSS)])

    def export_pdf(self, sale: FinalizedSale, config: ShopConfig, target_dir: Path | str) -> Path:
        pdf = self.render_pdf(sale, config)
        target = Path(target_dir) / receipt_filename(sale)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(pdf)
        except OSError as e:
            raise ReceiptError(f"Could not write receipt: {e}") from e
        log_event(
            self.audit, "receipt", "export", "receipt exported",
            {"sale_id": sale.sale_id, "path": str(target)},
        )
        _log.info("receipt for %s written to %s", sale.sale_id, target)
        return target
