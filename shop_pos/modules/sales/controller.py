from __future__ import annotations

import logging
import sqlite3

from PySide6.QtCore import Qt, Signal
from PySide6.QtWidgets import QListWidgetItem, QWidget

from ..base_module import BaseModule
from .composer import SaleComposer, SaleState
from .model import LineItemsModel
from .receipt import ReceiptRenderer
from .view import SaleView
from ...config import ShopConfig, TotalPolicy
from ...database.repositories import ProductsRepo, SalesRepo, ShopProfileRepo, Unit
from ...errors import DomainError, ReceiptError, ValidationError
from ...utils.helpers import fmt_money, fmt_qty
from ...utils.ui_helpers import info, error
from ...widgets.receipt_preview import ReceiptPreview

_log = logging.getLogger(__name__)

# composer messages -> what the cashier sees
_FINISH_HINTS = {
    "empty sale": "Add at least one product before finishing the sale.",
    "missing customer": "Enter the customer name before finishing the sale.",
}


class SalesController(BaseModule):
    """
    Drives the new-sale screen. Each sale session reads the shop settings
    once into a ShopConfig and snapshots the catalog; both stay fixed until
    the next session (New Sale, or returning to an untouched screen).
    """

    # emitted with the stored FinalizedSale
    sale_committed = Signal(object)

    def __init__(
        self,
        conn: sqlite3.Connection,
        owner_id: str,
        profile_repo: ShopProfileRepo | None = None,
        audit_logger: logging.Logger | None = None,
    ):
        super().__init__()
        self.conn = conn
        self.owner_id = owner_id
        self.products_repo = ProductsRepo(conn)
        self.sales_repo = SalesRepo(conn)
        self.profile_repo = profile_repo or ShopProfileRepo(conn)
        self.audit = audit_logger
        self.renderer = ReceiptRenderer(audit_logger=audit_logger)

        self.view = SaleView()
        self.items_model = LineItemsModel()
        self.view.items.setModel(self.items_model)

        self.config: ShopConfig | None = None
        self.composer: SaleComposer | None = None
        self._wired = False
        self._connect_signals()
        self.start_session()

    def get_widget(self) -> QWidget:
        return self.view

    def _connect_signals(self):
        if self._wired:
            return
        v = self.view
        v.search.textChanged.connect(self._populate_products)
        v.products.currentItemChanged.connect(self._on_product_changed)
        v.products.itemDoubleClicked.connect(lambda _item: v.quantity.setFocus())
        v.btn_add.clicked.connect(self._add_item)
        v.quantity.returnPressed.connect(self._add_item)
        v.weight.returnPressed.connect(self._add_item)
        v.btn_remove.clicked.connect(self._remove_item)
        v.shipping_weight.editingFinished.connect(self._on_shipping_weight_edited)
        v.customer.textEdited.connect(self._on_customer_edited)
        v.btn_finish.clicked.connect(self._finish)
        v.btn_new.clicked.connect(self.start_session)
        v.btn_receipt.clicked.connect(self._show_receipt)
        self._wired = True

    # ------------------------------------------------------------------
    # session
    # ------------------------------------------------------------------
    def start_session(self):
        """Fresh draft with the current shop settings and catalog."""
        try:
            self.config = self.profile_repo.get(self.owner_id).to_config()
        except DomainError as e:
            error(self.view, "Shop settings", str(e))
            self.config = ShopConfig(owner_id=self.owner_id)
        self.composer = SaleComposer(self.config, self.products_repo, self.sales_repo, self.audit)
        try:
            self.composer.load_catalog()
        except DomainError as e:
            error(self.view, "Products", f"Could not load products: {e}")

        v = self.view
        v.customer.clear()
        v.search.clear()
        v.quantity.clear()
        v.weight.clear()
        v.set_editable(True)
        v.lbl_status.setText("")
        self._populate_products(v.search.text())
        self._refresh_draft()

    def refresh(self):
        # pick up new settings/products while nothing has been entered yet
        c = self.composer
        if c is None or (c.state == SaleState.EMPTY and not c.customer_name):
            self.start_session()

    def reload_catalog(self):
        if self.composer is None or self.composer.state not in (SaleState.EMPTY, SaleState.COMPOSING):
            return
        try:
            self.composer.load_catalog()
        except DomainError as e:
            error(self.view, "Products", f"Could not load products: {e}")
            return
        self._populate_products(self.view.search.text())

    # ------------------------------------------------------------------
    # product picking
    # ------------------------------------------------------------------
    def _populate_products(self, text: str = ""):
        lst = self.view.products
        lst.clear()
        for p in self.composer.select_product(text):
            item = QListWidgetItem(f"{p.name}  -  {fmt_money(p.price)}/{p.unit.value}")
            item.setData(Qt.UserRole, p)
            lst.addItem(item)
        if lst.count():
            lst.setCurrentRow(0)
        else:
            self._on_product_changed(None, None)

    def _selected_product(self):
        item = self.view.products.currentItem()
        return item.data(Qt.UserRole) if item is not None else None

    def _on_product_changed(self, current, _previous):
        v = self.view
        p = current.data(Qt.UserRole) if current is not None else None
        is_count = p is not None and p.unit == Unit.COUNT
        v.weight.setEnabled(is_count and self.composer.state not in (SaleState.COMMITTED, SaleState.FINALIZING))
        v.lbl_qty_unit.setText(p.unit.value if p is not None else "")
        if p is None:
            v.lbl_weight_hint.setText("")
        elif is_count:
            v.lbl_weight_hint.setText("Enter the total weight of these units to calculate shipping.")
        else:
            v.weight.clear()
            v.lbl_weight_hint.setText("Sold by weight: the quantity is the weight.")

    # ------------------------------------------------------------------
    # draft editing
    # ------------------------------------------------------------------
    def _add_item(self):
        product = self._selected_product()
        if product is None:
            info(self.view, "Select", "Please select a product to add.")
            return
        v = self.view
        weight = v.weight.text() if product.unit == Unit.COUNT else None
        try:
            self.composer.add_line_item(product, v.quantity.text(), weight)
        except ValidationError as e:
            error(self.view, "Invalid item", str(e))
            return
        except DomainError as e:
            error(self.view, "Sale", str(e))
            return
        v.quantity.clear()
        v.weight.clear()
        self._refresh_draft()

    def _remove_item(self):
        row = self.view.items.selected_row()
        if row is None:
            info(self.view, "Select", "Please select an item to remove.")
            return
        try:
            self.composer.remove_line_item(row)
        except IndexError:
            info(self.view, "Select", "Please select an item to remove.")
            return
        except DomainError as e:
            error(self.view, "Sale", str(e))
            return
        self._refresh_draft()

    def _on_shipping_weight_edited(self) -> bool:
        """Apply the typed shipping weight; False if it was rejected."""
        text = self.view.shipping_weight.text()
        if text.strip() == fmt_qty(self.composer.shipping_weight_kg):
            return True
        try:
            self.composer.set_shipping_weight(text)
        except DomainError as e:
            error(self.view, "Invalid shipping weight", str(e))
            self._refresh_draft()
            return False
        self._refresh_draft()
        return True

    def _on_customer_edited(self, text: str):
        try:
            self.composer.set_customer_name(text)
        except DomainError as e:
            _log.debug("customer name not applied: %s", e)

    # ------------------------------------------------------------------
    # finish / receipt
    # ------------------------------------------------------------------
    def _finish(self):
        if not self._on_shipping_weight_edited():
            return
        try:
            self.composer.set_customer_name(self.view.customer.text())
            sale = self.composer.finish()
        except ValidationError as e:
            error(self.view, "Cannot finish sale", _FINISH_HINTS.get(str(e), str(e)))
            return
        except DomainError as e:
            self.view.lbl_status.setText("Sale not saved. You can try again.")
            error(self.view, "Sale not saved", str(e))
            return

        self.view.set_editable(False)
        self.view.lbl_status.setText(f"Sale #{sale.short_id} saved.")
        info(self.view, "Saved", f"Sale #{sale.short_id} saved. Total: {fmt_money(sale.total)}")
        self.sale_committed.emit(sale)

    def _show_receipt(self):
        sale = self.composer.committed_sale if self.composer else None
        if sale is None:
            return
        try:
            dlg = ReceiptPreview(self.renderer, sale, self.config, self.view)
        except ReceiptError as e:
            error(self.view, "Receipt", str(e))
            return
        dlg.exec()

    # ------------------------------------------------------------------
    # rendering
    # ------------------------------------------------------------------
    def _refresh_draft(self):
        c = self.composer
        v = self.view
        self.items_model.replace(c.line_items)
        v.items.resizeColumnsToContents()

        t = c.totals()
        rate = self.config.shipping_price_per_kg
        v.lbl_subtotal.setText(fmt_money(t.subtotal))
        v.lbl_items_weight.setText(fmt_qty(t.total_weight_kg))
        v.shipping_weight.setText(fmt_qty(t.shipping_weight_kg))
        v.lbl_shipping_fee.setText(
            f"{fmt_money(t.shipping_fee)} ({fmt_qty(t.shipping_weight_kg)} kg × {fmt_money(rate)}/kg)"
        )
        v.lbl_total.setText(fmt_money(t.total))
        if self.config.total_policy == TotalPolicy.SHIPPING_INCLUDED:
            v.lbl_policy.setText("Shipping is included in the total.")
        else:
            v.lbl_policy.setText("Shipping is charged separately (not in the total).")
