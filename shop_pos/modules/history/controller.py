import logging
import sqlite3
from PySide6.QtWidgets import QWidget
from ..base_module import BaseModule
from .view import HistoryView
from .model import SalesHistoryModel, SaleItemsModel
from .summary import filter_sales, summarize
from ..sales.receipt import ReceiptRenderer
from ...database.repositories import SalesRepo, ShopProfileRepo
from ...errors import DomainError, ReceiptError
from ...utils.helpers import fmt_money
from ...utils.ui_helpers import info, error, confirm
from ...widgets.receipt_preview import ReceiptPreview

_log = logging.getLogger(__name__)


class HistoryController(BaseModule):
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
        self.repo = SalesRepo(conn)
        self.profile_repo = profile_repo or ShopProfileRepo(conn)
        self.renderer = ReceiptRenderer(audit_logger=audit_logger)
        self.view = HistoryView()
        self.model = SalesHistoryModel()
        self.items_model = SaleItemsModel()
        self.view.table.setModel(self.model)
        self.view.items.setModel(self.items_model)
        self._sales = []
        self._wired = False
        self._connect_signals()
        self._reload()

    def get_widget(self) -> QWidget:
        return self.view

    def refresh(self):
        self._reload()

    def _connect_signals(self):
        if self._wired:
            return
        self.view.search.textChanged.connect(self._apply_filter)
        self.view.btn_refresh.clicked.connect(self._reload)
        self.view.btn_del.clicked.connect(self._delete)
        self.view.btn_receipt.clicked.connect(self._show_receipt)
        self.view.table.selectionModel().selectionChanged.connect(self._on_selection)
        self._wired = True

    def _reload(self):
        try:
            self._sales = self.repo.list_sales(self.owner_id)
        except DomainError as e:
            error(self.view, "History", str(e))
            self._sales = []
        s = summarize(self._sales)
        self.view.lbl_count.setText(str(s.count))
        self.view.lbl_today.setText(fmt_money(s.today_total))
        self.view.lbl_month.setText(fmt_money(s.month_total))
        self._apply_filter(self.view.search.text())

    def _apply_filter(self, text: str):
        self.model.replace(filter_sales(self._sales, text))
        self.view.table.resizeColumnsToContents()
        self.items_model.replace([])

    def _selected_sale(self):
        row = self.view.table.selected_row()
        return self.model.at(row) if row is not None else None

    def _on_selection(self, *_):
        sale = self._selected_sale()
        self.items_model.replace(sale.items if sale else [])

    def _show_receipt(self):
        sale = self._selected_sale()
        if sale is None:
            info(self.view, "Select", "Please select a sale.")
            return
        try:
            config = self.profile_repo.get(self.owner_id).to_config()
            dlg = ReceiptPreview(self.renderer, sale, config, self.view)
        except (DomainError, ReceiptError) as e:
            error(self.view, "Receipt", str(e))
            return
        dlg.exec()

    def _delete(self):
        sale = self._selected_sale()
        if sale is None:
            info(self.view, "Select", "Please select a sale to delete.")
            return
        if not confirm(self.view, "Delete sale", f"Delete sale #{sale.short_id}? This cannot be undone."):
            return
        try:
            self.repo.delete_sale(self.owner_id, sale.sale_id)
        except DomainError as e:
            error(self.view, "Not deleted", str(e))
            return
        _log.info("sale %s deleted from history", sale.sale_id)
        self._reload()
