import logging
import sqlite3
from PySide6.QtCore import Qt, QSortFilterProxyModel, QRegularExpression, Signal
from PySide6.QtWidgets import QWidget
from ..base_module import BaseModule
from .view import ProductView
from .form import ProductForm
from .model import ProductsTableModel
from ...database.repositories.products_repo import ProductsRepo
from ...errors import DomainError
from ...utils.ui_helpers import info, error, confirm

_log = logging.getLogger(__name__)


class ProductController(BaseModule):
    # emitted after any create/update/delete so other screens can refresh
    products_changed = Signal()

    def __init__(self, conn: sqlite3.Connection, owner_id: str):
        super().__init__()
        self.conn = conn
        self.owner_id = owner_id
        self.repo = ProductsRepo(conn)
        self.view = ProductView()
        self._wired = False  # ensure signals are connected only once
        self._connect_signals()
        self._reload()

    def get_widget(self) -> QWidget:
        return self.view

    def _connect_signals(self):
        if self._wired:
            return
        self.view.btn_add.clicked.connect(self._add)
        self.view.btn_edit.clicked.connect(self._edit)
        self.view.btn_del.clicked.connect(self._delete)
        self.view.search.textChanged.connect(self._apply_filter)
        self._wired = True

    def _build_model(self):
        try:
            rows = self.repo.list_products(self.owner_id)
        except DomainError as e:
            error(self.view, "Products", str(e))
            rows = []
        self.base_model = ProductsTableModel(rows)
        self.proxy = QSortFilterProxyModel(self.view)
        self.proxy.setSourceModel(self.base_model)
        self.proxy.setFilterCaseSensitivity(Qt.CaseInsensitive)
        self.proxy.setFilterKeyColumn(1)  # name
        self.view.table.setModel(self.proxy)
        self.view.table.resizeColumnsToContents()

    def _reload(self):
        self._build_model()
        self._apply_filter(self.view.search.text())

    def _apply_filter(self, text: str):
        self.proxy.setFilterRegularExpression(
            QRegularExpression(QRegularExpression.escape(text or ""))
        )

    def _selected_id(self) -> int | None:
        idxs = self.view.table.selectionModel().selectedRows()
        if not idxs:
            return None
        src_index = self.proxy.mapToSource(idxs[0])
        return self.base_model.at(src_index.row()).product_id

    def _add(self):
        dlg = ProductForm(self.view)
        if not dlg.exec():
            return
        pdata = dlg.payload()
        if not pdata:
            return
        try:
            product = self.repo.create_product(self.owner_id, **pdata)
        except DomainError as e:
            error(self.view, "Product not saved", str(e))
            return
        info(self.view, "Saved", f"Product '{product.name}' created.")
        self._reload()
        self.products_changed.emit()

    def _edit(self):
        pid = self._selected_id()
        if not pid:
            info(self.view, "Select", "Please select a product to edit.")
            return
        current = self.repo.get_product(self.owner_id, pid)
        if current is None:
            self._reload()
            return
        dlg = ProductForm(self.view, initial_product=current)
        if not dlg.exec():
            return
        pdata = dlg.payload()
        if not pdata:
            return
        try:
            self.repo.update_product(self.owner_id, pid, **pdata)
        except DomainError as e:
            error(self.view, "Product not saved", str(e))
            return
        info(self.view, "Saved", f"Product #{pid} updated.")
        self._reload()
        self.products_changed.emit()

    def _delete(self):
        """
        Delete the selected product. Past sales keep their own copy of the
        product's name/price/unit and are not affected.
        """
        pid = self._selected_id()
        if not pid:
            info(self.view, "Select", "Please select a product to delete.")
            return
        if not confirm(self.view, "Delete product", "Delete the selected product?"):
            return
        try:
            self.repo.delete_product(self.owner_id, pid)
        except DomainError as e:
            error(self.view, "Not allowed", str(e))
            return
        _log.info("product %s deleted from catalog view", pid)
        self._reload()
        self.products_changed.emit()
