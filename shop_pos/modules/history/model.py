from PySide6.QtCore import QAbstractTableModel, Qt, QModelIndex
from ...constants import DATETIME_DISPLAY_FORMAT
from ...database.repositories.sales_repo import FinalizedSale
from ...utils.helpers import fmt_money, fmt_qty, to_local


class SalesHistoryModel(QAbstractTableModel):
    HEADERS = ["Receipt", "Date", "Customer", "Items", "Subtotal", "Shipping", "Total"]
    _RIGHT = {3, 4, 5, 6}

    def __init__(self, rows: list[FinalizedSale] | None = None):
        super().__init__()
        self._rows = list(rows or [])

    def rowCount(self, parent=QModelIndex()):
        return len(self._rows)

    def columnCount(self, parent=QModelIndex()):
        return len(self.HEADERS)

    def data(self, index, role=Qt.DisplayRole):
        if not index.isValid():
            return None
        s = self._rows[index.row()]
        c = index.column()
        if role in (Qt.DisplayRole, Qt.EditRole):
            return [
                f"#{s.short_id}",
                to_local(s.created_at).strftime(DATETIME_DISPLAY_FORMAT),
                s.customer_name,
                len(s.items),
                fmt_money(s.subtotal),
                fmt_money(s.shipping_fee),
                fmt_money(s.total),
            ][c]
        if role == Qt.TextAlignmentRole and c in self._RIGHT:
            return int(Qt.AlignRight | Qt.AlignVCenter)
        return None

    def headerData(self, section, orientation, role=Qt.DisplayRole):
        if orientation == Qt.Horizontal and role == Qt.DisplayRole:
            return self.HEADERS[section]
        return super().headerData(section, orientation, role)

    def at(self, row: int) -> FinalizedSale:
        return self._rows[row]

    def replace(self, rows: list[FinalizedSale]):
        self.beginResetModel()
        self._rows = list(rows)
        self.endResetModel()


class SaleItemsModel(QAbstractTableModel):
    HEADERS = ["#", "Product", "Qty", "Unit Price", "Subtotal"]

    def __init__(self, rows=None):
        super().__init__()
        self._rows = list(rows or [])

    def rowCount(self, parent=QModelIndex()):
        return len(self._rows)

    def columnCount(self, parent=QModelIndex()):
        return len(self.HEADERS)

    def data(self, index, role=Qt.DisplayRole):
        if not index.isValid():
            return None
        it = self._rows[index.row()]
        if role in (Qt.DisplayRole, Qt.EditRole):
            return [
                index.row() + 1,
                it.product_name,
                f"{fmt_qty(it.quantity)} {it.unit.value}",
                fmt_money(it.unit_price),
                fmt_money(it.subtotal),
            ][index.column()]
        return None

    def headerData(self, section, orientation, role=Qt.DisplayRole):
        if orientation == Qt.Horizontal and role == Qt.DisplayRole:
            return self.HEADERS[section]
        return super().headerData(section, orientation, role)

    def replace(self, rows):
        self.beginResetModel()
        self._rows = list(rows)
        self.endResetModel()
