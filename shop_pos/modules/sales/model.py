from PySide6.QtCore import QAbstractTableModel, Qt, QModelIndex
from ...utils.helpers import fmt_money, fmt_qty


class LineItemsModel(QAbstractTableModel):
    """Line items of the draft sale (composer.LineItem) in entry order."""
    HEADERS = ["#", "Product", "Qty", "Weight (kg)", "Unit Price", "Subtotal"]
    _RIGHT = {2, 3, 4, 5}

    def __init__(self, rows: list | None = None):
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
        c = index.column()
        if role in (Qt.DisplayRole, Qt.EditRole):
            return [
                index.row() + 1,
                it.product.name,
                f"{fmt_qty(it.quantity)} {it.product.unit.value}",
                fmt_qty(it.weight_kg),
                fmt_money(it.product.price),
                fmt_money(it.subtotal),
            ][c]
        if role == Qt.TextAlignmentRole and c in self._RIGHT:
            return int(Qt.AlignRight | Qt.AlignVCenter)
        return None

    def headerData(self, section, orientation, role=Qt.DisplayRole):
        if orientation == Qt.Horizontal and role == Qt.DisplayRole:
            return self.HEADERS[section]
        return super().headerData(section, orientation, role)

    def at(self, row: int):
        return self._rows[row]

    def replace(self, rows):
        self.beginResetModel()
        self._rows = list(rows)
        self.endResetModel()
