from PySide6.QtCore import QAbstractTableModel, Qt, QModelIndex
from ...database.repositories.products_repo import Product, Unit
from ...utils.helpers import fmt_money

UNIT_LABELS = {Unit.WEIGHT: "per kg", Unit.COUNT: "per unit"}


class ProductsTableModel(QAbstractTableModel):
    HEADERS = ["ID", "Name", "Price", "Unit"]

    def __init__(self, rows: list[Product]):
        super().__init__()
        self._rows = rows

    # Qt model basics
    def rowCount(self, parent=QModelIndex()):
        return len(self._rows)

    def columnCount(self, parent=QModelIndex()):
        return len(self.HEADERS)

    def data(self, index, role=Qt.DisplayRole):
        if not index.isValid():
            return None
        p = self._rows[index.row()]
        if role in (Qt.DisplayRole, Qt.EditRole):
            return [
                p.product_id,
                p.name,
                fmt_money(p.price),
                UNIT_LABELS[p.unit],
            ][index.column()]
        if role == Qt.TextAlignmentRole and index.column() == 2:
            return int(Qt.AlignRight | Qt.AlignVCenter)
        return None

    def headerData(self, section, orientation, role=Qt.DisplayRole):
        if orientation == Qt.Horizontal and role == Qt.DisplayRole:
            return self.HEADERS[section]
        return super().headerData(section, orientation, role)

    def at(self, row: int) -> Product:
        return self._rows[row]

    def replace(self, rows: list[Product]):
        self.beginResetModel()
        self._rows = rows
        self.endResetModel()
