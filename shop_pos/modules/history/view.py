from PySide6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QPushButton, QLineEdit, QLabel, QFrame, QSplitter,
)
from PySide6.QtCore import Qt
from ...widgets.table_view import TableView


def _card(title: str) -> tuple[QFrame, QLabel]:
    box = QFrame()
    box.setFrameShape(QFrame.StyledPanel)
    lay = QVBoxLayout(box)
    t = QLabel(title)
    t.setStyleSheet("color: gray;")
    v = QLabel("0")
    v.setStyleSheet("font-size: 16pt; font-weight: bold;")
    lay.addWidget(t)
    lay.addWidget(v)
    return box, v


class HistoryView(QWidget):
    def __init__(self, parent=None):
        super().__init__(parent)
        layout = QVBoxLayout(self)

        cards = QHBoxLayout()
        box, self.lbl_count = _card("Number of sales")
        cards.addWidget(box)
        box, self.lbl_today = _card("Today")
        cards.addWidget(box)
        box, self.lbl_month = _card("This month")
        cards.addWidget(box)
        layout.addLayout(cards)

        row = QHBoxLayout()
        self.btn_receipt = QPushButton("Receipt…")
        self.btn_del = QPushButton("Delete")
        self.btn_refresh = QPushButton("Refresh")
        row.addWidget(self.btn_receipt)
        row.addWidget(self.btn_del)
        row.addWidget(self.btn_refresh)
        row.addStretch(1)
        self.search = QLineEdit()
        self.search.setPlaceholderText("Receipt number, customer or date (dd/mm/yyyy)…")
        row.addWidget(QLabel("Search:"))
        row.addWidget(self.search, 2)
        layout.addLayout(row)

        split = QSplitter(Qt.Vertical)
        self.table = TableView(sortable=False)
        self.items = TableView(sortable=False)
        split.addWidget(self.table)
        split.addWidget(self.items)
        split.setStretchFactor(0, 3)
        split.setStretchFactor(1, 2)
        layout.addWidget(split, 1)
