from PySide6.QtCore import Qt
from PySide6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QGridLayout, QFormLayout, QGroupBox,
    QLineEdit, QLabel, QPushButton, QListWidget,
)
from ...widgets.table_view import TableView


class SaleView(QWidget):
    """
    New-sale screen:
      left  - customer, product search, quantity/weight entry
      right - line items table and running totals
    """

    def __init__(self, parent=None):
        super().__init__(parent)
        root = QHBoxLayout(self)

        # ---------------- left: entry ----------------
        left = QVBoxLayout()

        cust_box = QGroupBox("Customer")
        cust_form = QFormLayout(cust_box)
        self.customer = QLineEdit()
        self.customer.setPlaceholderText("Customer name")
        cust_form.addRow("Name*", self.customer)
        left.addWidget(cust_box)

        prod_box = QGroupBox("Add product")
        prod_lay = QVBoxLayout(prod_box)
        self.search = QLineEdit()
        self.search.setPlaceholderText("Search products…")
        self.products = QListWidget()
        prod_lay.addWidget(self.search)
        prod_lay.addWidget(self.products, 1)

        entry = QFormLayout()
        self.quantity = QLineEdit()
        self.quantity.setPlaceholderText("0")
        self.lbl_qty_unit = QLabel("")
        qty_row = QHBoxLayout()
        qty_row.addWidget(self.quantity, 1)
        qty_row.addWidget(self.lbl_qty_unit)
        entry.addRow("Quantity*", qty_row)

        self.weight = QLineEdit()
        self.weight.setPlaceholderText("Total weight of these units")
        self.weight.setEnabled(False)
        entry.addRow("Weight (kg)", self.weight)
        self.lbl_weight_hint = QLabel("")
        self.lbl_weight_hint.setStyleSheet("color: gray;")
        self.lbl_weight_hint.setWordWrap(True)
        entry.addRow("", self.lbl_weight_hint)
        prod_lay.addLayout(entry)

        self.btn_add = QPushButton("Add Item")
        prod_lay.addWidget(self.btn_add)
        left.addWidget(prod_box, 1)

        # ---------------- right: items + totals ----------------
        right = QVBoxLayout()
        self.items = TableView(sortable=False)
        right.addWidget(self.items, 1)

        row = QHBoxLayout()
        self.btn_remove = QPushButton("Remove Item")
        row.addWidget(self.btn_remove)
        row.addStretch(1)
        right.addLayout(row)

        totals_box = QGroupBox("Totals")
        grid = QGridLayout(totals_box)
        self.lbl_subtotal = QLabel("0.00")
        self.lbl_items_weight = QLabel("0")
        self.shipping_weight = QLineEdit("0")
        self.shipping_weight.setMaximumWidth(120)
        self.lbl_shipping_fee = QLabel("0.00")
        self.lbl_total = QLabel("0.00")
        self.lbl_total.setStyleSheet("font-weight: bold; font-size: 14pt;")
        self.lbl_policy = QLabel("")
        self.lbl_policy.setStyleSheet("color: gray;")

        grid.addWidget(QLabel("Subtotal:"), 0, 0)
        grid.addWidget(self.lbl_subtotal, 0, 1, Qt.AlignRight)
        grid.addWidget(QLabel("Products weight (kg):"), 1, 0)
        grid.addWidget(self.lbl_items_weight, 1, 1, Qt.AlignRight)
        grid.addWidget(QLabel("Shipping weight (kg):"), 2, 0)
        grid.addWidget(self.shipping_weight, 2, 1, Qt.AlignRight)
        grid.addWidget(QLabel("Shipping:"), 3, 0)
        grid.addWidget(self.lbl_shipping_fee, 3, 1, Qt.AlignRight)
        grid.addWidget(QLabel("TOTAL:"), 4, 0)
        grid.addWidget(self.lbl_total, 4, 1, Qt.AlignRight)
        grid.addWidget(self.lbl_policy, 5, 0, 1, 2)
        right.addWidget(totals_box)

        actions = QHBoxLayout()
        self.lbl_status = QLabel("")
        self.btn_new = QPushButton("New Sale")
        self.btn_receipt = QPushButton("Receipt…")
        self.btn_finish = QPushButton("Finish Sale")
        self.btn_finish.setDefault(True)
        actions.addWidget(self.lbl_status, 1)
        actions.addWidget(self.btn_new)
        actions.addWidget(self.btn_receipt)
        actions.addWidget(self.btn_finish)
        right.addLayout(actions)

        root.addLayout(left, 2)
        root.addLayout(right, 3)

    def set_editable(self, editable: bool):
        for w in (
            self.customer, self.search, self.products, self.quantity,
            self.btn_add, self.btn_remove, self.shipping_weight, self.btn_finish,
        ):
            w.setEnabled(editable)
        if not editable:
            self.weight.setEnabled(False)
        self.btn_receipt.setEnabled(not editable)
