from PySide6.QtWidgets import (
    QDialog, QFormLayout, QLineEdit, QDialogButtonBox, QVBoxLayout, QHBoxLayout,
    QComboBox, QLabel,
)
from ...database.repositories.products_repo import Product, Unit
from ...utils.validators import non_empty, try_parse_decimal


class ProductForm(QDialog):
    def __init__(self, parent=None, initial_product: Product | None = None):
        super().__init__(parent)
        self.setWindowTitle("Product")
        self.setModal(True)
        self.initial_product = initial_product
        self._payload = None
        root = QVBoxLayout(self)

        # --- fields ---
        self.name = QLineEdit()
        self.price = QLineEdit()
        self.price.setPlaceholderText("0.00")
        self.unit = QComboBox()
        self.unit.addItem("Sold by weight (kg)", Unit.WEIGHT)
        self.unit.addItem("Sold by unit (un)", Unit.COUNT)

        field_width = 200
        self.name.setMaximumWidth(field_width)
        self.price.setMaximumWidth(field_width)

        self.name_error = QLabel()
        self.name_error.setStyleSheet("color: red;")
        self.price_error = QLabel()
        self.price_error.setStyleSheet("color: red;")

        form = QFormLayout()
        name_row = QHBoxLayout()
        name_row.addWidget(self.name, 1)
        name_row.addWidget(self.name_error)
        form.addRow("Name*", name_row)

        price_row = QHBoxLayout()
        price_row.addWidget(self.price, 1)
        price_row.addWidget(self.price_error)
        form.addRow("Price*", price_row)

        form.addRow("Unit*", self.unit)
        root.addLayout(form)

        self.buttons = QDialogButtonBox(QDialogButtonBox.Ok | QDialogButtonBox.Cancel)
        self.buttons.accepted.connect(self.accept)
        self.buttons.rejected.connect(self.reject)
        root.addWidget(self.buttons)

        if initial_product is not None:
            self.name.setText(initial_product.name)
            self.price.setText(f"{initial_product.price:f}")
            self.unit.setCurrentIndex(self.unit.findData(initial_product.unit))

    def get_product_payload(self) -> dict | None:
        self.name_error.clear()
        self.price_error.clear()
        ok_all = True

        name = self.name.text().strip()
        if not non_empty(name):
            self.name_error.setText("Required")
            ok_all = False

        ok, price = try_parse_decimal(self.price.text())
        if not ok:
            self.price_error.setText("Enter a number")
            ok_all = False
        elif price < 0:
            self.price_error.setText("Cannot be negative")
            ok_all = False

        if not ok_all:
            return None
        return {"name": name, "price": price, "unit": self.unit.currentData()}

    def accept(self):
        payload = self.get_product_payload()
        if payload is None:
            return
        self._payload = payload
        super().accept()

    def payload(self) -> dict | None:
        return self._payload
