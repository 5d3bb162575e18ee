from PySide6.QtCore import Qt
from PySide6.QtGui import QPixmap
from PySide6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QFormLayout, QGroupBox, QLineEdit, QLabel,
    QPushButton, QCheckBox,
)
from ...database.repositories.profile_repo import ShopProfile
from ...utils.validators import non_empty, try_parse_decimal


class SettingsForm(QWidget):
    def __init__(self, parent=None):
        super().__init__(parent)
        root = QVBoxLayout(self)

        shop_box = QGroupBox("Shop")
        form = QFormLayout(shop_box)
        self.shop_name = QLineEdit()
        self.shop_name.setMaximumWidth(300)
        self.name_error = QLabel()
        self.name_error.setStyleSheet("color: red;")
        name_row = QHBoxLayout()
        name_row.addWidget(self.shop_name, 1)
        name_row.addWidget(self.name_error)
        form.addRow("Shop name*", name_row)

        logo_row = QHBoxLayout()
        self.logo = QLabel("No logo")
        self.logo.setFixedSize(160, 80)
        self.logo.setAlignment(Qt.AlignCenter)
        self.logo.setStyleSheet("border: 1px solid #d1d5db;")
        self.btn_logo = QPushButton("Choose logo…")
        logo_row.addWidget(self.logo)
        logo_row.addWidget(self.btn_logo)
        logo_row.addStretch(1)
        form.addRow("Logo", logo_row)
        root.addWidget(shop_box)

        ship_box = QGroupBox("Shipping")
        sform = QFormLayout(ship_box)
        self.rate = QLineEdit()
        self.rate.setPlaceholderText("0.00")
        self.rate.setMaximumWidth(150)
        self.rate_error = QLabel()
        self.rate_error.setStyleSheet("color: red;")
        rate_row = QHBoxLayout()
        rate_row.addWidget(self.rate, 1)
        rate_row.addWidget(self.rate_error)
        sform.addRow("Price per kg*", rate_row)
        self.chk_in_total = QCheckBox("Include shipping in the sale total")
        sform.addRow("", self.chk_in_total)
        hint = QLabel("When unchecked, shipping is shown on the receipt as an additional charge.")
        hint.setStyleSheet("color: gray;")
        hint.setWordWrap(True)
        sform.addRow("", hint)
        root.addWidget(ship_box)

        btns = QHBoxLayout()
        btns.addStretch(1)
        self.btn_save = QPushButton("Save")
        btns.addWidget(self.btn_save)
        root.addLayout(btns)
        root.addStretch(1)

    def load(self, profile: ShopProfile):
        self.shop_name.setText(profile.shop_name)
        self.rate.setText(f"{profile.shipping_price_per_kg:f}")
        self.chk_in_total.setChecked(profile.shipping_in_total)
        self.show_logo(profile.logo_path)
        self.name_error.clear()
        self.rate_error.clear()

    def show_logo(self, path: str | None):
        pix = QPixmap(path) if path else QPixmap()
        if pix.isNull():
            self.logo.setPixmap(QPixmap())
            self.logo.setText("No logo")
            return
        self.logo.setPixmap(pix.scaled(self.logo.size(), Qt.KeepAspectRatio, Qt.SmoothTransformation))

    def get_payload(self) -> dict | None:
        self.name_error.clear()
        self.rate_error.clear()
        ok_all = True
        if not non_empty(self.shop_name.text()):
            self.name_error.setText("Required")
            ok_all = False
        ok, rate = try_parse_decimal(self.rate.text())
        if not ok:
            self.rate_error.setText("Enter a number")
            ok_all = False
        elif rate < 0:
            self.rate_error.setText("Cannot be negative")
            ok_all = False
        if not ok_all:
            return None
        return {
            "shop_name": self.shop_name.text().strip(),
            "shipping_price_per_kg": rate,
            "shipping_in_total": self.chk_in_total.isChecked(),
        }
