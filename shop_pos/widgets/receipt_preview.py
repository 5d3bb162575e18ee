import logging
from PySide6.QtWidgets import (
    QDialog, QVBoxLayout, QToolBar, QTextBrowser, QFileDialog,
)
from PySide6.QtGui import QAction, QKeySequence, QShortcut
from PySide6.QtPrintSupport import QPrinter, QPrintDialog

from ..config import ShopConfig
from ..errors import ReceiptError
from ..utils.ui_helpers import info, error

_log = logging.getLogger(__name__)


class ReceiptPreview(QDialog):
    """Shows a rendered receipt with Print and Save PDF actions."""

    def __init__(self, renderer, sale, config: ShopConfig, parent=None):
        super().__init__(parent)
        self.renderer = renderer
        self.sale = sale
        self.config = config
        self.setWindowTitle(f"Receipt #{sale.short_id}")
        self.resize(720, 820)

        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)

        toolbar = QToolBar()
        layout.addWidget(toolbar)

        self.act_print = QAction("Print", self)
        self.act_print.triggered.connect(self.print_receipt)
        toolbar.addAction(self.act_print)

        self.act_pdf = QAction("Save PDF…", self)
        self.act_pdf.triggered.connect(self.save_pdf)
        toolbar.addAction(self.act_pdf)

        print_shortcut = QShortcut(QKeySequence("Ctrl+P"), self)
        print_shortcut.activated.connect(self.print_receipt)

        self.browser = QTextBrowser()
        self.browser.setOpenExternalLinks(False)
        layout.addWidget(self.browser)

        self.load_receipt()

    def load_receipt(self):
        self.browser.setHtml(self.renderer.render_html(self.sale, self.config))

    def print_receipt(self):
        printer = QPrinter(QPrinter.HighResolution)
        dlg = QPrintDialog(printer, self)
        if dlg.exec() == QDialog.Accepted:
            self.browser.print_(printer)

    def save_pdf(self):
        target_dir = QFileDialog.getExistingDirectory(self, "Save receipt to…")
        if not target_dir:
            return
        try:
            path = self.renderer.export_pdf(self.sale, self.config, target_dir)
        except ReceiptError as e:
            error(self, "Receipt", str(e))
            return
        info(self, "Receipt", f"Saved to {path}")
