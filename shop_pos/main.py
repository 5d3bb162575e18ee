from PySide6.QtWidgets import (
    QApplication,
    QMainWindow,
    QWidget,
    QVBoxLayout,
    QListWidget,
    QListWidgetItem,
    QStackedWidget,
    QHBoxLayout,
    QSizePolicy,
    QLabel,
)
from PySide6.QtCore import Qt
from pathlib import Path
import argparse
import logging
import sys

from .config import AUDIT_LOG_PATH, BASE_DIR
from .constants import APP_NAME, DEFAULT_OWNER_ID, STYLE_FILE
from .database import get_connection
from .database.repositories import ShopProfileRepo
from .modules.base_module import BaseModule
from .utils.loggers import get_audit_logger, get_logger
from .utils.ui_helpers import wrap_center

_log = logging.getLogger(__name__)


def load_qss() -> str:
    qss = ""
    f = BASE_DIR / STYLE_FILE
    if f.exists():
        qss = f.read_text(encoding="utf-8")
    return qss


class MainWindow(QMainWindow):
    def __init__(self, conn, owner_id: str, audit_logger: logging.Logger | None = None):
        super().__init__()
        self.setWindowTitle(APP_NAME)
        self.setWindowFlag(Qt.WindowMinimizeButtonHint, True)
        self.setWindowFlag(Qt.WindowMaximizeButtonHint, True)
        self.setMinimumSize(960, 600)

        self.conn = conn
        self.owner_id = owner_id
        self.audit = audit_logger
        self.profile_repo = ShopProfileRepo(conn)

        # ---- Central layout: left nav + stacked pages ----
        central = QWidget(self)
        layout = QVBoxLayout(central)
        self.setCentralWidget(central)

        self.nav = QListWidget()
        self.nav.setFixedWidth(120)
        self.nav.setSizePolicy(QSizePolicy.Fixed, QSizePolicy.Expanding)
        self.stack = QStackedWidget()

        row = QWidget()
        row_lay = QHBoxLayout(row)
        row_lay.addWidget(self.nav)
        row_lay.addWidget(self.stack, 1)
        layout.addWidget(row, 1)

        self.modules: list[tuple[str, BaseModule | None]] = []
        self.nav.currentRowChanged.connect(self._on_nav_item_changed)

        from .modules.sales.controller import SalesController
        from .modules.product.controller import ProductController
        from .modules.history.controller import HistoryController
        from .modules.settings.controller import SettingsController

        common = dict(profile_repo=self.profile_repo)
        self.sales = self._add_module_safe(
            "New Sale", SalesController, conn, owner_id, audit_logger=audit_logger, **common
        )
        self.products = self._add_module_safe("Products", ProductController, conn, owner_id)
        self.history = self._add_module_safe(
            "History", HistoryController, conn, owner_id, audit_logger=audit_logger, **common
        )
        self.settings = self._add_module_safe("Settings", SettingsController, conn, owner_id, **common)

        self._wire_modules()

        if self.nav.count():
            self.nav.setCurrentRow(0)

    def _wire_modules(self):
        if self.products is not None and self.sales is not None:
            self.products.products_changed.connect(self.sales.reload_catalog)
        if self.sales is not None and self.history is not None:
            self.sales.sale_committed.connect(lambda _sale: self.history.refresh())
        if self.settings is not None and self.sales is not None:
            self.settings.settings_changed.connect(self.sales.refresh)

    # ---------- safe add helpers ----------
    def _add_module_safe(self, title: str, controller_cls, *args, **kwargs):
        """Instantiate a controller; on failure log it and show a placeholder page."""
        try:
            controller = controller_cls(*args, **kwargs)
        except Exception:
            _log.exception("[%s] failed to load", title)
            self.add_placeholder(title)
            return None
        self.add_module(title, controller)
        return controller

    def add_module(self, title: str, module: BaseModule):
        page = module.get_widget()
        self.nav.addItem(QListWidgetItem(title))
        self.stack.addWidget(page)
        self.modules.append((title, module))

    def add_placeholder(self, title: str):
        placeholder = wrap_center(QLabel(f"{title}\n\nCould not be loaded. See the log for details."))
        self.nav.addItem(QListWidgetItem(title))
        self.stack.addWidget(placeholder)
        self.modules.append((title, None))

    def _on_nav_item_changed(self, index: int):
        if index < 0:
            return
        self.stack.setCurrentIndex(index)
        _, module = self.modules[index]
        if module is not None:
            module.refresh()

    def closeEvent(self, event):
        if self.conn is not None:
            self.conn.close()
            self.conn = None
        super().closeEvent(event)


def parse_args(argv=None):
    p = argparse.ArgumentParser(prog="shop-pos", description=APP_NAME)
    p.add_argument("--owner", default=DEFAULT_OWNER_ID, help="shop account id (default: %(default)s)")
    p.add_argument("--db", type=Path, default=None, help="path to the SQLite database file")
    return p.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    log = get_logger("shop_pos")
    audit = get_audit_logger(AUDIT_LOG_PATH)

    conn = get_connection(args.db)
    log.info("starting %s for shop '%s'", APP_NAME, args.owner)

    app = QApplication.instance() or QApplication(sys.argv[:1])
    app.setApplicationName(APP_NAME)
    qss = load_qss()
    if qss:
        app.setStyleSheet(qss)

    win = MainWindow(conn, args.owner, audit_logger=audit)
    win.resize(1200, 760)
    win.show()
    return app.exec()


if __name__ == "__main__":
    sys.exit(main())
