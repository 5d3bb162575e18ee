import sqlite3
from PySide6.QtCore import Signal
from PySide6.QtWidgets import QWidget, QFileDialog
from ..base_module import BaseModule
from .form import SettingsForm
from ...constants import LOGO_EXTENSIONS
from ...database.repositories import ShopProfileRepo
from ...errors import DomainError
from ...utils.ui_helpers import info, error


class SettingsController(BaseModule):
    # emitted after settings or logo are saved
    settings_changed = Signal()

    def __init__(self, conn: sqlite3.Connection, owner_id: str, profile_repo: ShopProfileRepo | None = None):
        super().__init__()
        self.conn = conn
        self.owner_id = owner_id
        self.repo = profile_repo or ShopProfileRepo(conn)
        self.view = SettingsForm()
        self.view.btn_save.clicked.connect(self._save)
        self.view.btn_logo.clicked.connect(self._choose_logo)
        self.refresh()

    def get_widget(self) -> QWidget:
        return self.view

    def refresh(self):
        try:
            self.view.load(self.repo.get(self.owner_id))
        except DomainError as e:
            error(self.view, "Settings", str(e))

    def _save(self):
        payload = self.view.get_payload()
        if payload is None:
            return
        try:
            profile = self.repo.update_settings(self.owner_id, **payload)
        except DomainError as e:
            error(self.view, "Settings not saved", str(e))
            return
        self.view.load(profile)
        info(self.view, "Saved", "Settings saved. They apply from the next sale.")
        self.settings_changed.emit()

    def _choose_logo(self):
        patterns = " ".join(f"*{ext}" for ext in LOGO_EXTENSIONS)
        path, _ = QFileDialog.getOpenFileName(self.view, "Choose logo", "", f"Images ({patterns})")
        if not path:
            return
        try:
            profile = self.repo.set_logo(self.owner_id, path)
        except DomainError as e:
            error(self.view, "Logo not saved", str(e))
            return
        self.view.show_logo(profile.logo_path)
        self.settings_changed.emit()
