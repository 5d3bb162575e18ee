from PySide6.QtCore import QObject
from PySide6.QtWidgets import QWidget

class BaseModule(QObject):
    """A screen of the app: a controller that owns one top-level widget."""

    def get_widget(self) -> QWidget:
        raise NotImplementedError

    def refresh(self) -> None:
        """Reload data when the screen is shown again. Default: nothing to do."""
