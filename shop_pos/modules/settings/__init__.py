"""Shop settings screen: name, logo, shipping price per kg and total policy."""

from .controller import SettingsController
from .form import SettingsForm

__all__ = ["SettingsController", "SettingsForm"]
