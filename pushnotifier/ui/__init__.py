"""UI package."""

from .notifier_form import NotifierForm
from .styles import build_stylesheet, status_style

__all__ = [
    "NotifierForm",
    "build_stylesheet",
    "status_style",
]
