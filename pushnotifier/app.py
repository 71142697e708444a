"""Main application window for Pushover Notifier."""

from __future__ import annotations

import logging
from pathlib import Path

from PyQt6.QtWidgets import QMainWindow, QMessageBox, QWidget, QVBoxLayout

from .notify.pushover import PushoverClient
from .security import SecretBox
from .settings import Settings, load_settings, save_settings
from .timer.engine import CountdownController
from .ui.notifier_form import NotifierForm
from .ui.styles import build_stylesheet


logger = logging.getLogger(__name__)

WINDOW_TITLE = "Pushover Notifier"
ERROR_TITLE = "Error"
INPUT_ERROR_TITLE = "Input Error"


class NotifierWindow(QMainWindow):
    """Hosts the form, owns the controller and persists settings.

    Settings are loaded once here and written once in ``closeEvent``.
    ``settings_path``, ``secret_box`` and ``client`` exist so tests can
    point the window at a temporary directory and a fake HTTP layer.
    """

    def __init__(
        self,
        *,
        settings_path: Path | None = None,
        secret_box: SecretBox | None = None,
        client: PushoverClient | None = None,
    ) -> None:
        super().__init__()
        self.setWindowTitle(WINDOW_TITLE)
        self.setMinimumSize(480, 320)
        self.setStyleSheet(build_stylesheet())

        self._settings_path = settings_path
        self._secret_box = secret_box

        # ── settings ──────────────────────────────────────────────────
        self._settings: Settings = load_settings(
            settings_path,
            secret_box=secret_box,
            on_error=self._show_persistence_error,
        )

        # ── controller ────────────────────────────────────────────────
        self._controller = CountdownController(self, client=client)
        self._controller.error_occurred.connect(self._show_error)

        # ── central widget ────────────────────────────────────────────
        central = QWidget()
        self.setCentralWidget(central)
        layout = QVBoxLayout(central)
        layout.setContentsMargins(16, 12, 16, 12)

        self._form = NotifierForm(self._controller, central)
        self._form.apply_settings(self._settings)
        self._form.validation_failed.connect(self._show_validation_error)
        self._form.presets_changed.connect(self._on_presets_changed)
        layout.addWidget(self._form)

    # ── public ────────────────────────────────────────────────────────────

    @property
    def controller(self) -> CountdownController:
        return self._controller

    @property
    def form(self) -> NotifierForm:
        return self._form

    @property
    def settings(self) -> Settings:
        return self._settings

    def save(self) -> bool:
        self._form.collect_settings(self._settings)
        return save_settings(
            self._settings,
            self._settings_path,
            secret_box=self._secret_box,
            on_error=self._show_persistence_error,
        )

    def _on_presets_changed(self, presets: list) -> None:
        self._settings.time_presets = list(presets)
        logger.info("Presets updated: %s", ", ".join(presets))

    # ── dialogs ───────────────────────────────────────────────────────────

    def _show_error(self, title: str, message: str) -> None:
        QMessageBox.critical(self, title, message)

    def _show_persistence_error(self, message: str) -> None:
        self._show_error(ERROR_TITLE, message)

    def _show_validation_error(self, message: str) -> None:
        QMessageBox.warning(self, INPUT_ERROR_TITLE, message)

    # ══════════════════════════════════════════════════════════════════
    #  WINDOW EVENTS
    # ══════════════════════════════════════════════════════════════════

    def closeEvent(self, event) -> None:  # type: ignore[override]
        """Stop any running countdown and write settings before closing."""
        self._controller.shutdown()
        self.save()
        event.accept()
