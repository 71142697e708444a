"""Main form: credentials, duration, presets, start/stop and status.

Layout (top → bottom):
    - API token (masked, "Show" toggle)
    - User key
    - Duration (hh:mm:ss) with three preset buttons below it
    - Start / Stop row
    - Status label
"""

from __future__ import annotations

from PyQt6.QtCore import Qt, pyqtSignal
from PyQt6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QFormLayout,
    QLabel, QPushButton, QLineEdit, QCheckBox, QFrame, QMenu,
)

from ..errors import ValidationError
from ..settings import PRESET_COUNT, Settings, normalize_presets
from ..timer.engine import CountdownController, CountdownState, STATUS_WAITING
from .styles import status_style


DEFAULT_DURATION_TEXT = "00:01:00"


class NotifierForm(QWidget):
    """Input form bound to a ``CountdownController``.

    The form never opens dialogs itself: rejected input is emitted as
    ``validation_failed`` and the hosting window decides how to show it.
    """

    validation_failed = pyqtSignal(str)
    presets_changed = pyqtSignal(list)

    def __init__(
        self,
        controller: CountdownController,
        parent: QWidget | None = None,
    ) -> None:
        super().__init__(parent)
        self._controller = controller
        self._presets: list[str] = normalize_presets(None)
        self._preset_buttons: list[QPushButton] = []
        self._build_ui()
        self._connect_signals()
        self._apply_controls(controller.start_enabled, controller.stop_enabled)
        self._on_status_changed(controller.status)

    # ── build ─────────────────────────────────────────────────────────────

    def _build_ui(self) -> None:
        root = QVBoxLayout(self)
        root.setContentsMargins(0, 0, 0, 0)

        card = QFrame(self)
        card.setObjectName("card")
        root.addWidget(card)

        layout = QVBoxLayout(card)
        layout.setContentsMargins(20, 16, 20, 16)
        layout.setSpacing(12)

        form = QFormLayout()
        form.setHorizontalSpacing(16)
        form.setVerticalSpacing(10)

        # ── credentials ──────────────────────────────────────────────
        token_row = QHBoxLayout()
        self._token_input = QLineEdit(card)
        self._token_input.setEchoMode(QLineEdit.EchoMode.Password)
        self._token_input.setPlaceholderText("Application API token")
        self._show_token_cb = QCheckBox("Show", card)
        token_row.addWidget(self._token_input)
        token_row.addWidget(self._show_token_cb)
        form.addRow("API Token:", token_row)

        self._user_input = QLineEdit(card)
        self._user_input.setPlaceholderText("User key")
        form.addRow("User Key:", self._user_input)

        # ── duration + presets ───────────────────────────────────────
        self._time_input = QLineEdit(DEFAULT_DURATION_TEXT, card)
        self._time_input.setObjectName("durationInput")
        self._time_input.setMaxLength(8)
        self._time_input.setFixedWidth(150)
        form.addRow("Time (hh:mm:ss):", self._time_input)

        preset_row = QHBoxLayout()
        preset_row.setSpacing(6)
        for index in range(PRESET_COUNT):
            btn = QPushButton(self._presets[index], card)
            btn.setObjectName("presetButton")
            btn.setToolTip("Right-click to save the current time here.")
            btn.setContextMenuPolicy(Qt.ContextMenuPolicy.CustomContextMenu)
            btn.clicked.connect(
                lambda _checked=False, i=index: self._on_preset_clicked(i)
            )
            btn.customContextMenuRequested.connect(
                lambda pos, i=index: self._show_preset_menu(i, pos)
            )
            preset_row.addWidget(btn)
            self._preset_buttons.append(btn)
        preset_row.addStretch()
        form.addRow("", preset_row)

        layout.addLayout(form)

        # ── start / stop ─────────────────────────────────────────────
        btn_row = QHBoxLayout()
        btn_row.setSpacing(12)
        self._start_btn = QPushButton("Start Timer", card)
        self._start_btn.setObjectName("primaryButton")
        self._stop_btn = QPushButton("Stop Timer", card)
        self._stop_btn.setObjectName("dangerButton")
        btn_row.addWidget(self._start_btn)
        btn_row.addWidget(self._stop_btn)
        layout.addLayout(btn_row)

        # ── status ───────────────────────────────────────────────────
        self._status_label = QLabel(STATUS_WAITING, card)
        self._status_label.setObjectName("statusLabel")
        self._status_label.setWordWrap(True)
        self._status_label.setMinimumHeight(48)
        self._status_label.setAlignment(
            Qt.AlignmentFlag.AlignLeft | Qt.AlignmentFlag.AlignTop
        )
        layout.addWidget(self._status_label)

    def _connect_signals(self) -> None:
        self._show_token_cb.toggled.connect(self._on_show_token_toggled)
        self._start_btn.clicked.connect(self._on_start_clicked)
        self._stop_btn.clicked.connect(self._controller.stop)

        self._controller.status_changed.connect(self._on_status_changed)
        self._controller.controls_changed.connect(self._apply_controls)
        self._controller.state_changed.connect(self._on_state_changed)

    # ── settings ──────────────────────────────────────────────────────────

    def apply_settings(self, settings: Settings) -> None:
        self._token_input.setText(settings.api_token)
        self._user_input.setText(settings.user_key)
        self.set_presets(settings.time_presets)

    def collect_settings(self, settings: Settings) -> Settings:
        """Copy the form's current values into *settings* and return it."""
        settings.api_token = self._token_input.text()
        settings.user_key = self._user_input.text()
        settings.time_presets = list(self._presets)
        return settings

    def set_presets(self, presets: list[str]) -> None:
        self._presets = normalize_presets(presets)
        for btn, text in zip(self._preset_buttons, self._presets):
            btn.setText(text)

    @property
    def presets(self) -> list[str]:
        return list(self._presets)

    # ── slots ─────────────────────────────────────────────────────────────

    def _on_show_token_toggled(self, checked: bool) -> None:
        self._token_input.setEchoMode(
            QLineEdit.EchoMode.Normal if checked else QLineEdit.EchoMode.Password
        )

    def _on_preset_clicked(self, index: int) -> None:
        self._time_input.setText(self._presets[index])

    def _show_preset_menu(self, index: int, pos) -> None:
        btn = self._preset_buttons[index]
        menu = QMenu(btn)
        save_action = menu.addAction("Save current time here")
        save_action.triggered.connect(lambda: self.save_preset(index))
        menu.exec(btn.mapToGlobal(pos))

    def save_preset(self, index: int) -> bool:
        """Overwrite preset *index* with the duration field's text."""
        text = self._time_input.text().strip()
        settings = Settings(time_presets=list(self._presets))
        try:
            settings.set_preset(index, text)
        except ValidationError as exc:
            self.validation_failed.emit(str(exc))
            return False
        self.set_presets(settings.time_presets)
        self.presets_changed.emit(self.presets)
        return True

    def _on_start_clicked(self) -> None:
        try:
            self._controller.start_from_text(
                self._time_input.text(),
                token=self._token_input.text(),
                user_key=self._user_input.text(),
            )
        except ValidationError as exc:
            self.validation_failed.emit(str(exc))

    def _apply_controls(self, start_enabled: bool, stop_enabled: bool) -> None:
        self._start_btn.setEnabled(start_enabled)
        self._stop_btn.setEnabled(stop_enabled)
        for btn in self._preset_buttons:
            btn.setEnabled(start_enabled)
        self._time_input.setReadOnly(not start_enabled)

    def _on_status_changed(self, text: str) -> None:
        self._status_label.setText(text)

    def _on_state_changed(self, state: CountdownState) -> None:
        if state == CountdownState.IDLE:
            outcome = self._controller.last_outcome
            if outcome is not None and self._controller.status != STATUS_WAITING:
                state = outcome
        self._status_label.setStyleSheet(status_style(state))

    # ── accessors used by the window and tests ────────────────────────────

    @property
    def token_input(self) -> QLineEdit:
        return self._token_input

    @property
    def user_input(self) -> QLineEdit:
        return self._user_input

    @property
    def time_input(self) -> QLineEdit:
        return self._time_input

    @property
    def show_token_checkbox(self) -> QCheckBox:
        return self._show_token_cb

    @property
    def preset_buttons(self) -> list[QPushButton]:
        return list(self._preset_buttons)

    @property
    def start_button(self) -> QPushButton:
        return self._start_btn

    @property
    def stop_button(self) -> QPushButton:
        return self._stop_btn

    @property
    def status_label(self) -> QLabel:
        return self._status_label
