"""Application settings with JSON persistence.

Settings are stored at:
    <per-user app data>/PushoverNotifier/settings.json

where the app-data directory is ``%APPDATA%`` on Windows,
``~/Library/Application Support`` on macOS and ``$XDG_CONFIG_HOME``
(``~/.config``) elsewhere.  The API token is wrapped by the platform
``SecretBox`` before it is written; the user key and presets are plain.

Usage::

    settings = load_settings(on_error=show_dialog)
    settings.user_key = "..."
    save_settings(settings, on_error=show_dialog)
"""

from __future__ import annotations

import base64
import binascii
import json
import logging
import os
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable

from .errors import SecretBoxError
from .security import SecretBox, default_secret_box
from .timer.durations import parse_duration


logger = logging.getLogger(__name__)

APP_NAME = "PushoverNotifier"


def _user_data_root() -> Path:
    if sys.platform == "win32":
        appdata = os.environ.get("APPDATA")
        if appdata:
            return Path(appdata)
        return Path.home() / "AppData" / "Roaming"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support"
    xdg = os.environ.get("XDG_CONFIG_HOME")
    return Path(xdg) if xdg else Path.home() / ".config"


APP_DIR = _user_data_root() / APP_NAME
SETTINGS_PATH = APP_DIR / "settings.json"

PRESET_COUNT = 3
EMPTY_PRESET = "00:00:00"
DEFAULT_PRESETS: tuple[str, ...] = ("00:15:00", "00:30:00", "01:00:00")

# on-disk field names
_KEY_TOKEN = "EncryptedApiToken"
_KEY_USER = "UserKey"
_KEY_PRESETS = "TimePresets"

ErrorReporter = Callable[[str], None]


def normalize_presets(presets: list | None) -> list[str]:
    """Return exactly ``PRESET_COUNT`` preset strings.

    No presets at all means the defaults; a short list is padded with
    ``EMPTY_PRESET``; extras are dropped.
    """
    if not isinstance(presets, (list, tuple)):
        presets = []
    values = [str(p) for p in presets][:PRESET_COUNT]
    if not values:
        values = list(DEFAULT_PRESETS)
    while len(values) < PRESET_COUNT:
        values.append(EMPTY_PRESET)
    return values


@dataclass
class Settings:
    """All persisted user state.  ``api_token`` is plaintext in memory."""

    api_token: str = ""
    user_key: str = ""
    time_presets: list[str] = field(
        default_factory=lambda: list(DEFAULT_PRESETS)
    )

    def set_preset(self, index: int, text: str) -> None:
        """Store a validated ``hh:mm:ss`` duration in preset slot *index*."""
        if not 0 <= index < PRESET_COUNT:
            raise IndexError(f"preset index {index} out of range")
        parse_duration(text)
        self.time_presets = normalize_presets(self.time_presets)
        self.time_presets[index] = text.strip()


def _report(on_error: ErrorReporter | None, message: str) -> None:
    logger.error(message)
    if on_error is not None:
        on_error(message)


def _resolve_box(secret_box: SecretBox | None, path: Path) -> SecretBox:
    if secret_box is not None:
        return secret_box
    return default_secret_box(path.parent)


def load_settings(
    path: Path | None = None,
    *,
    secret_box: SecretBox | None = None,
    on_error: ErrorReporter | None = None,
) -> Settings:
    """Load settings from disk, falling back to defaults.

    Read or parse failures return defaults.  A token that cannot be
    unwrapped is left blank while the other fields are kept.  Every
    failure goes to *on_error*; none of them raises.
    """
    path = Path(path) if path is not None else SETTINGS_PATH
    settings = Settings()
    if not path.exists():
        return settings

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        if not isinstance(data, dict):
            raise ValueError("settings file does not contain a JSON object")
    except (OSError, ValueError) as exc:
        _report(on_error, f"Failed to load settings: {exc}")
        return settings

    user_key = data.get(_KEY_USER)
    if isinstance(user_key, str):
        settings.user_key = user_key
    elif user_key is not None:
        _report(on_error, f"Ignoring invalid {_KEY_USER} in settings: {user_key!r}")

    presets = data.get(_KEY_PRESETS)
    if isinstance(presets, list) and all(isinstance(p, str) for p in presets):
        settings.time_presets = normalize_presets(presets)
    elif presets is not None:
        _report(on_error, f"Ignoring invalid {_KEY_PRESETS} in settings: {presets!r}")

    encrypted = data.get(_KEY_TOKEN)
    if encrypted:
        try:
            blob = base64.b64decode(encrypted, validate=True)
            box = _resolve_box(secret_box, path)
            settings.api_token = box.unwrap(blob).decode("utf-8")
        except (
            binascii.Error, TypeError, UnicodeDecodeError, SecretBoxError,
        ) as exc:
            _report(on_error, f"Failed to decrypt the API token: {exc}")

    return settings


def save_settings(
    settings: Settings,
    path: Path | None = None,
    *,
    secret_box: SecretBox | None = None,
    on_error: ErrorReporter | None = None,
) -> bool:
    """Write settings to disk as JSON.  Returns False on failure."""
    path = Path(path) if path is not None else SETTINGS_PATH
    try:
        path.parent.mkdir(parents=True, exist_ok=True)

        data: dict[str, object] = {}
        if settings.api_token:
            box = _resolve_box(secret_box, path)
            blob = box.wrap(settings.api_token.encode("utf-8"))
            data[_KEY_TOKEN] = base64.b64encode(blob).decode("ascii")
        data[_KEY_USER] = settings.user_key
        data[_KEY_PRESETS] = normalize_presets(settings.time_presets)

        path.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    except (OSError, SecretBoxError) as exc:
        _report(on_error, f"Failed to save settings: {exc}")
        return False
    logger.info("Settings saved to %s", path)
    return True
