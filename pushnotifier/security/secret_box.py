"""Per-account protection of the stored API token.

``SecretBox`` is the wrap/unwrap capability the settings store uses.

- On Windows ``DpapiSecretBox`` calls the Data Protection API with
  current-user scope through pywin32.
- Elsewhere ``FernetSecretBox`` encrypts with ``cryptography``'s Fernet.
  The key is derived (HKDF-SHA256) from a random secret kept in the
  user's app-data directory, readable by the owner only, and from the
  login name.  A blob written under one account or key file does not
  unwrap under another.

Neither protects against code already running as the current user.
"""

from __future__ import annotations

import base64
import getpass
import logging
import os
import secrets
import sys
from abc import ABC, abstractmethod
from pathlib import Path

from cryptography.fernet import Fernet, InvalidToken
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.hkdf import HKDF

from ..errors import SecretBoxError


logger = logging.getLogger(__name__)

KEY_FILENAME = "secret.key"
KEY_BYTES = 32
_HKDF_INFO_PREFIX = b"pushnotifier/api-token/"


class SecretBox(ABC):
    """Wraps bytes so only the current user account can unwrap them."""

    name: str = "secret-box"

    @abstractmethod
    def wrap(self, data: bytes) -> bytes:
        ...

    @abstractmethod
    def unwrap(self, blob: bytes) -> bytes:
        """Return the original bytes or raise ``SecretBoxError``."""


# ── Windows ───────────────────────────────────────────────────────────────


class DpapiSecretBox(SecretBox):
    """Windows DPAPI, ``CurrentUser`` scope."""

    name = "dpapi"

    def wrap(self, data: bytes) -> bytes:
        import win32crypt

        try:
            return win32crypt.CryptProtectData(data, None, None, None, None, 0)
        except Exception as exc:  # pywintypes.error
            raise SecretBoxError(f"Could not protect data: {exc}") from exc

    def unwrap(self, blob: bytes) -> bytes:
        import win32crypt

        try:
            _description, data = win32crypt.CryptUnprotectData(
                blob, None, None, None, 0,
            )
        except Exception as exc:  # pywintypes.error
            raise SecretBoxError(f"Could not unprotect data: {exc}") from exc
        return data


# ── everything else ───────────────────────────────────────────────────────


class FernetSecretBox(SecretBox):
    """Fernet encryption keyed by a per-user key file and login name.

    The key file is created lazily on the first ``wrap``.  ``identity``
    defaults to the current login name.
    """

    name = "fernet"

    def __init__(self, key_path: Path, *, identity: str | None = None) -> None:
        self._key_path = Path(key_path)
        self._identity = identity if identity is not None else getpass.getuser()
        self._fernet: Fernet | None = None

    @property
    def key_path(self) -> Path:
        return self._key_path

    @property
    def identity(self) -> str:
        return self._identity

    def wrap(self, data: bytes) -> bytes:
        return self._get_fernet(create=True).encrypt(data)

    def unwrap(self, blob: bytes) -> bytes:
        try:
            return self._get_fernet(create=False).decrypt(blob)
        except InvalidToken as exc:
            raise SecretBoxError(
                "The stored token was protected by a different user "
                "account or key, or has been modified."
            ) from exc

    # ── key handling ──────────────────────────────────────────────────

    def _get_fernet(self, *, create: bool) -> Fernet:
        if self._fernet is None:
            secret = self._read_or_create_secret(create)
            hkdf = HKDF(
                algorithm=hashes.SHA256(),
                length=32,
                salt=None,
                info=_HKDF_INFO_PREFIX + self._identity.encode("utf-8"),
            )
            key = base64.urlsafe_b64encode(hkdf.derive(secret))
            self._fernet = Fernet(key)
        return self._fernet

    def _read_or_create_secret(self, create: bool) -> bytes:
        try:
            secret = self._key_path.read_bytes()
        except FileNotFoundError:
            if not create:
                raise SecretBoxError(
                    f"Key file {self._key_path} is missing; "
                    "the stored token cannot be decrypted."
                ) from None
            return self._create_secret()
        except OSError as exc:
            raise SecretBoxError(f"Could not read key file: {exc}") from exc

        if len(secret) != KEY_BYTES:
            raise SecretBoxError(f"Key file {self._key_path} is corrupt.")
        return secret

    def _create_secret(self) -> bytes:
        secret = secrets.token_bytes(KEY_BYTES)
        try:
            self._key_path.parent.mkdir(parents=True, exist_ok=True)
            fd = os.open(
                self._key_path,
                os.O_WRONLY | os.O_CREAT | os.O_EXCL,
                0o600,
            )
            with os.fdopen(fd, "wb") as fh:
                fh.write(secret)
        except OSError as exc:
            raise SecretBoxError(f"Could not create key file: {exc}") from exc
        logger.info("Created token key file at %s", self._key_path)
        return secret


def default_secret_box(app_dir: Path) -> SecretBox:
    """The platform's per-user secret protection."""
    if sys.platform == "win32":
        return DpapiSecretBox()
    return FernetSecretBox(Path(app_dir) / KEY_FILENAME)
