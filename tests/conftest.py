"""Shared pytest fixtures for Pushover Notifier tests."""

import os
import sys

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from PyQt6.QtWidgets import QApplication

from pushnotifier.security import FernetSecretBox
from pushnotifier.timer.engine import CountdownController

from helpers import FakeClient, FakeClock


@pytest.fixture(scope="session")
def qapp():
    """A single QApplication instance shared across the entire test run."""
    app = QApplication.instance() or QApplication(sys.argv)
    yield app


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path, monkeypatch):
    """Keep every test away from the real per-user settings directory."""
    monkeypatch.setattr("pushnotifier.settings.APP_DIR", tmp_path)
    monkeypatch.setattr(
        "pushnotifier.settings.SETTINGS_PATH", tmp_path / "settings.json",
    )
    yield tmp_path


@pytest.fixture
def secret_box(tmp_path):
    """Fernet box with its key file under the test's temp directory."""
    return FernetSecretBox(tmp_path / "secret.key", identity="alice")


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def client():
    return FakeClient()


@pytest.fixture
def controller(qapp, client, clock):
    """Controller driven by a fake clock and a fake notification client."""
    return CountdownController(parent=None, client=client, clock=clock)
