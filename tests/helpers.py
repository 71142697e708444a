"""Shared test helpers for Pushover Notifier."""

import io
import time
import urllib.error
import urllib.parse
from datetime import datetime, timedelta

from PyQt6.QtCore import QEventLoop
from PyQt6.QtWidgets import QApplication

from pushnotifier.notify.pushover import SendResult
from pushnotifier.timer.engine import CountdownController


class SignalCollector:
    """Utility to capture pyqtSignal emissions into a list."""

    def __init__(self):
        self.items: list = []

    def slot(self, *args):
        self.items.append(args if len(args) > 1 else args[0] if args else None)

    def __call__(self, *args):
        self.slot(*args)

    def __len__(self):
        return len(self.items)

    def __getitem__(self, idx):
        return self.items[idx]

    @property
    def last(self):
        return self.items[-1] if self.items else None

    def clear(self):
        self.items.clear()


class FakeClock:
    """Manually advanced stand-in for ``datetime.now``."""

    def __init__(self, start: datetime | None = None):
        self.now = start or datetime(2024, 1, 1, 12, 0, 0)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)


class FakeClient:
    """Records ``send`` calls; returns ``result`` or raises ``error``."""

    def __init__(self, result: SendResult | None = None, error: Exception | None = None):
        self.result = result or SendResult(ok=True, status=200, body='{"status":1}')
        self.error = error
        self.calls: list[tuple[str, str, str]] = []

    def send(self, token: str, user_key: str, message: str) -> SendResult:
        self.calls.append((token, user_key, message))
        if self.error is not None:
            raise self.error
        return self.result


class FakeResponse:
    def __init__(self, status: int, body: bytes):
        self.status = status
        self._body = body

    def read(self) -> bytes:
        return self._body

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False


class FakeOpener:
    """Stand-in for ``urllib.request.urlopen`` that records requests.

    ``status`` >= 400 raises ``HTTPError`` the way urlopen does.
    ``error`` is raised as-is when set.
    """

    def __init__(self, status: int = 200, body: bytes = b'{"status":1}', error=None):
        self.status = status
        self.body = body
        self.error = error
        self.requests: list = []

    def __call__(self, req, *args, **kwargs):
        self.requests.append(req)
        if self.error is not None:
            raise self.error
        if self.status >= 400:
            raise urllib.error.HTTPError(
                req.full_url, self.status, "error", {}, io.BytesIO(self.body),
            )
        return FakeResponse(self.status, self.body)

    @property
    def last_form(self) -> dict[str, str]:
        data = self.requests[-1].data.decode("utf-8")
        return dict(urllib.parse.parse_qsl(data))


def finish_wait(controller: CountdownController) -> None:
    """Fast-complete the current countdown and wait for the send to land."""
    controller._on_delay_elapsed()
    assert wait_until(lambda: controller.session is None)


def wait_until(predicate, timeout: float = 5.0) -> bool:
    """Spin the Qt event loop until *predicate* is true or *timeout* passes."""
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        QApplication.processEvents(QEventLoop.ProcessEventsFlag.AllEvents, 50)
        if predicate():
            return True
        time.sleep(0.01)
    return predicate()
