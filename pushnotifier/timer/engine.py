"""Countdown state machine for Pushover Notifier.

States
------
IDLE          No session; the start control is enabled.
RUNNING       Counting down; the stop control is enabled.
COMPLETED     The wait finished; the notification is being sent.
CANCELLED     The user stopped the countdown.
FAILED        The notification could not be delivered.

Transitions
-----------
IDLE → RUNNING                           (start)
RUNNING → CANCELLED → IDLE               (stop)
RUNNING → COMPLETED → IDLE               (wait ends, send succeeds)
RUNNING → COMPLETED → FAILED → IDLE      (wait ends, send fails)

Every exit path runs the same cleanup: tick and delay halted, session
released, start enabled, stop disabled, transient status reset to
``Status: Waiting``.

The controller is a plain ``QObject``.  It owns two Qt timers (the
1-second tick and the single-shot delay) and talks to the outside only
through signals, so any widget layer can drive it.

The HTTP call runs on a daemon worker thread.  Its outcome comes back
through a queued signal, so result handling and cleanup always happen
on the thread that owns the controller.
"""

from __future__ import annotations

import logging
import math
import threading
from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from typing import Callable

from PyQt6.QtCore import QObject, Qt, QTimer, pyqtSignal

from ..errors import ValidationError
from ..notify.pushover import PushoverClient, SendResult, elapsed_message
from .cancellation import CancellationToken, OperationCancelled
from .durations import format_duration, parse_duration


logger = logging.getLogger(__name__)


# ── enums ─────────────────────────────────────────────────────────────────


class CountdownState(Enum):
    IDLE = "idle"
    RUNNING = "running"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    FAILED = "failed"


# ── constants ─────────────────────────────────────────────────────────────

TICK_INTERVAL_MS = 1000

STATUS_WAITING = "Status: Waiting"
STATUS_REMAINING = "Status: Time remaining: {remaining}"
STATUS_SENDING = "Status: Sending notification..."
STATUS_SENT = "Status: Notification sent successfully!"
STATUS_FAILED = "Status: Failed to send notification. Response: {body}"
STATUS_STOPPED = "Status: Timer stopped by user."
STATUS_ERROR = "Status: An error occurred: {error}"

MISSING_CREDENTIALS_MESSAGE = "Please enter both the API token and the user key."
ALREADY_RUNNING_MESSAGE = "A timer is already running."

API_ERROR_TITLE = "API Error"
RUNTIME_ERROR_TITLE = "Runtime Error"

_REMAINING_PREFIX = STATUS_REMAINING.split("{", 1)[0]


def is_transient_status(status: str) -> bool:
    """True for the countdown and sending texts that cleanup resets."""
    return status.startswith(_REMAINING_PREFIX) or status == STATUS_SENDING


@dataclass
class TimerSession:
    """Everything one countdown needs.  Lives from start to cleanup."""

    end_time: datetime
    duration: timedelta
    cancel_token: CancellationToken
    token: str
    user_key: str
    message: str
    sending: bool = False


# ── controller ────────────────────────────────────────────────────────────


class CountdownController(QObject):
    """Single cancellable countdown that ends in one push notification.

    Signals
    -------
    status_changed(text: str)
        Emitted whenever the status line changes.
    state_changed(new_state: CountdownState)
        Emitted on every state transition.
    controls_changed(start_enabled: bool, stop_enabled: bool)
        Emitted when the start/stop affordances change.
    error_occurred(title: str, message: str)
        One per failure that deserves a dialog.  Not emitted for
        user-initiated cancellation.
    tick(remaining_seconds: int)
        Emitted on every countdown tick while time remains.
    notification_finished(result: SendResult)
        Emitted after the API answered, success or not.
    """

    status_changed = pyqtSignal(str)
    state_changed = pyqtSignal(object)
    controls_changed = pyqtSignal(bool, bool)
    error_occurred = pyqtSignal(str, str)
    tick = pyqtSignal(int)
    notification_finished = pyqtSignal(object)

    # (session, result, error) from the send worker
    _send_finished = pyqtSignal(object, object, object)

    def __init__(
        self,
        parent: QObject | None = None,
        *,
        client: PushoverClient | None = None,
        clock: Callable[[], datetime] | None = None,
        tick_interval_ms: int = TICK_INTERVAL_MS,
    ) -> None:
        super().__init__(parent)

        self._client = client or PushoverClient()
        self._clock = clock or datetime.now

        self._state: CountdownState = CountdownState.IDLE
        self._last_outcome: CountdownState | None = None
        self._status: str = STATUS_WAITING
        self._start_enabled: bool = True
        self._stop_enabled: bool = False
        self._session: TimerSession | None = None

        # ── Qt timers ─────────────────────────────────────────────────
        self._tick_timer = QTimer(self)
        self._tick_timer.setInterval(tick_interval_ms)
        self._tick_timer.timeout.connect(self._on_tick)

        self._delay_timer = QTimer(self)
        self._delay_timer.setSingleShot(True)
        self._delay_timer.timeout.connect(self._on_delay_elapsed)

        self._send_thread: threading.Thread | None = None
        self._send_finished.connect(
            self._on_send_finished, Qt.ConnectionType.QueuedConnection,
        )

    # ══════════════════════════════════════════════════════════════════
    #  PUBLIC PROPERTIES
    # ══════════════════════════════════════════════════════════════════

    @property
    def state(self) -> CountdownState:
        return self._state

    @property
    def last_outcome(self) -> CountdownState | None:
        """COMPLETED, CANCELLED or FAILED for the most recent session."""
        return self._last_outcome

    @property
    def status(self) -> str:
        return self._status

    @property
    def start_enabled(self) -> bool:
        return self._start_enabled

    @property
    def stop_enabled(self) -> bool:
        return self._stop_enabled

    @property
    def is_running(self) -> bool:
        return self._session is not None

    @property
    def session(self) -> TimerSession | None:
        return self._session

    @property
    def end_time(self) -> datetime | None:
        return self._session.end_time if self._session else None

    @property
    def remaining(self) -> timedelta:
        """Time left on the active session (zero when idle)."""
        if self._session is None:
            return timedelta(0)
        return max(timedelta(0), self._session.end_time - self._clock())

    # ══════════════════════════════════════════════════════════════════
    #  CONTROLS
    # ══════════════════════════════════════════════════════════════════

    def start(
        self,
        duration: timedelta,
        *,
        token: str,
        user_key: str,
        label: str | None = None,
    ) -> None:
        """Begin a countdown of *duration*.

        Raises ``ValidationError`` (and changes nothing) for blank
        credentials, a non-positive duration, or while a session is
        already active.
        """
        self._check_can_start(token, user_key)
        if duration <= timedelta(0):
            raise ValidationError("The duration must be longer than zero.")

        label = label or format_duration(duration)
        cancel_token = CancellationToken()
        self._session = TimerSession(
            end_time=self._clock() + duration,
            duration=duration,
            cancel_token=cancel_token,
            token=token,
            user_key=user_key,
            message=elapsed_message(label),
        )
        cancel_token.register(self._wake_on_cancel)
        logger.info("Countdown started for %s", label)

        self._set_controls(False, True)
        self._set_state(CountdownState.RUNNING)
        self._tick_timer.start()
        self._on_tick()
        self._delay_timer.start(_to_msec(duration))

    def start_from_text(self, text: str, *, token: str, user_key: str) -> None:
        """Validate credentials, then parse ``hh:mm:ss`` and start."""
        # credential errors win over a malformed duration
        self._check_can_start(token, user_key)
        duration = parse_duration(text)
        self.start(duration, token=token, user_key=user_key, label=text.strip())

    def stop(self) -> None:
        """Cancel the countdown.  No-op when idle or once sending began."""
        session = self._session
        if session is None or session.sending:
            return
        logger.info("Countdown cancelled by user")
        session.cancel_token.cancel()

    def shutdown(self) -> None:
        """Cancel any active countdown before the application exits."""
        self.stop()

    def _check_can_start(self, token: str, user_key: str) -> None:
        if self._session is not None:
            raise ValidationError(ALREADY_RUNNING_MESSAGE)
        _check_credentials(token, user_key)

    # ══════════════════════════════════════════════════════════════════
    #  INTERNAL: timer mechanics
    # ══════════════════════════════════════════════════════════════════

    def _wake_on_cancel(self) -> None:
        self._delay_timer.stop()
        self._on_delay_elapsed()

    def _on_tick(self) -> None:
        session = self._session
        if session is None:
            self._tick_timer.stop()
            return

        remaining = session.end_time - self._clock()
        seconds = remaining.total_seconds()
        if seconds > 0:
            self.tick.emit(math.ceil(seconds))
            self._set_status(
                STATUS_REMAINING.format(remaining=format_duration(remaining))
            )
        else:
            self._tick_timer.stop()
            self._set_status(STATUS_SENDING)

    def _on_delay_elapsed(self) -> None:
        session = self._session
        if session is None or session.sending:
            return

        try:
            session.cancel_token.raise_if_cancelled()
            self._tick_timer.stop()
            self._set_state(CountdownState.COMPLETED)
            self._set_status(STATUS_SENDING)
            session.sending = True
            self._send_thread = threading.Thread(
                target=self._send_worker,
                args=(session,),
                name="pushover-send",
                daemon=True,
            )
            self._send_thread.start()
        except OperationCancelled:
            self._last_outcome = CountdownState.CANCELLED
            self._set_state(CountdownState.CANCELLED)
            self._set_status(STATUS_STOPPED)
            self._cleanup()
        except Exception as exc:
            self._report_failure(exc)
            self._cleanup()

    def _send_worker(self, session: TimerSession) -> None:
        """Runs off the GUI thread.  Touches nothing but the client."""
        result = error = None
        try:
            result = self._client.send(
                session.token, session.user_key, session.message,
            )
        except Exception as exc:
            error = exc
        self._send_finished.emit(session, result, error)

    def _on_send_finished(
        self,
        session: TimerSession,
        result: SendResult | None,
        error: Exception | None,
    ) -> None:
        if session is not self._session:
            return
        self._send_thread = None
        try:
            if error is not None:
                self._report_failure(error)
            else:
                self._handle_result(result)
        finally:
            self._cleanup()

    def _report_failure(self, exc: BaseException) -> None:
        logger.error("Notification failed", exc_info=exc)
        self._last_outcome = CountdownState.FAILED
        self._set_state(CountdownState.FAILED)
        self._set_status(STATUS_ERROR.format(error=exc))
        self.error_occurred.emit(RUNTIME_ERROR_TITLE, f"An error occurred: {exc}")

    def _handle_result(self, result: SendResult) -> None:
        self.notification_finished.emit(result)
        if result.ok:
            self._last_outcome = CountdownState.COMPLETED
            self._set_status(STATUS_SENT)
            return

        self._last_outcome = CountdownState.FAILED
        self._set_state(CountdownState.FAILED)
        self._set_status(STATUS_FAILED.format(body=result.body))
        self.error_occurred.emit(
            API_ERROR_TITLE,
            f"Failed to send notification.\nResponse: {result.body}",
        )

    def _cleanup(self) -> None:
        self._tick_timer.stop()
        self._delay_timer.stop()
        session, self._session = self._session, None
        if session is not None:
            session.cancel_token.release()
        self._set_controls(True, False)
        if is_transient_status(self._status):
            self._set_status(STATUS_WAITING)
        self._set_state(CountdownState.IDLE)

    # ── state helpers ─────────────────────────────────────────────────

    def _set_state(self, new_state: CountdownState) -> None:
        self._state = new_state
        self.state_changed.emit(new_state)

    def _set_status(self, text: str) -> None:
        if text == self._status:
            return
        self._status = text
        self.status_changed.emit(text)

    def _set_controls(self, start_enabled: bool, stop_enabled: bool) -> None:
        self._start_enabled = start_enabled
        self._stop_enabled = stop_enabled
        self.controls_changed.emit(start_enabled, stop_enabled)


def _check_credentials(token: str, user_key: str) -> None:
    if not (token or "").strip() or not (user_key or "").strip():
        raise ValidationError(MISSING_CREDENTIALS_MESSAGE)


def _to_msec(duration: timedelta) -> int:
    return int(duration.total_seconds() * 1000)
