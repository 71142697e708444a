"""Cooperative cancellation shared by a waiting session and the stop action."""

from __future__ import annotations

from typing import Callable


class OperationCancelled(Exception):
    """Raised by ``CancellationToken.raise_if_cancelled`` after ``cancel()``."""


class CancellationToken:
    """One-shot cancellation flag with wake-up callbacks.

    Callbacks registered with :meth:`register` run synchronously, once,
    when :meth:`cancel` is first called.  Registering on an already
    cancelled token runs the callback immediately.
    """

    def __init__(self) -> None:
        self._cancelled = False
        self._callbacks: list[Callable[[], None]] = []

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def register(self, callback: Callable[[], None]) -> None:
        if self._cancelled:
            callback()
            return
        self._callbacks.append(callback)

    def cancel(self) -> None:
        if self._cancelled:
            return
        self._cancelled = True
        callbacks, self._callbacks = self._callbacks, []
        for callback in callbacks:
            callback()

    def raise_if_cancelled(self) -> None:
        if self._cancelled:
            raise OperationCancelled()

    def release(self) -> None:
        """Drop callbacks so the token no longer references its owner."""
        self._callbacks.clear()
