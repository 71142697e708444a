"""Pushover message API client.

One form-encoded POST per notification.  No timeout and no retry: the
caller decides what to do with a failed ``SendResult`` or a
``NotificationError``.
"""

from __future__ import annotations

import logging
import urllib.error
import urllib.parse
import urllib.request
from dataclasses import dataclass
from typing import Callable

from ..errors import NotificationError


logger = logging.getLogger(__name__)

PUSHOVER_URL = "https://api.pushover.net/1/messages.json"
FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


@dataclass(frozen=True)
class SendResult:
    """Outcome of a single POST.  ``body`` is the raw response text."""

    ok: bool
    status: int
    body: str


def elapsed_message(label: str) -> str:
    """The notification text sent when a countdown of *label* finishes."""
    return f"{label} has elapsed"


def _decode(raw: bytes) -> str:
    return raw.decode("utf-8", errors="replace")


class PushoverClient:
    """Sends messages to the Pushover API.

    ``opener`` defaults to ``urllib.request.urlopen``; tests pass a fake
    with the same call signature.
    """

    def __init__(
        self,
        url: str = PUSHOVER_URL,
        *,
        opener: Callable | None = None,
    ) -> None:
        self._url = url
        self._opener = opener or urllib.request.urlopen

    @property
    def url(self) -> str:
        return self._url

    def build_request(
        self, token: str, user_key: str, message: str,
    ) -> urllib.request.Request:
        payload = urllib.parse.urlencode([
            ("token", token),
            ("user", user_key),
            ("message", message),
        ]).encode("utf-8")
        return urllib.request.Request(
            self._url,
            data=payload,
            headers={"Content-Type": FORM_CONTENT_TYPE},
            method="POST",
        )

    def send(self, token: str, user_key: str, message: str) -> SendResult:
        req = self.build_request(token, user_key, message)
        logger.info("Sending notification to %s", self._url)
        try:
            with self._opener(req) as resp:
                status = resp.status
                body = _decode(resp.read())
        except urllib.error.HTTPError as exc:
            # urlopen raises for 4xx/5xx; the body still carries the API's
            # error description.
            body = _decode(exc.read() or b"")
            logger.warning("Pushover rejected the message (HTTP %s)", exc.code)
            return SendResult(ok=False, status=exc.code, body=body)
        except urllib.error.URLError as exc:
            logger.warning("Pushover request failed: %s", exc.reason)
            raise NotificationError(str(exc.reason)) from exc
        except OSError as exc:
            logger.warning("Pushover request failed: %s", exc)
            raise NotificationError(str(exc)) from exc

        ok = 200 <= status < 300
        if ok:
            logger.info("Notification accepted (HTTP %s)", status)
        else:
            logger.warning("Pushover returned HTTP %s", status)
        return SendResult(ok=ok, status=status, body=body)
