# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Cooperative cancellation for client calls.

A :class:`CancellationToken` is created by the caller and passed to any
operation via its ``cancellation`` argument. Cancelling the token aborts the
wait for the in-flight HTTP call, which then raises
:class:`RequestCancelledError`. This is deliberately not a
:class:`~strava_client.core.errors.StravaError`: the caller asked for it.
"""

from __future__ import annotations

import threading
from typing import Callable, List, Optional


class RequestCancelledError(Exception):
    """Raised when a call is aborted through its :class:`CancellationToken`."""

    def __init__(self, message: str = "Request was cancelled") -> None:
        super().__init__(message)
        self.message = message


class CancellationToken:
    """
    Thread-safe, one-shot cancellation signal.

    Example::

        token = CancellationToken()
        threading.Timer(5.0, token.cancel).start()
        try:
            for activity in client.activities.iterate(cancellation=token):
                ...
        except RequestCancelledError:
            print("stopped")
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._cancelled = False
        self._callbacks: List[Callable[[], None]] = []

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        """Cancel the token. Registered callbacks run once, on the cancelling thread."""
        with self._lock:
            if self._cancelled:
                return
            self._cancelled = True
            callbacks, self._callbacks = self._callbacks, []
        for callback in callbacks:
            callback()

    def register(self, callback: Callable[[], None]) -> Callable[[], None]:
        """
        Run ``callback`` when the token is cancelled.

        If the token is already cancelled the callback runs immediately.

        :return: A function that unregisters the callback.
        """
        with self._lock:
            if not self._cancelled:
                self._callbacks.append(callback)
                return lambda: self._unregister(callback)
        callback()
        return lambda: None

    def _unregister(self, callback: Callable[[], None]) -> None:
        with self._lock:
            if callback in self._callbacks:
                self._callbacks.remove(callback)

    def raise_if_cancelled(self) -> None:
        if self._cancelled:
            raise RequestCancelledError()


def raise_if_cancelled(token: Optional[CancellationToken]) -> None:
    if token is not None:
        token.raise_if_cancelled()


__all__ = ["CancellationToken", "RequestCancelledError", "raise_if_cancelled"]
