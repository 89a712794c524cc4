# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
HTTP dispatch with timeout handling, caller cancellation, and optional session support.

This module provides :class:`~strava_client.core._http._HttpClient`, a wrapper
around the requests library that runs each call on a dispatch thread so the
waiting caller can be released either by the configured timeout or by a
:class:`~strava_client.core.cancellation.CancellationToken`. It performs no
retries; rate-limit and network failures are reported to the caller as-is.
"""

from __future__ import annotations

import threading
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Optional

import requests

from .cancellation import CancellationToken

ABORT_TIMEOUT = "timeout"
ABORT_CALLER = "caller"


class _RequestAborted(Exception):
    """Raised when the wait for a response was abandoned.

    :param reason: :data:`ABORT_TIMEOUT` or :data:`ABORT_CALLER`.
    """

    def __init__(self, reason: str) -> None:
        super().__init__(f"Request aborted ({reason})")
        self.reason = reason


class _AbortState:
    """Records which source aborted a call first; later triggers are ignored."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self.reason: Optional[str] = None
        self.wakeup = threading.Event()

    def trigger(self, reason: str) -> None:
        with self._lock:
            if self.reason is None:
                self.reason = reason
        self.wakeup.set()


class _HttpClient:
    """
    HTTP client with timeout handling, cancellation, and optional session support.

    :param timeout: Default request timeout in seconds. Default is 30.
    :type timeout: :class:`float` | None
    :param session: Optional requests.Session for connection pooling. If provided,
        all requests use this session for efficient connection reuse.
    :type session: :class:`requests.Session` | None
    :param max_workers: Number of dispatch threads. Default is 8.
    :type max_workers: :class:`int` | None
    """

    def __init__(
        self,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
        max_workers: Optional[int] = None,
    ) -> None:
        self.default_timeout: float = timeout if timeout is not None else 30.0
        self.max_workers = max_workers if max_workers is not None else 8
        self._session = session
        self._executor: Optional[ThreadPoolExecutor] = None
        self._executor_lock = threading.Lock()

    def use_session(self, session: Optional[requests.Session]) -> None:
        """Route subsequent requests through ``session`` (or standalone requests when None)."""
        self._session = session

    def _get_executor(self) -> ThreadPoolExecutor:
        with self._executor_lock:
            if self._executor is None:
                self._executor = ThreadPoolExecutor(
                    max_workers=self.max_workers, thread_name_prefix="strava-http"
                )
            return self._executor

    def _send(self, method: str, url: str, **kwargs: Any) -> requests.Response:
        if self._session is not None:
            return self._session.request(method, url, **kwargs)
        return requests.request(method, url, **kwargs)

    def _request(
        self,
        method: str,
        url: str,
        *,
        timeout: Optional[float] = None,
        cancellation: Optional[CancellationToken] = None,
        **kwargs: Any,
    ) -> requests.Response:
        """
        Execute an HTTP request, giving up when the timeout elapses or the caller cancels.

        The same timeout is forwarded to requests so an abandoned dispatch thread
        finishes on its own shortly after the caller has been released.

        :param method: HTTP method (GET, POST, PUT, ...).
        :type method: :class:`str`
        :param url: Fully built target URL.
        :type url: :class:`str`
        :param timeout: Seconds to wait; defaults to :attr:`default_timeout`.
        :type timeout: :class:`float` | None
        :param cancellation: Optional caller cancellation token.
        :type cancellation: ~strava_client.core.cancellation.CancellationToken | None
        :param kwargs: Additional arguments passed to ``requests.request()`` or
            ``session.request()``, including headers, json, data, files.
        :return: HTTP response object.
        :rtype: :class:`requests.Response`
        :raises _RequestAborted: If the timeout elapsed or the caller cancelled first.
        :raises requests.exceptions.RequestException: If the transport failed.
        """
        if timeout is None:
            timeout = self.default_timeout

        if cancellation is not None and cancellation.cancelled:
            raise _RequestAborted(ABORT_CALLER)

        kwargs["timeout"] = timeout
        state = _AbortState()
        future = self._get_executor().submit(self._send, method, url, **kwargs)
        future.add_done_callback(lambda _f: state.wakeup.set())

        unregister = None
        if cancellation is not None:
            unregister = cancellation.register(lambda: state.trigger(ABORT_CALLER))
        try:
            if not state.wakeup.wait(timeout):
                state.trigger(ABORT_TIMEOUT)
        finally:
            if unregister is not None:
                unregister()

        if state.reason is None:
            return future.result()
        future.cancel()
        raise _RequestAborted(state.reason)

    def close(self) -> None:
        """
        Close the HTTP client and release resources.

        Stops the dispatch threads without waiting for abandoned calls and drops
        the session reference. The session itself belongs to the caller and is
        not closed here. Safe to call multiple times.
        """
        with self._executor_lock:
            if self._executor is not None:
                self._executor.shutdown(wait=False)
                self._executor = None
        self._session = None
