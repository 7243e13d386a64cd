"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Shared state plumbing for data-fetch controllers.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

logger = logging.getLogger("barbercache.hooks")

DEFAULT_ERROR_MESSAGE = "Failed to load data"
DEFAULT_REFETCH_ERROR_MESSAGE = "Failed to refresh data"

Listener = Callable[[Any], None]
ErrorCallback = Callable[[BaseException], None]


def describe_error(exc: BaseException, fallback: str = DEFAULT_ERROR_MESSAGE) -> str:
    """Return the failure's own message, or `fallback` when it has none."""
    message = str(exc).strip()
    return message or fallback


def run_callback(callback: Callable[..., Any] | None, *args: Any) -> None:
    """Invoke a user callback; its own failures are logged, not raised."""
    if callback is None:
        return
    try:
        callback(*args)
    except Exception:
        logger.exception("Callback %r failed", callback)


class StateNotifier:
    """
    Listener registry used by stateful controllers.

    Listeners receive the controller after every state change. Once disposed,
    the controller stops notifying and ignores late results.
    """

    def __init__(self) -> None:
        self._listeners: list[Listener] = []
        self._disposed = False

    @property
    def disposed(self) -> bool:
        return self._disposed

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register `listener`; the returned callable unsubscribes it."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def dispose(self) -> None:
        """Stop applying results and drop listeners. In-flight calls keep running."""
        self._disposed = True
        self._listeners.clear()

    def _notify(self) -> None:
        if self._disposed:
            return
        for listener in list(self._listeners):
            listener(self)


class FetchController(StateNotifier):
    """
    Loading/error bookkeeping plus a monotonically increasing request token.

    Each fetch takes a token; a settled fetch is applied only if its token is
    still the latest one and the controller is not disposed, so a slow
    response for an old page never overwrites a newer one.
    """

    def __init__(
        self,
        *,
        on_error: ErrorCallback | None = None,
        error_message: str | None = None,
        is_loading: bool = True,
    ) -> None:
        super().__init__()
        self._on_error = on_error
        self._fallback_error = error_message or DEFAULT_ERROR_MESSAGE
        self._request_seq = 0
        self._is_loading = is_loading
        self._error: str | None = None

    @property
    def is_loading(self) -> bool:
        return self._is_loading

    @property
    def error(self) -> str | None:
        return self._error

    def _begin(self) -> int:
        self._request_seq += 1
        self._is_loading = True
        self._error = None
        self._notify()
        return self._request_seq

    def _is_current(self, token: int) -> bool:
        return not self._disposed and token == self._request_seq

    def _settle(self, token: int) -> None:
        if not self._is_current(token):
            return
        self._is_loading = False
        self._notify()

    def _record_failure(self, exc: Exception, fallback: str | None = None) -> None:
        self._error = describe_error(exc, fallback or self._fallback_error)
        logger.warning("%s fetch failed: %s", type(self).__name__, self._error)
        run_callback(self._on_error, exc)
