"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Generic loading/error/success trackers for ad-hoc async operations.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Any, Generic, TypeVar

from .base import StateNotifier, describe_error, run_callback

logger = logging.getLogger("barbercache.hooks.loading")

T = TypeVar("T")

DEFAULT_SUCCESS_CLEAR_S = 5.0
UNKNOWN_ERROR_MESSAGE = "Unknown error"


class LoadingTracker(StateNotifier):
    """
    Track `is_loading`, `error` and a transient `success` message.

    A success message set through `handle_async` clears itself after
    `success_clear_s`; `reset()` cancels that pending clear.
    """

    def __init__(self, *, success_clear_s: float = DEFAULT_SUCCESS_CLEAR_S) -> None:
        super().__init__()
        self._success_clear_s = success_clear_s
        self._clear_handle: asyncio.TimerHandle | None = None
        self.is_loading = False
        self.error: str | None = None
        self.success: str | None = None

    def set_loading(self, is_loading: bool) -> None:
        self.is_loading = is_loading
        self._notify()

    def set_error(self, error: str | None) -> None:
        self.error = error
        self._notify()

    def set_success(self, success: str | None) -> None:
        self.success = success
        self._notify()

    def reset(self) -> None:
        self._cancel_clear()
        self.is_loading = False
        self.error = None
        self.success = None
        self._notify()

    def dispose(self) -> None:
        self._cancel_clear()
        super().dispose()

    async def handle_async(
        self,
        fn: Callable[[], Awaitable[T]],
        *,
        success_message: str | None = None,
        error_message: str | None = None,
        on_success: Callable[[T], None] | None = None,
        on_error: Callable[[BaseException], None] | None = None,
    ) -> T | None:
        """
        Run `fn` while tracking state. Returns its result, or `None` on failure.

        Failures are recorded in `error` and never re-raised.
        """
        self._cancel_clear()
        self.is_loading = True
        self.error = None
        self.success = None
        self._notify()
        try:
            data = await fn()
            if success_message:
                self.success = success_message
                self._schedule_clear()
            run_callback(on_success, data)
            return data
        except Exception as exc:
            self.error = describe_error(exc, error_message or UNKNOWN_ERROR_MESSAGE)
            logger.warning("LoadingTracker operation failed: %s", self.error)
            run_callback(on_error, exc)
            return None
        finally:
            self.is_loading = False
            self._notify()

    def _schedule_clear(self) -> None:
        loop = asyncio.get_running_loop()
        self._clear_handle = loop.call_later(self._success_clear_s, self._clear_success)

    def _clear_success(self) -> None:
        self._clear_handle = None
        self.success = None
        self._notify()

    def _cancel_clear(self) -> None:
        if self._clear_handle is not None:
            self._clear_handle.cancel()
            self._clear_handle = None


class AsyncState(Generic[T]):
    """
    Keep the last successful result of an async operation and allow retries.

    `retry()` re-runs whichever function was last passed to `execute()`
    (or the initial one).
    """

    def __init__(
        self,
        initial_fn: Callable[[], Awaitable[T]] | None = None,
        *,
        on_error: Callable[[BaseException], None] | None = None,
        success_message: str = "Loaded successfully",
        error_message: str = "Failed to load",
    ) -> None:
        self.tracker = LoadingTracker()
        self.data: T | None = None
        self._last_fn = initial_fn
        self._on_error = on_error
        self._success_message = success_message
        self._error_message = error_message

    @property
    def is_loading(self) -> bool:
        return self.tracker.is_loading

    @property
    def error(self) -> str | None:
        return self.tracker.error

    @property
    def success(self) -> str | None:
        return self.tracker.success

    async def execute(self, fn: Callable[[], Awaitable[T]]) -> None:
        self._last_fn = fn
        tracker = self.tracker
        try:
            tracker.set_loading(True)
            tracker.set_error(None)
            result = await fn()
            self.data = result
            tracker.set_success(self._success_message)
        except Exception as exc:
            tracker.set_error(describe_error(exc, self._error_message))
            run_callback(self._on_error, exc)
        finally:
            tracker.set_loading(False)

    async def retry(self) -> None:
        if self._last_fn is not None:
            await self.execute(self._last_fn)

    def subscribe(self, listener: Callable[[Any], None]) -> Callable[[], None]:
        return self.tracker.subscribe(lambda _tracker: listener(self))
