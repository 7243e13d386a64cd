"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Stateful data-fetch controllers for UI surfaces.

Quick start::

    from barbercache import create_pagination_cache
    from barbercache.hooks import PaginationController

    pages = create_pagination_cache()
    appointments = PaginationController("appointments", api.list_appointments, pages)
    await appointments.load()
    await appointments.next_page()
"""

from .base import (
    DEFAULT_ERROR_MESSAGE,
    FetchController,
    StateNotifier,
    describe_error,
)
from .data import DataController, DataState
from .loading import AsyncState, LoadingTracker
from .pagination import PaginationController, PaginationState

__all__ = [
    "DEFAULT_ERROR_MESSAGE",
    "StateNotifier",
    "FetchController",
    "describe_error",
    "PaginationController",
    "PaginationState",
    "DataController",
    "DataState",
    "LoadingTracker",
    "AsyncState",
]
