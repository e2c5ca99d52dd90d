# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Genro-Observer - JSON-like data with synchronous change events.

A lightweight, zero-dependency library wrapping plain dict/list data and
publishing structured ``set``, ``unset``, ``insert``, ``move`` and
``remove`` events, with exact and wildcard path subscriptions.
"""

__version__ = "0.1.0"

from .events import EventEmitter, EventHandle, WildcardRegistry
from .exceptions import InvalidSubscriptionError, ObserverError
from .node import UNDEFINED, NodeKind
from .observer import EVENT_KINDS, Observer
from .paths import PathResolver

__all__ = [
    # Core classes
    "Observer",
    "EVENT_KINDS",
    # Building blocks
    "EventEmitter",
    "EventHandle",
    "WildcardRegistry",
    "PathResolver",
    "NodeKind",
    "UNDEFINED",
    # Exceptions
    "ObserverError",
    "InvalidSubscriptionError",
]
