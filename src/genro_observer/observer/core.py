# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Observer - JSON-like data with synchronous change events.

This module provides the Observer class, a wrapper over plain ``dict`` /
``list`` data that publishes an event for every change it makes. Modules
of an application subscribe to the paths they care about and never need
to know who changed the data.

Key Features:
    - **Path access**: Dotted paths ('planets.earth.population'), with
      numeric segments addressing array indexes ('moons.0.name')
    - **Diffed writes**: ``set`` and ``patch`` announce exactly what was
      created, changed or removed, down to the deepest value
    - **Array operations**: ``insert``, ``move`` and ``remove`` announce
      every element whose index shifted
    - **Wildcards**: '*' matches any single segment of a path

Events:
    Subscriptions use ``'<path>:<kind>'`` where kind is one of ``set``,
    ``unset``, ``insert``, ``move`` or ``remove``. A bare kind (``'set'``)
    receives every event of that kind. Callbacks receive the path of the
    change as a tuple followed by the event arguments:

    - ``set``: ``(path, value, previous)``
    - ``unset``: ``(path, previous)``
    - ``insert``: ``(path, value, index)``
    - ``move``: ``(path, value, from_index, to_index)``
    - ``remove``: ``(path, value, index)``

    A previous value that did not exist is passed as ``None``.

Example:
    Basic usage::

        planets = Observer({
            'earth': {'age': 4.543, 'population': 7.594},
            'mars': {'age': 4.603, 'population': 0},
        })

        def on_population(path, value, previous):
            print(path[0], value)

        planets.subscribe('*.population:set', on_population)
        planets.set('earth.population', 7.595)  # prints: earth 7.595

All mutation methods are synchronous: every event is delivered before the
method returns. Invalid paths and shapes are ignored silently.
"""

from __future__ import annotations

import logging
import re
from typing import Any

from ..events.emitter import EventCallback, EventEmitter, EventHandle, Subscription
from ..events.registry import WildcardRegistry
from ..exceptions import InvalidSubscriptionError
from ..node import UNDEFINED, NodeKind, get_child, is_container, kind_of, normalize_key, same_value, walk
from ..paths import PathLike, PathResolver
from .arrays import ArrayMixin
from .diff import DiffMixin

logger = logging.getLogger(__name__)

EVENT_KINDS = ('set', 'unset', 'insert', 'move', 'remove')

_PATTERN_RE = re.compile(r'^(.*):(' + '|'.join(EVENT_KINDS) + r')$')

_MISSING = object()


class Observer(ArrayMixin, DiffMixin):
    """JSON-like data container publishing structured change events.

    Observer provides:
    - get(path): Read a value
    - set(path, value) / patch(path, value) / unset(path): Diffed writes
    - insert / move / remove: Array operations
    - subscribe(pattern, callback): Exact or wildcard subscriptions

    Attributes:
        data: The observed root value. Treat it as read-only, it is the
            live internal state.

    Example:
        >>> obs = Observer({'position': {'x': 0, 'y': 0}})
        >>> handle = obs.subscribe('position.*:set', lambda path, v, old: print(path, v))
        >>> obs.set('position.x', 4)
        ('position', 'x') 4
    """

    __slots__ = ('_data', '_resolver', '_emitter', '_registry', '_patterns')

    def __init__(self, data: dict | list | None = None, *, revalidate_paths: bool = False) -> None:
        """Initialize an Observer.

        Args:
            data: Initial root value, a dict or a list. Defaults to an
                empty dict. The observer takes ownership of it.
            revalidate_paths: If True, string paths are resolved against
                the current shape of the data on every call. By default
                the first resolution of a path string is cached and reused
                until ``reset()``.

        Raises:
            TypeError: If ``data`` is neither a dict nor a list.
        """
        if data is None:
            data = {}
        elif not is_container(data):
            raise TypeError(f"data must be dict or list, not {type(data).__name__}")

        self._data = data
        self._resolver = PathResolver(self._get_root, revalidate=revalidate_paths)
        self._emitter = EventEmitter(on_discard=self._forget_subscription)
        self._registry = WildcardRegistry(self._emitter)
        self._patterns: dict[int, tuple] = {}

    # ==================== Special Methods ====================

    def __repr__(self) -> str:
        return f"Observer({self._data!r})"

    def __contains__(self, path: PathLike) -> bool:
        return walk(self._data, self._resolve(path)) is not UNDEFINED

    def __getitem__(self, path: PathLike) -> Any:
        """Get value by path.

        Raises:
            KeyError: If path not found.
        """
        value = walk(self._data, self._resolve(path))
        if value is UNDEFINED:
            raise KeyError(path)
        return value

    def __setitem__(self, path: PathLike, value: Any) -> None:
        self.set(path, value)

    def __delitem__(self, path: PathLike) -> None:
        self.unset(path)

    @property
    def data(self) -> dict | list:
        """The observed root value (read-only view of live state)."""
        return self._data

    @property
    def revalidate_paths(self) -> bool:
        """True if string paths are re-resolved on every call instead of cached."""
        return self._resolver.revalidate

    # ==================== Core API ====================

    def get(self, path: PathLike = '', default: Any = None) -> Any:
        """Get the value at ``path``, or ``default`` if any segment is missing.

        Example:
            >>> obs.get('position.x')
            >>> obs.get()  # the whole data
        """
        value = walk(self._data, self._resolve(path))
        return default if value is UNDEFINED else value

    def set(self, path: PathLike, value: Any = _MISSING) -> None:
        """Set ``value`` at ``path``, replacing what was there.

        Missing intermediate containers are never created: if the parent of
        ``path`` does not exist the call does nothing. Setting an array
        index past its end pads the array with ``None`` and emits an
        ``insert`` for every new slot.

        Called with a single argument, replaces the root (which must stay a
        dict or a list).

        Example:
            >>> obs.set('position.x', 42)
            >>> obs.set('position', {'x': 4, 'y': 2})
            >>> obs.set({'position': None})
        """
        if value is _MISSING:
            path, value = '', path

        segments = self._resolve(path)
        if not segments:
            if not is_container(value):
                logger.debug("set ignored: root must be dict or list, got %s", type(value).__name__)
                return
            old = self._data
            self._data = value
            self._check_unset((), old, value)
            self._check_set((), value, old)
            return

        located = self._locate(segments, 'set')
        if located is None:
            return
        event_path, parent, key = located

        old, grown_from = self._store(parent, key, value)
        self._check_unset(event_path, old, value)
        self._check_set(event_path, value, old)
        if grown_from is not None:
            self._announce_growth(event_path[:-1], parent, grown_from)

    def patch(self, path: PathLike, value: Any = _MISSING) -> None:
        """Merge ``value`` into the data at ``path``.

        Keys that ``value`` does not mention are kept. A container replaced
        by a scalar still announces the removal of its content. A dict and a
        list merge into each other by key: list indexes become string keys
        of a dict, digit keys of a dict address list items.

        Example:
            >>> obs = Observer({'position': {'x': 4, 'y': 2}})
            >>> obs.patch('position', {'z': 7})
            >>> obs.get('position')
            {'x': 4, 'y': 2, 'z': 7}
        """
        if value is _MISSING:
            path, value = '', path

        segments = self._resolve(path)
        if not segments:
            if not is_container(value):
                logger.debug("patch ignored: root must be dict or list, got %s", type(value).__name__)
                return
            self._patch_node((), self._data, value)
            return

        located = self._locate(segments, 'patch')
        if located is None:
            return
        event_path, parent, key = located

        current = get_child(parent, key)
        if is_container(current):
            if is_container(value):
                self._patch_node(event_path, current, value)
            else:
                self._store(parent, key, value)
                self._replace(event_path, current, value)
            return

        if same_value(current, value):
            return
        old, grown_from = self._store(parent, key, value)
        self._check_set(event_path, value, old)
        if grown_from is not None:
            self._announce_growth(event_path[:-1], parent, grown_from)

    def unset(self, path: PathLike = '') -> None:
        """Remove the value at ``path``.

        Without a path the root is replaced by an empty dict. Removing an
        array element shifts the following elements like ``remove`` does;
        a negative final index counts from the end of the array.

        Example:
            >>> obs.unset('position.z')
        """
        segments = self._resolve(path)
        if not segments:
            old = self._data
            self._data = {}
            self._check_unset((), old, self._data)
            return

        located = self._locate(segments, 'unset', negative=True)
        if located is None:
            return
        event_path, parent, key = located

        old = get_child(parent, key)
        if old is UNDEFINED:
            return
        if kind_of(parent) is NodeKind.ARRAY:
            self._remove_at(event_path[:-1], parent, key)
            return
        self._check_unset(event_path, old)
        parent.pop(key, None)

    def reset(self) -> None:
        """Replace the data with an empty dict and drop every subscription.

        No event is emitted and the path cache is cleared.
        """
        self._data = {}
        self._resolver.clear()
        self._emitter.unsubscribe_all()
        self._patterns.clear()
        self._registry.clear()

    def clear(self) -> None:
        """Alias of :meth:`reset`."""
        self.reset()

    # ==================== Subscriptions ====================

    def subscribe(
        self, pattern: str, callback: EventCallback, once: bool = False
    ) -> EventHandle:
        """Subscribe ``callback`` to changes matching ``pattern``.

        Args:
            pattern: ``'<path>:<kind>'`` for changes at a path, where any
                segment may be ``'*'``; ``':<kind>'`` for changes of the
                root itself; a bare kind for every change of that kind.
            callback: Called with the path tuple and the event arguments.
            once: If True, the subscription is removed after one delivery.

        Returns:
            EventHandle whose ``unsubscribe()`` removes the subscription.

        Raises:
            InvalidSubscriptionError: If the pattern is not a non-empty
                string or the callback is not callable.

        Example:
            >>> obs.subscribe('earth.population:set', on_population)
            >>> obs.subscribe('*.moons:insert', on_moon)
            >>> obs.subscribe('unset', on_anything_removed)
        """
        if not isinstance(pattern, str):
            raise InvalidSubscriptionError(f"Pattern must be a string, got {pattern!r}")

        match = _PATTERN_RE.match(pattern)
        segments = self._resolve(match.group(1)) if match is not None else None

        handle = self._emitter.subscribe(pattern, callback, once)
        if segments is not None:
            self._registry.add(segments)
            self._patterns[handle.id] = segments
        return handle

    def once(self, pattern: str, callback: EventCallback) -> EventHandle:
        """Subscribe ``callback`` for a single delivery."""
        return self.subscribe(pattern, callback, once=True)

    def unsubscribe(self, handle: EventHandle) -> bool:
        """Remove a subscription. Returns False if it was already gone."""
        return self._emitter.unsubscribe(handle)

    def unsubscribe_all(
        self, pattern: str | None = None, callback: EventCallback | None = None
    ) -> int:
        """Remove every subscription matching ``pattern`` and/or ``callback``."""
        return self._emitter.unsubscribe_all(pattern, callback)

    # ==================== Internals ====================

    def _get_root(self) -> dict | list:
        return self._data

    def _resolve(self, path: PathLike) -> tuple:
        return self._resolver.resolve(path)

    def _emit(self, path: tuple, kind: str, *args: Any) -> None:
        args = tuple(None if arg is UNDEFINED else arg for arg in args)
        self._registry.dispatch(path, kind, *args)

    def _forget_subscription(self, subscription: Subscription) -> None:
        segments = self._patterns.pop(subscription.id, None)
        if segments is not None:
            self._registry.discard(segments)

    def _locate(
        self, segments: tuple, operation: str, negative: bool = False
    ) -> tuple[tuple, dict | list, Any] | None:
        """Find the parent container and the final key of ``segments``.

        Returns:
            ``(event_path, parent, key)`` with ``key`` normalized for the
            parent, or None if the parent does not exist or the key cannot
            address it.
        """
        parent = walk(self._data, segments[:-1])
        if not is_container(parent):
            logger.debug("%s ignored: parent of %r is missing or not a container", operation, segments)
            return None

        key = normalize_key(parent, segments[-1])
        if key is UNDEFINED:
            logger.debug("%s ignored: %r cannot address %s", operation, segments[-1], type(parent).__name__)
            return None
        if isinstance(parent, list) and key < 0:
            if negative:
                key += len(parent)
            if key < 0:
                logger.debug("%s ignored: index %r out of range", operation, segments[-1])
                return None
        return segments[:-1] + (key,), parent, key

    def _store(self, parent: dict | list, key: Any, value: Any) -> tuple[Any, int | None]:
        """Write ``value`` under ``key``.

        Returns:
            ``(previous, grown_from)`` where ``grown_from`` is the former
            length when an array had to be padded, None otherwise.
        """
        if isinstance(parent, list):
            length = len(parent)
            if key >= length:
                parent.extend([None] * (key - length + 1))
                parent[key] = value
                return UNDEFINED, length
            previous = parent[key]
            parent[key] = value
            return previous, None
        previous = parent.get(key, UNDEFINED)
        parent[key] = value
        return previous, None
