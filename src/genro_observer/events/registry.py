# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Wildcard event registry.

Subscribed path patterns are indexed in a trie read from the *last*
segment of the pattern to the first. Each :class:`TrieNode` counts the
patterns passing through it (``counter``) and the patterns ending on it
(``end``). A pattern ``'*.population'`` is stored as::

    root -> 'population' -> '*'   (end=1)

Dispatching a concrete path walks the same way, from the last segment
backward, following both the exact child and the ``'*'`` child at every
level. Whenever a node with ``end > 0`` is reached after consuming the
whole path, the pattern-qualified event ``'<pattern>:<kind>'`` is
published. Exact matches are explored before wildcard ones, so the most
specific subscriptions are notified first. After the scan the plain
catch-all event ``'<kind>'`` is always published.

Example:
    >>> emitter = EventEmitter()
    >>> registry = WildcardRegistry(emitter)
    >>> registry.add(('*', 'population'))
    >>> registry.matches(('earth', 'population'))
    ['*.population']
"""

from __future__ import annotations

import logging
from typing import Any, Iterator

from .emitter import EventEmitter

logger = logging.getLogger(__name__)

WILDCARD = '*'


class TrieNode:
    """Reference-counted node of the pattern trie."""

    __slots__ = ('children', 'counter', 'end')

    def __init__(self) -> None:
        self.children: dict[str, TrieNode] = {}
        self.counter = 0
        self.end = 0

    def __repr__(self) -> str:
        return f"TrieNode(counter={self.counter}, end={self.end}, children={list(self.children)})"


class WildcardRegistry:
    """Pattern index dispatching mutations through an :class:`EventEmitter`.

    Args:
        emitter: The publish/subscribe primitive events are published on.
    """

    __slots__ = ('_emitter', '_root')

    def __init__(self, emitter: EventEmitter) -> None:
        self._emitter = emitter
        self._root = TrieNode()

    @property
    def root(self) -> TrieNode:
        return self._root

    def add(self, segments: tuple) -> None:
        """Index one subscription to the pattern ``segments``."""
        node = self._root
        for segment in reversed(segments):
            key = str(segment)
            child = node.children.get(key)
            if child is None:
                child = node.children[key] = TrieNode()
            child.counter += 1
            node = child
        node.end += 1
        logger.debug("Indexed pattern %r", '.'.join(map(str, segments)))

    def discard(self, segments: tuple) -> None:
        """Remove one subscription to the pattern ``segments``.

        The first node whose counter drops to zero is detached together
        with its subtree; nodes above it are still shared with other
        patterns and only lose one reference.
        """
        node = self._root
        for segment in reversed(segments):
            key = str(segment)
            child = node.children.get(key)
            if child is None:
                return
            child.counter -= 1
            if not child.counter:
                del node.children[key]
                logger.debug("Pruned pattern %r", '.'.join(map(str, segments)))
                return
            node = child
        if node.end:
            node.end -= 1

    def clear(self) -> None:
        """Drop every indexed pattern."""
        self._root = TrieNode()

    def dispatch(self, path: tuple, kind: str, *args: Any) -> None:
        """Publish the events for a ``kind`` change at ``path``.

        Every matching pattern receives ``'<pattern>:<kind>'`` first, then
        the catch-all ``kind`` event is published. Subscribers are called
        with ``(path, *args)``.
        """
        for pattern in self._scan(self._root, '', path, 1):
            self._emitter.publish(f"{pattern}:{kind}", path, *args)
        self._emitter.publish(kind, path, *args)

    def matches(self, path: tuple) -> list[str]:
        """Return the indexed patterns matching ``path``, in dispatch order."""
        return list(self._scan(self._root, '', path, 1))

    def _scan(self, node: TrieNode, pattern: str, path: tuple, depth: int) -> Iterator[str]:
        if node.end and depth - 1 == len(path):
            yield pattern
        if depth > len(path):
            return

        part = str(path[-depth])

        # specific
        child = node.children.get(part)
        if child is not None:
            yield from self._scan(child, f"{part}.{pattern}" if pattern else part, path, depth + 1)

        # wildcard
        if part != WILDCARD:
            child = node.children.get(WILDCARD)
            if child is not None:
                yield from self._scan(child, f"{WILDCARD}.{pattern}" if pattern else WILDCARD, path, depth + 1)
