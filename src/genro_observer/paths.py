# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Path resolution for the observer.

A path is accepted in three forms:

- a dotted string: ``'planets.earth.population'`` or ``'list.2.name'``
- a single integer, addressing an index of a root array
- a ready tuple/list of segments, used as-is

String paths are split on ``'.'`` and resolved against the shape of the
data at the time of the first lookup: a segment that lands on a ``list``
becomes an ``int`` index, every other segment stays a ``str`` key. Once a
string has been resolved the result is cached and reused, even if the
shape of the data changes later. The cache is dropped only by
:meth:`PathResolver.clear` (called by ``Observer.reset``), unless the
resolver was built with ``revalidate=True``.

The empty string resolves to the empty tuple, which denotes the root.
"""

from __future__ import annotations

from typing import Any, Callable

from .node import UNDEFINED, NodeKind, get_child, is_index_text, kind_of


PathLike = str | int | tuple | list
Segments = tuple


class PathResolver:
    """Turns raw paths into cached tuples of segments.

    Args:
        root: Callable returning the current root of the data tree.
        revalidate: If True, string paths are resolved against the current
            shape on every call instead of being served from the cache.
    """

    __slots__ = ('_root', '_cache', 'revalidate')

    def __init__(self, root: Callable[[], Any], revalidate: bool = False) -> None:
        self._root = root
        self._cache: dict[str, Segments] = {}
        self.revalidate = revalidate

    def __len__(self) -> int:
        return len(self._cache)

    def __contains__(self, path: str) -> bool:
        return path in self._cache

    def resolve(self, path: PathLike) -> Segments:
        """Return the segments for ``path``."""
        if isinstance(path, bool):
            raise TypeError("path must be str, int or a sequence of segments, not bool")
        if isinstance(path, int):
            return (path,)
        if isinstance(path, (tuple, list)):
            return tuple(path)
        if not path:
            return ()

        if not self.revalidate:
            cached = self._cache.get(path)
            if cached is not None:
                return cached

        segments = self._classify(path.split('.'))
        if not self.revalidate:
            self._cache[path] = segments
        return segments

    def clear(self) -> None:
        """Forget every cached resolution."""
        self._cache.clear()

    def _classify(self, parts: list[str]) -> Segments:
        node = self._root()
        for i, part in enumerate(parts):
            if node is UNDEFINED:
                # rest of the path is unresolved, segments stay strings
                break
            if kind_of(node) is NodeKind.ARRAY and is_index_text(part):
                parts[i] = int(part)
            node = get_child(node, parts[i])
        return tuple(parts)
