# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Array mutations for Observer.

This module provides the ArrayMixin class with the structural operations
on arrays: ``insert``, ``move`` and ``remove``. Each of them shifts the
indexes of other elements, and every shifted element is announced with a
``move`` event carrying its previous and its new index, so subscribers
holding numeric paths can keep them valid.

Event order:
    - insert: ``move`` for each shifted element (highest index first),
      then ``insert``, then ``set`` events for the new value.
    - remove: ``unset`` events for the removed value, then ``move`` for
      each following element (highest index first), then ``remove``.
    - move: ``move`` for each element filling the gap, starting next to
      the vacated slot, then ``move`` for the element itself.

Array events are published on the path of the array, not of the element.
"""

from __future__ import annotations

import logging
from typing import Any

from ..node import UNDEFINED, NodeKind, kind_of, walk
from ..paths import PathLike

logger = logging.getLogger(__name__)


class ArrayMixin:
    """Mixin providing array insert/move/remove for Observer.

    Requires the host class to implement ``_resolve(path)``,
    ``_emit(path, kind, *args)``, ``_check_set`` and ``_check_unset``, and to
    expose the root of the data as ``_data``.
    """

    __slots__ = ()

    def insert(self, path: PathLike, value: Any, index: int = -1) -> None:
        """Insert ``value`` into the array at ``path``.

        Args:
            path: Path of the array.
            value: Value to insert.
            index: Position of the new value. ``0`` prepends, ``-1`` or any
                index past the end appends, other negative indexes count
                from the end (``-2`` inserts before the last element).

        Example:
            >>> obs = Observer({'tags': ['a', 'b', 'c']})
            >>> obs.insert('tags', 'x', 1)
            >>> obs.get('tags')
            ['a', 'x', 'b', 'c']
        """
        target = self._target_array(path, 'insert')
        if target is None:
            return
        segments, array = target

        length = len(array)
        if index == -1 or index >= length:
            index = length
        elif index < -1:
            index = max(0, length + index + 1)

        array.insert(index, value)
        shifted = array[index + 1:]
        for offset in range(len(shifted) - 1, -1, -1):
            i = index + 1 + offset
            self._emit(segments, 'move', shifted[offset], i - 1, i)
        self._emit(segments, 'insert', value, index)
        self._check_set(segments + (index,), value, UNDEFINED)

    def move(self, path: PathLike, from_index: int, to_index: int) -> None:
        """Move the element at ``from_index`` to ``to_index``.

        Negative indexes count from the end and are clamped to the first
        element, indexes past the end are clamped to the last element.
        """
        target = self._target_array(path, 'move')
        if target is None:
            return
        segments, array = target

        length = len(array)
        if not length:
            return
        from_index = self._clamp_index(from_index, length)
        to_index = self._clamp_index(to_index, length)
        if from_index == to_index:
            return

        value = array.pop(from_index)
        array.insert(to_index, value)

        if to_index > from_index:
            fillers = array[from_index:to_index]
            for offset, item in enumerate(fillers):
                i = from_index + offset
                self._emit(segments, 'move', item, i + 1, i)
        else:
            fillers = array[to_index + 1:from_index + 1]
            for offset in range(len(fillers) - 1, -1, -1):
                i = to_index + 1 + offset
                self._emit(segments, 'move', fillers[offset], i - 1, i)
        self._emit(segments, 'move', value, from_index, to_index)

    def remove(self, path: PathLike, index: int = -1) -> None:
        """Remove the element at ``index`` (default: the last one)."""
        target = self._target_array(path, 'remove')
        if target is None:
            return
        segments, array = target

        if index < 0:
            index += len(array)
        if not 0 <= index < len(array):
            logger.debug("remove ignored: index %d out of range for %r", index, path)
            return
        self._remove_at(segments, array, index)

    # ==================== Internals ====================

    @staticmethod
    def _clamp_index(index: int, length: int) -> int:
        if index < 0:
            return max(0, length + index)
        if index >= length:
            return length - 1
        return index

    def _target_array(self, path: PathLike, operation: str) -> tuple[tuple, list] | None:
        segments = self._resolve(path)
        array = walk(self._data, segments)
        if kind_of(array) is not NodeKind.ARRAY:
            logger.debug("%s ignored: %r is not an array", operation, path)
            return None
        return segments, array

    def _remove_at(self, segments: tuple, array: list, index: int) -> None:
        """Tear down and splice out ``array[index]``.

        Shifted elements are announced from a snapshot taken after the
        splice, so subscribers may mutate the array while they are notified.
        """
        value = array[index]
        self._check_unset(segments + (index,), value)
        if index >= len(array) or array[index] is not value:
            logger.debug("remove skipped: %r changed during teardown", segments)
            return
        del array[index]
        shifted = array[index:]
        for offset in range(len(shifted) - 1, -1, -1):
            i = index + offset
            self._emit(segments, 'move', shifted[offset], i + 1, i)
        self._emit(segments, 'remove', value, index)

    def _announce_growth(self, segments: tuple, array: list, old_length: int) -> None:
        """Emit ``insert`` for every slot added past ``old_length``."""
        added = array[old_length:]
        for offset, item in enumerate(added):
            self._emit(segments, 'insert', item, old_length + offset)
