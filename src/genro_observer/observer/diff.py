# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Diff engine for Observer.

This module provides the DiffMixin class, which decides which ``set`` and
``unset`` events a replacement or a merge produces.

Rules:
    - ``_check_unset(path, old, new)`` walks everything under ``old`` and
      announces every path that no longer exists under ``new``. Children
      are announced before their parent.
    - ``_check_set(path, new, old)`` walks everything under ``new`` and
      announces every created or changed value, children before parent.
      A pair of two containers is not announced itself (only its
      children are), and a pair of identical scalars is skipped.
    - ``_patch_node(path, node, data)`` merges ``data`` into ``node``
      without removing keys that ``data`` does not mention.
"""

from __future__ import annotations

from typing import Any

from ..node import (
    UNDEFINED, NodeKind, get_child, is_container, iter_children, kind_of, normalize_key, same_value,
)


class DiffMixin:
    """Mixin providing change detection for Observer.

    Requires the host class to implement ``_emit(path, kind, *args)`` and
    ``_announce_growth(path, array, old_length)``.
    """

    __slots__ = ()

    def _check_set(self, path: tuple, value: Any, old: Any) -> None:
        """Announce what ``value`` creates or changes over ``old`` at ``path``."""
        value_is_container = is_container(value)
        old_is_container = is_container(old)

        if value_is_container:
            for key, child in iter_children(value):
                previous = get_child(old, key) if old_is_container else UNDEFINED
                self._check_set(path + (key,), child, previous)

        if value_is_container and old_is_container:
            return
        if same_value(value, old):
            return
        self._emit(path, 'set', value, old)

    def _check_unset(self, path: tuple, old: Any, value: Any = UNDEFINED) -> None:
        """Announce every path under ``old`` that ``value`` does not keep."""
        if is_container(old):
            value_is_container = is_container(value)
            for key, child in iter_children(old):
                current = get_child(value, key) if value_is_container else UNDEFINED
                self._check_unset(path + (key,), child, current)

        if value is UNDEFINED:
            self._emit(path, 'unset', old)

    def _replace(self, path: tuple, current: Any, value: Any) -> None:
        """Announce the replacement of a container by an unrelated value."""
        self._check_unset(path, current, value)
        if is_container(value):
            self._check_set(path, value, current)
        else:
            self._emit(path, 'set', value, current)

    def _patch_node(self, path: tuple, node: Any, data: Any) -> None:
        """Merge container ``data`` into container ``node``.

        First pass updates the keys both sides share, second pass adds the
        keys only ``data`` has. Keys of ``data`` are normalized for ``node``:
        list indexes become string keys of a dict, digit keys of a dict
        address list indexes, other dict keys cannot address a list and are
        skipped. Growing an array through a patch also emits an ``insert``
        for every new index.
        """
        is_array = kind_of(node) is NodeKind.ARRAY

        for key, current in iter_children(node):
            incoming = get_child(data, key)
            if incoming is UNDEFINED:
                continue
            if is_array and key >= len(node):
                # shrunk by a subscriber
                continue
            deeper = path + (key,)

            if is_container(current):
                if is_container(incoming):
                    self._patch_node(deeper, current, incoming)
                else:
                    node[key] = incoming
                    self._replace(deeper, current, incoming)
            else:
                node[key] = incoming
                self._check_set(deeper, incoming, current)

        for key, value in iter_children(data):
            key = normalize_key(node, key)
            if key is UNDEFINED:
                continue
            if is_array:
                length = len(node)
                if key < length:
                    continue
                node.extend([None] * (key - length))
                node.append(value)
                self._check_set(path + (key,), value, UNDEFINED)
                self._announce_growth(path, node, length)
            else:
                if key in node:
                    continue
                node[key] = value
                self._check_set(path + (key,), value, UNDEFINED)
