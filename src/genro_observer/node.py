# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Node shape helpers for observed data.

Observed data is plain JSON-like Python: ``dict`` for objects, ``list`` for
arrays, ``None`` for null and ``str``/``int``/``float``/``bool`` scalars.
Every shape decision in the observer goes through :func:`kind_of`, so the
diff and array engines branch on a :class:`NodeKind` rather than on ad-hoc
``isinstance`` checks.

``UNDEFINED`` marks a value that does not exist (a missing key or an index
past the end of an array). It is distinct from ``None``, which is a stored
null value.
"""

from __future__ import annotations

import re
from enum import Enum
from typing import Any, Iterator


class _Undefined:
    """Sentinel type for missing values."""

    __slots__ = ()

    def __repr__(self) -> str:
        return 'UNDEFINED'

    def __bool__(self) -> bool:
        return False


UNDEFINED: Any = _Undefined()

_INDEX_RE = re.compile(r'-?[0-9]+')


class NodeKind(Enum):
    """Shape of a value in the data tree."""

    NULL = 'null'
    SCALAR = 'scalar'
    ARRAY = 'array'
    MAP = 'map'


def kind_of(value: Any) -> NodeKind:
    """Classify a value.

    ``UNDEFINED`` and ``None`` are both reported as NULL; callers that need
    to tell them apart compare against ``UNDEFINED`` directly.
    """
    if isinstance(value, dict):
        return NodeKind.MAP
    if isinstance(value, list):
        return NodeKind.ARRAY
    if value is None or value is UNDEFINED:
        return NodeKind.NULL
    return NodeKind.SCALAR


def is_index_text(text: str) -> bool:
    """True if ``text`` is an ASCII integer, optionally negative."""
    return _INDEX_RE.fullmatch(text) is not None


def is_container(value: Any) -> bool:
    """True for values that hold children (objects and arrays)."""
    kind = kind_of(value)
    return kind is NodeKind.MAP or kind is NodeKind.ARRAY


def same_value(a: Any, b: Any) -> bool:
    """Strict identity for the purpose of change detection.

    Containers compare by identity. Scalars must share their type and be
    equal, so ``True`` differs from ``1`` and ``1`` differs from ``1.0``.
    """
    if a is b:
        return True
    if is_container(a) or is_container(b):
        return False
    return type(a) is type(b) and a == b


def normalize_key(container: Any, key: Any) -> Any:
    """Coerce a path segment to the key type ``container`` uses.

    Returns ``UNDEFINED`` when the segment can never address a child of
    ``container`` (non-numeric segment on a list, any segment on a scalar).
    Negative list indexes are returned as-is; callers decide what they mean.
    """
    kind = kind_of(container)
    if kind is NodeKind.MAP:
        return key if isinstance(key, str) else str(key)
    if kind is NodeKind.ARRAY:
        if isinstance(key, bool):
            return UNDEFINED
        if isinstance(key, int):
            return key
        if isinstance(key, str) and is_index_text(key):
            return int(key)
        return UNDEFINED
    return UNDEFINED


def get_child(container: Any, key: Any) -> Any:
    """Return the child of ``container`` at ``key`` or ``UNDEFINED``."""
    key = normalize_key(container, key)
    if key is UNDEFINED:
        return UNDEFINED
    if isinstance(container, dict):
        return container.get(key, UNDEFINED)
    if 0 <= key < len(container):
        return container[key]
    return UNDEFINED


def iter_children(container: Any) -> Iterator[tuple[Any, Any]]:
    """Yield ``(key, child)`` pairs of a container, in order.

    Iterates over a snapshot, so subscribers mutating the container while
    an event is delivered do not break the walk.
    """
    kind = kind_of(container)
    if kind is NodeKind.MAP:
        yield from list(container.items())
    elif kind is NodeKind.ARRAY:
        yield from list(enumerate(container))


def walk(root: Any, segments: tuple) -> Any:
    """Follow ``segments`` from ``root``.

    Returns the value found, or ``UNDEFINED`` as soon as a segment is
    missing or a scalar is crossed.
    """
    node = root
    for segment in segments:
        node = get_child(node, segment)
        if node is UNDEFINED:
            return UNDEFINED
    return node
