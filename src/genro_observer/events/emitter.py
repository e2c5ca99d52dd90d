# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Synchronous publish/subscribe primitive.

:class:`EventEmitter` keeps a registration table of subscriptions keyed by
an integer handle id. :meth:`EventEmitter.subscribe` returns an
:class:`EventHandle` that only knows the emitter and its own id, so
unsubscribing is a table lookup and there is no reference cycle between a
handle and the subscription it controls.

Publishing is synchronous: every live subscriber for a name is called in
subscription order before :meth:`EventEmitter.publish` returns. Exceptions
raised by a subscriber are not caught.

Example:
    >>> emitter = EventEmitter()
    >>> handle = emitter.subscribe('ready', print)
    >>> emitter.publish('ready', 42)
    42
    True
    >>> handle.unsubscribe()
    True
"""

from __future__ import annotations

import itertools
import logging
from dataclasses import dataclass
from typing import Any, Callable

from ..exceptions import InvalidSubscriptionError

logger = logging.getLogger(__name__)

EventCallback = Callable[..., Any]


@dataclass
class Subscription:
    """One entry of the registration table."""

    id: int
    name: str
    callback: EventCallback
    once: bool = False


class EventHandle:
    """Handle returned by :meth:`EventEmitter.subscribe`.

    Attributes:
        id: Registration id inside the owning emitter.
        name: Event name the handle was subscribed to.
    """

    __slots__ = ('_emitter', 'id', 'name')

    def __init__(self, emitter: EventEmitter, id: int, name: str) -> None:
        self._emitter = emitter
        self.id = id
        self.name = name

    def __repr__(self) -> str:
        state = 'active' if self.active else 'inactive'
        return f"EventHandle({self.name!r}, id={self.id}, {state})"

    @property
    def active(self) -> bool:
        """True while the subscription is still registered."""
        return self.id in self._emitter._subscriptions

    def unsubscribe(self) -> bool:
        """Remove the subscription. Returns False if it was already gone."""
        return self._emitter.unsubscribe(self)


class EventEmitter:
    """Name-based synchronous event emitter.

    Args:
        on_discard: Optional hook called with every :class:`Subscription`
            leaving the table, whatever the reason (explicit unsubscribe,
            ``unsubscribe_all`` or a one-shot subscription firing).
    """

    __slots__ = ('_subscriptions', '_by_name', '_ids', '_on_discard')

    def __init__(self, on_discard: Callable[[Subscription], None] | None = None) -> None:
        self._subscriptions: dict[int, Subscription] = {}
        self._by_name: dict[str, list[Subscription]] = {}
        self._ids = itertools.count(1)
        self._on_discard = on_discard

    def __len__(self) -> int:
        return len(self._subscriptions)

    def subscribe(
        self, name: str, callback: EventCallback, once: bool = False
    ) -> EventHandle:
        """Register ``callback`` for events published as ``name``.

        Raises:
            InvalidSubscriptionError: If ``name`` is not a non-empty string
                or ``callback`` is not callable.
        """
        if not isinstance(name, str) or not name:
            raise InvalidSubscriptionError(f"Event name must be a non-empty string, got {name!r}")
        if not callable(callback):
            raise InvalidSubscriptionError(f"Callback for '{name}' is not callable")

        subscription = Subscription(next(self._ids), name, callback, once)
        self._subscriptions[subscription.id] = subscription
        self._by_name.setdefault(name, []).append(subscription)
        return EventHandle(self, subscription.id, name)

    def once(self, name: str, callback: EventCallback) -> EventHandle:
        """Register ``callback`` for a single delivery of ``name``."""
        return self.subscribe(name, callback, once=True)

    def unsubscribe(self, handle: EventHandle | int) -> bool:
        """Remove a subscription by handle or id."""
        sub_id = handle.id if isinstance(handle, EventHandle) else handle
        subscription = self._subscriptions.get(sub_id)
        if subscription is None:
            return False
        self._discard(subscription)
        return True

    def unsubscribe_all(
        self, name: str | None = None, callback: EventCallback | None = None
    ) -> int:
        """Remove every subscription matching the given filters.

        Args:
            name: Only remove subscriptions to this event name.
            callback: Only remove subscriptions using this callback.

        Returns:
            Number of removed subscriptions.
        """
        if name is not None:
            candidates = list(self._by_name.get(name, ()))
        else:
            candidates = list(self._subscriptions.values())
        removed = 0
        for subscription in candidates:
            if callback is not None and subscription.callback != callback:
                continue
            self._discard(subscription)
            removed += 1
        return removed

    def publish(self, name: str, *args: Any) -> bool:
        """Call every subscriber of ``name`` with ``args``.

        Returns:
            True if at least one subscriber was called.
        """
        subscriptions = self._by_name.get(name)
        if not subscriptions:
            return False
        for subscription in list(subscriptions):
            if subscription.id not in self._subscriptions:
                # removed by an earlier subscriber of the same publish
                continue
            if subscription.once:
                self._discard(subscription)
            subscription.callback(*args)
        return True

    def has(self, name: str) -> bool:
        """True if ``name`` has at least one subscriber."""
        return bool(self._by_name.get(name))

    def count(self, name: str | None = None) -> int:
        """Number of subscriptions, optionally restricted to ``name``."""
        if name is None:
            return len(self._subscriptions)
        return len(self._by_name.get(name, ()))

    def _discard(self, subscription: Subscription) -> None:
        del self._subscriptions[subscription.id]
        entries = self._by_name[subscription.name]
        entries.remove(subscription)
        if not entries:
            del self._by_name[subscription.name]
        logger.debug("Unsubscribed %r (id=%d)", subscription.name, subscription.id)
        if self._on_discard is not None:
            self._on_discard(subscription)
