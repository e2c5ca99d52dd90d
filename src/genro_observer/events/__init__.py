# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Event delivery for the observer.

- emitter: Name-based synchronous publish/subscribe primitive
- registry: Wildcard pattern trie routing path changes to event names
"""

from .emitter import EventEmitter, EventHandle, Subscription
from .registry import WILDCARD, TrieNode, WildcardRegistry

__all__ = ["EventEmitter", "EventHandle", "Subscription", "TrieNode", "WildcardRegistry", "WILDCARD"]
