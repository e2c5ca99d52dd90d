# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Observer package - Observed data container.

The package is organized into:
- core: Main Observer class with path access, writes and subscriptions
- diff: Change detection for replacements and merges
- arrays: Array insert, move and remove with index shift events

Example:
    >>> from genro_observer import Observer
    >>> obs = Observer({'config': {'name': 'MyApp'}})
    >>> obs.get('config.name')
    'MyApp'
"""

from .core import EVENT_KINDS, Observer

__all__ = ["Observer", "EVENT_KINDS"]
