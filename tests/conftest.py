# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Shared fixtures for Observer tests."""

import pytest

from genro_observer import EVENT_KINDS


class EventRecorder:
    """Collects catch-all events as ``(kind, path, *args)`` tuples."""

    def __init__(self):
        self.events = []

    def attach(self, observer):
        for kind in EVENT_KINDS:
            observer.subscribe(kind, self._recorder(kind))
        return self

    def _recorder(self, kind):
        def record(path, *args):
            self.events.append((kind, path) + args)
        return record

    def of(self, kind):
        return [e for e in self.events if e[0] == kind]

    def clear(self):
        self.events.clear()


@pytest.fixture
def recorder():
    """Return a factory attaching an EventRecorder to an observer."""
    return lambda observer: EventRecorder().attach(observer)
