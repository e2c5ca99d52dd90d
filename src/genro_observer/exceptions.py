# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Observer exceptions."""

from __future__ import annotations


class ObserverError(Exception):
    """Base exception for Observer errors."""

    pass


class InvalidSubscriptionError(ObserverError):
    """Raised when a subscription is requested with a bad name or callback."""

    pass
