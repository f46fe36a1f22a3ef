# SPDX-FileCopyrightText: 2025 OmniNode.ai Inc.
# SPDX-License-Identifier: MIT

"""Exception types for event publishing errors.

- PublisherError: Base exception for all publishing errors
- PublisherConnectionError: The PUB socket could not be opened or connected

Only explicit ``connect()`` callers ever see these; background paths log
them and carry on.
"""

from __future__ import annotations

__all__ = [
    "PublisherConnectionError",
    "PublisherError",
]


class PublisherError(Exception):
    """Base exception for event publishing errors."""

    pass


class PublisherConnectionError(PublisherError):
    """Raised when the publisher cannot connect to its endpoint.

    Attributes:
        endpoint: The ``ipc://`` address that was being connected.
        cause: The underlying transport or filesystem error.
    """

    def __init__(self, endpoint: str, cause: BaseException | None = None) -> None:
        message = f"Failed to connect publisher to {endpoint}"
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)
        self.endpoint = endpoint
        self.cause = cause
