# SPDX-FileCopyrightText: 2025 OmniNode.ai Inc.
# SPDX-License-Identifier: MIT

"""In-process event emitter for tmux-composer session events.

Anything exposing ``on(name, listener)`` can feed the publisher; this
module provides the emitter the CLI and tests use, plus the conventional
event shape::

    {"event": "session-created", "timestamp": "...", "data": {...}}
"""

from __future__ import annotations

import asyncio
import logging
from collections import defaultdict
from collections.abc import Awaitable, Callable
from datetime import UTC, datetime
from typing import Any, Protocol

logger = logging.getLogger(__name__)

Listener = Callable[[Any], Awaitable[None] | None]


class SupportsEventSubscription(Protocol):
    def on(self, name: str, listener: Listener) -> Any: ...


class EventEmitter:
    """Named-event emitter; async listeners are awaited in registration order."""

    def __init__(self) -> None:
        self._listeners: defaultdict[str, list[Listener]] = defaultdict(list)

    def on(self, name: str, listener: Listener) -> EventEmitter:
        self._listeners[name].append(listener)
        return self

    def off(self, name: str, listener: Listener) -> EventEmitter:
        listeners = self._listeners.get(name)
        if listeners and listener in listeners:
            listeners.remove(listener)
        return self

    def listener_count(self, name: str) -> int:
        return len(self._listeners.get(name, []))

    async def emit(self, name: str, payload: Any) -> bool:
        """Deliver ``payload`` to every listener of ``name``.

        A failing listener is logged and does not stop the others.
        Returns True if any listener was registered.
        """
        listeners = list(self._listeners.get(name, []))
        for listener in listeners:
            try:
                result = listener(payload)
                if asyncio.iscoroutine(result):
                    await result
            except Exception:
                logger.exception(f"Listener error for '{name}'")
        return bool(listeners)

    async def emit_event(self, event: dict[str, Any]) -> bool:
        return await self.emit("event", event)


def create_event(
    event: str, data: dict[str, Any] | None = None, **fields: Any
) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "event": event,
        "timestamp": datetime.now(UTC).isoformat(timespec="milliseconds"),
        **fields,
    }
    if data is not None:
        payload["data"] = data
    return payload


__all__: list[str] = [
    "EventEmitter",
    "Listener",
    "SupportsEventSubscription",
    "create_event",
]
