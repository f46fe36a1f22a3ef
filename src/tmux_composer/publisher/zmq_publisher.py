# SPDX-FileCopyrightText: 2025 OmniNode.ai Inc.
# SPDX-License-Identifier: MIT

"""ZeroMQ event publisher with lazy connect and an in-memory pending buffer.

Lifecycle:
    Unconnected --connect()--> Connected --disconnect()--> Unconnected

    - publish_event() while unconnected appends to the pending buffer and
      schedules a background connect (at most one attempt in flight)
    - connect() opens a PUB socket, waits for the settle delay, then drains
      the pending buffer in FIFO order
    - A failed send re-queues the event at the tail; the publisher stays
      connected and the next publish_event() drains the buffer first
    - disconnect() waits for an in-flight connect before closing

Concurrency: coroutine-safe on a single event loop (not thread-safe).
"""

from __future__ import annotations

import asyncio
import json
import logging
from collections import deque

import zmq
import zmq.asyncio

from tmux_composer.publisher.exceptions import PublisherConnectionError
from tmux_composer.publisher.publisher_config import PublisherConfig
from tmux_composer.publisher.publisher_models import TmuxEvent, ZmqSocketOptions
from tmux_composer.publisher.zmq_socket import (
    ensure_zmq_socket_directory,
    get_zmq_socket_path,
)

logger = logging.getLogger(__name__)


def serialize_event(event: TmuxEvent) -> str:
    """Compact JSON; values JSON cannot encode are rendered with ``str()``."""
    return json.dumps(event, separators=(",", ":"), default=str)


class ZmqEventPublisher:
    """Publishes events as JSON text frames on a ZeroMQ PUB socket."""

    def __init__(
        self,
        socket_options: ZmqSocketOptions | None = None,
        *,
        config: PublisherConfig | None = None,
        context: zmq.asyncio.Context | None = None,
    ) -> None:
        self._socket_options = socket_options or ZmqSocketOptions()
        self._config = config or PublisherConfig()
        self._context = context
        self._endpoint = get_zmq_socket_path(self._socket_options, self._config)

        self._socket: zmq.asyncio.Socket | None = None
        self._connected = False
        self._draining = False
        self._pending: deque[TmuxEvent] = deque()
        self._connect_task: asyncio.Task[None] | None = None

    @property
    def endpoint(self) -> str:
        return self._endpoint

    @property
    def is_connected(self) -> bool:
        return self._connected

    @property
    def pending(self) -> tuple[TmuxEvent, ...]:
        return tuple(self._pending)

    @property
    def connect_task(self) -> asyncio.Task[None] | None:
        """The current or most recent connect attempt."""
        return self._connect_task

    async def connect(self) -> None:
        """Connect and drain the pending buffer.

        Joins an attempt already in flight instead of starting a second one.

        Raises:
            PublisherConnectionError: If the socket cannot be opened.
        """
        if self._connected:
            return
        await asyncio.shield(self._ensure_connect_task())

    async def publish_event(self, event: TmuxEvent) -> None:
        """Send ``event``, or buffer it until a connection is available.

        Never raises for transport problems; delivery is best-effort.
        """
        if not self._connected or self._socket is None or self._draining:
            self._pending.append(event)
            if not self._connected:
                self._ensure_connect_task()
            return

        # Leftovers from an interrupted drain go out before this event
        if self._pending:
            self._pending.append(event)
            await self._drain()
            return

        await self._send(event)

    async def disconnect(self) -> None:
        """Close the socket. The pending buffer is left as-is.

        An in-flight connect is waited for first so its socket gets closed.
        """
        task = self._connect_task
        if task is not None and not task.done() and task is not asyncio.current_task():
            await asyncio.wait([task])

        if self._socket is None:
            return

        try:
            self._socket.close(linger=self._config.linger_ms)
        except Exception as e:
            logger.warning(f"Error during disconnect from {self._endpoint}: {e}")
        self._socket = None
        self._connected = False
        logger.debug(f"Publisher disconnected from {self._endpoint}")

    def _ensure_connect_task(self) -> asyncio.Task[None]:
        if self._connect_task is None or self._connect_task.done():
            self._connect_task = asyncio.create_task(self._open())
            self._connect_task.add_done_callback(self._on_connect_done)
        return self._connect_task

    def _on_connect_done(self, task: asyncio.Task[None]) -> None:
        if task.cancelled():
            return
        # Retrieve the exception so background failures are not reported as
        # unhandled; _open() has already logged it.
        if task.exception() is not None:
            logger.debug(f"Background connect to {self._endpoint} did not succeed")

    async def _open(self) -> None:
        if self._connected:
            return

        socket: zmq.asyncio.Socket | None = None
        try:
            ensure_zmq_socket_directory(self._socket_options, self._config)
            socket = self._get_context().socket(zmq.PUB)
            socket.setsockopt(zmq.LINGER, self._config.linger_ms)
            socket.connect(self._endpoint)
        except Exception as e:
            if socket is not None:
                socket.close(linger=0)
            logger.error(f"Failed to connect publisher to {self._endpoint}: {e}")
            raise PublisherConnectionError(self._endpoint, e) from e

        # PUB/SUB drops messages sent before subscriptions propagate
        await asyncio.sleep(self._config.settle_seconds)

        self._socket = socket
        self._connected = True
        logger.info(
            f"Publisher connected to {self._endpoint}",
            extra={"pending": len(self._pending)},
        )

        await self._drain()

    async def _drain(self) -> None:
        """Send buffered events FIFO; stops at the first failed send."""
        self._draining = True
        try:
            while self._pending and self._socket is not None:
                event = self._pending.popleft()
                if not await self._send(event):
                    logger.warning(
                        f"Drain to {self._endpoint} interrupted, "
                        f"{len(self._pending)} events remain buffered"
                    )
                    break
        finally:
            self._draining = False

    async def _send(self, event: TmuxEvent) -> bool:
        socket = self._socket
        if socket is None:
            self._pending.append(event)
            return False

        try:
            await socket.send_string(serialize_event(event))
            return True
        except Exception as e:
            logger.error(f"Failed to publish event to {self._endpoint}: {e}")
            self._pending.append(event)
            return False

    def _get_context(self) -> zmq.asyncio.Context:
        if self._context is None:
            self._context = zmq.asyncio.Context.instance()
        return self._context


__all__: list[str] = ["ZmqEventPublisher", "serialize_event"]
