# SPDX-FileCopyrightText: 2025 OmniNode.ai Inc.
# SPDX-License-Identifier: MIT

"""Publisher registry: one ``ZmqEventPublisher`` per resolved endpoint.

The host application owns a ``PublisherRegistry`` (there is no module-level
instance) and wires its event emitter through ``enable_publishing``:

    Emitter "event" -> stamp source -> ZmqEventPublisher.publish_event()
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from tmux_composer.events import SupportsEventSubscription
from tmux_composer.publisher.publisher_config import PublisherConfig
from tmux_composer.publisher.publisher_models import (
    EventSource,
    TmuxEvent,
    ZmqPublishingOptions,
    ZmqSocketOptions,
)
from tmux_composer.publisher.shutdown import ShutdownHookRegistrar
from tmux_composer.publisher.zmq_publisher import ZmqEventPublisher
from tmux_composer.publisher.zmq_socket import get_zmq_socket_path

logger = logging.getLogger(__name__)

PublisherFactory = Callable[[ZmqSocketOptions, PublisherConfig], ZmqEventPublisher]


def _default_factory(
    options: ZmqSocketOptions, config: PublisherConfig
) -> ZmqEventPublisher:
    return ZmqEventPublisher(options, config=config)


class PublisherRegistry:
    """Owns the publishers of one application, keyed by endpoint."""

    def __init__(
        self,
        config: PublisherConfig | None = None,
        *,
        publisher_factory: PublisherFactory | None = None,
    ) -> None:
        self._config = config or PublisherConfig()
        self._factory = publisher_factory or _default_factory
        self._publishers: dict[str, ZmqEventPublisher] = {}
        self._hooked: list[ShutdownHookRegistrar] = []

    @property
    def config(self) -> PublisherConfig:
        return self._config

    @property
    def publishers(self) -> dict[str, ZmqEventPublisher]:
        return dict(self._publishers)

    def __len__(self) -> int:
        return len(self._publishers)

    def __contains__(self, endpoint: object) -> bool:
        return endpoint in self._publishers

    def get_publisher(self, options: ZmqSocketOptions | None = None) -> ZmqEventPublisher:
        options = options or ZmqSocketOptions()
        endpoint = get_zmq_socket_path(options, self._config)

        publisher = self._publishers.get(endpoint)
        if publisher is None:
            publisher = self._factory(options, self._config)
            self._publishers[endpoint] = publisher
            logger.debug(f"Registered publisher for {endpoint}")
        return publisher

    async def shutdown(self) -> None:
        """Disconnect every publisher, then forget them all."""
        for endpoint, publisher in list(self._publishers.items()):
            try:
                await publisher.disconnect()
            except Exception:
                logger.exception(f"Failed to disconnect publisher for {endpoint}")
        self._publishers.clear()

    async def enable_publishing(
        self,
        emitter: SupportsEventSubscription,
        options: ZmqPublishingOptions | None = None,
        shutdown_hooks: ShutdownHookRegistrar | None = None,
    ) -> ZmqEventPublisher | None:
        """Forward the emitter's ``"event"`` notifications to a publisher.

        Steps:
        1. Return None if publishing is disabled (``options.zmq`` is False,
           or unset with ``config.enabled`` False)
        2. Eagerly connect; failure is logged and publishing stays lazy
        3. Stamp every event with this process's ``source`` record
        4. Register ``shutdown`` with ``shutdown_hooks`` when given, once per
           hooks object
        """
        options = options or ZmqPublishingOptions()
        enabled = self._config.enabled if options.zmq is None else options.zmq
        if not enabled:
            logger.debug("Event publishing disabled")
            return None

        publisher = self.get_publisher(options.socket_options())

        try:
            await publisher.connect()
        except Exception as e:
            logger.warning(f"Failed to initialize publisher: {e}")

        source = EventSource.for_current_process(options.source).to_payload()

        async def forward(event: TmuxEvent) -> None:
            try:
                stamped: dict[str, Any] = {**event, "source": dict(source)}
                await publisher.publish_event(stamped)
            except Exception as e:
                logger.error(f"Failed to publish event: {e}")

        emitter.on("event", forward)

        if shutdown_hooks is not None and shutdown_hooks not in self._hooked:
            shutdown_hooks.register(self.shutdown)
            self._hooked.append(shutdown_hooks)

        return publisher


__all__: list[str] = ["PublisherFactory", "PublisherRegistry"]
