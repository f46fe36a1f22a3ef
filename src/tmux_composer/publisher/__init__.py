# SPDX-FileCopyrightText: 2025 OmniNode.ai Inc.
# SPDX-License-Identifier: MIT

"""tmux-composer ZeroMQ Event Publisher.

Buffers session events until a PUB socket is connected, then sends them as
JSON text frames. One publisher per endpoint, owned by a
``PublisherRegistry`` that the host application creates.

Imports are lazy so ``python -m tmux_composer.publisher endpoint`` does not
load pyzmq. Use explicit imports where convenient:
``from tmux_composer.publisher.registry import PublisherRegistry``
"""

from __future__ import annotations

__all__: list[str] = [
    "EventSource",
    "EventSourceOverrides",
    "ProcessShutdownHooks",
    "PublisherConfig",
    "PublisherConnectionError",
    "PublisherError",
    "PublisherRegistry",
    "ZmqEventPublisher",
    "ZmqPublishingOptions",
    "ZmqSocketOptions",
    "get_zmq_socket_path",
]


def __getattr__(name: str) -> object:
    if name == "PublisherConfig":
        from tmux_composer.publisher.publisher_config import PublisherConfig

        return PublisherConfig
    if name == "ZmqEventPublisher":
        from tmux_composer.publisher.zmq_publisher import ZmqEventPublisher

        return ZmqEventPublisher
    if name == "PublisherRegistry":
        from tmux_composer.publisher.registry import PublisherRegistry

        return PublisherRegistry
    if name == "ProcessShutdownHooks":
        from tmux_composer.publisher.shutdown import ProcessShutdownHooks

        return ProcessShutdownHooks
    if name == "get_zmq_socket_path":
        from tmux_composer.publisher.zmq_socket import get_zmq_socket_path

        return get_zmq_socket_path
    if name in ("PublisherConnectionError", "PublisherError"):
        from tmux_composer.publisher import exceptions

        return getattr(exceptions, name)
    if name in (
        "EventSource",
        "EventSourceOverrides",
        "ZmqPublishingOptions",
        "ZmqSocketOptions",
    ):
        from tmux_composer.publisher import publisher_models

        return getattr(publisher_models, name)
    raise AttributeError(f"module 'tmux_composer.publisher' has no attribute {name!r}")
