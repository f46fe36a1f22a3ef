# SPDX-FileCopyrightText: 2025 OmniNode.ai Inc.
# SPDX-License-Identifier: MIT

"""Resolve publisher endpoints to ``ipc://`` socket addresses."""

from __future__ import annotations

import logging
from pathlib import Path

from tmux_composer.publisher.publisher_config import PublisherConfig
from tmux_composer.publisher.publisher_models import ZmqSocketOptions

logger = logging.getLogger(__name__)

IPC_SCHEME = "ipc://"


def resolve_socket_file(
    options: ZmqSocketOptions | None = None,
    config: PublisherConfig | None = None,
) -> Path:
    """Filesystem path of the socket.

    Priority: ``options.socket_path``, ``config.socket_path``, then
    ``<socket_dir>/<name>.sock`` where name comes from options or config.
    """
    options = options or ZmqSocketOptions()
    config = config or PublisherConfig()

    if options.socket_path is not None:
        return options.socket_path.expanduser().resolve()
    if options.socket_name is None and config.socket_path is not None:
        return config.socket_path.expanduser().resolve()

    name = options.socket_name or config.socket_name
    return (config.socket_dir.expanduser() / f"{name}.sock").resolve()


def get_zmq_socket_path(
    options: ZmqSocketOptions | None = None,
    config: PublisherConfig | None = None,
) -> str:
    return f"{IPC_SCHEME}{resolve_socket_file(options, config)}"


def ensure_zmq_socket_directory(
    options: ZmqSocketOptions | None = None,
    config: PublisherConfig | None = None,
) -> Path:
    directory = resolve_socket_file(options, config).parent
    directory.mkdir(parents=True, exist_ok=True)
    logger.debug("Socket directory ready: %s", directory)
    return directory


__all__: list[str] = [
    "IPC_SCHEME",
    "ensure_zmq_socket_directory",
    "get_zmq_socket_path",
    "resolve_socket_file",
]
