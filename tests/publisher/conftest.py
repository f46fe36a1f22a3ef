# SPDX-FileCopyrightText: 2025 OmniNode.ai Inc.
# SPDX-License-Identifier: MIT

"""Shared fixtures for publisher tests.

The PUB socket is replaced by a MagicMock returned from a mock context, so
tests observe ``setsockopt``/``connect``/``send_string``/``close`` calls
without touching ZeroMQ.
"""

from __future__ import annotations

from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest

from tmux_composer.publisher.publisher_config import PublisherConfig


@pytest.fixture
def publisher_config(tmp_path: Path) -> PublisherConfig:
    return PublisherConfig(
        socket_dir=tmp_path / "sockets",
        socket_name="events",
        settle_seconds=0.0,
    )


@pytest.fixture
def mock_socket() -> MagicMock:
    socket = MagicMock()
    socket.send_string = AsyncMock()
    return socket


@pytest.fixture
def mock_context(mock_socket: MagicMock) -> MagicMock:
    context = MagicMock()
    context.socket.return_value = mock_socket
    return context
