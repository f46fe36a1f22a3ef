# SPDX-FileCopyrightText: 2025 OmniNode.ai Inc.
# SPDX-License-Identifier: MIT

"""tmux-composer session events.

Publishes tmux-composer session lifecycle events onto a ZeroMQ PUB/SUB bus
so external observers can react without polling.
"""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("tmux-composer-events")
except PackageNotFoundError:
    __version__ = "0.0.0-dev"
