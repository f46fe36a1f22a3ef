# SPDX-FileCopyrightText: 2025 OmniNode.ai Inc.
# SPDX-License-Identifier: MIT

"""Publisher Configuration Model.

Uses pydantic-settings for automatic environment variable loading
(``TMUX_COMPOSER_ZMQ_*``). Per-call overrides travel in
``ZmqSocketOptions`` / ``ZmqPublishingOptions`` instead.
"""

from __future__ import annotations

import re
import tempfile
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

SOCKET_NAME_PATTERN = r"^[A-Za-z0-9][A-Za-z0-9._-]*$"
_SOCKET_NAME_RE = re.compile(SOCKET_NAME_PATTERN)


def _default_socket_dir() -> Path:
    return Path(tempfile.gettempdir()) / "tmux-composer"


def validate_socket_name(name: str) -> str:
    if not _SOCKET_NAME_RE.match(name):
        raise ValueError(
            f"Invalid socket name '{name}'. Use letters, digits, '.', '_' or '-'"
        )
    return name


class PublisherConfig(BaseSettings):
    """Configuration for the ZeroMQ event publisher."""

    model_config = SettingsConfigDict(
        env_prefix="TMUX_COMPOSER_ZMQ_",
        frozen=True,
        extra="ignore",
        validate_default=True,
    )

    enabled: bool = Field(
        default=True,
        description="Publish events unless a caller explicitly disables it",
    )

    # Path configurations
    socket_dir: Path = Field(
        default_factory=_default_socket_dir,
        description="Directory holding named ipc sockets",
    )
    socket_name: str = Field(default="events", min_length=1, max_length=64)
    socket_path: Path | None = Field(
        default=None,
        description="Explicit socket file path; wins over socket_dir/socket_name",
    )

    # Transport tuning
    linger_ms: int = Field(default=1000, ge=0, le=60_000)
    settle_seconds: float = Field(default=0.1, ge=0.0, le=10.0)

    @field_validator("socket_name", mode="after")
    @classmethod
    def check_socket_name(cls, v: str) -> str:
        return validate_socket_name(v)

    @field_validator("socket_dir", mode="after")
    @classmethod
    def validate_socket_dir_creatable(cls, v: Path) -> Path:
        if v.exists():
            if not v.is_dir():
                raise ValueError(f"Socket path exists but is not a directory: {v}")
            return v
        current = v
        while current != current.parent:
            current = current.parent
            if current.exists():
                if current.is_dir():
                    return v
                raise ValueError(
                    f"Ancestor path exists but is not a directory: {current}"
                )
        raise ValueError(f"No valid ancestor directory found for socket dir: {v}")


__all__: list[str] = ["SOCKET_NAME_PATTERN", "PublisherConfig", "validate_socket_name"]
