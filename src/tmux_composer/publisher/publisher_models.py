# SPDX-FileCopyrightText: 2025 OmniNode.ai Inc.
# SPDX-License-Identifier: MIT

"""Option and metadata models for the ZeroMQ event publisher.

Events themselves stay plain ``dict`` mappings; only the values the
publisher stamps or resolves are modelled here.
"""

from __future__ import annotations

import os
import socket
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from tmux_composer.publisher.publisher_config import validate_socket_name

TmuxEvent = dict[str, Any]


class ZmqSocketOptions(BaseModel):
    """Endpoint overrides; unset fields fall back to ``PublisherConfig``."""

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)

    socket_name: str | None = Field(default=None, alias="socketName")
    socket_path: Path | None = Field(default=None, alias="socketPath")

    @field_validator("socket_name", mode="after")
    @classmethod
    def check_socket_name(cls, v: str | None) -> str | None:
        if v is None:
            return v
        return validate_socket_name(v)


class EventSourceOverrides(BaseModel):
    """Caller-provided part of the source record."""

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)

    script: str | None = Field(default=None)
    session_id: str | None = Field(default=None, alias="sessionId")
    session_name: str | None = Field(default=None, alias="sessionName")
    socket_path: str | None = Field(default=None, alias="socketPath")


class ZmqPublishingOptions(ZmqSocketOptions):
    """Options accepted by ``PublisherRegistry.enable_publishing``."""

    zmq: bool | None = Field(
        default=None,
        description="False disables publishing; None defers to PublisherConfig.enabled",
    )
    source: EventSourceOverrides | None = Field(default=None)

    def socket_options(self) -> ZmqSocketOptions:
        return ZmqSocketOptions(
            socket_name=self.socket_name, socket_path=self.socket_path
        )


class EventSource(BaseModel):
    """Identifies the process and session that emitted an event."""

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)

    script: str = Field(..., min_length=1)
    session_id: str | None = Field(default=None, alias="sessionId")
    session_name: str | None = Field(default=None, alias="sessionName")
    socket_path: str | None = Field(default=None, alias="socketPath")
    pid: int = Field(..., ge=0)
    hostname: str = Field(...)

    @classmethod
    def for_current_process(
        cls, overrides: EventSourceOverrides | None = None
    ) -> EventSource:
        overrides = overrides or EventSourceOverrides()
        return cls(
            script=overrides.script or "unknown",
            session_id=overrides.session_id,
            session_name=overrides.session_name,
            socket_path=overrides.socket_path,
            pid=os.getpid(),
            hostname=socket.gethostname(),
        )

    def to_payload(self) -> dict[str, Any]:
        """Wire form: camelCase keys, unset optional keys omitted."""
        return self.model_dump(by_alias=True, exclude_none=True)


__all__: list[str] = [
    "EventSource",
    "EventSourceOverrides",
    "TmuxEvent",
    "ZmqPublishingOptions",
    "ZmqSocketOptions",
]
