# SPDX-FileCopyrightText: 2025 OmniNode.ai Inc.
# SPDX-License-Identifier: MIT

"""Command line entry point for the event publisher.

Usage:
    python -m tmux_composer.publisher endpoint [--socket-name NAME] [--socket-path PATH]
    python -m tmux_composer.publisher publish --event session-created --data '{"port": 3000}'

Settings not given on the command line come from TMUX_COMPOSER_ZMQ_* env vars.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


def _add_socket_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--socket-name",
        default=None,
        help="Named socket under the socket directory (default: from config)",
    )
    parser.add_argument(
        "--socket-path",
        default=None,
        help="Explicit socket file path (overrides --socket-name)",
    )


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="tmux-composer ZeroMQ Event Publisher",
        prog="python -m tmux_composer.publisher",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    endpoint_parser = sub.add_parser("endpoint", help="Print the resolved endpoint")
    _add_socket_args(endpoint_parser)

    publish_parser = sub.add_parser("publish", help="Publish a single event")
    publish_parser.add_argument("--event", required=True, help="Event name")
    publish_parser.add_argument(
        "--data", default=None, help="JSON object attached as the event's data"
    )
    publish_parser.add_argument(
        "--script", default="tmux-composer", help="Source script name"
    )
    publish_parser.add_argument("--session-id", default=None)
    publish_parser.add_argument("--session-name", default=None)
    _add_socket_args(publish_parser)

    return parser.parse_args(argv)


def _socket_kwargs(args: argparse.Namespace) -> dict[str, Any]:
    return {
        "socket_name": args.socket_name,
        "socket_path": Path(args.socket_path) if args.socket_path else None,
    }


def _do_endpoint(args: argparse.Namespace) -> int:
    from pydantic import ValidationError

    from tmux_composer.publisher.publisher_models import ZmqSocketOptions
    from tmux_composer.publisher.zmq_socket import get_zmq_socket_path

    try:
        options = ZmqSocketOptions(**_socket_kwargs(args))
    except ValidationError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(get_zmq_socket_path(options))
    return 0


async def _publish_once(args: argparse.Namespace, data: dict[str, Any] | None) -> int:
    from pydantic import ValidationError

    from tmux_composer.events import EventEmitter, create_event
    from tmux_composer.publisher.exceptions import PublisherConnectionError
    from tmux_composer.publisher.publisher_models import (
        EventSourceOverrides,
        ZmqPublishingOptions,
    )
    from tmux_composer.publisher.registry import PublisherRegistry

    try:
        options = ZmqPublishingOptions(
            **_socket_kwargs(args),
            source=EventSourceOverrides(
                script=args.script,
                session_id=args.session_id,
                session_name=args.session_name,
            ),
        )
    except ValidationError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    registry = PublisherRegistry()
    emitter = EventEmitter()

    try:
        publisher = await registry.enable_publishing(emitter, options)
        if publisher is None:
            print("Event publishing is disabled", file=sys.stderr)
            return 1

        try:
            await publisher.connect()
        except PublisherConnectionError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1

        await emitter.emit_event(create_event(args.event, data))
        print(f"Published '{args.event}' to {publisher.endpoint}")
        return 0
    finally:
        await registry.shutdown()


def _do_publish(args: argparse.Namespace) -> int:
    data: dict[str, Any] | None = None
    if args.data is not None:
        try:
            data = json.loads(args.data)
        except json.JSONDecodeError as e:
            print(f"Invalid --data JSON: {e}", file=sys.stderr)
            return 1
        if not isinstance(data, dict):
            print("--data must be a JSON object", file=sys.stderr)
            return 1

    return asyncio.run(_publish_once(args, data))


def main(argv: list[str] | None = None) -> int:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    args = _parse_args(argv)

    if args.command == "endpoint":
        return _do_endpoint(args)
    elif args.command == "publish":
        return _do_publish(args)
    else:
        print(f"Unknown command: {args.command}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
