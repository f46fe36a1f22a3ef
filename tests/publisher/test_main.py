"""Tests for publisher CLI entry point (__main__.py)."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from tmux_composer.publisher.__main__ import _parse_args, main
from tmux_composer.publisher.exceptions import PublisherConnectionError

# Patch target for the local import inside _publish_once
_REGISTRY_TARGET = "tmux_composer.publisher.registry.PublisherRegistry"


def _mock_registry(publisher: MagicMock | None) -> MagicMock:
    registry = MagicMock()
    registry.enable_publishing = AsyncMock(return_value=publisher)
    registry.shutdown = AsyncMock()
    return registry


def _mock_publisher() -> MagicMock:
    publisher = MagicMock()
    publisher.endpoint = "ipc:///tmp/tmux-composer/events.sock"
    publisher.connect = AsyncMock()
    return publisher


class TestParseArgs:
    """Tests for _parse_args."""

    def test_endpoint_defaults(self) -> None:
        args = _parse_args(["endpoint"])
        assert args.command == "endpoint"
        assert args.socket_name is None
        assert args.socket_path is None

    def test_publish_requires_event(self) -> None:
        with pytest.raises(SystemExit):
            _parse_args(["publish"])

    def test_publish_arguments(self) -> None:
        args = _parse_args(
            [
                "publish",
                "--event",
                "session-created",
                "--data",
                '{"port": 3000}',
                "--session-name",
                "api",
                "--socket-name",
                "work",
            ]
        )
        assert args.event == "session-created"
        assert args.data == '{"port": 3000}'
        assert args.script == "tmux-composer"
        assert args.session_name == "api"
        assert args.socket_name == "work"

    def test_no_command_exits(self) -> None:
        with pytest.raises(SystemExit):
            _parse_args([])


class TestEndpointCommand:
    def test_prints_named_endpoint(
        self,
        capsys: pytest.CaptureFixture[str],
        monkeypatch: pytest.MonkeyPatch,
        tmp_path: Path,
    ) -> None:
        monkeypatch.setenv("TMUX_COMPOSER_ZMQ_SOCKET_DIR", str(tmp_path))

        assert main(["endpoint", "--socket-name", "work"]) == 0

        out = capsys.readouterr().out.strip()
        assert out == f"ipc://{(tmp_path / 'work.sock').resolve()}"

    def test_prints_explicit_path(
        self, capsys: pytest.CaptureFixture[str], tmp_path: Path
    ) -> None:
        socket_path = tmp_path / "bus.sock"

        assert main(["endpoint", "--socket-path", str(socket_path)]) == 0

        assert capsys.readouterr().out.strip() == f"ipc://{socket_path.resolve()}"

    def test_invalid_socket_name_returns_error(
        self, capsys: pytest.CaptureFixture[str]
    ) -> None:
        assert main(["endpoint", "--socket-name", "../escape"]) == 1

        captured = capsys.readouterr()
        assert captured.out == ""
        assert captured.err.startswith("Error: ")


class TestPublishCommand:
    def test_invalid_json_data(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert main(["publish", "--event", "x", "--data", "{not json"]) == 1
        assert "Invalid --data JSON" in capsys.readouterr().err

    def test_data_must_be_object(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert main(["publish", "--event", "x", "--data", "[1, 2]"]) == 1
        assert "must be a JSON object" in capsys.readouterr().err

    def test_publishes_and_shuts_down(self, capsys: pytest.CaptureFixture[str]) -> None:
        publisher = _mock_publisher()
        registry = _mock_registry(publisher)

        with patch(_REGISTRY_TARGET, return_value=registry):
            result = main(
                ["publish", "--event", "session-created", "--session-name", "api"]
            )

        assert result == 0
        publisher.connect.assert_awaited_once()
        registry.shutdown.assert_awaited_once()

        options = registry.enable_publishing.await_args.args[1]
        assert options.source.script == "tmux-composer"
        assert options.source.session_name == "api"
        assert "Published 'session-created'" in capsys.readouterr().out

    def test_invalid_socket_name_returns_error(
        self, capsys: pytest.CaptureFixture[str]
    ) -> None:
        registry = _mock_registry(_mock_publisher())

        with patch(_REGISTRY_TARGET, return_value=registry) as registry_cls:
            result = main(["publish", "--event", "x", "--socket-name", "bad name"])

        assert result == 1
        registry_cls.assert_not_called()
        assert capsys.readouterr().err.startswith("Error: ")

    def test_connect_failure_returns_error(
        self, capsys: pytest.CaptureFixture[str]
    ) -> None:
        publisher = _mock_publisher()
        publisher.connect.side_effect = PublisherConnectionError("ipc:///tmp/x.sock")
        registry = _mock_registry(publisher)

        with patch(_REGISTRY_TARGET, return_value=registry):
            result = main(["publish", "--event", "session-created"])

        assert result == 1
        registry.shutdown.assert_awaited_once()
        assert "Failed to connect publisher" in capsys.readouterr().err

    def test_disabled_publishing_returns_error(
        self, capsys: pytest.CaptureFixture[str]
    ) -> None:
        registry = _mock_registry(None)

        with patch(_REGISTRY_TARGET, return_value=registry):
            result = main(["publish", "--event", "session-created"])

        assert result == 1
        assert "disabled" in capsys.readouterr().err
