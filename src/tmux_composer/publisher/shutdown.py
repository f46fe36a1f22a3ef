# SPDX-FileCopyrightText: 2025 OmniNode.ai Inc.
# SPDX-License-Identifier: MIT

"""Shutdown hooks that run publisher cleanup on SIGINT, SIGTERM or exit.

The registry never touches process signals itself; the host hands it a
``ShutdownHookRegistrar``. ``ProcessShutdownHooks`` is the stock one:

    - SIGINT/SIGTERM handlers are one-shot: the first delivery runs the
      callbacks and restores default handling, so a second Ctrl-C kills
      the process as usual
    - Normal interpreter exit runs the callbacks via ``atexit``
    - Callbacks run at most once across all triggers
"""

from __future__ import annotations

import asyncio
import atexit
import logging
import signal
from collections.abc import Awaitable, Callable, Iterable
from typing import Protocol

logger = logging.getLogger(__name__)

ShutdownCallback = Callable[[], Awaitable[None]]

DEFAULT_SIGNALS: tuple[signal.Signals, ...] = (signal.SIGINT, signal.SIGTERM)


class ShutdownHookRegistrar(Protocol):
    def register(self, callback: ShutdownCallback) -> None: ...


class ProcessShutdownHooks:
    """Runs registered async callbacks once on signal or normal exit."""

    def __init__(
        self,
        loop: asyncio.AbstractEventLoop | None = None,
        signals: Iterable[signal.Signals] = DEFAULT_SIGNALS,
    ) -> None:
        self._loop = loop
        self._signals = tuple(signals)
        self._callbacks: list[ShutdownCallback] = []
        self._installed_signals: list[signal.Signals] = []
        self._atexit_installed = False
        self._fired = False
        self._signal_task: asyncio.Task[None] | None = None

    @property
    def fired(self) -> bool:
        return self._fired

    @property
    def signal_task(self) -> asyncio.Task[None] | None:
        return self._signal_task

    def register(self, callback: ShutdownCallback) -> None:
        self._callbacks.append(callback)
        if not self._atexit_installed:
            self._install()

    async def run(self) -> None:
        if self._fired:
            return
        self._fired = True
        for callback in list(self._callbacks):
            try:
                await callback()
            except Exception:
                logger.exception("Shutdown callback failed")

    def close(self) -> None:
        """Uninstall every hook without running the callbacks."""
        loop = self._loop
        for sig in self._installed_signals:
            if loop is not None:
                loop.remove_signal_handler(sig)
        self._installed_signals.clear()
        if self._atexit_installed:
            atexit.unregister(self._on_exit)
            self._atexit_installed = False

    def _install(self) -> None:
        if self._loop is None:
            try:
                self._loop = asyncio.get_running_loop()
            except RuntimeError:
                self._loop = None

        if self._loop is not None:
            for sig in self._signals:
                try:
                    self._loop.add_signal_handler(sig, self._on_signal, sig)
                    self._installed_signals.append(sig)
                except (NotImplementedError, RuntimeError, ValueError) as e:
                    logger.warning(f"Cannot install handler for {sig.name}: {e}")
        else:
            logger.debug("No running event loop, signal hooks not installed")

        atexit.register(self._on_exit)
        self._atexit_installed = True

    def _on_signal(self, sig: signal.Signals) -> None:
        if self._loop is None:
            return
        self._loop.remove_signal_handler(sig)
        if sig in self._installed_signals:
            self._installed_signals.remove(sig)
        logger.info(f"Received {sig.name}, shutting down publishers")
        self._signal_task = self._loop.create_task(self.run())

    def _on_exit(self) -> None:
        if self._fired:
            return
        try:
            asyncio.run(self.run())
        except Exception:
            logger.exception("Publisher shutdown at exit failed")


__all__: list[str] = [
    "DEFAULT_SIGNALS",
    "ProcessShutdownHooks",
    "ShutdownCallback",
    "ShutdownHookRegistrar",
]
