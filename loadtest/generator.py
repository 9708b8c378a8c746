"""
Load generator.

Starts the configured number of simulated clients on one event loop and closes
whatever is still open when the run is interrupted.
"""

from __future__ import annotations
import asyncio
import random
import signal
from contextlib import suppress
from typing import Callable, List, Optional

import websockets

from loadtest.bot import Connector, SimulatedClient
from loadtest.config import LoadTestConfig
from shared.log import get_logger

logger = get_logger(__name__)

RngFactory = Callable[[int], random.Random]

SHUTDOWN_SIGNALS = (signal.SIGINT, signal.SIGTERM)


class LoadGenerator:
    """
    Starts `config.clients` independent simulated clients on the running loop and
    keeps them going until interrupted.

    The generator owns the list of clients; shutdown walks that list, sends a close
    request on every connection that is still open, then cancels whatever is left
    (clients still connecting, tick loops between ticks).
    """

    def __init__(
        self,
        config: LoadTestConfig,
        *,
        connect: Connector = websockets.connect,
        rng_factory: Optional[RngFactory] = None,
    ) -> None:
        self.config = config
        self._connect = connect
        self._rng_factory = rng_factory or (lambda index: random.Random())
        self.clients: List[SimulatedClient] = []
        self._tasks: List[asyncio.Task] = []

    def _create_clients(self) -> List[SimulatedClient]:
        return [
            SimulatedClient(
                index,
                self.config.url,
                interval=self.config.interval,
                rng=self._rng_factory(index),
                connect=self._connect,
            )
            for index in range(self.config.clients)
        ]

    def start(self) -> None:
        """Create every client and schedule its task. Must be called on a running loop."""
        self.clients = self._create_clients()
        for client in self.clients:
            self._tasks.append(asyncio.create_task(client.run(), name=client.name))
        logger.info("Started %d clients against %s", len(self.clients), self.config.url)

    async def run(self, stop: Optional[asyncio.Event] = None, *, handle_signals: bool = True) -> None:
        """
        Run until SIGINT/SIGTERM arrives or `stop` is set, then shut down.

        Args:
            stop: Event that ends the run when set; created internally if omitted
            handle_signals: Install loop signal handlers that set `stop`
        """
        stop = stop or asyncio.Event()
        loop = asyncio.get_running_loop()
        installed = self._install_signal_handlers(loop, stop) if handle_signals else []

        self.start()
        try:
            await stop.wait()
        finally:
            for sig in installed:
                loop.remove_signal_handler(sig)
            await self.shutdown()

    def _install_signal_handlers(self, loop: asyncio.AbstractEventLoop, stop: asyncio.Event) -> List[int]:
        installed = []
        for sig in SHUTDOWN_SIGNALS:
            try:
                loop.add_signal_handler(sig, stop.set)
            except (NotImplementedError, RuntimeError, ValueError):
                # Windows loops and non-main threads; Ctrl-C then arrives as KeyboardInterrupt
                logger.debug("Cannot install handler for %s", sig)
                continue
            installed.append(sig)
        return installed

    async def shutdown(self) -> None:
        """Best-effort close of every open connection, then cancel all client tasks."""
        open_clients = [client for client in self.clients if client.is_open]
        logger.info("Closing %d open connections", len(open_clients))
        await asyncio.gather(*(client.close(self.config.close_timeout) for client in open_clients))

        for task in self._tasks:
            task.cancel()
        for task in self._tasks:
            with suppress(asyncio.CancelledError):
                await task
        self._tasks.clear()
