"""
Simulated game client.

Each SimulatedClient owns one WebSocket connection: it joins as bot<index>,
streams input frames on a fixed tick and logs its own transport errors.
"""

from __future__ import annotations
import asyncio
import random
from contextlib import suppress
from typing import Any, Awaitable, Callable, Optional

import websockets
from websockets.exceptions import ConnectionClosed, ConnectionClosedError, WebSocketException
from websockets.protocol import State

from loadtest.messages import InputMessage, JoinMessage, Message, random_input
from shared.log import get_logger

logger = get_logger(__name__)


Connector = Callable[[str], Awaitable[Any]]

# Everything a refused, dropped or rejected connection can raise
TRANSPORT_ERRORS = (OSError, asyncio.TimeoutError, WebSocketException)


def describe(error: BaseException) -> str:
    """Error text for log lines, falling back to the class name for empty messages."""
    return str(error) or type(error).__name__


class SimulatedClient:
    """
    One emulated player: a single WebSocket connection plus its own sequence counter.

    After the connection opens it sends one join message, then one input message
    every `interval` seconds. The open-state check happens at the top of each tick,
    so a closed connection stops the loop on the following tick.
    """

    def __init__(
        self,
        index: int,
        url: str,
        *,
        interval: float = 0.033,
        rng: Optional[random.Random] = None,
        connect: Connector = websockets.connect,
    ) -> None:
        self.index = index
        self.url = url
        self.interval = interval
        self.rng = rng or random.Random()
        self._connect = connect
        self.websocket: Optional[websockets.ClientConnection] = None
        self.seq = 0
        self.joined = False
        self.sent_inputs = 0
        self.last_error: Optional[BaseException] = None

    @property
    def name(self) -> str:
        return f"bot{self.index}"

    @property
    def is_open(self) -> bool:
        return self.websocket is not None and self.websocket.state is State.OPEN

    def next_input(self) -> InputMessage:
        self.seq += 1
        return random_input(self.seq, self.rng)

    async def connect(self) -> None:
        """Open the WebSocket connection to the game server"""
        self.websocket = await self._connect(self.url)

    async def send(self, message: Message) -> None:
        assert self.websocket is not None
        await self.websocket.send(message.to_json())

    async def run(self) -> None:
        """Connect, join and tick until the connection leaves the open state."""
        try:
            await self.connect()
        except TRANSPORT_ERRORS as e:
            self._on_error(e)
            return

        drain = asyncio.create_task(self._discard_inbound())
        try:
            await self.send(JoinMessage(self.name))
            self.joined = True
            logger.debug("Joined as %s", self.name, extra={"client": self.index})
            await self._tick_loop()
        except ConnectionClosed:
            # Closed before the join went out; the reader reports abnormal closes
            pass
        except asyncio.CancelledError:
            drain.cancel()
            with suppress(asyncio.CancelledError):
                await drain
            raise

        # The connection has left the open state, so the reader finishes on its own
        await drain

    async def _tick_loop(self) -> None:
        while True:
            await asyncio.sleep(self.interval)
            if not self.is_open:
                logger.debug("Connection no longer open, stopping after seq=%d", self.seq,
                             extra={"client": self.index})
                return
            try:
                await self.send(self.next_input())
            except ConnectionClosed:
                # Closed between the state check and the send
                return
            self.sent_inputs += 1

    async def _discard_inbound(self) -> None:
        """Read and drop server frames so the receive queue never fills up."""
        assert self.websocket is not None
        try:
            async for _ in self.websocket:
                pass
        except ConnectionClosedError as e:
            self._on_error(e)

    def _on_error(self, error: BaseException) -> None:
        self.last_error = error
        logger.error("client %d error: %s", self.index, describe(error))

    async def close(self, timeout: float = 2.0) -> bool:
        """
        Send a close request if the connection is still open.

        Returns True when a close was attempted. Waiting for the closing handshake
        is bounded by `timeout`; failures are logged and never raised.
        """
        if not self.is_open:
            return False
        assert self.websocket is not None
        try:
            await asyncio.wait_for(self.websocket.close(code=1000), timeout=timeout)
        except TRANSPORT_ERRORS as e:
            logger.warning("client %d close did not complete: %s", self.index, describe(e))
        return True
