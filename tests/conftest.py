import asyncio
import json
import sys
from pathlib import Path
from typing import List, Optional

import pytest
from websockets.exceptions import ConnectionClosedOK
from websockets.protocol import State

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


class DummyWebSocket:
    """Stands in for websockets.ClientConnection: records frames, never receives any."""

    def __init__(self) -> None:
        self.sent_messages: List[str] = []
        self.state = State.OPEN
        self.close_code: Optional[int] = None
        self._closed = asyncio.Event()

    async def send(self, data: str) -> None:
        if self.state is not State.OPEN:
            raise ConnectionClosedOK(None, None)
        self.sent_messages.append(data)

    async def close(self, code: int = 1000, reason: str = "") -> None:
        self.state = State.CLOSED
        self.close_code = code
        self._closed.set()

    def drop(self) -> None:
        """Simulate the server going away without a close handshake from us."""
        self.state = State.CLOSED
        self._closed.set()

    def __aiter__(self):
        return self

    async def __anext__(self):
        await self._closed.wait()
        raise StopAsyncIteration

    @property
    def decoded(self) -> list:
        return [json.loads(m) for m in self.sent_messages]


class DummyConnector:
    """Callable matching websockets.connect(url); hands out a fresh DummyWebSocket per call."""

    def __init__(self, error: Optional[BaseException] = None) -> None:
        self.error = error
        self.urls: List[str] = []
        self.sockets: List[DummyWebSocket] = []

    async def __call__(self, url: str) -> DummyWebSocket:
        self.urls.append(url)
        if self.error is not None:
            raise self.error
        ws = DummyWebSocket()
        self.sockets.append(ws)
        return ws


@pytest.fixture
def clean_env(monkeypatch):
    for name in ("WS_URL", "CLIENTS", "LOADTEST_INTERVAL_MS", "LOADTEST_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


@pytest.fixture
def logged_errors(monkeypatch):
    """Collects the (format, index, description) args of every client error line."""
    from loadtest import bot as bot_module

    calls = []
    monkeypatch.setattr(bot_module.logger, "error", lambda *args, **kwargs: calls.append(args))
    return calls


async def wait_for(predicate, timeout: float = 3.0) -> bool:
    loop = asyncio.get_running_loop()
    end = loop.time() + timeout
    while loop.time() < end:
        if predicate():
            return True
        await asyncio.sleep(0.01)
    return False
