"""WebSocket load generator for the game server."""

from loadtest.config import ConfigError, LoadTestConfig
from loadtest.generator import LoadGenerator
from loadtest.bot import SimulatedClient
from loadtest.messages import InputMessage, JoinMessage, MessageType

__all__ = [
    "ConfigError",
    "InputMessage",
    "JoinMessage",
    "LoadGenerator",
    "LoadTestConfig",
    "MessageType",
    "SimulatedClient",
]
