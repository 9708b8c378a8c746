from __future__ import annotations
from dataclasses import dataclass
from typing import Optional
import os

DEFAULT_URL = "ws://localhost:8080/game"
DEFAULT_CLIENTS = 100
DEFAULT_INTERVAL_MS = 33  # ~30 Hz
DEFAULT_CLOSE_TIMEOUT = 2.0


class ConfigError(ValueError):
    """Raised when a setting from argv or the environment is unusable."""
    pass


def _default_url() -> str:
    return os.getenv("WS_URL", DEFAULT_URL)


def _default_clients() -> str:
    return os.getenv("CLIENTS", str(DEFAULT_CLIENTS))


def _default_interval_ms() -> str:
    return os.getenv("LOADTEST_INTERVAL_MS", str(DEFAULT_INTERVAL_MS))


def _parse_int(name: str, raw: object) -> int:
    if isinstance(raw, bool):
        raise ConfigError(f"{name} must be an integer, got {raw!r}")
    try:
        return int(raw)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        raise ConfigError(f"{name} must be an integer, got {raw!r}")


@dataclass
class LoadTestConfig:
    url: str = DEFAULT_URL
    clients: int = DEFAULT_CLIENTS
    interval_ms: int = DEFAULT_INTERVAL_MS
    close_timeout: float = DEFAULT_CLOSE_TIMEOUT

    def __post_init__(self) -> None:
        if not self.url.startswith(("ws://", "wss://")):
            raise ConfigError(f"url must start with ws:// or wss://, got {self.url!r}")
        if self.clients < 0:
            raise ConfigError(f"client count must be >= 0, got {self.clients}")
        if self.interval_ms <= 0:
            raise ConfigError(f"interval must be > 0 ms, got {self.interval_ms}")
        if self.close_timeout < 0:
            raise ConfigError(f"close timeout must be >= 0, got {self.close_timeout}")

    @property
    def interval(self) -> float:
        """Tick interval in seconds."""
        return self.interval_ms / 1000.0

    @classmethod
    def from_env(
        cls,
        clients: Optional[object] = None,
        url: Optional[str] = None,
        interval_ms: Optional[object] = None,
        close_timeout: float = DEFAULT_CLOSE_TIMEOUT,
    ) -> LoadTestConfig:
        """
        Resolve settings: explicit argument first, then environment, then default.

        Environment variables:
            WS_URL                server URL
            CLIENTS               number of simulated clients
            LOADTEST_INTERVAL_MS  tick interval in milliseconds
        """
        return cls(
            url=url or _default_url(),
            clients=_parse_int("client count", clients if clients is not None else _default_clients()),
            interval_ms=_parse_int("interval", interval_ms if interval_ms is not None else _default_interval_ms()),
            close_timeout=close_timeout,
        )
