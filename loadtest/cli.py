#!/usr/bin/env python3

from __future__ import annotations
import asyncio
from contextlib import suppress
from typing import Optional

import typer
from rich.console import Console

from loadtest.config import DEFAULT_CLOSE_TIMEOUT, ConfigError, LoadTestConfig
from loadtest.generator import LoadGenerator
from shared.log import get_logger, set_level

app = typer.Typer(help="WebSocket game-server load generator", add_completion=False)
console = Console()
logger = get_logger(__name__)


@app.command()
def run(
    clients: Optional[int] = typer.Argument(None, help="Number of simulated clients (env CLIENTS, default 100)"),
    url: Optional[str] = typer.Option(None, "--url", help="Game server WebSocket URL (env WS_URL)"),
    interval_ms: Optional[int] = typer.Option(None, "--interval-ms", help="Input tick interval in ms (env LOADTEST_INTERVAL_MS, default 33)"),
    close_timeout: float = typer.Option(DEFAULT_CLOSE_TIMEOUT, "--close-timeout", help="Seconds to wait for each closing handshake on shutdown"),
    log_level: Optional[str] = typer.Option(None, "--log-level", help="DEBUG, INFO, WARNING or ERROR (env LOADTEST_LOG_LEVEL)"),
):
    """Connect the bots and stream inputs until Ctrl-C."""
    if log_level:
        set_level(log_level)
    try:
        config = LoadTestConfig.from_env(
            clients=clients,
            url=url,
            interval_ms=interval_ms,
            close_timeout=close_timeout,
        )
    except ConfigError as e:
        raise typer.BadParameter(str(e))

    console.print(f"Connecting {config.clients} clients to {config.url}")
    generator = LoadGenerator(config)

    # Without loop signal handlers (Windows) Ctrl-C cancels the run and shutdown happens in its finally
    with suppress(KeyboardInterrupt):
        asyncio.run(generator.run())
    logger.info("Load test stopped")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
