"""TCP reachability checks for the containers' published ports."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable

from ln_common.errors import NodeConnectionError
from ln_common.logging import TRACE
from ln_controller.models.cli_options import CLIOptions
from ln_controller.utils.debounce import debounce

logger = logging.getLogger(__name__)

Opener = Callable[[str, int], Awaitable[tuple[Any, Any]]]


class ConnectionService:
    """Poll service ports until they accept connections."""

    DEFAULT_CHECK_TIMEOUT_SECONDS = 3.0
    ERROR_LOG_WINDOW_SECONDS = 5.0

    def __init__(
        self,
        options: CLIOptions,
        *,
        opener: Opener = asyncio.open_connection,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        """Initialize the connection service.

        Args:
            options: Resolved options; supplies the host and the retry policy.
            opener: Coroutine opening a TCP stream, replaceable in tests.
            sleep: Coroutine used between attempts.
        """
        self._options = options
        self._open = opener
        self._sleep = sleep
        self._log_error = debounce(self._report_error, self.ERROR_LOG_WINDOW_SECONDS)
        logger.log(TRACE, "Connection Service Initialized!")

    def _report_error(self, port: int, error: BaseException) -> None:
        logger.error("Connection to %s:%s failed: %s", self._options.host, port, error)

    async def _try_connect(self, port: int, timeout: float) -> None:
        _reader, writer = await asyncio.wait_for(self._open(self._options.host, port), timeout)
        writer.close()
        await writer.wait_closed()

    async def wait_for_firing_up(
        self,
        port: int,
        *,
        attempts: int | None = None,
        interval: float | None = None,
    ) -> None:
        """Wait until *port* accepts connections.

        Args:
            port: Port published by a container.
            attempts: Retry budget; defaults to the options' connection policy.
            interval: Delay in seconds between attempts.

        Raises:
            NodeConnectionError: The port never opened within the budget.
        """
        max_attempts = attempts or self._options.connection_attempts
        delay = interval if interval is not None else self._options.connection_interval
        host = self._options.host
        last_error: BaseException | None = None
        for _ in range(max_attempts):
            try:
                await self._try_connect(port, self.DEFAULT_CHECK_TIMEOUT_SECONDS)
                logger.log(TRACE, "%s:%s is accepting connections", host, port)
                return
            except (OSError, asyncio.TimeoutError) as exc:
                last_error = exc
                logger.log(
                    TRACE,
                    "Waiting for the containers at %s:%s, retrying in %s seconds...",
                    host,
                    port,
                    delay,
                )
                self._log_error(port, exc)
            await self._sleep(delay)
        raise NodeConnectionError(port, context={"host": host}, cause=last_error)

    async def check_connection(self, port: int, timeout: float | None = None) -> None:
        """Single connection attempt; raises NodeConnectionError on failure."""
        try:
            await self._try_connect(port, timeout or self.DEFAULT_CHECK_TIMEOUT_SECONDS)
        except (OSError, asyncio.TimeoutError) as exc:
            raise NodeConnectionError(port, context={"host": self._options.host}, cause=exc) from exc
