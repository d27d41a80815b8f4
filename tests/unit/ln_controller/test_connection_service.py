from __future__ import annotations

import asyncio

import pytest

from ln_common.errors import NodeConnectionError
from ln_controller.models.cli_options import CLIOptions
from ln_controller.services.connection_service import ConnectionService

pytestmark = pytest.mark.unit_controller


class _Writer:
    def close(self) -> None:
        pass

    async def wait_closed(self) -> None:
        pass


def _opener(failures: int):
    calls = []

    async def open_connection(host, port):
        calls.append((host, port))
        if len(calls) <= failures:
            raise ConnectionRefusedError(port)
        return object(), _Writer()

    open_connection.calls = calls
    return open_connection


async def _no_sleep(_delay: float) -> None:
    return None


def test_wait_for_firing_up_retries_until_port_opens():
    opener = _opener(failures=2)
    service = ConnectionService(CLIOptions(), opener=opener, sleep=_no_sleep)

    asyncio.run(service.wait_for_firing_up(5600, attempts=5))

    assert opener.calls == [("127.0.0.1", 5600)] * 3


def test_wait_for_firing_up_gives_up_after_budget():
    opener = _opener(failures=10)
    service = ConnectionService(CLIOptions(), opener=opener, sleep=_no_sleep)

    with pytest.raises(NodeConnectionError) as excinfo:
        asyncio.run(service.wait_for_firing_up(50211, attempts=3))

    assert len(opener.calls) == 3
    assert excinfo.value.port == 50211
    assert "port 50211" in str(excinfo.value)
    assert isinstance(excinfo.value.__cause__, ConnectionRefusedError)


def test_check_connection_wraps_os_errors():
    service = ConnectionService(CLIOptions(host="10.0.0.5"), opener=_opener(failures=1), sleep=_no_sleep)

    with pytest.raises(NodeConnectionError) as excinfo:
        asyncio.run(service.check_connection(7546))
    assert excinfo.value.context["host"] == "10.0.0.5"
