"""Seed the mirror node database and wait for the monitor topic."""

from __future__ import annotations

import asyncio
import time

from ln_common.errors import ClientError, DockerServiceError
from ln_common.logging import TRACE
from ln_controller.constants import (
    EXCHANGE_RATES_FILE_NUM,
    FEES_FILE_NUM,
    MIRROR_NODE_DB,
    MIRROR_NODE_MONITOR,
    TOPIC_CREATED_LOG_TEXT,
)
from ln_controller.events import EventType
from ln_controller.states.base import State, StateKind
from ln_controller.utils.retry import retry_task

FILE_UPDATE_TRANSACTION_TYPE = 17


def file_data_insert(contents: bytes, consensus_timestamp: str, file_num: int) -> list[str]:
    """psql invocation inserting *contents* as a file_data row."""
    statement = (
        "INSERT INTO public.file_data(file_data, consensus_timestamp, entity_id, transaction_type) "
        f"VALUES (decode('{contents.hex()}', 'hex'), {consensus_timestamp}, {file_num}, "
        f"{FILE_UPDATE_TRANSACTION_TYPE});"
    )
    return ["psql", "mirror_node", "-U", "mirror_node", "-c", statement]


class NetworkPrepState(State):
    kind = StateKind.NETWORK_PREP

    file_read_attempts: int = 3
    file_read_back_off: float = 2.0

    async def on_start(self) -> None:
        self.logger.info("Starting Network Preparation State...")
        try:
            await self.import_fees()
            await self.wait_for_topic_creation()
        except (ClientError, DockerServiceError) as exc:
            self.logger.error("Network preparation failed: %s", exc)
            await self.notify(EventType.UNKNOWN_ERROR)
            return
        await self.notify(EventType.FINISH)

    async def import_fees(self) -> None:
        self.logger.log(TRACE, "Starting Fees import...")
        gateway = self.services.client.get_client()
        timestamp_ms = int(time.time() * 1000)
        for file_num, suffix in ((FEES_FILE_NUM, "000000"), (EXCHANGE_RATES_FILE_NUM, "000001")):
            contents = await self.read_system_file(gateway, file_num)
            await asyncio.to_thread(
                self.services.docker.exec_in_container,
                MIRROR_NODE_DB,
                file_data_insert(contents, f"{timestamp_ms}{suffix}", file_num),
            )
        self.logger.info("Imported fees successfully")

    async def read_system_file(self, gateway, file_num: int) -> bytes:
        """Read `0.0.<file_num>`, retrying while the freshly started node rejects queries."""

        def log_retry(error: BaseException) -> None:
            self.logger.warning("Reading file 0.0.%s failed, retrying: %s", file_num, error)

        return await retry_task(
            lambda: gateway.file_contents(file_num),
            max_retries=self.file_read_attempts,
            back_off=self.file_read_back_off,
            should_retry=lambda error: isinstance(error, ClientError),
            on_retry=log_retry,
        )

    async def wait_for_topic_creation(self) -> None:
        # Account numbers shift by one if the monitor topic lands during account creation.
        self.logger.log(TRACE, "Waiting for topic creation...")
        await self.services.docker.wait_for_log_line(MIRROR_NODE_MONITOR, TOPIC_CREATED_LOG_TEXT)
        self.logger.info("Topic was created!")
