"""Parse the record stream file covering a consensus timestamp."""

from __future__ import annotations

import asyncio
import shutil
from pathlib import Path

from ln_common.errors import (
    DebugModeError,
    DockerServiceError,
    InvalidTimestampError,
    RecordFileNotFoundError,
)
from ln_common.logging import TRACE
from ln_controller.constants import (
    CONSENSUS_NODE_LABEL,
    RECORD_PARSER_COMMAND,
    RECORD_PARSER_TEMP_DIR,
    RECORD_STREAMS_SUBDIR,
)
from ln_controller.events import EventType
from ln_controller.states.base import State, StateKind
from ln_controller.utils.filesystem import copy_file, ensure_directory_exists
from ln_controller.utils.record_files import RecordFileMatch, find_record_file

KEEP_IN_TEMP_DIR = frozenset({".gitignore"})


class DebugState(State):
    kind = StateKind.DEBUG

    @property
    def record_dir(self) -> Path:
        return self.work_dir.joinpath(*RECORD_STREAMS_SUBDIR)

    @property
    def temp_dir(self) -> Path:
        return self.work_dir.joinpath(*RECORD_PARSER_TEMP_DIR)

    async def on_start(self) -> None:
        self.logger.info("Starting Debug State...")
        try:
            self.check_debug_mode()
            match = find_record_file(
                self.record_dir, self.options.timestamp, self.services.cli.record_extension
            )
            self.copy_to_temp(match)
            try:
                await asyncio.to_thread(
                    self.services.docker.exec_in_container,
                    CONSENSUS_NODE_LABEL,
                    list(RECORD_PARSER_COMMAND),
                )
            finally:
                self.clean_temp_dir()
        except (DebugModeError, InvalidTimestampError, RecordFileNotFoundError, DockerServiceError) as exc:
            self.logger.error("%s", exc)
            await self.notify(EventType.UNRESOLVABLE_ERROR)
            return
        await self.notify(EventType.FINISH)

    def check_debug_mode(self) -> None:
        if not self.options.enable_debug and not self.record_dir.is_dir():
            raise DebugModeError()

    def copy_to_temp(self, match: RecordFileMatch) -> None:
        ensure_directory_exists(self.temp_dir)
        for source in (match.record, match.signature):
            if not source.exists():
                self.logger.warning("Missing %s next to the record file", source.name)
                continue
            copy_file(source, self.temp_dir / source.name)
            self.logger.log(TRACE, "Copied %s to %s", source.name, self.temp_dir)

    def clean_temp_dir(self) -> None:
        if not self.temp_dir.is_dir():
            return
        for entry in self.temp_dir.iterdir():
            if entry.name in KEEP_IN_TEMP_DIR:
                continue
            if entry.is_dir():
                shutil.rmtree(entry, ignore_errors=True)
            else:
                entry.unlink(missing_ok=True)
