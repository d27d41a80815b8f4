"""State machine driver sequencing the states of one workflow."""

from __future__ import annotations

import asyncio
import logging
from enum import Enum
from typing import Callable

from ln_controller.events import EventType
from ln_controller.services.locator import ServiceLocator
from ln_controller.state_data import StateConfiguration, StateData
from ln_controller.states.base import State
from ln_controller.states.cleanup import CleanUpState
from ln_controller.states.recovery import RecoveryState

logger = logging.getLogger(__name__)

EXIT_SUCCESS = 0
EXIT_FAILURE = 1
RECOVERIES_PER_STATE = 1


class Transition(str, Enum):
    """Controller reaction to a state event."""

    ADVANCE = "advance"
    COMPLETE = "complete"
    RECOVER = "recover"
    ABORT = "abort"


def decide_transition(
    event: EventType, curr_state_num: int, max_state_num: int, recoveries_left: int
) -> Transition:
    """Pure transition function of the controller.

    Finish of the last state completes the workflow, any earlier Finish
    advances. A Docker error is recovered while the position still has
    recovery budget. Everything else aborts through clean up.
    """
    if event is EventType.FINISH:
        if curr_state_num + 1 >= max_state_num:
            return Transition.COMPLETE
        return Transition.ADVANCE
    if event is EventType.DOCKER_ERROR and recoveries_left > 0:
        return Transition.RECOVER
    return Transition.ABORT


class _EventRecorder:
    """Observer for the recovery run; the controller only logs its outcome."""

    def __init__(self) -> None:
        self.events: list[EventType] = []

    async def update(self, event: EventType) -> None:
        self.events.append(event)


class StateController:
    """Drive a workflow's states from the first to the last.

    `start_state_machine` only schedules the first state; progress happens
    through `update`, which every active state calls once it is done.
    `run` waits for the outcome and returns the exit code.
    """

    def __init__(
        self,
        workflow: str,
        services: ServiceLocator,
        *,
        state_data: StateData | None = None,
        recovery_factory: Callable[[ServiceLocator, EventType], State] = RecoveryState,
        cleanup_factory: Callable[[ServiceLocator], State] = CleanUpState,
    ) -> None:
        self.workflow = workflow
        self.services = services
        self.state_data = state_data or StateData(services)
        self._recovery_factory = recovery_factory
        self._cleanup_factory = cleanup_factory
        self.configuration: StateConfiguration | None = None
        self.curr_state_num = 0
        self.max_state_num = 0
        self.exit_code: int | None = None
        self._aborting = False
        self._recoveries: dict[int, int] = {}
        self._tasks: set[asyncio.Task] = set()
        self._done: asyncio.Future[int] | None = None

    @property
    def decided(self) -> bool:
        return self._aborting or self.exit_code is not None

    @property
    def current_state(self) -> State | None:
        if self.configuration is None or self.curr_state_num >= self.max_state_num:
            return None
        return self.configuration.states[self.curr_state_num]

    def _done_future(self) -> asyncio.Future[int]:
        if self._done is None:
            self._done = asyncio.get_running_loop().create_future()
        return self._done

    async def start_state_machine(self) -> None:
        """Resolve the workflow and schedule its first state."""
        done = self._done_future()
        if self.configuration is not None or done.done():
            logger.warning("State machine for %s was already started", self.workflow)
            return
        configuration = self.state_data.get_selected_state_configuration(self.workflow)
        if configuration is None or not configuration.states:
            logger.critical("Could not load state configuration for workflow '%s'", self.workflow)
            self._finish(EXIT_FAILURE)
            return
        self.configuration = configuration
        self.max_state_num = len(configuration.states)
        logger.info(
            "Starting %s workflow: %s",
            self.workflow,
            " -> ".join(kind.value for kind in configuration.kinds),
        )
        self._start_state(0)

    def _start_state(self, index: int) -> None:
        assert self.configuration is not None
        state = self.configuration.states[index]
        state.subscribe(self)
        task = asyncio.get_running_loop().create_task(
            self._run_state(state), name=f"{self.workflow}:{state.kind.value}"
        )
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _run_state(self, state: State) -> None:
        try:
            await state.on_start()
        except asyncio.CancelledError:
            raise
        except Exception:
            logger.exception("%s failed while running", state.kind.value)
            await self._abort()

    def _recoveries_left(self) -> int:
        return self._recoveries.get(self.curr_state_num, RECOVERIES_PER_STATE)

    async def update(self, event: EventType) -> None:
        """Observer entry point called by the active state."""
        if self.decided:
            logger.warning(
                "Ignoring %s received after the %s workflow outcome was decided",
                event.value,
                self.workflow,
            )
            return
        try:
            transition = decide_transition(
                event, self.curr_state_num, self.max_state_num, self._recoveries_left()
            )
            logger.debug(
                "%s at state %s/%s -> %s",
                event.value,
                self.curr_state_num + 1,
                self.max_state_num,
                transition.value,
            )
            if transition is Transition.ADVANCE:
                self.curr_state_num += 1
                self._start_state(self.curr_state_num)
            elif transition is Transition.COMPLETE:
                self.curr_state_num += 1
                self._finish(EXIT_SUCCESS)
            elif transition is Transition.RECOVER:
                self._recoveries[self.curr_state_num] = self._recoveries_left() - 1
                await self._recover(event)
            else:
                await self._abort(event)
        except Exception:
            logger.exception("Transition of the %s workflow failed", self.workflow)
            await self._abort()

    async def _recover(self, event: EventType) -> None:
        interrupted = self.current_state
        recovery = self._recovery_factory(self.services, event)
        recorder = _EventRecorder()
        recovery.subscribe(recorder)
        await recovery.on_start()
        logger.info(
            "Recovery finished with %s; resuming %s",
            ", ".join(item.value for item in recorder.events) or "no event",
            interrupted.kind.value if interrupted is not None else "workflow",
        )

    async def _abort(self, event: EventType | None = None) -> None:
        if self.decided:
            return
        self._aborting = True
        reason = event.value if event is not None else "an unexpected error"
        logger.error("Stopping the %s workflow after %s; cleaning up...", self.workflow, reason)
        cleanup = self._cleanup_factory(self.services)
        try:
            await cleanup.on_start()
        except Exception:
            logger.exception("Clean up after failure did not complete")
        self._finish(EXIT_FAILURE)

    def _finish(self, code: int) -> None:
        if self.exit_code is not None:
            return
        self.exit_code = code
        done = self._done_future()
        if not done.done():
            done.set_result(code)

    def _background_tasks(self) -> list[asyncio.Task]:
        if self.configuration is None:
            return []
        return [task for state in self.configuration.states for task in state.pending_tasks]

    async def run(self) -> int:
        """Run the workflow to its outcome and return the process exit code."""
        await self.start_state_machine()
        code = await self._done_future()
        current = asyncio.current_task()
        pending = [task for task in self._tasks if task is not current and not task.done()]
        background = self._background_tasks()
        if code == EXIT_SUCCESS:
            results = await asyncio.gather(*pending, *background, return_exceptions=True)
            for result in results:
                if isinstance(result, BaseException) and not isinstance(result, asyncio.CancelledError):
                    logger.error("Background work of the %s workflow failed: %s", self.workflow, result)
        else:
            for task in (*pending, *background):
                task.cancel()
            await asyncio.gather(*pending, *background, return_exceptions=True)
        return code
