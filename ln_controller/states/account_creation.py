"""Generate the default accounts of every family."""

from __future__ import annotations

from ln_common.errors import ClientError
from ln_controller.events import EventType
from ln_controller.states.base import State, StateKind


class AccountCreationState(State):
    kind = StateKind.ACCOUNT_CREATION

    async def on_start(self) -> None:
        options = self.options
        self.logger.info("Starting Account Creation state in %s mode", options.mode_label)
        try:
            await self.services.accounts.generate(
                count=options.accounts,
                balance=options.balance,
                startup=options.startup,
                async_mode=options.async_mode,
            )
        except ClientError as exc:
            self.logger.error("%s", exc)
            await self.notify(EventType.UNKNOWN_ERROR)
            return
        await self.notify(EventType.FINISH)
