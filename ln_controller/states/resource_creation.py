"""Create the fixture accounts and tokens and associate them."""

from __future__ import annotations

import asyncio

from ln_common.errors import ConfigurationError, LocalNodeError
from ln_controller.events import EventType
from ln_controller.models.accounts import (
    AccountProps,
    AccountRecord,
    AccountType,
    InitialResources,
    KeyType,
    PrivateKeySpec,
    TokenProps,
)
from ln_controller.models.network_config import load_initial_resources
from ln_controller.services.locator import ServiceLocator
from ln_controller.states.base import State, StateKind
from ln_controller.utils.tokens import resolve_supply_key, validate_token_props


class ResourceCreationState(State):
    kind = StateKind.RESOURCE_CREATION

    def __init__(self, services: ServiceLocator, resources: InitialResources | None = None) -> None:
        super().__init__(services)
        self._resources = resources

    def load_resources(self) -> InitialResources:
        if self._resources is None:
            self._resources = load_initial_resources()
        return self._resources

    async def on_start(self) -> None:
        self.logger.info("Starting Resource Creation State in %s mode", self.options.mode_label)
        try:
            resources = self.load_resources()
        except ConfigurationError as exc:
            self.logger.error("%s", exc)
            await self.notify(EventType.UNRESOLVABLE_ERROR)
            return

        if self.options.async_mode:
            self.spawn(self._create_in_background(resources))
            await self.notify(EventType.FINISH)
            return

        try:
            await self.create_resources(resources)
        except LocalNodeError as exc:
            self.logger.error("Resource creation failed: %s", exc)
            await self.notify(EventType.UNKNOWN_ERROR)
            return
        await self.notify(EventType.FINISH)

    async def _create_in_background(self, resources: InitialResources) -> None:
        try:
            await self.create_resources(resources)
        except LocalNodeError as exc:
            self.logger.error("Resource creation failed: %s", exc)

    async def create_resources(self, resources: InitialResources) -> None:
        accounts = await self.create_accounts(resources.accounts)
        token_ids = await self.create_tokens(resources.tokens)
        await self.associate_accounts_with_tokens(accounts, token_ids)

    async def create_accounts(
        self, accounts: list[AccountProps]
    ) -> list[tuple[AccountProps, AccountRecord]]:
        self.logger.info("Creating accounts")
        service = self.services.accounts
        records = await asyncio.gather(*(service.create_from_props(props) for props in accounts))
        for record in records:
            self.logger.info(
                "Successfully created account with: account-id = %s, %s key = %s",
                record.account_id,
                record.account_type.value,
                record.private_key,
            )
        return list(zip(accounts, records))

    async def _create_token(self, token: TokenProps) -> tuple[str, str]:
        validate_token_props(token)
        gateway = self.services.client.get_client()
        supply_key = resolve_supply_key(token, self.services.client.operator_key)
        token_id = await gateway.create_token(token, supply_key)
        for mint in token.mints:
            await gateway.mint_token(token_id, mint.cid, supply_key)
        self.logger.info(
            "Successfully created %s token '%s' with ID %s",
            token.token_type,
            token.token_symbol,
            token_id,
        )
        return token.token_symbol, token_id

    async def create_tokens(self, tokens: list[TokenProps]) -> dict[str, str]:
        self.logger.info("Creating tokens")
        created = await asyncio.gather(*(self._create_token(token) for token in tokens))
        return dict(created)

    def associated_token_ids(self, props: AccountProps, token_ids: dict[str, str]) -> list[str]:
        found = []
        for symbol in props.associated_tokens:
            if symbol not in token_ids:
                self.logger.warning("Token ID for %s not found", symbol)
                continue
            found.append(token_ids[symbol])
        return found

    async def associate_accounts_with_tokens(
        self,
        accounts: list[tuple[AccountProps, AccountRecord]],
        token_ids: dict[str, str],
    ) -> None:
        self.logger.info("Associating accounts with tokens")
        gateway = self.services.client.get_client()

        async def associate(props: AccountProps, record: AccountRecord) -> None:
            tokens = self.associated_token_ids(props, token_ids)
            if not tokens:
                return
            key_type = KeyType.ED25519 if record.account_type is AccountType.ED25519 else KeyType.ECDSA
            await gateway.associate(
                record.account_id, tokens, PrivateKeySpec(value=record.private_key, type=key_type)
            )
            self.logger.info(
                "Associated account %s with token IDs: %s", record.account_id, ", ".join(tokens)
            )

        jobs = []
        for props, record in accounts:
            if not record.account_id:
                self.logger.warning("Account ID for key %s not found", record.private_key)
                continue
            jobs.append(associate(props, record))
        await asyncio.gather(*jobs)

