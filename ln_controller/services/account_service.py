"""Account generation for the local network.

Synchronous mode creates accounts one after another, so the pre-seeded key
lists map onto the sequentially assigned account numbers. Asynchronous mode
fans all creations out at once and waits for all of them; account ids then
follow completion order and must not be matched against the seed lists.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Awaitable, Callable, Sequence, TypeVar

from ln_common.logging import TRACE
from ln_controller.models.accounts import (
    AccountProps,
    AccountRecord,
    AccountType,
    KeyType,
    PrivateKeySpec,
)
from ln_controller.services.client_service import ClientService
from ln_controller.ui_interfaces import NodeOutput
from ln_controller.utils.keys import evm_address, generate_private_key

logger = logging.getLogger(__name__)

T = TypeVar("T")

PRESEEDED_KEYS: dict[AccountType, tuple[str, ...]] = {
    AccountType.ECDSA: (
        "0x7f109a9e3b0d8ecfba9cc23a3614433ce0fa7ddcc80f2a8f10b222179a5a80d6",
        "0x6ec1f2e7d126a74a1d2ff9e1c5d90b92378c725e506651ff8bb8616a5c724628",
        "0xb4d7f7e82f61d81c95985771b8abf518f9328d019c36849d4214b5f995d13814",
        "0x941536648ac10d5734973e94df413c17809d6cc5e24cd11e947e685acfbd12ae",
        "0x5829cf333ef66b6bdd34950f096cb24e06ef041c5f63e577b4f3362309125863",
        "0x8fc4bffe2b40b2b7db7fd937736c4575a0925511d7a0a2dfc3274e8c17b41d20",
        "0xb6c10e2baaeba1fa4a8b73644db4f28f4bf0912cceb6e8959f73bb423c33bd84",
        "0xfe8875acb38f684b2025d5472445b8e4745705a9e7adc9b0485a05df790df700",
        "0xbdc6e0a69f2921a78e9af930111334a41d3fab44653c8de0775572c526feea2d",
        "0x3e215c3d2a59626a669ed04ec1700f36c05c9b216e592f58bbfd3d8aa6ea25f9",
    ),
    AccountType.ALIAS_ECDSA: (
        "0x105d050185ccb907fba04dd92d8de9e32c18305e097ab41dadda21489a211524",
        "0x2e1d968b041d84dd120a5860cee60cd83f9374ef527ca86996317ada3d0d03e7",
        "0x45a5a7108a18dd5013cf2d5857a28144beadc9c70b3bdbd914e38df4e804b8d8",
        "0x6e9d61a325be3f6675cf8b7676c70e4a004d2308e3e182370a41f5653d52c6bd",
        "0x0b58b1bd44469ac9f813b5aeaf6213ddaea26720f0b2f133d08b6f234130a64f",
        "0x95eac372e0f0df3b43740fa780e62458b2d2cc32d6a440877f1cc2a9ad0c35cc",
        "0x6c6e6727b40c8d4b616ab0d26af357af09337299f09c66704146e14236972106",
        "0x5072e7aa1b03f531b4731a32a021f6a5d20d5ddc4e55acbb71ae202fc6f3a26d",
        "0x60fe891f13824a2c1da20fb6a14e28fa353421191069ba6b6d09dd6c29b90eff",
        "0xeae4e00ece872dd14fb6dc7a04f390563c7d69d16326f2a703ec8e0934060cc7",
    ),
    AccountType.ED25519: (
        "0xa608e2130a0a3cb34f86e757303c862bee353d9ab77ba4387ec084f881d420d4",
        "0xbbd0894de0b4ecfa862e963825c5448d2d17f807a16869526bff29185747acdb",
        "0x8fd50f886a2e7ed499e7686efd1436b50aa9b64b26e4ecc4e58ca26e6257b67d",
        "0x62c966ebd9dcc0fc16a553b2ef5b72d1dca05cdf5a181027e761171e9e947420",
        "0x805c9f422fd9a768fdd8c68f4fe0c3d4a93af714ed147ab6aed5f0ee8e9ee165",
        "0xabfdb8bf0b46c0da5da8d764316f27f185af32357689f7e19cb9ec3e0f590775",
        "0xec299c9f17bb8bdd5f3a21f1c2bffb3ac86c22e84c325e92139813639c9c3507",
        "0xcb833706d1df537f59c418a00e36159f67ce3760ce6bf661f11f6da2b11c2c5a",
        "0x9b6adacefbbecff03e4359098d084a3af8039ce7f29d95ed28c7ebdb83740c83",
        "0x9a07bbdbb62e24686d2a4259dc88e38438e2c7a1ba167b147ad30ac540b0a3cd",
    ),
}


class GenerationStrategy(str, Enum):
    """How a batch of creations is scheduled."""

    SEQUENTIAL = "sequential"
    CONCURRENT = "concurrent"

    @classmethod
    def for_mode(cls, async_mode: bool) -> "GenerationStrategy":
        return cls.CONCURRENT if async_mode else cls.SEQUENTIAL

    async def run(self, jobs: Sequence[Callable[[], Awaitable[T]]]) -> list[T]:
        """Run the jobs; results keep the order of *jobs* in both strategies."""
        if self is GenerationStrategy.CONCURRENT:
            return list(await asyncio.gather(*(job() for job in jobs)))
        results: list[T] = []
        for job in jobs:
            results.append(await job())
        return results


@dataclass(frozen=True)
class AccountPlan:
    account_type: AccountType
    predicted_id: str
    private_key: str


def format_hbar(balance: float) -> str:
    return f"{balance:g} ℏ"


class AccountService:
    """Create the startup account families and render their tables."""

    def __init__(self, client_service: ClientService, output: NodeOutput) -> None:
        self._client_service = client_service
        self._output = output
        logger.log(TRACE, "Account Service Initialized!")

    def plan_accounts(self, account_type: AccountType, count: int, startup: bool) -> list[AccountPlan]:
        """Predicted ids and keys; startup runs use the pre-seeded keys first."""
        seeds = PRESEEDED_KEYS[account_type] if startup else ()
        plans = []
        for index in range(count):
            private_key = seeds[index] if index < len(seeds) else generate_private_key(account_type.key_type)
            plans.append(
                AccountPlan(
                    account_type=account_type,
                    predicted_id=f"0.0.{account_type.first_account_num + index}",
                    private_key=private_key,
                )
            )
        return plans

    async def _create(self, plan: AccountPlan, balance: float, await_receipt: bool) -> AccountRecord:
        gateway = self._client_service.get_client()
        address = None
        if plan.account_type.is_alias:
            created = await gateway.fund_alias(plan.private_key, balance, await_receipt=await_receipt)
            address = evm_address(plan.private_key)
        else:
            created = await gateway.create_account(
                plan.private_key, plan.account_type.key_type, balance, await_receipt=await_receipt
            )
        return AccountRecord(
            account_type=plan.account_type,
            account_id=created or plan.predicted_id,
            private_key=plan.private_key,
            balance=balance,
            address=address,
        )

    async def generate_accounts(
        self,
        account_type: AccountType,
        *,
        count: int,
        balance: float,
        startup: bool,
        strategy: GenerationStrategy,
    ) -> list[AccountRecord]:
        """Create *count* accounts of one family with the given strategy.

        Sequential startup runs trust the predicted account numbers; every
        other combination reads the id back from the receipt.
        """
        await_receipt = not startup or strategy is GenerationStrategy.CONCURRENT
        plans = self.plan_accounts(account_type, count, startup)
        jobs = [
            (lambda plan=plan: self._create(plan, balance, await_receipt))
            for plan in plans
        ]
        return await strategy.run(jobs)

    async def generate(
        self, *, count: int, balance: float, startup: bool, async_mode: bool
    ) -> dict[AccountType, list[AccountRecord]]:
        """Generate every account family and print one table per family."""
        strategy = GenerationStrategy.for_mode(async_mode)
        logger.info("Generating accounts in %s mode...", "asynchronous" if async_mode else "synchronous")
        families = list(AccountType)
        jobs = [
            (lambda account_type=account_type: self.generate_accounts(
                account_type, count=count, balance=balance, startup=startup, strategy=strategy
            ))
            for account_type in families
        ]
        batches = await strategy.run(jobs)
        generated = dict(zip(families, batches))
        for account_type, records in generated.items():
            self.show_accounts(account_type, records)
        return generated

    async def create_from_props(self, props: AccountProps) -> AccountRecord:
        """Create a fixture account; ED25519 keys get a plain account, others an alias."""
        spec = props.private_key or PrivateKeySpec(
            value=generate_private_key(KeyType.ECDSA), type=KeyType.ECDSA
        )
        gateway = self._client_service.get_client()
        if spec.type is KeyType.ED25519:
            account_id = await gateway.create_account(spec.value, spec.type, props.balance)
            return AccountRecord(AccountType.ED25519, account_id or "", spec.value, props.balance)
        account_id = await gateway.fund_alias(spec.value, props.balance)
        return AccountRecord(
            AccountType.ALIAS_ECDSA,
            account_id or "",
            spec.value,
            props.balance,
            address=evm_address(spec.value),
        )

    def show_accounts(self, account_type: AccountType, records: list[AccountRecord]) -> None:
        title = f"Accounts list ({account_type.value} keys)"
        if account_type.is_alias:
            columns = ["id", "public address", "private key", "balance"]
            rows = [
                [r.account_id, r.address or "", r.private_key, format_hbar(r.balance)]
                for r in records
            ]
        else:
            columns = ["id", "private key", "balance"]
            rows = [[r.account_id, r.private_key, format_hbar(r.balance)] for r in records]
        self._output.show_table(title, columns, rows)
