"""LedgerGateway backed by the Hiero Python SDK."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Sequence

from hiero_sdk_python import (
    AccountCreateTransaction,
    AccountId,
    AccountInfoQuery,
    Client,
    FileContentsQuery,
    FileId,
    Network,
    PrivateKey,
    SupplyType,
    TokenAssociateTransaction,
    TokenCreateTransaction,
    TokenId,
    TokenMintTransaction,
    TokenType,
    TransferTransaction,
)
from hiero_sdk_python.node import _Node

from ln_common.errors import ClientError
from ln_controller.constants import MIRROR_NODE_GRPC_PORT
from ln_controller.models.accounts import KeyType, PrivateKeySpec, TokenProps
from ln_controller.utils.keys import evm_address

logger = logging.getLogger(__name__)

TINYBARS_PER_HBAR = 100_000_000
LOCAL_NETWORK_PROFILE = "solo"
CONSENSUS_NODE_ACCOUNT = AccountId(0, 0, 3)


def _tinybars(hbar: float) -> int:
    return int(round(hbar * TINYBARS_PER_HBAR))


def _strip_prefix(value: str) -> str:
    return value[2:] if value.lower().startswith("0x") else value


def local_network(node_address: str) -> Network:
    """Single node network at *node_address*, mirror gRPC on the same host."""
    host = node_address.rsplit(":", 1)[0]
    return Network(
        network=LOCAL_NETWORK_PROFILE,
        nodes=[_Node(CONSENSUS_NODE_ACCOUNT, node_address, None)],
        mirror_address=f"{host}:{MIRROR_NODE_GRPC_PORT}",
    )


def to_sdk_key(spec: PrivateKeySpec) -> Any:
    value = _strip_prefix(spec.value)
    if spec.type is KeyType.ED25519:
        return PrivateKey.from_string_ed25519(value)
    if spec.type is KeyType.ECDSA:
        return PrivateKey.from_string_ecdsa(value)
    return PrivateKey.from_string_der(value)


class HieroLedgerGateway:
    """Run SDK transactions in worker threads so the event loop stays free."""

    def __init__(self, node_address: str, operator_id: str, operator_key: str) -> None:
        self.node_address = node_address
        self._operator_id = AccountId.from_string(operator_id)
        self._operator_key = PrivateKey.from_string(_strip_prefix(operator_key))
        self._client = Client(local_network(node_address))
        self._client.set_operator(self._operator_id, self._operator_key)

    async def _call(self, func: Any, *args: Any) -> Any:
        try:
            return await asyncio.to_thread(func, *args)
        except ClientError:
            raise
        except Exception as exc:
            raise ClientError(str(exc), cause=exc) from exc

    def _create_account(
        self, private_key: str, key_type: KeyType, balance: float, await_receipt: bool
    ) -> str | None:
        secret = to_sdk_key(PrivateKeySpec(value=private_key, type=key_type))
        tx = (
            AccountCreateTransaction()
            .set_key(secret.public_key())
            .set_initial_balance(_tinybars(balance))
            .freeze_with(self._client)
        )
        tx.sign(self._operator_key)
        if not await_receipt:
            tx.execute(self._client, wait_for_receipt=False)
            return None
        receipt = tx.execute(self._client)
        return str(receipt.account_id)

    async def create_account(
        self, private_key: str, key_type: KeyType, balance: float, *, await_receipt: bool = True
    ) -> str | None:
        return await self._call(self._create_account, private_key, key_type, balance, await_receipt)

    def _fund_alias(self, private_key: str, balance: float, await_receipt: bool) -> str | None:
        alias_id = AccountId.from_evm_address(evm_address(private_key), 0, 0)
        tx = (
            TransferTransaction()
            .add_hbar_transfer(self._operator_id, -_tinybars(balance))
            .add_hbar_transfer(alias_id, _tinybars(balance))
            .freeze_with(self._client)
        )
        tx.sign(self._operator_key)
        if not await_receipt:
            tx.execute(self._client, wait_for_receipt=False)
            return None
        tx.execute(self._client)
        info = AccountInfoQuery().set_account_id(alias_id).execute(self._client)
        return str(info.account_id)

    async def fund_alias(
        self, private_key: str, balance: float, *, await_receipt: bool = True
    ) -> str | None:
        return await self._call(self._fund_alias, private_key, balance, await_receipt)

    def _file_contents(self, file_num: int) -> bytes:
        return FileContentsQuery().set_file_id(FileId(0, 0, file_num)).execute(self._client)

    async def file_contents(self, file_num: int) -> bytes:
        return await self._call(self._file_contents, file_num)

    def _create_token(self, token: TokenProps, supply_key: PrivateKeySpec) -> str:
        tx = (
            TokenCreateTransaction()
            .set_token_name(token.token_name)
            .set_token_symbol(token.token_symbol)
            .set_treasury_account_id(self._treasury_account(token))
            .set_supply_key(to_sdk_key(supply_key))
        )
        if token.is_non_fungible:
            tx.set_token_type(TokenType.NON_FUNGIBLE_UNIQUE).set_initial_supply(0)
        else:
            tx.set_token_type(TokenType.FUNGIBLE_COMMON)
            tx.set_initial_supply(token.initial_supply or 0)
            tx.set_decimals(token.decimals or 0)
        if token.is_finite:
            tx.set_supply_type(SupplyType.FINITE).set_max_supply(token.max_supply or 0)
        else:
            tx.set_supply_type(SupplyType.INFINITE)
        for setter, key in (
            (tx.set_admin_key, token.admin_key),
            (tx.set_kyc_key, token.kyc_key),
            (tx.set_freeze_key, token.freeze_key),
            (tx.set_pause_key, token.pause_key),
            (tx.set_wipe_key, token.wipe_key),
        ):
            if key is not None:
                setter(to_sdk_key(key))
        if token.freeze_default is not None:
            tx.set_freeze_default(token.freeze_default)
        if token.token_memo:
            tx.set_memo(token.token_memo)
        tx.freeze_with(self._client)
        if token.admin_key is not None:
            tx.sign(to_sdk_key(token.admin_key))
        if token.treasury_key is not None:
            tx.sign(to_sdk_key(token.treasury_key))
        tx.sign(self._operator_key)
        receipt = tx.execute(self._client)
        return str(receipt.token_id)

    def _treasury_account(self, token: TokenProps) -> Any:
        if token.treasury_key is None:
            return self._operator_id
        return AccountId.from_evm_address(evm_address(token.treasury_key.value), 0, 0)

    async def create_token(self, token: TokenProps, supply_key: PrivateKeySpec) -> str:
        return await self._call(self._create_token, token, supply_key)

    def _mint_token(self, token_id: str, cid: str, supply_key: PrivateKeySpec) -> None:
        tx = (
            TokenMintTransaction()
            .set_token_id(TokenId.from_string(token_id))
            .set_metadata([cid.encode()])
            .freeze_with(self._client)
        )
        tx.sign(to_sdk_key(supply_key))
        tx.execute(self._client)

    async def mint_token(self, token_id: str, cid: str, supply_key: PrivateKeySpec) -> None:
        await self._call(self._mint_token, token_id, cid, supply_key)

    def _associate(self, account_id: str, token_ids: Sequence[str], account_key: PrivateKeySpec) -> None:
        tx = TokenAssociateTransaction().set_account_id(AccountId.from_string(account_id))
        for token_id in token_ids:
            tx.add_token_id(TokenId.from_string(token_id))
        tx.freeze_with(self._client)
        tx.sign(to_sdk_key(account_key))
        tx.execute(self._client)

    async def associate(self, account_id: str, token_ids: Sequence[str], account_key: PrivateKeySpec) -> None:
        await self._call(self._associate, account_id, token_ids, account_key)
