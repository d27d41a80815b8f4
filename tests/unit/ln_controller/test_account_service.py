from __future__ import annotations

import asyncio
import itertools

import pytest

from ln_controller.models.accounts import AccountProps, AccountType, KeyType, PrivateKeySpec
from ln_controller.services.account_service import (
    PRESEEDED_KEYS,
    AccountService,
    GenerationStrategy,
    format_hbar,
)

pytestmark = pytest.mark.unit_controller


class FakeGateway:
    """Returns ids from its own counter, or None when the receipt is skipped."""

    def __init__(self) -> None:
        self.calls: list[tuple] = []
        self._ids = itertools.count(5000)

    def _receipt(self, await_receipt: bool) -> str | None:
        return f"0.0.{next(self._ids)}" if await_receipt else None

    async def create_account(self, private_key, key_type, balance, *, await_receipt=True):
        self.calls.append(("create", private_key, key_type, balance, await_receipt))
        await asyncio.sleep(0)
        return self._receipt(await_receipt)

    async def fund_alias(self, private_key, balance, *, await_receipt=True):
        self.calls.append(("alias", private_key, balance, await_receipt))
        await asyncio.sleep(0)
        return self._receipt(await_receipt)


class FakeClientService:
    def __init__(self, gateway) -> None:
        self.gateway = gateway

    def get_client(self):
        return self.gateway


@pytest.fixture
def gateway():
    return FakeGateway()


@pytest.fixture
def output(recording_output):
    return recording_output


@pytest.fixture
def service(gateway, output):
    return AccountService(FakeClientService(gateway), output)


def test_preseeded_key_lists_hold_ten_keys_per_family():
    assert {account_type: len(keys) for account_type, keys in PRESEEDED_KEYS.items()} == {
        AccountType.ECDSA: 10,
        AccountType.ALIAS_ECDSA: 10,
        AccountType.ED25519: 10,
    }


def test_plan_uses_seeds_and_predicted_ids_on_startup(service):
    plans = service.plan_accounts(AccountType.ALIAS_ECDSA, 3, startup=True)

    assert [plan.predicted_id for plan in plans] == ["0.0.1012", "0.0.1013", "0.0.1014"]
    assert [plan.private_key for plan in plans] == list(PRESEEDED_KEYS[AccountType.ALIAS_ECDSA][:3])


def test_plan_beyond_seed_list_generates_keys(service):
    plans = service.plan_accounts(AccountType.ECDSA, 12, startup=True)

    assert plans[11].predicted_id == "0.0.1013"
    assert plans[10].private_key not in PRESEEDED_KEYS[AccountType.ECDSA]


def test_sequential_startup_trusts_predicted_ids(service, gateway):
    records = asyncio.run(
        service.generate_accounts(
            AccountType.ED25519,
            count=3,
            balance=100,
            startup=True,
            strategy=GenerationStrategy.SEQUENTIAL,
        )
    )

    assert [record.account_id for record in records] == ["0.0.1022", "0.0.1023", "0.0.1024"]
    assert all(call[0] == "create" and call[2] is KeyType.ED25519 for call in gateway.calls)
    assert all(call[-1] is False for call in gateway.calls)


def test_concurrent_generation_reads_ids_from_receipts(service, gateway):
    records = asyncio.run(
        service.generate_accounts(
            AccountType.ECDSA,
            count=4,
            balance=5,
            startup=True,
            strategy=GenerationStrategy.CONCURRENT,
        )
    )

    assert len(records) == 4
    assert all(call[-1] is True for call in gateway.calls)
    assert sorted(record.account_id for record in records) == ["0.0.5000", "0.0.5001", "0.0.5002", "0.0.5003"]


def test_alias_accounts_carry_evm_address(service, gateway):
    records = asyncio.run(
        service.generate_accounts(
            AccountType.ALIAS_ECDSA,
            count=1,
            balance=1,
            startup=False,
            strategy=GenerationStrategy.SEQUENTIAL,
        )
    )

    assert gateway.calls[0][0] == "alias"
    assert records[0].address.startswith("0x")
    assert len(records[0].address) == 42


def test_generate_renders_one_table_per_family(service, output):
    generated = asyncio.run(service.generate(count=2, balance=10000, startup=True, async_mode=False))

    assert list(generated) == [AccountType.ECDSA, AccountType.ALIAS_ECDSA, AccountType.ED25519]
    titles = [table[0] for table in output.tables]
    assert titles == [
        "Accounts list (ECDSA keys)",
        "Accounts list (Alias ECDSA keys)",
        "Accounts list (ED25519 keys)",
    ]
    alias_columns = output.tables[1][1]
    assert alias_columns == ["id", "public address", "private key", "balance"]
    assert output.tables[0][2][0][2] == format_hbar(10000)


def test_create_from_props_routes_by_key_type(service, gateway):
    ed_props = AccountProps(balance=3, private_key=PrivateKeySpec(value="abc", type=KeyType.ED25519))
    alias_props = AccountProps(balance=4)

    ed_record = asyncio.run(service.create_from_props(ed_props))
    alias_record = asyncio.run(service.create_from_props(alias_props))

    assert ed_record.account_type is AccountType.ED25519
    assert alias_record.account_type is AccountType.ALIAS_ECDSA
    assert [call[0] for call in gateway.calls] == ["create", "alias"]


def test_sequential_strategy_keeps_order():
    order = []

    def job(value):
        async def run():
            order.append(value)
            return value

        return run

    results = asyncio.run(GenerationStrategy.SEQUENTIAL.run([job(1), job(2), job(3)]))

    assert results == [1, 2, 3]
    assert order == [1, 2, 3]
    assert GenerationStrategy.for_mode(True) is GenerationStrategy.CONCURRENT
