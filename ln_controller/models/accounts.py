"""Account and token models used by the resource generation phases."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from pydantic import BaseModel, Field


class KeyType(str, Enum):
    ED25519 = "ED25519"
    ECDSA = "ECDSA"
    DER = "DER"


class AccountType(str, Enum):
    """Account families generated on startup, each with its own id range."""

    ECDSA = "ECDSA"
    ALIAS_ECDSA = "Alias ECDSA"
    ED25519 = "ED25519"

    @property
    def first_account_num(self) -> int:
        return _FIRST_ACCOUNT_NUM[self]

    @property
    def key_type(self) -> KeyType:
        return KeyType.ED25519 if self is AccountType.ED25519 else KeyType.ECDSA

    @property
    def is_alias(self) -> bool:
        return self is AccountType.ALIAS_ECDSA


_FIRST_ACCOUNT_NUM = {
    AccountType.ECDSA: 1002,
    AccountType.ALIAS_ECDSA: 1012,
    AccountType.ED25519: 1022,
}


@dataclass(frozen=True)
class AccountRecord:
    """Outcome of a single account creation."""

    account_type: AccountType
    account_id: str
    private_key: str
    balance: float
    address: str | None = None


class PrivateKeySpec(BaseModel):
    value: str = Field(min_length=1)
    type: KeyType = KeyType.ECDSA


class AccountProps(BaseModel):
    """Account fixture entry."""

    balance: float = Field(ge=0)
    private_key: PrivateKeySpec | None = None
    associated_tokens: list[str] = Field(default_factory=list)

    model_config = {"extra": "ignore"}


class TokenMint(BaseModel):
    cid: str


class TokenProps(BaseModel):
    """Token fixture entry."""

    token_name: str
    token_symbol: str
    token_type: str = "FungibleCommon"
    supply_type: str = "Infinite"
    decimals: int | None = None
    initial_supply: int | None = None
    max_supply: int | None = None
    mints: list[TokenMint] = Field(default_factory=list)
    treasury_key: PrivateKeySpec | None = None
    admin_key: PrivateKeySpec | None = None
    kyc_key: PrivateKeySpec | None = None
    freeze_key: PrivateKeySpec | None = None
    pause_key: PrivateKeySpec | None = None
    wipe_key: PrivateKeySpec | None = None
    supply_key: PrivateKeySpec | None = None
    fee_schedule_key: PrivateKeySpec | None = None
    freeze_default: bool | None = None
    auto_renew_account_id: str | None = None
    expiration_time: str | None = None
    auto_renew_period: int | None = None
    token_memo: str | None = None

    model_config = {"extra": "ignore"}

    @property
    def is_non_fungible(self) -> bool:
        return self.token_type == "NonFungibleUnique"

    @property
    def is_finite(self) -> bool:
        return self.supply_type == "Finite"


class InitialResources(BaseModel):
    """Accounts and tokens created with `--create-initial-resources`."""

    accounts: list[AccountProps] = Field(default_factory=list)
    tokens: list[TokenProps] = Field(default_factory=list)
