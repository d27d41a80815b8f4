"""Ledger client access for the network preparation and resource phases."""

from __future__ import annotations

import logging
import os
from typing import Callable, Protocol, Sequence

from ln_common.errors import ClientError
from ln_common.logging import TRACE
from ln_controller.constants import CONSENSUS_NODE_PORT
from ln_controller.models.accounts import KeyType, PrivateKeySpec, TokenProps
from ln_controller.models.cli_options import CLIOptions

logger = logging.getLogger(__name__)

OPERATOR_ID_ENV = "RELAY_OPERATOR_ID_MAIN"
OPERATOR_KEY_ENV = "RELAY_OPERATOR_KEY_MAIN"


class LedgerGateway(Protocol):
    """Transactional RPC surface the states need from the ledger SDK."""

    async def create_account(
        self, private_key: str, key_type: KeyType, balance: float, *, await_receipt: bool = True
    ) -> str | None:
        """Create an account keyed by the public half of *private_key*.

        Returns the account id, or None when the receipt is skipped.
        """

    async def fund_alias(
        self, private_key: str, balance: float, *, await_receipt: bool = True
    ) -> str | None:
        """Transfer to the ECDSA alias of *private_key*, auto-creating the account."""

    async def file_contents(self, file_num: int) -> bytes:
        """Return the contents of system file `0.0.<file_num>`."""

    async def create_token(self, token: TokenProps, supply_key: PrivateKeySpec) -> str:
        """Create a token and return its id."""

    async def mint_token(self, token_id: str, cid: str, supply_key: PrivateKeySpec) -> None:
        """Mint one NFT serial with *cid* as metadata."""

    async def associate(self, account_id: str, token_ids: Sequence[str], account_key: PrivateKeySpec) -> None:
        """Associate *account_id* with *token_ids*, signed by the account key."""


GatewayFactory = Callable[[str, str, str], LedgerGateway]


def _hiero_gateway_factory(node_address: str, operator_id: str, operator_key: str) -> LedgerGateway:
    from ln_controller.services.hiero_gateway import HieroLedgerGateway

    return HieroLedgerGateway(node_address, operator_id, operator_key)


class ClientService:
    """Lazily build one ledger gateway for the consensus node on the host."""

    def __init__(self, options: CLIOptions, *, gateway_factory: GatewayFactory | None = None) -> None:
        self._options = options
        self._factory = gateway_factory or _hiero_gateway_factory
        self._gateway: LedgerGateway | None = None
        logger.log(TRACE, "Client Service Initialized!")

    @property
    def operator_id(self) -> str:
        return os.environ.get(OPERATOR_ID_ENV, "")

    @property
    def operator_key(self) -> str:
        return os.environ.get(OPERATOR_KEY_ENV, "")

    def _setup_client(self) -> LedgerGateway:
        if not self.operator_id or not self.operator_key:
            raise ClientError(
                f"Environment variables {OPERATOR_ID_ENV}, and {OPERATOR_KEY_ENV} are required."
            )
        node_address = f"{self._options.host}:{CONSENSUS_NODE_PORT}"
        try:
            return self._factory(node_address, self.operator_id, self.operator_key)
        except ClientError:
            raise
        except Exception as exc:
            raise ClientError(str(exc), cause=exc) from exc

    def get_client(self) -> LedgerGateway:
        if self._gateway is None:
            self._gateway = self._setup_client()
        return self._gateway
