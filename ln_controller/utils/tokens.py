"""Validation and key resolution for token fixtures."""

from __future__ import annotations

from ln_common.errors import TokenValidationError
from ln_controller.models.accounts import KeyType, PrivateKeySpec, TokenProps

MIN_AUTO_RENEW_PERIOD = 2_592_000
MAX_AUTO_RENEW_PERIOD = 8_000_000


def _require(condition: object, message: str, token: TokenProps) -> None:
    if not condition:
        raise TokenValidationError(message, context={"token": token.token_symbol})


def _forbid(condition: object, message: str, token: TokenProps) -> None:
    if condition:
        raise TokenValidationError(message, context={"token": token.token_symbol})


def validate_token_props(token: TokenProps) -> None:
    """Raise TokenValidationError when the token properties are inconsistent."""
    _require(token.token_name, "Token name is required", token)
    _require(token.token_symbol, "Token symbol is required", token)
    _require(token.token_type, "Token type is required", token)
    _require(token.supply_type, "Supply type is required", token)
    if token.is_non_fungible:
        _forbid(token.initial_supply, "Initial supply must be 0 or undefined for non-fungible tokens", token)
        _forbid(token.decimals, "Decimals must be 0 or undefined for non-fungible tokens", token)
    else:
        _require(token.initial_supply, "Initial supply is required for fungible tokens", token)
        _require(token.decimals, "Decimals is required for fungible tokens", token)
    if token.is_finite:
        _require(token.max_supply, "Max supply is required for finite supply tokens", token)
    else:
        _forbid(
            token.max_supply,
            f"Max supply must be undefined for infinite supply tokens, was {token.max_supply}",
            token,
        )
    if token.auto_renew_period:
        _require(
            token.auto_renew_account_id,
            "Auto renew account ID is required for auto renew period",
            token,
        )
        if not MIN_AUTO_RENEW_PERIOD <= token.auto_renew_period <= MAX_AUTO_RENEW_PERIOD:
            raise TokenValidationError(
                "Auto renew period must be between 30 days and 3 months",
                context={"token": token.token_symbol, "period": token.auto_renew_period},
            )


def resolve_supply_key(token: TokenProps, operator_key: str) -> PrivateKeySpec:
    """Supply key of the token, or the operator key when none is given."""
    if token.supply_key is not None:
        return token.supply_key
    return PrivateKeySpec(value=operator_key, type=KeyType.DER)


def resolve_treasury_key(token: TokenProps) -> PrivateKeySpec | None:
    """Treasury key of the token; None means the operator account is the treasury."""
    return token.treasury_key
