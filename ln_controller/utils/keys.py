"""Private key material for generated accounts."""

from __future__ import annotations

from cryptography.hazmat.primitives.asymmetric import ec, ed25519
from cryptography.hazmat.primitives.serialization import (
    Encoding,
    NoEncryption,
    PrivateFormat,
    PublicFormat,
)
from eth_account import Account

from ln_controller.models.accounts import KeyType


def _strip_prefix(value: str) -> str:
    return value[2:] if value.lower().startswith("0x") else value


def generate_private_key(key_type: KeyType) -> str:
    """Return a fresh raw private key as a `0x`-prefixed hex string."""
    if key_type is KeyType.ED25519:
        raw = ed25519.Ed25519PrivateKey.generate().private_bytes(
            Encoding.Raw, PrivateFormat.Raw, NoEncryption()
        )
    else:
        key = ec.generate_private_key(ec.SECP256K1())
        raw = key.private_numbers().private_value.to_bytes(32, "big")
    return "0x" + raw.hex()


def public_key_hex(private_key: str, key_type: KeyType) -> str:
    """Return the public key: raw for ED25519, compressed SEC1 for ECDSA."""
    raw = bytes.fromhex(_strip_prefix(private_key))
    if key_type is KeyType.ED25519:
        public = ed25519.Ed25519PrivateKey.from_private_bytes(raw).public_key()
        return public.public_bytes(Encoding.Raw, PublicFormat.Raw).hex()
    secret = ec.derive_private_key(int.from_bytes(raw, "big"), ec.SECP256K1())
    return secret.public_key().public_bytes(Encoding.X962, PublicFormat.CompressedPoint).hex()


def evm_address(private_key: str) -> str:
    """Checksummed EVM address of an ECDSA secp256k1 key."""
    return Account.from_key("0x" + _strip_prefix(private_key)).address
