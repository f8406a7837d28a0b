"""
Key generation and Ethereum address derivation.

An address is the last 20 bytes of Keccak-256 over the 64-byte uncompressed
secp256k1 public key (X || Y, without the 0x04 marker), written as 40 hex
characters. The checksummed form (EIP-55) encodes extra validation in the
letter case of a-f.
"""

from dataclasses import dataclass
from typing import NamedTuple

from Crypto.Hash import keccak
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec
from eth_utils import to_checksum_address

PRIVATE_KEY_BYTES = 32
ADDRESS_HEX_LENGTH = 40

# Serialization constants cached at module level for performance
_CURVE = ec.SECP256K1()
_X962 = serialization.Encoding.X962
_UNCOMPRESSED = serialization.PublicFormat.UncompressedPoint


class KeyGenerationError(Exception):
    """The entropy source or key construction failed for one attempt."""


class KeyPair(NamedTuple):
    private_key: bytes
    address: str


@dataclass(frozen=True)
class Result:
    """A single vanity address match."""
    address: str        # "0x" + 40 hex
    private_key: str    # 64 hex chars, no 0x


def _address_body(public_key: ec.EllipticCurvePublicKey) -> str:
    point = public_key.public_bytes(_X962, _UNCOMPRESSED)
    digest = keccak.new(digest_bits=256, data=point[1:]).digest()
    return digest[-20:].hex()


def checksum_address(address: str) -> str:
    """Return the EIP-55 checksummed form of a 0x-prefixed or bare address."""
    if not address.startswith(("0x", "0X")):
        address = "0x" + address
    return to_checksum_address(address)


def generate_key_pair(checksum: bool = False) -> KeyPair:
    """Generate one secp256k1 key and its address.

    This is the hot-path function called in the inner loop of each worker.

    Args:
        checksum: Return the EIP-55 checksummed address instead of lowercase.

    Returns:
        KeyPair(private_key, address)
        - private_key: 32 bytes, big-endian secret scalar
        - address: "0x" + 40 hex characters

    Raises:
        KeyGenerationError: if the backend could not produce a key.
    """
    try:
        key = ec.generate_private_key(_CURVE)
        secret = key.private_numbers().private_value.to_bytes(PRIVATE_KEY_BYTES, "big")
    except (ValueError, OSError) as e:
        raise KeyGenerationError(str(e)) from e

    address = "0x" + _address_body(key.public_key())
    if checksum:
        address = to_checksum_address(address)
    return KeyPair(secret, address)


def derive_address(private_key: bytes) -> str:
    """Derive the 40-char lowercase hex address body for a 32-byte secret."""
    if len(private_key) != PRIVATE_KEY_BYTES:
        raise ValueError(
            f"private key must be {PRIVATE_KEY_BYTES} bytes, got {len(private_key)}"
        )
    key = ec.derive_private_key(int.from_bytes(private_key, "big"), _CURVE)
    return _address_body(key.public_key())
