import re

import pytest

from vanityeth.core import (
    KeyPair,
    checksum_address,
    derive_address,
    generate_key_pair,
)

# Well-known test vector (web3 documentation)
KNOWN_KEY = "4c0883a69102937d6231471b5dbb6204fe5129617082799f7ed2a5abf85f7f4f"
KNOWN_ADDRESS = "0x2c7536E3605D9C16a7a3D7b1898e529396a65c23"


def test_derive_address_known_vector():
    assert derive_address(bytes.fromhex(KNOWN_KEY)) == KNOWN_ADDRESS[2:].lower()


def test_checksum_address_known_vector():
    assert checksum_address(KNOWN_ADDRESS.lower()) == KNOWN_ADDRESS
    assert checksum_address(KNOWN_ADDRESS[2:].lower()) == KNOWN_ADDRESS


def test_derive_address_rejects_wrong_length():
    with pytest.raises(ValueError):
        derive_address(b"\x01" * 31)


def test_generate_key_pair_lowercase():
    pair = generate_key_pair()
    assert isinstance(pair, KeyPair)
    assert len(pair.private_key) == 32
    assert re.fullmatch(r"0x[0-9a-f]{40}", pair.address)
    assert derive_address(pair.private_key) == pair.address[2:]


def test_generate_key_pair_checksummed():
    pair = generate_key_pair(checksum=True)
    assert re.fullmatch(r"0x[0-9a-fA-F]{40}", pair.address)
    assert pair.address == checksum_address(pair.address.lower())
    assert derive_address(pair.private_key) == pair.address[2:].lower()


def test_generate_key_pair_is_fresh():
    assert generate_key_pair().private_key != generate_key_pair().private_key
