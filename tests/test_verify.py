import pytest

from vanityeth.verify import verify_with_eth_keys

pytest.importorskip("eth_keys")

KNOWN_KEY = "4c0883a69102937d6231471b5dbb6204fe5129617082799f7ed2a5abf85f7f4f"
KNOWN_ADDRESS = "0x2c7536E3605D9C16a7a3D7b1898e529396a65c23"


def test_lowercase_address_matches():
    v = verify_with_eth_keys(KNOWN_KEY, KNOWN_ADDRESS.lower())
    assert v["eth_keys_available"]
    assert v["address_match"] is True
    assert v["checksum_match"] is None
    assert v["derived_address"] == KNOWN_ADDRESS


def test_checksummed_address_matches():
    v = verify_with_eth_keys("0x" + KNOWN_KEY, KNOWN_ADDRESS)
    assert v["address_match"] is True
    assert v["checksum_match"] is True


def test_wrong_checksum_detected():
    v = verify_with_eth_keys(KNOWN_KEY, KNOWN_ADDRESS.swapcase().replace("0X", "0x"))
    assert v["address_match"] is True
    assert v["checksum_match"] is False


def test_mismatch():
    v = verify_with_eth_keys(KNOWN_KEY, "0x" + "0" * 40)
    assert v["address_match"] is False


def test_bad_key_reports_error():
    v = verify_with_eth_keys("zz", KNOWN_ADDRESS)
    assert v["error"]
    assert v["address_match"] is None
