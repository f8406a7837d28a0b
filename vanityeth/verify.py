"""
Optional verification of found keys against the eth-keys library.

If eth-keys is not installed, verification is skipped gracefully.
"""


def verify_with_eth_keys(private_key_hex: str, expected_address: str) -> dict:
    """Re-derive the address of a private key with an independent library.

    Args:
        private_key_hex: 64 hex chars, with or without 0x.
        expected_address: The 0x-prefixed address the search reported.

    Returns dict with:
        eth_keys_available, address_match, checksum_match,
        derived_address, error

    checksum_match is None unless expected_address is in mixed case.
    """
    result = {
        "eth_keys_available": False,
        "address_match": None,
        "checksum_match": None,
        "derived_address": None,
        "error": None,
    }

    try:
        from eth_keys import keys
        from eth_keys.exceptions import ValidationError
        result["eth_keys_available"] = True
    except ImportError:
        result["error"] = "eth-keys not installed. Install with: pip install eth-keys"
        return result

    try:
        raw = bytes.fromhex(private_key_hex[2:] if private_key_hex.startswith("0x") else private_key_hex)
        derived = keys.PrivateKey(raw).public_key.to_checksum_address()
    except (ValueError, TypeError, ValidationError) as e:
        result["error"] = str(e)
        return result

    result["derived_address"] = derived
    result["address_match"] = derived.lower() == expected_address.lower()
    if expected_address != expected_address.lower():
        result["checksum_match"] = derived == expected_address

    return result
