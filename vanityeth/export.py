"""
Export found key pairs.

Supported formats:
- text: numbered blocks with the address and 0x-prefixed private key
- json: array of {"address", "privateKey"} objects
"""

import json
import os
from typing import Iterable

from vanityeth.core import Result

FORMATS = ("text", "json")


def format_results_text(results: Iterable[Result]) -> str:
    blocks = []
    for i, r in enumerate(results, start=1):
        blocks.append(
            f"#{i}\n"
            f"Address:     {r.address}\n"
            f"Private Key: 0x{r.private_key}\n"
        )
    return "\n".join(blocks) + ("\n" if blocks else "")


def results_to_dicts(results: Iterable[Result]) -> list[dict]:
    return [
        {"address": r.address, "privateKey": "0x" + r.private_key}
        for r in results
    ]


def format_results_json(results: Iterable[Result]) -> str:
    return json.dumps(results_to_dicts(results), indent=2) + "\n"


def format_results(results: Iterable[Result], fmt: str = "text") -> str:
    if fmt == "text":
        return format_results_text(results)
    elif fmt == "json":
        return format_results_json(results)
    raise ValueError(f"unknown format {fmt!r} (expected one of: {', '.join(FORMATS)})")


def save_results(results: Iterable[Result], path: str, fmt: str = "text") -> str:
    """Save results to path in the given format.

    The file holds private keys, so it is made owner-readable only.
    Returns the absolute path of the saved file.
    """
    content = format_results(results, fmt)
    abs_path = os.path.abspath(path)
    os.makedirs(os.path.dirname(abs_path) or ".", exist_ok=True)
    with open(abs_path, "w") as f:
        f.write(content)
    try:
        os.chmod(abs_path, 0o600)
    except OSError:
        pass  # Windows: chmod not fully supported
    return abs_path
