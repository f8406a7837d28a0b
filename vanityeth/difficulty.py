"""
Difficulty estimation: how many key pairs to expect per match.

Probabilities are computed exactly with fractions, per anchor:

- prefix / suffix: sum over alternatives of 1 / (16**len * case_factor),
  skipping an alternative when a shorter alternative of the same pattern
  already anchors it (e.g. ``ff`` is implied by ``f`` as a prefix).
- contains: APPROXIMATION. Only the shortest alternative is used, as the
  probability of it appearing at one fixed position. Placement over the
  40 possible offsets and overlap with prefix/suffix are ignored.

The anchors are multiplied together as if independent, which is also an
approximation when constraints overlap inside the 40-character body.
case_factor is 2**letters for case-sensitive matching, 1 otherwise.
"""

from fractions import Fraction
from typing import Optional

from vanityeth.pattern import compile_pattern, count_hex_letters, min_alternative_length

# Conservative single-core rate for a Python secp256k1 + keccak loop
KEYS_PER_SEC_PER_CORE = 5000


def _denominator(length: int, letters: int, case_sensitive: bool) -> int:
    den = 16 ** length
    if case_sensitive and letters:
        den *= 2 ** letters
    return den


def _fold(pattern: str, case_sensitive: bool) -> str:
    return pattern if case_sensitive else pattern.lower()


def _drop_redundant(alts: tuple[str, ...], is_prefix: bool) -> list[str]:
    reduced = []
    for a in alts:
        for b in alts:
            if len(b) >= len(a):
                continue
            if (a.startswith(b) if is_prefix else a.endswith(b)):
                break
        else:
            reduced.append(a)
    return reduced


def edge_probability(pattern: str, is_prefix: bool, case_sensitive: bool) -> Optional[Fraction]:
    """Probability that a random address is anchored by pattern.

    Returns None when pattern is empty.
    """
    alts = compile_pattern(_fold(pattern, case_sensitive))
    if not alts:
        return None
    total = Fraction(0)
    for alt in _drop_redundant(alts, is_prefix):
        total += Fraction(1, _denominator(len(alt), count_hex_letters(alt), case_sensitive))
    return total


def contains_probability(pattern: str, case_sensitive: bool) -> Optional[Fraction]:
    """Approximate probability for a contains pattern (shortest alternative only)."""
    length, letters = min_alternative_length(_fold(pattern, case_sensitive))
    if length == 0:
        return None
    return Fraction(1, _denominator(length, letters, case_sensitive))


def estimate_difficulty(
    prefix: str = "",
    suffix: str = "",
    contains: str = "",
    case_sensitive: bool = False,
) -> Optional[int]:
    """Expected number of attempts to find one address matching all patterns.

    Returns None when no hex constraint is given (regex searches cannot be
    estimated). The result is at least 1. Invalid patterns raise
    PatternError.
    """
    probabilities = [
        edge_probability(prefix, True, case_sensitive),
        edge_probability(suffix, False, case_sensitive),
        contains_probability(contains, case_sensitive),
    ]
    active = [p for p in probabilities if p is not None]
    if not active:
        return None

    combined = Fraction(1)
    for p in active:
        combined *= p
    if combined == 0:
        return None

    return max(1, combined.denominator // combined.numerator)


def describe_difficulty(expected: Optional[int]) -> str:
    if expected is None:
        return "Cannot estimate for regex"
    if expected < 100:
        return "Instant"
    elif expected < 100_000:
        return "Seconds"
    elif expected < 10_000_000:
        return "Minutes"
    elif expected < 1_000_000_000:
        return "Hours"
    elif expected < 100_000_000_000:
        return "Days"
    else:
        return "Weeks+ (consider a shorter pattern)"


def estimate_seconds(expected: Optional[int], rate: float, remaining: int = 1) -> Optional[float]:
    """Seconds until `remaining` more matches at `rate` attempts/sec."""
    if expected is None or rate <= 0 or remaining <= 0:
        return None
    return expected * remaining / rate


def difficulty_report(config) -> dict:
    """Estimate expected attempts and time to find a match for a Config.

    Returns dict with: expected_attempts, estimated_seconds_per_core,
    difficulty_description
    """
    expected = estimate_difficulty(
        config.prefix, config.suffix, config.contains, config.case_sensitive
    )
    return {
        "expected_attempts": expected,
        "estimated_seconds_per_core": estimate_seconds(expected, KEYS_PER_SEC_PER_CORE),
        "difficulty_description": describe_difficulty(expected),
    }
