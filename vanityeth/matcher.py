"""Address matching for vanity search."""

import re
from typing import Optional

from vanityeth.pattern import compile_pattern


class RegexError(ValueError):
    """Raised when the free-form regex does not compile."""


def compile_regex(text: Optional[str]) -> Optional[re.Pattern]:
    """Compile a user regex. Empty or None means no regex constraint."""
    if not text:
        return None
    try:
        return re.compile(text)
    except re.error as e:
        raise RegexError(f"invalid regex: {e}") from e


class Matcher:
    """Predicate over a ``0x`` + 40 hex address.

    Checks run cheapest first and short-circuit: prefix, suffix, contains,
    then regex. Hex alternatives are compared against the bare body, folded
    to lowercase unless case_sensitive. The regex sees the full address
    string exactly as given.
    """

    __slots__ = ("prefixes", "suffixes", "contains", "regex", "case_sensitive")

    def __init__(
        self,
        prefixes: Optional[tuple[str, ...]],
        suffixes: Optional[tuple[str, ...]],
        contains: Optional[tuple[str, ...]],
        regex: Optional[re.Pattern],
        case_sensitive: bool,
    ):
        self.prefixes = prefixes
        self.suffixes = suffixes
        self.contains = contains
        self.regex = regex
        self.case_sensitive = case_sensitive

    def __call__(self, address: str) -> bool:
        bare = address if self.case_sensitive else address.lower()
        if bare[:2] == "0x":
            bare = bare[2:]

        # str.startswith/endswith accept a tuple of alternatives
        if self.prefixes and not bare.startswith(self.prefixes):
            return False
        if self.suffixes and not bare.endswith(self.suffixes):
            return False
        if self.contains and not any(alt in bare for alt in self.contains):
            return False
        if self.regex is not None and not self.regex.search(address):
            return False
        return True

    def match_span(self, address: str, kind: str) -> Optional[tuple[int, int]]:
        """Return the (start, end) span of the body matched by a prefix or suffix.

        Offsets index the bare 40-char body. The longest matching alternative
        wins so highlighting covers everything the pattern constrains.
        """
        bare = address if self.case_sensitive else address.lower()
        if bare[:2] == "0x":
            bare = bare[2:]
        if kind == "prefix":
            hits = [a for a in self.prefixes or () if bare.startswith(a)]
            if hits:
                return 0, max(len(a) for a in hits)
        elif kind == "suffix":
            hits = [a for a in self.suffixes or () if bare.endswith(a)]
            if hits:
                return len(bare) - max(len(a) for a in hits), len(bare)
        else:
            raise ValueError(f"unknown span kind: {kind}")
        return None


def build_matcher(
    prefix: str = "",
    suffix: str = "",
    contains: str = "",
    regex: Optional[re.Pattern] = None,
    case_sensitive: bool = False,
) -> Matcher:
    """Build a Matcher from hex patterns and an optional compiled regex.

    Raises PatternError if any hex pattern is malformed.
    """
    def normalize(s: str) -> str:
        return s if case_sensitive else s.lower()

    return Matcher(
        compile_pattern(normalize(prefix)),
        compile_pattern(normalize(suffix)),
        compile_pattern(normalize(contains)),
        regex,
        case_sensitive,
    )
