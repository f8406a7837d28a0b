"""
Hex pattern language for vanity searches.

A pattern is literal hex with ``|`` alternation and ``()`` grouping:

    dead               -> dead
    dead|beef          -> dead, beef
    x(a|b|c)(10|20)    -> a10, a20, b10, b20, c10, c20

A leading ``0x`` or ``x`` is stripped once. Compiling expands the pattern
into the ordered, de-duplicated list of literal strings it denotes.
"""

from typing import Optional

HEX_DIGITS = frozenset("0123456789abcdefABCDEF")
HEX_LETTERS = frozenset("abcdefABCDEF")


class PatternError(ValueError):
    """Raised when a hex pattern cannot be compiled."""

    def __init__(self, message: str, position: Optional[int] = None):
        self.message = message
        self.position = position
        if position is not None:
            message = f"{message} (at position {position})"
        super().__init__(message)


class _Parser:
    """Recursive-descent parser over the stripped pattern body.

    alternation := branch ("|" branch)*
    branch      := segment*
    segment     := hexrun | group
    group       := "(" alternation ")"
    """

    def __init__(self, text: str, offset: int):
        self.text = text
        self.offset = offset
        self.pos = 0
        self.depth = 0

    def _error(self, message: str, pos: Optional[int] = None) -> PatternError:
        return PatternError(message, self.offset + (self.pos if pos is None else pos))

    def _peek(self) -> Optional[str]:
        if self.pos < len(self.text):
            return self.text[self.pos]
        return None

    def parse(self) -> list[str]:
        alts = self._alternation()
        if self._peek() == ")":
            raise self._error("unexpected ')'")
        return alts

    def _alternation(self) -> list[str]:
        alts = self._branch()
        while self._peek() == "|":
            self.pos += 1
            alts.extend(self._branch())
        return alts

    def _branch(self) -> list[str]:
        start = self.pos
        alts = [""]
        while True:
            c = self._peek()
            if c is None or c in "|)":
                break
            if c in HEX_DIGITS:
                alts = _cross(alts, [self._hexrun()])
            elif c == "(":
                alts = _cross(alts, self._group())
            else:
                raise self._error(
                    f"invalid character {c!r} "
                    "(allowed: 0-9, a-f, |, (, ), optional x/0x prefix)"
                )
        if self.pos == start:
            if c == ")" and not self.depth:
                raise self._error("unexpected ')'")
            raise self._error("empty alternative near '|'", start)
        return alts

    def _hexrun(self) -> str:
        start = self.pos
        while self._peek() is not None and self._peek() in HEX_DIGITS:
            self.pos += 1
        return self.text[start:self.pos]

    def _group(self) -> list[str]:
        open_pos = self.pos
        self.pos += 1
        if self._peek() == ")":
            raise self._error("empty group '()'", open_pos)
        self.depth += 1
        alts = self._alternation()
        self.depth -= 1
        if self._peek() != ")":
            raise self._error("unclosed '('", open_pos)
        self.pos += 1
        return alts


def _cross(prefixes: list[str], segment: list[str]) -> list[str]:
    return [p + s for p in prefixes for s in segment]


def _strip_marker(pattern: str) -> tuple[str, int]:
    s = pattern.strip()
    offset = len(pattern) - len(pattern.lstrip())
    if s[:2] in ("0x", "0X"):
        return s[2:], offset + 2
    if s[:1] in ("x", "X"):
        return s[1:], offset + 1
    return s, offset


def compile_pattern(pattern: str) -> Optional[tuple[str, ...]]:
    """Expand a hex pattern into its literal alternatives.

    Returns None for an empty pattern (no constraint). Otherwise returns a
    non-empty tuple of distinct alternatives in first-seen order, with the
    letter case of the input preserved.

    Raises PatternError for malformed patterns.
    """
    if not pattern or not pattern.strip():
        return None

    body, offset = _strip_marker(pattern)
    if not body:
        raise PatternError("pattern is empty")

    alts = _Parser(body, offset).parse()
    return tuple(dict.fromkeys(alts))


def validate_pattern(pattern: str) -> None:
    """Raise PatternError if pattern is not a valid hex pattern."""
    compile_pattern(pattern)


def is_valid_pattern(pattern: str) -> bool:
    try:
        compile_pattern(pattern)
    except PatternError:
        return False
    return True


def count_hex_letters(s: str) -> int:
    return sum(1 for c in s if c in HEX_LETTERS)


def min_alternative_length(pattern: str) -> tuple[int, int]:
    """Return (length, letters) of the shortest alternative in pattern.

    Ties on length go to the alternative with the fewest a-f letters.
    An empty pattern returns (0, 0); an invalid one raises PatternError,
    so callers can tell "no constraint" from "bad input".
    """
    alts = compile_pattern(pattern)
    if not alts:
        return 0, 0
    return min((len(a), count_hex_letters(a)) for a in alts)
