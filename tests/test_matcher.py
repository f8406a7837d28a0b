import pytest

from vanityeth.matcher import RegexError, build_matcher, compile_regex
from vanityeth.pattern import PatternError

A40 = "a" * 40


def addr(body: str) -> str:
    return "0x" + body + "a" * (40 - len(body))


def test_grouped_prefix():
    matcher = build_matcher("x(a|b|c)(10|20|30|40|50)")
    assert matcher(addr("a10"))
    assert matcher(addr("c50"))
    assert not matcher(addr("abb"))


def test_alternation_prefix():
    matcher = build_matcher("e|f|ff")
    assert matcher(addr("ff"))
    assert matcher(addr("e0"))
    assert not matcher(addr("0a"))


def test_suffix_and_contains():
    matcher = build_matcher(suffix="dead|beef", contains="(12|34)5")
    assert matcher("0x" + "0" * 10 + "345" + "0" * 23 + "beef")
    assert not matcher("0x" + "0" * 36 + "beef")
    assert not matcher("0x" + "0" * 10 + "125" + "0" * 25 + "cafe")


def test_all_constraints_must_pass():
    matcher = build_matcher("de", "ef", "00")
    assert matcher("0xde" + "0" * 36 + "ef")
    assert not matcher("0xde" + "1" * 36 + "ef")
    assert not matcher("0xdf" + "0" * 36 + "ef")


def test_no_constraints_matches_everything():
    assert build_matcher()(addr(""))


def test_case_insensitive_ignores_case_of_address_and_pattern():
    matcher = build_matcher("DeAd", case_sensitive=False)
    body = "dead" + "bc" * 18
    assert matcher("0x" + body)
    assert matcher("0x" + body.upper())
    assert matcher("0x" + body.swapcase())


def test_case_sensitive_requires_exact_case():
    matcher = build_matcher("DeAd", case_sensitive=True)
    assert matcher("0xDeAd" + "0" * 36)
    assert not matcher("0xdead" + "0" * 36)
    assert not matcher("0xDEAD" + "0" * 36)


def test_regex_applies_to_full_address():
    matcher = build_matcher(regex=compile_regex("^0x(dead|cafe)"))
    assert matcher("0xcafe" + "0" * 36)
    assert not matcher("0xbeef" + "0" * 36)


def test_regex_ignores_case_flag():
    regex = compile_regex("^0xDEAD")
    assert not build_matcher(regex=regex, case_sensitive=False)("0xdead" + "0" * 36)
    assert build_matcher(regex=regex, case_sensitive=False)("0xDEAD" + "0" * 36)


def test_regex_combined_with_prefix():
    matcher = build_matcher("a", regex=compile_regex("f$"))
    assert matcher("0xa" + "0" * 38 + "f")
    assert not matcher("0xa" + "0" * 39)


def test_compile_regex_empty_and_invalid():
    assert compile_regex("") is None
    assert compile_regex(None) is None
    with pytest.raises(RegexError):
        compile_regex("(unclosed")


def test_invalid_hex_pattern_raises():
    with pytest.raises(PatternError):
        build_matcher(prefix="xyz")


def test_match_span():
    matcher = build_matcher("a|aa", "b1")
    address = "0xaa" + "0" * 36 + "b1"
    assert matcher.match_span(address, "prefix") == (0, 2)
    assert matcher.match_span(address, "suffix") == (38, 40)
    assert matcher.match_span("0x" + "0" * 40, "prefix") is None
    with pytest.raises(ValueError):
        matcher.match_span(address, "contains")


def test_unconstrained_span_is_none():
    assert build_matcher(contains="0").match_span("0x" + A40, "prefix") is None
