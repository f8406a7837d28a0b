from fractions import Fraction

import pytest

from vanityeth.difficulty import (
    contains_probability,
    describe_difficulty,
    difficulty_report,
    edge_probability,
    estimate_difficulty,
    estimate_seconds,
)
from vanityeth.generator import Config
from vanityeth.pattern import PatternError


def test_grouped_prefix_and_suffix_golden_values():
    prefix = "(a|b|c)(10|20|30|40|50)"
    suffix = "c0ffee"
    # 15 / 16**3 * 1 / 16**6
    assert estimate_difficulty(prefix, suffix, "", False) == 4581298449
    # 15 / (16**3 * 2) * 1 / (16**6 * 2**5)
    assert estimate_difficulty(prefix, suffix, "", True) == 293203100740


def test_case_sensitive_is_harder_with_letters():
    ci = estimate_difficulty("eee", "", "", False)
    cs = estimate_difficulty("eee", "", "", True)
    assert ci == 4096
    assert cs == 4096 * 8
    assert cs > ci


def test_case_sensitive_equal_without_letters():
    assert estimate_difficulty("1234", case_sensitive=True) == estimate_difficulty("1234")


def test_no_constraint_is_none():
    assert estimate_difficulty("", "", "", False) is None
    assert estimate_difficulty() is None


def test_single_char_prefix():
    assert estimate_difficulty("f") == 16


def test_redundant_prefix_alternatives_not_double_counted():
    # "ff" is implied by "f" as a prefix
    assert edge_probability("e|f|ff", True, False) == Fraction(2, 16)
    assert estimate_difficulty("e|f|ff") == 8


def test_redundancy_depends_on_anchor():
    # as a suffix "fe" is not implied by "f", but "ef" is
    assert edge_probability("f|fe", False, False) == Fraction(1, 16) + Fraction(1, 256)
    assert edge_probability("f|ef", False, False) == Fraction(1, 16)


def test_contains_uses_shortest_alternative_only():
    assert contains_probability("dead|0", False) == Fraction(1, 16)
    assert estimate_difficulty(contains="beef") == 16 ** 4


def test_combined_anchors_multiply():
    assert estimate_difficulty("a", "b", "c") == 16 ** 3


def test_equal_probability_one_rounds_to_one_attempt():
    alts = "|".join("0123456789abcdef")
    assert estimate_difficulty(alts) == 1


def test_invalid_pattern_raises():
    with pytest.raises(PatternError):
        estimate_difficulty("(dead")


def test_describe_difficulty_buckets():
    assert describe_difficulty(None) == "Cannot estimate for regex"
    assert describe_difficulty(16) == "Instant"
    assert describe_difficulty(16 ** 4) == "Seconds"
    assert describe_difficulty(16 ** 10).startswith("Weeks+")


def test_estimate_seconds():
    assert estimate_seconds(1000, 100.0) == 10.0
    assert estimate_seconds(1000, 100.0, remaining=3) == 30.0
    assert estimate_seconds(None, 100.0) is None
    assert estimate_seconds(1000, 0) is None
    assert estimate_seconds(1000, 100.0, remaining=0) is None


def test_difficulty_report_for_regex_only_config():
    report = difficulty_report(Config(regex="^0xdead"))
    assert report["expected_attempts"] is None
    assert report["estimated_seconds_per_core"] is None


def test_difficulty_report_for_prefix():
    report = difficulty_report(Config(prefix="dead"))
    assert report["expected_attempts"] == 65536
    assert report["estimated_seconds_per_core"] > 0
    assert report["difficulty_description"] == "Seconds"
